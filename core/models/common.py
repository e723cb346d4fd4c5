# =============================================================================
# core/models/common.py - Shared Field Types
# =============================================================================
# Annotated types reused by the row and draft schemas.
# =============================================================================

from datetime import date, datetime
from typing import Annotated, Any

from pydantic import BeforeValidator, TypeAdapter, ValidationError

_TIMESTAMP = TypeAdapter(datetime)


def _row_id(value: Any) -> Any:
    """Primary keys arrive as UUID strings or integers; keep them as strings."""
    return str(value) if value is not None else value


def _blank_to_none(value: Any) -> Any:
    """Optional form fields left empty are stored as NULL."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


def parse_day(value: Any) -> date:
    """
    Reduce a stored date/timestamp to its calendar day.

    Accepts date and datetime objects and ISO strings ("2025-03-14",
    "2025-03-14T18:30:00+05:30", "2025-03-14T18:30:00Z"). The whole string
    must be valid; the day is taken as written, before any UTC conversion.

    Raises:
        ValueError: If the value cannot be read as a date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"unparseable date: {value!r}")

    text = value.strip()
    try:
        day = date.fromisoformat(text[:10])
        if len(text) > 10:
            # Time part must be valid too; the ISO date prefix rules out
            # pydantic reading bare digits as a unix timestamp.
            _TIMESTAMP.validate_python(text)
    except (ValueError, ValidationError):
        raise ValueError(f"unparseable date: {value!r}")
    return day


RowId = Annotated[str, BeforeValidator(_row_id)]
OptionalText = Annotated[str | None, BeforeValidator(_blank_to_none)]
Day = Annotated[date, BeforeValidator(parse_day)]
