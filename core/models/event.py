# =============================================================================
# core/models/event.py - Event Schemas
# =============================================================================
# - Event: a row of the `events` table
# - EventDraft / EventCreate: admin form state and its insert payload
# - EventView: which half of the timeline a visitor is looking at
# - EventPartition: upcoming/past split produced by core.classifiers
#
# The canonical post-event field is `summary_text`. Rows written by the
# earlier dashboard carry `summary_link` instead; it is read into
# `summary_text` so both generations render.
# =============================================================================

from datetime import date, datetime
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from .common import Day, OptionalText, RowId


class EventView(str, Enum):
    """
    Timeline half shown on the events page.

    - upcoming: events dated today or later, soonest first
    - past: events dated before today, most recent first
    """
    UPCOMING = "upcoming"
    PAST = "past"


class Event(BaseModel):
    """A council event."""

    id: RowId
    title: str
    event_date: Day
    description: str | None = None
    image_url: str | None = None
    location: str | None = None
    reg_link: str | None = None
    summary_text: str | None = Field(
        default=None,
        validation_alias=AliasChoices("summary_text", "summary_link"),
    )
    created_at: datetime | None = None

    @property
    def has_summary(self) -> bool:
        return bool(self.summary_text and self.summary_text.strip())


class EventDraft(BaseModel):
    """Admin form state for a new event."""

    model_config = ConfigDict(extra="forbid")

    title: str = ""
    event_date: str = ""
    description: str = ""
    image_url: str = ""
    location: str = ""
    reg_link: str = ""
    summary_text: str = ""

    def to_payload(self) -> dict[str, Any]:
        return EventCreate.model_validate(self.model_dump()).model_dump(mode="json")


class EventCreate(BaseModel):
    """Insert payload for the `events` table."""

    title: str = Field(..., min_length=1)
    event_date: date
    description: OptionalText = None
    image_url: OptionalText = None
    location: OptionalText = None
    reg_link: OptionalText = None
    summary_text: OptionalText = None

    @field_validator("title")
    @classmethod
    def require_title(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("title is required")
        return value


class EventPartition(BaseModel):
    """Events split around today; every parseable event is in exactly one list."""

    upcoming: list[Event] = Field(default_factory=list)
    past: list[Event] = Field(default_factory=list)

    def for_view(self, view: EventView) -> list[Event]:
        return self.upcoming if view == EventView.UPCOMING else self.past
