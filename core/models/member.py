# =============================================================================
# core/models/member.py - Team Member Schemas
# =============================================================================
# - Member: a row of the `members` table
# - MemberDraft / MemberCreate: admin form state and its insert payload
# - TeamRoster: members grouped into display tiers by core.classifiers
#
# `rank` runs 1-7 with 1 the most senior. `category` separates the
# administration from the student council; rows without one are students.
# =============================================================================

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common import OptionalText, RowId

MIN_RANK = 1
MAX_RANK = 7


class MemberCategory(str, Enum):
    """Top-level grouping of the team page."""
    STUDENT = "student"
    ADMINISTRATION = "administration"


class Member(BaseModel):
    """A council or administration member."""

    id: RowId
    name: str = Field(..., min_length=1)
    role: str = ""
    rank: int = Field(..., ge=MIN_RANK, le=MAX_RANK)
    image_url: str | None = None
    category: MemberCategory = MemberCategory.STUDENT
    created_at: datetime | None = None

    @field_validator("category", mode="before")
    @classmethod
    def default_category(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return MemberCategory.STUDENT
        return value

    @field_validator("role", mode="before")
    @classmethod
    def empty_role(cls, value: Any) -> Any:
        return "" if value is None else value


class MemberDraft(BaseModel):
    """Admin form state for a new member."""

    model_config = ConfigDict(extra="forbid")

    name: str = ""
    role: str = ""
    rank: int = 1
    image_url: str = ""
    category: MemberCategory = MemberCategory.STUDENT

    def to_payload(self) -> dict[str, Any]:
        return MemberCreate.model_validate(self.model_dump()).model_dump(mode="json")


class MemberCreate(BaseModel):
    """Insert payload for the `members` table."""

    name: str = Field(..., min_length=1)
    role: str = Field(..., min_length=1)
    rank: int = Field(..., ge=MIN_RANK, le=MAX_RANK)
    image_url: OptionalText = None
    category: MemberCategory = MemberCategory.STUDENT

    @field_validator("name", "role")
    @classmethod
    def require_text(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("field is required")
        return value


class TeamRoster(BaseModel):
    """
    Display tiers of the team page.

    Each member appears in exactly one list, in fetch (rank ascending) order.
    """

    administration: list[Member] = Field(default_factory=list)
    executive_core: list[Member] = Field(default_factory=list)
    secretaries: list[Member] = Field(default_factory=list)
    co_secretaries: list[Member] = Field(default_factory=list)
    general_council: list[Member] = Field(default_factory=list)

    @property
    def student_council(self) -> list[Member]:
        return self.executive_core + self.secretaries + self.co_secretaries + self.general_council
