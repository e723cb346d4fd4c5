# =============================================================================
# core/models/notice.py - Notice Schemas
# =============================================================================
# - Notice: a row of the `notices` table as read back from the backend
# - NoticeDraft: the admin form while it is being filled in
# - NoticeCreate: the validated insert payload built from a draft
# - NoticeDigestItem: one line of the home page notice digest
# =============================================================================

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common import OptionalText, RowId


class Notice(BaseModel):
    """A broadcast notice."""

    id: RowId
    content: str
    link_url: str | None = None
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None


class NoticeDraft(BaseModel):
    """Admin form state for a new notice."""

    model_config = ConfigDict(extra="forbid")

    content: str = ""
    link_url: str = ""
    is_active: bool = True

    def to_payload(self) -> dict[str, Any]:
        return NoticeCreate.model_validate(self.model_dump()).model_dump(mode="json")


class NoticeCreate(BaseModel):
    """Insert payload for the `notices` table."""

    content: str = Field(..., min_length=1, description="Broadcast message")
    link_url: OptionalText = Field(default=None, description="Optional PDF or external link")
    is_active: bool = True

    @field_validator("content")
    @classmethod
    def require_content(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("content is required")
        return value


class NoticeDigestItem(BaseModel):
    """Home page digest entry (content shown as the headline)."""

    title: str
    updated_at: datetime | None = None
    link_url: str | None = None
