# =============================================================================
# core/models/console.py - Admin Console State
# =============================================================================
# The admin console is a small state machine keyed by content category:
#
#   select(category) -> refresh -> items
#   update_draft(fields) -> submit -> insert -> reset draft -> refresh
#                                   \-> failure: alert, draft kept
#   upload(files) -> image_url written into draft (events/members)
#                 \-> listing refresh (gallery)
#   delete(id, confirm) -> file removal (best-effort) -> row delete -> refresh
#
# State objects are replaced, never mutated in place.
# =============================================================================

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from .event import EventDraft
from .member import MemberDraft
from .notice import NoticeDraft


class ContentCategory(str, Enum):
    """Admin console tabs."""
    NOTICES = "notices"
    EVENTS = "events"
    MEMBERS = "members"
    GALLERY = "gallery"

    @property
    def is_table(self) -> bool:
        return self != ContentCategory.GALLERY

    @property
    def has_image(self) -> bool:
        return self in (ContentCategory.EVENTS, ContentCategory.MEMBERS)


Draft = NoticeDraft | EventDraft | MemberDraft


class ConsoleDrafts(BaseModel):
    """One in-progress form per table category."""

    notices: NoticeDraft = Field(default_factory=NoticeDraft)
    events: EventDraft = Field(default_factory=EventDraft)
    members: MemberDraft = Field(default_factory=MemberDraft)

    def get(self, category: ContentCategory) -> Draft | None:
        if not category.is_table:
            return None
        return getattr(self, category.value)

    def replace(self, category: ContentCategory, draft: Draft) -> "ConsoleDrafts":
        return self.model_copy(update={category.value: draft})

    def reset(self, category: ContentCategory) -> "ConsoleDrafts":
        draft = self.get(category)
        if draft is None:
            return self
        return self.replace(category, type(draft)())


class ConsoleState(BaseModel):
    """
    Everything the admin console shows.

    `generation` increases on every category switch; a refresh that started
    under an older generation is discarded when it resolves.
    """

    active_category: ContentCategory = ContentCategory.NOTICES
    drafts: ConsoleDrafts = Field(default_factory=ConsoleDrafts)
    items: list[dict[str, Any]] = Field(default_factory=list)
    loading: bool = False
    alert: str | None = None
    generation: int = 0

    @property
    def active_draft(self) -> Draft | None:
        return self.drafts.get(self.active_category)
