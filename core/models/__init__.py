# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - notice.py / event.py / member.py: rows, admin drafts and insert payloads
# - media.py: storage-backed gallery assets
# - console.py: admin console state
# - pages.py: public page payloads (home digest, contact)
#
# Rows coming back from the backend are validated here before any
# classification runs on them.
# =============================================================================

# -----------------------------------------------------------------------------
# Shared field types
# -----------------------------------------------------------------------------
from .common import parse_day

# -----------------------------------------------------------------------------
# Notices
# -----------------------------------------------------------------------------
from .notice import (
    Notice,
    NoticeCreate,
    NoticeDigestItem,
    NoticeDraft,
)

# -----------------------------------------------------------------------------
# Events
# -----------------------------------------------------------------------------
from .event import (
    Event,
    EventCreate,
    EventDraft,
    EventPartition,
    EventView,
)

# -----------------------------------------------------------------------------
# Members
# -----------------------------------------------------------------------------
from .member import (
    MAX_RANK,
    MIN_RANK,
    Member,
    MemberCategory,
    MemberCreate,
    MemberDraft,
    TeamRoster,
)

# -----------------------------------------------------------------------------
# Media
# -----------------------------------------------------------------------------
from .media import (
    HomePhoto,
    MediaAsset,
    is_image_name,
    is_video_name,
)

# -----------------------------------------------------------------------------
# Console & pages
# -----------------------------------------------------------------------------
from .console import (
    ConsoleDrafts,
    ConsoleState,
    ContentCategory,
)
from .pages import ContactDetails, HomeDigest

__all__ = [
    "parse_day",
    # Notices
    "Notice",
    "NoticeCreate",
    "NoticeDigestItem",
    "NoticeDraft",
    # Events
    "Event",
    "EventCreate",
    "EventDraft",
    "EventPartition",
    "EventView",
    # Members
    "MAX_RANK",
    "MIN_RANK",
    "Member",
    "MemberCategory",
    "MemberCreate",
    "MemberDraft",
    "TeamRoster",
    # Media
    "HomePhoto",
    "MediaAsset",
    "is_image_name",
    "is_video_name",
    # Console & pages
    "ConsoleDrafts",
    "ConsoleState",
    "ContentCategory",
    "ContactDetails",
    "HomeDigest",
]
