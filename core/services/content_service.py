# =============================================================================
# core/services/content_service.py - Public Content Reads
# =============================================================================
# Fetch paths shared by the public pages and the admin console:
# - home digest (latest photos + active notices)
# - notices archive, events timeline, team tiers, gallery
# - per-category admin listings
#
# Rows are validated into models here; classification is delegated to
# core.classifiers.
# =============================================================================

import logging
from datetime import date
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from app.config import settings
from core.backend import Backend, BackendError, OrderBy
from core.classifiers import (
    AdministrationRule,
    classify_members,
    order_for_view,
    partition_events,
)
from core.models.console import ContentCategory
from core.models.event import Event, EventView
from core.models.media import MediaAsset
from core.models.member import TeamRoster
from core.models.notice import Notice, NoticeDigestItem
from core.models.pages import ContactDetails, HomeDigest
from core.services.storage_service import StorageService

logger = logging.getLogger(__name__)

NOTICE_DIGEST_SIZE = 3

ModelT = TypeVar("ModelT", bound=BaseModel)


def _validate_rows(model: type[ModelT], rows: list[dict[str, Any]]) -> list[ModelT]:
    """Validate rows into `model`, logging and dropping the ones that don't fit."""
    valid = []
    for row in rows:
        try:
            valid.append(model.model_validate(row))
        except ValidationError as e:
            logger.warning(f"Skipping malformed {model.__name__} row {row.get('id')!r}: {e.error_count()} error(s)")
    return valid


class ContentService:
    """
    Read-side service for the portal's content.

    Every method refetches from the backend; nothing is cached.
    """

    def __init__(
        self,
        backend: Backend,
        storage: StorageService | None = None,
        administration_rule: AdministrationRule | None = None,
    ):
        self.backend = backend
        self.storage = storage or StorageService(backend.files)
        self.administration_rule = administration_rule or settings.ADMINISTRATION_RULE

    # -------------------------------------------------------------------------
    # Home
    # -------------------------------------------------------------------------

    def home_digest(self) -> HomeDigest:
        """
        Latest gallery photos and active notices.

        A storage failure only empties the carousel; a notice failure is
        reported through `connection_error`.
        """
        digest = HomeDigest()

        try:
            digest.photos = self.storage.latest_photos()
        except BackendError as e:
            logger.warning(f"Home carousel unavailable: {e.message}")

        try:
            digest.notices = [
                NoticeDigestItem(title=n.content, updated_at=n.updated_at, link_url=n.link_url)
                for n in self.active_notices()
            ]
        except BackendError as e:
            logger.warning(f"Home notice digest unavailable: {e.message}")
            digest.connection_error = True

        return digest

    def active_notices(self, limit: int = NOTICE_DIGEST_SIZE) -> list[Notice]:
        rows = self.backend.rows.select(
            "notices",
            filters={"is_active": True},
            order_by=OrderBy("updated_at", ascending=False),
            limit=limit,
        )
        return _validate_rows(Notice, rows)

    # -------------------------------------------------------------------------
    # Notices / Events / Team / Gallery
    # -------------------------------------------------------------------------

    def list_notices(self) -> list[Notice]:
        """Every notice, active or not, most recently updated first."""
        rows = self.backend.rows.select("notices", order_by=OrderBy("updated_at", ascending=False))
        return _validate_rows(Notice, rows)

    def list_events(self, view: EventView, today: date | None = None) -> list[Event]:
        """
        Events for one half of the timeline.

        The sort direction is part of the backend query; the day-level
        partition then keeps only the requested half.
        """
        rows = self.backend.rows.select("events", order_by=order_for_view(view))
        return partition_events(rows, today=today).for_view(view)

    def team_roster(self) -> TeamRoster:
        rows = self.backend.rows.select("members", order_by=OrderBy("rank", ascending=True))
        return classify_members(rows, rule=self.administration_rule)

    def list_gallery(self) -> list[MediaAsset]:
        return self.storage.list_gallery()

    def contact_details(self) -> ContactDetails:
        return ContactDetails(
            email=settings.CONTACT_EMAIL,
            phone=settings.CONTACT_PHONE,
            address=settings.CONTACT_ADDRESS,
            form_action=settings.CONTACT_FORM_ACTION,
        )

    # -------------------------------------------------------------------------
    # Admin Listings
    # -------------------------------------------------------------------------

    def list_category(self, category: ContentCategory) -> list[dict[str, Any]]:
        """
        Items shown in the admin console list.

        Tables are listed newest first by creation time; the gallery by
        object name descending (names are timestamp-prefixed).
        """
        if category == ContentCategory.GALLERY:
            return [asset.model_dump() for asset in self.storage.list_gallery()]
        return self.backend.rows.select(
            category.value,
            order_by=OrderBy("created_at", ascending=False),
        )
