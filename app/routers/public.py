# =============================================================================
# app/routers/public.py - Public Page Endpoints
# =============================================================================
# Read-only data behind the public pages: home, notices, events, team,
# gallery and contact. Nothing here requires authentication.
#
# Backend failures are returned as 502 with the backend's message, except on
# the home page which degrades (see ContentService.home_digest).
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Query

from app.dependencies import ContentDep
from app.exceptions import BackendUnavailableError
from core.backend import BackendError
from core.models import (
    ContactDetails,
    Event,
    EventView,
    HomeDigest,
    MediaAsset,
    Notice,
    TeamRoster,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/home", response_model=HomeDigest)
def home(content: ContentDep) -> HomeDigest:
    """
    Home page digest: latest gallery photos and the three newest active notices.
    """
    return content.home_digest()


@router.get("/notices", response_model=list[Notice])
def notices(content: ContentDep) -> list[Notice]:
    """
    Full notices archive, active or not, most recently updated first.
    """
    try:
        return content.list_notices()
    except BackendError as e:
        raise BackendUnavailableError(e.message, operation="list_notices")


@router.get("/events", response_model=list[Event])
def events(
    content: ContentDep,
    view: Annotated[EventView, Query(description="upcoming (soonest first) or past (latest first)")] = EventView.UPCOMING,
) -> list[Event]:
    """
    Events on one side of today. An event dated today is upcoming.
    """
    try:
        return content.list_events(view)
    except BackendError as e:
        raise BackendUnavailableError(e.message, operation="list_events")


@router.get("/team", response_model=TeamRoster)
def team(content: ContentDep) -> TeamRoster:
    """
    Members grouped into administration and the student council tiers.
    """
    try:
        return content.team_roster()
    except BackendError as e:
        raise BackendUnavailableError(e.message, operation="team_roster")


@router.get("/gallery", response_model=list[MediaAsset])
def gallery(content: ContentDep) -> list[MediaAsset]:
    """
    Gallery photos and videos, newest first.
    """
    try:
        return content.list_gallery()
    except BackendError as e:
        raise BackendUnavailableError(e.message, operation="list_gallery")


@router.get("/contact", response_model=ContactDetails)
def contact(content: ContentDep) -> ContactDetails:
    """Contact block and the endpoint the contact form posts to."""
    return content.contact_details()
