# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends(); tests swap the
# backend through app.dependency_overrides[get_backend].
# =============================================================================

from typing import Annotated

from fastapi import Depends

from app.auth import AuthUser, get_current_user
from core.backend import Backend
from core.services.admin_console import AdminConsole, console_registry
from core.services.content_service import ContentService
from lib.supabase_client import get_supabase_backend


def get_backend() -> Backend:
    """
    Get the backend collaborator.

    Returns the process-wide Supabase backend.
    """
    return get_supabase_backend()


BackendDep = Annotated[Backend, Depends(get_backend)]


def get_content_service(backend: BackendDep) -> ContentService:
    return ContentService(backend)


ContentDep = Annotated[ContentService, Depends(get_content_service)]


def get_console(
    backend: BackendDep,
    user: AuthUser = Depends(get_current_user),
) -> AdminConsole:
    """The signed-in operator's console (created on first use)."""
    return console_registry.get(str(user.id), backend)


ConsoleDep = Annotated[AdminConsole, Depends(get_console)]
