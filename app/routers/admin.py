# =============================================================================
# app/routers/admin.py - Admin Console Endpoints
# =============================================================================
# Thin HTTP layer over core.services.admin_console.AdminConsole.
# All endpoints require a Supabase access token.
#
# Endpoints:
# - GET    /console                    current console state
# - PUT    /console/category           switch category (reloads its list)
# - PATCH  /console/draft              edit the active draft
# - POST   /console/submit             create a row from the active draft
# - POST   /console/upload             upload media (multipart, field "files")
# - DELETE /console/items/{item_id}    delete a row or gallery object (confirm=true)
# - POST   /console/refresh            reload the active list
# - DELETE /console/alert              dismiss the operator alert
#
# Handlers are plain `def` so FastAPI runs them in its threadpool while the
# backend call is in flight.
# =============================================================================

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Body, File, Path, Query, UploadFile
from pydantic import BaseModel, Field

from app.config import settings
from app.dependencies import ConsoleDep
from app.exceptions import FileTooLargeError
from core.models import ConsoleState, ContentCategory
from core.services.storage_service import MediaUpload

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Request/Response Models
# =============================================================================

class CategoryRequest(BaseModel):
    """Tab to switch the console to."""
    category: ContentCategory = Field(..., examples=["events"])


class SubmitResponse(BaseModel):
    """Row created from the draft plus the refreshed console."""
    row: dict[str, Any]
    state: ConsoleState


class UploadedFile(BaseModel):
    path: str
    url: str


class UploadResponse(BaseModel):
    """Stored objects plus the console (draft image_url already filled in)."""
    uploaded: list[UploadedFile]
    state: ConsoleState


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/console", response_model=ConsoleState)
def get_console_state(console: ConsoleDep) -> ConsoleState:
    """Current console state: active tab, drafts, items, alert."""
    return console.state


@router.put("/console/category", response_model=ConsoleState)
def select_category(request: CategoryRequest, console: ConsoleDep) -> ConsoleState:
    """Switch to another category and load its items."""
    return console.select_category(request.category)


@router.patch("/console/draft", response_model=ConsoleState)
def update_draft(
    console: ConsoleDep,
    fields: Annotated[dict[str, Any], Body(examples=[{"title": "Hackathon 2025", "event_date": "2025-03-14"}])],
) -> ConsoleState:
    """Merge form values into the active category's draft."""
    return console.update_draft(fields)


@router.post("/console/submit", response_model=SubmitResponse)
def submit_draft(console: ConsoleDep) -> SubmitResponse:
    """
    Insert the active draft as a row.

    On failure the draft is kept so the operator can fix and resubmit.
    """
    row = console.submit()
    return SubmitResponse(row=row, state=console.state)


@router.post("/console/upload", response_model=UploadResponse)
def upload_media(
    console: ConsoleDep,
    files: Annotated[list[UploadFile], File(description="Image for the draft, or gallery files")],
) -> UploadResponse:
    """
    Upload media for the active category.

    Events/members take one image whose URL is written into the draft.
    The gallery takes any number of photos/videos.
    """
    uploads = []
    for upload in files:
        filename = upload.filename or "upload"
        content = upload.file.read()
        if len(content) > settings.max_upload_size_bytes:
            raise FileTooLargeError(filename, len(content) / (1024 * 1024), settings.MAX_UPLOAD_SIZE_MB)
        uploads.append(MediaUpload(filename=filename, content=content, content_type=upload.content_type))

    logger.info(f"Received {len(uploads)} file(s) for {console.state.active_category.value}")

    stored = console.upload(uploads)
    return UploadResponse(
        uploaded=[UploadedFile(path=s.path, url=s.url) for s in stored],
        state=console.state,
    )


@router.delete("/console/items/{item_id}", response_model=ConsoleState)
def delete_item(
    console: ConsoleDep,
    item_id: Annotated[str, Path(description="Row id, or object name for the gallery")],
    confirm: Annotated[bool, Query(description="Must be true; deletion is irreversible")] = False,
) -> ConsoleState:
    """
    Delete a row (and its stored image) or a gallery object.
    """
    return console.delete(item_id, confirm=confirm)


@router.post("/console/refresh", response_model=ConsoleState)
def refresh(console: ConsoleDep) -> ConsoleState:
    """Reload the active category's items."""
    return console.refresh()


@router.delete("/console/alert", response_model=ConsoleState)
def dismiss_alert(console: ConsoleDep) -> ConsoleState:
    return console.dismiss_alert()
