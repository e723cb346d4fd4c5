# =============================================================================
# core/services/admin_console.py - Admin Workflow Controller
# =============================================================================
# Drives the admin console for one operator:
# - select a category and list its items
# - edit the category's draft, submit it as a single-row insert
# - upload media (draft image for events/members, bulk files for the gallery)
# - delete an item after confirmation, removing its stored image first
#
# Every backend failure is recorded as the operator alert and re-raised as
# ActionFailedError carrying the raw backend message. Nothing is retried.
# Row delete + file delete are not atomic; partial outcomes are logged with
# an "orphan" marker so a sweep can reconcile them.
# =============================================================================

import logging
import threading
from typing import Any

from pydantic import ValidationError

from app.exceptions import (
    ActionFailedError,
    ConfirmationRequiredError,
    DraftValidationError,
    UploadNotSupportedError,
)
from core.backend import Backend, BackendError
from core.models.console import ConsoleState, ContentCategory
from core.services.content_service import ContentService
from core.services.storage_service import (
    MediaUpload,
    StorageService,
    StoredObject,
    filename_from_url,
    folder_for,
)

logger = logging.getLogger(__name__)


def _first_error(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first['msg']}" if location else first["msg"]


class AdminConsole:
    """
    Admin workflow for a single operator session.

    The backend is injected so the workflow runs against Supabase in
    production and an in-memory fake in tests.

    Example:
        console = AdminConsole(backend)
        console.select_category(ContentCategory.MEMBERS)
        console.update_draft({"name": "Asha", "role": "President", "rank": 3})
        console.submit()
    """

    def __init__(
        self,
        backend: Backend,
        content: ContentService | None = None,
        storage: StorageService | None = None,
        state: ConsoleState | None = None,
    ):
        self.backend = backend
        self.storage = storage or StorageService(backend.files)
        self.content = content or ContentService(backend, storage=self.storage)
        self._state = state or ConsoleState()
        # Guards read-check-write of _state; never held across a backend call.
        self._lock = threading.RLock()

    @property
    def state(self) -> ConsoleState:
        return self._state

    def _update(self, **changes: Any) -> ConsoleState:
        with self._lock:
            self._state = self._state.model_copy(update=changes)
            return self._state

    def _fail(self, action: str, error: BackendError) -> None:
        """Record the raw backend message as the operator alert and abort the action."""
        logger.error(f"Console {action} failed: {error.message}")
        self._update(alert=error.message, loading=False)
        raise ActionFailedError(action, error.message) from error

    def dismiss_alert(self) -> ConsoleState:
        return self._update(alert=None)

    # -------------------------------------------------------------------------
    # Listing
    # -------------------------------------------------------------------------

    def select_category(self, category: ContentCategory) -> ConsoleState:
        """Switch tabs and load the new category's items."""
        with self._lock:
            self._update(
                active_category=category,
                generation=self._state.generation + 1,
                items=[],
                alert=None,
            )
        return self.refresh()

    def refresh(self) -> ConsoleState:
        """
        Reload the active category's items.

        If the operator switched category while the fetch was in flight, the
        result belongs to a view that no longer exists and is dropped.
        """
        with self._lock:
            category = self._state.active_category
            generation = self._state.generation
            self._update(loading=True)

        try:
            items = self.content.list_category(category)
        except BackendError as e:
            with self._lock:
                if self._state.generation != generation:
                    logger.debug(f"Ignoring failed refresh of stale {category.value} view")
                    return self._state
                self._fail("refresh", e)

        with self._lock:
            if self._state.generation != generation:
                logger.debug(f"Discarding stale {category.value} listing")
                return self._state
            return self._update(items=items, loading=False)

    def _refresh_after(self, action: str) -> None:
        # The mutation already succeeded; a failed reload only leaves the alert.
        try:
            self.refresh()
        except ActionFailedError:
            logger.warning(f"List refresh after {action} failed; alert left for operator")

    # -------------------------------------------------------------------------
    # Drafts & Create
    # -------------------------------------------------------------------------

    def update_draft(self, fields: dict[str, Any]) -> ConsoleState:
        """Merge form values into the active category's draft."""
        with self._lock:
            category = self._state.active_category
            draft = self._state.active_draft
            if draft is None:
                raise DraftValidationError(category.value, "this category has no form")

            try:
                updated = type(draft).model_validate({**draft.model_dump(), **fields})
            except ValidationError as e:
                raise DraftValidationError(category.value, _first_error(e))

            return self._update(drafts=self._state.drafts.replace(category, updated))

    def submit(self) -> dict[str, Any]:
        """
        Insert the active draft as a new row.

        On success the draft is reset to its defaults and the list reloaded.
        On failure the draft is left exactly as it was so the operator can
        resubmit without retyping.

        Returns:
            The inserted row

        Raises:
            DraftValidationError: Required fields missing
            ActionFailedError: The insert was rejected by the backend
        """
        category = self._state.active_category
        draft = self._state.active_draft
        if draft is None:
            raise DraftValidationError(category.value, "gallery entries are created by uploading files")

        try:
            payload = draft.to_payload()
        except ValidationError as e:
            raise DraftValidationError(category.value, _first_error(e))

        try:
            row = self.backend.rows.insert(category.value, payload)
        except BackendError as e:
            self._fail("submit", e)

        logger.info(f"Created {category.value} row {row.get('id')}")
        with self._lock:
            self._update(drafts=self._state.drafts.reset(category), alert=None)
        self._refresh_after("submit")
        return row

    # -------------------------------------------------------------------------
    # Media Upload
    # -------------------------------------------------------------------------

    def upload(self, uploads: list[MediaUpload]) -> list[StoredObject]:
        """
        Upload media for the active category.

        - events/members: exactly one image; its public URL is written into
          the draft's image_url (the row is created later by submit())
        - gallery: any number of files; no rows, the listing is reloaded
        """
        category = self._state.active_category
        if not (category.has_image or category == ContentCategory.GALLERY):
            raise UploadNotSupportedError(category.value)
        if not uploads:
            raise DraftValidationError(category.value, "no files were provided")
        if category.has_image and len(uploads) > 1:
            raise DraftValidationError(category.value, "only one image can be attached to an entry")

        try:
            stored = self.storage.upload_media(folder_for(category), uploads)
        except BackendError as e:
            self._fail("upload", e)

        if category.has_image:
            with self._lock:
                draft = self._state.drafts.get(category)
                self._update(drafts=self._state.drafts.replace(
                    category, draft.model_copy(update={"image_url": stored[0].url})
                ))
        else:
            self._refresh_after("upload")

        return stored

    # -------------------------------------------------------------------------
    # Delete
    # -------------------------------------------------------------------------

    def delete(self, item_id: str, confirm: bool = False) -> ConsoleState:
        """
        Delete an item of the active category.

        Requires `confirm=True`; the action cannot be undone. For events and
        members the stored image is removed (best-effort) before the row.
        """
        if not confirm:
            raise ConfirmationRequiredError(item_id)

        category = self._state.active_category

        if category == ContentCategory.GALLERY:
            try:
                path = self.storage.remove_object(folder_for(category), item_id)
            except BackendError as e:
                self._fail("delete", e)
            logger.info(f"Removed gallery object {path}")
            self._refresh_after("delete")
            return self._state

        removed_path = None
        try:
            if category.has_image:
                removed_path = self._remove_row_image(category, item_id)
            self.backend.rows.delete(category.value, item_id)
        except BackendError as e:
            if removed_path:
                logger.warning(
                    f"orphan: {category.value} row {item_id} still references "
                    f"removed object {removed_path}"
                )
            self._fail("delete", e)

        logger.info(f"Deleted {category.value} row {item_id}")
        self._refresh_after("delete")
        return self._state

    def _remove_row_image(self, category: ContentCategory, item_id: str) -> str | None:
        """
        Remove the object referenced by a row's image_url.

        The row is re-read so the current URL is used, not the one shown in
        the list. A failed removal is logged and does not stop the delete.
        """
        row = self.backend.rows.fetch_one(category.value, item_id, columns="image_url")
        filename = filename_from_url(row.get("image_url")) if row else None
        if not filename:
            return None

        folder = folder_for(category)
        try:
            return self.storage.remove_object(folder, filename)
        except BackendError as e:
            logger.warning(
                f"orphan: could not remove {folder}/{filename} for "
                f"{category.value} row {item_id}: {e.message}"
            )
            return None


class ConsoleRegistry:
    """
    One AdminConsole per signed-in operator.

    Consoles live in process memory and are dropped on sign-out.
    """

    def __init__(self):
        self._consoles: dict[str, AdminConsole] = {}
        self._lock = threading.Lock()

    def get(self, user_id: str, backend: Backend) -> AdminConsole:
        with self._lock:
            console = self._consoles.get(user_id)
            if console is None:
                console = AdminConsole(backend)
                self._consoles[user_id] = console
                logger.debug(f"Opened admin console for {user_id}")
            return console

    def discard(self, user_id: str) -> None:
        with self._lock:
            self._consoles.pop(user_id, None)

    def __len__(self) -> int:
        return len(self._consoles)


# Global registry used by the API layer
console_registry = ConsoleRegistry()
