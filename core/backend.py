# =============================================================================
# core/backend.py - Backend Collaborator Interfaces
# =============================================================================
# The portal never owns its data: rows, files and sessions live in an external
# backend-as-a-service. This module describes the capabilities the rest of the
# code consumes, so classification and the admin workflow can run against the
# Supabase implementation (lib/supabase_client.py) or an in-memory fake.
#
# Capabilities:
# - RowStore:    select / insert / delete / subscribe per table
# - FileStore:   list / upload / remove / get_public_url per bucket
# - AuthGateway: password sign-in and sign-out
# =============================================================================

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable

from lib.utils import ApplicationError

logger = logging.getLogger(__name__)


class BackendError(ApplicationError):
    """
    A row, file or auth call failed.

    `message` is the raw text reported by the backend; the admin console shows
    it to the operator verbatim.
    """

    def __init__(
        self,
        message: str,
        code: str = "BACKEND_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code=code, suggestion=suggestion, details=details)


class CredentialsRejectedError(BackendError):
    """The auth backend answered and refused the email/password pair."""


# =============================================================================
# Value Types
# =============================================================================

@dataclass(frozen=True)
class OrderBy:
    """Sort instruction passed through to the backend query."""
    column: str
    ascending: bool = True


@dataclass(frozen=True)
class FileEntry:
    """
    One object returned by a storage listing.

    `metadata` is None for folder placeholders returned by Supabase.
    """
    name: str
    metadata: dict[str, Any] | None = None
    created_at: str | None = None


@dataclass(frozen=True)
class AuthSession:
    """An established admin session."""
    access_token: str
    refresh_token: str | None = None
    user_id: str | None = None
    email: str | None = None
    expires_at: int | None = None


@dataclass(frozen=True)
class TableChange:
    """Notification delivered to row store subscribers."""
    table: str
    action: str  # "insert" | "update" | "delete"
    row_id: str | None = None
    at: datetime = field(default_factory=datetime.utcnow)


ChangeCallback = Callable[[TableChange], None]


# =============================================================================
# Change Notifications
# =============================================================================

class Subscription:
    """Handle returned by RowStore.subscribe(); call unsubscribe() to stop."""

    def __init__(self, feed: "ChangeFeed", table: str, callback: ChangeCallback):
        self._feed = feed
        self.table = table
        self.callback = callback
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self._feed.remove(self)
            self.active = False


class ChangeFeed:
    """
    In-process fan-out of table changes to subscribers.

    A failing callback is logged and does not stop delivery to the others.
    """

    def __init__(self):
        self._subscriptions: dict[str, list[Subscription]] = {}

    def add(self, table: str, callback: ChangeCallback) -> Subscription:
        subscription = Subscription(self, table, callback)
        self._subscriptions.setdefault(table, []).append(subscription)
        return subscription

    def remove(self, subscription: Subscription) -> None:
        subscribers = self._subscriptions.get(subscription.table, [])
        if subscription in subscribers:
            subscribers.remove(subscription)
        if not subscribers:
            self._subscriptions.pop(subscription.table, None)

    def notify(self, change: TableChange) -> int:
        delivered = 0
        for subscription in list(self._subscriptions.get(change.table, [])):
            try:
                subscription.callback(change)
                delivered += 1
            except Exception as e:
                logger.warning(f"Change subscriber for {change.table} failed: {e}")
        return delivered

    def subscriber_count(self, table: str) -> int:
        return len(self._subscriptions.get(table, []))


# =============================================================================
# Capability Interfaces
# =============================================================================

class RowStore(ABC):
    """Table-based persistence."""

    @abstractmethod
    def select(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
        order_by: OrderBy | None = None,
        limit: int | None = None,
        columns: str = "*",
    ) -> list[dict[str, Any]]:
        """Return rows matching all equality `filters`, in `order_by` order."""

    @abstractmethod
    def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        """Insert one row and return it as stored."""

    @abstractmethod
    def delete(self, table: str, row_id: str) -> None:
        """Hard-delete the row with primary key `row_id`."""

    @abstractmethod
    def subscribe(self, table: str, on_change: ChangeCallback) -> Subscription:
        """Call `on_change` whenever `table` is mutated."""

    def fetch_one(self, table: str, row_id: str, columns: str = "*") -> dict[str, Any] | None:
        """Fetch a single row by id, or None when it does not exist."""
        rows = self.select(table, filters={"id": row_id}, limit=1, columns=columns)
        return rows[0] if rows else None


class FileStore(ABC):
    """Bucket/object storage organized by folders."""

    @abstractmethod
    def list(
        self,
        bucket: str,
        folder: str,
        limit: int = 100,
        sort_by: str = "name",
        descending: bool = False,
    ) -> list[FileEntry]:
        """List objects directly inside `folder`."""

    @abstractmethod
    def upload(
        self,
        bucket: str,
        path: str,
        data: bytes,
        content_type: str | None = None,
    ) -> str:
        """Store `data` at `path` and return the stored path."""

    @abstractmethod
    def remove(self, bucket: str, paths: list[str]) -> None:
        """Delete the objects at `paths`."""

    @abstractmethod
    def get_public_url(self, bucket: str, path: str) -> str:
        """Public URL for the object at `path`."""


class AuthGateway(ABC):
    """Session-based credential check."""

    @abstractmethod
    def sign_in(self, email: str, password: str) -> AuthSession:
        """
        Exchange credentials for a session.

        Raises:
            CredentialsRejectedError: The backend refused the credentials
            BackendError: The backend could not be reached or failed
        """

    @abstractmethod
    def sign_out(self, access_token: str) -> None:
        """Invalidate the session identified by `access_token`."""


@dataclass
class Backend:
    """The three capabilities bundled for dependency injection."""
    rows: RowStore
    files: FileStore
    auth: AuthGateway
