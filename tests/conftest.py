# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - An in-memory Backend (rows, files, auth) with call logging and
#   failure injection, so services run without Supabase
# =============================================================================

from __future__ import annotations

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret-at-least-32-characters")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import itertools
from typing import Any, Callable

import pytest

from core.backend import (
    AuthGateway,
    AuthSession,
    Backend,
    BackendError,
    ChangeCallback,
    ChangeFeed,
    CredentialsRejectedError,
    FileEntry,
    FileStore,
    OrderBy,
    RowStore,
    Subscription,
    TableChange,
)

PUBLIC_URL_BASE = "https://test-project.supabase.co/storage/v1/object/public"


# =============================================================================
# In-memory Backend
# =============================================================================

class FakeRowStore(RowStore):
    """
    Tables held in dicts.

    `fail_on[operation] = "message"` makes the next calls to that operation
    raise BackendError("message"). `before_select` runs inside select(),
    which lets tests act while a fetch is "in flight".
    """

    def __init__(self):
        self.tables: dict[str, list[dict[str, Any]]] = {"notices": [], "events": [], "members": []}
        self.fail_on: dict[str, str] = {}
        self.calls: list[tuple] = []
        self.before_select: Callable[[str], None] | None = None
        self.feed = ChangeFeed()
        self._ids = itertools.count(1)

    def seed(self, table: str, *rows: dict[str, Any]) -> None:
        for row in rows:
            self.tables[table].append({"id": str(next(self._ids)), **row})

    def _maybe_fail(self, operation: str) -> None:
        if operation in self.fail_on:
            raise BackendError(self.fail_on[operation])

    def select(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
        order_by: OrderBy | None = None,
        limit: int | None = None,
        columns: str = "*",
    ) -> list[dict[str, Any]]:
        self.calls.append(("select", table, filters, order_by, limit, columns))
        if self.before_select is not None:
            hook, self.before_select = self.before_select, None
            hook(table)
        self._maybe_fail("select")

        rows = [
            dict(row) for row in self.tables[table]
            if all(row.get(k) == v for k, v in (filters or {}).items())
        ]
        if order_by:
            rows.sort(key=lambda r: str(r.get(order_by.column) or ""), reverse=not order_by.ascending)
        if limit is not None:
            rows = rows[:limit]
        if columns != "*":
            wanted = [c.strip() for c in columns.split(",")]
            rows = [{c: row.get(c) for c in wanted} for row in rows]
        return rows

    def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        self.calls.append(("insert", table, row))
        self._maybe_fail("insert")
        stored = {"id": str(next(self._ids)), "created_at": "2025-01-01T00:00:00+00:00", **row}
        self.tables[table].append(stored)
        self.feed.notify(TableChange(table=table, action="insert", row_id=stored["id"]))
        return dict(stored)

    def delete(self, table: str, row_id: str) -> None:
        self.calls.append(("delete", table, row_id))
        self._maybe_fail("delete")
        self.tables[table] = [r for r in self.tables[table] if r["id"] != str(row_id)]
        self.feed.notify(TableChange(table=table, action="delete", row_id=str(row_id)))

    def subscribe(self, table: str, on_change: ChangeCallback) -> Subscription:
        return self.feed.add(table, on_change)


class FakeFileStore(FileStore):
    """Buckets held as {bucket: {path: bytes}}."""

    def __init__(self):
        self.objects: dict[str, dict[str, bytes]] = {}
        self.placeholders: set[str] = set()
        self.fail_on: dict[str, str] = {}
        self.calls: list[tuple] = []

    def put(self, bucket: str, path: str, data: bytes = b"x") -> None:
        self.objects.setdefault(bucket, {})[path] = data

    def add_placeholder(self, bucket: str, folder: str) -> None:
        self.placeholders.add(f"{bucket}/{folder}")

    def paths(self, bucket: str) -> list[str]:
        return sorted(self.objects.get(bucket, {}))

    def _maybe_fail(self, operation: str) -> None:
        if operation in self.fail_on:
            raise BackendError(self.fail_on[operation])

    def list(
        self,
        bucket: str,
        folder: str,
        limit: int = 100,
        sort_by: str = "name",
        descending: bool = False,
    ) -> list[FileEntry]:
        self.calls.append(("list", bucket, folder, limit, sort_by, descending))
        self._maybe_fail("list")

        prefix = f"{folder}/"
        entries = [
            FileEntry(name=path[len(prefix):], metadata={"size": len(data)})
            for path, data in self.objects.get(bucket, {}).items()
            if path.startswith(prefix) and "/" not in path[len(prefix):]
        ]
        if f"{bucket}/{folder}" in self.placeholders:
            entries.append(FileEntry(name=".emptyFolderPlaceholder", metadata=None))
        entries.sort(key=lambda e: e.name, reverse=descending)
        return entries[:limit]

    def upload(self, bucket: str, path: str, data: bytes, content_type: str | None = None) -> str:
        self.calls.append(("upload", bucket, path, content_type))
        self._maybe_fail("upload")
        if path in self.objects.get(bucket, {}):
            raise BackendError("The resource already exists")
        self.put(bucket, path, data)
        return path

    def remove(self, bucket: str, paths: list[str]) -> None:
        self.calls.append(("remove", bucket, list(paths)))
        self._maybe_fail("remove")
        for path in paths:
            self.objects.get(bucket, {}).pop(path, None)

    def get_public_url(self, bucket: str, path: str) -> str:
        return f"{PUBLIC_URL_BASE}/{bucket}/{path.replace(' ', '%20')}"


class FakeAuth(AuthGateway):
    """
    Accepts one email/password pair.

    `fail_sign_in = "message"` simulates an unreachable auth backend.
    """

    def __init__(self, email: str = "admin@council.test", password: str = "correct-horse"):
        self.email = email
        self.password = password
        self.signed_out: list[str] = []
        self.fail_sign_out: str | None = None
        self.fail_sign_in: str | None = None

    def sign_in(self, email: str, password: str) -> AuthSession:
        if self.fail_sign_in:
            raise BackendError(self.fail_sign_in, code="AUTH_UNAVAILABLE")
        if (email, password) != (self.email, self.password):
            raise CredentialsRejectedError("Invalid login credentials", code="SIGN_IN_FAILED")
        return AuthSession(
            access_token="access-token",
            refresh_token="refresh-token",
            user_id="6f1c1d9e-3a7b-4c2d-9e8f-0a1b2c3d4e5f",
            email=email,
            expires_at=1_900_000_000,
        )

    def sign_out(self, access_token: str) -> None:
        if self.fail_sign_out:
            raise BackendError(self.fail_sign_out)
        self.signed_out.append(access_token)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def rows():
    return FakeRowStore()


@pytest.fixture
def files():
    return FakeFileStore()


@pytest.fixture
def auth():
    return FakeAuth()


@pytest.fixture
def backend(rows, files, auth):
    """In-memory backend shared by the service and API tests."""
    return Backend(rows=rows, files=files, auth=auth)


@pytest.fixture
def sample_members():
    """Team rows as fetched by rank ascending."""
    return [
        {"id": 1, "name": "Dr. Meera Rao", "role": "Director", "rank": 1, "category": "administration"},
        {"id": 2, "name": "Prof. Anil Verma", "role": "Faculty Coordinator", "rank": 2, "category": "administration"},
        {"id": 3, "name": "Asha Singh", "role": "President", "rank": 3, "category": "student"},
        {"id": 4, "name": "Rohan Gupta", "role": "Vice President", "rank": 4, "category": None},
        {"id": 5, "name": "Kiran Patel", "role": "Secretary", "rank": 5},
        {"id": 6, "name": "Neha Yadav", "role": "Co-Secretary", "rank": 6, "category": ""},
        {"id": 7, "name": "Vikas Kumar", "role": "Member", "rank": 7, "category": "student"},
    ]


@pytest.fixture
def sample_events():
    """Event rows on both sides of 2025-03-14."""
    return [
        {"id": "e1", "title": "Orientation", "event_date": "2025-01-10"},
        {"id": "e2", "title": "Hackathon", "event_date": "2025-03-14T18:30:00+05:30"},
        {"id": "e3", "title": "Tech Fest", "event_date": "2025-04-02", "summary_link": "Great turnout"},
        {"id": "e4", "title": "Workshop", "event_date": "2025-03-13T23:59:00"},
    ]
