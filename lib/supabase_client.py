# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides the Supabase implementation of the backend
# capabilities declared in core/backend.py:
# - SupabaseRowStore:    notices / events / members tables (PostgREST)
# - SupabaseFileStore:   media bucket (Supabase Storage)
# - SupabaseAuthGateway: admin password sign-in (Supabase Auth)
# - SupabaseRealtimeListener: table changes from any writer (Supabase Realtime)
#
# The service_role client is a singleton shared across the application.
# Sign-in uses a throwaway anon-key client so the shared client never picks
# up an operator's session.
#
# Usage:
#   from lib.supabase_client import get_supabase_backend
#   backend = get_supabase_backend()
#   rows = backend.rows.select("notices", order_by=OrderBy("created_at", ascending=False))
# =============================================================================

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any

from supabase import AuthError, Client, acreate_client, create_client

from app.config import settings
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
from lib.utils import normalize_uuid

# Set up logging for this module
logger = logging.getLogger(__name__)


class SupabaseClientError(BackendError):
    """
    Error during Supabase operations.

    `message` holds the raw backend text so it can be shown to the operator.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code=code, suggestion=suggestion, details=details)


def _raw_message(error: Exception) -> str:
    """Extract the backend's own message from a postgrest/storage/gotrue error."""
    message = getattr(error, "message", None)
    if isinstance(message, str) and message:
        return message
    return str(error)


class SupabaseClient:
    """
    Singleton holder for the service_role Supabase client.

    All methods are class methods for easy access without instantiation.
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS).
        This is appropriate for server-side operations.

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
        return cls._instance

    @classmethod
    def create_auth_client(cls) -> Client:
        """Create a fresh anon-key client for a single sign-in."""
        try:
            return create_client(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY)
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to create Supabase auth client: {e}",
                code="CLIENT_INIT_FAILED",
                suggestion="Check SUPABASE_URL and SUPABASE_ANON_KEY in your .env file"
            )

    @classmethod
    def reset(cls) -> None:
        """Drop the cached client (used by tests)."""
        cls._instance = None


# =============================================================================
# Row Store
# =============================================================================

class SupabaseRowStore(RowStore):
    """
    PostgREST-backed tables.

    Mutations made through this store are announced to subscribers after
    they succeed. Once a SupabaseRealtimeListener covers the tables, set
    `local_echo` to False so the same change is not announced twice.
    """

    def __init__(self, client: Client | None = None, feed: ChangeFeed | None = None):
        self._client = client
        self.feed = feed or ChangeFeed()
        self.local_echo = True

    @property
    def client(self) -> Client:
        return self._client or SupabaseClient.get_client()

    def select(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
        order_by: OrderBy | None = None,
        limit: int | None = None,
        columns: str = "*",
    ) -> list[dict[str, Any]]:
        try:
            query = self.client.table(table).select(columns)
            for column, value in (filters or {}).items():
                query = query.eq(column, value)
            if order_by:
                query = query.order(order_by.column, desc=not order_by.ascending)
            if limit is not None:
                query = query.limit(limit)

            response = query.execute()
            rows = response.data or []

            logger.debug(f"Fetched {len(rows)} rows from {table}")
            return rows

        except Exception as e:
            raise SupabaseClientError(
                message=_raw_message(e),
                code="SELECT_FAILED",
                suggestion=f"Check that the {table} table exists and is readable",
                details={"table": table, "filters": filters or {}}
            )

    def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        try:
            response = self.client.table(table).insert(row).execute()
        except Exception as e:
            raise SupabaseClientError(
                message=_raw_message(e),
                code="INSERT_FAILED",
                details={"table": table}
            )

        if not response.data:
            raise SupabaseClientError(
                message="Insert returned no data",
                code="INSERT_NO_DATA",
                details={"table": table}
            )

        inserted = response.data[0]
        logger.info(f"Inserted row into {table}: {inserted.get('id')}")
        if self.local_echo:
            self.feed.notify(TableChange(table=table, action="insert", row_id=_row_id(inserted)))
        return inserted

    def delete(self, table: str, row_id: str) -> None:
        row_id_str = normalize_uuid(row_id)

        try:
            self.client.table(table).delete().eq("id", row_id_str).execute()
        except Exception as e:
            raise SupabaseClientError(
                message=_raw_message(e),
                code="DELETE_FAILED",
                details={"table": table, "id": row_id_str}
            )

        logger.info(f"Deleted row from {table}: {row_id_str}")
        if self.local_echo:
            self.feed.notify(TableChange(table=table, action="delete", row_id=row_id_str))

    def subscribe(self, table: str, on_change: ChangeCallback) -> Subscription:
        return self.feed.add(table, on_change)


def _row_id(row: dict[str, Any]) -> str | None:
    row_id = row.get("id")
    return normalize_uuid(row_id) if row_id is not None else None


# =============================================================================
# Realtime Listener
# =============================================================================

REALTIME_CHANNEL = "council-portal-tables"


class SupabaseRealtimeListener:
    """
    Postgres change stream for the content tables.

    Unlike the row store's own notices, this also sees rows written outside
    this process, e.g. from the Supabase dashboard. Callbacks run on the
    event loop that called start().

    Usage:
        listener = SupabaseRealtimeListener(("notices", "events"))
        listener.subscribe("events", on_change)
        await listener.start()
        ...
        await listener.stop()
    """

    def __init__(self, tables: tuple[str, ...] | list[str], feed: ChangeFeed | None = None):
        self.tables = tuple(tables)
        self.feed = feed or ChangeFeed()
        self._client = None
        self._channel = None

    @property
    def running(self) -> bool:
        return self._channel is not None

    def subscribe(self, table: str, on_change: ChangeCallback) -> Subscription:
        return self.feed.add(table, on_change)

    async def start(self) -> None:
        """
        Open one channel listening to every change on the watched tables.

        Raises:
            SupabaseClientError: If the client cannot connect or subscribe
        """
        try:
            self._client = await acreate_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_KEY)
            channel = self._client.channel(REALTIME_CHANNEL)
            for table in self.tables:
                channel.on_postgres_changes(
                    "*",
                    callback=self._on_postgres_change,
                    table=table,
                    schema="public",
                )
            await channel.subscribe()
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to subscribe to realtime changes: {e}",
                code="REALTIME_FAILED",
                suggestion="Enable Realtime replication for the content tables",
            )

        self._channel = channel
        logger.info(f"Listening for realtime changes on {', '.join(self.tables)}")

    async def stop(self) -> None:
        if self._channel is None:
            return
        channel, self._channel = self._channel, None
        try:
            await self._client.remove_channel(channel)
        except Exception as e:
            logger.debug(f"Realtime channel cleanup failed: {e}")

    def _on_postgres_change(self, payload: dict[str, Any]) -> None:
        data = payload.get("data") or {}
        table = data.get("table")
        kind = data.get("type")
        if not table or kind is None:
            logger.debug(f"Ignoring realtime payload without table/type: {payload}")
            return

        action = str(getattr(kind, "value", kind)).lower()
        record = data.get("record") or data.get("old_record") or {}
        self.feed.notify(TableChange(table=table, action=action, row_id=_row_id(record)))


# =============================================================================
# File Store
# =============================================================================

class SupabaseFileStore(FileStore):
    """Supabase Storage buckets."""

    def __init__(self, client: Client | None = None):
        self._client = client

    @property
    def client(self) -> Client:
        return self._client or SupabaseClient.get_client()

    def list(
        self,
        bucket: str,
        folder: str,
        limit: int = 100,
        sort_by: str = "name",
        descending: bool = False,
    ) -> list[FileEntry]:
        options = {
            "limit": limit,
            "offset": 0,
            "sortBy": {"column": sort_by, "order": "desc" if descending else "asc"},
        }

        try:
            response = self.client.storage.from_(bucket).list(folder, options)
        except Exception as e:
            raise SupabaseClientError(
                message=_raw_message(e),
                code="LIST_FAILED",
                suggestion=f"Check that bucket '{bucket}' exists and is public",
                details={"bucket": bucket, "folder": folder}
            )

        return [
            FileEntry(
                name=item["name"],
                metadata=item.get("metadata"),
                created_at=item.get("created_at"),
            )
            for item in response or []
        ]

    def upload(
        self,
        bucket: str,
        path: str,
        data: bytes,
        content_type: str | None = None,
    ) -> str:
        file_options = {"upsert": "false"}
        if content_type:
            file_options["content-type"] = content_type

        try:
            self.client.storage.from_(bucket).upload(
                path=path,
                file=data,
                file_options=file_options,
            )
        except Exception as e:
            raise SupabaseClientError(
                message=_raw_message(e),
                code="UPLOAD_FAILED",
                details={"bucket": bucket, "path": path}
            )

        logger.info(f"Uploaded file to storage: {bucket}/{path}")
        return path

    def remove(self, bucket: str, paths: list[str]) -> None:
        try:
            self.client.storage.from_(bucket).remove(paths)
        except Exception as e:
            raise SupabaseClientError(
                message=_raw_message(e),
                code="REMOVE_FAILED",
                details={"bucket": bucket, "paths": paths}
            )

        logger.info(f"Removed from storage: {bucket}/{paths}")

    def get_public_url(self, bucket: str, path: str) -> str:
        try:
            url = self.client.storage.from_(bucket).get_public_url(path)
        except Exception as e:
            raise SupabaseClientError(
                message=_raw_message(e),
                code="PUBLIC_URL_FAILED",
                details={"bucket": bucket, "path": path}
            )
        # storage3 returns a bare string; older releases wrapped it in a dict
        if isinstance(url, dict):
            url = url.get("publicUrl") or url.get("publicURL") or ""
        return url.rstrip("?")


# =============================================================================
# Auth Gateway
# =============================================================================

def _is_rejection(error: Exception) -> bool:
    """True when Supabase Auth answered with a 4xx other than rate limiting."""
    status = getattr(error, "status", None) or 0
    return isinstance(error, AuthError) and 400 <= status < 500 and status != 429


class SupabaseAuthGateway(AuthGateway):
    """Supabase Auth password sign-in."""

    def sign_in(self, email: str, password: str) -> AuthSession:
        client = SupabaseClient.create_auth_client()

        try:
            response = client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except Exception as e:
            if _is_rejection(e):
                logger.warning(f"Admin sign-in rejected for {email}: {e}")
                raise CredentialsRejectedError(
                    message=_raw_message(e),
                    code="SIGN_IN_FAILED",
                    suggestion="Check the email and password"
                )
            logger.error(f"Supabase Auth unavailable during sign-in: {e}")
            raise SupabaseClientError(
                message=_raw_message(e),
                code="AUTH_UNAVAILABLE",
                suggestion="Check that SUPABASE_URL is reachable"
            )

        session = response.session
        if session is None:
            raise CredentialsRejectedError(
                message="Sign-in returned no session",
                code="SIGN_IN_FAILED",
            )

        user = response.user
        logger.info(f"Admin signed in: {email}")
        return AuthSession(
            access_token=session.access_token,
            refresh_token=session.refresh_token,
            user_id=str(user.id) if user else None,
            email=user.email if user else email,
            expires_at=session.expires_at,
        )

    def sign_out(self, access_token: str) -> None:
        try:
            SupabaseClient.get_client().auth.admin.sign_out(access_token)
        except Exception as e:
            raise SupabaseClientError(
                message=_raw_message(e),
                code="SIGN_OUT_FAILED",
            )
        logger.info("Admin session signed out")


@lru_cache
def get_supabase_backend() -> Backend:
    """
    Build the process-wide Supabase backend.

    Cached so every caller shares one row store and its change feed.
    """
    return Backend(
        rows=SupabaseRowStore(),
        files=SupabaseFileStore(),
        auth=SupabaseAuthGateway(),
    )
