# =============================================================================
# app/websocket/__init__.py - WebSocket Module
# =============================================================================
# Live change notices for the public pages.
#
# Usage:
#   # Broadcast to every client watching a table (from FastAPI)
#   from app.websocket import websocket_manager
#
#   await websocket_manager.broadcast("events", {"type": "table_changed", ...})
#
#   # Publish a change from any process
#   from app.websocket.broadcast import publish_table_changed
#
#   backend.rows.subscribe("events", publish_table_changed)
# =============================================================================

from app.websocket.manager import websocket_manager
from app.websocket.broadcast import (
    publish_table_changed,
    table_changed_message,
    WATCHED_TABLES,
    WEBSOCKET_CHANNEL,
)

__all__ = [
    "websocket_manager",
    "publish_table_changed",
    "table_changed_message",
    "WATCHED_TABLES",
    "WEBSOCKET_CHANNEL",
]
