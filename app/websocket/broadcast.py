# =============================================================================
# app/websocket/broadcast.py - Cross-Process Change Publishing
# =============================================================================
# Publishes table changes onto Redis pub/sub so every API process can relay
# them to its own WebSocket clients:
# - The row store notifies publish_table_changed() after an insert/delete
#   (only while Supabase Realtime is not relaying changes directly)
# - main.py subscribes to the channel and broadcasts to WebSocket clients
#
# Message:
#   {"type": "table_changed", "table": "events", "action": "insert", "row_id": "..."}
# =============================================================================

import json
import logging

from core.backend import TableChange

logger = logging.getLogger(__name__)

# Redis channel for table change events
WEBSOCKET_CHANNEL = "council_portal:table_changes"

# Tables whose changes are published
WATCHED_TABLES = ("notices", "events", "members")


def get_redis_client():
    """Get a Redis client for pub/sub operations."""
    import redis
    from app.config import settings
    return redis.from_url(settings.REDIS_URL)


def table_changed_message(change: TableChange) -> dict:
    """Wire form of a change notice."""
    return {
        "type": "table_changed",
        "table": change.table,
        "action": change.action,
        "row_id": change.row_id,
        "at": change.at.isoformat(),
    }


def publish_table_changed(change: TableChange) -> bool:
    """
    Publish a table change for WebSocket clients.

    Registered as a RowStore subscriber, so it must never raise into the
    store's insert/delete path.

    Returns:
        bool: True if published successfully
    """
    try:
        client = get_redis_client()
        client.publish(WEBSOCKET_CHANNEL, json.dumps(table_changed_message(change)))

        logger.debug(f"Published {change.action} on {change.table}")
        return True

    except Exception as e:
        logger.error(f"Failed to publish table change: {e}")
        return False
