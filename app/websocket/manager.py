# =============================================================================
# app/websocket/manager.py - WebSocket Connection Manager
# =============================================================================
# Tracks WebSocket clients per content table and fans out change notices.
#
# Usage:
#   from app.websocket import websocket_manager
#
#   await websocket_manager.connect("events", websocket)
#   await websocket_manager.broadcast("events", {"type": "table_changed", ...})
#   websocket_manager.disconnect("events", websocket)
# =============================================================================

import logging
from typing import Dict, Set
from fastapi import WebSocket

logger = logging.getLogger(__name__)


class ConnectionManager:
    """
    Manages WebSocket connections organized by table name.

    A public page watching a table (e.g. the events list) holds one
    connection; several tabs may watch the same table.
    """

    def __init__(self):
        # table -> set of WebSocket connections
        self.connections: Dict[str, Set[WebSocket]] = {}
        self._total_connections = 0

    async def connect(self, table: str, websocket: WebSocket) -> None:
        """
        Accept a new WebSocket connection and track it.

        Args:
            table: The table this connection is watching
            websocket: The WebSocket connection
        """
        await websocket.accept()

        self.connections.setdefault(table, set()).add(websocket)
        self._total_connections += 1

        logger.info(
            f"WebSocket watching {table}. "
            f"Total connections: {self._total_connections}"
        )

    def disconnect(self, table: str, websocket: WebSocket) -> None:
        """Remove a connection; unknown connections are ignored."""
        watchers = self.connections.get(table)
        if watchers is not None and websocket in watchers:
            watchers.discard(websocket)
            self._total_connections -= 1

            if not watchers:
                del self.connections[table]

        logger.info(
            f"WebSocket stopped watching {table}. "
            f"Total connections: {self._total_connections}"
        )

    async def broadcast(self, table: str, message: dict) -> int:
        """
        Send a message to every connection watching `table`.

        Connections that fail to receive are dropped so nothing is written
        to a page that has gone away.

        Returns:
            int: Number of clients the message was sent to
        """
        if table not in self.connections:
            logger.debug(f"No watchers for {table}, skipping broadcast")
            return 0

        dead_connections: Set[WebSocket] = set()
        sent_count = 0

        for websocket in list(self.connections[table]):
            try:
                await websocket.send_json(message)
                sent_count += 1
            except Exception as e:
                logger.warning(f"Failed to send to WebSocket: {e}")
                dead_connections.add(websocket)

        for ws in dead_connections:
            self.disconnect(table, ws)

        if dead_connections:
            logger.info(f"Cleaned up {len(dead_connections)} dead connections")

        logger.debug(
            f"Broadcast to {table}: "
            f"type={message.get('type')}, sent to {sent_count} clients"
        )

        return sent_count

    def get_connection_count(self, table: str | None = None) -> int:
        """Connections for one table, or the total when `table` is None."""
        if table:
            return len(self.connections.get(table, set()))
        return self._total_connections

    def get_watched_tables(self) -> list[str]:
        """Tables with at least one connection."""
        return list(self.connections.keys())


# Global singleton instance
websocket_manager = ConnectionManager()
