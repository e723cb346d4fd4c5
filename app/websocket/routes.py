# =============================================================================
# app/websocket/routes.py - WebSocket Routes
# =============================================================================
# WebSocket endpoint for live table updates.
#
# Connect: ws://host/ws/tables/{table}   (notices, events or members)
#
# Events:
#   - {"type": "connected", "table": "..."}
#   - {"type": "table_changed", "table": "...", "action": "insert|delete", ...}
# =============================================================================

import logging
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from app.websocket.broadcast import WATCHED_TABLES
from app.websocket.manager import websocket_manager

logger = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/ws/tables/{table}")
async def table_websocket(websocket: WebSocket, table: str):
    """
    Notify a public page when one of its tables changes.

    The content is public so no token is required. Clients refetch the
    page data when they receive a `table_changed` event. Sending "ping"
    returns "pong".
    """
    if table not in WATCHED_TABLES:
        logger.warning(f"WebSocket: unknown table {table}")
        await websocket.close(code=4004, reason="Unknown table")
        return

    await websocket_manager.connect(table, websocket)

    try:
        await websocket.send_json({
            "type": "connected",
            "table": table,
            "message": f"Watching {table} for changes",
        })

        while True:
            try:
                data = await websocket.receive_text()

                if data == "ping":
                    await websocket.send_text("pong")
                else:
                    logger.debug(f"WebSocket received: {data[:100]}")

            except WebSocketDisconnect:
                raise
            except Exception as e:
                logger.warning(f"WebSocket receive error: {e}")
                break

    except WebSocketDisconnect:
        logger.info(f"WebSocket client stopped watching {table}")
    finally:
        websocket_manager.disconnect(table, websocket)


@router.get("/ws/status")
async def websocket_status():
    """
    Get WebSocket connection statistics.
    """
    tables = websocket_manager.get_watched_tables()
    return {
        "total_connections": websocket_manager.get_connection_count(),
        "watched_tables": tables,
        "table_count": len(tables),
    }
