# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Technical Council portal API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import asyncio
import json
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.websocket import (
    websocket_manager,
    publish_table_changed,
    table_changed_message,
    WATCHED_TABLES,
    WEBSOCKET_CHANNEL,
)
from app.exceptions import (
    CouncilPortalException,
    council_portal_exception_handler,
)
from app.routers import health, public, admin
from app.auth import routes as auth_routes
from app.websocket import routes as websocket_routes
from core.backend import TableChange
from lib.supabase_client import SupabaseRealtimeListener, get_supabase_backend

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


_redis_listener_task = None
_shutdown_event = None
_relay_tasks: set = set()


def relay_table_change(change: TableChange) -> None:
    """
    Forward a realtime change straight to this process's WebSocket clients.

    Every process holds its own realtime channel, so nothing goes through Redis.
    """
    task = asyncio.get_running_loop().create_task(
        websocket_manager.broadcast(change.table, table_changed_message(change))
    )
    _relay_tasks.add(task)
    task.add_done_callback(_relay_tasks.discard)


async def start_realtime(rows) -> SupabaseRealtimeListener | None:
    """
    Subscribe to Supabase Realtime for the watched tables.

    On success the row store stops echoing its own writes, since the
    realtime stream reports them too. On failure the Redis path stays on.
    """
    if not settings.REALTIME_ENABLED:
        return None

    listener = SupabaseRealtimeListener(WATCHED_TABLES)
    for table in WATCHED_TABLES:
        listener.subscribe(table, relay_table_change)

    try:
        await listener.start()
    except Exception as e:
        logger.warning(f"Realtime unavailable, relaying local writes via Redis only: {e}")
        return None

    if hasattr(rows, "local_echo"):
        rows.local_echo = False
    return listener


async def redis_pubsub_listener():
    """
    Background task that relays published table changes to WebSocket clients.
    """
    import redis.asyncio as aioredis

    logger.info("Starting Redis pub/sub listener for table changes")

    redis_client = None
    pubsub = None
    try:
        redis_client = aioredis.from_url(settings.REDIS_URL)
        pubsub = redis_client.pubsub()
        await pubsub.subscribe(WEBSOCKET_CHANNEL)

        async for message in pubsub.listen():
            if _shutdown_event and _shutdown_event.is_set():
                break

            if message["type"] == "message":
                try:
                    data = json.loads(message["data"])
                    table = data.get("table")

                    if table:
                        await websocket_manager.broadcast(table, data)

                except json.JSONDecodeError as e:
                    logger.warning(f"Invalid JSON in Redis message: {e}")
                except Exception as e:
                    logger.error(f"Error processing Redis message: {e}")

    except asyncio.CancelledError:
        logger.info("Redis pub/sub listener cancelled")
    except Exception as e:
        logger.error(f"Redis pub/sub listener error: {e}")
    finally:
        try:
            if pubsub is not None:
                await pubsub.unsubscribe(WEBSOCKET_CHANNEL)
            if redis_client is not None:
                await redis_client.close()
        except Exception as e:
            logger.debug(f"Redis listener cleanup failed: {e}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    - Startup: subscribe content tables to the change publisher, start the
      Redis listener, open the Supabase Realtime channel
    - Shutdown: close the channel, unsubscribe, stop the listener
    """
    global _redis_listener_task, _shutdown_event

    logger.info(f"Starting Council Portal API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")

    rows = get_supabase_backend().rows
    subscriptions = [rows.subscribe(table, publish_table_changed) for table in WATCHED_TABLES]

    _shutdown_event = asyncio.Event()
    _redis_listener_task = asyncio.create_task(redis_pubsub_listener())
    realtime = await start_realtime(rows)

    yield

    logger.info("Shutting down Council Portal API")

    if realtime is not None:
        await realtime.stop()

    for subscription in subscriptions:
        subscription.unsubscribe()

    if _shutdown_event:
        _shutdown_event.set()
    if _redis_listener_task:
        _redis_listener_task.cancel()
        try:
            await _redis_listener_task
        except asyncio.CancelledError:
            pass


# Create FastAPI application
app = FastAPI(
    title="Technical Council Portal API",
    description="""
## Technical Council Portal

Public content for the council website and the admin console that edits it.
Rows and media live in Supabase; this API classifies and serves them.

### Public pages

| Endpoint | Content |
|----------|---------|
| `/api/v1/home` | Latest gallery photos and the three newest active notices |
| `/api/v1/notices` | Notices archive |
| `/api/v1/events?view=upcoming` | Upcoming (or past) events |
| `/api/v1/team` | Administration and student council tiers |
| `/api/v1/gallery` | Photos and videos |
| `/api/v1/contact` | Contact details |

### Admin console

```bash
# 1. Sign in
curl -X POST http://localhost:8000/api/v1/admin/login \\
  -H "Content-Type: application/json" \\
  -d '{"email": "admin@example.com", "password": "..."}'

# 2. Switch to events and fill the draft
curl -X PUT http://localhost:8000/api/v1/admin/console/category \\
  -H "Authorization: Bearer $TOKEN" -d '{"category": "events"}'
curl -X PATCH http://localhost:8000/api/v1/admin/console/draft \\
  -H "Authorization: Bearer $TOKEN" -d '{"title": "Hackathon", "event_date": "2025-03-14"}'

# 3. Publish
curl -X POST http://localhost:8000/api/v1/admin/console/submit \\
  -H "Authorization: Bearer $TOKEN"
```
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Auth",
            "description": "Admin sign-in and sign-out",
        },
        {
            "name": "Public",
            "description": "Data behind the public pages",
        },
        {
            "name": "Admin",
            "description": "Create, upload and delete content",
        },
        {
            "name": "WebSocket",
            "description": "Live table change notices",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(CouncilPortalException)
async def handle_council_portal_exception(request: Request, exc: CouncilPortalException):
    """Handle custom portal exceptions."""
    return await council_portal_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

app.include_router(
    health.router,
    prefix="/api/v1",
    tags=["Health"]
)

app.include_router(
    public.router,
    prefix="/api/v1",
    tags=["Public"]
)

# Admin sign-in/out
app.include_router(
    auth_routes.router,
    prefix="/api/v1/admin",
    tags=["Auth"]
)

# Admin console
app.include_router(
    admin.router,
    prefix="/api/v1/admin",
    tags=["Admin"]
)

app.include_router(
    websocket_routes.router,
    tags=["WebSocket"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "Technical Council Portal API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/v1/health",
    }
