# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - public.py: Home, notices, events, team, gallery and contact data
# - admin.py: Admin console (drafts, create, upload, delete)
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import public
from . import admin

__all__ = [
    "health",
    "public",
    "admin",
]
