# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the portal's logic:
# - backend.py: interfaces of the external row/file/auth backend
# - classifiers.py: team tiers and the events timeline
# - models/: Pydantic schemas for rows, drafts and page payloads
# - services/: content reads, media storage, admin console workflow
#
# Code in this package should NOT import from FastAPI routers.
# =============================================================================
