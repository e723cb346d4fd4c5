# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Council Portal API:
# - test_models.py: Row, draft and payload validation
# - test_classifiers.py: Team tiers and the event timeline split
# - test_storage_service.py / test_content_service.py: read paths and media
# - test_admin_console.py: the admin workflow against an in-memory backend
# - test_supabase_client.py: Supabase adapters with a mocked client
# - test_api.py: HTTP endpoints through FastAPI's TestClient
#
# Run tests with: pytest
# =============================================================================
