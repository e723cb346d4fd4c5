# =============================================================================
# tests/test_api.py - HTTP Endpoint Tests
# =============================================================================
# Exercises the FastAPI app through TestClient with the in-memory backend
# swapped in via dependency_overrides. The lifespan (Redis listener, table
# subscriptions) is not started because the client is not used as a
# context manager.
#
# Run with: pytest tests/test_api.py -v
# =============================================================================

import time
from uuid import UUID

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from app.auth.dependencies import get_current_user
from app.auth.models import AuthUser
from app.config import settings
from app.dependencies import get_backend
from app.main import app
from core.services.admin_console import console_registry

OPERATOR_ID = UUID("6f1c1d9e-3a7b-4c2d-9e8f-0a1b2c3d4e5f")
AUTH_HEADER = {"Authorization": "Bearer test-token"}
BUCKET = "Gallery"


@pytest.fixture
def client(backend):
    """TestClient bound to the in-memory backend, signed in as one operator."""
    app.dependency_overrides[get_backend] = lambda: backend
    app.dependency_overrides[get_current_user] = lambda: AuthUser(id=OPERATOR_ID, email="admin@council.test")
    yield TestClient(app)
    app.dependency_overrides.clear()
    console_registry.discard(str(OPERATOR_ID))


@pytest.fixture
def anonymous_client(backend):
    """TestClient with the real token check."""
    app.dependency_overrides[get_backend] = lambda: backend
    yield TestClient(app)
    app.dependency_overrides.clear()
    console_registry.discard(str(OPERATOR_ID))


def _token(sub: str = str(OPERATOR_ID), expires_in: int = 3600) -> str:
    return jwt.encode(
        {"sub": sub, "email": "admin@council.test", "aud": "authenticated", "exp": int(time.time()) + expires_in},
        settings.SUPABASE_JWT_SECRET,
        algorithm="HS256",
    )


# =============================================================================
# Health & Root
# =============================================================================

class TestHealth:
    """Tests for health endpoints."""

    def test_health(self, client):
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_ready(self, client):
        response = client.get("/api/v1/health/ready")

        assert response.json()["status"] == "ready"
        assert response.json()["checks"] == {"database": "healthy", "storage": "healthy"}

    def test_degraded_when_storage_fails(self, client, files):
        files.fail_on["list"] = "bucket missing"

        response = client.get("/api/v1/health/ready")

        assert response.json()["status"] == "degraded"
        assert response.json()["checks"]["storage"].startswith("unhealthy")

    def test_root(self, client):
        assert client.get("/").json()["health"] == "/api/v1/health"


# =============================================================================
# Public Pages
# =============================================================================

class TestPublicPages:
    """Tests for the public read endpoints."""

    def test_home(self, client, rows, files):
        rows.seed("notices", {"content": "Exam schedule", "is_active": True, "updated_at": "2025-02-01T00:00:00Z"})
        files.put(BUCKET, "EVENT PHOTOS/2000_abcdef_fest.jpg")

        body = client.get("/api/v1/home").json()

        assert body["notices"][0]["title"] == "Exam schedule"
        assert body["photos"][0]["label"] == "2000 abcdef fest"
        assert body["connection_error"] is False

    def test_home_degrades_instead_of_failing(self, client, rows):
        rows.fail_on["select"] = "connection refused"

        response = client.get("/api/v1/home")

        assert response.status_code == 200
        assert response.json()["connection_error"] is True

    def test_events_views(self, client, rows):
        rows.seed(
            "events",
            {"title": "Long ago", "event_date": "2000-01-01"},
            {"title": "Far future", "event_date": "2999-01-01"},
        )

        upcoming = client.get("/api/v1/events").json()
        past = client.get("/api/v1/events", params={"view": "past"}).json()

        assert [e["title"] for e in upcoming] == ["Far future"]
        assert [e["title"] for e in past] == ["Long ago"]

    def test_invalid_view(self, client):
        assert client.get("/api/v1/events", params={"view": "soon"}).status_code == 422

    def test_team(self, client, rows, sample_members):
        rows.seed("members", *sample_members)

        body = client.get("/api/v1/team").json()

        assert [m["name"] for m in body["administration"]] == ["Dr. Meera Rao", "Prof. Anil Verma"]
        assert [m["name"] for m in body["general_council"]] == ["Vikas Kumar"]

    def test_backend_failure_is_502(self, client, rows):
        rows.fail_on["select"] = "permission denied for table notices"

        response = client.get("/api/v1/notices")

        assert response.status_code == 502
        assert response.json()["code"] == "BACKEND_ERROR"
        assert response.json()["detail"] == "permission denied for table notices"

    def test_gallery(self, client, files):
        files.put(BUCKET, "EVENT PHOTOS/1_abcdef_clip.mp4")

        body = client.get("/api/v1/gallery").json()

        assert body[0]["is_video"] is True

    def test_contact(self, client):
        assert client.get("/api/v1/contact").json()["form_action"] == settings.CONTACT_FORM_ACTION


# =============================================================================
# Admin Auth
# =============================================================================

class TestAdminAuth:
    """Tests for sign-in, sign-out and token checks."""

    def test_login(self, anonymous_client):
        response = anonymous_client.post(
            "/api/v1/admin/login",
            json={"email": "admin@council.test", "password": "correct-horse"},
        )

        assert response.status_code == 200
        assert response.json()["access_token"] == "access-token"

    def test_login_rejected_shows_backend_message(self, anonymous_client):
        response = anonymous_client.post(
            "/api/v1/admin/login",
            json={"email": "admin@council.test", "password": "wrong"},
        )

        assert response.status_code == 401
        assert response.json()["code"] == "AUTH_ERROR"
        assert response.json()["detail"] == "Invalid login credentials"

    def test_login_with_auth_backend_down_is_bad_gateway(self, anonymous_client, auth):
        auth.fail_sign_in = "All connection attempts failed"

        response = anonymous_client.post(
            "/api/v1/admin/login",
            json={"email": "admin@council.test", "password": "correct-horse"},
        )

        assert response.status_code == 502
        assert response.json()["code"] == "BACKEND_ERROR"
        assert response.json()["detail"] == "All connection attempts failed"

    def test_console_requires_token(self, anonymous_client):
        response = anonymous_client.get("/api/v1/admin/console")

        assert response.status_code in (401, 403)

    def test_console_rejects_bad_token(self, anonymous_client):
        response = anonymous_client.get(
            "/api/v1/admin/console", headers={"Authorization": "Bearer not-a-jwt"}
        )

        assert response.status_code == 401

    def test_console_accepts_supabase_token(self, anonymous_client):
        response = anonymous_client.get(
            "/api/v1/admin/console", headers={"Authorization": f"Bearer {_token()}"}
        )

        assert response.status_code == 200
        assert response.json()["active_category"] == "notices"

    def test_expired_token(self, anonymous_client):
        response = anonymous_client.get(
            "/api/v1/admin/console", headers={"Authorization": f"Bearer {_token(expires_in=-60)}"}
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Token has expired"

    def test_logout_drops_console(self, client, auth):
        client.put("/api/v1/admin/console/category", json={"category": "events"}, headers=AUTH_HEADER)
        assert len(console_registry) >= 1

        response = client.post("/api/v1/admin/logout", headers=AUTH_HEADER)

        assert response.status_code == 200
        assert auth.signed_out == ["test-token"]
        assert client.get("/api/v1/admin/console", headers=AUTH_HEADER).json()["active_category"] == "notices"


# =============================================================================
# Admin Console
# =============================================================================

class TestAdminConsole:
    """Tests for the console endpoints."""

    def test_create_event_flow(self, client, rows):
        # Arrange: Switch to events and fill the form
        client.put("/api/v1/admin/console/category", json={"category": "events"}, headers=AUTH_HEADER)
        client.patch(
            "/api/v1/admin/console/draft",
            json={"title": "Hackathon", "event_date": "2025-03-14"},
            headers=AUTH_HEADER,
        )

        # Act
        response = client.post("/api/v1/admin/console/submit", headers=AUTH_HEADER)

        # Assert
        assert response.status_code == 200
        body = response.json()
        assert body["row"]["title"] == "Hackathon"
        assert body["state"]["drafts"]["events"]["title"] == ""
        assert len(rows.tables["events"]) == 1

    def test_incomplete_draft_is_422(self, client):
        response = client.post("/api/v1/admin/console/submit", headers=AUTH_HEADER)

        assert response.status_code == 422
        assert response.json()["code"] == "INVALID_DRAFT"

    def test_failed_submit_returns_raw_message(self, client, rows):
        client.patch("/api/v1/admin/console/draft", json={"content": "Exam schedule"}, headers=AUTH_HEADER)
        rows.fail_on["insert"] = "new row violates row-level security policy"

        response = client.post("/api/v1/admin/console/submit", headers=AUTH_HEADER)

        assert response.status_code == 502
        assert response.json()["detail"] == "new row violates row-level security policy"
        state = client.get("/api/v1/admin/console", headers=AUTH_HEADER).json()
        assert state["drafts"]["notices"]["content"] == "Exam schedule"
        assert state["alert"] == "new row violates row-level security policy"

    def test_upload_member_image(self, client, files):
        client.put("/api/v1/admin/console/category", json={"category": "members"}, headers=AUTH_HEADER)

        response = client.post(
            "/api/v1/admin/console/upload",
            files=[("files", ("Asha Singh.jpg", b"img", "image/jpeg"))],
            headers=AUTH_HEADER,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["uploaded"][0]["path"].startswith("TEAM_PROFILE/")
        assert body["state"]["drafts"]["members"]["image_url"] == body["uploaded"][0]["url"]
        assert len(files.paths(BUCKET)) == 1

    def test_upload_too_large(self, client, files, monkeypatch):
        monkeypatch.setattr(settings, "MAX_UPLOAD_SIZE_MB", 1)
        client.put("/api/v1/admin/console/category", json={"category": "gallery"}, headers=AUTH_HEADER)

        response = client.post(
            "/api/v1/admin/console/upload",
            files=[("files", ("big.jpg", b"x" * (1024 * 1024 + 1), "image/jpeg"))],
            headers=AUTH_HEADER,
        )

        assert response.status_code == 413
        assert files.paths(BUCKET) == []

    def test_delete_needs_confirm(self, client, rows):
        rows.seed("notices", {"content": "Keep"})

        response = client.delete("/api/v1/admin/console/items/1", headers=AUTH_HEADER)

        assert response.status_code == 409
        assert response.json()["code"] == "CONFIRMATION_REQUIRED"
        assert len(rows.tables["notices"]) == 1

    def test_delete_confirmed(self, client, rows):
        rows.seed("notices", {"content": "Remove"})

        response = client.delete(
            "/api/v1/admin/console/items/1", params={"confirm": "true"}, headers=AUTH_HEADER
        )

        assert response.status_code == 200
        assert rows.tables["notices"] == []

    def test_refresh_and_dismiss_alert(self, client, rows):
        rows.fail_on["select"] = "timeout"
        assert client.post("/api/v1/admin/console/refresh", headers=AUTH_HEADER).status_code == 502

        rows.fail_on.clear()
        state = client.delete("/api/v1/admin/console/alert", headers=AUTH_HEADER).json()

        assert state["alert"] is None
