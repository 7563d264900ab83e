# =============================================================================
# tests/test_api.py - HTTP Endpoint Tests
# =============================================================================
# Exercises the FastAPI layer with TestClient:
# - GET /api/cloudinary-signed-url in both modes
# - The shared error envelope (400 / 401 / 405 / 500 / 503)
# - Authentication through the (mocked) Supabase client
# - Health endpoints
#
# Supabase is never contacted; verify_access_token is patched.
# =============================================================================

from unittest.mock import MagicMock, patch
from urllib.parse import parse_qs, urlsplit

import pytest

from app.dependencies import get_cloudinary_config
from app.main import app
from core.models import CloudinaryConfig
from lib.supabase_client import SupabaseClient, SupabaseClientError

from tests.conftest import CDN_DOMAIN, SECRET

ENDPOINT = "/api/cloudinary-signed-url"
REFERENCE_URL = "https://res.example-cdn.com/acme/image/authenticated/v123/folder/photo.jpg"


# =============================================================================
# Signed URL Endpoint
# =============================================================================

class TestSignedUrlEndpoint:
    """Tests for the happy paths."""

    def test_delivery_signing(self, api_client):
        response = api_client.get(ENDPOINT, params={"url": REFERENCE_URL, "download": "1"})

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "signedUrl": (
                "https://res.example-cdn.com/acme/image/authenticated/"
                "s--uYoKjLDL--/fl_attachment/folder/photo.jpg"
            ),
        }

    @pytest.mark.parametrize("flag", ["true", "TRUE", "1"])
    def test_download_flag_spellings(self, api_client, flag):
        response = api_client.get(ENDPOINT, params={"url": REFERENCE_URL, "download": flag})

        assert "/fl_attachment/" in response.json()["signedUrl"]

    @pytest.mark.parametrize("flag", ["0", "false", "yes", ""])
    def test_download_flag_off(self, api_client, flag):
        response = api_client.get(ENDPOINT, params={"url": REFERENCE_URL, "download": flag})

        assert response.status_code == 200
        assert "fl_attachment" not in response.json()["signedUrl"]

    def test_download_api(self, api_client):
        response = api_client.get(
            ENDPOINT,
            params={"url": REFERENCE_URL, "download_api": "true", "filename": "Cover Art.jpg"},
        )

        assert response.status_code == 200
        signed = response.json()["signedUrl"]
        parts = urlsplit(signed)
        query = parse_qs(parts.query)

        assert parts.netloc == "api.cloudinary.com"
        assert parts.path == "/v1_1/acme/image/download"
        assert query["public_id"] == ["folder/photo"]
        assert query["target_filename"] == ["Cover Art.jpg"]
        assert query["attachment"] == ["true"]
        assert len(query["signature"][0]) == 40
        assert SECRET not in signed


class TestSignedUrlErrors:
    """Tests for the error envelope."""

    def test_missing_url(self, api_client):
        response = api_client.get(ENDPOINT)

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "Missing url"
        assert body["code"] == "MISSING_URL"

    def test_host_mismatch(self, api_client):
        response = api_client.get(ENDPOINT, params={"url": "https://res.evil.com/acme/image/private/a.jpg"})

        assert response.status_code == 400
        assert response.json()["code"] == "HOST_MISMATCH"

    def test_upload_rejected_in_delivery_mode(self, api_client):
        response = api_client.get(
            ENDPOINT,
            params={"url": "https://res.example-cdn.com/acme/image/upload/v1/a.jpg"},
        )

        assert response.status_code == 400
        assert response.json()["code"] == "UNSUPPORTED_DELIVERY_TYPE"

    def test_wrong_tenant(self, api_client):
        response = api_client.get(
            ENDPOINT,
            params={"url": "https://res.example-cdn.com/labelB/image/private/a.jpg"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Cloud name mismatch"

    def test_missing_api_key_is_server_error(self, api_client):
        app.dependency_overrides[get_cloudinary_config] = lambda: CloudinaryConfig(
            cloud_name="acme", api_secret=SECRET, cdn_domain=CDN_DOMAIN,
        )

        response = api_client.get(ENDPOINT, params={"url": REFERENCE_URL, "download_api": "1"})

        assert response.status_code == 500
        body = response.json()
        assert body["code"] == "SERVER_MISCONFIGURED"
        assert body["error"] == "Missing env: CLOUDINARY_API_KEY"

    def test_error_bodies_never_contain_secret(self, api_client):
        for url in (
            "ftp://res.example-cdn.com/acme/image/private/a.jpg",
            "https://res.example-cdn.com/acme",
            "https://res.example-cdn.com/acme/image/private/s--abcdefgh--",
        ):
            response = api_client.get(ENDPOINT, params={"url": url})

            assert response.status_code == 400
            assert SECRET not in response.text

    def test_documented_error_body_matches_details(self, api_client):
        response = api_client.get(
            ENDPOINT,
            params={"url": "https://res.example-cdn.com/acme/image/upload/v1/a.jpg"},
        )
        schema = api_client.get("/openapi.json").json()["components"]["schemas"]["ErrorResponse"]

        assert "details" in response.json()
        assert set(response.json()) <= set(schema["properties"])

    def test_post_not_allowed(self, api_client):
        response = api_client.post(ENDPOINT, params={"url": REFERENCE_URL})

        assert response.status_code == 405
        assert response.json()["success"] is False

    def test_unknown_route(self, api_client):
        response = api_client.get("/api/nope")

        assert response.status_code == 404
        assert response.json()["code"] == "HTTP_404"


# =============================================================================
# Authentication
# =============================================================================

class TestAuthentication:
    """Tests for the Supabase-backed auth dependency."""

    def test_missing_token(self, anonymous_client):
        response = anonymous_client.get(ENDPOINT, params={"url": REFERENCE_URL})

        assert response.status_code == 401
        assert response.json()["error"] == "Missing Authorization"
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_non_bearer_scheme(self, anonymous_client):
        response = anonymous_client.get(
            ENDPOINT,
            params={"url": REFERENCE_URL},
            headers={"Authorization": "Basic dXNlcjpwYXNz"},
        )

        assert response.status_code == 401

    def test_rejected_token(self, anonymous_client):
        with patch.object(SupabaseClient, "verify_access_token", return_value=None) as verify:
            response = anonymous_client.get(
                ENDPOINT,
                params={"url": REFERENCE_URL},
                headers={"Authorization": "Bearer expired-token"},
            )

        verify.assert_called_once_with("expired-token")
        assert response.status_code == 401
        assert response.json()["error"] == "Unauthorized"

    def test_auth_runs_before_validation(self, anonymous_client):
        """An unauthenticated caller learns nothing about the URL."""
        response = anonymous_client.get(ENDPOINT, params={"url": "https://res.evil.com/x/y/z/a.jpg"})

        assert response.status_code == 401

    def test_accepted_token(self, anonymous_client):
        user = {"id": "550e8400-e29b-41d4-a716-446655440000", "email": "artist@example.com"}

        with patch.object(SupabaseClient, "verify_access_token", return_value=user):
            response = anonymous_client.get(
                ENDPOINT,
                params={"url": REFERENCE_URL},
                headers={"Authorization": "Bearer good-token"},
            )

        assert response.status_code == 200
        assert response.json()["success"] is True

    def test_supabase_unreachable(self, anonymous_client):
        error = SupabaseClientError("boom", code="AUTH_REQUEST_FAILED")

        with patch.object(SupabaseClient, "verify_access_token", side_effect=error):
            response = anonymous_client.get(
                ENDPOINT,
                params={"url": REFERENCE_URL},
                headers={"Authorization": "Bearer good-token"},
            )

        assert response.status_code == 503
        assert response.json()["code"] == "AUTH_REQUEST_FAILED"

    def test_supabase_not_configured(self, anonymous_client):
        unconfigured = MagicMock(supabase_configured=False)

        with patch("app.auth.dependencies.settings", unconfigured):
            response = anonymous_client.get(
                ENDPOINT,
                params={"url": REFERENCE_URL},
                headers={"Authorization": "Bearer good-token"},
            )

        assert response.status_code == 503
        assert response.json()["code"] == "AUTH_NOT_CONFIGURED"


class TestSupabaseClient:
    """Tests for the token verification wrapper."""

    @pytest.fixture(autouse=True)
    def _reset(self):
        SupabaseClient.reset()
        yield
        SupabaseClient.reset()

    def test_returns_user(self):
        fake = MagicMock()
        fake.auth.get_user.return_value = MagicMock(
            user=MagicMock(id="550e8400-e29b-41d4-a716-446655440000", email="a@example.com")
        )

        with patch.object(SupabaseClient, "get_client", return_value=fake):
            user = SupabaseClient.verify_access_token("tok")

        fake.auth.get_user.assert_called_once_with("tok")
        assert user == {"id": "550e8400-e29b-41d4-a716-446655440000", "email": "a@example.com"}

    def test_no_user_means_rejected(self):
        fake = MagicMock()
        fake.auth.get_user.return_value = MagicMock(user=None)

        with patch.object(SupabaseClient, "get_client", return_value=fake):
            assert SupabaseClient.verify_access_token("tok") is None

    def test_transport_error_is_wrapped(self):
        fake = MagicMock()
        fake.auth.get_user.side_effect = RuntimeError("connection refused")

        with patch.object(SupabaseClient, "get_client", return_value=fake):
            with pytest.raises(SupabaseClientError) as exc_info:
                SupabaseClient.verify_access_token("tok")

        assert exc_info.value.code == "AUTH_REQUEST_FAILED"

    def test_client_is_created_once(self):
        with patch("lib.supabase_client.create_client", return_value=MagicMock()) as create:
            first = SupabaseClient.get_client()
            second = SupabaseClient.get_client()

        assert first is second
        create.assert_called_once_with("https://test-project.supabase.co", "test-service-key")

    def test_anon_key_client_checks_caller_token(self):
        """Without a service key the anon client resolves the caller's own token."""
        anon_only = MagicMock(
            SUPABASE_URL="https://test-project.supabase.co",
            SUPABASE_SERVICE_KEY="",
            SUPABASE_ANON_KEY="test-anon-key",
        )
        fake = MagicMock()
        fake.auth.get_user.return_value = MagicMock(user=MagicMock(id="u-1", email=None))

        with patch("lib.supabase_client.settings", anon_only), \
                patch("lib.supabase_client.create_client", return_value=fake) as create:
            user = SupabaseClient.verify_access_token("caller-token")

        create.assert_called_once_with("https://test-project.supabase.co", "test-anon-key")
        fake.auth.get_user.assert_called_once_with("caller-token")
        assert user == {"id": "u-1", "email": None}


# =============================================================================
# Health Endpoints
# =============================================================================

class TestHealth:
    """Tests for health and readiness checks."""

    def test_health(self, api_client):
        response = api_client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_live(self, api_client):
        assert api_client.get("/api/v1/health/live").json()["status"] == "alive"

    def test_ready_reports_presence_only(self, api_client):
        response = api_client.get("/api/v1/health/ready")

        body = response.json()
        assert body["status"] == "ready"
        assert body["checks"] == {
            "cloudinary_delivery": "configured",
            "cloudinary_download_api": "configured",
            "auth": "configured",
        }
        assert "env-secret-value" not in response.text

    def test_root(self, api_client):
        assert api_client.get("/").json()["name"] == "Media Signer API"
