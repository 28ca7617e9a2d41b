"""
Tests for the embeddable issuer router.
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock, MagicMock, patch

from service_issuer.app.router import create_jwt_router
from service_issuer.app.tokens.models import TokenPayload
from shared.config import IssuerConfig
from shared.errors import SecretStoreError, VerificationError


def _client(config, settings, prefix=""):
    app = FastAPI()
    app.include_router(create_jwt_router(config, settings), prefix=prefix)
    return TestClient(app)


@pytest.fixture
def client(config, local_settings):
    """Test client over a router with a temporary secret."""
    return _client(config, local_settings)


class TestRouterConstruction:
    """Test cases for router construction."""

    def test_ensures_secret_eagerly(self, config, local_settings, secret_path):
        """Test the secret is provisioned when the router is built."""
        create_jwt_router(config, local_settings)

        assert secret_path.exists()

    def test_secret_failure_does_not_abort(self, config, local_settings):
        """Test a provisioning failure is logged and the router still mounts."""
        store = MagicMock()
        store.get_or_create.side_effect = SecretStoreError("disk on fire")

        with patch("service_issuer.app.router.SecretStore", return_value=store) as store_cls:
            router = create_jwt_router(config, local_settings)

        store_cls.assert_called_once_with(config.secret_path)
        store.get_or_create.assert_called_once()
        assert len(router.routes) == 5


class TestHealthAndMetadata:
    """Test cases for the read-only routes."""

    def test_health(self, client):
        """Test the health endpoint returns plain ok."""
        response = client.get("/.well-known/healthz")

        assert response.status_code == 200
        assert response.text == "ok"
        assert response.headers["content-type"].startswith("text/plain")

    def test_metadata(self, secret_path, local_settings):
        """Test the metadata endpoint reflects the configuration."""
        config = IssuerConfig(secret_path=secret_path, issuer="custom", algorithm="HS512")
        response = _client(config, local_settings).get("/.well-known/jwt-issuer")

        assert response.status_code == 200
        assert response.json() == {
            "issuer": "custom",
            "algorithm": "HS512",
            "token_endpoint": "/.well-known/token",
            "validation_endpoint": "/.well-known/validate",
            "health_endpoint": "/.well-known/healthz",
        }

    def test_mounts_under_prefix(self, config, local_settings):
        """Test the host application chooses the prefix."""
        client = _client(config, local_settings, prefix="/auth")

        assert client.get("/auth/.well-known/healthz").text == "ok"
        assert client.get("/.well-known/healthz").status_code == 404


class TestTokenRoute:
    """Test cases for the issuance route."""

    def test_missing_email(self, client):
        """Test an empty body yields 400."""
        response = client.post("/.well-known/token", json={})

        assert response.status_code == 400
        assert response.json() == {"error": "email required"}

    def test_no_body(self, client):
        """Test a missing body yields 400."""
        response = client.post("/.well-known/token")

        assert response.status_code == 400
        assert response.json() == {"error": "email required"}

    def test_issues_token_and_cookie(self, config, client):
        """Test issuance returns the token and sets the auth cookie."""
        with patch(
            "service_issuer.app.router.issue_token",
            new=AsyncMock(return_value="token-123")
        ) as issue:
            response = client.post("/.well-known/token", json={"email": "user@example.com"})

        issue.assert_awaited_once_with("user@example.com", config)
        assert response.status_code == 200
        assert response.json() == {"token": "token-123"}

        assert response.headers["set-cookie"] == "auth_token=token-123; HttpOnly; Path=/; SameSite=Lax"

    def test_secure_cookie_in_production(self, config, production_settings):
        """Test the cookie is marked Secure in production."""
        client = _client(config, production_settings)

        with patch(
            "service_issuer.app.router.issue_token",
            new=AsyncMock(return_value="secure-token")
        ):
            response = client.post("/.well-known/token", json={"email": "secure@example.com"})

        cookie = response.headers["set-cookie"]
        assert "auth_token=secure-token" in cookie
        assert "Secure" in cookie

    def test_real_token_is_issued(self, client):
        """Test the router issues a verifiable token end to end."""
        response = client.post("/.well-known/token", json={"email": "a@b.com"})

        assert response.status_code == 200
        token = response.json()["token"]
        assert f"auth_token={token}" in response.headers["set-cookie"]

    def test_engine_failure(self, client):
        """Test an engine failure maps to 500 with the message."""
        with patch(
            "service_issuer.app.router.issue_token",
            new=AsyncMock(side_effect=SecretStoreError("Unable to create secret"))
        ):
            response = client.post("/.well-known/token", json={"email": "user@example.com"})

        assert response.status_code == 500
        assert response.json() == {"error": "Unable to create secret"}
        assert "set-cookie" not in response.headers

    def test_unwritable_secret(self, tmp_path, local_settings):
        """Test startup failure surfaces per request instead of crashing."""
        config = IssuerConfig(secret_path=tmp_path / "missing" / ".jwt-secret")
        client = _client(config, local_settings)

        response = client.post("/.well-known/token", json={"email": "user@example.com"})

        assert response.status_code == 500
        assert "Unable to create secret" in response.json()["error"]


class TestValidateRoute:
    """Test cases for the validation route."""

    def test_missing_token(self, client):
        """Test an empty body yields 400."""
        response = client.post("/.well-known/validate", json={})

        assert response.status_code == 400
        assert response.json() == {"error": "token required"}

    def test_valid_token(self, client):
        """Test a freshly issued token validates."""
        token = client.post("/.well-known/token", json={"email": "a@b.com"}).json()["token"]

        response = client.post("/.well-known/validate", json={"token": token})

        assert response.status_code == 200
        data = response.json()
        assert data["valid"] is True
        assert data["payload"]["sub"] == "a@b.com"
        assert data["payload"]["email"] == "a@b.com"
        assert data["payload"]["iss"] == "jwt-email-issuer"
        assert "aud" not in data["payload"]

    def test_passes_payload_through(self, config, client):
        """Test the engine payload is returned as-is."""
        payload = TokenPayload(sub="user@example.com", email="user@example.com")

        with patch(
            "service_issuer.app.router.verify_token",
            new=AsyncMock(return_value=payload)
        ) as verify:
            response = client.post("/.well-known/validate", json={"token": "abc"})

        verify.assert_awaited_once_with("abc", config)
        assert response.json() == {
            "valid": True,
            "payload": {"sub": "user@example.com", "email": "user@example.com"},
        }

    def test_unparseable_token(self, client):
        """Test garbage yields 401 with the error message."""
        response = client.post("/.well-known/validate", json={"token": "not-a-token"})

        assert response.status_code == 401
        data = response.json()
        assert data["valid"] is False
        assert data["error"]

    def test_verification_failure_message(self, client):
        """Test verification failures pass their message through."""
        with patch(
            "service_issuer.app.router.verify_token",
            new=AsyncMock(side_effect=VerificationError("Signature has expired"))
        ):
            response = client.post("/.well-known/validate", json={"token": "abc"})

        assert response.status_code == 401
        assert response.json() == {"valid": False, "error": "Signature has expired"}

    def test_foreign_issuer_rejected(self, secret_path, local_settings):
        """Test a token from another issuer configuration fails."""
        issuing = _client(IssuerConfig(secret_path=secret_path, issuer="a"), local_settings)
        validating = _client(IssuerConfig(secret_path=secret_path, issuer="b"), local_settings)
        token = issuing.post("/.well-known/token", json={"email": "a@b.com"}).json()["token"]

        response = validating.post("/.well-known/validate", json={"token": token})

        assert response.status_code == 401
        assert response.json()["valid"] is False


class TestEchoRoute:
    """Test cases for the diagnostic echo route."""

    def test_echoes_header(self, client):
        """Test the header value is echoed back without verification."""
        response = client.get("/api/echo-token", headers={"X-Email-Token": "anything-at-all"})

        assert response.status_code == 200
        assert response.json() == {
            "message": "Server received X-Email-Token successfully!",
            "receivedToken": "anything-at-all",
        }

    def test_missing_header(self, client):
        """Test a missing header echoes null."""
        response = client.get("/api/echo-token")

        assert response.json()["receivedToken"] is None
