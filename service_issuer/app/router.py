"""
Embeddable FastAPI router for the JWT email issuer.

Mount it into any FastAPI application::

    app.include_router(create_jwt_router(IssuerConfig(issuer="com.example")))

Routes (relative to the mount prefix):

- GET  /.well-known/healthz    plain-text liveness probe
- GET  /.well-known/jwt-issuer issuer metadata
- POST /.well-known/token      issue a token for {"email": ...}
- POST /.well-known/validate   verify {"token": ...}
- GET  /api/echo-token         diagnostic echo of the X-Email-Token header

The echo route performs NO verification. It exists for demos and debugging
only; never use it, or its response, as an authentication check.
"""

from typing import Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from shared.config import IssuerConfig, IssuerSettings, get_settings
from shared.errors import SecretStoreError
from shared.logging import get_logger
from shared.metrics import get_metrics_collector
from .keys.store import SecretStore
from .metadata import (
    ECHO_ENDPOINT,
    HEALTH_ENDPOINT,
    METADATA_ENDPOINT,
    TOKEN_ENDPOINT,
    VALIDATION_ENDPOINT,
    issuer_metadata,
)
from .tokens.engine import issue_token, verify_token
from .tokens.models import TokenIssueRequest, TokenValidationRequest

logger = get_logger("issuer.router")

AUTH_COOKIE_NAME = "auth_token"


def _error_message(exc: Exception, fallback: str) -> str:
    return str(exc) or fallback


def create_jwt_router(
    config: Optional[IssuerConfig] = None,
    settings: Optional[IssuerSettings] = None,
) -> APIRouter:
    """Build the issuer router.

    The secret is provisioned eagerly; a failure is logged and the router is
    still returned, so requests needing the secret fail individually later.
    """
    config = config or IssuerConfig()
    settings = settings or get_settings()
    secure_cookie = settings.is_production
    metrics = get_metrics_collector("issuer")

    try:
        SecretStore(config.secret_path).get_or_create()
    except SecretStoreError as e:
        logger.error(
            "Failed to ensure secret",
            path=str(config.secret_path),
            error=e.message
        )

    router = APIRouter()

    @router.get(HEALTH_ENDPOINT, response_class=PlainTextResponse)
    async def healthz():
        """Liveness probe."""
        return PlainTextResponse("ok")

    @router.get(METADATA_ENDPOINT)
    async def jwt_issuer():
        """Issuer metadata."""
        return issuer_metadata(config).model_dump()

    @router.post(TOKEN_ENDPOINT)
    async def token(body: Optional[TokenIssueRequest] = None):
        """Issue a token and set it as the auth_token cookie."""
        email = body.email if body is not None else None
        if not email:
            return JSONResponse(status_code=400, content={"error": "email required"})

        try:
            issued = await issue_token(email, config)
        except Exception as e:
            logger.error("Token issuance failed", email=email, error=str(e))
            metrics.record_token_issued("error")
            return JSONResponse(
                status_code=500,
                content={"error": _error_message(e, "failed to issue token")}
            )

        metrics.record_token_issued("ok")
        response = JSONResponse(content={"token": issued})
        response.set_cookie(
            AUTH_COOKIE_NAME,
            issued,
            path="/",
            httponly=True,
            samesite="Lax",
            secure=secure_cookie
        )
        return response

    @router.post(VALIDATION_ENDPOINT)
    async def validate(body: Optional[TokenValidationRequest] = None):
        """Verify a token and return its claims."""
        candidate = body.token if body is not None else None
        if not candidate:
            return JSONResponse(status_code=400, content={"error": "token required"})

        try:
            payload = await verify_token(candidate, config)
        except Exception as e:
            logger.warning("Token validation failed", error=str(e))
            metrics.record_token_validation("invalid")
            return JSONResponse(
                status_code=401,
                content={"valid": False, "error": _error_message(e, "invalid token")}
            )

        metrics.record_token_validation("valid")
        return {"valid": True, "payload": payload.model_dump(exclude_none=True)}

    @router.get(ECHO_ENDPOINT)
    async def echo_token(request: Request):
        """Echo X-Email-Token back. Diagnostic only: no verification."""
        return {
            "message": "Server received X-Email-Token successfully!",
            "receivedToken": request.headers.get("x-email-token"),
        }

    return router
