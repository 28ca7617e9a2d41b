"""
Token issuance and verification.
"""

import time
from typing import Any, Dict

import jwt
import pydantic

from shared.config import IssuerConfig
from shared.errors import ValidationError, VerificationError, TokenFormatError
from shared.logging import get_logger
from ..keys.store import SecretStore
from .models import TokenPayload

logger = get_logger("issuer.tokens")


async def issue_token(email: str, config: IssuerConfig) -> str:
    """Sign a token for ``email`` under ``config``.

    The first call against a fresh secret location creates the secret.
    """
    if not email:
        raise ValidationError("email is required")

    secret = await SecretStore(config.secret_path).ensure()

    now = int(time.time())
    payload: Dict[str, Any] = {
        "sub": email,
        "email": email,
        "iss": config.issuer,
    }
    if config.audience is not None:
        payload["aud"] = config.audience
    payload["iat"] = now
    payload["exp"] = now + int(config.expires_in.total_seconds())

    token = jwt.encode(payload, secret, algorithm=config.algorithm)

    logger.info(
        "Token issued",
        email=email,
        issuer=config.issuer,
        expires_at=payload["exp"]
    )

    return token


async def verify_token(token: str, config: IssuerConfig, ignore_expiration: bool = False) -> TokenPayload:
    """Verify ``token`` against ``config`` and return its claims.

    ``ignore_expiration`` skips the expiry check only; signature, algorithm,
    issuer and audience are still enforced. It is meant for grace-period
    checks by trusted callers and is not reachable from the HTTP routes.
    """
    secret = await SecretStore(config.secret_path).ensure()

    try:
        header = jwt.get_unverified_header(token)
    except jwt.DecodeError as e:
        raise TokenFormatError(str(e)) from e

    if str(header.get("alg", "")).lower() == "none":
        raise TokenFormatError("Unsigned tokens are not accepted")

    options = {"verify_exp": not ignore_expiration}
    if config.audience is None:
        options["verify_aud"] = False

    try:
        claims = jwt.decode(
            token,
            secret,
            algorithms=[config.algorithm],
            issuer=config.issuer,
            audience=config.audience,
            options=options
        )
    except jwt.InvalidSignatureError as e:
        raise VerificationError(str(e)) from e
    except jwt.DecodeError as e:
        raise TokenFormatError(str(e)) from e
    except jwt.InvalidTokenError as e:
        raise VerificationError(str(e)) from e

    if not isinstance(claims, dict):
        raise TokenFormatError()

    try:
        payload = TokenPayload.model_validate({
            key: claims.get(key) for key in ("sub", "email", "iss", "aud", "iat", "exp")
        })
    except pydantic.ValidationError as e:
        raise TokenFormatError("Unexpected token format", details={"errors": e.error_count()}) from e

    logger.debug("Token verified", sub=payload.sub, issuer=payload.iss)
    return payload
