"""
Token package.

Issues and verifies HMAC-signed JWTs whose subject is an email address.
Claim construction and validation policy (algorithm pinning, issuer and
audience checks, expiry) live in ``engine``; request/response shapes live
in ``models``.
"""

from .engine import issue_token, verify_token
from .models import TokenPayload, TokenIssueRequest, TokenValidationRequest

__all__ = [
    "issue_token",
    "verify_token",
    "TokenPayload",
    "TokenIssueRequest",
    "TokenValidationRequest",
]
