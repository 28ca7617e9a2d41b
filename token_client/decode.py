"""
Unverified token inspection.
"""

from typing import Optional

import jwt


def decode_expiry(token: str) -> Optional[float]:
    """Read the exp claim without checking the signature.

    Returns None when the token is malformed or carries no numeric exp.
    Use the result for scheduling only, never for trust decisions.
    """
    try:
        claims = jwt.decode(token, options={"verify_signature": False})
    except jwt.PyJWTError:
        return None

    exp = claims.get("exp")
    if isinstance(exp, bool) or not isinstance(exp, (int, float)):
        return None
    return exp
