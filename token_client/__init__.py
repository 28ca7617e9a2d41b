"""
Client-side token acquisition for the JWT email issuer.

- hook: TokenHook, an asyncio state holder that requests tokens from the
  issuer's token endpoint and renews them shortly before they expire.
- decode: Unverified expiry extraction used only for refresh scheduling.

Nothing in this package verifies signatures. Trust decisions belong to the
issuer's validate endpoint.
"""

from .decode import decode_expiry
from .hook import TokenHook, TokenState, DEFAULT_REFRESH_THRESHOLD, DEFAULT_TOKEN_PATH

__all__ = [
    "TokenHook",
    "TokenState",
    "decode_expiry",
    "DEFAULT_REFRESH_THRESHOLD",
    "DEFAULT_TOKEN_PATH",
]
