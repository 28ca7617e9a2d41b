"""
Signing key storage package.

Holds the single symmetric signing secret as a base64url text blob in a
local file. The blob is created on first use with owner-only permissions
and returned verbatim afterwards. Rotation is out of scope.
"""

from .store import SecretStore, ensure_secret, SECRET_BYTES

__all__ = ["SecretStore", "ensure_secret", "SECRET_BYTES"]
