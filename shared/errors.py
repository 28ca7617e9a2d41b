"""
Shared error handling for the JWT email issuer.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response format."""

    code: str
    message: str
    details: Dict[str, Any] = {}


class IssuerException(Exception):
    """Base exception for issuer components."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            code=self.code,
            message=self.message,
            details=self.details
        )


class SecretStoreError(IssuerException):
    """Secret blob could not be read or written."""

    def __init__(self, message: str = "Secret store unavailable", details: Optional[Dict[str, Any]] = None):
        super().__init__("SECRET_STORE_ERROR", message, details)


class ValidationError(IssuerException):
    """Validation-related errors."""

    def __init__(self, message: str = "Validation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("VALIDATION_ERROR", message, details)


class VerificationError(IssuerException):
    """Signature, claim or expiry mismatch."""

    def __init__(self, message: str = "Token verification failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("VERIFICATION_ERROR", message, details)


class TokenFormatError(VerificationError):
    """Structurally invalid token."""

    def __init__(self, message: str = "Unexpected token format", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.code = "TOKEN_FORMAT_ERROR"


class TokenRequestError(IssuerException):
    """Token endpoint call failed on the client side."""

    def __init__(self, message: str = "Failed to fetch token", details: Optional[Dict[str, Any]] = None):
        super().__init__("TOKEN_REQUEST_ERROR", message, details)
