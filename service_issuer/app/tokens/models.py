"""
Token request and payload models.
"""

from typing import List, Optional, Union
from pydantic import BaseModel


class TokenIssueRequest(BaseModel):
    """Request model for token issuance."""
    email: Optional[str] = None


class TokenValidationRequest(BaseModel):
    """Request model for token validation."""
    token: Optional[str] = None


class TokenPayload(BaseModel):
    """Claims recovered from a verified token."""
    sub: Optional[str] = None
    email: Optional[str] = None
    iss: Optional[str] = None
    aud: Optional[Union[str, List[str]]] = None
    iat: Optional[int] = None
    exp: Optional[int] = None
