"""
Static issuer descriptor served at /.well-known/jwt-issuer.
"""

from typing import Optional
from pydantic import BaseModel

from shared.config import IssuerConfig

HEALTH_ENDPOINT = "/.well-known/healthz"
METADATA_ENDPOINT = "/.well-known/jwt-issuer"
TOKEN_ENDPOINT = "/.well-known/token"
VALIDATION_ENDPOINT = "/.well-known/validate"
ECHO_ENDPOINT = "/api/echo-token"


class IssuerMetadata(BaseModel):
    """Issuer discovery document."""
    issuer: str
    algorithm: str
    token_endpoint: str = TOKEN_ENDPOINT
    validation_endpoint: str = VALIDATION_ENDPOINT
    health_endpoint: str = HEALTH_ENDPOINT


def issuer_metadata(config: Optional[IssuerConfig] = None) -> IssuerMetadata:
    """Describe the issuer; a pure function of its configuration."""
    config = config or IssuerConfig()
    return IssuerMetadata(issuer=config.issuer, algorithm=config.algorithm)
