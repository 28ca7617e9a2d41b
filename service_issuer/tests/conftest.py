"""
Shared fixtures for issuer service tests.
"""

import pytest

from shared.config import IssuerConfig, IssuerSettings


@pytest.fixture
def secret_path(tmp_path):
    """Isolated secret location."""
    return tmp_path / ".jwt-secret"


@pytest.fixture
def config(secret_path):
    """Issuer config backed by a temporary secret."""
    return IssuerConfig(secret_path=secret_path)


@pytest.fixture
def local_settings():
    """Non-production deployment settings."""
    return IssuerSettings(env="local")


@pytest.fixture
def production_settings():
    """Production deployment settings."""
    return IssuerSettings(env="production")
