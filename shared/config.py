"""
Shared configuration management for the JWT email issuer.

Two layers live here:

- IssuerConfig: the immutable per-issuer value threaded through the token
  engine and the router. Build one per issuer; never mutate it.
- IssuerSettings: environment-driven service settings (pydantic-settings)
  used by the stand-alone service to build its IssuerConfig.
"""

import os
import re
from datetime import timedelta
from pathlib import Path
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

Algorithm = Literal["HS256", "HS384", "HS512"]

DEFAULT_ISSUER = "jwt-email-issuer"
DEFAULT_EXPIRES_IN = "15m"
DEFAULT_ALGORITHM = "HS256"
SECRET_FILENAME = ".jwt-secret"

_DURATION_RE = re.compile(r"^(?P<value>-?(?:\d+)?\.?\d+)\s*(?P<unit>[a-z]+)?$", re.IGNORECASE)

_UNIT_SECONDS = {
    "ms": 0.001, "msec": 0.001, "msecs": 0.001, "millisecond": 0.001, "milliseconds": 0.001,
    "s": 1, "sec": 1, "secs": 1, "second": 1, "seconds": 1,
    "m": 60, "min": 60, "mins": 60, "minute": 60, "minutes": 60,
    "h": 3600, "hr": 3600, "hrs": 3600, "hour": 3600, "hours": 3600,
    "d": 86400, "day": 86400, "days": 86400,
    "w": 604800, "week": 604800, "weeks": 604800,
    "y": 31557600, "yr": 31557600, "yrs": 31557600, "year": 31557600, "years": 31557600,
}

DurationLike = Union[timedelta, int, float, str]


def parse_duration(value: DurationLike) -> timedelta:
    """Normalize an expiry duration.

    Numbers are seconds. Strings use relative shorthand ("15m", "1h",
    "2 days"); a string without a unit is milliseconds.
    """
    if isinstance(value, timedelta):
        return value
    if isinstance(value, bool):
        raise ValueError("expiry duration must be a number, timedelta or shorthand string")
    if isinstance(value, (int, float)):
        return timedelta(seconds=value)

    match = _DURATION_RE.match(value.strip())
    if not match:
        raise ValueError(f"invalid expiry duration: {value!r}")

    unit = (match.group("unit") or "ms").lower()
    if unit not in _UNIT_SECONDS:
        raise ValueError(f"unknown duration unit: {unit!r}")

    return timedelta(seconds=float(match.group("value")) * _UNIT_SECONDS[unit])


def default_secret_path() -> Path:
    """Conventional secret location under the working directory."""
    return Path(os.getcwd()) / SECRET_FILENAME


class IssuerConfig(BaseModel):
    """Immutable per-issuer configuration."""

    model_config = ConfigDict(frozen=True)

    secret_path: Path = Field(default_factory=default_secret_path)
    issuer: str = DEFAULT_ISSUER
    audience: Optional[str] = None
    expires_in: timedelta = Field(default_factory=lambda: parse_duration(DEFAULT_EXPIRES_IN))
    algorithm: Algorithm = DEFAULT_ALGORITHM

    @field_validator("expires_in", mode="before")
    @classmethod
    def _normalize_expires_in(cls, value):
        duration = parse_duration(value)
        # exp is written in whole seconds
        if abs(duration.total_seconds()) < 1:
            raise ValueError("expiry duration must be at least one second")
        return duration


class IssuerSettings(BaseSettings):
    """Service settings read from JWT_ISSUER_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="JWT_ISSUER_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    env: str = "local"
    log_level: str = "info"

    # HTTP
    host: str = "0.0.0.0"
    port: int = 3000
    cors_origins: List[str] = Field(default_factory=list)

    # Issuer
    secret_path: Optional[Path] = None
    issuer: str = DEFAULT_ISSUER
    audience: Optional[str] = None
    expires_in: str = DEFAULT_EXPIRES_IN
    algorithm: Algorithm = DEFAULT_ALGORITHM

    @property
    def is_production(self) -> bool:
        """Production deployments mark the auth cookie Secure."""
        return self.env.lower() == "production"

    def to_issuer_config(self) -> IssuerConfig:
        """Build the immutable issuer configuration from these settings."""
        options = {
            "issuer": self.issuer,
            "audience": self.audience,
            "expires_in": self.expires_in,
            "algorithm": self.algorithm,
        }
        if self.secret_path is not None:
            options["secret_path"] = self.secret_path
        return IssuerConfig(**options)


def get_settings(**overrides) -> IssuerSettings:
    """Load settings from the environment, with explicit overrides."""
    return IssuerSettings(**overrides)
