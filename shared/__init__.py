"""
Shared utilities for the JWT email issuer.

This package aggregates common building blocks consumed by the issuer
service and the token client:

- config: Issuer configuration and service settings via pydantic-settings
- logging: Structured logging with request correlation
- metrics: Prometheus metrics helpers
- errors: Canonical error types and responses
- base_service: FastAPI service skeleton (health, metrics, error handlers)

Do not import from service_issuer or token_client into shared/.
"""
