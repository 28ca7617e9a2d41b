"""
Issuer Service package for the JWT email issuer.

This package issues and validates short-lived HMAC-signed tokens keyed by
email address. It is intentionally small and focused:

- app.keys: Get-or-create persistence of the shared signing secret.
- app.tokens: Token issuance and verification (claims and policy).
- app.metadata: Static issuer descriptor for discovery.
- app.router: Embeddable FastAPI router exposing the well-known endpoints.
- app.main: Stand-alone service that mounts the router.

Design notes:
- Keep the package import side-effects minimal; importing must not touch
  the filesystem. Secret I/O happens in route handlers or at router
  construction.
- Use the shared/ utilities for configuration, logging, metrics and errors.
- Stateless: validity is decided by signature and claims alone; there is
  no session table.
"""
