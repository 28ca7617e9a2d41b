"""
Stand-alone issuer service.
"""

from typing import Dict, Optional

from shared.base_service import BaseService
from shared.config import IssuerSettings
from shared.errors import SecretStoreError
from .keys.store import SecretStore
from .router import create_jwt_router


class IssuerService(BaseService):
    """Issuer service implementation."""

    def __init__(self, settings: Optional[IssuerSettings] = None):
        super().__init__("issuer", settings)
        self.issuer_config = self.config.to_issuer_config()

        self.app.include_router(create_jwt_router(self.issuer_config, self.config))
        self._setup_issuer_routes()

        self.logger.info(
            "Issuer service configured",
            issuer=self.issuer_config.issuer,
            audience=self.issuer_config.audience,
            algorithm=self.issuer_config.algorithm,
            expires_in_seconds=self.issuer_config.expires_in.total_seconds(),
            env=self.config.env
        )

    def _setup_issuer_routes(self):
        """Set up issuer-specific routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": "issuer",
                "message": "JWT email issuer",
                "issuer": self.issuer_config.issuer,
                "version": "1.0.0"
            }

    async def _check_dependencies(self) -> Dict[str, str]:
        """Check that the signing secret is readable."""
        dependencies = {}

        try:
            await SecretStore(self.issuer_config.secret_path).ensure()
            dependencies["secret"] = "ok"
        except SecretStoreError as e:
            self.logger.warning("Secret unavailable", error=e.message)
            dependencies["secret"] = "error"

        return dependencies


def create_app(settings: Optional[IssuerSettings] = None):
    """Create FastAPI application."""
    service = IssuerService(settings)
    return service.app


if __name__ == "__main__":
    service = IssuerService()
    service.run()
