"""
Get-or-create persistence for the signing secret.
"""

import asyncio
import os
import secrets
import tempfile
from pathlib import Path
from typing import Optional, Union

from shared.config import default_secret_path
from shared.errors import SecretStoreError
from shared.logging import get_logger

# Random bytes behind each secret; stored as unpadded base64url text
SECRET_BYTES = 64


class SecretStore:
    """File-backed store for the issuer's symmetric secret.

    The first caller to find no blob at ``secret_path`` generates one.
    Concurrent first-time callers race on publishing: each writes a private
    temporary file and hard-links it into place, so exactly one candidate
    wins and every caller returns the winner's text. A reader never sees a
    partially written blob.
    """

    def __init__(self, secret_path: Union[str, Path]):
        self.secret_path = Path(secret_path)
        self.logger = get_logger("issuer.secrets")

    def get_or_create(self) -> str:
        """Return the stored secret, creating it on first use."""
        try:
            return self._read()
        except FileNotFoundError:
            pass
        except OSError as e:
            raise SecretStoreError(
                f"Unable to read secret at {self.secret_path}: {e.strerror or e}",
                details={"path": str(self.secret_path)}
            ) from e

        return self._create()

    async def ensure(self) -> str:
        """Async variant of get_or_create; file I/O runs off the event loop."""
        return await asyncio.to_thread(self.get_or_create)

    def _read(self) -> str:
        return self.secret_path.read_text(encoding="utf-8")

    def _create(self) -> str:
        candidate = secrets.token_urlsafe(SECRET_BYTES)

        try:
            # mkstemp creates the file with mode 0600
            fd, tmp_name = tempfile.mkstemp(prefix=".jwt-secret-", dir=self.secret_path.parent)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(candidate)
                os.chmod(tmp_name, 0o600)
                os.link(tmp_name, self.secret_path)
            finally:
                os.unlink(tmp_name)
        except FileExistsError:
            self.logger.info("Secret created concurrently, using existing", path=str(self.secret_path))
            try:
                return self._read()
            except OSError as e:
                raise SecretStoreError(
                    f"Unable to read secret at {self.secret_path}: {e.strerror or e}",
                    details={"path": str(self.secret_path)}
                ) from e
        except OSError as e:
            raise SecretStoreError(
                f"Unable to create secret at {self.secret_path}: {e.strerror or e}",
                details={"path": str(self.secret_path)}
            ) from e

        self.logger.info("Secret created", path=str(self.secret_path))
        return candidate


async def ensure_secret(secret_path: Optional[Union[str, Path]] = None) -> str:
    """Get or create the secret at ``secret_path`` (default: ./.jwt-secret)."""
    store = SecretStore(secret_path if secret_path is not None else default_secret_path())
    return await store.ensure()
