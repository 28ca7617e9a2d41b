"""
Token acquisition and proactive renewal.
"""

import asyncio
import contextlib
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional

import httpx

from shared.errors import TokenRequestError
from shared.logging import get_logger
from .decode import decode_expiry

DEFAULT_TOKEN_PATH = "/.well-known/token"
DEFAULT_REFRESH_THRESHOLD = 60


@dataclass(frozen=True)
class TokenState:
    """Snapshot of the hook's observable state."""
    token: Optional[str] = None
    loading: bool = False
    error: Optional[str] = None


Listener = Callable[[TokenState], None]


class TokenHook:
    """Requests tokens for one email and keeps them fresh.

    States: idle (no token), loading, holding a token, or idle with an
    error. Every successful fetch arms a single refresh task that fires
    ``refresh_threshold`` seconds before the token's exp claim; a newer
    token or ``aclose()`` cancels it, so at most one refresh is pending.

    Concurrent ``fetch_token()`` calls are not deduplicated; whichever
    response resolves last sets the state.
    """

    def __init__(
        self,
        server_url: str,
        email: str,
        token_path: str = DEFAULT_TOKEN_PATH,
        with_credentials: bool = True,
        refresh_threshold: float = DEFAULT_REFRESH_THRESHOLD,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10.0,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.url = str(httpx.URL(server_url).join(token_path))
        self.email = email
        self.with_credentials = with_credentials
        self.refresh_threshold = refresh_threshold
        self.logger = get_logger("token_client.hook")

        # The client's cookie jar carries auth_token between requests
        self._client = httpx.AsyncClient(transport=transport, timeout=timeout)
        self._clock = clock
        self._sleep = sleep

        self._state = TokenState()
        self._listeners: List[Listener] = []
        self._refresh_task: Optional[asyncio.Task] = None
        self._closed = False

    @property
    def token(self) -> Optional[str]:
        return self._state.token

    @property
    def loading(self) -> bool:
        return self._state.loading

    @property
    def error(self) -> Optional[str]:
        return self._state.error

    @property
    def state(self) -> TokenState:
        return self._state

    @property
    def refresh_pending(self) -> bool:
        """True while a refresh is armed or its fetch is in flight."""
        return self._refresh_task is not None and not self._refresh_task.done()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` on every state change; returns an unsubscribe."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def fetch_token(self) -> str:
        """Request a new token.

        Failures are recorded in ``error`` and re-raised to the caller.
        """
        self._update(loading=True, error=None)

        token = None
        error = None
        try:
            token = await self._request_token()
        except Exception as e:
            error = str(e) or "Failed to fetch token"
            self.logger.warning("Token fetch failed", url=self.url, error=error)
            raise
        finally:
            # Also runs on cancellation, so loading never sticks
            if token is not None:
                self._update(loading=False, token=token)
            else:
                self._update(loading=False, error=error)

        self._schedule_refresh(token)
        return token

    async def aclose(self):
        """Cancel any pending refresh and close the transport."""
        self._closed = True
        task = self._refresh_task
        self._refresh_task = None
        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        await self._client.aclose()

    async def __aenter__(self) -> "TokenHook":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()

    async def _request_token(self) -> str:
        if not self.with_credentials:
            self._client.cookies.clear()

        response = await self._client.post(self.url, json={"email": self.email})

        if not self.with_credentials:
            self._client.cookies.clear()

        if not response.is_success:
            raise TokenRequestError(
                f"HTTP {response.status_code}",
                details={"status_code": response.status_code}
            )

        try:
            data = response.json()
        except ValueError:
            data = None

        token = data.get("token") if isinstance(data, dict) else None
        if not token:
            raise TokenRequestError("no token in response")
        return token

    def _update(self, **changes):
        self._state = TokenState(
            token=changes.get("token", self._state.token),
            loading=changes.get("loading", self._state.loading),
            error=changes.get("error", self._state.error),
        )
        if self._closed:
            return
        for listener in list(self._listeners):
            listener(self._state)

    def _schedule_refresh(self, token: str):
        self._cancel_refresh()
        if self._closed:
            return

        exp = decode_expiry(token)
        if exp is None:
            return

        time_left = exp - int(self._clock())
        if time_left <= 0:
            return

        delay = max(time_left - self.refresh_threshold, 0)
        deadline = self._clock() + delay
        self._refresh_task = asyncio.get_running_loop().create_task(self._refresh_after(deadline))
        self.logger.debug("Token refresh scheduled", delay_seconds=delay)

    def _cancel_refresh(self):
        task = self._refresh_task
        self._refresh_task = None
        # The refresh task itself replaces the token; it must not cancel itself
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()

    async def _refresh_after(self, deadline: float):
        # Measured from when the refresh was armed, not from task start
        await self._sleep(max(deadline - self._clock(), 0))

        # Stays registered as _refresh_task so aclose() cancels the fetch too
        try:
            await self.fetch_token()
        except Exception as e:
            # Already surfaced through the error state
            self.logger.debug("Scheduled token refresh failed", error=str(e))
