"""
Shared fixtures for token client tests.
"""

import asyncio
import json

import httpx
import jwt
import pytest

SIGNING_KEY = "client-test-signing-key-0123456789abcdef"


class FakeClock:
    """Simulated wall clock with sleepers that wake on advance()."""

    def __init__(self, start: float = 1_700_000_000):
        self.now = start
        self._sleepers = []

    def time(self) -> float:
        return self.now

    async def sleep(self, delay: float):
        future = asyncio.get_running_loop().create_future()
        self._sleepers.append((self.now + delay, future))
        await future

    @property
    def pending(self) -> int:
        return sum(1 for _, future in self._sleepers if not future.done())

    async def advance(self, seconds: float):
        # Tasks created before the jump register their sleeps first
        await self._settle()
        self.now += seconds
        for deadline, future in list(self._sleepers):
            if deadline <= self.now and not future.done():
                future.set_result(None)
        self._sleepers = [(d, f) for d, f in self._sleepers if not f.done()]
        await self._settle()

    async def _settle(self):
        for _ in range(50):
            await asyncio.sleep(0)


class TokenServer:
    """httpx handler standing in for the issuer's token endpoint."""

    def __init__(self, clock: FakeClock, lifetime: int = 120):
        self.clock = clock
        self.lifetime = lifetime
        self.requests = []
        self.status_code = 200
        self.include_exp = True

    def issue(self, email: str) -> str:
        claims = {"sub": email, "email": email, "iat": int(self.clock.time())}
        if self.include_exp:
            claims["exp"] = int(self.clock.time()) + self.lifetime
        return jwt.encode(claims, SIGNING_KEY, algorithm="HS256")

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.status_code != 200:
            return httpx.Response(self.status_code, json={"error": "boom"})

        email = json.loads(request.content)["email"]
        token = self.issue(email)
        return httpx.Response(
            200,
            json={"token": token},
            headers={"set-cookie": f"auth_token={token}; HttpOnly; Path=/; SameSite=Lax"}
        )


@pytest.fixture
def clock():
    """Simulated clock."""
    return FakeClock()


@pytest.fixture
def server(clock):
    """Fake token endpoint."""
    return TokenServer(clock)
