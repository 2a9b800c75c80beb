"""Shared fixtures: an in-memory Tropipay server backed by ``httpx.MockTransport``."""

from collections.abc import Awaitable, Callable
from typing import Any, TypeAlias

import httpx
import pytest

from tropipay_client.client.tropipay_client import TropipayClient
from tropipay_client.config import TropipayConfig

BASE_URL = "https://tropipay.test/api/v2"
TOKEN_PATH = "/api/v2/access/token"

Handler: TypeAlias = Callable[[httpx.Request], httpx.Response | Awaitable[httpx.Response]]


class FakeTropipay:
    """Fake token endpoint plus a scripted resource server.

    Tokens are issued as ``T1``, ``T2``, ... in request order. Resource
    responses are consumed from a queue; the last entry is reused once the
    queue is down to one item.
    """

    def __init__(self, *, expires_in: Any = 3600) -> None:
        self.expires_in = expires_in
        self.token_requests: list[httpx.Request] = []
        self.api_requests: list[httpx.Request] = []
        self.token_handler: Handler | None = None
        self._responses: list[Handler] = []

    def respond(self, status_code: int = 200, **kwargs: Any) -> None:
        """Queue a resource response built from ``httpx.Response`` keyword arguments."""
        self._responses.append(lambda _request: httpx.Response(status_code, **kwargs))

    def respond_with(self, handler: Handler) -> None:
        """Queue a callable resource response."""
        self._responses.append(handler)

    def issue_token(self) -> httpx.Response:
        return httpx.Response(
            200,
            json={
                "access_token": f"T{len(self.token_requests)}",
                "expires_in": self.expires_in,
                "token_type": "Bearer",
            },
        )

    async def handle(self, request: httpx.Request) -> httpx.Response:
        if request.url.path == TOKEN_PATH:
            self.token_requests.append(request)
            result = self.token_handler(request) if self.token_handler else self.issue_token()
        else:
            self.api_requests.append(request)
            if not self._responses:
                return httpx.Response(404, json={"message": "no response scripted"})
            handler = self._responses.pop(0) if len(self._responses) > 1 else self._responses[0]
            result = handler(request)
        if isinstance(result, httpx.Response):
            return result
        return await result

    def authorization_headers(self) -> list[str | None]:
        return [request.headers.get("Authorization") for request in self.api_requests]


@pytest.fixture
def fake() -> FakeTropipay:
    """Provide a fresh fake Tropipay server."""
    return FakeTropipay()


@pytest.fixture
def config() -> TropipayConfig:
    """Provide a configuration pointing at the fake server."""
    return TropipayConfig(client_id="client-id", client_secret="client-secret", base_url=BASE_URL)


@pytest.fixture
def http_client(fake: FakeTropipay) -> httpx.AsyncClient:
    """Provide an httpx client routed to the fake server."""
    return httpx.AsyncClient(transport=httpx.MockTransport(fake.handle))


@pytest.fixture
def client(config: TropipayConfig, http_client: httpx.AsyncClient) -> TropipayClient:
    """Provide a TropipayClient using the fake transport."""
    return TropipayClient(config, http_client=http_client)
