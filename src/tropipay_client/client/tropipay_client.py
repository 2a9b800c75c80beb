"""Tropipay client setup.

Provides ``TropipayClient``, the long-lived object applications share across
tasks, and the ``open_client`` async context manager that creates one with the
configured HTTP settings and closes it afterwards.
"""

import logging
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from types import TracebackType
from typing import Any, Self, TypeVar

import httpx

T = TypeVar("T")

from ..config import Environment, TropipayConfig
from .pipeline import RequestPipeline
from .token_manager import TokenManager

logger = logging.getLogger("tropipay_client.client")


def create_http_client(config: TropipayConfig) -> httpx.AsyncClient:
    """Create the HTTP transport with the configured TLS and timeout settings."""
    timeout = httpx.Timeout(config.timeout_seconds)
    return httpx.AsyncClient(verify=config.verify_ssl, timeout=timeout)


class TropipayClient:
    """Authenticated client for the Tropipay REST and GraphQL APIs.

    A single instance is safe to share between concurrent tasks on one event
    loop. The access token is acquired lazily on the first call.

    Example:
        async with TropipayClient(TropipayConfig.from_env()) as client:
            profile = await get_user_profile(client)

    """

    def __init__(self, config: TropipayConfig, *, http_client: httpx.AsyncClient | None = None) -> None:
        """Initialize the client.

        Args:
            config: Credentials, environment and transport settings.
            http_client: Optional caller-owned transport. When omitted the
                client creates one and closes it in ``aclose``.

        """
        self.config = config
        self._owns_http_client = http_client is None
        self._http_client = http_client if http_client is not None else create_http_client(config)
        self._token_manager = TokenManager(config, self._http_client)
        self._pipeline = RequestPipeline(config, self._token_manager, self._http_client)

    @classmethod
    def from_env(cls, *, http_client: httpx.AsyncClient | None = None) -> Self:
        """Build a client from ``TROPIPAY_*`` environment variables."""
        return cls(TropipayConfig.from_env(), http_client=http_client)

    @property
    def environment(self) -> Environment:
        """Return the environment this client targets."""
        return self.config.environment

    @property
    def base_url(self) -> str:
        """Return the resolved API base URL."""
        return self.config.base_url

    async def __aenter__(self) -> Self:
        """Return the client for async context manager usage."""
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        """Close resources when leaving an async context manager block."""
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP transport if this client created it."""
        if self._owns_http_client and not self._http_client.is_closed:
            await self._http_client.aclose()
            logger.debug("Closed Tropipay HTTP client.")

    async def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        response_type: type[T] | None = None,
        *,
        timeout: float | None = None,
    ) -> T | None:
        """Execute an authenticated REST call.

        See ``RequestPipeline.execute`` for the full contract. Use ``graphql``
        for GraphQL endpoints so that ``errors`` arrays raise ``APIError``.
        """
        return await self._pipeline.execute(method, path, body, response_type, timeout=timeout)

    async def graphql(
        self,
        path: str,
        query: str,
        variables: Mapping[str, Any] | None = None,
        response_type: type[T] | None = None,
        *,
        timeout: float | None = None,
    ) -> T | None:
        """Execute an authenticated GraphQL query.

        See ``RequestPipeline.execute_graphql`` for the full contract.
        """
        return await self._pipeline.execute_graphql(path, query, variables, response_type, timeout=timeout)


@asynccontextmanager
async def open_client(
    config: TropipayConfig,
    *,
    http_client: httpx.AsyncClient | None = None,
) -> AsyncIterator[TropipayClient]:
    """Create a configured Tropipay client and close it on exit.

    Args:
        config: The configuration containing credentials, environment and timeouts.
        http_client: Optional caller-owned transport.

    Yields:
        Configured TropipayClient instance.

    """
    async with TropipayClient(config, http_client=http_client) as client:
        yield client


__all__ = ["TropipayClient", "create_http_client", "open_client"]
