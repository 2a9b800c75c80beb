"""Authenticated request pipeline for the Tropipay API.

One logical call goes through these steps:

1. Resolve the absolute URL for the configured environment.
2. Obtain a valid access token from the ``TokenManager``.
3. Send the JSON request with the bearer token attached.
4. Decode a success body into the caller's type, or map the failure to an
   error from ``tropipay_client.errors``.

A 401 on the first attempt forces one token refresh and one retry. The
outcome of the retry is final.
"""

import asyncio
import logging
from collections.abc import Awaitable, Mapping
from functools import lru_cache
from typing import Any, TypeVar

import httpx

T = TypeVar("T")
from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError, to_json

from ..config import TropipayConfig
from ..errors import APIError, AuthError, CancellationError, DecodeError, NetworkError, first_graphql_message
from .token_manager import AccessToken, TokenManager

logger = logging.getLogger("tropipay_client.pipeline")

ALLOWED_METHODS = frozenset({"GET", "POST", "PUT", "DELETE"})

# HTTP status codes
HTTP_UNAUTHORIZED = 401


class GraphQLEnvelope(BaseModel):
    """The ``{data, errors}`` wrapper returned by GraphQL endpoints."""

    model_config = ConfigDict(extra="allow")

    data: Any = None
    errors: list[Any] | None = None


@lru_cache(maxsize=256)
def _cached_adapter(response_type: Any) -> TypeAdapter[Any]:
    return TypeAdapter(response_type)


def get_type_adapter(response_type: Any) -> TypeAdapter[Any]:
    """Return a (cached where possible) pydantic adapter for ``response_type``."""
    try:
        return _cached_adapter(response_type)
    except TypeError:
        # Unhashable annotations (e.g. Annotated with dict metadata) skip the cache
        return TypeAdapter(response_type)


def _type_name(response_type: Any) -> str:
    return getattr(response_type, "__name__", None) or repr(response_type)


def serialize_body(body: Any) -> bytes:
    """Serialize a request body to JSON.

    Pydantic models are dumped by alias and fields set to ``None`` are dropped.

    Args:
        body: Any JSON-serializable value, including pydantic models.

    Returns:
        The encoded JSON document.

    Raises:
        TypeError: If the body cannot be represented as JSON.

    """
    try:
        return to_json(body, by_alias=True, exclude_none=True)
    except PydanticSerializationError as exc:
        msg = f"Request body of type {type(body).__name__} is not JSON-serializable: {exc}"
        raise TypeError(msg) from exc


def decode_body(raw_body: bytes, response_type: type[T], *, status_code: int | None = None) -> T:
    """Decode a JSON response body into ``response_type``.

    Args:
        raw_body: The undecoded response body.
        response_type: Any type pydantic can validate (models, ``list[Model]``,
            ``dict[str, Any]``, ...).
        status_code: HTTP status recorded on the error for diagnostics.

    Returns:
        The validated value.

    Raises:
        DecodeError: If the body is empty, not JSON, or does not match the type.

    """
    if not raw_body.strip():
        msg = f"Expected a JSON body for {_type_name(response_type)} but the response was empty."
        raise DecodeError(msg, raw_body=raw_body, status_code=status_code)
    try:
        return get_type_adapter(response_type).validate_json(raw_body)
    except ValidationError as exc:
        msg = f"Response body did not match {_type_name(response_type)}: {exc}"
        raise DecodeError(msg, raw_body=raw_body, status_code=status_code) from exc


class RequestPipeline:
    """Execute logical API calls with authentication and error mapping."""

    def __init__(
        self,
        config: TropipayConfig,
        token_manager: TokenManager,
        http_client: httpx.AsyncClient,
    ) -> None:
        """Initialize the pipeline.

        Args:
            config: Resolved configuration; provides the environment base URL.
            token_manager: Source of valid access tokens.
            http_client: Transport shared by all calls.

        """
        self._config = config
        self._token_manager = token_manager
        self._http_client = http_client

    def resolve_url(self, path: str) -> str:
        """Join ``path`` (which may carry a query string) to the environment base URL.

        Raises:
            ValueError: If the path does not start with ``/``.

        """
        if not path.startswith("/"):
            msg = f"Request path must start with '/': {path!r}"
            raise ValueError(msg)
        return f"{self._config.base_url}{path}"

    async def execute(
        self,
        method: str,
        path: str,
        body: Any = None,
        response_type: type[T] | None = None,
        *,
        timeout: float | None = None,
    ) -> T | None:
        """Execute one authenticated call and decode its response.

        The body is decoded as-is. A GraphQL ``errors`` array in a 2xx body is
        not inspected here; send GraphQL queries through ``execute_graphql``
        so that such responses raise ``APIError``.

        Args:
            method: One of GET, POST, PUT or DELETE.
            path: Path relative to the environment base URL, including any query string.
            body: Optional JSON-serializable request body.
            response_type: Type to decode a success body into. When ``None`` the
                body is ignored and ``None`` is returned.
            timeout: Optional deadline in seconds for the whole call, token
                acquisition and retry included.

        Returns:
            The decoded body, or ``None`` when no ``response_type`` was given.

        Raises:
            ValueError: On an unsupported method or a malformed path.
            NetworkError: If the transport fails.
            AuthError: If authentication fails, including a second 401.
            APIError: On any other non-2xx response.
            DecodeError: If the success body does not match ``response_type``.
            CancellationError: If ``timeout`` expires.

        """
        response = await self._with_deadline(self._send_authenticated(method, path, body), timeout, path)
        if response_type is None:
            return None
        return decode_body(response.content, response_type, status_code=response.status_code)

    async def execute_graphql(
        self,
        path: str,
        query: str,
        variables: Mapping[str, Any] | None = None,
        response_type: type[T] | None = None,
        *,
        timeout: float | None = None,
    ) -> T | None:
        """POST a GraphQL query and unwrap the ``{data, errors}`` envelope.

        A 200 response carrying a non-empty ``errors`` array is reported as an
        ``APIError`` even when ``data`` is present.

        Args:
            path: Path of the GraphQL endpoint.
            query: The GraphQL document.
            variables: Optional query variables.
            response_type: Type to validate ``data`` into.
            timeout: Optional deadline in seconds for the whole call.

        Returns:
            The validated ``data`` object, or ``None`` when no ``response_type`` was given.

        Raises:
            APIError: On a non-2xx response or GraphQL errors.
            DecodeError: If the envelope or ``data`` does not match the expected shape.

        """
        body: dict[str, Any] = {"query": query}
        if variables is not None:
            body["variables"] = dict(variables)
        response = await self._with_deadline(self._send_authenticated("POST", path, body), timeout, path)

        raw_body = response.content
        envelope = decode_body(raw_body, GraphQLEnvelope, status_code=response.status_code)
        if envelope.errors:
            message = first_graphql_message(envelope.errors) or "GraphQL request failed"
            raise APIError(response.status_code, message, raw_body=raw_body, headers=response.headers)

        if response_type is None:
            return None
        if envelope.data is None:
            msg = "GraphQL response did not contain a data object."
            raise DecodeError(msg, raw_body=raw_body, status_code=response.status_code)
        try:
            return get_type_adapter(response_type).validate_python(envelope.data)
        except ValidationError as exc:
            msg = f"GraphQL data did not match {_type_name(response_type)}: {exc}"
            raise DecodeError(msg, raw_body=raw_body, status_code=response.status_code) from exc

    async def _with_deadline(
        self,
        call: Awaitable[httpx.Response],
        timeout: float | None,
        path: str,
    ) -> httpx.Response:
        if timeout is None:
            return await call
        try:
            async with asyncio.timeout(timeout):
                return await call
        except TimeoutError as exc:
            msg = f"Call to {path} was cancelled after exceeding its {timeout}s deadline."
            raise CancellationError(msg) from exc

    async def _send_authenticated(self, method: str, path: str, body: Any) -> httpx.Response:
        """Send the request, refreshing the token and retrying once on a 401.

        Returns:
            The 2xx response.

        """
        verb = method.upper()
        if verb not in ALLOWED_METHODS:
            msg = f"Unsupported HTTP method {method!r}; expected one of {sorted(ALLOWED_METHODS)}."
            raise ValueError(msg)
        url = self.resolve_url(path)
        content = serialize_body(body) if body is not None else None

        token = await self._token_manager.get_token()
        response = await self._send(verb, url, content, token)

        if response.status_code == HTTP_UNAUTHORIZED:
            logger.info("%s %s was rejected with 401; refreshing the access token and retrying once.", verb, path)
            token = await self._token_manager.force_refresh(rejected=token)
            response = await self._send(verb, url, content, token)
            if response.status_code == HTTP_UNAUTHORIZED:
                logger.warning("%s %s was rejected again after a token refresh.", verb, path)
                raise AuthError.from_response(response)

        if not response.is_success:
            raise APIError.from_response(response)
        return response

    async def _send(
        self,
        method: str,
        url: str,
        content: bytes | None,
        token: AccessToken,
    ) -> httpx.Response:
        # The API only accepts the Bearer scheme, whatever token_type the token endpoint reported
        headers = {
            "Authorization": f"Bearer {token.access_token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        try:
            response = await self._http_client.request(method, url, content=content, headers=headers)
        except httpx.TransportError as exc:
            msg = f"Network error during {method} {url}: {exc}"
            raise NetworkError(msg, url=url) from exc
        logger.debug("%s %s -> HTTP %s", method, url, response.status_code)
        return response


__all__ = [
    "ALLOWED_METHODS",
    "GraphQLEnvelope",
    "RequestPipeline",
    "decode_body",
    "get_type_adapter",
    "serialize_body",
]
