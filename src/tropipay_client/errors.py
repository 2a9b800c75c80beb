"""Error taxonomy for the Tropipay client.

Every failure of a logical call reaches the caller as one of these types, with
enough structure (HTTP status, raw body, message) to decide whether a retry
makes sense:

- ``NetworkError``: the request never produced an HTTP response.
- ``APIError``: the server answered with a non-success status or a GraphQL
  ``errors`` array.
- ``AuthError``: token acquisition failed, or the call was rejected again
  after the single forced refresh.
- ``DecodeError``: a success response did not match the expected shape.
- ``CancellationError``: the caller's deadline expired.
"""

import json
from typing import Any

import httpx

# Maximum length of the raw body echoed into error messages
MAX_BODY_PREVIEW_LENGTH = 500

HTTP_TOO_MANY_REQUESTS = 429
HTTP_SERVER_ERROR = 500


class TropipayError(Exception):
    """Base exception for all Tropipay client errors."""


class NetworkError(TropipayError):
    """Raised when the transport fails (DNS, connection refused, timeout)."""

    def __init__(self, message: str, *, url: str | None = None) -> None:
        """Initialize with a message and the URL that could not be reached.

        Args:
            message: Human-readable description of the failure.
            url: The absolute URL of the failed request, if known.

        """
        self.url = url
        super().__init__(message)


class APIError(TropipayError):
    """Raised when the API rejects a request.

    Attributes:
        status_code: The HTTP status of the response.
        code: Application error code from the body, if the API supplied one.
        message: Error message from the body, or the HTTP reason phrase.
        raw_body: The undecoded response body.
        headers: Response headers (e.g. ``Retry-After`` on 429 responses).

    """

    def __init__(
        self,
        status_code: int,
        message: str,
        *,
        code: str | None = None,
        raw_body: bytes = b"",
        headers: httpx.Headers | None = None,
    ) -> None:
        """Initialize the error from its decoded parts."""
        self.status_code = status_code
        self.code = code
        self.message = message
        self.raw_body = raw_body
        self.headers = headers if headers is not None else httpx.Headers()
        super().__init__(self._describe())

    def _describe(self) -> str:
        if self.code:
            return f"HTTP {self.status_code} [{self.code}]: {self.message}"
        return f"HTTP {self.status_code}: {self.message}"

    @property
    def retryable(self) -> bool:
        """Whether the status suggests a caller-side retry may succeed (429 or 5xx)."""
        return self.status_code == HTTP_TOO_MANY_REQUESTS or self.status_code >= HTTP_SERVER_ERROR

    @classmethod
    def from_response(cls, response: httpx.Response) -> "APIError":
        """Build an error from a failed HTTP response.

        The body is decoded as JSON when possible. Error payloads vary by
        endpoint: a top-level ``message``/``code``, a nested ``error`` object
        or string, or a GraphQL-style ``errors`` list.

        Args:
            response: The non-success response.

        Returns:
            An instance of ``cls`` describing the failure.

        """
        raw_body = response.content
        message, code = parse_error_payload(raw_body)
        if not message:
            message = response.reason_phrase or "Request failed"
        return cls(
            response.status_code,
            message,
            code=code,
            raw_body=raw_body,
            headers=response.headers,
        )


class AuthError(APIError):
    """Raised when authentication fails and cannot be recovered by a refresh."""


class DecodeError(TropipayError):
    """Raised when a success response body does not match the expected shape."""

    def __init__(self, message: str, *, raw_body: bytes = b"", status_code: int | None = None) -> None:
        """Initialize with a message and the raw body kept for diagnostics.

        Args:
            message: Description of the decoding failure.
            raw_body: The undecoded response body.
            status_code: The HTTP status of the response, if any.

        """
        self.raw_body = raw_body
        self.status_code = status_code
        super().__init__(message)


class CancellationError(TropipayError):
    """Raised when a call is aborted because its caller-supplied deadline expired."""


def _stringify(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def first_graphql_message(errors: list[Any]) -> str | None:
    """Return the message of the first entry of a GraphQL ``errors`` list."""
    first = errors[0]
    if isinstance(first, dict):
        return _stringify(first.get("message"))
    return _stringify(first)


def parse_error_payload(raw_body: bytes) -> tuple[str | None, str | None]:
    """Extract ``(message, code)`` from an error response body.

    Args:
        raw_body: The undecoded response body.

    Returns:
        The message and application code, each ``None`` when absent. Bodies
        that are not JSON yield a truncated text preview as the message.

    """
    if not raw_body:
        return None, None
    try:
        payload = json.loads(raw_body)
    except ValueError:
        text = raw_body.decode("utf-8", errors="replace").strip()
        return (text[:MAX_BODY_PREVIEW_LENGTH] or None), None

    if not isinstance(payload, dict):
        return None, None

    message = _stringify(payload.get("message"))
    code = _stringify(payload.get("code"))

    nested = payload.get("error")
    if isinstance(nested, dict):
        message = message or _stringify(nested.get("message"))
        code = code or _stringify(nested.get("code"))
    elif isinstance(nested, str):
        message = message or nested

    errors = payload.get("errors")
    if not message and isinstance(errors, list) and errors:
        message = first_graphql_message(errors)

    return message, code


__all__ = [
    "APIError",
    "AuthError",
    "CancellationError",
    "DecodeError",
    "NetworkError",
    "TropipayError",
    "first_graphql_message",
    "parse_error_payload",
]
