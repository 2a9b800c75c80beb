"""Token management for the Tropipay API (OAuth2 client-credentials grant)."""

import asyncio
import logging
import math
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import httpx

from ..config import TropipayConfig
from ..errors import AuthError, NetworkError

logger = logging.getLogger("tropipay_client.token_manager")

# Longest token lifetime accepted from the token endpoint (one year)
MAX_TOKEN_LIFETIME_SECONDS = 365 * 24 * 60 * 60


@dataclass(frozen=True, slots=True)
class AccessToken:
    """A bearer token together with its absolute expiry time.

    ``token_type`` records what the token endpoint reported. Requests always
    use the ``Bearer`` scheme regardless of its value.
    """

    access_token: str
    expires_at: datetime
    token_type: str = "Bearer"

    def is_fresh(self, margin: timedelta) -> bool:
        """Return True while the token is valid for at least ``margin`` longer."""
        return datetime.now(UTC) + margin <= self.expires_at


def _parse_expires_in(value: object) -> float | None:
    """Return a lifetime in seconds, or None if the value is unusable.

    Usable lifetimes are finite, positive and at most ``MAX_TOKEN_LIFETIME_SECONDS``.
    """
    if isinstance(value, bool) or not isinstance(value, int | float | str):
        return None
    try:
        seconds = float(value)
    except (ValueError, OverflowError):
        return None
    if not math.isfinite(seconds) or not 0 < seconds <= MAX_TOKEN_LIFETIME_SECONDS:
        return None
    return seconds


class TokenManager:
    """Acquire, cache and refresh access tokens, one acquisition at a time.

    Concurrent callers that find the cached token missing or stale share a
    single in-flight acquisition and observe the same token or the same
    error. The acquisition runs as its own task, so a caller that is cancelled
    while waiting does not abort the refresh for everyone else.
    """

    def __init__(self, config: TropipayConfig, http_client: httpx.AsyncClient) -> None:
        """Initialize the token manager.

        Args:
            config: The resolved configuration holding credentials and endpoints.
            http_client: Transport used for token requests.

        """
        self._config = config
        self._http_client = http_client
        self._margin = timedelta(seconds=config.token_refresh_margin_seconds)
        self._token: AccessToken | None = None
        self._inflight: asyncio.Task[AccessToken] | None = None
        self._lock: asyncio.Lock | None = None
        self._lock_loop: asyncio.AbstractEventLoop | None = None

    def _ensure_lock(self) -> asyncio.Lock:
        """Return an asyncio lock bound to the current event loop.

        Creates a new lock if one does not exist or if the event loop has changed.
        """
        loop = asyncio.get_running_loop()
        if self._lock is None or self._lock_loop is not loop:
            self._lock = asyncio.Lock()
            self._lock_loop = loop
            self._inflight = None
        return self._lock

    async def get_token(self) -> AccessToken:
        """Return a valid access token, acquiring one if needed.

        Raises:
            AuthError: If the token endpoint rejects the credentials.
            NetworkError: If the token endpoint cannot be reached.

        """
        token = self._token
        if token is not None and token.is_fresh(self._margin):
            return token
        return await self._refresh(force=False)

    async def force_refresh(self, rejected: AccessToken | None = None) -> AccessToken:
        """Discard the cached token and acquire a new one.

        Args:
            rejected: The token the server just refused. If another caller has
                already replaced it with a fresh token, that token is returned
                without a new acquisition.

        Raises:
            AuthError: If the token endpoint rejects the credentials.
            NetworkError: If the token endpoint cannot be reached.

        """
        return await self._refresh(force=True, rejected=rejected)

    async def _refresh(self, *, force: bool, rejected: AccessToken | None = None) -> AccessToken:
        async with self._ensure_lock():
            task = self._inflight
            if task is None:
                current = self._token
                if current is not None and current.is_fresh(self._margin):
                    if not force or (rejected is not None and current.access_token != rejected.access_token):
                        return current
                self._token = None
                task = asyncio.create_task(self._acquire_and_cache())
                self._inflight = task
                task.add_done_callback(self._clear_inflight)
        # Shielded so that cancelling this waiter leaves the shared refresh running
        return await asyncio.shield(task)

    def _clear_inflight(self, task: asyncio.Task[AccessToken]) -> None:
        if self._inflight is task:
            self._inflight = None
        if not task.cancelled():
            # Mark the exception as retrieved; waiters re-raise it themselves
            task.exception()

    async def _acquire_and_cache(self) -> AccessToken:
        try:
            token = await self._acquire()
        except Exception:
            logger.exception("Failed to authenticate with Tropipay")
            raise
        if not token.is_fresh(self._margin):
            logger.warning("Token lifetime is shorter than the %s refresh margin.", self._margin)
        self._token = token
        logger.debug("Fetched new access token from Tropipay, expires at %s.", token.expires_at.isoformat())
        return token

    async def _acquire(self) -> AccessToken:
        """Request a token from the environment's token endpoint.

        Returns:
            The parsed token with its absolute expiry.

        Raises:
            NetworkError: On transport failures.
            AuthError: On a non-2xx response or a malformed token payload.

        """
        url = self._config.token_url
        payload = {
            "grant_type": "client_credentials",
            "client_id": self._config.client_id,
            "client_secret": self._config.client_secret,
        }
        try:
            response = await self._http_client.post(
                url,
                json=payload,
                headers={"Accept": "application/json"},
            )
        except httpx.TransportError as exc:
            msg = f"Network error while requesting a token from {url}: {exc}"
            raise NetworkError(msg, url=url) from exc

        if not response.is_success:
            raise AuthError.from_response(response)

        try:
            data = response.json()
        except ValueError as exc:
            msg = "Token endpoint returned a non-JSON body."
            raise AuthError(response.status_code, msg, raw_body=response.content) from exc

        if not isinstance(data, dict) or not data.get("access_token"):
            msg = "Token endpoint response did not contain an access_token."
            raise AuthError(response.status_code, msg, raw_body=response.content)

        expires_in = _parse_expires_in(data.get("expires_in"))
        if expires_in is None:
            msg = f"Token endpoint returned an invalid expires_in: {data.get('expires_in')!r}."
            raise AuthError(response.status_code, msg, raw_body=response.content)

        return AccessToken(
            access_token=str(data["access_token"]),
            expires_at=datetime.now(UTC) + timedelta(seconds=expires_in),
            token_type=str(data.get("token_type") or "Bearer"),
        )


__all__ = ["MAX_TOKEN_LIFETIME_SECONDS", "AccessToken", "TokenManager"]
