"""Unit tests for TokenManager.

Covers token acquisition and parsing, caching with the refresh margin,
single-flight refresh under concurrency, and cancellation isolation.
"""

# pyright: reportPrivateUsage=false

import asyncio
import json
from datetime import UTC, datetime, timedelta
from unittest.mock import patch

import httpx
import pytest
from conftest import FakeTropipay

from tropipay_client.client.token_manager import MAX_TOKEN_LIFETIME_SECONDS, AccessToken, TokenManager
from tropipay_client.client.tropipay_client import TropipayClient
from tropipay_client.config import TropipayConfig
from tropipay_client.errors import AuthError, NetworkError


@pytest.fixture
def manager(config: TropipayConfig, http_client: httpx.AsyncClient) -> TokenManager:
    """Provide a TokenManager talking to the fake token endpoint."""
    return TokenManager(config, http_client)


class TestAccessToken:
    """Tests for the AccessToken freshness check."""

    def test_fresh_outside_margin(self) -> None:
        """A token expiring well after the margin should be fresh."""
        token = AccessToken("tok", datetime.now(UTC) + timedelta(minutes=10))
        assert token.is_fresh(timedelta(seconds=60)) is True

    def test_stale_inside_margin(self) -> None:
        """A token expiring within the margin should not be fresh."""
        token = AccessToken("tok", datetime.now(UTC) + timedelta(seconds=30))
        assert token.is_fresh(timedelta(seconds=60)) is False


class TestTokenAcquisition:
    """Tests for the client-credentials request and response parsing."""

    @pytest.mark.asyncio
    async def test_acquire_posts_client_credentials(self, manager: TokenManager, fake: FakeTropipay) -> None:
        """The token request should carry the grant type and credentials as JSON."""
        token = await manager.get_token()

        assert token.access_token == "T1"
        assert len(fake.token_requests) == 1
        request = fake.token_requests[0]
        assert request.method == "POST"
        assert str(request.url) == "https://tropipay.test/api/v2/access/token"
        assert json.loads(request.content) == {
            "grant_type": "client_credentials",
            "client_id": "client-id",
            "client_secret": "client-secret",
        }

    @pytest.mark.asyncio
    async def test_expiry_computed_from_expires_in(self, manager: TokenManager) -> None:
        """expires_at should be now + expires_in."""
        before = datetime.now(UTC)
        token = await manager.get_token()
        after = datetime.now(UTC)

        assert before + timedelta(seconds=3600) <= token.expires_at <= after + timedelta(seconds=3600)

    @pytest.mark.asyncio
    async def test_rejected_credentials_raise_auth_error(self, manager: TokenManager, fake: FakeTropipay) -> None:
        """A non-2xx token response should raise AuthError with status and body details."""
        fake.token_handler = lambda _request: httpx.Response(
            401,
            json={"error": {"code": "INVALID_CLIENT", "message": "Invalid client credentials"}},
        )

        with pytest.raises(AuthError) as exc_info:
            await manager.get_token()

        assert exc_info.value.status_code == 401
        assert exc_info.value.code == "INVALID_CLIENT"
        assert exc_info.value.message == "Invalid client credentials"
        assert manager._token is None

    @pytest.mark.asyncio
    async def test_failure_is_not_retried_internally(self, manager: TokenManager, fake: FakeTropipay) -> None:
        """A failed acquisition should hit the token endpoint exactly once."""
        fake.token_handler = lambda _request: httpx.Response(500, text="boom")

        with pytest.raises(AuthError):
            await manager.get_token()

        assert len(fake.token_requests) == 1

    @pytest.mark.asyncio
    async def test_transport_error_raises_network_error(self, manager: TokenManager, fake: FakeTropipay) -> None:
        """Connection failures should surface as NetworkError."""

        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        fake.token_handler = refuse

        with pytest.raises(NetworkError, match="Connection refused"):
            await manager.get_token()

    @pytest.mark.asyncio
    async def test_missing_access_token_raises(self, manager: TokenManager, fake: FakeTropipay) -> None:
        """A success response without access_token should raise AuthError."""
        fake.token_handler = lambda _request: httpx.Response(200, json={"expires_in": 3600})

        with pytest.raises(AuthError, match="access_token"):
            await manager.get_token()

    @pytest.mark.asyncio
    async def test_non_json_body_raises(self, manager: TokenManager, fake: FakeTropipay) -> None:
        """A success response that is not JSON should raise AuthError."""
        fake.token_handler = lambda _request: httpx.Response(200, text="<html>")

        with pytest.raises(AuthError, match="non-JSON"):
            await manager.get_token()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("expires_in", [0, -5, "soon", None, True, "inf", "nan", 10**12, 1e308, 10**400])
    async def test_invalid_expires_in_raises(
        self,
        config: TropipayConfig,
        expires_in: object,
    ) -> None:
        """Unusable expires_in values should be rejected without caching."""
        fake = FakeTropipay(expires_in=expires_in)
        manager = TokenManager(config, httpx.AsyncClient(transport=httpx.MockTransport(fake.handle)))

        with pytest.raises(AuthError, match="expires_in"):
            await manager.get_token()

        assert manager._token is None

    @pytest.mark.asyncio
    async def test_longest_accepted_lifetime(self, config: TropipayConfig) -> None:
        """A lifetime at the accepted ceiling should still produce a token."""
        fake = FakeTropipay(expires_in=MAX_TOKEN_LIFETIME_SECONDS)
        manager = TokenManager(config, httpx.AsyncClient(transport=httpx.MockTransport(fake.handle)))

        token = await manager.get_token()

        assert token.expires_at - datetime.now(UTC) > timedelta(days=364)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("expires_in", ["inf", 10**12, 1e308])
    async def test_oversized_lifetime_reaches_caller_as_auth_error(
        self,
        config: TropipayConfig,
        expires_in: object,
    ) -> None:
        """Lifetimes too large to represent should fail the call with AuthError."""
        fake = FakeTropipay(expires_in=expires_in)
        fake.respond(200, json={"id": 1})
        client = TropipayClient(config, http_client=httpx.AsyncClient(transport=httpx.MockTransport(fake.handle)))

        with pytest.raises(AuthError, match="expires_in"):
            await client.request("GET", "/users/profile")

        assert fake.api_requests == []

    @pytest.mark.asyncio
    async def test_numeric_string_expires_in_accepted(self, config: TropipayConfig) -> None:
        """A numeric string expires_in should be accepted."""
        fake = FakeTropipay(expires_in="3600")
        manager = TokenManager(config, httpx.AsyncClient(transport=httpx.MockTransport(fake.handle)))

        token = await manager.get_token()

        assert token.is_fresh(timedelta(minutes=59))

    @pytest.mark.asyncio
    async def test_failure_is_logged(self, manager: TokenManager, fake: FakeTropipay) -> None:
        """Authentication failures should be logged and re-raised."""
        fake.token_handler = lambda _request: httpx.Response(403, json={"message": "forbidden"})

        with (
            patch("tropipay_client.client.token_manager.logger") as mock_logger,
            pytest.raises(AuthError),
        ):
            await manager.get_token()

        mock_logger.exception.assert_called()


class TestTokenCaching:
    """Tests for caching and the expiry safety margin."""

    @pytest.mark.asyncio
    async def test_cached_token_reused(self, manager: TokenManager, fake: FakeTropipay) -> None:
        """A fresh cached token should be returned without another request."""
        first = await manager.get_token()
        second = await manager.get_token()

        assert first is second
        assert len(fake.token_requests) == 1

    @pytest.mark.asyncio
    async def test_token_inside_margin_is_refreshed(self, manager: TokenManager, fake: FakeTropipay) -> None:
        """A token within the safety margin should never be handed out."""
        manager._token = AccessToken("old", datetime.now(UTC) + timedelta(seconds=30))

        token = await manager.get_token()

        assert token.access_token == "T1"
        assert len(fake.token_requests) == 1

    @pytest.mark.asyncio
    async def test_expired_token_is_refreshed(self, manager: TokenManager) -> None:
        """An expired token should be replaced."""
        manager._token = AccessToken("old", datetime.now(UTC) - timedelta(hours=1))

        token = await manager.get_token()

        assert token.access_token == "T1"

    @pytest.mark.asyncio
    async def test_returned_tokens_respect_margin(self, manager: TokenManager) -> None:
        """Every token returned should be valid for at least the margin."""
        margin = timedelta(seconds=60)
        for _ in range(3):
            token = await manager.get_token()
            assert token.expires_at - datetime.now(UTC) >= margin


class TestForceRefresh:
    """Tests for forced refresh after an authorization rejection."""

    @pytest.mark.asyncio
    async def test_force_refresh_replaces_fresh_token(self, manager: TokenManager, fake: FakeTropipay) -> None:
        """force_refresh should acquire a new token even when the cached one is fresh."""
        first = await manager.get_token()

        refreshed = await manager.force_refresh()

        assert first.access_token == "T1"
        assert refreshed.access_token == "T2"
        assert len(fake.token_requests) == 2
        assert await manager.get_token() is refreshed

    @pytest.mark.asyncio
    async def test_force_refresh_with_rejected_token(self, manager: TokenManager, fake: FakeTropipay) -> None:
        """Refreshing the token that was rejected should acquire a new one."""
        first = await manager.get_token()

        refreshed = await manager.force_refresh(rejected=first)

        assert refreshed.access_token == "T2"
        assert len(fake.token_requests) == 2

    @pytest.mark.asyncio
    async def test_force_refresh_skips_when_already_replaced(self, manager: TokenManager, fake: FakeTropipay) -> None:
        """A rejection of an already-replaced token should reuse the newer token."""
        stale = await manager.get_token()
        newer = await manager.force_refresh(rejected=stale)

        result = await manager.force_refresh(rejected=stale)

        assert result is newer
        assert len(fake.token_requests) == 2

    @pytest.mark.asyncio
    async def test_failed_force_refresh_leaves_no_token(self, manager: TokenManager, fake: FakeTropipay) -> None:
        """A failed forced refresh should not keep the discarded token."""
        await manager.get_token()
        fake.token_handler = lambda _request: httpx.Response(401, json={"message": "revoked"})

        with pytest.raises(AuthError):
            await manager.force_refresh()

        assert manager._token is None


class TestSingleFlight:
    """Tests for concurrent refresh coordination."""

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_one_acquisition(self, manager: TokenManager, fake: FakeTropipay) -> None:
        """Concurrent get_token calls should trigger exactly one token request."""

        async def slow_token(_request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(0.05)
            return fake.issue_token()

        fake.token_handler = slow_token

        tokens = await asyncio.gather(*(manager.get_token() for _ in range(10)))

        assert len(fake.token_requests) == 1
        assert {token.access_token for token in tokens} == {"T1"}
        assert all(token is tokens[0] for token in tokens)

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_failure(self, manager: TokenManager, fake: FakeTropipay) -> None:
        """All concurrent waiters should observe the same acquisition failure."""

        async def slow_reject(_request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(0.05)
            return httpx.Response(401, json={"message": "bad credentials"})

        fake.token_handler = slow_reject

        results = await asyncio.gather(*(manager.get_token() for _ in range(5)), return_exceptions=True)

        assert len(fake.token_requests) == 1
        assert all(isinstance(result, AuthError) for result in results)
        assert all(result is results[0] for result in results)

    @pytest.mark.asyncio
    async def test_concurrent_force_refresh_joins_inflight(self, manager: TokenManager, fake: FakeTropipay) -> None:
        """Concurrent forced refreshes after the same rejection should acquire once."""
        stale = await manager.get_token()

        async def slow_token(_request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(0.05)
            return fake.issue_token()

        fake.token_handler = slow_token

        tokens = await asyncio.gather(*(manager.force_refresh(rejected=stale) for _ in range(5)))

        assert len(fake.token_requests) == 2
        assert {token.access_token for token in tokens} == {"T2"}

    @pytest.mark.asyncio
    async def test_cancelled_waiter_does_not_cancel_refresh(self, manager: TokenManager, fake: FakeTropipay) -> None:
        """Cancelling one waiter should leave the shared refresh running for the others."""
        started = asyncio.Event()
        release = asyncio.Event()

        async def gated_token(_request: httpx.Request) -> httpx.Response:
            started.set()
            await release.wait()
            return fake.issue_token()

        fake.token_handler = gated_token

        cancelled_waiter = asyncio.create_task(manager.get_token())
        await started.wait()
        other_waiter = asyncio.create_task(manager.get_token())
        await asyncio.sleep(0)

        cancelled_waiter.cancel()
        with pytest.raises(asyncio.CancelledError):
            await cancelled_waiter

        release.set()
        token = await other_waiter

        assert token.access_token == "T1"
        assert len(fake.token_requests) == 1
        assert manager._token is token

    @pytest.mark.asyncio
    async def test_ensure_lock_reused_on_same_loop(self, manager: TokenManager) -> None:
        """The lock should be created once per event loop."""
        lock1 = manager._ensure_lock()
        lock2 = manager._ensure_lock()

        assert lock1 is lock2
