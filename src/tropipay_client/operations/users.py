"""Operations on the authenticated user's profile and security settings."""

import logging

from ..client.tropipay_client import TropipayClient
from ..models.users import (
    ChangePasswordRequest,
    Configure2FARequest,
    DisableUserResponse,
    SendSecurityCodeRequest,
    TwoFactorSecret,
    User,
    ValidateSecurityTokenRequest,
    ValidateSecurityTokenResponse,
)

logger = logging.getLogger("tropipay_client.operations.users")


async def get_user_profile(client: TropipayClient) -> User:
    """Return the profile of the authenticated user."""
    return await client.request("GET", "/users/profile", response_type=User)


async def send_security_code(client: TropipayClient, request: SendSecurityCodeRequest) -> None:
    """Send a security code to the user's phone or email."""
    logger.debug("Requesting a security code via %s.", request.type)
    await client.request("POST", "/users/sendSecurityCode", request)


async def validate_security_token(
    client: TropipayClient,
    request: ValidateSecurityTokenRequest,
) -> ValidateSecurityTokenResponse:
    """Validate a security code previously sent to the user."""
    return await client.request("POST", "/users/validateToken", request, ValidateSecurityTokenResponse)


async def configure_2fa(client: TropipayClient, request: Configure2FARequest) -> None:
    """Enable or disable two-factor authentication."""
    await client.request("POST", "/users/2fa", request)


async def get_2fa_secret(client: TropipayClient) -> TwoFactorSecret:
    """Generate a new TOTP secret for setting up two-factor authentication."""
    return await client.request("POST", "/users/2fa/secret", response_type=TwoFactorSecret)


async def change_password(client: TropipayClient, request: ChangePasswordRequest) -> None:
    """Change the user's account password."""
    await client.request("POST", "/users/pass", request)


async def disable_user_account(client: TropipayClient) -> DisableUserResponse:
    """Disable the user account."""
    logger.info("Disabling the authenticated Tropipay user account.")
    return await client.request("POST", "/users/disable", response_type=DisableUserResponse)


__all__ = [
    "change_password",
    "configure_2fa",
    "disable_user_account",
    "get_2fa_secret",
    "get_user_profile",
    "send_security_code",
    "validate_security_token",
]
