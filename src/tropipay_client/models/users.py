"""Pydantic models for user profile and security endpoints."""

from typing import Any, Literal

from .base import TropipayModel


class User(TropipayModel):
    """A Tropipay user profile.

    Monetary amounts are integers in cents. GraphQL responses only populate the
    requested subset of fields (e.g. ``name`` and ``email`` for movement
    counterparties), so everything is optional.
    """

    id: int | str | None = None
    name: str | None = None
    surname: str | None = None
    email: str | None = None
    phone: str | None = None
    state: int | str | None = None
    kyc_level: int | None = None
    balance: int | None = None
    pending_in: int | None = None
    pending_out: int | None = None
    two_fa_mode: int | None = None
    logo: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    group: dict[str, Any] | None = None
    user_detail: dict[str, Any] | None = None
    options: dict[str, Any] | None = None


class SendSecurityCodeRequest(TropipayModel):
    """Payload asking the API to send a security code by SMS or email.

    ``calling_code`` and ``phone`` are required for ``sms``; ``email`` for ``email``.
    """

    type: Literal["sms", "email"]
    calling_code: str | None = None
    phone: str | None = None
    email: str | None = None


class ValidateSecurityTokenRequest(TropipayModel):
    """Payload validating a previously sent security code."""

    security_code: str
    type: Literal["sms", "email", "totp"]


class ValidateSecurityTokenResponse(TropipayModel):
    """Result of a security code validation."""

    is_valid: bool = False
    user: User | None = None
    token: str | None = None


class Configure2FARequest(TropipayModel):
    """Payload enabling or disabling two-factor authentication."""

    enabled: bool
    type: Literal["totp", "sms"]
    security_code: str


class TwoFactorSecret(TropipayModel):
    """TOTP secret and QR code URL for setting up 2FA."""

    secret: str
    qr_code_url: str | None = None


class ChangePasswordRequest(TropipayModel):
    """Payload changing the account password."""

    old_pass: str
    new_pass: str


class DisableUserResponse(TropipayModel):
    """Confirmation returned when the account is disabled."""

    success: bool = False
    message: str | None = None


__all__ = [
    "ChangePasswordRequest",
    "Configure2FARequest",
    "DisableUserResponse",
    "SendSecurityCodeRequest",
    "TwoFactorSecret",
    "User",
    "ValidateSecurityTokenRequest",
    "ValidateSecurityTokenResponse",
]
