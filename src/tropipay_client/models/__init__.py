"""Pydantic models for Tropipay API payloads.

Request models serialize to the API's camelCase keys; response models accept
either camelCase or snake_case and keep unknown keys.
"""

from .accounts import AddTropicardAccountRequest, CryptoAddress, CryptoAddressResponse
from .base import TropipayModel
from .deposit_accounts import (
    AllowedAccount,
    CountryDestination,
    CreateDepositAccountRequest,
    DeleteDepositAccountRequest,
    DepositAccount,
    DepositAccountList,
    UpdateDepositAccountRequest,
    ValidateAccountNumberRequest,
    ValidateAccountNumberResponse,
)
from .movements import Movement, MovementFilter, MovementList, MovementSearchData, MovementState
from .payment_cards import CreatePaymentCardRequest, PaymentCard, PaymentCardList
from .users import (
    ChangePasswordRequest,
    Configure2FARequest,
    DisableUserResponse,
    SendSecurityCodeRequest,
    TwoFactorSecret,
    User,
    ValidateSecurityTokenRequest,
    ValidateSecurityTokenResponse,
)

__all__ = [
    "AddTropicardAccountRequest",
    "AllowedAccount",
    "ChangePasswordRequest",
    "Configure2FARequest",
    "CountryDestination",
    "CreateDepositAccountRequest",
    "CreatePaymentCardRequest",
    "CryptoAddress",
    "CryptoAddressResponse",
    "DeleteDepositAccountRequest",
    "DepositAccount",
    "DepositAccountList",
    "DisableUserResponse",
    "Movement",
    "MovementFilter",
    "MovementList",
    "MovementSearchData",
    "MovementState",
    "PaymentCard",
    "PaymentCardList",
    "SendSecurityCodeRequest",
    "TropipayModel",
    "TwoFactorSecret",
    "UpdateDepositAccountRequest",
    "User",
    "ValidateAccountNumberRequest",
    "ValidateAccountNumberResponse",
]
