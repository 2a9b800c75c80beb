"""Pydantic models for deposit accounts (beneficiaries)."""

from typing import Any

from pydantic import Field

from .base import TropipayModel


class CountryDestination(TropipayModel):
    """Destination country of a beneficiary's bank account."""

    id: int
    name: str | None = None
    sepa_zone: bool | None = None
    slug: str | None = None
    calling_code: int | None = None


class AllowedAccount(TropipayModel):
    """A user account allowed to send funds to a beneficiary."""

    id: int
    alias: str | None = None
    currency: str | None = None
    type: int | None = None


class DepositAccount(TropipayModel):
    """A beneficiary that can receive transfers.

    ``state`` is reported either as a string (``"active"``) or an integer.
    """

    id: int
    account_number: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    alias: str | None = None
    swift: str | None = None
    type: int | None = None
    person_type: int | None = None
    state: int | str | None = None
    country_destination_id: int | None = None
    document_number: str | None = None
    address: str | None = None
    phone: str | None = None
    email: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    country_destination: CountryDestination | None = None
    payment_methods: list[str] | None = None
    allowed_accounts: list[AllowedAccount] | None = None
    allowed: bool | None = None


class CreateDepositAccountRequest(TropipayModel):
    """Payload creating a beneficiary."""

    account_number: str
    first_name: str
    last_name: str
    country_destination_id: int
    type: int
    alias: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    swift: str | None = None


class UpdateDepositAccountRequest(TropipayModel):
    """Payload renaming a beneficiary."""

    id: int
    alias: str


class DeleteDepositAccountRequest(TropipayModel):
    """Body of a beneficiary deletion; the API requires a security code."""

    security_code: str


class ValidateAccountNumberRequest(TropipayModel):
    """Payload checking an account number before creating a beneficiary."""

    account_number: str
    country_destination_id: int
    type: int
    currency: str
    payment_type: int


class ValidateAccountNumberResponse(TropipayModel):
    """Result of an account number check; the detail fields may be null."""

    valid: bool = False
    type: Any = None
    error_code: Any = None
    error_message: Any = None


class DepositAccountList(TropipayModel):
    """One page of beneficiaries."""

    items: list[DepositAccount] = Field(default_factory=list)


__all__ = [
    "AllowedAccount",
    "CountryDestination",
    "CreateDepositAccountRequest",
    "DeleteDepositAccountRequest",
    "DepositAccount",
    "DepositAccountList",
    "UpdateDepositAccountRequest",
    "ValidateAccountNumberRequest",
    "ValidateAccountNumberResponse",
]
