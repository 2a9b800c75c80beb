"""Pydantic models for linked accounts and crypto self-charge addresses."""

from pydantic import Field

from .base import TropipayModel


class AddTropicardAccountRequest(TropipayModel):
    """Payload linking a Tropicard to the user's account."""

    tropicard_number: str
    pin: str = Field(repr=False)


class CryptoAddress(TropipayModel):
    """A deposit address for a specific network and currency."""

    address: str
    network: str | None = None
    currency: str | None = None


class CryptoAddressResponse(TropipayModel):
    """Crypto self-charge addresses of an account.

    ``fee_percent`` is expressed in hundredths of a percent (300 = 3.00%) and
    ``fee_fixed`` in cents.
    """

    fee_percent: int | None = None
    fee_fixed: int | None = None
    accounts: list[CryptoAddress] = Field(default_factory=list)


__all__ = ["AddTropicardAccountRequest", "CryptoAddress", "CryptoAddressResponse"]
