"""Operations on linked accounts: Tropicard linking and crypto self-charge addresses."""

from typing import Any

from ..client.tropipay_client import TropipayClient
from ..models.accounts import AddTropicardAccountRequest, CryptoAddressResponse
from .common import path_segment


async def add_tropicard_account(client: TropipayClient, request: AddTropicardAccountRequest) -> dict[str, Any]:
    """Link a Tropicard to the user's account.

    The response shape is not documented; it is returned as a plain mapping
    and usually carries the new account ``id``.
    """
    return await client.request("POST", "/accounts/", request, dict[str, Any])


async def get_crypto_address_for_self_charge(client: TropipayClient, account_id: str | int) -> CryptoAddressResponse:
    """Return the cryptocurrency addresses for depositing funds into an account."""
    path = f"/accounts/{path_segment(account_id)}/selfcharge/crypto"
    return await client.request("GET", path, response_type=CryptoAddressResponse)


__all__ = ["add_tropicard_account", "get_crypto_address_for_self_charge"]
