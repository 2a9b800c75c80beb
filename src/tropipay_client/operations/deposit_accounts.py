"""Operations on deposit accounts (beneficiaries)."""

import logging

from ..client.tropipay_client import TropipayClient
from ..models.deposit_accounts import (
    CreateDepositAccountRequest,
    DeleteDepositAccountRequest,
    DepositAccount,
    DepositAccountList,
    UpdateDepositAccountRequest,
    ValidateAccountNumberRequest,
    ValidateAccountNumberResponse,
)
from .common import pagination, path_segment, with_query

logger = logging.getLogger("tropipay_client.operations.deposit_accounts")

DEPOSIT_ACCOUNTS_PATH = "/depositaccounts/"


async def create_deposit_account(client: TropipayClient, request: CreateDepositAccountRequest) -> DepositAccount:
    """Create a new beneficiary."""
    return await client.request("POST", DEPOSIT_ACCOUNTS_PATH, request, DepositAccount)


async def list_deposit_accounts(
    client: TropipayClient,
    *,
    limit: int = 0,
    offset: int = 0,
    search: str | None = None,
) -> list[DepositAccount]:
    """List beneficiaries, optionally filtered by a free-text search.

    Args:
        client: The Tropipay client.
        limit: Page size; 0 uses the server default.
        offset: Number of records to skip.
        search: Optional search term.

    Returns:
        The beneficiaries on the requested page.

    """
    path = with_query(DEPOSIT_ACCOUNTS_PATH, pagination(limit, offset) | {"search": search})
    page = await client.request("GET", path, response_type=DepositAccountList)
    return page.items


async def get_deposit_account(client: TropipayClient, account_id: int) -> DepositAccount:
    """Return a single beneficiary."""
    path = f"/depositaccounts/{path_segment(account_id)}"
    return await client.request("GET", path, response_type=DepositAccount)


async def update_deposit_account(client: TropipayClient, request: UpdateDepositAccountRequest) -> DepositAccount:
    """Update the alias of a beneficiary."""
    return await client.request("PUT", DEPOSIT_ACCOUNTS_PATH, request, DepositAccount)


async def delete_deposit_account(client: TropipayClient, account_id: int, security_code: str) -> None:
    """Delete a beneficiary; the API requires a security code in the body."""
    path = f"/depositaccounts/{path_segment(account_id)}"
    logger.info("Deleting deposit account %s.", account_id)
    await client.request("DELETE", path, DeleteDepositAccountRequest(security_code=security_code))


async def validate_account_number(
    client: TropipayClient,
    request: ValidateAccountNumberRequest,
) -> ValidateAccountNumberResponse:
    """Check the format and existence of an account number."""
    return await client.request(
        "POST",
        "/depositaccounts/validateaccountnumber",
        request,
        ValidateAccountNumberResponse,
    )


__all__ = [
    "create_deposit_account",
    "delete_deposit_account",
    "get_deposit_account",
    "list_deposit_accounts",
    "update_deposit_account",
    "validate_account_number",
]
