"""Helpers for listing and searching movements.

REST listings take the filter as a JSON-encoded ``query`` parameter. The
advanced search goes through the GraphQL business endpoint, whose query
document is defined here.
"""

from ..client.tropipay_client import TropipayClient
from ..models.movements import MovementFilter, MovementList, MovementSearchData
from .common import filter_to_json, pagination, path_segment, with_query

GRAPHQL_BUSINESS_PATH = "/movements/business"

SEARCH_MOVEMENTS_QUERY = """
query GetMovements($filter: MovementFilter, $pagination: Pagination) {
  movements(filter: $filter, pagination: $pagination) {
    items {
      id
      amount
      state
      currency
      createdAt
      completedAt
      balanceBefore
      balanceAfter
      reference
      recipient {
        name
        email
      }
      sender {
        name
        email
      }
    }
    totalCount
  }
}
""".strip()


async def _list(
    client: TropipayClient,
    path: str,
    *,
    limit: int,
    offset: int,
    movement_filter: MovementFilter | None,
) -> MovementList:
    params = pagination(limit, offset) | {"query": filter_to_json(movement_filter)}
    return await client.request("GET", with_query(path, params), response_type=MovementList)


async def list_movements(
    client: TropipayClient,
    *,
    limit: int = 0,
    offset: int = 0,
    movement_filter: MovementFilter | None = None,
) -> MovementList:
    """List movements of the authenticated user.

    Args:
        client: The Tropipay client.
        limit: Page size; 0 uses the server default.
        offset: Number of records to skip.
        movement_filter: Optional filter criteria.

    Returns:
        One page of movements.

    """
    return await _list(client, "/movements/", limit=limit, offset=offset, movement_filter=movement_filter)


async def list_account_movements(
    client: TropipayClient,
    account_id: str | int,
    *,
    limit: int = 0,
    offset: int = 0,
    movement_filter: MovementFilter | None = None,
) -> MovementList:
    """List movements of a single account. See ``list_movements`` for the arguments."""
    path = f"/accounts/{path_segment(account_id)}/movements"
    return await _list(client, path, limit=limit, offset=offset, movement_filter=movement_filter)


async def search_movements(
    client: TropipayClient,
    *,
    movement_filter: MovementFilter | None = None,
    limit: int = 0,
    offset: int = 0,
) -> MovementList:
    """Search movements through the GraphQL business endpoint.

    Args:
        client: The Tropipay client.
        movement_filter: Optional filter criteria (``account_id`` is GraphQL-only).
        limit: Page size.
        offset: Number of records to skip.

    Returns:
        The matching movements.

    Raises:
        APIError: If the response carries GraphQL errors.

    """
    variables = {
        "filter": movement_filter.model_dump(mode="json", by_alias=True, exclude_none=True) if movement_filter else None,
        "pagination": pagination(limit, offset),
    }
    data = await client.graphql(
        GRAPHQL_BUSINESS_PATH,
        SEARCH_MOVEMENTS_QUERY,
        variables,
        response_type=MovementSearchData,
    )
    return data.movements


__all__ = [
    "GRAPHQL_BUSINESS_PATH",
    "SEARCH_MOVEMENTS_QUERY",
    "list_account_movements",
    "list_movements",
    "search_movements",
]
