"""Common utilities for Tropipay operations modules.

Shared helpers for building request paths used by all resource modules
(users, movements, deposit accounts, accounts, payment cards).
"""

from typing import Any, TypeAlias
from urllib.parse import quote

import httpx

from ..models.base import TropipayModel

# Scalar values accepted in query strings
QueryValue: TypeAlias = str | int | None


def path_segment(value: str | int) -> str:
    """Quote a caller-supplied identifier for use as a single path segment.

    Raises:
        ValueError: If the identifier is empty.

    """
    text = str(value)
    if not text:
        msg = "Path identifiers must not be empty."
        raise ValueError(msg)
    return quote(text, safe="")


def with_query(path: str, params: dict[str, QueryValue]) -> str:
    """Append the non-empty ``params`` to ``path`` as a query string.

    ``None``, empty strings and zero values are omitted, so ``limit=0`` means
    "server default".

    Args:
        path: Request path starting with ``/``.
        params: Query parameters in the order they should appear.

    Returns:
        The path, with ``?query`` appended when any parameter is set.

    """
    present = {key: value for key, value in params.items() if value not in (None, "", 0)}
    if not present:
        return path
    return f"{path}?{httpx.QueryParams(present)}"


def filter_to_json(model: TropipayModel | None) -> str | None:
    """Serialize a filter model to compact camelCase JSON, or None when absent."""
    if model is None:
        return None
    return model.model_dump_json(by_alias=True, exclude_none=True)


def pagination(limit: int, offset: int) -> dict[str, Any]:
    """Return the standard ``limit``/``offset`` query parameters.

    Raises:
        ValueError: If either value is negative.

    """
    if limit < 0 or offset < 0:
        msg = f"limit and offset must not be negative (got limit={limit}, offset={offset})."
        raise ValueError(msg)
    return {"limit": limit, "offset": offset}


__all__ = [
    "QueryValue",
    "filter_to_json",
    "pagination",
    "path_segment",
    "with_query",
]
