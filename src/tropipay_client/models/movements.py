"""Pydantic models for movements (transactions) and their filters."""

from enum import StrEnum
from typing import Any

from pydantic import Field

from .base import TropipayModel
from .users import User


class MovementState(StrEnum):
    """Known movement states. ``Movement.state`` stays a plain string to tolerate casing variations."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class Movement(TropipayModel):
    """A transaction record.

    ``id`` is an integer on REST endpoints and a string on the GraphQL one.
    ``recipient``, ``sender`` and ``account`` are only populated by GraphQL.
    """

    id: int | str
    amount: int | None = None
    currency: str | None = None
    state: str | None = None
    reference: str | None = None
    created_at: str | None = None
    completed_at: str | None = None
    balance_before: int | None = None
    balance_after: int | None = None
    recipient: User | None = None
    sender: User | None = None
    account: Any = None

    @property
    def movement_state(self) -> MovementState | None:
        """Return ``state`` as a ``MovementState``, or None if it is not a known value."""
        if self.state is None:
            return None
        try:
            return MovementState(self.state.lower())
        except ValueError:
            return None


class MovementFilter(TropipayModel):
    """Filter criteria for listing or searching movements. Unset fields are omitted."""

    state: list[str] | None = None
    currency: str | None = None
    amount_gte: int | None = None
    amount_lte: int | None = None
    created_at_from: str | None = None
    created_at_to: str | None = None
    reference: str | None = None
    account_id: str | None = None


class MovementList(TropipayModel):
    """One page of movements with the total match count."""

    items: list[Movement] = Field(default_factory=list)
    total_count: int = 0
    has_more: bool = False


class MovementSearchData(TropipayModel):
    """The ``data`` object of the GraphQL movements search."""

    movements: MovementList


__all__ = [
    "Movement",
    "MovementFilter",
    "MovementList",
    "MovementSearchData",
    "MovementState",
]
