"""Pydantic models for payment cards (hosted payment links)."""

from pydantic import AliasChoices, Field

from .base import TropipayModel


class PaymentCard(TropipayModel):
    """A payment link that a payer can use to pay a fixed amount."""

    id: int | str | None = None
    reference: str | None = None
    concept: str | None = None
    description: str | None = None
    amount: int | None = None
    currency: str | None = None
    short_url: str | None = None
    payment_url: str | None = None
    state: int | str | None = None
    single_use: bool | None = None
    expiration_date: str | None = None
    created_at: str | None = None


class CreatePaymentCardRequest(TropipayModel):
    """Payload creating a payment card. ``amount`` is in cents."""

    reference: str
    concept: str
    amount: int
    currency: str
    description: str | None = None
    single_use: bool | None = None
    reason_id: int | None = None
    expiration_days: int | None = None
    lang: str | None = None
    url_success: str | None = None
    url_failed: str | None = None
    url_notification: str | None = None
    service_date: str | None = None
    direct_payment: bool | None = None
    payment_methods: list[str] | None = None


class PaymentCardList(TropipayModel):
    """Paged payment card listing; older API versions name the list ``rows``."""

    items: list[PaymentCard] = Field(default_factory=list, validation_alias=AliasChoices("items", "rows"))
    count: int | None = None


__all__ = ["CreatePaymentCardRequest", "PaymentCard", "PaymentCardList"]
