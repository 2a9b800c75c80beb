"""Operations on payment cards (hosted payment links)."""

from ..client.tropipay_client import TropipayClient
from ..models.payment_cards import CreatePaymentCardRequest, PaymentCard, PaymentCardList
from .common import path_segment

PAYMENT_CARDS_PATH = "/paymentcards/"


async def list_payment_cards(client: TropipayClient) -> list[PaymentCard]:
    """List the payment cards of the authenticated user.

    The endpoint answers with either a bare list or a paged ``items``/``rows``
    envelope depending on the API version; both are accepted.
    """
    result = await client.request("GET", PAYMENT_CARDS_PATH, response_type=list[PaymentCard] | PaymentCardList)
    if isinstance(result, PaymentCardList):
        return result.items
    return result


async def create_payment_card(client: TropipayClient, request: CreatePaymentCardRequest) -> PaymentCard:
    """Create a payment card and return it with its ``short_url``."""
    return await client.request("POST", PAYMENT_CARDS_PATH, request, PaymentCard)


async def get_payment_card(client: TropipayClient, card_id: str | int) -> PaymentCard:
    """Return a single payment card."""
    return await client.request("GET", f"/paymentcards/{path_segment(card_id)}", response_type=PaymentCard)


__all__ = ["create_payment_card", "get_payment_card", "list_payment_cards"]
