"""Inputs and outputs of the use-case handlers.

Handlers accept plain specs and return display-ready DTOs, so the CLI
never touches an ``Order`` or a ``Money`` directly.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.lifecycle import (
    Actor,
    is_awaiting_receipt_confirmation,
    is_cancellable,
    progress_percent,
)
from storefront.domain.model.order import Order
from storefront.domain.model.value_objects import Money


@dataclass(frozen=True)
class OrderItemSpec:
    """Input: what the buyer asked for (catalog item id + quantity)."""

    item_id: str
    quantity: int


@dataclass(frozen=True)
class Requester:
    """Input: who is asking for a status change."""

    identity: str
    actor: Actor = Actor.BUYER

    def __post_init__(self) -> None:
        if not self.identity or not self.identity.strip():
            raise ValidationError("Requester identity is required")


@dataclass(frozen=True)
class OrderLineDTO:
    """Output: a single order line as displayed to the user."""

    item_id: str
    name: str
    quantity: int
    unit_price: str  # formatted, e.g. "₱50.00"
    line_total: str


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: str
    buyer_id: str
    status: str
    items: list[OrderLineDTO]
    total: str
    delivery_fee: str
    grand_total: str
    shipping_address: str
    contact_name: str
    contact_phone: str
    payment_method: str
    created_at: str
    progress_percent: int
    is_cancellable: bool
    awaiting_receipt: bool


def order_to_dto(order: Order, delivery_fee: Money) -> OrderDTO:
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        buyer_id=order.buyer_id,
        status=order.status.value,
        items=[
            OrderLineDTO(
                item_id=line.item_id,
                name=line.name,
                quantity=line.quantity.value,
                unit_price=str(line.unit_price),
                line_total=str(line.line_total),
            )
            for line in order.lines
        ],
        total=str(order.total),
        delivery_fee=str(delivery_fee),
        grand_total=str(order.total + delivery_fee),
        shipping_address=order.shipping_address,
        contact_name=order.contact_name,
        contact_phone=order.contact_phone,
        payment_method=order.payment_method.value,
        created_at=order.created_at.strftime("%Y-%m-%d %H:%M UTC"),
        progress_percent=progress_percent(order.status),
        is_cancellable=is_cancellable(order.status),
        awaiting_receipt=is_awaiting_receipt_confirmation(order.status),
    )
