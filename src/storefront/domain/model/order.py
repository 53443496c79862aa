"""Order aggregate — the core of the domain.

The Order is an aggregate root that owns its line items.  Its ``total``
is a frozen snapshot taken when the order is created; it is stored, not
recomputed, so later catalog price changes never touch placed orders.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.address import Address, PaymentMethod
from storefront.domain.model.cart import Cart
from storefront.domain.model.lifecycle import INITIAL_STATUS, OrderStatus
from storefront.domain.model.value_objects import Money, Quantity


@dataclass(frozen=True)
class OrderLine:
    """Captures the price snapshot of a cart line at order-placement time."""

    item_id: str
    name: str
    unit_price: Money  # locked at order-creation time
    quantity: Quantity

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value


@dataclass(frozen=True)
class OrderHeader:
    """The header row written before any line exists."""

    buyer_id: str
    status: OrderStatus
    total: Money
    shipping_address: str
    contact_name: str
    contact_phone: str
    payment_method: PaymentMethod
    delivery_zone: str | None
    created_at: datetime


@dataclass
class Order:
    """Aggregate root for placed orders.

    Use the ``Order.create()`` factory for new orders — it enforces all
    business rules.  The ``__init__`` is intentionally simple so the
    gateway can reconstitute persisted orders without re-validating.
    """

    id: str | None
    buyer_id: str
    total: Money
    shipping_address: str
    contact_name: str
    contact_phone: str
    payment_method: PaymentMethod
    lines: list[OrderLine]
    status: OrderStatus = INITIAL_STATUS
    delivery_zone: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(buyer_id: str, cart: Cart, address: Address) -> Order:
        """Freeze *cart* into a new, not yet persisted, order."""
        if not buyer_id or not buyer_id.strip():
            raise ValidationError("Buyer identity is required")
        if cart.is_empty:
            raise ValidationError("Cart is empty")

        lines = [
            OrderLine(
                item_id=line.item_id,
                name=line.name,
                unit_price=line.unit_price,  # <-- price snapshot
                quantity=Quantity(line.quantity),
            )
            for line in cart.lines
        ]
        return Order(
            id=None,
            buyer_id=buyer_id,
            total=cart.subtotal(),
            shipping_address=address.compose(),
            contact_name=address.recipient_name.strip(),
            contact_phone=address.phone.strip(),
            payment_method=address.payment_method,
            lines=lines,
            delivery_zone=address.zone.strip(),
        )

    # --- Persistence views ----------------------------------------------------

    def header(self) -> OrderHeader:
        return OrderHeader(
            buyer_id=self.buyer_id,
            status=self.status,
            total=self.total,
            shipping_address=self.shipping_address,
            contact_name=self.contact_name,
            contact_phone=self.contact_phone,
            payment_method=self.payment_method,
            delivery_zone=self.delivery_zone,
            created_at=self.created_at,
        )

    @staticmethod
    def from_header(order_id: str, header: OrderHeader, lines: list[OrderLine]) -> Order:
        return Order(
            id=order_id,
            buyer_id=header.buyer_id,
            total=header.total,
            shipping_address=header.shipping_address,
            contact_name=header.contact_name,
            contact_phone=header.contact_phone,
            payment_method=header.payment_method,
            lines=list(lines),
            status=header.status,
            delivery_zone=header.delivery_zone,
            created_at=header.created_at,
        )

    def with_status(self, status: OrderStatus) -> Order:
        return replace(self, status=status, lines=list(self.lines))

    # --- Computed properties --------------------------------------------------

    @property
    def item_count(self) -> int:
        return sum(line.quantity.value for line in self.lines)
