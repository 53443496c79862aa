"""Application service: Place Order use case.

Turns a finalized cart into a persisted order: one header row, then one
line row per cart line.  The gateway offers no multi-statement
transaction, so a failed line write is compensated by deleting the header
that was just written.  Another reader may briefly see the header without
lines between the two writes.

The cart is not touched here.  The caller clears it once this returns.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable

import structlog

from storefront.application.dto import OrderDTO, order_to_dto
from storefront.domain.exceptions import ConsistencyError, GatewayError, ValidationError
from storefront.domain.model.address import Address, DeliveryZone
from storefront.domain.model.cart import Cart
from storefront.domain.model.order import Order
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.persistence_gateway import PersistenceGateway

logger = structlog.get_logger(__name__)


class PlaceOrderHandler:

    def __init__(self, gateway: PersistenceGateway, delivery_fee: Money | None = None) -> None:
        self._gateway = gateway
        self._delivery_fee = delivery_fee if delivery_fee is not None else Money.zero()

    async def handle(
        self,
        cart: Cart,
        address: Address,
        buyer_id: str,
        active_zones: Iterable[DeliveryZone],
    ) -> OrderDTO:
        """Place an order for everything in *cart*.

        Steps:
        1. Check preconditions locally (no I/O on failure).
        2. Freeze the cart into an Order (total and line snapshots).
        3. Write the header; nothing is persisted if this fails.
        4. Write the lines; on failure delete the header again.
        """
        if cart.is_empty:
            raise ValidationError("Cannot place an order from an empty cart")
        if not buyer_id or not buyer_id.strip():
            raise ValidationError("Buyer identity is required")
        address.validate(active_zones)

        order = Order.create(buyer_id=buyer_id, cart=cart, address=address)

        order_id = await self._gateway.create_order(order.header())
        log = logger.bind(order_id=order_id, buyer_id=buyer_id)

        try:
            await self._gateway.create_order_lines(order_id, order.lines)
        except GatewayError as exc:
            log.warning("Order line write failed, rolling back header", error=str(exc))
            await self._compensate(order_id, exc)
        except Exception as exc:
            log.warning("Order line write failed, rolling back header", error=repr(exc))
            wrapped = GatewayError(
                f"Order line write failed: {exc!r}", operation="create_order_lines"
            )
            wrapped.__cause__ = exc
            await self._compensate(order_id, wrapped)
        except asyncio.CancelledError:
            log.warning("Order placement cancelled, rolling back header")
            await self._rollback(order_id, "cancelled")
            raise

        order.id = order_id
        log.info(
            "Order placed",
            total=str(order.total),
            line_count=len(order.lines),
            status=order.status.value,
        )
        return order_to_dto(order, self._delivery_fee)

    async def _compensate(self, order_id: str, cause: GatewayError) -> None:
        await self._rollback(order_id, str(cause))
        raise GatewayError(
            f"Could not save order items; the order was rolled back: {cause}",
            operation="create_order_lines",
            retryable=False,
            compensated=True,
        ) from cause

    async def _rollback(self, order_id: str, reason: str) -> None:
        """Delete the header of a half-written order, exactly once."""
        try:
            await self._gateway.delete_order(order_id)
        except GatewayError as delete_exc:
            logger.critical(
                "Compensation failed, order header left without lines",
                order_id=order_id,
                line_error=reason,
                delete_error=str(delete_exc),
            )
            raise ConsistencyError(
                f"Order {order_id} was created but its items could not be saved "
                f"and the order could not be removed; manual reconciliation required",
                order_id=order_id,
            ) from delete_exc
