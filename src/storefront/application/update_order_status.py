"""Application service: order status transitions.

Buyers may cancel while the order is still being prepared and confirm
receipt once it is delivered.  Operators (restaurant or rider side) move
it forward.  Every request is checked against the lifecycle table before
anything is written, and the order is re-read from the gateway first so
the check runs against the stored status rather than a cached copy.
"""

from __future__ import annotations

import structlog

from storefront.application.dto import OrderDTO, Requester, order_to_dto
from storefront.domain.exceptions import (
    AuthorizationError,
    EntityNotFoundError,
    IllegalTransitionError,
)
from storefront.domain.model.lifecycle import (
    Actor,
    OrderStatus,
    ensure_transition,
    next_status,
)
from storefront.domain.model.order import Order
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.persistence_gateway import PersistenceGateway

logger = structlog.get_logger(__name__)


class UpdateOrderStatusHandler:

    def __init__(self, gateway: PersistenceGateway, delivery_fee: Money | None = None) -> None:
        self._gateway = gateway
        self._delivery_fee = delivery_fee if delivery_fee is not None else Money.zero()

    async def handle(self, order_id: str, requester: Requester, target: OrderStatus) -> OrderDTO:
        """Move order *order_id* to *target* on behalf of *requester*.

        Returns the order as stored after the write; callers should
        replace whatever copy they were displaying with it.
        """
        order = await self._load(order_id)
        if requester.actor == Actor.BUYER and order.buyer_id != requester.identity:
            # Reported like a missing order so its status is not disclosed.
            raise EntityNotFoundError(f"Order #{order_id} not found")
        log = logger.bind(order_id=order_id, requester=requester.identity, actor=requester.actor.value)

        try:
            ensure_transition(order.status, requester.actor, target)
        except IllegalTransitionError:
            log.warning(
                "Status change rejected",
                current=order.status.value,
                requested=target.value,
            )
            raise

        owner_scope = self._owner_scope(order, requester)
        updated = await self._gateway.update_order_status(order_id, owner_scope, target)
        log.info("Order status changed", previous=order.status.value, status=updated.status.value)
        return order_to_dto(updated, self._delivery_fee)

    async def cancel(self, order_id: str, buyer_id: str) -> OrderDTO:
        return await self.handle(order_id, Requester(buyer_id), OrderStatus.CANCELLED)

    async def confirm_receipt(self, order_id: str, buyer_id: str) -> OrderDTO:
        return await self.handle(order_id, Requester(buyer_id), OrderStatus.COMPLETED)

    async def advance(self, order_id: str, operator_id: str) -> OrderDTO:
        """Operator action: move the order one step forward."""
        requester = Requester(operator_id, Actor.OPERATOR)
        order = await self._load(order_id)
        return await self.handle(order_id, requester, next_status(order.status))

    # --- Internal helpers -----------------------------------------------------

    async def _load(self, order_id: str) -> Order:
        order = await self._gateway.get_order(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")
        return order

    @staticmethod
    def _owner_scope(order: Order, requester: Requester) -> str:
        """Identity passed to the gateway's ownership check.

        Buyers already match the stored owner; the gateway checks it again.
        Operators act on someone else's order, so they must not be that
        buyer; the write is then scoped to the order's owner.
        """
        if requester.actor == Actor.BUYER:
            return requester.identity
        if requester.identity == order.buyer_id:
            raise AuthorizationError(
                "Buyers cannot perform operator actions on their own orders",
                operation="update_order_status",
            )
        return order.buyer_id
