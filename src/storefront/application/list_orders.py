"""Application service: order history queries."""

from __future__ import annotations

from storefront.application.dto import OrderDTO, order_to_dto
from storefront.domain.exceptions import EntityNotFoundError, ValidationError
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.persistence_gateway import PersistenceGateway


class ListOrdersHandler:

    def __init__(self, gateway: PersistenceGateway, delivery_fee: Money | None = None) -> None:
        self._gateway = gateway
        self._delivery_fee = delivery_fee if delivery_fee is not None else Money.zero()

    async def handle(self, buyer_id: str) -> list[OrderDTO]:
        """Every order of *buyer_id*, newest first."""
        if not buyer_id or not buyer_id.strip():
            raise ValidationError("Buyer identity is required")
        orders = await self._gateway.list_orders_for_buyer(buyer_id)
        return [order_to_dto(order, self._delivery_fee) for order in orders]

    async def show(self, order_id: str, buyer_id: str) -> OrderDTO:
        order = await self._gateway.get_order(order_id)
        # Someone else's order is reported exactly like a missing one.
        if order is None or order.buyer_id != buyer_id:
            raise EntityNotFoundError(f"Order #{order_id} not found")
        return order_to_dto(order, self._delivery_fee)
