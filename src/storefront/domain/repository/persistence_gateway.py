"""Abstract persistence gateway for orders and delivery zones.

Every call is a coroutine: the calling flow is suspended until the store
answers and other events may run in the meantime.  Implementations raise
GatewayError (or AuthorizationError) on failure and never return partial
results.

Instances are built explicitly and injected; they are opened with
``connect()`` and released with ``close()``, or used as an async context
manager.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.address import DeliveryZone
from storefront.domain.model.lifecycle import OrderStatus
from storefront.domain.model.order import Order, OrderHeader, OrderLine


class PersistenceGateway(ABC):

    async def connect(self) -> None:
        """Open the underlying connection (no-op by default)."""

    async def close(self) -> None:
        """Release the underlying connection (no-op by default)."""

    async def __aenter__(self) -> PersistenceGateway:
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    @abstractmethod
    async def create_order(self, header: OrderHeader) -> str:
        """Write one order header row and return its new id."""

    @abstractmethod
    async def create_order_lines(self, order_id: str, lines: list[OrderLine]) -> None:
        """Write all lines for *order_id*; all or nothing."""

    @abstractmethod
    async def delete_order(self, order_id: str) -> None:
        """Delete an order header (and any lines it has)."""

    @abstractmethod
    async def update_order_status(
        self, order_id: str, buyer_id: str, new_status: OrderStatus
    ) -> Order:
        """Set the status if *buyer_id* owns the order; return the stored order.

        Raises AuthorizationError without changing anything when the
        order belongs to someone else.
        """

    @abstractmethod
    async def get_order(self, order_id: str) -> Order | None:
        """Return an order with its lines, or None if not found."""

    @abstractmethod
    async def list_orders_for_buyer(self, buyer_id: str) -> list[Order]:
        """All orders of *buyer_id*, newest first, lines included."""

    @abstractmethod
    async def list_active_zones(self) -> list[DeliveryZone]:
        """Zones currently offered for delivery, sorted by name."""
