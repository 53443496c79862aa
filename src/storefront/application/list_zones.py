"""Application service: delivery zones offered at checkout (query)."""

from __future__ import annotations

from storefront.domain.model.address import DeliveryZone
from storefront.domain.repository.persistence_gateway import PersistenceGateway


class ListDeliveryZonesHandler:

    def __init__(self, gateway: PersistenceGateway) -> None:
        self._gateway = gateway

    async def handle(self) -> list[DeliveryZone]:
        zones = await self._gateway.list_active_zones()
        return sorted((z for z in zones if z.is_active), key=lambda z: z.name)
