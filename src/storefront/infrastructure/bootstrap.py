"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from storefront.application.list_orders import ListOrdersHandler
from storefront.application.list_zones import ListDeliveryZonesHandler
from storefront.application.place_order import PlaceOrderHandler
from storefront.application.track_order import DeliveryTracker, TrackOrderHandler
from storefront.application.update_order_status import UpdateOrderStatusHandler
from storefront.domain.service.delivery_simulator import DeliveryPositionSimulator
from storefront.domain.service.zone_locator import ZoneLocator
from storefront.infrastructure.config import Settings
from storefront.infrastructure.persistence.json_catalog_repository import (
    JsonCatalogRepository,
)
from storefront.infrastructure.persistence.json_gateway import JsonPersistenceGateway


class Container:
    """Handlers sharing one gateway built from *settings*.

    Use as an async context manager so the gateway is connected before the
    first call and closed afterwards.
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.gateway = JsonPersistenceGateway(settings.data_dir)
        self.catalog = JsonCatalogRepository(settings.data_dir / "catalog.json")

    async def __aenter__(self) -> Container:
        await self.gateway.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.gateway.close()

    def place_order(self) -> PlaceOrderHandler:
        return PlaceOrderHandler(self.gateway, self.settings.delivery_fee)

    def update_order_status(self) -> UpdateOrderStatusHandler:
        return UpdateOrderStatusHandler(self.gateway, self.settings.delivery_fee)

    def list_orders(self) -> ListOrdersHandler:
        return ListOrdersHandler(self.gateway, self.settings.delivery_fee)

    def list_zones(self) -> ListDeliveryZonesHandler:
        return ListDeliveryZonesHandler(self.gateway)

    def track_order(self) -> TrackOrderHandler:
        return TrackOrderHandler(
            self.gateway,
            DeliveryPositionSimulator(self.settings.animation_duration_ms),
            ZoneLocator(),
        )

    def delivery_tracker(self, on_position=None) -> DeliveryTracker:
        return DeliveryTracker(
            DeliveryPositionSimulator(self.settings.animation_duration_ms),
            ZoneLocator(),
            step_ms=self.settings.animation_step_ms,
            on_position=on_position,
        )


def container(settings: Settings | None = None) -> Container:
    return Container(settings if settings is not None else Settings.from_env())
