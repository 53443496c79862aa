"""Domain service: cosmetic rider position for the tracking view.

There is no location feed.  The rider is drawn on the straight line
between origin and destination, moved by elapsed time only.
"""

from __future__ import annotations

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.lifecycle import OrderStatus, is_completed, is_shipped
from storefront.domain.model.order import Order
from storefront.domain.model.value_objects import Coordinate

DEFAULT_DURATION_MS = 8000


class DeliveryPositionSimulator:

    def __init__(self, duration_ms: int = DEFAULT_DURATION_MS) -> None:
        if duration_ms <= 0:
            raise ValidationError("Animation duration must be positive")
        self._duration_ms = duration_ms

    @property
    def duration_ms(self) -> int:
        return self._duration_ms

    def progress(self, elapsed_ms: float) -> float:
        """Fraction of the trip covered after *elapsed_ms*, clamped to 0..1."""
        return min(1.0, max(0.0, elapsed_ms / self._duration_ms))

    def position_for_status(
        self,
        status: OrderStatus,
        origin: Coordinate,
        destination: Coordinate,
        elapsed_ms: float,
    ) -> Coordinate:
        if not is_shipped(status):
            return origin
        if is_completed(status):
            return destination
        return origin.interpolate(destination, self.progress(elapsed_ms))

    def current_position(
        self,
        order: Order,
        origin: Coordinate,
        destination: Coordinate,
        elapsed_ms: float,
    ) -> Coordinate:
        """Where to draw the rider for *order*.

        Not shipped yet: at the origin.  Delivered or completed: at the
        destination.  Otherwise interpolated by time since the order went
        out for delivery.
        """
        return self.position_for_status(order.status, origin, destination, elapsed_ms)
