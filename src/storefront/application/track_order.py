"""Application service: order tracking.

``TrackOrderHandler`` answers one-off "where is my order" queries.
``DeliveryTracker`` backs a live tracking view: it owns the single
repeating timer that moves the rider and makes sure that timer never
outlives the phase, the order or the view it belongs to.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from dataclasses import dataclass

import structlog

from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.lifecycle import (
    OrderStatus,
    is_completed,
    is_shipped,
    progress_percent,
)
from storefront.domain.model.order import Order
from storefront.domain.model.value_objects import Coordinate
from storefront.domain.repository.persistence_gateway import PersistenceGateway
from storefront.domain.service.delivery_simulator import DeliveryPositionSimulator
from storefront.domain.service.zone_locator import CITY_CENTER, ZoneLocator

logger = structlog.get_logger(__name__)

DEFAULT_STEP_MS = 50


def tracking_message(status: OrderStatus) -> str:
    if status == OrderStatus.CANCELLED:
        return "Order was cancelled."
    if is_completed(status):
        return "Order delivered successfully!"
    if is_shipped(status):
        return "Rider is en route to your location."
    return "Restaurant is preparing your food."


def _is_moving(status: OrderStatus) -> bool:
    return is_shipped(status) and not is_completed(status)


@dataclass(frozen=True)
class TrackingDTO:
    """Output: tracking panel contents."""

    order_id: str
    status: str
    message: str
    progress_percent: int
    origin: Coordinate
    destination: Coordinate
    position: Coordinate


class TrackOrderHandler:

    def __init__(
        self,
        gateway: PersistenceGateway,
        simulator: DeliveryPositionSimulator,
        locator: ZoneLocator,
        origin: Coordinate = CITY_CENTER,
    ) -> None:
        self._gateway = gateway
        self._simulator = simulator
        self._locator = locator
        self._origin = origin

    async def handle(self, order_id: str, buyer_id: str, elapsed_ms: float = 0) -> TrackingDTO:
        """Rider position for an order, *elapsed_ms* after it went out for delivery."""
        order = await self._load(order_id, buyer_id)

        destination = self._locator.locate(order)
        return TrackingDTO(
            order_id=order_id,
            status=order.status.value,
            message=tracking_message(order.status),
            progress_percent=progress_percent(order.status),
            origin=self._origin,
            destination=destination,
            position=self._simulator.current_position(
                order, self._origin, destination, elapsed_ms
            ),
        )

    async def follow(self, order_id: str, buyer_id: str, tracker: DeliveryTracker) -> Coordinate:
        """Play the rider animation for an order on *tracker* until it stops.

        Returns the last position shown.  The tracker is closed afterwards.
        """
        order = await self._load(order_id, buyer_id)
        tracker.show(order)
        try:
            await tracker.wait()
        finally:
            tracker.close()
        return tracker.position

    async def _load(self, order_id: str, buyer_id: str) -> Order:
        order = await self._gateway.get_order(order_id)
        if order is None or order.buyer_id != buyer_id:
            raise EntityNotFoundError(f"Order #{order_id} not found")
        return order


class DeliveryTracker:
    """Drives the rider animation for one tracking view.

    At most one timer task runs per tracker.  It is cancelled when the
    animation reaches the destination, when the order completes or stops
    being out for delivery, when another order is shown, and on
    ``close()``.  Entering the out-for-delivery phase restarts progress
    from zero.

    The timer is an asyncio task, so ``show()`` and ``update()`` must be
    called from inside a running event loop when the order is moving.
    """

    def __init__(
        self,
        simulator: DeliveryPositionSimulator,
        locator: ZoneLocator,
        origin: Coordinate = CITY_CENTER,
        step_ms: int = DEFAULT_STEP_MS,
        clock: Callable[[], float] = time.monotonic,
        on_position: Callable[[Coordinate], None] | None = None,
    ) -> None:
        self._simulator = simulator
        self._locator = locator
        self._origin = origin
        self._step_s = step_ms / 1000
        self._clock = clock
        self._on_position = on_position

        self._order: Order | None = None
        self._destination = origin
        self._position = origin
        self._phase_started: float | None = None
        self._task: asyncio.Task | None = None

    # --- View lifecycle -------------------------------------------------------

    def show(self, order: Order) -> None:
        """Start tracking *order*, dropping whatever was shown before."""
        self._stop_timer()
        self._order = order
        self._destination = self._locator.locate(order)
        self._phase_started = None
        self._sync()

    def update(self, order: Order) -> None:
        """Replace the displayed order with a fresher copy from the gateway."""
        if self._order is None or order.id != self._order.id:
            self.show(order)
            return
        self._order = order
        self._sync()

    def close(self) -> None:
        self._stop_timer()
        self._order = None

    # --- State ----------------------------------------------------------------

    @property
    def position(self) -> Coordinate:
        return self._position

    @property
    def destination(self) -> Coordinate:
        return self._destination

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def tick(self) -> bool:
        """Advance the rider to the current time.  Returns True when arrived."""
        if self._order is None or self._phase_started is None:
            return True
        elapsed_ms = (self._clock() - self._phase_started) * 1000
        self._set_position(
            self._simulator.current_position(
                self._order, self._origin, self._destination, elapsed_ms
            )
        )
        return self._simulator.progress(elapsed_ms) >= 1.0

    async def wait(self) -> None:
        """Block until the running animation, if any, has stopped."""
        while self._task is not None and not self._task.done():
            await asyncio.wait({self._task})

    # --- Internal helpers -----------------------------------------------------

    def _sync(self) -> None:
        assert self._order is not None
        status = self._order.status
        if _is_moving(status):
            if self._phase_started is None:
                self._phase_started = self._clock()
                self._set_position(self._origin)
                self._start_timer()
            return

        self._stop_timer()
        self._phase_started = None
        self._set_position(
            self._simulator.position_for_status(status, self._origin, self._destination, 0)
        )

    def _start_timer(self) -> None:
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.debug("Rider animation started", order_id=self._order.id if self._order else None)

    def _stop_timer(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._step_s)
            if self.tick():
                break
        self._task = None

    def _set_position(self, position: Coordinate) -> None:
        self._position = position
        if self._on_position is not None:
            self._on_position(position)
