"""Unit tests for the delivery position simulator."""

import pytest

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.address import PaymentMethod
from storefront.domain.model.lifecycle import OrderStatus
from storefront.domain.model.order import Order
from storefront.domain.model.value_objects import Money
from storefront.domain.service.delivery_simulator import DeliveryPositionSimulator
from tests.fakes import DESTINATION, ORIGIN


def _order(status: OrderStatus) -> Order:
    return Order(
        id="ord-1",
        buyer_id="buyer-1",
        total=Money.of("200.00"),
        shipping_address="Iligan City, Brgy. Tibanga • 12 Rizal St",
        contact_name="Maria Santos",
        contact_phone="09171234567",
        payment_method=PaymentMethod.COD,
        lines=[],
        status=status,
        delivery_zone="Tibanga",
    )


class TestCurrentPosition:

    @pytest.mark.parametrize("elapsed", [0, 4000, 8000, 1_000_000])
    def test_not_shipped_stays_at_origin(self, elapsed):
        sim = DeliveryPositionSimulator()
        assert sim.current_position(_order(OrderStatus.PREPARING), ORIGIN, DESTINATION, elapsed) == ORIGIN

    def test_cancelled_stays_at_origin(self):
        sim = DeliveryPositionSimulator()
        assert sim.current_position(_order(OrderStatus.CANCELLED), ORIGIN, DESTINATION, 9000) == ORIGIN

    @pytest.mark.parametrize("status", [OrderStatus.DELIVERED, OrderStatus.COMPLETED])
    def test_completed_is_at_destination(self, status):
        sim = DeliveryPositionSimulator()
        assert sim.current_position(_order(status), ORIGIN, DESTINATION, 0) == DESTINATION

    def test_halfway_is_midpoint(self):
        sim = DeliveryPositionSimulator(duration_ms=8000)
        pos = sim.current_position(_order(OrderStatus.OUT_FOR_DELIVERY), ORIGIN, DESTINATION, 4000)
        assert pos.lat == pytest.approx((8.47 + 8.23) / 2)
        assert pos.lng == pytest.approx((124.64 + 124.25) / 2)

    def test_start_of_trip_is_origin(self):
        sim = DeliveryPositionSimulator()
        assert sim.current_position(_order(OrderStatus.OUT_FOR_DELIVERY), ORIGIN, DESTINATION, 0) == ORIGIN

    def test_progress_is_clamped(self):
        sim = DeliveryPositionSimulator(duration_ms=8000)
        late = sim.current_position(_order(OrderStatus.OUT_FOR_DELIVERY), ORIGIN, DESTINATION, 20_000)
        early = sim.current_position(_order(OrderStatus.OUT_FOR_DELIVERY), ORIGIN, DESTINATION, -500)
        assert late.lat == pytest.approx(DESTINATION.lat)
        assert late.lng == pytest.approx(DESTINATION.lng)
        assert early == ORIGIN


class TestProgress:

    def test_fractions(self):
        sim = DeliveryPositionSimulator(duration_ms=1000)
        assert sim.progress(0) == 0.0
        assert sim.progress(250) == 0.25
        assert sim.progress(5000) == 1.0

    def test_non_positive_duration_rejected(self):
        with pytest.raises(ValidationError, match="must be positive"):
            DeliveryPositionSimulator(duration_ms=0)
