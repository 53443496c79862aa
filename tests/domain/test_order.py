"""Unit tests for the Order aggregate."""

import pytest

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.address import Address, PaymentMethod
from storefront.domain.model.cart import Cart
from storefront.domain.model.lifecycle import OrderStatus
from storefront.domain.model.order import Order, OrderLine
from storefront.domain.model.value_objects import Money, Quantity
from tests.fakes import make_item

ADDRESS = Address("Maria Santos", "09171234567", "12 Rizal St", "Tibanga", PaymentMethod.E_WALLET)


def _cart() -> Cart:
    cart = Cart()
    cart.add(make_item("f1", "Chicken Inasal", "50.00"), 2)
    cart.add(make_item("f2", "Pork Sisig", "100.00"))
    return cart


class TestOrderCreation:

    def test_happy_path(self):
        order = Order.create("buyer-1", _cart(), ADDRESS)
        assert order.id is None  # assigned by the gateway
        assert order.buyer_id == "buyer-1"
        assert order.status == OrderStatus.PREPARING
        assert order.total == Money.of("200.00")
        assert order.item_count == 3
        assert order.shipping_address == "Iligan City, Brgy. Tibanga • 12 Rizal St"
        assert order.delivery_zone == "Tibanga"
        assert order.contact_name == "Maria Santos"
        assert order.payment_method == PaymentMethod.E_WALLET

    def test_lines_are_snapshots_of_cart_lines(self):
        order = Order.create("buyer-1", _cart(), ADDRESS)
        assert order.lines == [
            OrderLine("f1", "Chicken Inasal", Money.of("50.00"), Quantity(2)),
            OrderLine("f2", "Pork Sisig", Money.of("100.00"), Quantity(1)),
        ]

    def test_total_is_frozen_after_creation(self):
        cart = _cart()
        order = Order.create("buyer-1", cart, ADDRESS)
        cart.add(make_item("f3", "Halo-Halo", "85.00"))
        order.lines.append(OrderLine("f9", "Extra", Money.of("10.00"), Quantity(1)))
        assert order.total == Money.of("200.00")

    def test_empty_cart_rejected(self):
        with pytest.raises(ValidationError, match="Cart is empty"):
            Order.create("buyer-1", Cart(), ADDRESS)

    def test_blank_buyer_rejected(self):
        with pytest.raises(ValidationError, match="Buyer identity"):
            Order.create("  ", _cart(), ADDRESS)


class TestOrderViews:

    def test_header_round_trip(self):
        order = Order.create("buyer-1", _cart(), ADDRESS)
        restored = Order.from_header("ord-9", order.header(), order.lines)
        assert restored.id == "ord-9"
        assert restored.header() == order.header()
        assert restored.lines == order.lines

    def test_with_status_leaves_original_untouched(self):
        order = Order.create("buyer-1", _cart(), ADDRESS)
        moved = order.with_status(OrderStatus.OUT_FOR_DELIVERY)
        assert moved.status == OrderStatus.OUT_FOR_DELIVERY
        assert order.status == OrderStatus.PREPARING

    def test_line_total(self):
        line = OrderLine("f1", "Chicken Inasal", Money.of("50.00"), Quantity(3))
        assert line.line_total == Money.of("150.00")
