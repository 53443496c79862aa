"""Integration tests for order status transitions."""

import pytest

from storefront.application.dto import Requester
from storefront.application.update_order_status import UpdateOrderStatusHandler
from storefront.domain.exceptions import (
    AuthorizationError,
    EntityNotFoundError,
    GatewayError,
    IllegalTransitionError,
    ValidationError,
)
from storefront.domain.model.address import Address
from storefront.domain.model.cart import Cart
from storefront.domain.model.lifecycle import Actor, OrderStatus
from storefront.domain.model.order import Order
from tests.fakes import FakeGateway, make_item


def _setup(status: OrderStatus = OrderStatus.PREPARING):
    cart = Cart()
    cart.add(make_item(), 2)
    order = Order.create(
        "buyer-1", cart, Address("Maria Santos", "0917", "12 Rizal St", "Tibanga")
    ).with_status(status)
    gateway = FakeGateway()
    order_id = gateway.seed(order)
    return UpdateOrderStatusHandler(gateway), gateway, order_id


class TestBuyerTransitions:

    @pytest.mark.asyncio
    async def test_cancel_while_preparing(self):
        handler, gateway, order_id = _setup(OrderStatus.PREPARING)
        dto = await handler.cancel(order_id, "buyer-1")
        assert dto.status == "Cancelled"
        assert gateway.headers[order_id].status == OrderStatus.CANCELLED

    @pytest.mark.asyncio
    async def test_cancel_out_for_delivery_rejected_without_write(self):
        handler, gateway, order_id = _setup(OrderStatus.OUT_FOR_DELIVERY)
        with pytest.raises(IllegalTransitionError):
            await handler.cancel(order_id, "buyer-1")
        assert gateway.calls_to("update_order_status") == []
        assert gateway.headers[order_id].status == OrderStatus.OUT_FOR_DELIVERY

    @pytest.mark.asyncio
    async def test_confirm_receipt_when_delivered(self):
        handler, gateway, order_id = _setup(OrderStatus.DELIVERED)
        dto = await handler.confirm_receipt(order_id, "buyer-1")
        assert dto.status == "Completed"

    @pytest.mark.asyncio
    async def test_cancel_delivered_rejected(self):
        handler, gateway, order_id = _setup(OrderStatus.DELIVERED)
        with pytest.raises(IllegalTransitionError):
            await handler.cancel(order_id, "buyer-1")
        assert gateway.calls_to("update_order_status") == []

    @pytest.mark.asyncio
    async def test_buyer_cannot_jump_to_completed(self):
        handler, gateway, order_id = _setup(OrderStatus.PREPARING)
        with pytest.raises(IllegalTransitionError):
            await handler.handle(order_id, Requester("buyer-1"), OrderStatus.COMPLETED)
        assert gateway.calls_to("update_order_status") == []

    @pytest.mark.asyncio
    async def test_other_buyer_sees_not_found_and_nothing_is_written(self):
        handler, gateway, order_id = _setup(OrderStatus.PREPARING)
        with pytest.raises(EntityNotFoundError):
            await handler.cancel(order_id, "intruder")
        assert gateway.calls_to("update_order_status") == []
        assert gateway.headers[order_id].status == OrderStatus.PREPARING

    @pytest.mark.asyncio
    async def test_other_buyer_illegal_move_does_not_reveal_status(self):
        handler, gateway, order_id = _setup(OrderStatus.OUT_FOR_DELIVERY)
        with pytest.raises(EntityNotFoundError) as exc_info:
            await handler.cancel(order_id, "intruder")
        assert "Out for Delivery" not in str(exc_info.value)
        assert gateway.calls_to("update_order_status") == []

    @pytest.mark.asyncio
    async def test_unknown_order(self):
        handler, _, _ = _setup()
        with pytest.raises(EntityNotFoundError, match="not found"):
            await handler.cancel("missing", "buyer-1")


class TestOperatorTransitions:

    @pytest.mark.asyncio
    async def test_advance_through_delivery(self):
        handler, gateway, order_id = _setup(OrderStatus.PREPARING)
        first = await handler.advance(order_id, "rider-7")
        second = await handler.advance(order_id, "rider-7")
        assert first.status == "Out for Delivery"
        assert second.status == "Delivered"
        assert second.awaiting_receipt is True

    @pytest.mark.asyncio
    async def test_operator_cannot_complete(self):
        handler, gateway, order_id = _setup(OrderStatus.DELIVERED)
        with pytest.raises(IllegalTransitionError, match="Operator cannot advance"):
            await handler.advance(order_id, "rider-7")
        assert gateway.calls_to("update_order_status") == []

    @pytest.mark.asyncio
    async def test_buyer_cannot_act_as_operator(self):
        handler, gateway, order_id = _setup(OrderStatus.PREPARING)
        with pytest.raises(AuthorizationError, match="operator actions"):
            await handler.advance(order_id, "buyer-1")
        assert gateway.calls_to("update_order_status") == []

    @pytest.mark.asyncio
    async def test_operator_cannot_cancel(self):
        handler, _, order_id = _setup(OrderStatus.PREPARING)
        with pytest.raises(IllegalTransitionError):
            await handler.handle(
                order_id, Requester("rider-7", Actor.OPERATOR), OrderStatus.CANCELLED
            )


class TestResync:

    @pytest.mark.asyncio
    async def test_uses_stored_status_not_callers_copy(self):
        handler, gateway, order_id = _setup(OrderStatus.PREPARING)
        await handler.advance(order_id, "rider-7")
        # A buyer still looking at the old "Preparing" screen tries to cancel.
        with pytest.raises(IllegalTransitionError):
            await handler.cancel(order_id, "buyer-1")

    @pytest.mark.asyncio
    async def test_gateway_failure_leaves_status_and_can_be_retried(self):
        handler, gateway, order_id = _setup(OrderStatus.PREPARING)
        gateway.fail_on.add("update_order_status")
        with pytest.raises(GatewayError):
            await handler.cancel(order_id, "buyer-1")
        gateway.fail_on.clear()
        assert gateway.headers[order_id].status == OrderStatus.PREPARING

        dto = await handler.cancel(order_id, "buyer-1")
        assert dto.status == "Cancelled"


class TestRequester:

    def test_blank_identity_rejected(self):
        with pytest.raises(ValidationError):
            Requester(" ")
