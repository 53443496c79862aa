"""Tests for the JSON-file gateway and catalog, using a temporary directory."""

import json

import pytest

from storefront.domain.exceptions import AuthorizationError, GatewayError
from storefront.domain.model.address import Address, PaymentMethod
from storefront.domain.model.cart import Cart
from storefront.domain.model.lifecycle import OrderStatus
from storefront.domain.model.order import Order
from storefront.domain.model.value_objects import Money
from storefront.infrastructure.persistence.json_catalog_repository import JsonCatalogRepository
from storefront.infrastructure.persistence.json_gateway import JsonPersistenceGateway
from tests.fakes import make_item


def _order(buyer_id: str = "buyer-1") -> Order:
    cart = Cart()
    cart.add(make_item("f1", "Chicken Inasal", "50.00"), 2)
    cart.add(make_item("f2", "Pork Sisig", "100.00"), 1)
    address = Address("Maria Santos", "0917", "12 Rizal St", "Tibanga", PaymentMethod.CREDIT_CARD)
    return Order.create(buyer_id, cart, address)


async def _place(gateway: JsonPersistenceGateway, order: Order) -> str:
    order_id = await gateway.create_order(order.header())
    await gateway.create_order_lines(order_id, order.lines)
    return order_id


class TestLifecycle:

    @pytest.mark.asyncio
    async def test_calls_before_connect_fail(self, tmp_path):
        gateway = JsonPersistenceGateway(tmp_path)
        with pytest.raises(GatewayError, match="not connected"):
            await gateway.list_active_zones()

    @pytest.mark.asyncio
    async def test_context_manager_creates_files(self, tmp_path):
        async with JsonPersistenceGateway(tmp_path / "data") as gateway:
            assert await gateway.list_active_zones() == []
        assert (tmp_path / "data" / "orders.json").exists()
        assert (tmp_path / "data" / "order_lines.json").exists()


class TestOrders:

    @pytest.mark.asyncio
    async def test_round_trip_is_lossless(self, tmp_path):
        original = _order()
        async with JsonPersistenceGateway(tmp_path) as gateway:
            order_id = await _place(gateway, original)
            stored = await gateway.get_order(order_id)

        assert stored.id == order_id
        assert stored.header() == original.header()
        assert stored.lines == original.lines
        assert stored.total == Money.of("200.00")
        assert stored.payment_method == PaymentMethod.CREDIT_CARD

    @pytest.mark.asyncio
    async def test_lines_for_unknown_order_rejected(self, tmp_path):
        async with JsonPersistenceGateway(tmp_path) as gateway:
            with pytest.raises(GatewayError, match="does not exist"):
                await gateway.create_order_lines("missing", _order().lines)

    @pytest.mark.asyncio
    async def test_delete_removes_header_and_lines(self, tmp_path):
        async with JsonPersistenceGateway(tmp_path) as gateway:
            order_id = await _place(gateway, _order())
            await gateway.delete_order(order_id)
            assert await gateway.get_order(order_id) is None
        assert json.loads((tmp_path / "order_lines.json").read_text()) == []

    @pytest.mark.asyncio
    async def test_status_update_checks_owner(self, tmp_path):
        async with JsonPersistenceGateway(tmp_path) as gateway:
            order_id = await _place(gateway, _order())

            with pytest.raises(AuthorizationError):
                await gateway.update_order_status(order_id, "intruder", OrderStatus.CANCELLED)
            assert (await gateway.get_order(order_id)).status == OrderStatus.PREPARING

            updated = await gateway.update_order_status(order_id, "buyer-1", OrderStatus.CANCELLED)
            assert updated.status == OrderStatus.CANCELLED
            assert len(updated.lines) == 2

    @pytest.mark.asyncio
    async def test_list_for_buyer_newest_first(self, tmp_path):
        async with JsonPersistenceGateway(tmp_path) as gateway:
            first = await _place(gateway, _order())
            second = await _place(gateway, _order())
            await _place(gateway, _order("buyer-2"))

            orders = await gateway.list_orders_for_buyer("buyer-1")

        assert [o.id for o in orders] == [second, first]
        assert all(len(o.lines) == 2 for o in orders)

    @pytest.mark.asyncio
    async def test_corrupt_file_is_gateway_error(self, tmp_path):
        async with JsonPersistenceGateway(tmp_path) as gateway:
            (tmp_path / "orders.json").write_text("{not json")
            with pytest.raises(GatewayError) as exc_info:
                await gateway.get_order("x")
        assert exc_info.value.retryable is True


class TestZonesAndCatalog:

    @pytest.mark.asyncio
    async def test_active_zones_only(self, tmp_path):
        (tmp_path / "delivery_zones.json").write_text(json.dumps([
            {"barangay_name": "Tibanga", "is_active": True},
            {"barangay_name": "Rogongon", "is_active": False},
            {"barangay_name": "Palao", "is_active": True},
        ]))
        async with JsonPersistenceGateway(tmp_path) as gateway:
            zones = await gateway.list_active_zones()
        assert [z.name for z in zones] == ["Palao", "Tibanga"]

    def test_catalog_reads_items(self, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps([
            {
                "id": "f1",
                "name": "Chicken Inasal",
                "price": "120.00",
                "restaurant_id": "r1",
                "restaurant_name": "Bahay Kubo Grill",
                "stock": 3,
            }
        ]))
        repo = JsonCatalogRepository(path)
        item = repo.get_by_id("f1")
        assert item.price == Money.of("120.00")
        assert item.owner_id == "r1"
        assert repo.get_by_id("nope") is None
        assert len(repo.list_all()) == 1

    def test_missing_catalog_is_empty(self, tmp_path):
        repo = JsonCatalogRepository(tmp_path / "catalog.json")
        assert repo.list_all() == []
        assert not (tmp_path / "catalog.json").exists()

    def test_malformed_catalog_is_gateway_error(self, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps([{"id": "f1", "name": "No price"}]))
        with pytest.raises(GatewayError, match="Cannot load catalog"):
            JsonCatalogRepository(path).list_all()
