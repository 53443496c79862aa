"""JSON-file-backed implementation of PersistenceGateway.

Headers, lines and zones live in three separate files, mirroring the
three tables of the remote store.  There is no transaction spanning
files, which is why order placement keeps its compensating delete.
"""

from __future__ import annotations

import json
import uuid
from datetime import datetime
from decimal import Decimal
from pathlib import Path

import structlog

from storefront.domain.exceptions import AuthorizationError, GatewayError
from storefront.domain.model.address import DeliveryZone, PaymentMethod
from storefront.domain.model.lifecycle import OrderStatus
from storefront.domain.model.order import Order, OrderHeader, OrderLine
from storefront.domain.model.value_objects import Money, Quantity
from storefront.domain.repository.persistence_gateway import PersistenceGateway

logger = structlog.get_logger(__name__)

ORDERS_FILE = "orders.json"
ORDER_LINES_FILE = "order_lines.json"
ZONES_FILE = "delivery_zones.json"

# Writes that can be repeated without creating duplicates.
_IDEMPOTENT_WRITES = frozenset({"update_order_status", "delete_order"})


class JsonPersistenceGateway(PersistenceGateway):

    def __init__(self, data_dir: Path) -> None:
        self._data_dir = data_dir
        self._connected = False

    # --- Connection lifecycle -------------------------------------------------

    async def connect(self) -> None:
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            for name in (ORDERS_FILE, ORDER_LINES_FILE, ZONES_FILE):
                path = self._data_dir / name
                if not path.exists():
                    path.write_text("[]", encoding="utf-8")
        except OSError as exc:
            raise GatewayError(
                f"Cannot open data directory {self._data_dir}: {exc}",
                operation="connect",
                retryable=True,
            ) from exc
        self._connected = True
        logger.debug("Gateway connected", data_dir=str(self._data_dir))

    async def close(self) -> None:
        self._connected = False

    # --- PersistenceGateway interface -----------------------------------------

    async def create_order(self, header: OrderHeader) -> str:
        orders = self._read(ORDERS_FILE, "create_order")
        order_id = uuid.uuid4().hex
        orders.append({"id": order_id, **self._header_to_raw(header)})
        self._write(ORDERS_FILE, orders, "create_order")
        return order_id

    async def create_order_lines(self, order_id: str, lines: list[OrderLine]) -> None:
        orders = self._read(ORDERS_FILE, "create_order_lines")
        if not any(o["id"] == order_id for o in orders):
            raise GatewayError(
                f"Order {order_id} does not exist",
                operation="create_order_lines",
            )
        rows = self._read(ORDER_LINES_FILE, "create_order_lines")
        rows.extend(self._line_to_raw(order_id, line) for line in lines)
        self._write(ORDER_LINES_FILE, rows, "create_order_lines")

    async def delete_order(self, order_id: str) -> None:
        orders = self._read(ORDERS_FILE, "delete_order")
        rows = self._read(ORDER_LINES_FILE, "delete_order")
        self._write(
            ORDER_LINES_FILE,
            [r for r in rows if r["order_id"] != order_id],
            "delete_order",
        )
        self._write(
            ORDERS_FILE,
            [o for o in orders if o["id"] != order_id],
            "delete_order",
        )

    async def update_order_status(
        self, order_id: str, buyer_id: str, new_status: OrderStatus
    ) -> Order:
        orders = self._read(ORDERS_FILE, "update_order_status")
        for raw in orders:
            if raw["id"] != order_id:
                continue
            if raw["buyer_id"] != buyer_id:
                raise AuthorizationError(
                    f"Order {order_id} does not belong to {buyer_id}",
                    operation="update_order_status",
                )
            raw["status"] = new_status.value
            self._write(ORDERS_FILE, orders, "update_order_status")
            return self._to_domain(raw, self._lines_for(order_id))
        raise GatewayError(
            f"Order {order_id} does not exist",
            operation="update_order_status",
        )

    async def get_order(self, order_id: str) -> Order | None:
        for raw in self._read(ORDERS_FILE, "get_order"):
            if raw["id"] == order_id:
                return self._to_domain(raw, self._lines_for(order_id))
        return None

    async def list_orders_for_buyer(self, buyer_id: str) -> list[Order]:
        rows = self._read(ORDER_LINES_FILE, "list_orders_for_buyer")
        orders = [
            self._to_domain(raw, [r for r in rows if r["order_id"] == raw["id"]])
            for raw in self._read(ORDERS_FILE, "list_orders_for_buyer")
            if raw["buyer_id"] == buyer_id
        ]
        return sorted(orders, key=lambda o: o.created_at, reverse=True)

    async def list_active_zones(self) -> list[DeliveryZone]:
        zones = [
            DeliveryZone(name=raw["barangay_name"], is_active=raw.get("is_active", True))
            for raw in self._read(ZONES_FILE, "list_active_zones")
        ]
        return sorted((z for z in zones if z.is_active), key=lambda z: z.name)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _header_to_raw(header: OrderHeader) -> dict:
        return {
            "buyer_id": header.buyer_id,
            "status": header.status.value,
            "total": str(header.total.amount),
            "currency": header.total.currency,
            "shipping_address": header.shipping_address,
            "contact_name": header.contact_name,
            "contact_phone": header.contact_phone,
            "payment_method": header.payment_method.value,
            "delivery_zone": header.delivery_zone,
            "created_at": header.created_at.isoformat(),
        }

    @staticmethod
    def _line_to_raw(order_id: str, line: OrderLine) -> dict:
        return {
            "order_id": order_id,
            "item_id": line.item_id,
            "name": line.name,
            "price": str(line.unit_price.amount),
            "currency": line.unit_price.currency,
            "quantity": line.quantity.value,
        }

    @staticmethod
    def _to_domain(raw: dict, line_rows: list[dict]) -> Order:
        lines = [
            OrderLine(
                item_id=r["item_id"],
                name=r["name"],
                unit_price=Money(Decimal(r["price"]), r.get("currency", "PHP")),
                quantity=Quantity(r["quantity"]),
            )
            for r in line_rows
        ]
        header = OrderHeader(
            buyer_id=raw["buyer_id"],
            status=OrderStatus(raw["status"]),
            total=Money(Decimal(raw["total"]), raw.get("currency", "PHP")),
            shipping_address=raw["shipping_address"],
            contact_name=raw["contact_name"],
            contact_phone=raw["contact_phone"],
            payment_method=PaymentMethod(raw["payment_method"]),
            delivery_zone=raw.get("delivery_zone"),
            created_at=datetime.fromisoformat(raw["created_at"]),
        )
        return Order.from_header(raw["id"], header, lines)

    # --- File helpers ---------------------------------------------------------

    def _lines_for(self, order_id: str) -> list[dict]:
        return [
            r for r in self._read(ORDER_LINES_FILE, "get_order")
            if r["order_id"] == order_id
        ]

    def _read(self, name: str, operation: str) -> list[dict]:
        self._ensure_connected(operation)
        try:
            return json.loads((self._data_dir / name).read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise GatewayError(
                f"Cannot read {name}: {exc}", operation=operation, retryable=True
            ) from exc

    def _write(self, name: str, records: list[dict], operation: str) -> None:
        self._ensure_connected(operation)
        try:
            (self._data_dir / name).write_text(
                json.dumps(records, indent=2, ensure_ascii=False) + "\n", encoding="utf-8"
            )
        except OSError as exc:
            raise GatewayError(
                f"Cannot write {name}: {exc}",
                operation=operation,
                retryable=operation in _IDEMPOTENT_WRITES,
            ) from exc

    def _ensure_connected(self, operation: str) -> None:
        if not self._connected:
            raise GatewayError(
                "Gateway is not connected", operation=operation, retryable=True
            )
