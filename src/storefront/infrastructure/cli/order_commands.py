"""CLI commands for placing and following orders."""

from __future__ import annotations

import asyncio

import click

from storefront.application.dto import OrderDTO, OrderItemSpec
from storefront.domain.exceptions import (
    ConsistencyError,
    DomainException,
    EntityNotFoundError,
    GatewayError,
)
from storefront.domain.model.address import Address, PaymentMethod
from storefront.domain.model.cart import Cart
from storefront.domain.model.catalog import CatalogItem
from storefront.domain.model.value_objects import Coordinate
from storefront.infrastructure.bootstrap import Container, container


def _parse_items(raw: str) -> list[OrderItemSpec]:
    """Parse 'f1:2,f2:1' into OrderItemSpec list."""
    specs: list[OrderItemSpec] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid item format '{pair}'. Expected 'ItemId:Quantity'."
            )
        item_id, qty_str = pair.rsplit(":", 1)
        try:
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(
                f"Invalid quantity '{qty_str}' for item '{item_id}'."
            )
        specs.append(OrderItemSpec(item_id=item_id.strip(), quantity=qty))
    return specs


def _lookup(c: Container, item_id: str) -> CatalogItem:
    item = c.catalog.get_by_id(item_id)
    if item is None:
        raise EntityNotFoundError(f"Catalog item not found: '{item_id}'")
    return item


def _run(coro):
    """Run a use case, translating domain errors for the terminal."""
    try:
        return asyncio.run(coro)
    except ConsistencyError as exc:
        raise click.ClickException(
            f"{exc}\nOrder id for reconciliation: {exc.order_id}"
        )
    except GatewayError as exc:
        hint = " (safe to retry)" if exc.retryable else ""
        raise click.ClickException(f"{exc}{hint}")
    except DomainException as exc:
        raise click.ClickException(str(exc))


async def _checkout(c: Container, cart: Cart, buyer: str, address: Address) -> OrderDTO:
    active_zones = await c.list_zones().handle()
    dto = await c.place_order().handle(cart, address, buyer, active_zones)
    cart.clear()
    return dto


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order #{dto.id[-6:]}  (status={dto.status}, progress={dto.progress_percent}%)")
    click.echo(f"Placed:   {dto.created_at}")
    click.echo(f"Deliver:  {dto.contact_name} <{dto.contact_phone}>")
    click.echo(f"          {dto.shipping_address}")
    click.echo(f"Payment:  {dto.payment_method}")
    click.echo()
    click.echo(f"  {'Item':<24} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*51}")
    for item in dto.items:
        click.echo(
            f"  {item.name:<24} {item.quantity:>5} {item.unit_price:>10} {item.line_total:>10}"
        )
    click.echo(f"  {'-'*51}")
    click.echo(f"  {'Subtotal':<31} {dto.total:>20}")
    click.echo(f"  {'Delivery Fee':<31} {dto.delivery_fee:>20}")
    click.echo(f"  {'Total':<31} {dto.grand_total:>20}")


_address_options = [
    click.option("--name", required=True, help="Recipient name."),
    click.option("--phone", required=True, help="Recipient phone."),
    click.option("--zone", required=True, help="Delivery zone (barangay)."),
    click.option("--detail", required=True, help="Street / building details."),
    click.option(
        "--payment",
        type=click.Choice([m.value for m in PaymentMethod]),
        default=PaymentMethod.COD.value,
        show_default=True,
        help="Payment method.",
    ),
]


def _with_address_options(func):
    for option in reversed(_address_options):
        func = option(func)
    return func


@click.command("place")
@click.option("--buyer", required=True, help="Buyer identity.")
@click.option("--items", required=True, help="Items as 'ItemId:Qty,ItemId:Qty'.")
@_with_address_options
def order_place(buyer: str, items: str, name: str, phone: str, zone: str, detail: str, payment: str) -> None:
    """Place an order for a set of catalog items."""
    specs = _parse_items(items)
    address = Address(name, phone, detail, zone, PaymentMethod(payment))

    async def run() -> OrderDTO:
        async with container() as c:
            cart = Cart()
            for spec in specs:
                cart.add(_lookup(c, spec.item_id), spec.quantity)
            return await _checkout(c, cart, buyer, address)

    dto = _run(run())
    click.echo("Order placed.")
    _display_order(dto)


@click.command("buy-now")
@click.option("--buyer", required=True, help="Buyer identity.")
@click.option("--item", "item_id", required=True, help="Catalog item ID.")
@click.option("--qty", default=1, show_default=True, type=int, help="Quantity.")
@_with_address_options
def order_buy_now(buyer: str, item_id: str, qty: int, name: str, phone: str, zone: str, detail: str, payment: str) -> None:
    """Order a single item right away."""
    address = Address(name, phone, detail, zone, PaymentMethod(payment))

    async def run() -> OrderDTO:
        async with container() as c:
            cart = Cart()
            cart.replace(_lookup(c, item_id), qty)
            return await _checkout(c, cart, buyer, address)

    dto = _run(run())
    click.echo("Order placed.")
    _display_order(dto)


@click.command("list")
@click.option("--buyer", required=True, help="Buyer identity.")
def order_list(buyer: str) -> None:
    """List a buyer's orders, newest first."""

    async def run() -> list[OrderDTO]:
        async with container() as c:
            return await c.list_orders().handle(buyer)

    orders = _run(run())
    if not orders:
        click.echo("No orders yet.")
        return

    click.echo(f"{'Order':<8} {'Placed':<21} {'Status':<18} {'Items':>5} {'Total':>12}")
    click.echo("-" * 68)
    for dto in orders:
        count = sum(item.quantity for item in dto.items)
        click.echo(
            f"{dto.id[-6:]:<8} {dto.created_at:<21} {dto.status:<18} {count:>5} {dto.grand_total:>12}"
        )


@click.command("show")
@click.option("--id", "order_id", required=True, help="Order ID.")
@click.option("--buyer", required=True, help="Buyer identity.")
def order_show(order_id: str, buyer: str) -> None:
    """Show the details of one order."""

    async def run() -> OrderDTO:
        async with container() as c:
            return await c.list_orders().show(order_id, buyer)

    _display_order(_run(run()))


@click.command("cancel")
@click.option("--id", "order_id", required=True, help="Order ID to cancel.")
@click.option("--buyer", required=True, help="Buyer identity.")
def order_cancel(order_id: str, buyer: str) -> None:
    """Cancel an order that is still being prepared."""

    async def run() -> OrderDTO:
        async with container() as c:
            return await c.update_order_status().cancel(order_id, buyer)

    dto = _run(run())
    click.echo(f"Order #{order_id[-6:]} is now {dto.status}.")


@click.command("receive")
@click.option("--id", "order_id", required=True, help="Order ID.")
@click.option("--buyer", required=True, help="Buyer identity.")
def order_receive(order_id: str, buyer: str) -> None:
    """Confirm a delivered order was received."""

    async def run() -> OrderDTO:
        async with container() as c:
            return await c.update_order_status().confirm_receipt(order_id, buyer)

    dto = _run(run())
    click.echo(f"Order #{order_id[-6:]} is now {dto.status}.")


@click.command("advance")
@click.option("--id", "order_id", required=True, help="Order ID.")
@click.option("--operator", required=True, help="Operator (restaurant/rider) identity.")
def order_advance(order_id: str, operator: str) -> None:
    """Operator action: move an order to its next status."""

    async def run() -> OrderDTO:
        async with container() as c:
            return await c.update_order_status().advance(order_id, operator)

    dto = _run(run())
    click.echo(f"Order #{order_id[-6:]} is now {dto.status}.")


@click.command("track")
@click.option("--id", "order_id", required=True, help="Order ID.")
@click.option("--buyer", required=True, help="Buyer identity.")
@click.option("--elapsed-ms", default=0, type=int, show_default=True,
              help="Time since the order went out for delivery.")
@click.option("--follow", is_flag=True, help="Animate the rider until the trip ends.")
def order_track(order_id: str, buyer: str, elapsed_ms: int, follow: bool) -> None:
    """Show the simulated rider position for an order."""
    if follow:
        _follow(order_id, buyer)
        return

    async def run():
        async with container() as c:
            return await c.track_order().handle(order_id, buyer, elapsed_ms)

    dto = _run(run())
    click.echo(f"Status:      {dto.status} ({dto.progress_percent}%)")
    click.echo(f"             {dto.message}")
    click.echo(f"Origin:      {dto.origin}")
    click.echo(f"Destination: {dto.destination}")
    click.echo(f"Rider:       {dto.position}")


def _follow(order_id: str, buyer: str) -> None:
    last: list[Coordinate] = []

    def show(position: Coordinate) -> None:
        if not last or position != last[-1]:
            click.echo(f"Rider:       {position}")
        last.append(position)

    async def run() -> Coordinate:
        async with container() as c:
            return await c.track_order().follow(order_id, buyer, c.delivery_tracker(show))

    final = _run(run())
    click.echo(f"Stopped at:  {final}")
