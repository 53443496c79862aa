import click

from storefront.infrastructure.cli.catalog_commands import catalog_list, zones_list
from storefront.infrastructure.cli.order_commands import (
    order_advance,
    order_buy_now,
    order_cancel,
    order_list,
    order_place,
    order_receive,
    order_show,
    order_track,
)
from storefront.infrastructure.config import Settings
from storefront.infrastructure.logging import configure_logging


@click.group()
def cli() -> None:
    """Storefront — cart, checkout and order tracking"""
    settings = Settings.from_env()
    configure_logging(settings.log_level, settings.log_json)


@cli.group()
def order() -> None:
    """Place and follow orders."""


@cli.group()
def catalog() -> None:
    """Browse catalog items."""


@cli.group()
def zones() -> None:
    """Delivery zones."""


# Register subcommands
order.add_command(order_advance)
order.add_command(order_buy_now)
order.add_command(order_cancel)
order.add_command(order_list)
order.add_command(order_place)
order.add_command(order_receive)
order.add_command(order_show)
order.add_command(order_track)
catalog.add_command(catalog_list)
zones.add_command(zones_list)
