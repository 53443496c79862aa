"""CLI commands for catalog items and delivery zones."""

from __future__ import annotations

import asyncio

import click

from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import container


@click.command("list")
def catalog_list() -> None:
    """List all catalog items."""
    try:
        items = container().catalog.list_all()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not items:
        click.echo("No items found.")
        return

    click.echo(f"{'ID':<8} {'Name':<24} {'Restaurant':<20} {'Price':>10}")
    click.echo("-" * 65)
    for item in items:
        click.echo(
            f"{item.id:<8} {item.name:<24} {item.owner_name:<20} {str(item.price):>10}"
        )


@click.command("list")
def zones_list() -> None:
    """List active delivery zones."""

    async def run():
        async with container() as c:
            return await c.list_zones().handle()

    try:
        active = asyncio.run(run())
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not active:
        click.echo("No active delivery zones.")
        return
    for zone in active:
        click.echo(zone.name)
