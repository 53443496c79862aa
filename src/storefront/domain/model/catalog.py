"""Catalog items as seen by the ordering core.

The catalog itself (restaurants, categories, stock levels) is owned by an
external store.  The ordering core only ever reads items; it never
updates prices or stock.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.model.value_objects import Money


@dataclass(frozen=True)
class CatalogItem:
    """A purchasable item offered by one owning group (restaurant/seller).

    ``stock`` is advisory display data only; carts do not check it.
    """

    id: str
    name: str
    price: Money
    owner_id: str
    owner_name: str = ""
    stock: int = 0
    image_url: str = ""
