"""Shopping cart owned by the active checkout session.

The cart is never persisted and none of its operations can fail: invalid
input (a non-positive quantity, an unknown item id) leaves the cart as it
was.  Each operation completes without suspending, so on a single event
loop every read-modify-write is atomic with respect to other cart calls.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.model.catalog import CatalogItem
from storefront.domain.model.value_objects import Money

UNSPECIFIED_OWNER_NAME = "Unspecified Restaurant"


@dataclass
class CartLine:
    """Snapshot of a catalog item's display fields plus a quantity.

    The snapshot is taken on first addition; later price changes in the
    catalog do not reach lines already in the cart.
    """

    item_id: str
    name: str
    unit_price: Money
    owner_id: str
    owner_name: str
    image_url: str
    quantity: int

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity

    @staticmethod
    def snapshot(item: CatalogItem, quantity: int) -> CartLine:
        return CartLine(
            item_id=item.id,
            name=item.name,
            unit_price=item.price,
            owner_id=item.owner_id,
            owner_name=item.owner_name,
            image_url=item.image_url,
            quantity=quantity,
        )


@dataclass(frozen=True)
class CartGroup:
    """Lines of the cart that belong to one owning group."""

    owner_id: str
    owner_name: str
    lines: tuple[CartLine, ...]

    @property
    def subtotal(self) -> Money:
        return Money.sum(line.line_total for line in self.lines)


class Cart:
    """Insertion-ordered collection of CartLines, one per item id."""

    def __init__(self) -> None:
        self._lines: dict[str, CartLine] = {}

    # --- Mutations ------------------------------------------------------------

    def add(self, item: CatalogItem, quantity: int = 1) -> None:
        """Add *quantity* units of *item*, merging with an existing line."""
        if quantity <= 0:
            return
        line = self._lines.get(item.id)
        if line is not None:
            line.quantity += quantity
        else:
            self._lines[item.id] = CartLine.snapshot(item, quantity)

    def set_quantity(self, item_id: str, delta: int) -> None:
        """Adjust a line by *delta*; the line is dropped when it reaches 0."""
        line = self._lines.get(item_id)
        if line is None:
            return
        line.quantity += delta
        if line.quantity <= 0:
            del self._lines[item_id]

    def replace(self, item: CatalogItem, quantity: int = 1) -> None:
        """Make *item* the only line in the cart ("buy now")."""
        if quantity <= 0:
            return
        self._lines = {item.id: CartLine.snapshot(item, quantity)}

    def clear(self) -> None:
        self._lines = {}

    # --- Queries --------------------------------------------------------------

    @property
    def lines(self) -> tuple[CartLine, ...]:
        return tuple(self._lines.values())

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def get(self, item_id: str) -> CartLine | None:
        return self._lines.get(item_id)

    def item_count(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    def subtotal(self) -> Money:
        return Money.sum(line.line_total for line in self._lines.values())

    def grouped_by_owner(self) -> list[CartGroup]:
        """Partition lines by owner, keeping the order owners were first seen."""
        buckets: dict[str, list[CartLine]] = {}
        names: dict[str, str] = {}
        for line in self._lines.values():
            if line.owner_id not in buckets:
                buckets[line.owner_id] = []
                names[line.owner_id] = line.owner_name.strip() or UNSPECIFIED_OWNER_NAME
            buckets[line.owner_id].append(line)
        return [
            CartGroup(owner_id=owner_id, owner_name=names[owner_id], lines=tuple(lines))
            for owner_id, lines in buckets.items()
        ]

    def __len__(self) -> int:
        return len(self._lines)
