"""Read-only catalog backed by a JSON array of items."""

from __future__ import annotations

import json
from pathlib import Path

from storefront.domain.exceptions import GatewayError
from storefront.domain.model.catalog import CatalogItem
from storefront.domain.model.value_objects import DEFAULT_CURRENCY, Money
from storefront.domain.repository.catalog_repository import CatalogRepository


class JsonCatalogRepository(CatalogRepository):
    """Items keyed by ``id``; an absent file is an empty catalog."""

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path

    def get_by_id(self, item_id: str) -> CatalogItem | None:
        return self._items().get(item_id)

    def list_all(self) -> list[CatalogItem]:
        return list(self._items().values())

    def _items(self) -> dict[str, CatalogItem]:
        if not self._file_path.exists():
            return {}
        try:
            records = json.loads(self._file_path.read_text(encoding="utf-8"))
            items = [self._to_item(record) for record in records]
        except (OSError, ValueError, KeyError) as exc:
            raise GatewayError(
                f"Cannot load catalog from {self._file_path}: {exc}",
                operation="load_catalog",
            ) from exc
        return {item.id: item for item in items}

    @staticmethod
    def _to_item(record: dict) -> CatalogItem:
        return CatalogItem(
            id=record["id"],
            name=record["name"],
            price=Money.of(record["price"], record.get("currency", DEFAULT_CURRENCY)),
            owner_id=record["restaurant_id"],
            owner_name=record.get("restaurant_name", ""),
            stock=int(record.get("stock", 0)),
            image_url=record.get("image_url", ""),
        )
