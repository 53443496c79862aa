"""Abstract read-only repository for catalog items."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.catalog import CatalogItem


class CatalogRepository(ABC):

    @abstractmethod
    def get_by_id(self, item_id: str) -> CatalogItem | None:
        """Return an item by its ID, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[CatalogItem]:
        """Return all items in the catalog."""
