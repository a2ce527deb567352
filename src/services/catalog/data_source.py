"""Catalog data source abstraction consumed by the listing controller."""

from __future__ import annotations

from abc import ABC, abstractmethod

from src.models.catalog import CatalogPage, CatalogQuery


class CatalogDataSource(ABC):
    """Remote product query service.

    Implementations return at most ``query.page_size`` rows together with the
    unfiltered server-side total for the category and sort order.
    """

    @abstractmethod
    async def fetch(self, query: CatalogQuery) -> CatalogPage:
        """Return the rows of ``query.page`` and the total row count."""
