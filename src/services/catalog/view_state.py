"""Pure helpers for the catalog listing: the filter reducer and derived values."""

from __future__ import annotations

import math
from collections.abc import Iterable
from typing import Any

from src.config import settings
from src.models.catalog import (
    CatalogEvent,
    CatalogFilterState,
    CatalogQuery,
    FiltersCleared,
    FiltersToggled,
    PageRequested,
    PriceRange,
    PriceRangeChanged,
    ProductRow,
    SearchTermChanged,
    SortKeyChanged,
    ViewModeChanged,
)


def reduce_catalog(state: CatalogFilterState, event: CatalogEvent) -> CatalogFilterState:
    """Return the filter state produced by ``event``.

    A new search term or price range changes the result set, so pagination
    restarts at page 1. Sorting is re-queried server side and keeps the page.
    """
    if isinstance(event, SearchTermChanged):
        return state.model_copy(update={"search_term": event.term, "page": 1})

    if isinstance(event, PriceRangeChanged):
        return state.model_copy(update={"price_range": event.price_range, "page": 1})

    if isinstance(event, SortKeyChanged):
        return state.model_copy(update={"sort_key": event.sort_key})

    if isinstance(event, ViewModeChanged):
        return state.model_copy(update={"view_mode": event.view_mode})

    if isinstance(event, PageRequested):
        last_page = total_pages(event.total_count, state.page_size)
        page = min(max(event.page, 1), max(last_page, 1))
        return state.model_copy(update={"page": page})

    if isinstance(event, FiltersCleared):
        return state.model_copy(
            update={"search_term": "", "price_range": PriceRange(), "page": 1}
        )

    if isinstance(event, FiltersToggled):
        return state.model_copy(update={"show_filters": not state.show_filters})

    return state


def total_pages(total_count: int, page_size: int) -> int:
    return math.ceil(total_count / page_size) if total_count > 0 else 0


def matches_filters(product: ProductRow, state: CatalogFilterState) -> bool:
    """Case-insensitive name match plus inclusive list-price bounds."""
    term = state.search_term.lower()
    return term in product.name.lower() and state.price_range.contains(product.price)


def visible_items(
    rows: Iterable[ProductRow], state: CatalogFilterState
) -> list[ProductRow]:
    """Narrow one already-fetched server page with the client-side filters.

    Only the given page is filtered, so fewer than ``page_size`` rows may be
    shown even when other server pages hold more matches.
    """
    return [row for row in rows if matches_filters(row, state)]


def build_query(state: CatalogFilterState, category_slug: str | None = None) -> CatalogQuery:
    return CatalogQuery(
        category_slug=category_slug,
        sort_key=state.sort_key,
        page=state.page,
        page_size=state.page_size,
    )


def effective_price(product: ProductRow) -> float:
    return product.sale_price if product.sale_price is not None else product.price


def discount_percentage(original: float, sale: float) -> int:
    """Whole-percent discount of ``sale`` over ``original``, rounded half up.

    Returns 0 when there is no discount to show.
    """
    if original <= 0 or sale >= original:
        return 0
    return math.floor((original - sale) / original * 100 + 0.5)


def collection_item_payload(product: ProductRow) -> dict[str, Any]:
    """Snapshot the display fields of ``product`` for the cart or wishlist.

    Returned unvalidated so the receiving store can reject malformed rows.
    """
    return {
        "id": product.id,
        "name": product.name,
        "price": effective_price(product),
        "image": product.images[0] if product.images else settings.PLACEHOLDER_IMAGE,
        "slug": product.slug,
    }
