"""Controller backing one catalog listing page visit."""

from __future__ import annotations

import logging
from collections.abc import Callable

from src.models.catalog import (
    CatalogEvent,
    CatalogFilterState,
    CatalogPage,
    CatalogQuery,
    FiltersCleared,
    FiltersToggled,
    PageRequested,
    PriceRange,
    PriceRangeChanged,
    ProductRow,
    SearchTermChanged,
    SortKey,
    SortKeyChanged,
    ViewMode,
    ViewModeChanged,
)
from src.models.signals import NavigateToProduct, OpenPanel, ScrollToTop, UiSignal
from src.services.catalog import view_state
from src.services.catalog.data_source import CatalogDataSource
from src.services.catalog.hover_preview import HoverPreviewScheduler
from src.services.storage.collection_store import DurableCollectionStore

logger = logging.getLogger(__name__)


class CatalogViewController:
    """Filter state, current server page and shopper actions for a listing."""

    def __init__(
        self,
        cart: DurableCollectionStore,
        wishlist: DurableCollectionStore,
        *,
        category_slug: str | None = None,
        state: CatalogFilterState | None = None,
        hover: HoverPreviewScheduler | None = None,
        on_signal: Callable[[UiSignal], None] | None = None,
    ):
        self.cart = cart
        self.wishlist = wishlist
        self.category_slug = category_slug
        self._state = state or CatalogFilterState()
        self._page = CatalogPage()
        self.hover_preview = hover or HoverPreviewScheduler()
        self._on_signal = on_signal

    @property
    def state(self) -> CatalogFilterState:
        return self._state

    @property
    def server_page(self) -> CatalogPage:
        return self._page

    @property
    def total_pages(self) -> int:
        return view_state.total_pages(self._page.total_count, self._state.page_size)

    def dispatch(self, event: CatalogEvent) -> CatalogFilterState:
        self._state = view_state.reduce_catalog(self._state, event)
        return self._state

    def set_search_term(self, term: str) -> CatalogFilterState:
        return self.dispatch(SearchTermChanged(term=term))

    def set_price_range(self, price_range: PriceRange) -> CatalogFilterState:
        return self.dispatch(PriceRangeChanged(price_range=price_range))

    def set_sort_key(self, sort_key: SortKey) -> CatalogFilterState:
        return self.dispatch(SortKeyChanged(sort_key=sort_key))

    def set_view_mode(self, view_mode: ViewMode) -> CatalogFilterState:
        return self.dispatch(ViewModeChanged(view_mode=view_mode))

    def toggle_filters(self) -> CatalogFilterState:
        return self.dispatch(FiltersToggled())

    def clear_filters(self) -> CatalogFilterState:
        return self.dispatch(FiltersCleared())

    def go_to_page(self, page: int) -> int:
        """Navigate to ``page``, clamped to the available pages."""
        self.dispatch(PageRequested(page=page, total_count=self._page.total_count))
        if self._state.page != page:
            logger.debug("Clamped page request %s to %s", page, self._state.page)
        self._emit(ScrollToTop())
        return self._state.page

    def build_query(self) -> CatalogQuery:
        return view_state.build_query(self._state, self.category_slug)

    def receive_page(self, page: CatalogPage) -> None:
        """Record the latest server page delivered by the data source."""
        if len(page.rows) > self._state.page_size:
            logger.warning(
                "Server page has %d rows, expected at most %d",
                len(page.rows),
                self._state.page_size,
            )
        self._page = page
        self.hover_preview.reset()

    async def load(self, source: CatalogDataSource) -> CatalogPage:
        """Fetch the page matching the current state from ``source``."""
        query = self.build_query()
        page = await source.fetch(query)
        self.receive_page(page)
        logger.info(
            "Loaded catalog page %d (%d rows, %d total)",
            query.page,
            len(page.rows),
            page.total_count,
        )
        return page

    def visible_items(self, server_page: CatalogPage | None = None) -> list[ProductRow]:
        page = server_page if server_page is not None else self._page
        return view_state.visible_items(page.rows, self._state)

    def add_to_cart(self, product: ProductRow) -> bool:
        """Add ``product`` to the cart. Out-of-stock products are rejected."""
        if not product.in_stock:
            logger.info("Rejected add to cart for out-of-stock product %s", product.id)
            return False
        return self.cart.add_item(view_state.collection_item_payload(product))

    def toggle_wishlist(self, product: ProductRow) -> bool:
        """Flip wishlist membership of ``product``; return the new membership.

        A row that cannot be stored is left out and reported as not wishlisted.
        """
        if self.wishlist.contains(product.id):
            self.wishlist.remove_item(product.id)
            return False
        return self.wishlist.add_item(view_state.collection_item_payload(product))

    def is_wishlisted(self, product_id: str) -> bool:
        return self.wishlist.contains(product_id)

    def open_cart(self) -> None:
        if not self.cart.is_open:
            self.cart.toggle_open()
        self._emit(OpenPanel(panel="cart"))

    def open_wishlist(self) -> None:
        if not self.wishlist.is_open:
            self.wishlist.toggle_open()
        self._emit(OpenPanel(panel="wishlist"))

    def view_product(self, product: ProductRow) -> None:
        self._emit(NavigateToProduct(slug=product.slug))

    def hover(self, product_id: str) -> None:
        self.hover_preview.hover(product_id)

    def leave(self) -> None:
        self.hover_preview.leave()

    @property
    def previewing_id(self) -> str | None:
        return self.hover_preview.active_item_id

    def preview_url(self, product: ProductRow) -> str | None:
        """Video to overlay on ``product``'s card, if it is being previewed."""
        if self.previewing_id != product.id:
            return None
        return product.video_url

    def close(self) -> None:
        """Tear down the listing; no hover callback fires afterwards."""
        self.hover_preview.close()

    def _emit(self, signal: UiSignal) -> None:
        if self._on_signal is not None:
            self._on_signal(signal)
