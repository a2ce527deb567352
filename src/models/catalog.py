"""Catalog listing domain models: products, filter state and view events."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, Field

from src.config import settings

SortKey = Literal["name", "price_low", "price_high", "created_at"]
ViewMode = Literal["grid", "list"]


class ProductRow(BaseModel):
    """Product as delivered by the catalog data source. Read-only."""

    id: str
    name: str
    slug: str
    price: float
    sale_price: float | None = None
    images: list[str] = Field(default_factory=list)
    category_id: str | None = None
    stock_quantity: int = 0
    featured: bool = False
    video_url: str | None = None

    @property
    def in_stock(self) -> bool:
        return self.stock_quantity != 0


class PriceRange(BaseModel):
    """Inclusive price bounds used by the listing filter."""

    min: float = Field(default_factory=lambda: settings.PRICE_RANGE_MIN)
    max: float = Field(default_factory=lambda: settings.PRICE_RANGE_MAX)

    def contains(self, price: float) -> bool:
        return self.min <= price <= self.max


class CatalogFilterState(BaseModel):
    """View state of one catalog page visit."""

    search_term: str = ""
    price_range: PriceRange = Field(default_factory=PriceRange)
    sort_key: SortKey = "name"
    view_mode: ViewMode = "grid"
    page: int = Field(1, ge=1)
    page_size: int = Field(default_factory=lambda: settings.CATALOG_PAGE_SIZE, ge=1)
    show_filters: bool = False

    @property
    def has_active_filters(self) -> bool:
        default = PriceRange()
        return bool(self.search_term) or (
            self.price_range.min > default.min or self.price_range.max < default.max
        )


class CatalogPage(BaseModel):
    """One server page of products plus the unfiltered server-side total."""

    rows: list[ProductRow] = Field(default_factory=list)
    total_count: int = Field(0, ge=0)


class CatalogQuery(BaseModel):
    """Request the catalog data source must run for the current view state."""

    category_slug: str | None = None
    sort_key: SortKey = "name"
    page: int = Field(1, ge=1)
    page_size: int = Field(..., ge=1)

    @property
    def order_column(self) -> str:
        if self.sort_key in ("price_low", "price_high"):
            return "price"
        return self.sort_key

    @property
    def ascending(self) -> bool:
        return self.sort_key != "price_high"

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def limit(self) -> int:
        return self.page_size


class SearchTermChanged(BaseModel):
    type: Literal["search_term_changed"] = "search_term_changed"
    term: str


class PriceRangeChanged(BaseModel):
    type: Literal["price_range_changed"] = "price_range_changed"
    price_range: PriceRange


class SortKeyChanged(BaseModel):
    type: Literal["sort_key_changed"] = "sort_key_changed"
    sort_key: SortKey


class ViewModeChanged(BaseModel):
    type: Literal["view_mode_changed"] = "view_mode_changed"
    view_mode: ViewMode


class PageRequested(BaseModel):
    type: Literal["page_requested"] = "page_requested"
    page: int
    total_count: int = Field(0, ge=0)


class FiltersCleared(BaseModel):
    type: Literal["filters_cleared"] = "filters_cleared"


class FiltersToggled(BaseModel):
    type: Literal["filters_toggled"] = "filters_toggled"


CatalogEvent = Annotated[
    SearchTermChanged
    | PriceRangeChanged
    | SortKeyChanged
    | ViewModeChanged
    | PageRequested
    | FiltersCleared
    | FiltersToggled,
    Field(discriminator="type"),
]


class VisibleItemsRequest(BaseModel):
    """Incoming payload for POST /catalog/visible."""

    filters: CatalogFilterState = Field(default_factory=CatalogFilterState)
    page: CatalogPage = Field(default_factory=CatalogPage)


class VisibleItemsResponse(BaseModel):
    """Rows of the server page that survive the client-side filters."""

    items: list[ProductRow]
    page: int
    total_pages: int
    total_count: int
