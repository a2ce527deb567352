"""Signals emitted by the shopping-state layer for the UI to react to."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, Field


class OpenPanel(BaseModel):
    """Ask the UI to show the cart or wishlist side panel."""

    type: Literal["open_panel"] = "open_panel"
    panel: Literal["cart", "wishlist"]


class NavigateToProduct(BaseModel):
    """Ask the UI to route to a product detail page."""

    type: Literal["navigate_to_product"] = "navigate_to_product"
    slug: str


class ScrollToTop(BaseModel):
    type: Literal["scroll_to_top"] = "scroll_to_top"


UiSignal = Annotated[
    OpenPanel | NavigateToProduct | ScrollToTop,
    Field(discriminator="type"),
]
