"""Cart and wishlist collection schemas."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, Field, TypeAdapter


class CollectionItem(BaseModel):
    """Display snapshot of a product stored in the cart or the wishlist."""

    id: str = Field(..., min_length=1, description="Product identifier")
    name: str
    price: float = Field(..., ge=0)
    image: str
    slug: str | None = None


class CollectionState(BaseModel):
    """Items of one collection plus the visibility of its side panel."""

    items: list[CollectionItem] = Field(default_factory=list)
    is_open: bool = False

    @property
    def count(self) -> int:
        return len(self.items)


class CollectionStateResponse(BaseModel):
    """Collection payload returned by the HTTP API."""

    items: list[CollectionItem]
    is_open: bool
    count: int

    @classmethod
    def from_state(cls, state: CollectionState) -> CollectionStateResponse:
        return cls(items=state.items, is_open=state.is_open, count=len(state.items))


class AddItem(BaseModel):
    type: Literal["add_item"] = "add_item"
    item: CollectionItem


class RemoveItem(BaseModel):
    type: Literal["remove_item"] = "remove_item"
    item_id: str


class ClearItems(BaseModel):
    type: Literal["clear"] = "clear"


class ToggleOpen(BaseModel):
    type: Literal["toggle_open"] = "toggle_open"


class LoadItems(BaseModel):
    type: Literal["load"] = "load"
    items: list[CollectionItem] = Field(default_factory=list)


CollectionAction = Annotated[
    AddItem | RemoveItem | ClearItems | ToggleOpen | LoadItems,
    Field(discriminator="type"),
]

# Serialized form written under each collection's storage key.
CollectionItems = TypeAdapter(list[CollectionItem])
