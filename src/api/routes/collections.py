"""Routes for a shopper's cart and wishlist."""

from __future__ import annotations

import logging
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Response, status

from src.models.collection import CollectionItem, CollectionStateResponse
from src.services.session_registry import SessionRegistry, get_session_registry
from src.services.storage.collection_store import DurableCollectionStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions/{session_id}", tags=["collections"])

CollectionName = Literal["cart", "wishlist"]
RegistryDependency = Annotated[SessionRegistry, Depends(get_session_registry)]


async def _get_collection(
    session_id: str,
    collection: CollectionName,
    registry: RegistryDependency,
) -> DurableCollectionStore:
    session = await registry.get(session_id)
    return session.collection(collection)


StoreDependency = Annotated[DurableCollectionStore, Depends(_get_collection)]


@router.get(
    "/{collection}",
    response_model=CollectionStateResponse,
    summary="Fetch the items of a collection",
)
async def read_collection(store: StoreDependency) -> CollectionStateResponse:
    return CollectionStateResponse.from_state(store.state)


@router.post(
    "/{collection}/items",
    response_model=CollectionStateResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add an item unless one with the same id is present",
)
async def add_collection_item(
    item: CollectionItem,
    store: StoreDependency,
    response: Response,
) -> CollectionStateResponse:
    if not store.add_item(item):
        logger.debug("Item %s already in %s", item.id, store.storage_key)
        response.status_code = status.HTTP_200_OK
    await store.flush()
    return CollectionStateResponse.from_state(store.state)


@router.delete(
    "/{collection}/items/{item_id}",
    response_model=CollectionStateResponse,
    summary="Remove an item by id",
)
async def remove_collection_item(
    item_id: str,
    store: StoreDependency,
) -> CollectionStateResponse:
    store.remove_item(item_id)
    await store.flush()
    return CollectionStateResponse.from_state(store.state)


@router.delete(
    "/{collection}",
    response_model=CollectionStateResponse,
    summary="Remove every item of a collection",
)
async def clear_collection(store: StoreDependency) -> CollectionStateResponse:
    store.clear()
    await store.flush()
    return CollectionStateResponse.from_state(store.state)


@router.post(
    "/{collection}/toggle",
    response_model=CollectionStateResponse,
    summary="Open or close the collection panel",
)
async def toggle_collection(store: StoreDependency) -> CollectionStateResponse:
    store.toggle_open()
    return CollectionStateResponse.from_state(store.state)
