"""Redis-backed persistence for the cart and wishlist collections.

Both collections share :class:`DurableCollectionStore`; they only differ by
the key their items are written under. State transitions are computed by the
pure :func:`reduce_collection` and every transition that changes ``items``
schedules a background write of the full sequence. Writes never block the
caller and their failures are logged, so the in-memory state stays the source
of truth for the session.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Mapping
from typing import Any

import redis.asyncio as redis
from pydantic import ValidationError
from redis.exceptions import RedisError

from src.config import settings
from src.models.collection import (
    AddItem,
    ClearItems,
    CollectionAction,
    CollectionItem,
    CollectionItems,
    CollectionState,
    LoadItems,
    RemoveItem,
    ToggleOpen,
)

logger = logging.getLogger(__name__)


def reduce_collection(state: CollectionState, action: CollectionAction) -> CollectionState:
    """Return the state produced by applying ``action`` to ``state``.

    Returns ``state`` itself when nothing changes, so callers can detect
    no-ops with an identity check.
    """
    if isinstance(action, AddItem):
        if any(item.id == action.item.id for item in state.items):
            return state
        return state.model_copy(update={"items": [*state.items, action.item]})

    if isinstance(action, RemoveItem):
        remaining = [item for item in state.items if item.id != action.item_id]
        if len(remaining) == len(state.items):
            return state
        return state.model_copy(update={"items": remaining})

    if isinstance(action, ClearItems):
        return state.model_copy(update={"items": []})

    if isinstance(action, ToggleOpen):
        return state.model_copy(update={"is_open": not state.is_open})

    if isinstance(action, LoadItems):
        return state.model_copy(update={"items": unique_items(action.items)})

    return state


def unique_items(items: Iterable[CollectionItem]) -> list[CollectionItem]:
    """Keep the first entry for each id, preserving order."""
    seen: set[str] = set()
    unique: list[CollectionItem] = []
    for item in items:
        if item.id not in seen:
            seen.add(item.id)
            unique.append(item)
    return unique


class DurableCollectionStore:
    """Deduplicated, ordered item list persisted under a single Redis key."""

    def __init__(self, client: redis.Redis, storage_key: str):
        self._client = client
        self.storage_key = storage_key
        self._state = CollectionState()
        self._write_lock = asyncio.Lock()
        self._pending: set[asyncio.Task[None]] = set()

    @property
    def state(self) -> CollectionState:
        return self._state

    @property
    def items(self) -> list[CollectionItem]:
        return list(self._state.items)

    @property
    def is_open(self) -> bool:
        return self._state.is_open

    @property
    def count(self) -> int:
        return self._state.count

    def contains(self, item_id: str) -> bool:
        return any(item.id == item_id for item in self._state.items)

    def add_item(self, item: CollectionItem | Mapping[str, Any]) -> bool:
        """Append ``item`` unless an entry with the same id exists.

        Returns True when the item was added. Malformed payloads are logged
        and ignored.
        """
        if not isinstance(item, CollectionItem):
            try:
                item = CollectionItem.model_validate(item)
            except ValidationError as exc:
                logger.warning(
                    "Ignoring malformed item for %s: %s",
                    self.storage_key,
                    exc.errors(include_url=False),
                )
                return False
        return self.dispatch(AddItem(item=item))

    def remove_item(self, item_id: str) -> bool:
        return self.dispatch(RemoveItem(item_id=item_id))

    def clear(self) -> bool:
        return self.dispatch(ClearItems())

    def toggle_open(self) -> bool:
        self.dispatch(ToggleOpen())
        return self._state.is_open

    def load(self, items: Iterable[CollectionItem]) -> None:
        """Replace the items wholesale without writing them back.

        Entries repeating an earlier id are dropped.
        """
        items = list(items)
        self.dispatch(LoadItems(items=items))
        dropped = len(items) - self._state.count
        if dropped:
            logger.warning(
                "Dropped %d duplicate entries while loading %s",
                dropped,
                self.storage_key,
            )

    def dispatch(self, action: CollectionAction) -> bool:
        """Apply ``action``; persist when the item sequence changed.

        Returns True when the state changed.
        """
        previous = self._state
        self._state = reduce_collection(previous, action)
        if self._state is previous:
            return False
        if self._state.items is not previous.items and not isinstance(action, LoadItems):
            self._schedule_persist()
        return True

    async def hydrate(self) -> CollectionState:
        """Load the persisted items, falling back to an empty collection."""
        try:
            raw = await self._client.get(self.storage_key)
        except (RedisError, OSError) as exc:
            logger.warning(
                "Could not read %s from storage, starting empty: %s",
                self.storage_key,
                exc,
            )
            raw = None

        items: list[CollectionItem] = []
        if raw:
            try:
                items = CollectionItems.validate_json(raw)
            except ValidationError as exc:
                logger.error(
                    "Error loading %s from storage: %s",
                    self.storage_key,
                    exc.errors(include_url=False),
                )
        self.load(items)
        logger.debug(
            "Hydrated collection",
            extra={"storage_key": self.storage_key, "count": self._state.count},
        )
        return self._state

    async def flush(self) -> None:
        """Wait for outstanding background writes to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def _schedule_persist(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning(
                "No running event loop, %s changes kept in memory only",
                self.storage_key,
            )
            return
        task = loop.create_task(self._persist())
        self._pending.add(task)
        task.add_done_callback(self._on_persist_done)

    def _on_persist_done(self, task: asyncio.Task[None]) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "Unexpected error persisting %s: %s",
                self.storage_key,
                exc,
                exc_info=exc,
            )

    async def _persist(self) -> None:
        # Each write stores the latest snapshot, so the last write wins.
        async with self._write_lock:
            payload = CollectionItems.dump_json(self._state.items)
            try:
                await self._client.set(self.storage_key, payload)
            except (RedisError, OSError) as exc:
                logger.warning(
                    "Failed to persist %s, keeping in-memory state: %s",
                    self.storage_key,
                    exc,
                )


def create_cart_store(client: redis.Redis, session_id: str | None = None) -> DurableCollectionStore:
    """Factory function to create the cart store."""
    return DurableCollectionStore(client, _scoped_key(settings.CART_STORAGE_KEY, session_id))


def create_wishlist_store(
    client: redis.Redis, session_id: str | None = None
) -> DurableCollectionStore:
    """Factory function to create the wishlist store."""
    return DurableCollectionStore(
        client, _scoped_key(settings.WISHLIST_STORAGE_KEY, session_id)
    )


def _scoped_key(base: str, session_id: str | None) -> str:
    return f"{base}:{session_id}" if session_id else base
