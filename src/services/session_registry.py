"""In-memory registry of shopper sessions and their persisted collections."""

from __future__ import annotations

import asyncio
import logging
from collections import OrderedDict
from dataclasses import dataclass

import redis.asyncio as redis

from src.config import settings
from src.services.storage.collection_store import (
    DurableCollectionStore,
    create_cart_store,
    create_wishlist_store,
)
from src.services.storage.redis_client import get_redis_client

logger = logging.getLogger(__name__)


@dataclass
class ShoppingSession:
    """Cart and wishlist owned by one shopper session."""

    session_id: str
    cart: DurableCollectionStore
    wishlist: DurableCollectionStore

    def collection(self, name: str) -> DurableCollectionStore:
        if name == "cart":
            return self.cart
        if name == "wishlist":
            return self.wishlist
        raise KeyError(name)

    async def flush(self) -> None:
        await self.cart.flush()
        await self.wishlist.flush()


class SessionRegistry:
    """Creates sessions on first use and hydrates them from storage once.

    At most ``max_sessions`` sessions stay in memory; the least recently used
    one is flushed and dropped when a new session would exceed the bound. An
    evicted session is rehydrated from storage on its next request, losing
    only the transient panel flags.
    """

    def __init__(self, client: redis.Redis, max_sessions: int | None = None) -> None:
        self._client = client
        self.max_sessions = max_sessions or settings.MAX_SESSIONS
        self._lock = asyncio.Lock()
        self._sessions: OrderedDict[str, ShoppingSession] = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    async def get(self, session_id: str) -> ShoppingSession:
        async with self._lock:
            session = self._sessions.get(session_id)
            if session is not None:
                self._sessions.move_to_end(session_id)
                return session

            session = ShoppingSession(
                session_id=session_id,
                cart=create_cart_store(self._client, session_id),
                wishlist=create_wishlist_store(self._client, session_id),
            )
            await session.cart.hydrate()
            await session.wishlist.hydrate()
            self._sessions[session_id] = session
            logger.info(
                "Opened session %s (cart=%d, wishlist=%d)",
                session_id,
                session.cart.count,
                session.wishlist.count,
            )

            while len(self._sessions) > self.max_sessions:
                _, oldest = self._sessions.popitem(last=False)
                await self._release(oldest)
            return session

    async def evict(self, session_id: str) -> bool:
        """Flush and forget ``session_id``. Returns False when it was not open."""
        async with self._lock:
            session = self._sessions.pop(session_id, None)
            if session is None:
                return False
            await self._release(session)
            return True

    async def close_all(self) -> None:
        """Flush pending writes of every session."""
        async with self._lock:
            sessions = list(self._sessions.values())
        for session in sessions:
            await session.flush()

    @staticmethod
    async def _release(session: ShoppingSession) -> None:
        await session.flush()
        logger.info("Evicted session %s", session.session_id)


_registry: SessionRegistry | None = None


def get_session_registry() -> SessionRegistry:
    """FastAPI dependency factory."""

    global _registry
    if _registry is None:
        _registry = SessionRegistry(get_redis_client())
    return _registry
