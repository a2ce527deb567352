"""Tests for the in-memory shopper session registry."""

from __future__ import annotations

import json

import pytest

from src.services.session_registry import SessionRegistry

SAREE = {"id": "p1", "name": "Silk Saree", "price": 2000, "image": "x.jpg"}


@pytest.mark.asyncio
async def test_same_session_is_reused(redis_client):
    registry = SessionRegistry(redis_client, max_sessions=2)

    first = await registry.get("shopper-1")
    again = await registry.get("shopper-1")

    assert first is again
    assert len(registry) == 1


@pytest.mark.asyncio
async def test_least_recently_used_session_is_evicted(redis_client):
    registry = SessionRegistry(redis_client, max_sessions=2)

    await registry.get("a")
    await registry.get("b")
    await registry.get("a")
    await registry.get("c")

    assert len(registry) == 2
    assert "a" in registry
    assert "b" not in registry
    assert "c" in registry


@pytest.mark.asyncio
async def test_evicted_session_flushes_and_rehydrates(redis_client):
    registry = SessionRegistry(redis_client, max_sessions=1)

    first = await registry.get("shopper-1")
    first.cart.add_item(SAREE)
    first.cart.toggle_open()
    await registry.get("shopper-2")

    stored = json.loads(await redis_client.get("vanisarees-cart:shopper-1"))
    assert [entry["id"] for entry in stored] == ["p1"]

    reopened = await registry.get("shopper-1")
    assert reopened is not first
    assert [item.id for item in reopened.cart.items] == ["p1"]
    assert reopened.cart.is_open is False


@pytest.mark.asyncio
async def test_explicit_evict(redis_client):
    registry = SessionRegistry(redis_client, max_sessions=10)
    session = await registry.get("shopper-1")
    session.wishlist.add_item(SAREE)

    assert await registry.evict("shopper-1") is True
    assert await registry.evict("shopper-1") is False
    assert len(registry) == 0
    assert await redis_client.get("vanisarees-wishlist:shopper-1") is not None
