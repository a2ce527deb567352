"""Pytest configuration and fixtures for the shopping-state service."""

import pytest
import pytest_asyncio
from fakeredis import aioredis as fakeredis
from httpx import ASGITransport, AsyncClient

from src.models.catalog import ProductRow
from src.services.session_registry import SessionRegistry, get_session_registry
from src.services.storage.collection_store import (
    create_cart_store,
    create_wishlist_store,
)
from src.services.storage.redis_client import get_redis_client


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
    config.addinivalue_line("markers", "asyncio: marks tests as async tests")


@pytest_asyncio.fixture()
async def redis_client():
    """Provide a fake Redis client for each test."""
    from src.main import app

    client = fakeredis.FakeRedis()
    registry = SessionRegistry(client)
    app.dependency_overrides[get_redis_client] = lambda: client
    app.dependency_overrides[get_session_registry] = lambda: registry
    try:
        yield client
    finally:
        await client.flushdb()
        await client.aclose()
        app.dependency_overrides.pop(get_redis_client, None)
        app.dependency_overrides.pop(get_session_registry, None)


@pytest_asyncio.fixture()
async def client(redis_client):
    """Return an HTTPX async client pointing at the FastAPI app."""
    from src.main import app

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://testserver",
    ) as test_client:
        yield test_client


@pytest_asyncio.fixture()
async def cart(redis_client):
    store = create_cart_store(redis_client)
    await store.hydrate()
    yield store
    await store.flush()


@pytest_asyncio.fixture()
async def wishlist(redis_client):
    store = create_wishlist_store(redis_client)
    await store.hydrate()
    yield store
    await store.flush()


@pytest.fixture()
def make_product():
    """Return a factory building catalog rows with sensible defaults."""

    def _make(**overrides) -> ProductRow:
        data = {
            "id": "p1",
            "name": "Kanjivaram Silk Saree",
            "slug": "kanjivaram-silk-saree",
            "price": 12000,
            "sale_price": None,
            "images": ["https://cdn.example.com/kanjivaram.jpg"],
            "category_id": "silk",
            "stock_quantity": 5,
            "featured": False,
            "video_url": "https://videos.example.com/kanjivaram.mp4",
        }
        data.update(overrides)
        return ProductRow(**data)

    return _make
