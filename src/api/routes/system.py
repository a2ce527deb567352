"""System-level routes such as health checks."""

from __future__ import annotations

from typing import Annotated

import redis.asyncio as redis
from fastapi import APIRouter, Depends

from src.config import settings
from src.services.storage.redis_client import get_redis_client

router = APIRouter(tags=["system"])


@router.get("/")
async def read_root() -> dict[str, str]:
    """Hello World endpoint used by smoke tests."""

    return {"message": "Hello World"}


@router.get("/health")
async def health_check(
    client: Annotated[redis.Redis, Depends(get_redis_client)],
) -> dict[str, str]:
    """Health check endpoint with storage connectivity check."""

    try:
        storage_status = "connected" if await client.ping() else "disconnected"
    except Exception:
        storage_status = "disconnected"

    return {
        "status": "healthy",
        "storage": storage_status,
        "environment": settings.ENVIRONMENT,
    }
