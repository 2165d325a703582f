"""Application-level dependencies.

Provides the Redis connection, the shared GitHub service and the
Redis-backed stores as FastAPI dependencies for injection into route
handlers.
"""

from __future__ import annotations

from typing import AsyncGenerator, Optional

import redis.asyncio as aioredis
from fastapi import Depends, Request

from app.config import get_settings
from gateway.session import RosterSessionStore
from services.github_service import GitHubService
from services.preferences import PreferencesStore

# Global Redis connection pool
_redis_pool: Optional[aioredis.Redis] = None


async def init_redis() -> None:
    """Initialize Redis connection pool."""
    global _redis_pool
    settings = get_settings()
    _redis_pool = aioredis.from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
        max_connections=20,
    )
    # Test connection
    await _redis_pool.ping()


async def close_redis() -> None:
    """Close Redis connection pool."""
    global _redis_pool
    if _redis_pool:
        await _redis_pool.aclose()
        _redis_pool = None


async def get_redis() -> AsyncGenerator[aioredis.Redis, None]:
    """Get Redis connection as a FastAPI dependency."""
    if _redis_pool is None:
        raise RuntimeError("Redis not initialized. Call init_redis() first.")
    yield _redis_pool


def get_github_service(request: Request) -> GitHubService:
    """The application's GitHub service; it owns the response cache."""
    return request.app.state.github_service


def get_preferences_store(
    redis: aioredis.Redis = Depends(get_redis),
) -> PreferencesStore:
    return PreferencesStore(redis)


def get_roster_store(
    redis: aioredis.Redis = Depends(get_redis),
) -> RosterSessionStore:
    return RosterSessionStore(redis)
