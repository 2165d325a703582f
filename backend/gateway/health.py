"""Health monitoring.

Reports Redis connectivity and the state of the GitHub response cache.
"""

from __future__ import annotations

from typing import Any

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from app.logging_config import get_logger
from services.response_cache import ResponseCache

logger = get_logger(__name__)


class HealthMonitor:
    """Monitors health of all application components."""

    def __init__(self, redis: aioredis.Redis, cache: ResponseCache) -> None:
        self.redis = redis
        self.cache = cache

    async def check_all(self) -> dict[str, Any]:
        """Run all health checks and return status."""
        redis_ok = await self._check_redis()

        return {
            "status": "healthy" if redis_ok else "degraded",
            "checks": {
                "redis": {"status": "ok" if redis_ok else "error"},
                "github_cache": {
                    "status": "ok",
                    "entries": len(self.cache),
                    "max_entries": self.cache.max_entries,
                },
            },
        }

    async def _check_redis(self) -> bool:
        try:
            await self.redis.ping()
            return True
        except (RedisError, OSError):
            logger.error("health_check_redis_failed")
            return False
