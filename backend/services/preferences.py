"""Per-client dashboard preferences.

Stores the search history (most recent first, distinct, capped) and the
dark-mode flag in Redis. Keys slide their TTL on every write.
"""

from __future__ import annotations

import json

import redis.asyncio as aioredis
from pydantic import BaseModel, Field

from app.config import get_settings
from app.logging_config import get_logger

logger = get_logger(__name__)

HISTORY_KEY = "ghh:history:{client_id}"
DARK_MODE_KEY = "ghh:dark-mode:{client_id}"


class Preferences(BaseModel):
    history: list[str] = Field(default_factory=list)
    dark_mode: bool = False


def push_history(history: list[str], login: str, limit: int) -> list[str]:
    """Move ``login`` to the front, dropping duplicates and overflow."""
    return [login, *(h for h in history if h != login)][:limit]


class PreferencesStore:
    """Redis-backed search history and dark-mode flag."""

    def __init__(self, redis: aioredis.Redis) -> None:
        self.redis = redis
        self.settings = get_settings()

    async def get(self, client_id: str) -> Preferences:
        return Preferences(
            history=await self.get_history(client_id),
            dark_mode=await self.get_dark_mode(client_id),
        )

    async def get_history(self, client_id: str) -> list[str]:
        raw = await self.redis.get(HISTORY_KEY.format(client_id=client_id))
        if raw is None:
            return []
        try:
            history = json.loads(raw)
        except ValueError:
            logger.warning("search_history_corrupt")
            return []
        return [h for h in history if isinstance(h, str)] if isinstance(history, list) else []

    async def record_search(self, client_id: str, login: str) -> list[str]:
        history = push_history(
            await self.get_history(client_id),
            login,
            self.settings.history_max_entries,
        )
        await self.redis.setex(
            HISTORY_KEY.format(client_id=client_id),
            self.settings.redis_session_ttl,
            json.dumps(history),
        )
        return history

    async def clear_history(self, client_id: str) -> None:
        await self.redis.delete(HISTORY_KEY.format(client_id=client_id))

    async def get_dark_mode(self, client_id: str) -> bool:
        raw = await self.redis.get(DARK_MODE_KEY.format(client_id=client_id))
        if raw is None:
            return False
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        return raw == "true"

    async def set_dark_mode(self, client_id: str, enabled: bool) -> bool:
        await self.redis.setex(
            DARK_MODE_KEY.format(client_id=client_id),
            self.settings.redis_session_ttl,
            json.dumps(enabled),
        )
        return enabled
