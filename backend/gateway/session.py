"""Battle roster sessions.

Each client session owns one ``BattleRoster``, stored in Redis with a
sliding TTL. Participants are snapshotted (user + repos) at the time
they are added, like the comparison list in the dashboard.

Mutations go through ``update``, which re-reads the roster under
``WATCH`` and commits with ``MULTI``/``EXEC``, so concurrent requests
for one session never overwrite each other's changes.
"""

from __future__ import annotations

import json
from collections.abc import Callable

import redis.asyncio as aioredis
from redis.exceptions import WatchError

from app.config import get_settings
from app.logging_config import get_logger
from services.battle_engine import BattleRoster, RosterChange

logger = get_logger(__name__)

RosterMutation = Callable[[BattleRoster], RosterChange]


class RosterSessionStore:
    """Redis-backed battle roster per client session."""

    PREFIX = "ghh:battle:"
    MAX_UPDATE_ATTEMPTS = 10

    def __init__(self, redis: aioredis.Redis) -> None:
        self.redis = redis
        self.settings = get_settings()

    def _key(self, session_id: str) -> str:
        return f"{self.PREFIX}{session_id}"

    def _empty(self) -> BattleRoster:
        return BattleRoster(max_participants=self.settings.battle_max_participants)

    def _decode(self, raw: str | bytes | None) -> BattleRoster:
        if raw is None:
            return self._empty()
        try:
            return BattleRoster.from_dict(
                json.loads(raw),
                max_participants=self.settings.battle_max_participants,
            )
        except (ValueError, TypeError, AttributeError):
            # pydantic's ValidationError is a ValueError
            logger.warning("battle_roster_corrupt")
            return self._empty()

    async def load(self, session_id: str) -> BattleRoster:
        """Return the stored roster, or an empty one."""
        return self._decode(await self.redis.get(self._key(session_id)))

    async def save(self, session_id: str, roster: BattleRoster) -> None:
        await self.redis.setex(
            self._key(session_id),
            self.settings.redis_session_ttl,
            json.dumps(roster.to_dict()),
        )
        logger.debug("battle_roster_saved", session_id=session_id, size=len(roster))

    async def update(self, session_id: str, mutate: RosterMutation) -> RosterChange:
        """Apply ``mutate`` to the current roster and store it atomically.

        Rejected changes are not written. When another request commits
        first, the roster is re-read and ``mutate`` runs again.
        """
        key = self._key(session_id)
        async with self.redis.pipeline(transaction=True) as pipe:
            for attempt in range(1, self.MAX_UPDATE_ATTEMPTS + 1):
                try:
                    await pipe.watch(key)
                    roster = self._decode(await pipe.get(key))
                    change = mutate(roster)
                    if not change.accepted:
                        return change
                    pipe.multi()
                    pipe.setex(
                        key, self.settings.redis_session_ttl, json.dumps(roster.to_dict())
                    )
                    await pipe.execute()
                    logger.debug("battle_roster_saved", session_id=session_id, size=len(roster))
                    return change
                except WatchError:
                    logger.info("battle_roster_conflict", attempt=attempt)
        raise RuntimeError(
            f"Battle roster update did not converge after {self.MAX_UPDATE_ATTEMPTS} attempts"
        )

    async def delete(self, session_id: str) -> None:
        await self.redis.delete(self._key(session_id))
