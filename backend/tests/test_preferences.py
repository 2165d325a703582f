"""Tests for the Redis-backed preference and roster stores."""

import json

import fakeredis
import fakeredis.aioredis
import pytest

from gateway.health import HealthMonitor
from gateway.session import RosterSessionStore
from services.battle_engine import BattleRoster
from services.models import GitHubUser, Repository
from services.preferences import HISTORY_KEY, PreferencesStore, push_history
from services.response_cache import ResponseCache


class TestPushHistory:
    def test_most_recent_first_without_duplicates(self):
        assert push_history(["a", "b", "c"], "b", limit=8) == ["b", "a", "c"]

    def test_capped(self):
        history = [f"u{i}" for i in range(8)]
        updated = push_history(history, "new", limit=8)
        assert updated[0] == "new"
        assert len(updated) == 8
        assert "u7" not in updated


@pytest.mark.asyncio
class TestPreferencesStore:
    async def test_defaults_for_unknown_client(self, fake_redis):
        store = PreferencesStore(fake_redis)
        prefs = await store.get("nobody")
        assert prefs.history == []
        assert prefs.dark_mode is False

    async def test_record_search(self, fake_redis):
        store = PreferencesStore(fake_redis)
        await store.record_search("c1", "octocat")
        await store.record_search("c1", "torvalds")
        history = await store.record_search("c1", "octocat")
        assert history == ["octocat", "torvalds"]
        assert await store.get_history("c1") == ["octocat", "torvalds"]
        assert await fake_redis.ttl(HISTORY_KEY.format(client_id="c1")) > 0

    async def test_clear_history(self, fake_redis):
        store = PreferencesStore(fake_redis)
        await store.record_search("c1", "octocat")
        await store.clear_history("c1")
        assert await store.get_history("c1") == []

    async def test_corrupt_history_is_ignored(self, fake_redis):
        await fake_redis.set(HISTORY_KEY.format(client_id="c1"), "{not json")
        assert await PreferencesStore(fake_redis).get_history("c1") == []

    async def test_dark_mode(self, fake_redis):
        store = PreferencesStore(fake_redis)
        assert await store.set_dark_mode("c1", True) is True
        assert await store.get_dark_mode("c1") is True
        await store.set_dark_mode("c1", False)
        assert (await store.get("c1")).dark_mode is False

    async def test_clients_are_isolated(self, fake_redis):
        store = PreferencesStore(fake_redis)
        await store.record_search("c1", "octocat")
        await store.set_dark_mode("c1", True)
        prefs = await store.get("c2")
        assert prefs.history == []
        assert prefs.dark_mode is False


@pytest.mark.asyncio
class TestRosterSessionStore:
    async def test_empty_roster_for_new_session(self, fake_redis):
        roster = await RosterSessionStore(fake_redis).load("s1")
        assert len(roster) == 0
        assert roster.max_participants == 3

    async def test_save_and_load(self, fake_redis):
        store = RosterSessionStore(fake_redis)
        roster = BattleRoster()
        roster.add(GitHubUser(login="a", followers=5), [Repository(name="r", stargazers_count=2)])
        await store.save("s1", roster)

        loaded = await store.load("s1")
        assert loaded.logins == ["a"]
        assert loaded.participants[0].repos[0].stargazers_count == 2

        stored = json.loads(await fake_redis.get("ghh:battle:s1"))
        assert stored["participants"][0]["user"]["login"] == "a"

    async def test_delete(self, fake_redis):
        store = RosterSessionStore(fake_redis)
        roster = BattleRoster()
        roster.add(GitHubUser(login="a"), [])
        await store.save("s1", roster)
        await store.delete("s1")
        assert len(await store.load("s1")) == 0

    async def test_update_applies_and_persists(self, fake_redis):
        store = RosterSessionStore(fake_redis)
        change = await store.update("s1", lambda r: r.add(GitHubUser(login="a"), []))
        assert change.accepted
        assert (await store.load("s1")).logins == ["a"]

    async def test_rejected_update_is_not_written(self, fake_redis):
        store = RosterSessionStore(fake_redis)
        await store.update("s1", lambda r: r.add(GitHubUser(login="a"), []))
        change = await store.update("s1", lambda r: r.add(GitHubUser(login="a"), []))
        assert not change.accepted
        assert (await store.load("s1")).logins == ["a"]

    async def test_update_retries_on_concurrent_write(self):
        server = fakeredis.FakeServer()
        redis = fakeredis.aioredis.FakeRedis(server=server, decode_responses=True)
        other_client = fakeredis.FakeRedis(server=server, decode_responses=True)
        store = RosterSessionStore(redis)
        seen: list[list[str]] = []

        def add_y(roster: BattleRoster):
            seen.append(roster.logins)
            if len(seen) == 1:
                # Another request commits "x" between our read and our write
                competing = BattleRoster()
                competing.add(GitHubUser(login="x"), [])
                other_client.set("ghh:battle:s1", json.dumps(competing.to_dict()))
            return roster.add(GitHubUser(login="y"), [])

        change = await store.update("s1", add_y)

        assert change.accepted
        assert seen == [[], ["x"]]
        assert (await store.load("s1")).logins == ["x", "y"]
        await redis.aclose()

    async def test_corrupt_roster_is_treated_as_empty(self, fake_redis):
        store = RosterSessionStore(fake_redis)
        await fake_redis.set("ghh:battle:s1", "{not json")
        assert len(await store.load("s1")) == 0

        await fake_redis.set("ghh:battle:s2", json.dumps({"participants": [{"user": {}}]}))
        assert len(await store.load("s2")) == 0

        change = await store.update("s1", lambda r: r.add(GitHubUser(login="a"), []))
        assert change.accepted
        assert (await store.load("s1")).logins == ["a"]


@pytest.mark.asyncio
class TestHealthMonitor:
    async def test_healthy(self, fake_redis):
        cache = ResponseCache(max_entries=10)
        cache.set("k", 1)
        health = await HealthMonitor(fake_redis, cache).check_all()
        assert health["status"] == "healthy"
        assert health["checks"]["redis"]["status"] == "ok"
        assert health["checks"]["github_cache"]["entries"] == 1
        assert health["checks"]["github_cache"]["max_entries"] == 10
