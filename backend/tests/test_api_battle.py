"""Tests for the developer battle endpoints."""

import asyncio

import pytest
import respx
from httpx import Response

from app.config import get_settings
from tests.helpers import GITHUB_API, iso_days_ago, repo_payload, user_payload

SESSION = {"X-Session-ID": "battle-session"}


def _mock_developer(login: str, followers: int, stars: int):
    respx.get(f"{GITHUB_API}/users/{login}").mock(
        return_value=Response(200, json=user_payload(login, followers=followers, public_repos=1))
    )
    return respx.get(f"{GITHUB_API}/users/{login}/repos").mock(
        return_value=Response(
            200, json=[repo_payload(f"{login}-repo", stargazers_count=stars, forks_count=0)]
        )
    )


@pytest.mark.asyncio
class TestBattleEndpoints:
    """Test suite for /api/v1/battle."""

    async def test_session_required(self, client):
        response = await client.get("/api/v1/battle")
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "SESSION_REQUIRED"

    async def test_empty_battle_not_ready(self, client):
        response = await client.get("/api/v1/battle", headers=SESSION)
        assert response.status_code == 200
        data = response.json()
        assert data["ready"] is False
        assert data["winner"] is None
        assert data["ranking"] == []
        assert data["message"] == "Add at least 2 developers to start a battle"
        assert data["available_metrics"][0] == "overall"

    @respx.mock
    async def test_battle_flow(self, client):
        _mock_developer("alice", followers=10, stars=100)
        _mock_developer("bob", followers=500, stars=0)

        first = await client.post("/api/v1/battle/participants", json={"login": "alice"}, headers=SESSION)
        assert first.json() == {"accepted": True, "message": "Added alice to comparison", "size": 1}

        single = await client.get("/api/v1/battle", headers=SESSION)
        assert single.json()["ready"] is False

        await client.post("/api/v1/battle/participants", json={"login": "bob"}, headers=SESSION)

        response = await client.get("/api/v1/battle", headers=SESSION)
        data = response.json()
        assert data["participants"] == ["alice", "bob"]
        assert data["ready"] is True
        # alice: 0.3*100 + 0.3*10 + 0.2*1 = 33.2, bob: 0.3*500 + 0.2*1 = 150.2
        assert data["winner"]["login"] == "bob"
        assert [s["overall_score"] for s in data["ranking"]] == [150, 33]

        by_stars = await client.get(
            "/api/v1/battle", params={"metric": "Star Power"}, headers=SESSION
        )
        assert by_stars.json()["winner"]["login"] == "alice"

    @respx.mock
    async def test_duplicate_is_rejected_without_refetch(self, client):
        repos_route = _mock_developer("alice", followers=1, stars=1)

        await client.post("/api/v1/battle/participants", json={"login": "alice"}, headers=SESSION)
        response = await client.post(
            "/api/v1/battle/participants", json={"login": "alice"}, headers=SESSION
        )
        assert response.status_code == 200
        assert response.json()["accepted"] is False
        assert response.json()["message"] == "User already in comparison list"
        assert repos_route.call_count == 1

    @respx.mock
    async def test_roster_is_capped(self, client):
        for login in ("a1", "b2", "c3"):
            _mock_developer(login, followers=1, stars=1)
            await client.post("/api/v1/battle/participants", json={"login": login}, headers=SESSION)

        response = await client.post(
            "/api/v1/battle/participants", json={"login": "d4"}, headers=SESSION
        )
        assert response.json() == {
            "accepted": False,
            "message": "Maximum 3 users for comparison",
            "size": 3,
        }

    @respx.mock
    async def test_missing_user_not_added(self, client):
        respx.get(f"{GITHUB_API}/users/ghost").mock(return_value=Response(404))
        respx.get(f"{GITHUB_API}/users/ghost/repos").mock(return_value=Response(404))

        response = await client.post(
            "/api/v1/battle/participants", json={"login": "ghost"}, headers=SESSION
        )
        assert response.status_code == 404
        battle = await client.get("/api/v1/battle", headers=SESSION)
        assert battle.json()["participants"] == []

    @respx.mock
    async def test_remove_and_clear(self, client):
        _mock_developer("alice", followers=1, stars=1)
        _mock_developer("bob", followers=1, stars=1)
        for login in ("alice", "bob"):
            await client.post("/api/v1/battle/participants", json={"login": login}, headers=SESSION)

        removed = await client.delete("/api/v1/battle/participants/alice", headers=SESSION)
        assert removed.json()["accepted"] is True
        assert removed.json()["size"] == 1

        cleared = await client.delete("/api/v1/battle", headers=SESSION)
        assert cleared.status_code == 204
        battle = await client.get("/api/v1/battle", headers=SESSION)
        assert battle.json()["participants"] == []

    async def test_unknown_metric(self, client):
        response = await client.get("/api/v1/battle", params={"metric": "Vibes"}, headers=SESSION)
        assert response.status_code == 422
        assert response.json()["error"]["code"] == "UNKNOWN_METRIC"

    async def test_invalid_login_payload(self, client):
        response = await client.post(
            "/api/v1/battle/participants", json={"login": ""}, headers=SESSION
        )
        assert response.status_code == 422

    @respx.mock
    async def test_overlapping_adds_both_land(self, client):
        async def slow_profile(request):
            await asyncio.sleep(0.1)
            return Response(200, json=user_payload("alice", followers=1, public_repos=1))

        respx.get(f"{GITHUB_API}/users/alice").mock(side_effect=slow_profile)
        respx.get(f"{GITHUB_API}/users/alice/repos").mock(return_value=Response(200, json=[]))
        _mock_developer("bob", followers=1, stars=1)

        alice, bob = await asyncio.gather(
            client.post("/api/v1/battle/participants", json={"login": "alice"}, headers=SESSION),
            client.post("/api/v1/battle/participants", json={"login": "bob"}, headers=SESSION),
        )
        assert alice.status_code == 200
        assert bob.status_code == 200
        assert alice.json()["accepted"] is True
        assert bob.json()["accepted"] is True

        battle = await client.get("/api/v1/battle", headers=SESSION)
        assert sorted(battle.json()["participants"]) == ["alice", "bob"]

    @respx.mock
    async def test_activity_window_follows_settings(self, client, monkeypatch):
        monkeypatch.setattr(get_settings(), "activity_window_months", 1)
        for login in ("alice", "bob"):
            respx.get(f"{GITHUB_API}/users/{login}").mock(
                return_value=Response(200, json=user_payload(login))
            )
            respx.get(f"{GITHUB_API}/users/{login}/repos").mock(
                return_value=Response(200, json=[repo_payload(updated_at=iso_days_ago(60))])
            )
            await client.post("/api/v1/battle/participants", json={"login": login}, headers=SESSION)

        response = await client.get(
            "/api/v1/battle", params={"metric": "Activity Score"}, headers=SESSION
        )
        assert [s["metrics"]["Activity Score"] for s in response.json()["ranking"]] == [0, 0]
