"""Payload builders shared by the test modules."""

from datetime import UTC, datetime, timedelta

GITHUB_API = "https://api.github.com"


def iso_days_ago(days: int) -> str:
    """ISO timestamp ``days`` before the real current time."""
    return (datetime.now(UTC) - timedelta(days=days)).isoformat().replace("+00:00", "Z")


def user_payload(login: str = "testuser", **overrides) -> dict:
    payload = {
        "login": login,
        "name": "Test User",
        "avatar_url": "https://example.com/avatar.png",
        "html_url": f"https://github.com/{login}",
        "bio": "Developer",
        "public_repos": 42,
        "followers": 100,
        "following": 50,
        "created_at": "2020-01-01T00:00:00Z",
    }
    payload.update(overrides)
    return payload


def repo_payload(name: str = "repo", **overrides) -> dict:
    payload = {
        "name": name,
        "description": "A test repo",
        "language": "Python",
        "stargazers_count": 10,
        "forks_count": 3,
        "fork": False,
        "archived": False,
        "size": 500,
        "created_at": iso_days_ago(100),
        "updated_at": iso_days_ago(5),
        "topics": ["python"],
    }
    payload.update(overrides)
    return payload
