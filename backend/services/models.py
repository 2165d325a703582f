"""Domain models for GitHub payloads and derived analytics.

GitHub records keep any extra fields they arrive with so the JSON export
hands back the full payload; only the fields the metrics engine reads are
declared and validated.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, ConfigDict, Field


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


# GitHub timestamps are UTC; naive values are read as UTC too
UTCDatetime = Annotated[datetime, AfterValidator(_as_utc)]


class GitHubUser(BaseModel):
    """Subset of `GET /users/{login}` used by the dashboard."""

    model_config = ConfigDict(extra="allow")

    login: str
    name: str | None = None
    avatar_url: str | None = None
    html_url: str | None = None
    bio: str | None = None
    location: str | None = None
    blog: str | None = None
    company: str | None = None
    followers: int = Field(default=0, ge=0)
    following: int = Field(default=0, ge=0)
    public_repos: int = Field(default=0, ge=0)
    public_gists: int = Field(default=0, ge=0)
    created_at: UTCDatetime | None = None


class Repository(BaseModel):
    """Subset of one `GET /users/{login}/repos` entry."""

    model_config = ConfigDict(extra="allow")

    name: str = ""
    description: str | None = None
    html_url: str | None = None
    language: str | None = None
    stargazers_count: int = Field(default=0, ge=0)
    forks_count: int = Field(default=0, ge=0)
    open_issues_count: int = Field(default=0, ge=0)
    size: int = Field(default=0, ge=0)
    fork: bool = False
    archived: bool = False
    topics: list[str] = Field(default_factory=list)
    created_at: UTCDatetime | None = None
    updated_at: UTCDatetime | None = None


class Achievement(BaseModel):
    """One achievement predicate, re-evaluated on every request."""

    id: str
    title: str
    description: str
    achieved: bool
    progress: int | None = None
    max_progress: int | None = None


class DeveloperTier(BaseModel):
    name: str
    achieved_count: int
    total: int
    completion_rate: float


class RadarAxis(BaseModel):
    subject: str
    value: float
    full_mark: float = 100.0


class ScoreCard(BaseModel):
    """All single-profile scores, each clamped to [0, 100]."""

    impact: float
    quality: float
    activity: float
    consistency: float
    trending: float
    innovation: float


class SpecialRecognition(BaseModel):
    top_repo: str | None = None
    top_repo_stars: int = 0
    favorite_language: str | None = None
    influence: int = 0


class RepoBreakdown(BaseModel):
    original: int = 0
    forked: int = 0
    archived: int = 0


class PerformanceBadge(BaseModel):
    """Threshold badge from the repository analytics panel."""

    name: str
    description: str
    unlocked: bool


class GrowthPoint(BaseModel):
    """One repository on the creation timeline, with the running total."""

    name: str
    created_at: UTCDatetime | None = None
    repos: int
    stars: int


class Insight(BaseModel):
    id: str
    title: str
    description: str
    type: str
    confidence: float


class SearchResult(BaseModel):
    """Outcome of one profile search: the user and their first page of repos."""

    user: GitHubUser
    repos: list[Repository] = Field(default_factory=list)
    generation: int = 0

    def export_payload(self) -> dict[str, Any]:
        return {
            "user": self.user.model_dump(mode="json"),
            "repos": [r.model_dump(mode="json") for r in self.repos],
        }
