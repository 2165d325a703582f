"""Profile analytics endpoints.

GET /api/v1/users/{login}/analytics - Profile, scores, achievements, insights
GET /api/v1/users/{login}/repos     - Filtered and sorted repository list
GET /api/v1/users/{login}/export    - JSON export download
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from api.deps import get_optional_session_id
from app.config import get_settings
from app.dependencies import get_github_service, get_preferences_store
from app.exceptions import GitHubStatusError, GitHubUserNotFoundError
from app.logging_config import get_logger
from services import metrics_engine
from services.export import build_export, export_filename, share_url
from services.github_service import GitHubService
from services.insights import analysis_confidence, generate_insights
from services.models import (
    Achievement,
    DeveloperTier,
    GitHubUser,
    GrowthPoint,
    Insight,
    PerformanceBadge,
    RadarAxis,
    RepoBreakdown,
    Repository,
    ScoreCard,
    SpecialRecognition,
)
from services.preferences import PreferencesStore

logger = get_logger(__name__)
router = APIRouter()

LOGIN_PATTERN = r"^[a-zA-Z0-9]([a-zA-Z0-9-]*[a-zA-Z0-9])?$"

LoginPath = Path(..., min_length=1, max_length=39, pattern=LOGIN_PATTERN)
SORT_PATTERN = "^(" + "|".join(metrics_engine.REPO_SORT_KEYS) + ")$"


class LanguageCount(BaseModel):
    language: str
    count: int


class ProfileStats(BaseModel):
    total_stars: int
    total_forks: int
    languages: dict[str, int]
    top_languages: list[LanguageCount]
    repos: RepoBreakdown


class AnalyticsResponse(BaseModel):
    """Everything the dashboard renders for one profile."""

    profile: GitHubUser
    stats: ProfileStats
    scores: ScoreCard
    achievements: list[Achievement]
    tier: DeveloperTier
    radar: list[RadarAxis]
    recognition: SpecialRecognition
    insights: list[Insight]
    analysis_confidence: float
    badges: list[PerformanceBadge]
    top_repos: dict[str, list[Repository]]
    growth: list[GrowthPoint]
    share_url: str
    meta: dict


@router.get("/{login}/analytics", response_model=AnalyticsResponse)
async def get_analytics(
    login: str = LoginPath,
    session_id: Optional[str] = Depends(get_optional_session_id),
    github: GitHubService = Depends(get_github_service),
    preferences: PreferencesStore = Depends(get_preferences_store),
) -> AnalyticsResponse:
    """Search a profile and compute all derived analytics.

    When the request carries a session, the login is pushed onto that
    session's search history and a search superseded by a newer one from
    the same session is discarded. Anonymous searches never interfere.
    """
    settings = get_settings()
    result = await github.search(login, scope=session_id)
    user, repos = result.user, result.repos

    histogram = metrics_engine.language_histogram(repos)
    achievements = metrics_engine.evaluate_achievements(user, repos)
    insights = generate_insights(user, repos)
    scores = metrics_engine.compute_scorecard(
        user, repos, window_months=settings.activity_window_months
    )

    if session_id:
        await preferences.record_search(session_id, user.login)

    logger.info("profile_analyzed", repo_count=len(repos))
    return AnalyticsResponse(
        profile=user,
        stats=ProfileStats(
            total_stars=metrics_engine.total_stars(repos),
            total_forks=metrics_engine.total_forks(repos),
            languages=histogram,
            top_languages=[
                LanguageCount(language=lang, count=count)
                for lang, count in metrics_engine.top_languages(histogram)
            ],
            repos=metrics_engine.repo_breakdown(repos),
        ),
        scores=scores,
        achievements=achievements,
        tier=metrics_engine.developer_tier(achievements),
        radar=metrics_engine.performance_radar(repos),
        recognition=metrics_engine.special_recognition(user, repos),
        insights=insights,
        analysis_confidence=analysis_confidence(insights),
        badges=metrics_engine.performance_badges(scores, repos),
        top_repos=metrics_engine.repo_explorer(repos),
        growth=metrics_engine.repo_growth(repos),
        share_url=share_url(settings.public_base_url, user.login),
        meta={
            "generation": result.generation,
            "repo_count": len(repos),
        },
    )


@router.get("/{login}/repos", response_model=list[Repository])
async def list_repositories(
    login: str = LoginPath,
    q: Optional[str] = Query(None, max_length=100, description="Name/description search"),
    language: Optional[str] = Query(None, max_length=50),
    sort: str = Query("updated", pattern=SORT_PATTERN),
    github: GitHubService = Depends(get_github_service),
) -> list[Repository]:
    """Repository list for the repos tab."""
    try:
        repos = await github.fetch_repos(login)
    except GitHubStatusError as exc:
        if exc.upstream_status == 404:
            raise GitHubUserNotFoundError() from exc
        raise
    return metrics_engine.filter_repos(repos, query=q, language=language, sort_by=sort)


@router.get("/{login}/export")
async def export_profile(
    login: str = LoginPath,
    github: GitHubService = Depends(get_github_service),
) -> JSONResponse:
    """Download user, repos and headline stats as a JSON file."""
    result = await github.search(login)
    return JSONResponse(
        content=build_export(result),
        headers={
            "Content-Disposition": (
                f'attachment; filename="{export_filename(result.user.login)}"'
            ),
        },
    )
