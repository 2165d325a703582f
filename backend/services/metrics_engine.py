"""Derived-metrics engine.

Pure functions over a GitHub user and their repository list:
language histogram, totals, activity ratio, six clamped scores,
achievements, developer tier, the performance radar and badges, the
repository explorer and the growth timeline.

Every time-dependent function accepts an explicit ``now`` so results
are reproducible; it defaults to the current UTC time. Empty repository
lists always yield zero-valued results, never an exception or NaN.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from datetime import UTC, datetime

from dateutil.relativedelta import relativedelta

from services.models import (
    Achievement,
    DeveloperTier,
    GitHubUser,
    GrowthPoint,
    PerformanceBadge,
    RadarAxis,
    RepoBreakdown,
    Repository,
    ScoreCard,
    SpecialRecognition,
)

SCORE_MIN = 0.0
SCORE_MAX = 100.0

ACTIVITY_WINDOW_MONTHS = 6
RECENT_WINDOW_MONTHS = 3
TRENDING_WINDOW_YEARS = 1
VETERAN_YEARS = 3

# (stars, forks, followers, repo count)
IMPACT_WEIGHTS = (0.4, 0.3, 0.2, 0.1)
# (stars, forks, has description, recently active)
QUALITY_WEIGHTS = (0.4, 0.3, 0.2, 0.1)

TOP_LANGUAGES_LIMIT = 8

# Minimum unlocked achievements per tier, highest first
DEVELOPER_TIERS = (
    (7, "Legendary"),
    (5, "Expert"),
    (3, "Advanced"),
    (1, "Novice"),
    (0, "Beginner"),
)

REPO_SORT_KEYS = ("updated", "stars", "forks", "name")

EXPLORER_METRICS = ("stars", "forks", "activity", "impact")
TOP_REPOS_LIMIT = 5
GROWTH_TIMELINE_LIMIT = 12


def clamp(value: float, low: float = SCORE_MIN, high: float = SCORE_MAX) -> float:
    return max(low, min(high, value))


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _now(now: datetime | None) -> datetime:
    return now or datetime.now(UTC)


def months_ago(months: int, now: datetime | None = None) -> datetime:
    """Calendar-month offset from ``now`` (Jan 31 minus one month is Dec 31)."""
    return _now(now) - relativedelta(months=months)


def updated_since(repo: Repository, cutoff: datetime) -> bool:
    return repo.updated_at is not None and repo.updated_at > cutoff


# --- Aggregates ---


def language_histogram(repos: Sequence[Repository]) -> dict[str, int]:
    """Count non-fork repositories per language; null languages are skipped."""
    counts: dict[str, int] = {}
    for repo in repos:
        if repo.language and not repo.fork:
            counts[repo.language] = counts.get(repo.language, 0) + 1
    return counts


def top_languages(
    histogram: dict[str, int], limit: int = TOP_LANGUAGES_LIMIT
) -> list[tuple[str, int]]:
    """Histogram entries by count descending; equal counts keep insertion order."""
    return sorted(histogram.items(), key=lambda item: item[1], reverse=True)[:limit]


def distinct_languages(repos: Sequence[Repository]) -> list[str]:
    """Languages across all repositories (forks included), first-seen order."""
    seen: dict[str, None] = {}
    for repo in repos:
        if repo.language:
            seen.setdefault(repo.language, None)
    return list(seen)


def total_stars(repos: Sequence[Repository]) -> int:
    return sum(repo.stargazers_count for repo in repos)


def total_forks(repos: Sequence[Repository]) -> int:
    return sum(repo.forks_count for repo in repos)


def top_repository(repos: Sequence[Repository]) -> Repository | None:
    """Most-starred repository; the earliest one wins a tie."""
    best: Repository | None = None
    for repo in repos:
        if best is None or repo.stargazers_count > best.stargazers_count:
            best = repo
    return best


def repo_breakdown(repos: Sequence[Repository]) -> RepoBreakdown:
    return RepoBreakdown(
        original=sum(1 for r in repos if not r.fork),
        forked=sum(1 for r in repos if r.fork),
        archived=sum(1 for r in repos if r.archived),
    )


def account_age_years(user: GitHubUser, now: datetime | None = None) -> int:
    """Whole 365-day years since the account was created."""
    if user.created_at is None:
        return 0
    return max(0, (_now(now) - user.created_at).days // 365)


# --- Scores ---


def activity_ratio(
    repos: Sequence[Repository],
    window_months: int = ACTIVITY_WINDOW_MONTHS,
    now: datetime | None = None,
) -> float:
    """Fraction of repositories updated within ``window_months``."""
    if not repos:
        return 0.0
    cutoff = months_ago(window_months, now)
    recent = sum(1 for repo in repos if updated_since(repo, cutoff))
    return recent / len(repos)


def impact_score(user: GitHubUser, repos: Sequence[Repository]) -> float:
    w_stars, w_forks, w_followers, w_repos = IMPACT_WEIGHTS
    weighted = (
        total_stars(repos) * w_stars
        + total_forks(repos) * w_forks
        + user.followers * w_followers
        + len(repos) * w_repos
    )
    return clamp(weighted / 10)


def quality_score(repos: Sequence[Repository], now: datetime | None = None) -> float:
    """Mean per-repository quality, clamped."""
    if not repos:
        return 0.0
    w_stars, w_forks, w_desc, w_recent = QUALITY_WEIGHTS
    cutoff = months_ago(RECENT_WINDOW_MONTHS, now)
    total = 0.0
    for repo in repos:
        total += (
            repo.stargazers_count * w_stars
            + repo.forks_count * w_forks
            + (1 if repo.description else 0) * w_desc
            + (1 if updated_since(repo, cutoff) else 0) * w_recent
        )
    return clamp(total / len(repos))


def consistency_score(repos: Sequence[Repository], now: datetime | None = None) -> float:
    """Percentage of repositories updated in the last three months."""
    return clamp(activity_ratio(repos, RECENT_WINDOW_MONTHS, now) * 100)


def trending_score(repos: Sequence[Repository], now: datetime | None = None) -> float:
    """Stars earned by repositories created within the last year, over 10."""
    cutoff = _now(now) - relativedelta(years=TRENDING_WINDOW_YEARS)
    recent_stars = sum(
        repo.stargazers_count
        for repo in repos
        if repo.created_at is not None and repo.created_at > cutoff
    )
    return clamp(recent_stars / 10)


def innovation_score(repos: Sequence[Repository]) -> float:
    if not repos:
        return 0.0
    avg_size_kb = sum(repo.size for repo in repos) / len(repos)
    return clamp(len(distinct_languages(repos)) * 10 + avg_size_kb / 1000)


def compute_scorecard(
    user: GitHubUser,
    repos: Sequence[Repository],
    window_months: int = ACTIVITY_WINDOW_MONTHS,
    now: datetime | None = None,
) -> ScoreCard:
    now = _now(now)
    return ScoreCard(
        impact=round(impact_score(user, repos), 2),
        quality=round(quality_score(repos, now), 2),
        activity=round(clamp(activity_ratio(repos, window_months, now) * 100), 2),
        consistency=round(consistency_score(repos, now), 2),
        trending=round(trending_score(repos, now), 2),
        innovation=round(innovation_score(repos), 2),
    )


# --- Achievements ---


def _progress(value: int, target: int) -> dict[str, int]:
    return {"progress": min(value, target), "max_progress": target}


def evaluate_achievements(
    user: GitHubUser,
    repos: Sequence[Repository],
    now: datetime | None = None,
) -> list[Achievement]:
    """Evaluate the eight fixed achievements from scratch."""
    now = _now(now)
    stars = total_stars(repos)
    forks = total_forks(repos)
    language_count = len(distinct_languages(repos))
    best = top_repository(repos)
    recent_cutoff = months_ago(RECENT_WINDOW_MONTHS, now)

    return [
        Achievement(
            id="stargazer",
            title="Star Collector",
            description="Earned 100+ stars across repositories",
            achieved=stars >= 100,
            **_progress(stars, 100),
        ),
        Achievement(
            id="popular",
            title="Viral Developer",
            description="Has a repository with 50+ stars",
            achieved=best is not None and best.stargazers_count >= 50,
        ),
        Achievement(
            id="polyglot",
            title="Polyglot Programmer",
            description="Codes in 5+ programming languages",
            achieved=language_count >= 5,
            **_progress(language_count, 5),
        ),
        Achievement(
            id="prolific",
            title="Prolific Creator",
            description="Created 20+ public repositories",
            achieved=user.public_repos >= 20,
            **_progress(user.public_repos, 20),
        ),
        Achievement(
            id="influencer",
            title="Community Leader",
            description="Has 100+ followers",
            achieved=user.followers >= 100,
            **_progress(user.followers, 100),
        ),
        Achievement(
            id="forked",
            title="Fork Master",
            description="Projects forked 50+ times total",
            achieved=forks >= 50,
            **_progress(forks, 50),
        ),
        Achievement(
            id="veteran",
            title="GitHub Veteran",
            description="Account older than 3 years",
            achieved=account_age_years(user, now) >= VETERAN_YEARS,
        ),
        Achievement(
            id="trendy",
            title="Trending Developer",
            description="Has recent active repositories",
            achieved=any(updated_since(repo, recent_cutoff) for repo in repos),
        ),
    ]


def completion_rate(achievements: Sequence[Achievement]) -> float:
    """Percentage of unlocked achievements, one decimal."""
    if not achievements:
        return 0.0
    return round(sum(1 for a in achievements if a.achieved) / len(achievements) * 100, 1)


def developer_tier(achievements: Sequence[Achievement]) -> DeveloperTier:
    achieved = sum(1 for a in achievements if a.achieved)
    name = next(tier for minimum, tier in DEVELOPER_TIERS if achieved >= minimum)
    return DeveloperTier(
        name=name,
        achieved_count=achieved,
        total=len(achievements),
        completion_rate=completion_rate(achievements),
    )


# (name, description, unlocked when)
PERFORMANCE_BADGES: tuple[tuple[str, str, Callable[[ScoreCard, Sequence[Repository]], bool]], ...] = (
    ("Star Collector", "100+ total stars", lambda s, r: total_stars(r) >= 100),
    ("Fork Master", "50+ total forks", lambda s, r: total_forks(r) >= 50),
    ("Consistency King", "80%+ consistency", lambda s, r: s.consistency >= 80),
    ("Innovation Pioneer", "70%+ innovation", lambda s, r: s.innovation >= 70),
    ("Trending Developer", "60%+ trending", lambda s, r: s.trending >= 60),
    ("Quality Focused", "75%+ avg quality", lambda s, r: s.quality >= 75),
    ("Multi-Language", "5+ languages", lambda s, r: len(distinct_languages(r)) >= 5),
    ("Prolific Creator", "20+ repositories", lambda s, r: len(r) >= 20),
)


def performance_badges(scores: ScoreCard, repos: Sequence[Repository]) -> list[PerformanceBadge]:
    """Badge panel driven by the scorecard and the repository list."""
    return [
        PerformanceBadge(name=name, description=description, unlocked=unlocked(scores, repos))
        for name, description, unlocked in PERFORMANCE_BADGES
    ]


def special_recognition(user: GitHubUser, repos: Sequence[Repository]) -> SpecialRecognition:
    best = top_repository(repos)
    languages = distinct_languages(repos)
    return SpecialRecognition(
        top_repo=best.name if best else None,
        top_repo_stars=best.stargazers_count if best else 0,
        favorite_language=languages[0] if languages else None,
        influence=round_half_up(user.followers / max(user.following, 1) * 100),
    )


# --- Radar ---


def performance_radar(
    repos: Sequence[Repository], now: datetime | None = None
) -> list[RadarAxis]:
    """Six-axis performance radar, each axis in [0, 100].

    The Consistency axis is the share of repositories updated in the
    last three months, so the radar is fully reproducible.
    """
    if not repos:
        return [
            RadarAxis(subject=subject, value=0.0)
            for subject in ("Stars", "Forks", "Activity", "Diversity", "Consistency", "Impact")
        ]

    count = len(repos)
    avg_stars = total_stars(repos) / count
    avg_forks = total_forks(repos) / count
    recent_share = activity_ratio(repos, RECENT_WINDOW_MONTHS, now) * 100
    languages = min(len(distinct_languages(repos)), TOP_LANGUAGES_LIMIT)

    return [
        RadarAxis(subject="Stars", value=round(clamp(avg_stars * 10), 2)),
        RadarAxis(subject="Forks", value=round(clamp(avg_forks * 20), 2)),
        RadarAxis(subject="Activity", value=round(clamp(recent_share), 2)),
        RadarAxis(subject="Diversity", value=round(clamp(languages * 12.5), 2)),
        RadarAxis(subject="Consistency", value=round(clamp(recent_share), 2)),
        RadarAxis(subject="Impact", value=round(clamp((avg_stars + avg_forks) * 5), 2)),
    ]


# --- Repository explorer ---


def top_repos_by_metric(
    repos: Sequence[Repository],
    metric: str = "stars",
    limit: int = TOP_REPOS_LIMIT,
    now: datetime | None = None,
) -> list[Repository]:
    """Top ``limit`` repositories for one explorer tab.

    ``activity`` keeps list order and only filters to recently updated
    repositories; ``impact`` ranks by stars plus forks. Unknown metrics
    return the first ``limit`` repositories as given.
    """
    if metric == "stars":
        ranked = sorted(repos, key=lambda r: r.stargazers_count, reverse=True)
    elif metric == "forks":
        ranked = sorted(repos, key=lambda r: r.forks_count, reverse=True)
    elif metric == "activity":
        cutoff = months_ago(RECENT_WINDOW_MONTHS, now)
        ranked = [r for r in repos if updated_since(r, cutoff)]
    elif metric == "impact":
        ranked = sorted(repos, key=lambda r: r.stargazers_count + r.forks_count, reverse=True)
    else:
        ranked = list(repos)
    return ranked[:limit]


def repo_explorer(
    repos: Sequence[Repository], now: datetime | None = None
) -> dict[str, list[Repository]]:
    return {metric: top_repos_by_metric(repos, metric, now=now) for metric in EXPLORER_METRICS}


def repo_growth(
    repos: Sequence[Repository], limit: int = GROWTH_TIMELINE_LIMIT
) -> list[GrowthPoint]:
    """Repositories by creation date with a running count; the newest ``limit`` points."""
    if limit <= 0:
        return []
    epoch = datetime.min.replace(tzinfo=UTC)
    ordered = sorted(repos, key=lambda r: r.created_at or epoch)
    timeline = [
        GrowthPoint(
            name=repo.name,
            created_at=repo.created_at,
            repos=count,
            stars=repo.stargazers_count,
        )
        for count, repo in enumerate(ordered, start=1)
    ]
    return timeline[-limit:]


# --- Repository listing ---


def filter_repos(
    repos: Sequence[Repository],
    query: str | None = None,
    language: str | None = None,
    sort_by: str = "updated",
) -> list[Repository]:
    """Search, filter and sort a repository list for display.

    ``query`` matches name or description case-insensitively,
    ``language`` must match exactly. Unknown sort keys fall back to
    most recently updated first.
    """
    result = list(repos)

    if query:
        needle = query.lower()
        result = [
            r
            for r in result
            if needle in r.name.lower() or (r.description and needle in r.description.lower())
        ]

    if language:
        result = [r for r in result if r.language == language]

    if sort_by == "stars":
        result.sort(key=lambda r: r.stargazers_count, reverse=True)
    elif sort_by == "forks":
        result.sort(key=lambda r: r.forks_count, reverse=True)
    elif sort_by == "name":
        result.sort(key=lambda r: r.name.lower())
    else:
        epoch = datetime.min.replace(tzinfo=UTC)
        result.sort(key=lambda r: r.updated_at or epoch, reverse=True)

    return result
