"""Rule-based profile insights.

Turns the aggregate statistics of a profile into at most six short
observations (strengths, opportunities, trends, recommendations), each
with a fixed or data-scaled confidence.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from services.metrics_engine import (
    ACTIVITY_WINDOW_MONTHS,
    account_age_years,
    activity_ratio,
    total_stars,
)
from services.models import GitHubUser, Insight, Repository

MAX_INSIGHTS = 6
LARGE_REPO_KB = 10000


def _language_counts(repos: Sequence[Repository]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for repo in repos:
        if repo.language:
            counts[repo.language] = counts.get(repo.language, 0) + 1
    return counts


def generate_insights(
    user: GitHubUser,
    repos: Sequence[Repository],
    now: datetime | None = None,
) -> list[Insight]:
    insights: list[Insight] = []
    repo_count = len(repos)

    avg_stars = total_stars(repos) / repo_count if repo_count else 0.0
    languages = _language_counts(repos)
    top_language = max(languages, key=languages.__getitem__) if languages else None
    recent_share = activity_ratio(repos, ACTIVITY_WINDOW_MONTHS, now)
    followers_per_repo = user.followers / max(user.public_repos, 1)

    if avg_stars > 10:
        insights.append(
            Insight(
                id="high-quality",
                title="High-Quality Projects",
                description=(
                    f"Your repositories average {avg_stars:.1f} stars, indicating strong "
                    "project quality and community appeal."
                ),
                type="strength",
                confidence=min(95.0, 70 + avg_stars * 2),
            )
        )

    if repo_count and recent_share < 0.3:
        insights.append(
            Insight(
                id="increase-activity",
                title="Activity Opportunity",
                description=(
                    f"Only {round(recent_share * 100)}% of your repos have recent activity. "
                    "Consider updating or archiving inactive projects."
                ),
                type="opportunity",
                confidence=85.0,
            )
        )

    if top_language and languages[top_language] > repo_count * 0.4:
        share = round(languages[top_language] / repo_count * 100)
        insights.append(
            Insight(
                id="language-expert",
                title="Language Specialist",
                description=(
                    f"You're specializing in {top_language} ({share}% of repos). "
                    "This creates strong domain expertise."
                ),
                type="trend",
                confidence=90.0,
            )
        )

    if followers_per_repo < 2:
        insights.append(
            Insight(
                id="grow-community",
                title="Community Growth",
                description=(
                    f"Your follower-to-repo ratio is {followers_per_repo:.1f}. Consider sharing "
                    "your work more actively to grow your developer community."
                ),
                type="recommendation",
                confidence=75.0,
            )
        )

    if len(languages) >= 5:
        insights.append(
            Insight(
                id="polyglot-advantage",
                title="Polyglot Advantage",
                description=(
                    f"You work with {len(languages)} programming languages, showcasing "
                    "versatility and adaptability."
                ),
                type="trend",
                confidence=88.0,
            )
        )

    large = [r for r in repos if r.size > LARGE_REPO_KB]
    if repo_count and len(large) > repo_count * 0.3:
        insights.append(
            Insight(
                id="repo-optimization",
                title="Repository Optimization",
                description=(
                    f"{len(large)} repositories are quite large. Consider optimizing code "
                    "structure and removing unnecessary files."
                ),
                type="opportunity",
                confidence=70.0,
            )
        )

    repos_per_year = user.public_repos / max(account_age_years(user, now), 1)
    if repos_per_year > 5:
        insights.append(
            Insight(
                id="prolific-creator",
                title="Prolific Creator",
                description=(
                    f"You create an average of {repos_per_year:.1f} repositories per year, "
                    "showing consistent productivity and creativity."
                ),
                type="strength",
                confidence=82.0,
            )
        )

    return insights[:MAX_INSIGHTS]


def analysis_confidence(insights: Sequence[Insight]) -> float:
    """Mean confidence across insights, 0 when there are none."""
    if not insights:
        return 0.0
    return round(sum(i.confidence for i in insights) / len(insights), 1)
