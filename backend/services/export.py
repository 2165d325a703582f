"""Profile export and share links."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any
from urllib.parse import urlencode

from services.metrics_engine import language_histogram, total_forks, total_stars
from services.models import SearchResult


def export_filename(login: str) -> str:
    return f"{login}-github-data.json"


def build_export(result: SearchResult, now: datetime | None = None) -> dict[str, Any]:
    """Downloadable snapshot: raw user and repos plus headline stats."""
    exported_at = (now or datetime.now(UTC)).isoformat()
    return {
        **result.export_payload(),
        "stats": {
            "totalStars": total_stars(result.repos),
            "totalForks": total_forks(result.repos),
            "languages": language_histogram(result.repos),
            "exportedAt": exported_at,
        },
    }


def share_url(base_url: str, login: str) -> str:
    """Shareable dashboard link, e.g. ``https://host?user=octocat``."""
    return f"{base_url.rstrip('/')}?{urlencode({'user': login})}"
