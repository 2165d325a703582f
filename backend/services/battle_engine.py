"""Developer battle engine.

Compares two or three developers on a fixed set of metrics plus an
overall weighted score. The comparison list is an explicit
``BattleRoster`` object owned by the caller (one per client session),
never module-level state.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from app.exceptions import BattleNotReadyError, UnknownMetricError
from app.logging_config import get_logger
from app.metrics import BATTLE_ROSTER_REJECTIONS
from services.metrics_engine import (
    ACTIVITY_WINDOW_MONTHS,
    activity_ratio,
    round_half_up,
    total_forks,
    total_stars,
)
from services.models import GitHubUser, Repository

logger = get_logger(__name__)

MAX_PARTICIPANTS = 3
MIN_PARTICIPANTS = 2
OVERALL = "overall"

# (stars, forks, followers, public repos)
OVERALL_WEIGHTS = (0.3, 0.2, 0.3, 0.2)


@dataclass(frozen=True)
class BattleMetric:
    """A named per-user metric shown in the battle arena."""

    name: str
    calculate: Callable[[GitHubUser, Sequence[Repository], datetime | None, int], float]
    unit: str = ""


BATTLE_METRICS: tuple[BattleMetric, ...] = (
    BattleMetric("Star Power", lambda user, repos, now, window: total_stars(repos)),
    BattleMetric("Fork Force", lambda user, repos, now, window: total_forks(repos)),
    BattleMetric("Social Influence", lambda user, repos, now, window: user.followers),
    BattleMetric("Repository Count", lambda user, repos, now, window: user.public_repos),
    BattleMetric(
        "Activity Score",
        lambda user, repos, now, window: round_half_up(
            activity_ratio(repos, window, now) * 100
        ),
        unit="%",
    ),
)


def metric_names() -> list[str]:
    return [OVERALL, *(m.name for m in BATTLE_METRICS)]


class Participant(BaseModel):
    user: GitHubUser
    repos: list[Repository] = Field(default_factory=list)


class RosterChange(BaseModel):
    """Result of a roster mutation; rejected changes leave the roster untouched."""

    accepted: bool
    message: str
    size: int


class BattleStats(BaseModel):
    login: str
    name: str | None = None
    overall_score: int
    metrics: dict[str, float]

    def value(self, metric: str) -> float:
        if metric == OVERALL:
            return self.overall_score
        return self.metrics.get(metric, 0)


class BattleRoster:
    """Bounded, duplicate-free comparison list."""

    def __init__(
        self,
        participants: Sequence[Participant] | None = None,
        max_participants: int = MAX_PARTICIPANTS,
    ) -> None:
        self.max_participants = max_participants
        self._participants: list[Participant] = list(participants or [])

    def __len__(self) -> int:
        return len(self._participants)

    def __contains__(self, login: object) -> bool:
        return any(p.user.login == login for p in self._participants)

    @property
    def participants(self) -> list[Participant]:
        return list(self._participants)

    @property
    def logins(self) -> list[str]:
        return [p.user.login for p in self._participants]

    def add(self, user: GitHubUser, repos: Sequence[Repository]) -> RosterChange:
        if user.login in self:
            BATTLE_ROSTER_REJECTIONS.labels(reason="duplicate").inc()
            logger.info("battle_participant_rejected", reason="duplicate")
            return RosterChange(
                accepted=False,
                message="User already in comparison list",
                size=len(self),
            )
        if len(self) >= self.max_participants:
            BATTLE_ROSTER_REJECTIONS.labels(reason="full").inc()
            logger.info("battle_participant_rejected", reason="full")
            return RosterChange(
                accepted=False,
                message=f"Maximum {self.max_participants} users for comparison",
                size=len(self),
            )

        self._participants.append(Participant(user=user, repos=list(repos)))
        return RosterChange(
            accepted=True,
            message=f"Added {user.login} to comparison",
            size=len(self),
        )

    def remove(self, login: str) -> RosterChange:
        before = len(self)
        self._participants = [p for p in self._participants if p.user.login != login]
        removed = len(self) < before
        return RosterChange(
            accepted=removed,
            message=f"Removed {login} from comparison" if removed else f"{login} is not in comparison",
            size=len(self),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "participants": [p.model_dump(mode="json") for p in self._participants],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], max_participants: int = MAX_PARTICIPANTS) -> BattleRoster:
        participants = [Participant.model_validate(p) for p in data.get("participants", [])]
        return cls(participants, max_participants=max_participants)


def overall_score(user: GitHubUser, repos: Sequence[Repository]) -> int:
    """Battle-only weighted score, distinct from the impact score."""
    w_stars, w_forks, w_followers, w_repos = OVERALL_WEIGHTS
    return round_half_up(
        total_stars(repos) * w_stars
        + total_forks(repos) * w_forks
        + user.followers * w_followers
        + user.public_repos * w_repos
    )


def participant_stats(
    user: GitHubUser,
    repos: Sequence[Repository],
    now: datetime | None = None,
    window_months: int = ACTIVITY_WINDOW_MONTHS,
) -> BattleStats:
    """Overall score and every battle metric; activity looks back ``window_months``."""
    return BattleStats(
        login=user.login,
        name=user.name,
        overall_score=overall_score(user, repos),
        metrics={m.name: m.calculate(user, repos, now, window_months) for m in BATTLE_METRICS},
    )


def build_battle_stats(
    roster: BattleRoster,
    now: datetime | None = None,
    window_months: int = ACTIVITY_WINDOW_MONTHS,
) -> list[BattleStats]:
    return [participant_stats(p.user, p.repos, now, window_months) for p in roster.participants]


def _check_metric(metric: str) -> None:
    if metric not in metric_names():
        raise UnknownMetricError(metric, metric_names())


def rank_by(metric: str, stats: Sequence[BattleStats]) -> list[BattleStats]:
    """Descending by ``metric``; equal values keep input order."""
    _check_metric(metric)
    return sorted(stats, key=lambda s: s.value(metric), reverse=True)


def metric_winner(metric: str, stats: Sequence[BattleStats]) -> BattleStats:
    """Entry with the strictly largest value; the first one wins a tie."""
    _check_metric(metric)
    if len(stats) < MIN_PARTICIPANTS:
        raise BattleNotReadyError(len(stats))
    best = stats[0]
    for current in stats[1:]:
        if current.value(metric) > best.value(metric):
            best = current
    return best


def winner(stats: Sequence[BattleStats]) -> BattleStats:
    return metric_winner(OVERALL, stats)
