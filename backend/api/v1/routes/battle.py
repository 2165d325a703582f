"""Developer battle endpoints.

GET    /api/v1/battle                       - Stats, ranking and winner
POST   /api/v1/battle/participants          - Add a developer to the roster
DELETE /api/v1/battle/participants/{login}  - Remove a developer
DELETE /api/v1/battle                       - Clear the roster
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from api.deps import get_session_id
from app.config import get_settings
from app.dependencies import get_github_service, get_roster_store
from app.exceptions import BattleNotReadyError
from app.logging_config import get_logger
from gateway.session import RosterSessionStore
from services.battle_engine import (
    OVERALL,
    BattleStats,
    RosterChange,
    build_battle_stats,
    metric_names,
    metric_winner,
    rank_by,
)
from services.github_service import GitHubService
from services.models import GitHubUser

logger = get_logger(__name__)
router = APIRouter()


class AddParticipantRequest(BaseModel):
    login: str = Field(
        ..., min_length=1, max_length=39, pattern=r"^[a-zA-Z0-9]([a-zA-Z0-9-]*[a-zA-Z0-9])?$"
    )


class BattleView(BaseModel):
    participants: list[str]
    metric: str
    available_metrics: list[str]
    ready: bool
    ranking: list[BattleStats]
    winner: BattleStats | None = None
    message: str | None = None


@router.get("", response_model=BattleView)
async def get_battle(
    metric: str = Query(OVERALL, max_length=50),
    session_id: str = Depends(get_session_id),
    store: RosterSessionStore = Depends(get_roster_store),
) -> BattleView:
    """Rank the roster by ``metric`` and name the winner.

    Below two participants the view is returned with ``ready`` false and
    no winner.
    """
    roster = await store.load(session_id)
    stats = build_battle_stats(roster, window_months=get_settings().activity_window_months)
    ranking = rank_by(metric, stats)

    winner: BattleStats | None = None
    message: str | None = None
    try:
        winner = metric_winner(metric, stats)
    except BattleNotReadyError as exc:
        message = exc.message

    return BattleView(
        participants=roster.logins,
        metric=metric,
        available_metrics=metric_names(),
        ready=winner is not None,
        ranking=ranking,
        winner=winner,
        message=message,
    )


@router.post("/participants", response_model=RosterChange)
async def add_participant(
    request: AddParticipantRequest,
    session_id: str = Depends(get_session_id),
    github: GitHubService = Depends(get_github_service),
    store: RosterSessionStore = Depends(get_roster_store),
) -> RosterChange:
    """Add a developer. Duplicates and a full roster are rejected with a notice.

    The roster is re-read after the GitHub fetch and updated atomically, so
    overlapping adds for one session all land.
    """
    roster = await store.load(session_id)
    if request.login in roster or len(roster) >= roster.max_participants:
        # Rejection does not depend on GitHub data; skip the fetch
        return roster.add(GitHubUser(login=request.login), [])

    # No stale check: adding one login never supersedes adding another
    result = await github.search(request.login, scope=None)
    change = await store.update(
        session_id, lambda current: current.add(result.user, result.repos)
    )
    if change.accepted:
        logger.info("battle_participant_added", size=change.size)
    return change


@router.delete("/participants/{login}", response_model=RosterChange)
async def remove_participant(
    login: str,
    session_id: str = Depends(get_session_id),
    store: RosterSessionStore = Depends(get_roster_store),
) -> RosterChange:
    return await store.update(session_id, lambda current: current.remove(login))


@router.delete("", status_code=204)
async def clear_battle(
    session_id: str = Depends(get_session_id),
    store: RosterSessionStore = Depends(get_roster_store),
) -> None:
    await store.delete(session_id)
