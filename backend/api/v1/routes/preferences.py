"""Client preference endpoints.

GET    /api/v1/preferences          - Search history and dark-mode flag
PUT    /api/v1/preferences          - Update the dark-mode flag
DELETE /api/v1/preferences/history  - Clear search history
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from api.deps import get_session_id
from app.dependencies import get_preferences_store
from services.preferences import Preferences, PreferencesStore

router = APIRouter()


class PreferencesUpdate(BaseModel):
    dark_mode: bool


@router.get("", response_model=Preferences)
async def get_preferences(
    session_id: str = Depends(get_session_id),
    store: PreferencesStore = Depends(get_preferences_store),
) -> Preferences:
    return await store.get(session_id)


@router.put("", response_model=Preferences)
async def update_preferences(
    update: PreferencesUpdate,
    session_id: str = Depends(get_session_id),
    store: PreferencesStore = Depends(get_preferences_store),
) -> Preferences:
    await store.set_dark_mode(session_id, update.dark_mode)
    return await store.get(session_id)


@router.delete("/history", status_code=204)
async def clear_history(
    session_id: str = Depends(get_session_id),
    store: PreferencesStore = Depends(get_preferences_store),
) -> None:
    await store.clear_history(session_id)
