"""API v1 router aggregation.

Combines all v1 route modules into a single router.
"""

from __future__ import annotations

from fastapi import APIRouter

from api.v1.routes.battle import router as battle_router
from api.v1.routes.preferences import router as preferences_router
from api.v1.routes.trending import router as trending_router
from api.v1.routes.users import router as users_router

api_v1_router = APIRouter()

api_v1_router.include_router(users_router, prefix="/users", tags=["Profile Analytics"])
api_v1_router.include_router(battle_router, prefix="/battle", tags=["Developer Battle"])
api_v1_router.include_router(preferences_router, prefix="/preferences", tags=["Preferences"])
api_v1_router.include_router(trending_router, tags=["Showcase"])
