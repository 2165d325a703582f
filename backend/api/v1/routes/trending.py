"""Showcase endpoint.

GET /api/v1/trending - Example developers and sample searches
"""

from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel

from services.trending import SAMPLE_SEARCHES, TRENDING_DEVELOPERS, TrendingDeveloper

router = APIRouter()


class TrendingResponse(BaseModel):
    developers: list[TrendingDeveloper]
    sample_searches: list[str]


@router.get("/trending", response_model=TrendingResponse)
async def get_trending() -> TrendingResponse:
    return TrendingResponse(
        developers=list(TRENDING_DEVELOPERS),
        sample_searches=list(SAMPLE_SEARCHES),
    )
