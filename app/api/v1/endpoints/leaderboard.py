from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.core.constants import MAX_LEADERBOARD_LIMIT
from app.schemas.leaderboard import LeaderboardEntry, LeaderboardResponse
from app.services.leaderboard import LeaderboardService
from app.api.deps import get_leaderboard_service

router = APIRouter(prefix="/leaderboard", tags=["Leaderboard"])


@router.get("", response_model=LeaderboardResponse)
async def get_leaderboard(
    limit: Optional[int] = Query(None, ge=1, le=MAX_LEADERBOARD_LIMIT),
    service: LeaderboardService = Depends(get_leaderboard_service),
) -> LeaderboardResponse:
    """Return drivers ranked by current score (ties by driver id)."""
    rows = await service.leaderboard(limit)
    return LeaderboardResponse(data=[LeaderboardEntry(**row) for row in rows])
