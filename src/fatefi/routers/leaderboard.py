"""Leaderboard route."""
from fastapi import APIRouter, Depends, Query

from fatefi.deps import Leaderboard, get_current_user
from fatefi.schemas import LeaderboardEntry
from fatefi.services.leaderboard import LEADERBOARD_LIMIT

router = APIRouter(
    prefix="/api/leaderboard",
    tags=["leaderboard"],
    dependencies=[Depends(get_current_user)],
)


@router.get("", response_model=list[LeaderboardEntry])
async def get_leaderboard(
    leaderboard: Leaderboard,
    limit: int = Query(default=LEADERBOARD_LIMIT, ge=1, le=LEADERBOARD_LIMIT),
) -> list[LeaderboardEntry]:
    """Top users by points, then accuracy over settled predictions."""
    return leaderboard.top(limit)
