"""Daily tarot draw routes."""
import logging

from fastapi import APIRouter, Depends, Query

from fatefi.db import PriceSnapshot
from fatefi.deps import Draws, Tracker, get_current_user
from fatefi.schemas import DrawOut
from fatefi.services.draws import to_draw_out
from fatefi.utils import pct_change

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/api/tarot", tags=["tarot"], dependencies=[Depends(get_current_user)]
)


def _market_context(snapshot: PriceSnapshot | None) -> str | None:
    if snapshot is None or snapshot.open_price is None:
        return None
    change = pct_change(snapshot.open_price, snapshot.latest_price)
    return (
        f"ETH opened at ${snapshot.open_price:.2f} today and last traded at "
        f"${snapshot.latest_price:.2f} ({change}%)"
    )


@router.get("/today", response_model=DrawOut)
async def get_today_draw(draws: Draws, tracker: Tracker) -> DrawOut:
    """Get today's draw, creating it (and its narrative) if it does not exist yet."""
    draw = await draws.get_today(market_context=_market_context(tracker.get_today()))
    return to_draw_out(draw)


@router.get("/history", response_model=list[DrawOut])
async def get_draw_history(
    draws: Draws,
    limit: int = Query(default=30, ge=1, le=100, description="Max draws, newest first"),
) -> list[DrawOut]:
    """Get the most recent draws."""
    return [to_draw_out(d) for d in draws.history(limit)]
