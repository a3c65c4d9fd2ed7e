"""ETH market snapshot routes."""
import logging

from fastapi import APIRouter, Depends

from fatefi.deps import Clock, Mirror, Tracker, get_current_user
from fatefi.schemas import PriceOut, TodaySnapshot, YesterdayOut
from fatefi.services.prices import PROVIDER_EXCEPTIONS
from fatefi.utils import pct_change

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/api/market", tags=["market"], dependencies=[Depends(get_current_user)]
)


@router.get("/price", response_model=PriceOut)
async def get_price(tracker: Tracker) -> PriceOut:
    """Get the live ETH/USD price and today's open/high/low/latest.

    If the feed is down, current_price falls back to the latest stored price.
    """
    current_price: float | None = None
    try:
        current_price = await tracker.fetch_price()
    except PROVIDER_EXCEPTIONS as exc:
        logger.warning("Live price unavailable, using stored price: %s", exc)

    today = tracker.get_today()
    if today is None:
        return PriceOut(current_price=current_price, today=None)

    return PriceOut(
        current_price=current_price if current_price is not None else today.latest_price,
        today=TodaySnapshot(
            date=today.date,
            open_price=today.open_price,
            high_price=today.high_price,
            low_price=today.low_price,
            latest_price=today.latest_price,
            change_pct=pct_change(today.open_price, today.latest_price),
        ),
    )


@router.get("/yesterday", response_model=YesterdayOut | None)
async def get_yesterday(tracker: Tracker, mirror: Mirror, clock: Clock) -> YesterdayOut | None:
    """Get yesterday's snapshot and outcome; the mirror is read first, then local."""
    yesterday = clock.yesterday()
    data = await mirror.safe_get_day(yesterday) or tracker.get_day(yesterday)
    if data is None:
        return None

    return YesterdayOut(
        date=data.date,
        open_price=data.open_price,
        close_price=data.close_price if data.close_price is not None else data.latest_price,
        high_price=data.high_price,
        low_price=data.low_price,
        change_pct=pct_change(data.open_price, data.close_price),
        resolved=bool(data.resolved),
        outcome=data.resolved_outcome,
    )
