"""Price tracker: polls the spot feed and maintains today's OHLC snapshot."""
import asyncio
import logging

import httpx
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from fatefi.db import PriceSnapshot
from fatefi.db.sessions import get_session
from fatefi.providers.core import PriceProviderABC
from fatefi.providers.mirror import MarketSnapshot, MirrorStore
from fatefi.services.market_clock import MarketClock
from fatefi.utils import utc_now

logger = logging.getLogger(__name__)

# Feed failures we log and skip; anything else is a bug and propagates.
PROVIDER_EXCEPTIONS: tuple[type[Exception], ...] = (
    ValueError,
    KeyError,
    TypeError,
    TimeoutError,
    OSError,
    asyncio.TimeoutError,
    httpx.HTTPError,
)


def get_snapshot(engine: Engine | None, date: str) -> PriceSnapshot | None:
    with get_session(engine) as session:
        return session.exec(select(PriceSnapshot).where(PriceSnapshot.date == date)).first()


class PriceTracker:
    """Keeps one PriceSnapshot per market date up to date."""

    def __init__(
        self,
        provider: PriceProviderABC,
        clock: MarketClock,
        *,
        engine: Engine | None = None,
        mirror: MirrorStore | None = None,
        asset: str = "ethereum",
    ) -> None:
        self._provider = provider
        self._clock = clock
        self._engine = engine
        self._mirror = mirror
        self._asset = asset

    async def fetch_price(self) -> float:
        """Current spot price. Raises on HTTP error, timeout, or missing asset."""
        return await self._provider.get_price(self._asset)

    def apply_price(self, price: float, date: str | None = None) -> PriceSnapshot:
        """Fold one observation into the snapshot for date (default: today).

        Resolved snapshots are frozen and returned unchanged.
        """
        date = date or self._clock.today()
        try:
            return self._upsert(date, price)
        except IntegrityError:
            # another writer created the row between our select and insert
            return self._upsert(date, price)

    def _upsert(self, date: str, price: float) -> PriceSnapshot:
        with get_session(self._engine) as session:
            snapshot = session.exec(
                select(PriceSnapshot).where(PriceSnapshot.date == date)
            ).first()
            if snapshot is None:
                snapshot = PriceSnapshot(
                    date=date,
                    open_price=price,
                    high_price=price,
                    low_price=price,
                    latest_price=price,
                )
                session.add(snapshot)
                logger.info("New day %s, open: $%.2f", date, price)
            elif snapshot.resolved:
                logger.debug("Snapshot %s already resolved; ignoring $%.2f", date, price)
                return snapshot
            else:
                if snapshot.open_price is None:
                    snapshot.open_price = price
                snapshot.latest_price = price
                high, low = snapshot.high_price, snapshot.low_price
                snapshot.high_price = price if high is None else max(high, price)
                snapshot.low_price = price if low is None else min(low, price)
                snapshot.updated_at = utc_now()
                session.add(snapshot)
            session.flush()
            session.refresh(snapshot)
            return snapshot

    async def record_price(self) -> PriceSnapshot | None:
        """Fetch once and upsert today's snapshot; None if the fetch failed."""
        try:
            price = await self.fetch_price()
        except PROVIDER_EXCEPTIONS as exc:
            logger.warning("Price fetch failed: %s", exc)
            return None

        snapshot = self.apply_price(price)
        if self._mirror is not None:
            await self._mirror.safe_upsert(MarketSnapshot.model_validate(snapshot))
        return snapshot

    def get_day(self, date: str) -> PriceSnapshot | None:
        return get_snapshot(self._engine, date)

    def get_today(self) -> PriceSnapshot | None:
        return get_snapshot(self._engine, self._clock.today())
