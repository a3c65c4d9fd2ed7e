"""Background scheduler: price polling and day-boundary resolution.

Two independent loops run on the event loop:

- price tick: record the spot price every ``price_interval`` seconds
- day tick: every ``check_interval`` seconds, shortly after local midnight in
  the market zone, resolve yesterday and then create today's draw

Watermarks (last resolved date, last created card date) are loaded from
storage on start, so a restart does not redo finished work.
"""
import asyncio
import logging
from collections.abc import Awaitable, Callable

from sqlalchemy.engine import Engine
from sqlmodel import func, select

from fatefi.db import PriceSnapshot
from fatefi.db.sessions import get_session
from fatefi.services.draws import DrawService
from fatefi.services.market_clock import MarketClock
from fatefi.services.prices import PriceTracker
from fatefi.services.resolver import DayResolver

logger = logging.getLogger(__name__)

PRICE_INTERVAL_S = 5 * 60
CHECK_INTERVAL_S = 60


def _in_window(minute: int, window: tuple[int, int]) -> bool:
    start, end = window
    return start <= minute <= end


class Scheduler:
    """Drives the tracker, resolver, and draw creation once per market day."""

    def __init__(
        self,
        tracker: PriceTracker,
        resolver: DayResolver,
        draws: DrawService,
        clock: MarketClock,
        *,
        engine: Engine | None = None,
        price_interval: float = PRICE_INTERVAL_S,
        check_interval: float = CHECK_INTERVAL_S,
        resolve_window: tuple[int, int] = (1, 4),
        create_window: tuple[int, int] = (5, 8),
    ) -> None:
        self._tracker = tracker
        self._resolver = resolver
        self._draws = draws
        self._clock = clock
        self._engine = engine
        self._price_interval = price_interval
        self._check_interval = check_interval
        self._resolve_window = resolve_window
        self._create_window = create_window
        self._tasks: list[asyncio.Task] = []
        self.last_resolved_date: str | None = None
        self.last_card_date: str | None = None

    def load_watermarks(self) -> None:
        """Re-derive watermarks from the latest resolved snapshot and latest draw."""
        with get_session(self._engine) as session:
            self.last_resolved_date = session.exec(
                select(func.max(PriceSnapshot.date)).where(PriceSnapshot.resolved == True)  # noqa: E712
            ).first()
        self.last_card_date = self._draws.latest_draw_date()
        logger.info(
            "Watermarks: last resolved=%s, last card=%s",
            self.last_resolved_date,
            self.last_card_date,
        )

    async def price_tick(self) -> None:
        try:
            await self._tracker.record_price()
        except Exception:  # pylint: disable=broad-except
            logger.exception("Price tick failed")

    async def day_tick(self) -> None:
        """One boundary check. Resolution is always attempted before card creation."""
        hour, minute = self._clock.hour_minute()
        if hour != 0:
            return

        if _in_window(minute, self._resolve_window):
            yesterday = self._clock.yesterday()
            if self.last_resolved_date != yesterday:
                logger.info("Market midnight crossed, resolving %s", yesterday)
                try:
                    if await self._resolver.resolve_day(yesterday):
                        self.last_resolved_date = yesterday
                except Exception:  # pylint: disable=broad-except
                    logger.exception("Resolution of %s failed", yesterday)

        if _in_window(minute, self._create_window):
            today = self._clock.today()
            if self.last_card_date != today:
                try:
                    self._draws.ensure_draw(today)
                    self.last_card_date = today
                except Exception:  # pylint: disable=broad-except
                    logger.exception("Creating draw for %s failed", today)

    async def _run_every(
        self, interval: float, tick: Callable[[], Awaitable[None]], name: str
    ) -> None:
        logger.info("Starting %s loop (every %ss)", name, interval)
        while True:
            await tick()
            await asyncio.sleep(interval)

    def start(self) -> None:
        """Load watermarks and spawn both loops on the running event loop."""
        if self._tasks:
            return
        self.load_watermarks()
        self._tasks = [
            asyncio.create_task(
                self._run_every(self._price_interval, self.price_tick, "price"),
                name="fatefi-price-tick",
            ),
            asyncio.create_task(
                self._run_every(self._check_interval, self.day_tick, "day-boundary"),
                name="fatefi-day-tick",
            ),
        ]

    async def stop(self) -> None:
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks = []

    @property
    def running(self) -> bool:
        return any(not t.done() for t in self._tasks)
