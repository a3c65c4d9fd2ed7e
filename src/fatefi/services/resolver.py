"""Day resolver: closes a market day, classifies it, and scores its predictions.

1. Finalize close price = latest observed price
2. Calculate % change from open
3. Classify: high (volatile) / bullish / bearish
4. Score every pending prediction on that date's tarot draw
"""
import logging

from sqlalchemy import update
from sqlalchemy.engine import Engine
from sqlmodel import select

from fatefi.db import Outcome, PriceSnapshot, TarotDraw
from fatefi.db.sessions import get_session
from fatefi.providers.core import POOL_OPTION_INDEX, StakingPool
from fatefi.providers.mirror import MarketSnapshot, MirrorStore
from fatefi.services.scoring import ScoringEngine
from fatefi.utils import utc_now

logger = logging.getLogger(__name__)

VOLATILITY_THRESHOLD = 0.03  # 3% move = volatile


def classify_outcome(
    open_price: float,
    close_price: float,
    threshold: float = VOLATILITY_THRESHOLD,
) -> Outcome:
    """Volatile beats direction; the threshold is strict and a flat day is bearish."""
    change = (close_price - open_price) / open_price
    if abs(change) > threshold:
        return Outcome.HIGH
    if change > 0:
        return Outcome.BULLISH
    return Outcome.BEARISH


class DayResolver:
    """Resolves market days exactly once; repeated calls are no-ops."""

    def __init__(
        self,
        scoring: ScoringEngine,
        *,
        engine: Engine | None = None,
        mirror: MirrorStore | None = None,
        pool: StakingPool | None = None,
        volatility_threshold: float = VOLATILITY_THRESHOLD,
    ) -> None:
        self._scoring = scoring
        self._engine = engine
        self._mirror = mirror
        self._pool = pool
        self.volatility_threshold = volatility_threshold

    def _finalize(self, date: str) -> PriceSnapshot | None:
        """Close the snapshot for date. None when there is nothing to resolve."""
        with get_session(self._engine) as session:
            snapshot = session.exec(
                select(PriceSnapshot).where(PriceSnapshot.date == date)
            ).first()
            if snapshot is None:
                logger.info("No price data for %s, skipping", date)
                return None
            if snapshot.resolved:
                logger.info("%s already resolved", date)
                return None
            if not snapshot.open_price or not snapshot.latest_price:
                logger.info("%s missing open/latest price, skipping", date)
                return None

            outcome = classify_outcome(
                snapshot.open_price, snapshot.latest_price, self.volatility_threshold
            )
            # only an unresolved row may flip; a concurrent resolver that got
            # here first leaves rowcount at 0
            result = session.exec(
                update(PriceSnapshot)
                .where(PriceSnapshot.id == snapshot.id)
                .where(PriceSnapshot.resolved == False)  # noqa: E712
                .values(
                    close_price=snapshot.latest_price,
                    resolved=True,
                    resolved_outcome=outcome.value,
                    updated_at=utc_now(),
                )
            )
            if result.rowcount == 0:
                logger.info("%s resolved concurrently", date)
                return None
            session.flush()
            session.refresh(snapshot)

        change = (snapshot.close_price - snapshot.open_price) / snapshot.open_price
        logger.info(
            "%s: $%.2f -> $%.2f (%.2f%%) -> %s",
            date,
            snapshot.open_price,
            snapshot.close_price,
            change * 100,
            snapshot.resolved_outcome,
        )
        return snapshot

    async def resolve_day(self, date: str) -> bool:
        """Resolve date. Returns True only when this call performed the resolution."""
        snapshot = self._finalize(date)
        if snapshot is None:
            return False
        outcome = snapshot.resolved_outcome

        with get_session(self._engine) as session:
            draw_id = session.exec(
                select(TarotDraw.id).where(TarotDraw.date == date)
            ).first()
        if draw_id is not None:
            self._scoring.resolve_draw_predictions(draw_id, outcome)
        else:
            logger.info("No tarot draw found for %s", date)

        if self._mirror is not None:
            await self._mirror.safe_upsert(MarketSnapshot.model_validate(snapshot))

        if self._pool is not None:
            await self._resolve_pool(outcome)
        return True

    async def _resolve_pool(self, outcome: str) -> None:
        index = POOL_OPTION_INDEX.get(outcome)
        if index is None:
            logger.error("Unknown outcome for staking pool: %s", outcome)
            return
        try:
            tx_hash = await self._pool.resolve(index)
            logger.info("Staking pool resolved with %s (%d): %s", outcome, index, tx_hash)
        except Exception as exc:  # pylint: disable=broad-except
            logger.error("Staking pool resolution failed: %s", exc)
