"""Daily tarot draws: idempotent creation, history, and narrative back-fill."""
import json
import logging

from pydantic import ValidationError
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlmodel import col, select

from fatefi.db import TarotDraw
from fatefi.db.sessions import get_session
from fatefi.providers.oracle import OracleClient
from fatefi.schemas import DrawOut, Interpretation
from fatefi.services.market_clock import MarketClock
from fatefi.services.tarot import draw_card_for_date

logger = logging.getLogger(__name__)


def parse_stored_interpretation(raw: str | None) -> Interpretation | None:
    """Decode the JSON stored on a draw; anything unreadable counts as missing."""
    if not raw:
        return None
    try:
        return Interpretation.model_validate(json.loads(raw))
    except (ValueError, ValidationError) as exc:
        logger.warning("Discarding stored interpretation: %s", exc)
        return None


def to_draw_out(draw: TarotDraw) -> DrawOut:
    return DrawOut(
        id=draw.id,
        card_name=draw.card_name,
        orientation=draw.orientation,
        date=draw.date,
        ai_interpretation=parse_stored_interpretation(draw.ai_interpretation),
        created_at=draw.created_at,
    )


class DrawService:
    def __init__(
        self,
        clock: MarketClock,
        *,
        engine: Engine | None = None,
        oracle: OracleClient | None = None,
    ) -> None:
        self._clock = clock
        self._engine = engine
        self._oracle = oracle

    def get_draw(self, date: str) -> TarotDraw | None:
        with get_session(self._engine) as session:
            return session.exec(select(TarotDraw).where(TarotDraw.date == date)).first()

    def ensure_draw(self, date: str | None = None) -> TarotDraw:
        """Return the draw for date (default: today), creating it if absent.

        An existing row, including one inserted concurrently by another
        writer, is returned as-is; a date never gets a second row.
        """
        date = date or self._clock.today()
        existing = self.get_draw(date)
        if existing is not None:
            return existing

        card, orientation = draw_card_for_date(date)
        try:
            with get_session(self._engine) as session:
                draw = TarotDraw(card_name=card.name, orientation=orientation.value, date=date)
                session.add(draw)
                session.flush()
                session.refresh(draw)
            logger.info("Created draw for %s: %s (%s)", date, card.name, orientation.value)
            return draw
        except IntegrityError:
            logger.info("Draw for %s created concurrently; using existing row", date)
            existing = self.get_draw(date)
            if existing is None:
                raise
            return existing

    def latest_draw_date(self) -> str | None:
        with get_session(self._engine) as session:
            return session.exec(
                select(TarotDraw.date).order_by(col(TarotDraw.date).desc()).limit(1)
            ).first()

    def history(self, limit: int = 30) -> list[TarotDraw]:
        with get_session(self._engine) as session:
            return list(
                session.exec(
                    select(TarotDraw).order_by(col(TarotDraw.date).desc()).limit(limit)
                ).all()
            )

    async def backfill_interpretation(
        self, draw: TarotDraw, market_context: str | None = None
    ) -> TarotDraw:
        """Attach a narrative to draw if it has none yet."""
        if self._oracle is None or parse_stored_interpretation(draw.ai_interpretation):
            return draw
        interpretation = await self._oracle.get_interpretation(
            draw.card_name, draw.orientation, market_context
        )
        payload = interpretation.model_dump_json(exclude_none=True)
        with get_session(self._engine) as session:
            stored = session.get(TarotDraw, draw.id)
            if stored is None:
                return draw
            stored.ai_interpretation = payload
            session.add(stored)
            session.flush()
            session.refresh(stored)
        return stored

    async def get_today(self, market_context: str | None = None) -> TarotDraw:
        draw = self.ensure_draw()
        return await self.backfill_interpretation(draw, market_context)
