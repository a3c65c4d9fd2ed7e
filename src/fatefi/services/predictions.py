"""Prediction submission and lookup."""
import logging

from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlmodel import col, select

from fatefi.core.exceptions import (DrawNotFoundError,
                                    DuplicatePredictionError,
                                    InvalidPredictionError)
from fatefi.db import (OPTIONS_BY_TYPE, VALID_OPTIONS, Prediction,
                       PredictionType, TarotDraw)
from fatefi.db.sessions import get_session
from fatefi.schemas import PredictionWithDraw
from fatefi.services.market_clock import MarketClock

logger = logging.getLogger(__name__)


def validate_choice(prediction_type: str, selected_option: str | None) -> PredictionType:
    """Check type/option before anything is written. Raises InvalidPredictionError."""
    if not selected_option:
        raise InvalidPredictionError("selected_option is required")
    if selected_option not in VALID_OPTIONS:
        raise InvalidPredictionError(
            f"Invalid option. Must be one of: {', '.join(VALID_OPTIONS)}"
        )
    try:
        ptype = PredictionType(prediction_type)
    except ValueError as exc:
        valid = ", ".join(t.value for t in PredictionType)
        raise InvalidPredictionError(
            f"Invalid prediction_type. Must be one of: {valid}"
        ) from exc
    if selected_option not in OPTIONS_BY_TYPE[ptype]:
        raise InvalidPredictionError(
            f"Option '{selected_option}' is not valid for {ptype.value} predictions"
        )
    return ptype


class PredictionService:
    def __init__(self, clock: MarketClock, *, engine: Engine | None = None) -> None:
        self._clock = clock
        self._engine = engine

    def submit(
        self,
        user_id: int,
        selected_option: str | None,
        prediction_type: str = PredictionType.DIRECTION.value,
    ) -> Prediction:
        """Record the user's prediction on today's draw.

        Raises:
            InvalidPredictionError: bad type or option.
            DrawNotFoundError: today's draw has not been created yet.
            DuplicatePredictionError: user already predicted on today's draw.
        """
        ptype = validate_choice(prediction_type, selected_option)
        today = self._clock.today()
        try:
            with get_session(self._engine) as session:
                draw_id = session.exec(
                    select(TarotDraw.id).where(TarotDraw.date == today)
                ).first()
                if draw_id is None:
                    raise DrawNotFoundError(
                        "No tarot draw for today. Visit /api/tarot/today first."
                    )
                existing = session.exec(
                    select(Prediction.id)
                    .where(Prediction.user_id == user_id)
                    .where(Prediction.tarot_draw_id == draw_id)
                ).first()
                if existing is not None:
                    raise DuplicatePredictionError(
                        "You already submitted a prediction for today."
                    )
                prediction = Prediction(
                    user_id=user_id,
                    tarot_draw_id=draw_id,
                    prediction_type=ptype.value,
                    selected_option=selected_option,
                )
                session.add(prediction)
                session.flush()
                session.refresh(prediction)
        except IntegrityError as exc:
            # concurrent submission won the unique (user_id, tarot_draw_id) race
            raise DuplicatePredictionError(
                "You already submitted a prediction for today."
            ) from exc
        logger.info(
            "User %s predicted %s (%s) on %s", user_id, selected_option, ptype.value, today
        )
        return prediction

    def mine(self, user_id: int, limit: int = 50) -> list[PredictionWithDraw]:
        with get_session(self._engine) as session:
            rows = session.exec(
                select(Prediction, TarotDraw)
                .join(TarotDraw, TarotDraw.id == Prediction.tarot_draw_id)
                .where(Prediction.user_id == user_id)
                .order_by(col(Prediction.timestamp).desc(), col(Prediction.id).desc())
                .limit(limit)
            ).all()
        return [
            PredictionWithDraw(
                **prediction.model_dump(),
                card_name=draw.card_name,
                orientation=draw.orientation,
                draw_date=draw.date,
            )
            for prediction, draw in rows
        ]

    def today(self, user_id: int) -> Prediction | None:
        with get_session(self._engine) as session:
            return session.exec(
                select(Prediction)
                .join(TarotDraw, TarotDraw.id == Prediction.tarot_draw_id)
                .where(TarotDraw.date == self._clock.today())
                .where(Prediction.user_id == user_id)
            ).first()
