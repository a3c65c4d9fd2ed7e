"""Scoring engine: settles pending predictions and updates user points/streaks."""
import logging

from sqlalchemy.engine import Engine
from sqlmodel import select

from fatefi.db import Prediction, PredictionResult, User
from fatefi.db.sessions import get_session

logger = logging.getLogger(__name__)

POINTS_CORRECT = 10
STREAK_BONUS = 2  # extra points per streak length


class ScoringEngine:
    """Applies win/loss results to predictions and their owners.

    Each prediction is settled in its own transaction together with its user's
    stats, so a crash mid-batch never leaves one updated without the other.
    """

    def __init__(
        self,
        engine: Engine | None = None,
        *,
        points_correct: int = POINTS_CORRECT,
        streak_bonus: int = STREAK_BONUS,
    ) -> None:
        self._engine = engine
        self.points_correct = points_correct
        self.streak_bonus = streak_bonus

    def score_prediction(self, prediction_id: int, is_correct: bool) -> bool:
        """Settle one prediction. Returns False if missing or not pending."""
        with get_session(self._engine) as session:
            prediction = session.get(Prediction, prediction_id)
            if prediction is None or prediction.result != PredictionResult.PENDING.value:
                logger.debug("Prediction %s not pending, skipping", prediction_id)
                return False

            if is_correct:
                prediction.result = PredictionResult.CORRECT.value
                prediction.score = self.points_correct
            else:
                prediction.result = PredictionResult.INCORRECT.value
                prediction.score = 0
            session.add(prediction)

            user = session.get(User, prediction.user_id)
            if user is None:
                logger.warning(
                    "Prediction %s references missing user %s",
                    prediction_id,
                    prediction.user_id,
                )
                return True

            if is_correct:
                user.current_streak += 1
                user.longest_streak = max(user.longest_streak, user.current_streak)
                user.total_points += prediction.score + user.current_streak * self.streak_bonus
            else:
                user.current_streak = 0
            session.add(user)
            return True

    def resolve_draw_predictions(self, draw_id: int, winning_option: str) -> int:
        """Score every pending prediction on draw_id; returns how many were settled."""
        with get_session(self._engine) as session:
            pending = session.exec(
                select(Prediction.id, Prediction.selected_option)
                .where(Prediction.tarot_draw_id == draw_id)
                .where(Prediction.result == PredictionResult.PENDING.value)
                .order_by(Prediction.id)
            ).all()

        scored = 0
        for prediction_id, selected_option in pending:
            if self.score_prediction(prediction_id, selected_option == winning_option):
                scored += 1
        logger.info(
            "Draw #%s: scored %d prediction(s) against '%s'", draw_id, scored, winning_option
        )
        return scored
