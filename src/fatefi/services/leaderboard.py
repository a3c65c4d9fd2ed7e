"""Leaderboard aggregation over users and their settled predictions."""
from sqlalchemy import and_, case, func
from sqlalchemy.engine import Engine
from sqlmodel import col, select

from fatefi.db import Prediction, PredictionResult, User
from fatefi.db.sessions import get_session
from fatefi.schemas import LeaderboardEntry

LEADERBOARD_LIMIT = 100


class LeaderboardService:
    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine

    def top(self, limit: int = LEADERBOARD_LIMIT) -> list[LeaderboardEntry]:
        """Users by points desc, then accuracy desc; pending predictions excluded."""
        total = func.count(Prediction.id)
        correct = func.sum(
            case((Prediction.result == PredictionResult.CORRECT.value, 1), else_=0)
        )
        accuracy = func.round(
            case((total > 0, correct * 100.0 / total), else_=0), 1
        ).label("accuracy_pct")

        stmt = (
            select(
                User.id,
                User.wallet_address,
                User.username,
                User.total_points,
                User.current_streak,
                User.longest_streak,
                total.label("total_predictions"),
                accuracy,
            )
            .outerjoin(
                Prediction,
                and_(
                    Prediction.user_id == User.id,
                    Prediction.result != PredictionResult.PENDING.value,
                ),
            )
            .group_by(User.id)
            .order_by(col(User.total_points).desc(), accuracy.desc(), col(User.id))
            .limit(min(limit, LEADERBOARD_LIMIT))
        )
        with get_session(self._engine) as session:
            rows = session.exec(stmt).all()

        entries: list[LeaderboardEntry] = []
        for rank, row in enumerate(rows, start=1):
            data = dict(row._mapping)
            data["accuracy_pct"] = float(data["accuracy_pct"] or 0)
            entries.append(LeaderboardEntry(rank=rank, **data))
        return entries
