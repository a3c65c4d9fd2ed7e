"""Database models for the FateFi API.

Draws and price snapshots share a calendar date key (``YYYY-MM-DD`` in the
market timezone) but are not linked by a foreign key.
"""
from datetime import datetime
from enum import Enum

from sqlalchemy import CheckConstraint, DateTime, UniqueConstraint
from sqlmodel import Field, SQLModel

from fatefi.utils import utc_now


class Orientation(str, Enum):
    UPRIGHT = "upright"
    REVERSED = "reversed"


class PredictionType(str, Enum):
    DIRECTION = "direction"
    VOLATILITY = "volatility"
    MEMECOIN_PUMP = "memecoin_pump"


class PredictionResult(str, Enum):
    PENDING = "pending"
    CORRECT = "correct"
    INCORRECT = "incorrect"


class Outcome(str, Enum):
    """Resolved market outcome for a day; predictions are scored against it."""

    BULLISH = "bullish"
    BEARISH = "bearish"
    HIGH = "high"  # volatile day, overrides direction


OPTIONS_BY_TYPE: dict[PredictionType, tuple[str, ...]] = {
    PredictionType.DIRECTION: ("bullish", "bearish"),
    PredictionType.VOLATILITY: ("high", "low"),
    PredictionType.MEMECOIN_PUMP: ("pump", "dump"),
}
VALID_OPTIONS: tuple[str, ...] = tuple(o for opts in OPTIONS_BY_TYPE.values() for o in opts)


class User(SQLModel, table=True):
    """Wallet-identified account."""

    __tablename__ = "users"

    id: int | None = Field(default=None, primary_key=True)
    wallet_address: str = Field(unique=True, index=True)  # lower-cased
    username: str | None = None
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    total_points: int = Field(default=0)
    current_streak: int = Field(default=0)
    longest_streak: int = Field(default=0)


class Nonce(SQLModel, table=True):
    """Outstanding sign-in nonce for a wallet."""

    __tablename__ = "nonces"

    wallet_address: str = Field(primary_key=True)
    nonce: str
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))


class TarotDraw(SQLModel, table=True):
    """The card assigned to one calendar date."""

    __tablename__ = "tarot_draws"
    __table_args__ = (
        CheckConstraint(
            "orientation IN ('upright', 'reversed')", name="ck_tarot_draws_orientation"
        ),
    )

    id: int | None = Field(default=None, primary_key=True)
    card_name: str
    orientation: str
    date: str = Field(unique=True, index=True)
    ai_interpretation: str | None = None  # JSON, back-filled
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))


class Prediction(SQLModel, table=True):
    """A user's single guess for one day's draw."""

    __tablename__ = "predictions"
    __table_args__ = (
        UniqueConstraint("user_id", "tarot_draw_id", name="uq_predictions_user_draw"),
        CheckConstraint(
            "result IN ('correct', 'incorrect', 'pending')", name="ck_predictions_result"
        ),
    )

    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    tarot_draw_id: int = Field(foreign_key="tarot_draws.id", index=True)
    prediction_type: str = Field(default=PredictionType.DIRECTION.value)
    selected_option: str
    result: str = Field(default=PredictionResult.PENDING.value, index=True)
    score: int = Field(default=0)
    timestamp: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))


class PriceSnapshot(SQLModel, table=True):
    """Daily OHLC aggregate of the tracked asset price."""

    __tablename__ = "eth_prices"

    id: int | None = Field(default=None, primary_key=True)
    date: str = Field(unique=True, index=True)
    open_price: float | None = None
    high_price: float | None = None
    low_price: float | None = None
    latest_price: float | None = None
    close_price: float | None = None  # set once, at resolution
    resolved: bool = Field(default=False)
    resolved_outcome: str | None = None
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
