"""Pydantic schemas for API and runtime use. Not persisted to DB."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from fatefi.utils import utc_now


class MarketQuote(BaseModel):
    """Spot price returned by a price provider."""

    symbol: str
    value: float
    timestamp: datetime = Field(default_factory=utc_now)
    metadata: dict | None = None


class Interpretation(BaseModel):
    """Narrative attached to a draw; required fields must be non-empty strings."""

    model_config = ConfigDict(str_strip_whitespace=True)

    prediction: str = Field(min_length=1)
    narrative: str = Field(min_length=1)
    confidence_tone: str = Field(min_length=1)
    disclaimer: str = Field(min_length=1)
    market_mood: str | None = None
    key_levels: str | list[str] | None = None
    cosmic_tip: str | None = None


class DrawOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    card_name: str
    orientation: str
    date: str
    ai_interpretation: Interpretation | None = None
    created_at: datetime | None = None


class PredictionCreate(BaseModel):
    prediction_type: str = "direction"
    selected_option: str | None = None


class PredictionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    tarot_draw_id: int
    prediction_type: str
    selected_option: str
    result: str
    score: int
    timestamp: datetime


class PredictionWithDraw(PredictionOut):
    card_name: str
    orientation: str
    draw_date: str


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    wallet_address: str
    username: str | None = None
    created_at: datetime
    total_points: int
    current_streak: int
    longest_streak: int


class NonceOut(BaseModel):
    nonce: str
    message: str


class VerifyIn(BaseModel):
    address: str = Field(min_length=1)
    signature: str = Field(min_length=1)


class TokenOut(BaseModel):
    token: str
    user: UserOut


class TodaySnapshot(BaseModel):
    date: str
    open_price: float | None = None
    high_price: float | None = None
    low_price: float | None = None
    latest_price: float | None = None
    change_pct: str | None = None  # two decimals, e.g. "1.25"


class PriceOut(BaseModel):
    current_price: float | None = None
    today: TodaySnapshot | None = None


class YesterdayOut(BaseModel):
    date: str
    open_price: float | None = None
    close_price: float | None = None
    high_price: float | None = None
    low_price: float | None = None
    change_pct: str | None = None
    resolved: bool
    outcome: str | None = None


class LeaderboardEntry(BaseModel):
    rank: int
    id: int
    wallet_address: str
    username: str | None = None
    total_points: int
    current_streak: int
    longest_streak: int
    total_predictions: int
    accuracy_pct: float


class HealthOut(BaseModel):
    status: str
    service: str
    timestamp: datetime


__all__ = [
    "DrawOut",
    "HealthOut",
    "Interpretation",
    "LeaderboardEntry",
    "MarketQuote",
    "NonceOut",
    "PredictionCreate",
    "PredictionOut",
    "PredictionWithDraw",
    "PriceOut",
    "TodaySnapshot",
    "TokenOut",
    "UserOut",
    "VerifyIn",
    "YesterdayOut",
]
