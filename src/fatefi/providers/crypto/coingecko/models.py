"""Request and metadata shapes for the CoinGecko spot price call."""
from pydantic import BaseModel


class SpotQuoteMetadata(BaseModel):
    change_24h: float | None = None
    last_updated_at: int | None = None  # unix seconds, as reported by CoinGecko


class SimplePriceParams(BaseModel):
    """Query string for /simple/price; CoinGecko expects "true"/"false" strings."""

    ids: str
    vs_currencies: str = "usd"
    include_24hr_change: str = "true"
    include_last_updated_at: str = "true"
    precision: str = "full"
