"""Shape of a day snapshot as stored in the mirror database."""
from pydantic import BaseModel, ConfigDict
from sqlalchemy import (Boolean, Column, DateTime, Float, MetaData, String,
                        Table, func)

mirror_metadata = MetaData()

market_day_snapshots = Table(
    "market_day_snapshots",
    mirror_metadata,
    Column("date", String, primary_key=True),
    Column("open_price", Float),
    Column("close_price", Float),
    Column("high_price", Float),
    Column("low_price", Float),
    Column("latest_price", Float),
    Column("resolved", Boolean, default=False),
    Column("resolved_outcome", String),
    Column("source", String, default="fatefi-api"),
    Column("created_at", DateTime(timezone=True), server_default=func.now()),
    Column("updated_at", DateTime(timezone=True), server_default=func.now()),
)


class MarketSnapshot(BaseModel):
    """Mirror payload; built from a local PriceSnapshot row."""

    model_config = ConfigDict(from_attributes=True)

    date: str
    open_price: float | None = None
    close_price: float | None = None
    high_price: float | None = None
    low_price: float | None = None
    latest_price: float | None = None
    resolved: bool = False
    resolved_outcome: str | None = None
