"""Shared utilities for the FateFi API."""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Current instant as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def parse_timestamp(ts: float | None) -> datetime:
    """Convert optional Unix timestamp (seconds) to aware UTC datetime; fallback to now."""
    return datetime.fromtimestamp(ts, tz=timezone.utc) if ts is not None else utc_now()


def pct_change(open_price: float | None, close_price: float | None) -> str | None:
    """Percent change from open to close, formatted with two decimals."""
    if not open_price or close_price is None:
        return None
    return f"{(close_price - open_price) / open_price * 100:.2f}"
