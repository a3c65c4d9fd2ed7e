"""Helpers shared by price providers."""

USD_DECIMALS = 2


def asset_id(symbol: str) -> str:
    """Canonical feed id for an asset ("  Ethereum " -> "ethereum")."""
    return symbol.strip().lower()


def round_usd(value: float | str | None) -> float | None:
    """Round a USD amount to cents; None stays None."""
    if value is None:
        return None
    return round(float(value), USD_DECIMALS)
