"""Crypto spot price providers."""
from fatefi.providers.crypto.coingecko import CoinGeckoProvider

__all__ = ["CoinGeckoProvider"]
