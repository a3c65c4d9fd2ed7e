"""External collaborators of the FateFi pipeline.

- CoinGeckoProvider: ETH/USD spot price feed
- MirrorStore: best-effort remote copy of daily price snapshots
- OracleClient: tarot narrative generator with static fallbacks

Example:
    async with CoinGeckoProvider() as provider:
        quote = await provider.get_quote("ethereum")
        print(f"{quote.symbol}: ${quote.value}")
"""
from fatefi.providers.core import PriceProviderABC, StakingPool
from fatefi.providers.crypto import CoinGeckoProvider
from fatefi.providers.mirror import MarketSnapshot, MirrorStore
from fatefi.providers.oracle import OracleClient

__all__ = [
    "CoinGeckoProvider",
    "MarketSnapshot",
    "MirrorStore",
    "OracleClient",
    "PriceProviderABC",
    "StakingPool",
]
