"""Core provider abstractions."""
from fatefi.providers.core.market_provider_abc import PriceProviderABC
from fatefi.providers.core.protocols import POOL_OPTION_INDEX, StakingPool
from fatefi.providers.core.utils import asset_id, round_usd

__all__ = [
    "POOL_OPTION_INDEX",
    "PriceProviderABC",
    "StakingPool",
    "asset_id",
    "round_usd",
]
