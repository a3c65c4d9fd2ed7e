"""Protocols for optional external collaborators."""
from typing import Protocol

# Option indices used by the staking pool contract.
POOL_OPTION_INDEX: dict[str, int] = {
    "bullish": 0,
    "bearish": 1,
    "high": 2,
}


class StakingPool(Protocol):
    """On-chain staking pool that settles a day once its outcome is known."""

    async def resolve(self, winning_option_index: int) -> str | None:
        """Submit the winning option; returns a transaction hash or None."""
        ...
