"""Abstract base class for spot price providers."""
from abc import ABC, abstractmethod

from fatefi.schemas import MarketQuote


class PriceProviderABC(ABC):
    """A spot price feed for one asset at a time.

    Implementations raise on any failure (non-2xx status, timeout, unknown
    asset). PriceTracker catches those and skips the tick.
    """

    @abstractmethod
    async def get_quote(self, symbol: str) -> MarketQuote:
        """Current USD quote for symbol (a feed-specific id such as "ethereum")."""

    async def get_price(self, symbol: str) -> float:
        """Shortcut for get_quote(symbol).value."""
        quote = await self.get_quote(symbol)
        return quote.value

    async def close(self) -> None:
        """Release network clients. No-op by default."""

    async def __aenter__(self) -> "PriceProviderABC":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        await self.close()
