"""CoinGecko spot price provider."""
import asyncio

import httpx

from fatefi.providers.core import PriceProviderABC, asset_id, round_usd
from fatefi.providers.crypto.coingecko.models import (SimplePriceParams,
                                                      SpotQuoteMetadata)
from fatefi.schemas import MarketQuote
from fatefi.utils import parse_timestamp


class CoinGeckoProvider(PriceProviderABC):
    """Spot prices via the CoinGecko REST API.

    Uses CoinGecko IDs as symbols (e.g., "ethereum", "bitcoin").
    Response shape of /simple/price: ``{"ethereum": {"usd": 3012.4, ...}}``.
    """

    BASE_URL = "https://api.coingecko.com/api/v3"
    PRO_BASE_URL = "https://pro-api.coingecko.com/api/v3"

    def __init__(
        self,
        api_key: str | None = None,
        use_pro_api: bool = False,
        timeout: float = 8.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the CoinGecko provider.

        Args:
            api_key: CoinGecko API key; switches to the Pro endpoint when set.
            use_pro_api: Whether to use the Pro API endpoint.
            timeout: Bound on each whole request, in seconds.
            client: Pre-built client (tests inject one with a mock transport).
        """
        self._api_key = api_key or None
        self._use_pro_api = use_pro_api or bool(self._api_key)

        headers: dict[str, str] = {"Accept": "application/json"}
        if self._api_key:
            headers["x-cg-pro-api-key"] = self._api_key

        self._timeout = timeout
        base = self.PRO_BASE_URL if self._use_pro_api else self.BASE_URL
        self._client = client or httpx.AsyncClient(
            base_url=base, headers=headers, timeout=timeout
        )

    async def get_quote(self, symbol: str) -> MarketQuote:
        """Fetch the current USD price for a coin.

        Raises:
            httpx.HTTPStatusError: non-2xx response.
            asyncio.TimeoutError: request exceeded the timeout.
            ValueError: the coin is missing from the response.
        """
        coin_id = asset_id(symbol)
        response = await asyncio.wait_for(
            self._client.get(
                "/simple/price", params=SimplePriceParams(ids=coin_id).model_dump()
            ),
            timeout=self._timeout,
        )
        response.raise_for_status()
        data = response.json()

        row = data.get(coin_id) if isinstance(data, dict) else None
        if not isinstance(row, dict) or row.get("usd") is None:
            raise ValueError(f"Coin '{coin_id}' not found")

        return MarketQuote(
            symbol=coin_id,
            value=round_usd(row["usd"]),
            timestamp=parse_timestamp(row.get("last_updated_at")),
            metadata=SpotQuoteMetadata(
                change_24h=round_usd(row.get("usd_24h_change")),
                last_updated_at=row.get("last_updated_at"),
            ).model_dump(),
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()
