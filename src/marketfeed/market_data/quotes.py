"""Single-symbol price, market summary and order book lookups.

Every method follows the same contract: on any transport failure,
non-success status or malformed payload it logs and returns a sentinel
(None, 0.0 or an empty book). Callers never see an exception.
"""

from marketfeed.config import RankingSettings
from marketfeed.exceptions import MarketFeedError
from marketfeed.exchange.client import ExchangeClient
from marketfeed.logging import get_logger
from marketfeed.models import MarketSummary, OrderBook

logger = get_logger(__name__)


class QuoteService:
    """Best-effort single-symbol lookups against the exchange client."""

    def __init__(self, client: ExchangeClient, settings: RankingSettings) -> None:
        self._client = client
        self._settings = settings

    async def fetch_token_price(self, symbol: str) -> float | None:
        """Return the last price for symbol, or None if it cannot be read."""
        try:
            return await self._client.fetch_price(symbol)
        except MarketFeedError:
            logger.warning("token_price_fetch_failed", symbol=symbol, exc_info=True)
            return None

    async def fetch_current_price(self, symbol: str) -> float:
        """Return the last price for symbol, or 0.0 if it cannot be read."""
        try:
            return await self._client.fetch_price(symbol)
        except MarketFeedError:
            logger.warning("current_price_fetch_failed", symbol=symbol, exc_info=True)
            return 0.0

    async def fetch_market_data(self, symbol: str) -> MarketSummary | None:
        """Return the 24h summary for symbol, or None on failure."""
        try:
            ticker = await self._client.fetch_24hr_ticker(symbol)
        except MarketFeedError:
            logger.warning("market_data_fetch_failed", symbol=symbol, exc_info=True)
            return None

        display = symbol.replace(self._settings.quote_asset, "")
        return MarketSummary(
            id=symbol,
            symbol=display,
            name=display,
            current_price=ticker.last_price,
            market_cap=ticker.quote_volume,
            volume_24h=ticker.volume,
            price_change_24h=ticker.price_change_percent,
            high_24h=ticker.high_price,
            low_24h=ticker.low_price,
        )

    async def fetch_order_book(self, symbol: str) -> OrderBook:
        """Return the top levels per side as the exchange ordered them, or an empty book."""
        try:
            return await self._client.fetch_depth(
                symbol, limit=self._settings.order_book_depth
            )
        except MarketFeedError:
            logger.warning("order_book_fetch_failed", symbol=symbol, exc_info=True)
            return OrderBook.empty()
