"""Catalog ranking for the token list.

Joins the instrument catalog with the 24h ticker snapshot, keeps spot
pairs quoted in the reference stablecoin, and orders them so a curated
set of major assets always comes first:

  1. filter: quote == USDT, status == TRADING, no DOWN/UP in the symbol
  2. join: symbol -> ticker (last duplicate wins, missing -> zeros)
  3. priority = 1 if base asset is a major asset else 0
  4. sort: priority desc, then 24h base-asset volume desc
  5. truncate to limit and map to RankedToken

Majors are a flat set; among them order is decided by volume alone.
"""

from collections.abc import Iterable

from marketfeed.config import RankingSettings
from marketfeed.exceptions import MarketFeedError
from marketfeed.exchange.client import ExchangeClient
from marketfeed.logging import get_logger
from marketfeed.models import Instrument, RankedToken, TickerSnapshot, TradingStatus

logger = get_logger(__name__)

MAJOR_ASSETS: frozenset[str] = frozenset(
    {
        "BTC", "ETH", "BNB", "XRP", "ADA", "DOGE", "MATIC", "SOL", "DOT", "LTC",
        "AVAX", "LINK", "UNI", "ATOM", "ETC", "XLM", "BCH", "FIL", "ALGO", "ICP",
        "VET", "MANA", "SAND", "AXS", "THETA", "XTZ", "EOS", "AAVE", "CAKE", "MKR",
        "SNX", "COMP", "YFI", "SUSHI", "1INCH", "ENJ", "BAT", "ZIL", "IOTA", "NEO",
        "WAVES", "DASH", "ZEC", "XMR", "QTUM", "ONT", "IOST", "OMG", "ZRX", "KNC",
    }
)


class CatalogRanker:
    """Produces the ordered, size-bounded token list.

    Args:
        client: Exchange client used to fetch catalog and tickers.
        settings: Quote asset, exclusions, icon template and default limit.
        major_assets: Base asset codes ranked ahead of everything else.
    """

    def __init__(
        self,
        client: ExchangeClient,
        settings: RankingSettings,
        major_assets: Iterable[str] = MAJOR_ASSETS,
    ) -> None:
        self._client = client
        self._settings = settings
        self._major_assets = frozenset(major_assets)

    def is_eligible(self, instrument: Instrument) -> bool:
        """Return True if the instrument may appear in a ranking."""
        if instrument.quote_asset != self._settings.quote_asset:
            return False
        if instrument.status is not TradingStatus.TRADING:
            return False
        return not any(
            token in instrument.symbol for token in self._settings.excluded_substrings
        )

    def priority(self, instrument: Instrument) -> int:
        return 1 if instrument.base_asset in self._major_assets else 0

    def rank(
        self,
        instruments: Iterable[Instrument],
        tickers: Iterable[TickerSnapshot],
        limit: int,
    ) -> list[RankedToken]:
        """Rank instruments without doing any I/O.

        Args:
            instruments: Full exchange catalog.
            tickers: 24h snapshots; when a symbol repeats the last one wins.
            limit: Maximum number of tokens returned (negative behaves as 0).

        Returns:
            RankedToken list, majors first, each tier by base volume descending.
        """
        ticker_map = {ticker.symbol: ticker for ticker in tickers}

        candidates: list[tuple[int, float, Instrument, TickerSnapshot]] = []
        for instrument in instruments:
            if not self.is_eligible(instrument):
                continue
            ticker = ticker_map.get(instrument.symbol) or TickerSnapshot(
                symbol=instrument.symbol
            )
            candidates.append(
                (self.priority(instrument), ticker.volume, instrument, ticker)
            )

        # list.sort is stable; exact (priority, volume) ties keep catalog order
        candidates.sort(key=lambda c: (c[0], c[1]), reverse=True)

        return [
            self._to_token(instrument, ticker)
            for _, _, instrument, ticker in candidates[: max(limit, 0)]
        ]

    def _to_token(self, instrument: Instrument, ticker: TickerSnapshot) -> RankedToken:
        base = instrument.base_asset
        return RankedToken(
            id=instrument.symbol,
            symbol=base,
            name=base,
            image=self._settings.icon_url_template.format(symbol=base.lower()),
            current_price=ticker.last_price,
            market_cap=ticker.quote_volume,
            price_change_percentage_24h=ticker.price_change_percent,
            volume_24h=ticker.volume,
            quote_asset=instrument.quote_asset,
            base_asset=base,
        )

    async def fetch_ranked(self, limit: int | None = None) -> list[RankedToken]:
        """Fetch catalog and tickers, then rank.

        Raises:
            MarketFeedError: If either request fails. Nothing partial is returned.
        """
        if limit is None:
            limit = self._settings.default_limit

        instruments = await self._client.fetch_exchange_info()
        tickers = await self._client.fetch_24hr_tickers()

        tokens = self.rank(instruments, tickers, limit)
        logger.info(
            "catalog_ranked",
            catalog_size=len(instruments),
            returned=len(tokens),
            limit=limit,
        )
        return tokens

    async def fetch_top_tokens(self, limit: int | None = None) -> list[RankedToken]:
        """Best-effort ranking: any fetch failure yields an empty list.

        An empty result therefore means either "nothing matched" or
        "the exchange could not be read"; use fetch_ranked to tell them apart.
        """
        try:
            return await self.fetch_ranked(limit)
        except MarketFeedError:
            logger.warning("catalog_fetch_failed", exc_info=True)
            return []
