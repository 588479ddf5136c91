"""Entry point for the market feed.

Wires the components together, logs the ranked token list once, then
streams last prices for the top symbols until SIGINT/SIGTERM.

Component wiring order (in _build_components):
1. AppSettings (configuration)
2. Logging setup
3. BinanceClient (public REST via ccxt)
4. CatalogRanker (token list)
5. QuoteService (24h summary and top of book for the leading token)
6. PriceStream (ticker websocket)
"""

import asyncio
import signal
from typing import Any

from marketfeed.config import AppSettings
from marketfeed.exchange.binance_client import BinanceClient
from marketfeed.formatting import format_percentage, format_price, format_volume
from marketfeed.logging import get_logger, setup_logging
from marketfeed.market_data.catalog_ranker import CatalogRanker
from marketfeed.market_data.price_stream import PriceStream
from marketfeed.market_data.quotes import QuoteService
from marketfeed.models import PriceUpdate


def _build_components(settings: AppSettings) -> dict[str, Any]:
    """Build all components from settings.

    Args:
        settings: Application-wide settings.

    Returns:
        Dict mapping component names to instances.
    """
    exchange_client = BinanceClient(settings.exchange)
    return {
        "exchange_client": exchange_client,
        "ranker": CatalogRanker(exchange_client, settings.ranking),
        "quotes": QuoteService(exchange_client, settings.ranking),
        "price_stream": PriceStream(settings.stream, settings.exchange.stream_url),
    }


def _log_price_update(update: PriceUpdate) -> None:
    get_logger("marketfeed.main").info(
        "price_update", symbol=update.symbol, price=format_price(update.price)
    )


async def _log_market_snapshot(quotes: QuoteService, symbol: str) -> None:
    """Log the 24h summary and top of book for the leading token."""
    logger = get_logger("marketfeed.main")
    summary = await quotes.fetch_market_data(symbol)
    book = await quotes.fetch_order_book(symbol)
    if summary is None:
        logger.warning("market_snapshot_unavailable", symbol=symbol)
        return

    logger.info(
        "market_snapshot",
        symbol=symbol,
        high=format_price(summary.high_24h),
        low=format_price(summary.low_24h),
        best_bid=format_price(book.bids[0].price) if book.bids else None,
        best_ask=format_price(book.asks[0].price) if book.asks else None,
        depth=(len(book.bids), len(book.asks)),
    )


def _setup_signal_handlers(stop_event: asyncio.Event) -> None:
    """Set stop_event on SIGINT/SIGTERM. Must be called inside the running loop."""
    logger = get_logger("marketfeed.main")
    loop = asyncio.get_running_loop()

    def _graceful_handler() -> None:
        logger.info("graceful_shutdown_signal")
        stop_event.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, _graceful_handler)


async def run() -> None:
    """Rank the catalog, then stream prices for the top `watch_top` tokens."""
    settings = AppSettings()
    setup_logging(settings.log_level)
    logger = get_logger("marketfeed.main")

    components = _build_components(settings)
    ranker: CatalogRanker = components["ranker"]
    price_stream: PriceStream = components["price_stream"]

    stop_event = asyncio.Event()
    _setup_signal_handlers(stop_event)

    async with components["exchange_client"], price_stream:
        tokens = await ranker.fetch_top_tokens()
        if not tokens:
            logger.warning("no_tokens_available")
            return

        for token in tokens[: settings.watch_top]:
            logger.info(
                "ranked_token",
                symbol=token.id,
                price=format_price(token.current_price),
                change=format_percentage(token.price_change_percentage_24h),
                quote_volume=format_volume(token.market_cap),
            )

        await _log_market_snapshot(components["quotes"], tokens[0].id)

        price_stream.subscribe(_log_price_update)
        handle = await price_stream.open(t.id for t in tokens[: settings.watch_top])
        if handle is None:
            logger.warning("price_stream_unavailable")
            return

        await stop_event.wait()

    logger.info("marketfeed_stopped")


def main() -> None:
    """Synchronous entry point."""
    asyncio.run(run())


if __name__ == "__main__":
    main()
