"""Binance public REST client implementation via ccxt async.

Uses ccxt's implicit endpoint methods so requests hit the raw
/api/v3 paths (exchangeInfo, ticker/24hr, ticker/price, depth) and
return Binance's own payloads rather than ccxt's unified structures.
"""

from collections.abc import Awaitable, Callable
from typing import Any

import ccxt.async_support as ccxt_async
from ccxt.base.errors import BaseError, NetworkError

from marketfeed.config import ExchangeSettings
from marketfeed.exceptions import (
    ExchangeRequestError,
    ExchangeUnavailableError,
    MalformedResponseError,
)
from marketfeed.exchange.client import ExchangeClient
from marketfeed.exchange.types import (
    parse_float,
    parse_instrument,
    parse_order_book,
    parse_ticker,
)
from marketfeed.logging import get_logger
from marketfeed.models import Instrument, OrderBook, TickerSnapshot

logger = get_logger(__name__)


class BinanceClient(ExchangeClient):
    """Concrete Binance spot client using ccxt async, public endpoints only."""

    def __init__(self, settings: ExchangeSettings) -> None:
        self._settings = settings

        config: dict = {
            "enableRateLimit": settings.enable_rate_limit,
            "timeout": settings.timeout_ms,
        }
        self._exchange = ccxt_async.binance(config)
        # Point the public v3 namespace at the configured host
        self._exchange.urls["api"]["public"] = (
            f"{settings.rest_url.rstrip('/')}/api/v3"
        )

    @property
    def exchange(self) -> ccxt_async.binance:
        """Access the underlying ccxt exchange instance."""
        return self._exchange

    async def close(self) -> None:
        """Clean up ccxt async resources. CRITICAL: must be called to avoid resource leaks."""
        logger.info("closing_binance_connection")
        await self._exchange.close()
        logger.info("binance_connection_closed")

    async def _request(
        self,
        endpoint: str,
        call: Callable[[dict], Awaitable[Any]],
        params: dict | None = None,
    ) -> Any:
        """Run one implicit-API call, translating ccxt errors to ours."""
        try:
            return await call(params or {})
        except NetworkError as e:
            raise ExchangeUnavailableError(f"{endpoint}: {e}") from e
        except BaseError as e:
            raise ExchangeRequestError(f"{endpoint}: {e}") from e

    async def fetch_exchange_info(self) -> list[Instrument]:
        """Fetch the instrument catalog from GET /api/v3/exchangeInfo."""
        data = await self._request(
            "exchangeInfo", self._exchange.publicGetExchangeInfo
        )
        if not isinstance(data, dict) or not isinstance(data.get("symbols"), list):
            raise MalformedResponseError("exchangeInfo response has no symbols list")
        instruments = [parse_instrument(raw) for raw in data["symbols"]]
        logger.debug("fetched_exchange_info", count=len(instruments))
        return instruments

    async def fetch_24hr_tickers(self) -> list[TickerSnapshot]:
        """Fetch every symbol's 24h statistics from GET /api/v3/ticker/24hr."""
        data = await self._request("ticker/24hr", self._exchange.publicGetTicker24hr)
        if not isinstance(data, list):
            raise MalformedResponseError("ticker/24hr response is not a list")
        tickers = [parse_ticker(raw) for raw in data]
        logger.debug("fetched_24hr_tickers", count=len(tickers))
        return tickers

    async def fetch_24hr_ticker(self, symbol: str) -> TickerSnapshot:
        """Fetch one symbol's 24h statistics."""
        data = await self._request(
            "ticker/24hr", self._exchange.publicGetTicker24hr, {"symbol": symbol}
        )
        return parse_ticker(data)

    async def fetch_price(self, symbol: str) -> float:
        """Fetch the last price from GET /api/v3/ticker/price."""
        data = await self._request(
            "ticker/price", self._exchange.publicGetTickerPrice, {"symbol": symbol}
        )
        price = parse_float(data.get("price")) if isinstance(data, dict) else None
        if price is None:
            raise MalformedResponseError(f"ticker/price has no usable price for {symbol}")
        return price

    async def fetch_depth(self, symbol: str, limit: int = 20) -> OrderBook:
        """Fetch the order book from GET /api/v3/depth."""
        data = await self._request(
            "depth", self._exchange.publicGetDepth, {"symbol": symbol, "limit": limit}
        )
        return parse_order_book(data)
