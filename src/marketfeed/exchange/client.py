"""Abstract exchange client interface.

Defines the contract for the public market-data endpoints the rest of the
package consumes. Ranking, quotes and streaming code depend only on this
interface, keeping Binance-specific details in the concrete implementation.
"""

from abc import ABC, abstractmethod

from marketfeed.models import Instrument, OrderBook, TickerSnapshot


class ExchangeClient(ABC):
    """Abstract base class for public market-data clients.

    Implementations raise MarketFeedError subclasses on failure; turning
    those into empty results is the caller's policy, not the client's.
    """

    @abstractmethod
    async def close(self) -> None:
        """Release transport resources (CRITICAL for ccxt async)."""
        ...

    @abstractmethod
    async def fetch_exchange_info(self) -> list[Instrument]:
        """Return the full instrument catalog."""
        ...

    @abstractmethod
    async def fetch_24hr_tickers(self) -> list[TickerSnapshot]:
        """Return 24h ticker snapshots for every symbol."""
        ...

    @abstractmethod
    async def fetch_24hr_ticker(self, symbol: str) -> TickerSnapshot:
        """Return the 24h ticker snapshot for one exchange symbol (e.g. BTCUSDT)."""
        ...

    @abstractmethod
    async def fetch_price(self, symbol: str) -> float:
        """Return the last traded price for one exchange symbol."""
        ...

    @abstractmethod
    async def fetch_depth(self, symbol: str, limit: int = 20) -> OrderBook:
        """Return the top `limit` order book levels per side."""
        ...

    async def __aenter__(self) -> "ExchangeClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
