"""Shared data models for the market feed client.

Values are floats: every record here is display data parsed from the
exchange's string-encoded numbers, never an accounting quantity.
"""

from dataclasses import dataclass, field
from enum import Enum


class TradingStatus(str, Enum):
    """Whether an instrument currently accepts orders."""

    TRADING = "TRADING"
    NOT_TRADING = "NOT_TRADING"

    @classmethod
    def from_exchange(cls, raw: str | None) -> "TradingStatus":
        """Map the exchange's status string (TRADING, BREAK, HALT, ...) to a member."""
        return cls.TRADING if raw == "TRADING" else cls.NOT_TRADING


@dataclass(frozen=True)
class Instrument:
    """A tradable base/quote pair as reported by the exchange catalog."""

    symbol: str
    base_asset: str
    quote_asset: str
    status: TradingStatus


@dataclass(frozen=True)
class TickerSnapshot:
    """24h rolling statistics for a single instrument."""

    symbol: str
    last_price: float = 0.0
    quote_volume: float = 0.0
    volume: float = 0.0  # base-asset volume
    price_change_percent: float = 0.0
    high_price: float = 0.0
    low_price: float = 0.0


@dataclass
class RankedToken:
    """A ranked catalog entry shaped for display.

    market_cap carries the 24h quote volume. It is a liquidity proxy,
    not a market capitalization, and market_cap_rank is always 0.
    """

    id: str
    symbol: str
    name: str
    image: str
    current_price: float
    market_cap: float
    price_change_percentage_24h: float
    volume_24h: float
    quote_asset: str
    base_asset: str
    market_cap_rank: int = 0


@dataclass
class MarketSummary:
    """24h market summary for a single symbol."""

    id: str
    symbol: str
    name: str
    current_price: float
    market_cap: float  # quote volume, see RankedToken
    volume_24h: float
    price_change_24h: float
    high_24h: float
    low_24h: float
    circulating_supply: float = 0.0
    total_supply: float = 0.0


@dataclass(frozen=True)
class OrderBookLevel:
    """One price level of an order book side."""

    price: float
    quantity: float


@dataclass
class OrderBook:
    """Order book snapshot, levels in exchange order (best first)."""

    bids: list[OrderBookLevel] = field(default_factory=list)
    asks: list[OrderBookLevel] = field(default_factory=list)

    @classmethod
    def empty(cls) -> "OrderBook":
        return cls()


@dataclass(frozen=True)
class PriceUpdate:
    """Last-price notification pushed by the ticker stream."""

    symbol: str
    price: float
