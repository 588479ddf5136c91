"""Exchange payload parsing helpers.

Binance encodes every number as a string. A field that is missing or
does not parse becomes 0.0 (to_float) or None (parse_float), never an
exception.
"""

import math
from typing import Any

from marketfeed.exceptions import MalformedResponseError
from marketfeed.models import (
    Instrument,
    OrderBook,
    OrderBookLevel,
    TickerSnapshot,
    TradingStatus,
)


def parse_float(value: Any) -> float | None:
    """Parse an exchange-encoded number, returning None when it is not one."""
    if value is None or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result):
        return None
    return result


def to_float(value: Any, default: float = 0.0) -> float:
    """Parse an exchange-encoded number, falling back to default."""
    result = parse_float(value)
    return default if result is None else result


def parse_instrument(raw: Any) -> Instrument:
    """Build an Instrument from one entry of exchangeInfo["symbols"]."""
    if not isinstance(raw, dict) or "symbol" not in raw:
        raise MalformedResponseError(f"Unexpected instrument entry: {raw!r}")
    return Instrument(
        symbol=str(raw["symbol"]),
        base_asset=str(raw.get("baseAsset", "")),
        quote_asset=str(raw.get("quoteAsset", "")),
        status=TradingStatus.from_exchange(raw.get("status")),
    )


def parse_ticker(raw: Any) -> TickerSnapshot:
    """Build a TickerSnapshot from a /ticker/24hr entry."""
    if not isinstance(raw, dict) or "symbol" not in raw:
        raise MalformedResponseError(f"Unexpected ticker entry: {raw!r}")
    return TickerSnapshot(
        symbol=str(raw["symbol"]),
        last_price=to_float(raw.get("lastPrice")),
        quote_volume=to_float(raw.get("quoteVolume")),
        volume=to_float(raw.get("volume")),
        price_change_percent=to_float(raw.get("priceChangePercent")),
        high_price=to_float(raw.get("highPrice")),
        low_price=to_float(raw.get("lowPrice")),
    )


def parse_order_book(raw: Any) -> OrderBook:
    """Build an OrderBook from a /depth response, keeping level order."""
    if not isinstance(raw, dict):
        raise MalformedResponseError(f"Unexpected depth payload: {raw!r}")

    def _levels(side: str) -> list[OrderBookLevel]:
        entries = raw.get(side) or []
        levels = []
        for entry in entries:
            if not isinstance(entry, (list, tuple)) or len(entry) < 2:
                raise MalformedResponseError(f"Unexpected {side} level: {entry!r}")
            levels.append(
                OrderBookLevel(price=to_float(entry[0]), quantity=to_float(entry[1]))
            )
        return levels

    return OrderBook(bids=_levels("bids"), asks=_levels("asks"))
