"""Websocket URL builders for Binance market streams."""

from collections.abc import Iterable

DEFAULT_STREAM_URL = "wss://stream.binance.com:9443"


def ticker_channels(symbols: Iterable[str]) -> tuple[str, ...]:
    """Return lower-cased `{symbol}@ticker` channel names, de-duplicated in order."""
    channels = dict.fromkeys(f"{symbol.lower()}@ticker" for symbol in symbols)
    return tuple(channels)


def combined_stream_url(
    channels: Iterable[str], base_url: str = DEFAULT_STREAM_URL
) -> str:
    """Build a combined-stream URL multiplexing every channel on one connection."""
    return f"{base_url.rstrip('/')}/stream?streams={'/'.join(channels)}"


def ticker_stream_url(symbol: str, base_url: str = DEFAULT_STREAM_URL) -> str:
    """Raw single-symbol 24h ticker stream."""
    return f"{base_url.rstrip('/')}/ws/{symbol.lower()}@ticker"


def depth_stream_url(symbol: str, base_url: str = DEFAULT_STREAM_URL) -> str:
    """Raw single-symbol top-20 partial depth stream at 100ms."""
    return f"{base_url.rstrip('/')}/ws/{symbol.lower()}@depth20@100ms"
