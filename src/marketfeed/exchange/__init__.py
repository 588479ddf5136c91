"""Exchange client layer -- Binance public API integration via ccxt."""

from marketfeed.exchange.binance_client import BinanceClient
from marketfeed.exchange.client import ExchangeClient
from marketfeed.exchange.types import parse_float, to_float

__all__ = ["BinanceClient", "ExchangeClient", "parse_float", "to_float"]
