"""Binance public market data: ranked token list, quotes and live prices."""
