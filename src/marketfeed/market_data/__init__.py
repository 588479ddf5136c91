"""Market data layer -- catalog ranking, single-symbol quotes, and price streaming."""

from marketfeed.market_data.catalog_ranker import MAJOR_ASSETS, CatalogRanker
from marketfeed.market_data.price_stream import PriceStream, StreamHandle
from marketfeed.market_data.quotes import QuoteService
from marketfeed.market_data.streams import (
    combined_stream_url,
    depth_stream_url,
    ticker_stream_url,
)

__all__ = [
    "MAJOR_ASSETS",
    "CatalogRanker",
    "PriceStream",
    "QuoteService",
    "StreamHandle",
    "combined_stream_url",
    "depth_stream_url",
    "ticker_stream_url",
]
