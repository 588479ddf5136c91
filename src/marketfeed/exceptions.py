"""Custom exceptions for the market feed client.

Raised inside the exchange layer and caught at the public service
boundaries, which turn them into empty/zero/None results.
"""


class MarketFeedError(Exception):
    """Base exception for all market feed errors."""


class ExchangeUnavailableError(MarketFeedError):
    """Raised when the exchange cannot be reached (DNS, timeout, reset)."""


class ExchangeRequestError(MarketFeedError):
    """Raised when the exchange answers with a non-success status."""


class MalformedResponseError(MarketFeedError):
    """Raised when a response body does not have the expected shape."""
