"""Display formatting for prices, percentages and volumes."""

_BILLION = 1_000_000_000
_MILLION = 1_000_000
_THOUSAND = 1_000


def format_price(price: float) -> str:
    """Format a price with precision scaled to its magnitude.

    >= 1 gets 2 decimals, >= 0.01 gets 4, anything smaller gets 8.
    """
    if price >= 1:
        return f"{price:.2f}"
    if price >= 0.01:
        return f"{price:.4f}"
    return f"{price:.8f}"


def format_percentage(percentage: float) -> str:
    """Two decimals with a percent sign; positive values get a leading '+'."""
    if percentage > 0:
        return f"+{percentage:.2f}%"
    return f"{percentage:.2f}%"


def format_volume(volume: float) -> str:
    """Dollar amount abbreviated to B, M or K."""
    if volume >= _BILLION:
        return f"${volume / _BILLION:.2f}B"
    if volume >= _MILLION:
        return f"${volume / _MILLION:.2f}M"
    if volume >= _THOUSAND:
        return f"${volume / _THOUSAND:.2f}K"
    return f"${volume:.2f}"
