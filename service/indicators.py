"""Stand-in indicators derived from a single quote.

No price history is consulted anywhere: RSI is a linear guess from the day's
percent change, and market cap / volume ratio come from an
``EstimatedMetricsProvider`` so a real data feed can replace the random one.
"""

import random
from typing import Protocol

from quotes import Quote


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def estimate_rsi(change_pct: float, rng: random.Random = None) -> float:
    """Pseudo-RSI: 50 + 2 * change, clamped, plus up to +/-5 of jitter, clamped again."""
    rng = rng or random
    rsi = _clamp(50 + change_pct * 2)
    rsi += rng.randint(-50, 50) / 10
    return _clamp(rsi)


def gap_percent(open_price: float, prev_close: float) -> float:
    if not open_price or not prev_close:
        return 0.0
    return (open_price - prev_close) / prev_close * 100


class EstimatedMetricsProvider(Protocol):
    def volume_ratio(self, quote: Quote) -> float: ...

    def market_cap(self, quote: Quote) -> float: ...


class RandomMetricsProvider:
    """Random placeholders for data the free quote endpoint does not carry."""

    def __init__(self, rng: random.Random = None):
        self.rng = rng or random.Random()

    def volume_ratio(self, quote: Quote) -> float:
        return self.rng.randint(10, 50) / 10

    def market_cap(self, quote: Quote) -> float:
        return float(self.rng.randint(100_000_000, 1_000_000_000_000))
