"""Filter/score engine for scans and the magic-pick selector."""

import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from indicators import EstimatedMetricsProvider, estimate_rsi, gap_percent
from logging_config import get_logger

logger = get_logger("scanner")

MOMENTUM_THRESHOLD = 15


@dataclass(frozen=True)
class ScanFilters:
    """Range bounds for one scan. Market cap bounds are in millions."""

    rsi_min: float
    rsi_max: float
    market_cap_min: float
    market_cap_max: float
    price_change_min: float
    price_change_max: float
    volume_multiplier: float
    min_signals: int = 0


# Personality presets offered by the dashboard.
PRESETS = {
    "burry": ScanFilters(
        rsi_min=70, rsi_max=100, market_cap_min=1000, market_cap_max=2_000_000,
        price_change_min=15, price_change_max=100, volume_multiplier=2.0, min_signals=3,
    ),
    "penguin": ScanFilters(
        rsi_min=20, rsi_max=45, market_cap_min=500, market_cap_max=2_000_000,
        price_change_min=-20, price_change_max=10, volume_multiplier=1.5, min_signals=3,
    ),
    # Precision breakouts: strong momentum in large caps
    "sniper": ScanFilters(
        rsi_min=55, rsi_max=75, market_cap_min=10_000, market_cap_max=2_000_000,
        price_change_min=3, price_change_max=15, volume_multiplier=1.2, min_signals=3,
    ),
    # Chasing pumps in small caps
    "idiot": ScanFilters(
        rsi_min=80, rsi_max=100, market_cap_min=0, market_cap_max=1000,
        price_change_min=20, price_change_max=500, volume_multiplier=4.0, min_signals=3,
    ),
}


@dataclass
class ScanResult:
    symbol: str
    name: str
    price: float
    price_change: float
    volume: float
    volume_ratio: float
    rsi: float
    market_cap: float
    day_high: float
    day_low: float
    gap: float
    signals: int = 0
    signal_details: List[str] = field(default_factory=list)


@dataclass
class MagicPick:
    symbol: str
    price: float
    change: float
    rsi: float
    score: int
    action: str = ""
    ai_analysis: Optional[str] = None


def rsi_in_range(rsi, filters: ScanFilters) -> bool:
    return filters.rsi_min <= rsi <= filters.rsi_max


def market_cap_in_range(market_cap, filters: ScanFilters) -> bool:
    market_cap_m = market_cap / 1_000_000
    return filters.market_cap_min <= market_cap_m <= filters.market_cap_max


def price_change_in_range(change, filters: ScanFilters) -> bool:
    return filters.price_change_min <= change <= filters.price_change_max


def volume_in_range(volume_ratio, filters: ScanFilters) -> bool:
    return volume_ratio >= filters.volume_multiplier


def passes_filters(stock: ScanResult, filters: ScanFilters) -> bool:
    return (
        rsi_in_range(stock.rsi, filters)
        and market_cap_in_range(stock.market_cap, filters)
        and price_change_in_range(stock.price_change, filters)
        and volume_in_range(stock.volume_ratio, filters)
    )


def count_signals(stock: ScanResult, filters: ScanFilters):
    """Return (count, names) of the independent signals that fire for a stock."""
    details = []
    if rsi_in_range(stock.rsi, filters):
        details.append("RSI")
    if volume_in_range(stock.volume_ratio, filters):
        details.append("Volume")
    if price_change_in_range(stock.price_change, filters):
        details.append("Price")
    if market_cap_in_range(stock.market_cap, filters):
        details.append("MCap")
    if abs(stock.price_change) > MOMENTUM_THRESHOLD:
        details.append("Momentum")
    return len(details), details


def build_candidate(symbol, name, quote, metrics: EstimatedMetricsProvider, rng=None) -> ScanResult:
    return ScanResult(
        symbol=symbol,
        name=name,
        price=quote.price,
        price_change=quote.change_pct,
        volume=quote.volume,
        volume_ratio=metrics.volume_ratio(quote),
        rsi=estimate_rsi(quote.change_pct, rng),
        market_cap=metrics.market_cap(quote),
        day_high=quote.high,
        day_low=quote.low,
        gap=gap_percent(quote.open, quote.prev_close),
    )


def run_scan(
    candidates,
    filters: ScanFilters,
    quote_source,
    metrics: EstimatedMetricsProvider,
    delay: float = 0.05,
    rng=None,
    sleep: Callable[[float], None] = time.sleep,
) -> List[ScanResult]:
    """Fetch, filter and score each (symbol, name) candidate in the given order.

    Candidates whose quote is unavailable are skipped. A candidate survives only
    if every range gate passes; survivors carry their signal tally.
    """
    results = []
    for i, (symbol, name) in enumerate(candidates):
        if i and delay:
            sleep(delay)

        quote = quote_source.get_quote(symbol)
        if quote is None:
            logger.debug("Skipping %s: quote unavailable", symbol)
            continue

        stock = build_candidate(symbol, name, quote, metrics, rng)
        if not passes_filters(stock, filters):
            continue

        stock.signals, stock.signal_details = count_signals(stock, filters)
        if stock.signals < filters.min_signals:
            continue

        results.append(stock)

    logger.info("Scanned %d candidates, %d passed filters", len(candidates), len(results))
    return results


def score_pick(rsi, change) -> int:
    score = 0
    # Extreme RSI (reversion)
    if rsi > 80:
        score += 3
    elif rsi > 70:
        score += 1
    elif rsi < 20:
        score += 3
    elif rsi < 30:
        score += 1

    # Volatility / momentum
    if abs(change) > 10:
        score += 2
    elif abs(change) > 5:
        score += 1
    return score


def action_label(rsi) -> str:
    if rsi > 70:
        return "SHORT / SELL (Overextended)"
    if rsi < 30:
        return "LONG / BUY (Oversold)"
    return "WATCH (Momentum)"


def find_best_pick(
    symbols,
    quote_source,
    delay: float = 0.05,
    rng=None,
    sleep: Callable[[float], None] = time.sleep,
) -> Optional[MagicPick]:
    """Highest-scoring symbol of a fixed watchlist. The first candidate to reach the max wins."""
    best = None
    highest_score = -100

    for i, symbol in enumerate(symbols):
        if i and delay:
            sleep(delay)

        quote = quote_source.get_quote(symbol)
        if quote is None:
            continue

        change = quote.change_pct
        rsi = estimate_rsi(change, rng)
        score = score_pick(rsi, change)

        if score > highest_score:
            highest_score = score
            best = MagicPick(symbol=symbol, price=quote.price, change=change, rsi=rsi, score=score)

    if best is not None:
        best.action = action_label(best.rsi)
    return best
