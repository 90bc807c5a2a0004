import threading
from dataclasses import dataclass
from typing import Optional

import requests
from cachetools import TTLCache

from logging_config import get_logger

logger = get_logger("quotes")

FINNHUB_QUOTE_URL = "https://finnhub.io/api/v1/quote"


@dataclass(frozen=True)
class Quote:
    symbol: str
    price: float
    change_pct: float = 0.0
    high: float = 0.0
    low: float = 0.0
    open: float = 0.0
    prev_close: float = 0.0
    volume: float = 0.0


class FinnhubQuoteSource:
    """Point-in-time quotes from Finnhub. Returns None when a quote is unavailable."""

    def __init__(self, api_key, cache_ttl=30, timeout=8, session=None):
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()
        # Cache quotes to reduce rate-limit pain
        self.cache = TTLCache(maxsize=512, ttl=cache_ttl)
        # TTLCache is not thread-safe and handlers run in a threadpool
        self.lock = threading.Lock()

    def get_quote(self, symbol: str) -> Optional[Quote]:
        sym = symbol.upper().strip()
        if not sym:
            return None

        with self.lock:
            cached = self.cache.get(sym)
        if cached is not None:
            return cached

        try:
            r = self.session.get(
                FINNHUB_QUOTE_URL,
                params={"symbol": sym, "token": self.api_key},
                timeout=self.timeout,
            )
            r.raise_for_status()
            data = r.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning("Quote provider error for %s: %s", sym, e)
            return None

        quote = parse_quote(sym, data)
        if quote is None:
            logger.debug("No quote found for %s", sym)
            return None

        with self.lock:
            self.cache[sym] = quote
        return quote


def parse_quote(symbol: str, data) -> Optional[Quote]:
    # Finnhub returns current price in `c`; unknown symbols come back as c=0
    if not isinstance(data, dict):
        return None
    c = data.get("c")
    if c in (None, 0):
        return None

    # A malformed field makes the whole quote unavailable
    try:
        return Quote(
            symbol=symbol,
            price=float(c),
            change_pct=float(data.get("dp") or 0),
            high=float(data.get("h") or 0),
            low=float(data.get("l") or 0),
            open=float(data.get("o") or 0),
            prev_close=float(data.get("pc") or 0),
            volume=float(data.get("v") or 0),
        )
    except (TypeError, ValueError):
        return None
