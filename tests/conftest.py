"""Pytest configuration and fixtures."""

from __future__ import annotations

import os
import tempfile
from typing import Generator

import pytest
import requests
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

# The service reads its config file at import time; point it at a throwaway one.
_tmpdir = tempfile.mkdtemp(prefix="scanner-tests-")
_env_file = os.path.join(_tmpdir, ".env")
with open(_env_file, "w") as fh:
    fh.write("# test config\n")
    fh.write("FINNHUB_API_KEY=test-finnhub\n")
    fh.write("ANTHROPIC_API_KEY=test-anthropic\n")
    fh.write(f"DB_PATH={os.path.join(_tmpdir, 'scanner.db')}\n")
    fh.write("QUOTE_DELAY_SECONDS=0\n")
os.environ["ENV_FILE"] = _env_file

from config import load_settings  # noqa: E402
from models import Base  # noqa: E402
from quotes import Quote  # noqa: E402


class FakeQuoteSource:
    """Serves canned quotes; symbols not in the mapping are unavailable."""

    def __init__(self, quotes=None):
        self.quotes = dict(quotes or {})
        self.calls = []

    def get_quote(self, symbol):
        self.calls.append(symbol)
        return self.quotes.get(symbol.upper())


class FakeAdvisor:
    def __init__(self, verdict="AAPL shows a Penguin setup. LONG at $100."):
        self.verdict = verdict
        self.calls = []

    def ask(self, symbol, name, context, technicals=None, history=None):
        self.calls.append(
            {"symbol": symbol, "name": name, "context": context, "technicals": technicals, "history": history}
        )
        return self.verdict


class FixedMetrics:
    def __init__(self, volume_ratio=3.0, market_cap=50_000_000_000):
        self._volume_ratio = volume_ratio
        self._market_cap = market_cap

    def volume_ratio(self, quote):
        return self._volume_ratio

    def market_cap(self, quote):
        return self._market_cap


class NoJitterRng:
    """randint returns the midpoint and shuffle keeps order, so RSI = clamp(50 + 2 * change)."""

    def randint(self, a, b):
        return (a + b) // 2

    def shuffle(self, seq):
        pass


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


def make_quote(symbol, price=100.0, change=0.0, **kwargs) -> Quote:
    return Quote(symbol=symbol, price=price, change_pct=change, **kwargs)


@pytest.fixture
def quote_source() -> FakeQuoteSource:
    return FakeQuoteSource()


@pytest.fixture
def advisor() -> FakeAdvisor:
    return FakeAdvisor()


@pytest.fixture
def metrics() -> FixedMetrics:
    return FixedMetrics()


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(session_factory) -> Generator[Session, None, None]:
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client(session_factory, quote_source, advisor, metrics) -> Generator[TestClient, None, None]:
    """TestClient with the database, upstreams and randomness replaced by fakes."""
    import main

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    main.app.dependency_overrides[main.get_db] = override_get_db
    main.app.dependency_overrides[main.get_settings] = lambda: load_settings(_env_file)
    main.app.dependency_overrides[main.get_quote_source] = lambda: quote_source
    main.app.dependency_overrides[main.get_advisor] = lambda: advisor
    main.app.dependency_overrides[main.get_metrics] = lambda: metrics
    main.app.dependency_overrides[main.get_rng] = NoJitterRng

    with TestClient(main.app) as c:
        yield c

    main.app.dependency_overrides.clear()
