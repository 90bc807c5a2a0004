import random
from dataclasses import asdict
from functools import lru_cache

from fastapi import Depends, FastAPI, HTTPException
from sqlalchemy.orm import Session

import store
from advisor import AnthropicAdvisor, search_context
from config import Settings, get_settings
from db import engine, get_db
from indicators import RandomMetricsProvider, estimate_rsi, gap_percent
from logging_config import get_logger, setup_logging
from models import Base
from quotes import FinnhubQuoteSource
from scanner import PRESETS, find_best_pick, run_scan
from schemas import FiltersIn, HoldingDeleteIn, HoldingIn, ScanIn, VerifyIn
from universe import MAGIC_CANDIDATES, MARKET_POOL, sample_candidates

setup_logging(get_settings().log_level)
logger = get_logger("api")

app = FastAPI(title="Market Scanner")

# Create tables (simple demo approach)
Base.metadata.create_all(bind=engine)


@lru_cache
def get_quote_source():
    settings = get_settings()
    return FinnhubQuoteSource(settings.finnhub_api_key, cache_ttl=settings.quote_cache_ttl)


@lru_cache
def get_advisor():
    settings = get_settings()
    return AnthropicAdvisor(settings.anthropic_api_key, model=settings.anthropic_model)


def get_rng():
    return random.Random()


def get_metrics(rng: random.Random = Depends(get_rng)):
    return RandomMetricsProvider(rng)


def _quote_fields(quote, rng, metrics):
    if quote is None:
        return {
            "price": 0, "price_change": 0, "rsi": 50, "volume": 0,
            "dayHigh": 0, "dayLow": 0, "gap": 0, "marketCap": 0,
        }
    return {
        "price": quote.price,
        "price_change": quote.change_pct,
        "rsi": estimate_rsi(quote.change_pct, rng),
        "volume": quote.volume,
        "dayHigh": quote.high,
        "dayLow": quote.low,
        "gap": gap_percent(quote.open, quote.prev_close),
        "marketCap": metrics.market_cap(quote),
    }


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/api/presets")
def get_presets():
    presets = {name: FiltersIn.from_filters(f).model_dump(by_alias=True) for name, f in PRESETS.items()}
    return {"success": True, "presets": presets}


@app.post("/api/scan")
def scan(
    body: ScanIn,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    quotes=Depends(get_quote_source),
    metrics=Depends(get_metrics),
    rng: random.Random = Depends(get_rng),
):
    if body.filters is not None:
        filters = body.filters.to_filters()
    elif body.preset in PRESETS:
        filters = PRESETS[body.preset]
    else:
        raise HTTPException(status_code=400, detail=f"Unknown preset '{body.preset}' and no filters given.")

    batch = sample_candidates(MARKET_POOL, settings.scan_sample_size, rng)
    results = run_scan(
        batch, filters, quotes, metrics, delay=settings.quote_delay_seconds, rng=rng
    )
    scan_row, rows = store.record_scan(db, body.preset, results)
    logger.info("Scan %s (%s) saved with %d results", scan_row.id, body.preset, len(rows))

    payload = []
    for r, row in zip(results, rows):
        payload.append({
            "symbol": r.symbol,
            "name": r.name,
            "price": r.price,
            "priceChange": r.price_change,
            "volume": r.volume,
            "volumeRatio": r.volume_ratio,
            "rsi": r.rsi,
            "marketCap": r.market_cap,
            "dayHigh": r.day_high,
            "dayLow": r.day_low,
            "gap": r.gap,
            "signals": r.signals,
            "signalDetails": ", ".join(r.signal_details),
            "stockId": row.id,
        })
    return {"success": True, "results": payload, "scanId": scan_row.id}


@app.post("/api/verify")
def verify(
    body: VerifyIn,
    db: Session = Depends(get_db),
    quotes=Depends(get_quote_source),
    advisor=Depends(get_advisor),
    rng: random.Random = Depends(get_rng),
):
    sym = body.symbol.upper().strip()

    stock = None
    if body.stock_id is not None:
        stock = store.get_scanned_stock(db, body.stock_id)
        if stock is None:
            raise HTTPException(status_code=404, detail=f"No scanned stock with id {body.stock_id}")
        if stock.symbol != sym:
            raise HTTPException(status_code=400, detail=f"Scanned stock {body.stock_id} is {stock.symbol}, not {sym}")

    name = body.name or (stock.name if stock is not None else sym)
    context = search_context(f"{sym} {name} news stock")

    quote = quotes.get_quote(sym)
    change = quote.change_pct if quote else 0
    technicals = {
        "price": quote.price if quote else 0,
        "change": change,
        "high": quote.high if quote else 0,
        "low": quote.low if quote else 0,
        "volume": quote.volume if quote else 0,
        "gap": gap_percent(quote.open, quote.prev_close) if quote else 0,
        "rsi": estimate_rsi(change, rng),
    }

    history = [
        {"verdict": h.verdict, "created_at": h.created_at}
        for h in store.recent_verdicts(db, sym, limit=3)
    ]

    verdict = advisor.ask(sym, name, context, technicals, history)
    store.log_verdict(db, sym, technicals["price"], verdict, stock=stock)
    return {"success": True, "verdict": verdict}


@app.get("/api/holdings")
def get_holdings(
    db: Session = Depends(get_db),
    quotes=Depends(get_quote_source),
    metrics=Depends(get_metrics),
    rng: random.Random = Depends(get_rng),
):
    holdings = []
    for h in store.list_holdings(db):
        row = {"id": h.id, "symbol": h.symbol, "name": h.name, "added_at": h.added_at}
        row.update(_quote_fields(quotes.get_quote(h.symbol), rng, metrics))
        holdings.append(row)
    return {"success": True, "holdings": holdings}


@app.post("/api/holdings")
def add_holding(body: HoldingIn, db: Session = Depends(get_db)):
    store.add_holding(db, body.symbol, body.name)
    return {"success": True}


@app.delete("/api/holdings")
def remove_holding(body: HoldingDeleteIn, db: Session = Depends(get_db)):
    store.remove_holding(db, body.symbol)
    return {"success": True}


@app.get("/api/magic")
def magic_pick(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    quotes=Depends(get_quote_source),
    advisor=Depends(get_advisor),
    rng: random.Random = Depends(get_rng),
):
    pick = find_best_pick(MAGIC_CANDIDATES, quotes, delay=settings.quote_delay_seconds, rng=rng)
    if pick is None:
        logger.warning("Magic pick found no available quotes")
        return {"success": True, "pick": None}

    context = search_context(f"{pick.symbol} stock news institutional flows")
    technicals = {"price": pick.price, "change": pick.change, "rsi": pick.rsi, "score": pick.score}
    pick.ai_analysis = advisor.ask(pick.symbol, "Magic Pick Analysis", context, technicals, [])
    store.log_verdict(db, pick.symbol, pick.price, pick.ai_analysis)

    return {"success": True, "pick": asdict(pick)}


@app.get("/api/logs")
def get_logs(db: Session = Depends(get_db)):
    logs = [
        {
            "id": e.id,
            "symbol": e.symbol,
            "price": e.price,
            "verdict": e.verdict,
            "stock_id": e.stock_id,
            "created_at": e.created_at,
        }
        for e in store.recent_logs(db, limit=100)
    ]
    return {"success": True, "logs": logs}
