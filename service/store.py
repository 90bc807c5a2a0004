from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from models import AdvisoryLog, Holding, Scan, ScannedStock


def record_scan(db, preset, results):
    """Persist a scan batch and its rows in one commit. Returns (scan, stock rows)."""
    scan = Scan(preset=preset or "custom", total_results=len(results))
    db.add(scan)
    db.flush()

    rows = [
        ScannedStock(
            scan_id=scan.id,
            symbol=r.symbol,
            name=r.name,
            price=r.price,
            price_change=r.price_change,
            volume=r.volume,
            volume_ratio=r.volume_ratio,
            rsi=r.rsi,
            market_cap=r.market_cap,
            signals=r.signals,
            signal_details=", ".join(r.signal_details),
        )
        for r in results
    ]
    db.add_all(rows)
    db.commit()
    return scan, rows


def get_scanned_stock(db, stock_id):
    return db.get(ScannedStock, stock_id)


def list_holdings(db):
    stmt = select(Holding).order_by(Holding.added_at.desc(), Holding.id.desc())
    return db.execute(stmt).scalars().all()


def add_holding(db, symbol, name=None):
    """Insert a holding unless the symbol is already held."""
    sym = symbol.upper().strip()
    existing = db.execute(select(Holding).where(Holding.symbol == sym)).scalar_one_or_none()
    if existing is not None:
        return existing

    h = Holding(symbol=sym, name=name or sym)
    db.add(h)
    try:
        db.commit()
    except IntegrityError:
        # lost a race with another insert of the same symbol
        db.rollback()
        return db.execute(select(Holding).where(Holding.symbol == sym)).scalar_one()
    return h


def remove_holding(db, symbol):
    sym = symbol.upper().strip()
    h = db.execute(select(Holding).where(Holding.symbol == sym)).scalar_one_or_none()
    if h is None:
        return False
    db.delete(h)
    db.commit()
    return True


def log_verdict(db, symbol, price, verdict, stock=None):
    """Append a verdict to the log, attaching it to the given scan row if any."""
    entry = AdvisoryLog(symbol=symbol, price=price, verdict=verdict)
    if stock is not None:
        stock.ai_verified = True
        stock.ai_verdict = verdict
        entry.stock_id = stock.id
    db.add(entry)
    db.commit()
    return entry


def recent_verdicts(db, symbol, limit=3):
    stmt = (
        select(AdvisoryLog)
        .where(AdvisoryLog.symbol == symbol)
        .order_by(AdvisoryLog.created_at.desc(), AdvisoryLog.id.desc())
        .limit(limit)
    )
    return db.execute(stmt).scalars().all()


def recent_logs(db, limit=100):
    stmt = select(AdvisoryLog).order_by(AdvisoryLog.created_at.desc(), AdvisoryLog.id.desc()).limit(limit)
    return db.execute(stmt).scalars().all()
