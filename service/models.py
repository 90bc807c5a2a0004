from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy import Boolean, Column, Integer, String, Float, Text, DateTime, ForeignKey, func

Base = declarative_base()


class Scan(Base):
    __tablename__ = "scans"
    id = Column(Integer, primary_key=True, index=True)
    scan_date = Column(DateTime(timezone=True), server_default=func.now())
    preset = Column(String(32), nullable=False, default="custom")
    total_results = Column(Integer, nullable=False, default=0)

    stocks = relationship("ScannedStock", back_populates="scan")


class ScannedStock(Base):
    __tablename__ = "stocks"
    id = Column(Integer, primary_key=True, index=True)
    scan_id = Column(Integer, ForeignKey("scans.id"), nullable=False, index=True)
    symbol = Column(String(10), index=True, nullable=False)
    name = Column(String(64))
    price = Column(Float)
    price_change = Column(Float)
    volume = Column(Float)
    volume_ratio = Column(Float)
    rsi = Column(Float)
    market_cap = Column(Float)
    signals = Column(Integer, nullable=False, default=0)
    signal_details = Column(Text)
    ai_verified = Column(Boolean, nullable=False, default=False)
    ai_verdict = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    scan = relationship("Scan", back_populates="stocks")


class Holding(Base):
    __tablename__ = "holdings"
    id = Column(Integer, primary_key=True, index=True)
    symbol = Column(String(10), unique=True, index=True, nullable=False)
    name = Column(String(64))
    added_at = Column(DateTime(timezone=True), server_default=func.now())


class AdvisoryLog(Base):
    """Append-only record of AI verdicts."""

    __tablename__ = "ai_logs"
    id = Column(Integer, primary_key=True, index=True)
    symbol = Column(String(10), index=True, nullable=False)
    price = Column(Float)
    verdict = Column(Text, nullable=False)
    # The scan row this verdict was attached to, if the caller named one.
    stock_id = Column(Integer, ForeignKey("stocks.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
