from dataclasses import asdict
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from scanner import ScanFilters


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FiltersIn(CamelModel):
    rsi_min: float = Field(ge=0, le=100)
    rsi_max: float = Field(ge=0, le=100)
    market_cap_min: float = Field(ge=0)
    market_cap_max: float = Field(ge=0)
    price_change_min: float
    price_change_max: float
    volume_multiplier: float = Field(ge=0)
    min_signals: int = Field(default=0, ge=0, le=5)

    def to_filters(self) -> ScanFilters:
        return ScanFilters(**self.model_dump())

    @classmethod
    def from_filters(cls, filters: ScanFilters) -> "FiltersIn":
        return cls(**asdict(filters))


class ScanIn(BaseModel):
    preset: str = "custom"
    filters: Optional[FiltersIn] = None


class VerifyIn(CamelModel):
    symbol: str = Field(min_length=1, max_length=10)
    name: Optional[str] = None
    stock_id: Optional[int] = None


class HoldingIn(BaseModel):
    symbol: str = Field(min_length=1, max_length=10)
    name: Optional[str] = None


class HoldingDeleteIn(BaseModel):
    symbol: str = Field(min_length=1, max_length=10)
