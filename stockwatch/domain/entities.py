"""Domain entities - core business objects."""
from typing import List, Optional
from pydantic import BaseModel, Field, FiniteFloat


class TrackedSymbol(BaseModel):
    """A symbol on the watchlist."""
    company: str
    symbol: str
    description: Optional[str] = None

    class Config:
        frozen = True


class Quote(BaseModel):
    """A single price observation for one symbol."""
    price: float
    currency: str = ""


class SymbolState(BaseModel):
    """Running aggregates for one symbol."""
    baseline_price: float
    previous_price: float
    sum: float = 0.0
    count: int = 0
    min_price: Optional[float] = None
    min_at: Optional[str] = None
    max_price: Optional[float] = None
    max_at: Optional[str] = None


class StockRecord(BaseModel):
    """One symbol's result within a poll cycle."""
    company: str
    symbol: str
    price: Optional[FiniteFloat] = None
    currency: str = ""
    percent_change: Optional[float] = Field(default=None, alias="percentChange")

    class Config:
        populate_by_name = True


class LogEntry(BaseModel):
    """All records of one poll cycle."""
    timestamp: str
    stocks: List[StockRecord]


class SummaryEntry(BaseModel):
    """Per-symbol statistics over a whole daily log."""
    company: str
    symbol: str
    average_price: float = Field(alias="averagePrice")
    min_price: Optional[float] = Field(default=None, alias="minPrice")
    min_time: Optional[str] = Field(default=None, alias="minTime")
    max_price: Optional[float] = Field(default=None, alias="maxPrice")
    max_time: Optional[str] = Field(default=None, alias="maxTime")

    class Config:
        populate_by_name = True
