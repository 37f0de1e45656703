"""Pytest configuration and fixtures."""
import asyncio
import re
from typing import Dict, List

import pytest

from stockwatch.domain.entities import Quote, TrackedSymbol
from stockwatch.domain.errors import QuoteFetchError
from stockwatch.domain.interfaces import QuoteSource
from stockwatch.renderer import Renderer
from stockwatch.repository.log_store import JsonLogStore
from stockwatch.services.tracker_state import TrackerState

ANSI_RE = re.compile(r"\x1b\[[0-9;]*[A-Za-z]")


def strip_ansi(text: str) -> str:
    return ANSI_RE.sub("", text)


class FakeQuoteSource(QuoteSource):
    """Scripted quote source: each call pops the next result for the symbol.

    A result is a Quote, a float (price with the default currency) or an
    exception instance to raise.
    """

    def __init__(self, quotes: Dict[str, List], rates: Dict[str, object] = None,
                 currency: str = "SEK", delay: float = 0.0):
        self.quotes = {symbol: list(results) for symbol, results in quotes.items()}
        self.rates = rates or {}
        self.currency = currency
        self.delay = delay
        self.quote_calls: List[str] = []
        self.rate_calls: List[str] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.closed = False

    async def fetch_quote(self, symbol: str) -> Quote:
        self.quote_calls.append(symbol)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            results = self.quotes.get(symbol) or []
            result = results.pop(0) if len(results) > 1 else (results[0] if results else None)
            if result is None:
                raise QuoteFetchError(symbol, "no scripted quote")
            if isinstance(result, Exception):
                raise result
            if isinstance(result, Quote):
                return result
            return Quote(price=result, currency=self.currency)
        finally:
            self.in_flight -= 1

    async def fetch_conversion_rate(self, base: str, quote: str) -> float:
        pair = f"{base}/{quote}"
        self.rate_calls.append(pair)
        result = self.rates.get(pair)
        if result is None:
            raise QuoteFetchError(pair, "no scripted rate")
        if isinstance(result, Exception):
            raise result
        return result

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_source_factory():
    """Build scripted quote sources."""
    return FakeQuoteSource


@pytest.fixture
def tracked_symbols():
    return [
        TrackedSymbol(company="SKF", symbol="SKF-B.ST", description="Bearings and seals."),
        TrackedSymbol(company="Intel", symbol="INTC"),
    ]


@pytest.fixture
def tracker_state():
    return TrackerState()


@pytest.fixture
def log_store(tmp_path):
    return JsonLogStore(tmp_path / "daily_log.json")


@pytest.fixture
def renderer():
    return Renderer()


@pytest.fixture
def captured_output():
    """Output sink collecting every rendered frame."""
    frames: List[List[str]] = []

    def sink(lines: List[str]) -> None:
        frames.append(lines)

    sink.frames = frames
    return sink
