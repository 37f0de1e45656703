"""Yahoo Finance quote client."""
import asyncio
import logging

import yfinance as yf

from stockwatch.domain.entities import Quote
from stockwatch.domain.errors import QuoteFetchError
from stockwatch.domain.interfaces import QuoteSource
from stockwatch.infrastructure.twelve_data_client import normalize_quote, parse_price

logger = logging.getLogger(__name__)


def _last_price(symbol: str):
    """Blocking lookup of last price and currency through yfinance."""
    fast_info = yf.Ticker(symbol).fast_info
    price = getattr(fast_info, "last_price", None)
    currency = getattr(fast_info, "currency", None) or ""
    return price, currency


class YahooQuoteSource(QuoteSource):
    """Quote source backed by yfinance; calls run in worker threads."""

    async def _lookup(self, symbol: str):
        try:
            return await asyncio.to_thread(_last_price, symbol)
        except Exception as e:
            raise QuoteFetchError(symbol, f"yfinance lookup failed: {e}")

    async def fetch_quote(self, symbol: str) -> Quote:
        price, currency = await self._lookup(symbol)
        if price is None:
            raise QuoteFetchError(symbol, "no price data available")
        return normalize_quote(symbol, parse_price(symbol, price), str(currency))

    async def fetch_conversion_rate(self, base: str, quote: str) -> float:
        pair = f"{base}{quote}=X"
        rate, _ = await self._lookup(pair)
        if rate is None:
            raise QuoteFetchError(pair, "no rate data available")
        return parse_price(pair, rate)
