"""Twelve Data HTTP quote client."""
import logging
import math
from typing import Any, Dict, Optional

import httpx

from stockwatch.domain.entities import Quote
from stockwatch.domain.errors import QuoteFetchError
from stockwatch.domain.interfaces import QuoteSource

logger = logging.getLogger(__name__)


def parse_price(symbol: str, value: Any) -> float:
    """Parse a numeric or string price, rejecting NaN and infinities."""
    try:
        price = float(value)
    except (TypeError, ValueError):
        raise QuoteFetchError(symbol, f"invalid price {value!r}")
    if not math.isfinite(price):
        raise QuoteFetchError(symbol, f"invalid price {value!r}")
    return price


# Exchanges quoting in a subunit of the currency (pence, agorot, cents).
MINOR_UNIT_CURRENCIES = {
    "GBp": ("GBP", 100),
    "GBX": ("GBP", 100),
    "ILA": ("ILS", 100),
    "ZAc": ("ZAR", 100),
}


def normalize_quote(symbol: str, price: float, currency: str) -> Quote:
    """Build a Quote, rescaling minor-unit prices into the major currency."""
    if currency in MINOR_UNIT_CURRENCIES:
        major, factor = MINOR_UNIT_CURRENCIES[currency]
        logger.info(f"{symbol} quoted in {currency}, converting to {major} (/{factor})")
        return Quote(price=price / factor, currency=major)
    return Quote(price=price, currency=currency)


class TwelveDataQuoteSource(QuoteSource):
    """Quote source backed by the Twelve Data REST API.

    The API key is sent as ``Authorization: apikey <key>``.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.twelvedata.com",
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)
        self._headers = {"Authorization": f"apikey {api_key}"}

    async def _get(self, path: str, symbol: str) -> Dict[str, Any]:
        try:
            response = await self._client.get(
                path, params={"symbol": symbol}, headers=self._headers
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as e:
            raise QuoteFetchError(symbol, f"request failed: {e}")
        except ValueError as e:
            raise QuoteFetchError(symbol, f"malformed response: {e}")

        if not isinstance(payload, dict):
            raise QuoteFetchError(symbol, "malformed response: expected an object")
        if payload.get("status") == "error":
            raise QuoteFetchError(symbol, payload.get("message", "API error"))
        return payload

    async def fetch_quote(self, symbol: str) -> Quote:
        payload = await self._get("/quote", symbol)
        if "close" not in payload:
            raise QuoteFetchError(symbol, "malformed response: missing 'close'")
        price = parse_price(symbol, payload["close"])
        return normalize_quote(symbol, price, payload.get("currency") or "")

    async def fetch_conversion_rate(self, base: str, quote: str) -> float:
        pair = f"{base}/{quote}"
        payload = await self._get("/price", pair)
        if "price" not in payload:
            raise QuoteFetchError(pair, "malformed response: missing 'price'")
        rate = parse_price(pair, payload["price"])
        logger.debug(f"Conversion rate {pair} = {rate}")
        return rate

    async def close(self) -> None:
        await self._client.aclose()
