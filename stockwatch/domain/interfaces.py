"""Quote source interface (Port) - abstraction for market data access."""
from abc import ABC, abstractmethod

from stockwatch.domain.entities import Quote


class QuoteSource(ABC):
    """Interface for fetching live quotes and FX rates."""

    @abstractmethod
    async def fetch_quote(self, symbol: str) -> Quote:
        """Get the current price and currency for a symbol.

        Raises QuoteFetchError on transport failure, malformed response
        or a price that is not a finite number.
        """
        pass

    @abstractmethod
    async def fetch_conversion_rate(self, base: str, quote: str) -> float:
        """Get the rate converting one unit of ``base`` into ``quote``."""
        pass

    async def close(self) -> None:
        """Release any held connections."""
        return None
