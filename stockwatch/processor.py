import asyncio
from typing import Callable, Dict, List, Optional, Sequence
from datetime import datetime
import logging

from stockwatch.domain.entities import LogEntry, Quote, StockRecord, TrackedSymbol
from stockwatch.domain.errors import QuoteFetchError
from stockwatch.domain.interfaces import QuoteSource
from stockwatch.renderer import Renderer
from stockwatch.repository.log_store import JsonLogStore
from stockwatch.services.tracker_state import TrackerState

logger = logging.getLogger(__name__)


def _local_now() -> datetime:
    return datetime.now().astimezone()


class PollCycle:
    """Fetch, aggregate, log and render one tick, with dependency injection."""

    def __init__(
        self,
        symbols: Sequence[TrackedSymbol],
        quote_source: QuoteSource,
        state: TrackerState,
        log_store: JsonLogStore,
        renderer: Renderer,
        output: Callable[[List[str]], None],
        target_currency: Optional[str] = None,
        clock: Callable[[], datetime] = _local_now,
    ):
        self.symbols = list(symbols)
        self._quote_source = quote_source
        self._state = state
        self._log_store = log_store
        self._renderer = renderer
        self._output = output
        self.target_currency = target_currency.upper() if target_currency else None
        self._clock = clock
        self._lock = asyncio.Lock()
        self.cycle_count = 0
        self.is_running = True

    async def _fetch_quote(self, symbol: str) -> Optional[Quote]:
        """Fetch one quote; failures are logged and returned as None."""
        try:
            return await self._quote_source.fetch_quote(symbol)
        except QuoteFetchError as e:
            logger.warning(f"Error fetching {symbol}: {e.reason}")
        except Exception as e:
            logger.warning(f"Error fetching {symbol}: {e}")
        return None

    async def _fetch_rate(self, currency: str) -> Optional[float]:
        try:
            return await self._quote_source.fetch_conversion_rate(currency, self.target_currency)
        except QuoteFetchError as e:
            logger.warning(f"Error fetching conversion rate {currency}/{self.target_currency}: {e.reason}")
        except Exception as e:
            logger.warning(f"Error fetching conversion rate {currency}/{self.target_currency}: {e}")
        return None

    async def _convert(self, quotes: List[Optional[Quote]]) -> List[Optional[Quote]]:
        """Convert quotes into the target currency, one rate fetch per currency."""
        currencies = sorted({
            q.currency for q in quotes
            if q is not None and q.currency and q.currency.upper() != self.target_currency
        })
        rates = await asyncio.gather(*(self._fetch_rate(c) for c in currencies))
        rate_by_currency: Dict[str, Optional[float]] = dict(zip(currencies, rates))

        converted: List[Optional[Quote]] = []
        for symbol, quote in zip(self.symbols, quotes):
            if quote is None:
                converted.append(None)
            elif quote.currency.upper() == self.target_currency:
                converted.append(quote)
            elif not quote.currency:
                logger.warning(f"Skipping {symbol.symbol}: no currency reported, cannot convert")
                converted.append(None)
            elif rate_by_currency.get(quote.currency) is None:
                logger.warning(f"Skipping {symbol.symbol}: missing conversion rate for {quote.currency}")
                converted.append(None)
            else:
                converted.append(Quote(
                    price=quote.price * rate_by_currency[quote.currency],
                    currency=self.target_currency,
                ))
        return converted

    def _build_record(self, tracked: TrackedSymbol, quote: Optional[Quote], timestamp: str) -> StockRecord:
        if quote is None:
            return StockRecord(company=tracked.company, symbol=tracked.symbol)

        self._state.record_fetch(tracked.symbol, quote.price, timestamp)
        return StockRecord(
            company=tracked.company,
            symbol=tracked.symbol,
            price=quote.price,
            currency=quote.currency,
            percent_change=self._state.percent_change_from_baseline(tracked.symbol, quote.price),
        )

    async def _run(self) -> LogEntry:
        now = self._clock()
        timestamp = now.isoformat()

        quotes = list(await asyncio.gather(*(self._fetch_quote(s.symbol) for s in self.symbols)))
        if self.target_currency:
            quotes = await self._convert(quotes)

        records = [
            self._build_record(tracked, quote, timestamp)
            for tracked, quote in zip(self.symbols, quotes)
        ]
        entry = LogEntry(timestamp=timestamp, stocks=records)
        self._log_store.append(entry)
        self._log_store.schedule_persist()

        lines = self._renderer.render(records, self._state, now, first_cycle=self.cycle_count == 0)
        self.cycle_count += 1
        self._output(lines)
        return entry

    async def run_once(self) -> Optional[LogEntry]:
        """Run one cycle; skipped when stopped or the previous one is still running."""
        if not self.is_running:
            logger.debug("Poll cycle stopped, ignoring tick")
            return None
        if self._lock.locked():
            logger.warning("Previous poll cycle still running, skipping tick")
            return None
        async with self._lock:
            if not self.is_running:
                return None
            try:
                return await self._run()
            except Exception as e:
                logger.error(f"Error in poll cycle: {e}", exc_info=True)
                return None

    async def wait_idle(self) -> None:
        """Wait for an in-flight cycle to finish."""
        async with self._lock:
            pass

    async def stop(self) -> None:
        """Refuse new cycles, then wait for the in-flight one."""
        self.is_running = False
        await self.wait_idle()
        logger.info("Poll cycle stopped")
