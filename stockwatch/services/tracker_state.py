"""Per-symbol baseline and running aggregates."""
from typing import Dict, List, Optional
import logging

from stockwatch.domain.entities import SymbolState

logger = logging.getLogger(__name__)


class TrackerState:
    """Baseline, previous price, sum/count and extremes per symbol.

    Percent change is always measured against the baseline (first observed
    price); ``previous_price`` is kept for reference only.
    """

    def __init__(self):
        self._states: Dict[str, SymbolState] = {}

    def record_fetch(self, symbol: str, price: float, timestamp: str) -> None:
        """Fold one successful price observation into the symbol's state."""
        state = self._states.get(symbol)
        if state is None:
            state = SymbolState(baseline_price=price, previous_price=price)
            self._states[symbol] = state
            logger.debug(f"Baseline for {symbol} set to {price}")

        state.previous_price = price
        state.sum += price
        state.count += 1
        if state.min_price is None or price < state.min_price:
            state.min_price = price
            state.min_at = timestamp
        if state.max_price is None or price > state.max_price:
            state.max_price = price
            state.max_at = timestamp

    def percent_change_from_baseline(self, symbol: str, price: float) -> Optional[float]:
        baseline = self.baseline(symbol)
        if baseline is None or baseline == 0:
            return None
        return (price - baseline) / baseline * 100

    def average(self, symbol: str) -> float:
        """Running average, 0.0 for a symbol never fetched successfully."""
        state = self._states.get(symbol)
        if state is None or state.count == 0:
            return 0.0
        return state.sum / state.count

    def baseline(self, symbol: str) -> Optional[float]:
        state = self._states.get(symbol)
        return state.baseline_price if state else None

    def get(self, symbol: str) -> Optional[SymbolState]:
        return self._states.get(symbol)

    def symbols(self) -> List[str]:
        """Symbols with at least one observation, in first-seen order."""
        return list(self._states)
