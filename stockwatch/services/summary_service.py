"""Daily summary: min/max/average per symbol over a persisted log."""
from pathlib import Path
from typing import Dict, List
import json
import logging

from pydantic import TypeAdapter, ValidationError

from stockwatch.domain.entities import LogEntry, SummaryEntry
from stockwatch.domain.errors import SummaryError, SummaryParseError
from stockwatch.services.tracker_state import TrackerState

logger = logging.getLogger(__name__)

_daily_log_adapter = TypeAdapter(List[LogEntry])


def _reject_constant(name: str):
    raise ValueError(f"non-finite number {name} is not allowed")


class SummaryService:
    """Reduce a daily log into one SummaryEntry per symbol."""

    def load_daily_log(self, path) -> List[LogEntry]:
        """Read and validate the daily log file.

        NaN and infinite prices are rejected along with malformed JSON.
        """
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise SummaryParseError(f"Daily log file {path} is not valid UTF-8: {e}")
        except OSError as e:
            raise SummaryError(f"Error reading daily log file {path}: {e}")
        try:
            return _daily_log_adapter.validate_python(json.loads(text, parse_constant=_reject_constant))
        except json.JSONDecodeError as e:
            raise SummaryParseError(f"Error parsing daily log JSON {path}: {e}")
        except ValidationError as e:
            raise SummaryParseError(f"Invalid daily log structure in {path}: {e}")
        except ValueError as e:
            raise SummaryParseError(f"Invalid value in daily log {path}: {e}")

    def summarize(self, entries: List[LogEntry]) -> List[SummaryEntry]:
        """Replay every non-null price through a fresh TrackerState.

        Symbols that never had a price are left out.
        """
        state = TrackerState()
        companies: Dict[str, str] = {}
        for entry in entries:
            for stock in entry.stocks:
                if stock.price is None:
                    continue
                companies.setdefault(stock.symbol, stock.company)
                state.record_fetch(stock.symbol, stock.price, entry.timestamp)

        summary: List[SummaryEntry] = []
        for symbol in state.symbols():
            symbol_state = state.get(symbol)
            summary.append(SummaryEntry(
                company=companies[symbol],
                symbol=symbol,
                average_price=state.average(symbol),
                min_price=symbol_state.min_price,
                min_time=symbol_state.min_at,
                max_price=symbol_state.max_price,
                max_time=symbol_state.max_at,
            ))
        return summary

    def write_summary(self, summary: List[SummaryEntry], path) -> None:
        path = Path(path)
        payload = json.dumps([item.model_dump(by_alias=True) for item in summary], indent=2)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(payload, encoding="utf-8")
        except OSError as e:
            raise SummaryError(f"Error writing daily summary file {path}: {e}")
        logger.info(f"Daily summary written to {path}")

    def run(self, log_path, summary_path) -> List[SummaryEntry]:
        """Load, reduce and write; nothing is written if loading fails."""
        entries = self.load_daily_log(log_path)
        summary = self.summarize(entries)
        self.write_summary(summary, summary_path)
        return summary
