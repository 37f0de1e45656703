"""Colorized terminal table for one poll cycle."""
from datetime import datetime
from typing import Dict, List, Optional, Sequence, TextIO
import sys

from stockwatch.domain.entities import StockRecord, SummaryEntry
from stockwatch.services.tracker_state import TrackerState

RESET = "\033[0m"
BOLD = "\033[1m"
GRAY = "\033[90m"
RED = "\033[91m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
BLUE = "\033[94m"
MAGENTA = "\033[95m"
CYAN = "\033[96m"
WHITE = "\033[97m"
CLEAR_SCREEN = "\033[2J\033[H"

COMPANY_WIDTH = 22
SYMBOL_WIDTH = 10
START_WIDTH = 12
CURRENT_WIDTH = 18
CHANGE_WIDTH = 12
AVERAGE_WIDTH = 12
ROW_WIDTH = (
    COMPANY_WIDTH + SYMBOL_WIDTH + START_WIDTH
    + CURRENT_WIDTH + CHANGE_WIDTH + AVERAGE_WIDTH
)


def colorize(text: str, color: str) -> str:
    return f"{color}{text}{RESET}"


def change_color(percent_change: Optional[float]) -> str:
    """Green for gains, red for losses, neutral for zero or missing."""
    if percent_change is None or percent_change == 0:
        return WHITE
    return GREEN if percent_change > 0 else RED


def format_price(value: Optional[float]) -> str:
    return f"{value:.2f}" if value is not None else "N/A"


def format_change(value: Optional[float]) -> str:
    return f"{value:.2f}%" if value is not None else "N/A"


class Renderer:
    """Turns one cycle's records into aligned table lines.

    With ``threshold`` set, rows are shown only when the absolute percent
    change exceeds it, except on the first cycle where every row is shown.
    """

    def __init__(
        self,
        threshold: Optional[float] = None,
        descriptions: Optional[Dict[str, str]] = None,
    ):
        self.threshold = threshold
        self.descriptions = descriptions or {}

    def header(self, now: datetime) -> List[str]:
        title = colorize(
            f"=== Stock Prices (Updated {now.strftime('%H:%M:%S')}) ===", BLUE
        )
        columns = (
            "Company".ljust(COMPANY_WIDTH)
            + "Symbol".ljust(SYMBOL_WIDTH)
            + "Start Price".rjust(START_WIDTH)
            + "Current".rjust(CURRENT_WIDTH)
            + "% Change".rjust(CHANGE_WIDTH)
            + "Average".rjust(AVERAGE_WIDTH)
        )
        return [title, "", colorize(columns, BOLD), colorize("-" * ROW_WIDTH, GRAY)]

    def should_show(self, record: StockRecord, first_cycle: bool) -> bool:
        if self.threshold is None or first_cycle:
            return True
        return record.percent_change is not None and abs(record.percent_change) > self.threshold

    def row(self, record: StockRecord, state: TrackerState) -> List[str]:
        current = format_price(record.price)
        if record.price is not None and record.currency:
            current = f"{current} {record.currency}"
        average = state.average(record.symbol) if state.get(record.symbol) else None

        line = (
            colorize(record.company[:COMPANY_WIDTH - 1].ljust(COMPANY_WIDTH), GRAY)
            + colorize(record.symbol[:SYMBOL_WIDTH - 1].ljust(SYMBOL_WIDTH), YELLOW)
            + colorize(format_price(state.baseline(record.symbol)).rjust(START_WIDTH), WHITE)
            + colorize(current.rjust(CURRENT_WIDTH), GREEN if record.price is not None else WHITE)
            + colorize(
                format_change(record.percent_change).rjust(CHANGE_WIDTH),
                BOLD + change_color(record.percent_change),
            )
            + colorize(format_price(average).rjust(AVERAGE_WIDTH), MAGENTA)
        )
        lines = [line]
        description = self.descriptions.get(record.symbol)
        if description:
            lines.append("    " + colorize(description, CYAN))
        return lines

    def render(
        self,
        records: Sequence[StockRecord],
        state: TrackerState,
        now: datetime,
        first_cycle: bool = False,
    ) -> List[str]:
        """Lines for one cycle; identical input gives identical output."""
        lines = self.header(now)
        shown = [r for r in records if self.should_show(r, first_cycle)]
        if not shown:
            lines.append(colorize("No significant price changes since last update.", GRAY))
            return lines
        for record in shown:
            lines.extend(self.row(record, state))
        return lines


def format_summary(entries: Sequence[SummaryEntry]) -> List[str]:
    """Printable lines for a daily summary."""
    lines = [colorize("=== Daily Summary ===", MAGENTA)]
    for item in entries:
        lines.append(colorize(f"{item.company} ({item.symbol}):", YELLOW))
        lines.append(f"  - Avg = {item.average_price:.2f}")
        lines.append(f"  - Min = {format_price(item.min_price)} at {item.min_time or 'N/A'}")
        lines.append(f"  - Max = {format_price(item.max_price)} at {item.max_time or 'N/A'}")
    return lines


class TerminalWriter:
    """Prints rendered lines, optionally clearing the screen first."""

    def __init__(self, clear_screen: bool = True, stream: Optional[TextIO] = None):
        self.clear_screen = clear_screen
        self._stream = stream

    def __call__(self, lines: List[str]) -> None:
        text = "\n".join(lines) + "\n"
        if self.clear_screen:
            text = CLEAR_SCREEN + text
        else:
            text = "\n" + text
        stream = self._stream or sys.stdout
        stream.write(text)
        stream.flush()
