"""stockwatch command line - live tracker and daily summary."""
import asyncio
import functools
import logging
import signal
import sys
from typing import Callable, List, Optional, Sequence

import click

from stockwatch.config import (
    app_config,
    load_tracked_symbols,
    quote_source_config,
    tracker_config,
)
from stockwatch.dependencies import PROVIDERS, create_quote_source
from stockwatch.domain.entities import TrackedSymbol
from stockwatch.domain.errors import ConfigError, SummaryError
from stockwatch.domain.interfaces import QuoteSource
from stockwatch.infrastructure.scheduler import setup_scheduler
from stockwatch.processor import PollCycle
from stockwatch.renderer import Renderer, TerminalWriter, format_summary
from stockwatch.repository.log_store import JsonLogStore
from stockwatch.services.summary_service import SummaryService
from stockwatch.services.tracker_state import TrackerState

logger = logging.getLogger(__name__)


def cli_error_handler(func):
    """Log configuration and unexpected errors, then exit with status 1."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (ConfigError, ValueError) as e:
            logger.error(f"Error: {e}")
            sys.exit(1)
        except Exception as e:
            logger.error(f"An unexpected error occurred: {e}", exc_info=True)
            sys.exit(1)

    return wrapper


def run_summary(
    log_path,
    summary_path,
    delete_log: bool = False,
    summary_service: Optional[SummaryService] = None,
) -> int:
    """Summarize a persisted log and print it; returns the process exit code."""
    service = summary_service or SummaryService()
    try:
        summary = service.run(log_path, summary_path)
    except SummaryError as e:
        logger.error(str(e))
        return 1

    click.echo("\n".join(format_summary(summary)))
    if delete_log:
        JsonLogStore(log_path).clear()
    return 0


def _install_signal_handlers(loop: asyncio.AbstractEventLoop, callback: Callable[[], None]) -> List[int]:
    installed = []
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, callback)
            installed.append(sig)
        except (NotImplementedError, RuntimeError):
            logger.debug(f"Signal handler for {sig} not supported on this platform")
    return installed


async def run_tracker(
    symbols: Sequence[TrackedSymbol],
    quote_source: QuoteSource,
    log_store: JsonLogStore,
    renderer: Renderer,
    output: Callable[[List[str]], None],
    interval_seconds: float,
    summary_path,
    target_currency: Optional[str] = None,
    delete_log: bool = True,
    stop_event: Optional[asyncio.Event] = None,
) -> int:
    """Run poll cycles until stopped, then summarize the log."""
    loop = asyncio.get_running_loop()
    stop_event = stop_event or asyncio.Event()

    state = TrackerState()
    poll_cycle = PollCycle(
        symbols=symbols,
        quote_source=quote_source,
        state=state,
        log_store=log_store,
        renderer=renderer,
        output=output,
        target_currency=target_currency,
    )

    scheduler = setup_scheduler(poll_cycle, interval_seconds)
    installed = _install_signal_handlers(loop, stop_event.set)
    logger.info(f"Tracking {len(symbols)} symbols every {interval_seconds:g} seconds")
    scheduler.start()
    try:
        await stop_event.wait()
    finally:
        logger.info("Shutting down...")
        scheduler.shutdown(wait=False)
        for sig in installed:
            loop.remove_signal_handler(sig)
        await poll_cycle.stop()
        await log_store.flush()
        await quote_source.close()

    if not log_store.entries:
        logger.info("No poll cycles completed, skipping daily summary")
        return 0
    return run_summary(log_store.path, summary_path, delete_log=delete_log)


@click.group()
def cli():
    """Poll stock quotes, print a live table and summarize the day."""
    logging.basicConfig(
        level=app_config.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


@cli.command()
@click.option(
    "--provider",
    default=quote_source_config.PROVIDER,
    show_default=True,
    help=f"Quote provider to poll ({', '.join(PROVIDERS)}).",
)
@click.option(
    "--symbols",
    "symbols_raw",
    default=None,
    help="Comma-separated SYMBOL=Company pairs. Defaults to TRACKED_SYMBOLS or the built-in watchlist.",
)
@click.option(
    "--interval",
    type=float,
    default=tracker_config.POLL_INTERVAL_SECONDS,
    show_default=True,
    help="Seconds between poll cycles.",
)
@click.option(
    "--target-currency",
    default=tracker_config.TARGET_CURRENCY,
    help="Convert every price into this currency (e.g. SEK).",
)
@click.option(
    "--threshold",
    type=float,
    default=tracker_config.RENDER_THRESHOLD,
    help="Only show rows whose absolute % change exceeds this value (all rows on the first cycle).",
)
@click.option(
    "--clear/--no-clear",
    default=tracker_config.CLEAR_SCREEN,
    show_default=True,
    help="Clear the screen before each table or append below the previous one.",
)
@click.option("--log-path", default=tracker_config.DAILY_LOG_PATH, show_default=True)
@click.option("--summary-path", default=tracker_config.DAILY_SUMMARY_PATH, show_default=True)
@click.option(
    "--delete-log/--keep-log",
    default=tracker_config.DELETE_LOG_AFTER_SUMMARY,
    show_default=True,
    help="Delete the daily log once the summary has been written.",
)
@cli_error_handler
def track(provider, symbols_raw, interval, target_currency, threshold, clear,
          log_path, summary_path, delete_log):
    """Poll quotes until interrupted, then write the daily summary."""
    symbols = load_tracked_symbols(symbols_raw)
    if not symbols:
        raise ConfigError("No symbols to track")
    if interval <= 0:
        raise ConfigError(f"Poll interval must be positive, got {interval}")

    quote_source = create_quote_source(
        provider,
        api_key=quote_source_config.API_KEY,
        base_url=quote_source_config.BASE_URL,
        timeout=quote_source_config.TIMEOUT,
    )
    renderer = Renderer(
        threshold=threshold,
        descriptions={s.symbol: s.description for s in symbols if s.description},
    )
    exit_code = asyncio.run(run_tracker(
        symbols=symbols,
        quote_source=quote_source,
        log_store=JsonLogStore(log_path),
        renderer=renderer,
        output=TerminalWriter(clear_screen=clear),
        interval_seconds=interval,
        summary_path=summary_path,
        target_currency=target_currency,
        delete_log=delete_log,
    ))
    sys.exit(exit_code)


@cli.command()
@click.option("--log-path", default=tracker_config.DAILY_LOG_PATH, show_default=True)
@click.option("--summary-path", default=tracker_config.DAILY_SUMMARY_PATH, show_default=True)
@click.option("--delete-log", is_flag=True, help="Delete the daily log after summarizing.")
@cli_error_handler
def summarize(log_path, summary_path, delete_log):
    """Summarize an existing daily log file."""
    sys.exit(run_summary(log_path, summary_path, delete_log=delete_log))


if __name__ == "__main__":
    cli()
