"""Configuration management using python-dotenv."""
import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv

from stockwatch.domain.entities import TrackedSymbol

# Load .env file from project root
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(dotenv_path=env_path)


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _env_optional_float(name: str):
    value = os.getenv(name, "").strip()
    return float(value) if value else None


class QuoteSourceConfig:
    """Quote provider configuration."""
    PROVIDER: str = os.getenv("QUOTE_PROVIDER", "twelvedata")
    API_KEY: str = os.getenv("API_KEY", "")
    BASE_URL: str = os.getenv("QUOTE_BASE_URL", "https://api.twelvedata.com")
    TIMEOUT: float = float(os.getenv("REQUEST_TIMEOUT", "10"))


class TrackerConfig:
    """Poll loop, rendering and log file configuration."""
    POLL_INTERVAL_SECONDS: float = float(os.getenv("POLL_INTERVAL_SECONDS", "5"))
    TARGET_CURRENCY: str = os.getenv("TARGET_CURRENCY", "").strip().upper()
    RENDER_THRESHOLD = _env_optional_float("RENDER_THRESHOLD")
    CLEAR_SCREEN: bool = _env_bool("CLEAR_SCREEN", "true")
    DAILY_LOG_PATH: str = os.getenv("DAILY_LOG_PATH", "data/daily_log.json")
    DAILY_SUMMARY_PATH: str = os.getenv("DAILY_SUMMARY_PATH", "data/daily_summary.json")
    DELETE_LOG_AFTER_SUMMARY: bool = _env_bool("DELETE_LOG_AFTER_SUMMARY", "true")
    TRACKED_SYMBOLS: str = os.getenv("TRACKED_SYMBOLS", "")


class AppConfig:
    """Application configuration."""
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")


# Watchlist used when TRACKED_SYMBOLS is not set
DEFAULT_SYMBOLS: List[TrackedSymbol] = [
    TrackedSymbol(
        company="ATOSS SOFTWARE SE", symbol="AOF.DE",
        description="ATOSS SOFTWARE SE is a software company specializing in IT solutions.",
    ),
    TrackedSymbol(
        company="ENVAR", symbol="ENVAR.ST",
        description="ENVAR is a leading provider of sustainable energy solutions.",
    ),
    TrackedSymbol(
        company="Intel", symbol="INTC",
        description="Intel Corporation is a multinational semiconductor company.",
    ),
    TrackedSymbol(
        company="INVISIO", symbol="IVSO.ST",
        description="INVISIO focuses on secure communications and networking technologies.",
    ),
    TrackedSymbol(company="Ovzon", symbol="OVZON.ST"),
    TrackedSymbol(company="Telenor", symbol="TEL.OL"),
    TrackedSymbol(
        company="SKF", symbol="SKF-B.ST",
        description="SKF is a global leader in bearings, seals, and lubrication systems.",
    ),
    TrackedSymbol(
        company="Nvidia", symbol="NVDA",
        description="Nvidia is a leader in GPU technologies and AI computing.",
    ),
    TrackedSymbol(company="Hexagon AB", symbol="HEXA.ST"),
]


def parse_tracked_symbols(raw: str) -> List[TrackedSymbol]:
    """Parse ``SYMBOL=Company`` pairs separated by commas.

    A bare ``SYMBOL`` uses the symbol itself as the company name.
    """
    symbols: List[TrackedSymbol] = []
    for item in raw.split(","):
        item = item.strip()
        if not item:
            continue
        symbol, _, company = item.partition("=")
        symbol = symbol.strip()
        if not symbol:
            raise ValueError(f"Invalid tracked symbol entry: {item!r}")
        symbols.append(TrackedSymbol(company=company.strip() or symbol, symbol=symbol))
    return symbols


def load_tracked_symbols(raw: str = None) -> List[TrackedSymbol]:
    """Tracked symbols from TRACKED_SYMBOLS, falling back to the default watchlist."""
    raw = tracker_config.TRACKED_SYMBOLS if raw is None else raw
    if raw.strip():
        return parse_tracked_symbols(raw)
    return list(DEFAULT_SYMBOLS)


# Singleton instances
quote_source_config = QuoteSourceConfig()
tracker_config = TrackerConfig()
app_config = AppConfig()
