"""Exceptions raised across stockwatch."""


class StockwatchError(Exception):
    """Base class for stockwatch errors."""


class ConfigError(StockwatchError):
    """Required configuration is missing or invalid."""


class QuoteFetchError(StockwatchError):
    """A quote or conversion rate could not be fetched or parsed."""

    def __init__(self, symbol: str, reason: str):
        super().__init__(f"{symbol}: {reason}")
        self.symbol = symbol
        self.reason = reason


class SummaryError(StockwatchError):
    """The daily log could not be read or the summary could not be written."""


class SummaryParseError(SummaryError):
    """The daily log file is not a valid log."""
