"""Tests for configuration parsing and quote source wiring."""
from unittest.mock import patch

import pytest

from stockwatch.config import DEFAULT_SYMBOLS, load_tracked_symbols, parse_tracked_symbols, tracker_config
from stockwatch.dependencies import create_quote_source
from stockwatch.domain.errors import ConfigError
from stockwatch.infrastructure.twelve_data_client import TwelveDataQuoteSource
from stockwatch.infrastructure.yahoo_client import YahooQuoteSource


def test_parse_tracked_symbols():
    symbols = parse_tracked_symbols("SKF-B.ST=SKF, INTC = Intel ,NVDA,")
    assert [(s.symbol, s.company) for s in symbols] == [
        ("SKF-B.ST", "SKF"),
        ("INTC", "Intel"),
        ("NVDA", "NVDA"),
    ]


def test_parse_tracked_symbols_rejects_empty_symbol():
    with pytest.raises(ValueError):
        parse_tracked_symbols("=Nameless")


def test_load_tracked_symbols_defaults():
    with patch.object(tracker_config, "TRACKED_SYMBOLS", ""):
        assert load_tracked_symbols() == DEFAULT_SYMBOLS


def test_load_tracked_symbols_from_env_value():
    with patch.object(tracker_config, "TRACKED_SYMBOLS", "INTC=Intel"):
        symbols = load_tracked_symbols()
    assert [s.symbol for s in symbols] == ["INTC"]


def test_default_symbols_defined():
    assert len(DEFAULT_SYMBOLS) > 0
    assert "SKF-B.ST" in [s.symbol for s in DEFAULT_SYMBOLS]
    assert len({s.symbol for s in DEFAULT_SYMBOLS}) == len(DEFAULT_SYMBOLS)


def test_twelvedata_requires_api_key():
    with pytest.raises(ConfigError):
        create_quote_source("twelvedata", api_key="")


def test_unknown_provider():
    with pytest.raises(ConfigError):
        create_quote_source("bloomberg", api_key="secret")


def test_create_sources():
    assert isinstance(create_quote_source("TwelveData", api_key="secret"), TwelveDataQuoteSource)
    assert isinstance(create_quote_source("yahoo"), YahooQuoteSource)
