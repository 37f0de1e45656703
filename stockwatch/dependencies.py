"""Quote source wiring."""
from stockwatch.domain.errors import ConfigError
from stockwatch.domain.interfaces import QuoteSource
from stockwatch.infrastructure.twelve_data_client import TwelveDataQuoteSource
from stockwatch.infrastructure.yahoo_client import YahooQuoteSource

PROVIDERS = ("twelvedata", "yahoo")


def create_quote_source(
    provider: str,
    api_key: str = "",
    base_url: str = "https://api.twelvedata.com",
    timeout: float = 10.0,
) -> QuoteSource:
    """Build the configured quote source, failing fast on missing settings."""
    provider = (provider or "").strip().lower()
    if provider == "twelvedata":
        if not api_key:
            raise ConfigError("API_KEY is required for the twelvedata provider")
        return TwelveDataQuoteSource(api_key=api_key, base_url=base_url, timeout=timeout)
    if provider == "yahoo":
        return YahooQuoteSource()
    raise ConfigError(
        f"Unknown quote provider {provider!r}, expected one of: {', '.join(PROVIDERS)}"
    )
