# src/ratetick/adapters/providers/binance.py
"""
Binance API Provider for Crypto/EUR Exchange Rates

This module implements the Binance public market-data client. It fetches the
latest price of a fixed set of symbols, one request per pair, and tolerates
partial failures: a pair that fails is logged and skipped, and only a cycle
where every pair fails is reported as an error.

Files that USE this module:
- ratetick.adapters.providers.registry (registered under the name "binance")
- tests.test_providers (unit tests)

Files that this module USES:
- ratetick.adapters.providers.base (RateSource interface)
- ratetick.domain.errors (ProviderError)
- ratetick.config (settings for base URL and HTTP timeout)
"""
import logging
import requests
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

from ratetick import __version__
from ratetick.adapters.providers.base import RateSource
from ratetick.config import settings
from ratetick.domain.errors import ProviderError, ValidationError
from ratetick.domain.models import normalize_rate

log = logging.getLogger(__name__)


class BinanceProvider(RateSource):
    """
    Binance spot API provider.

    Uses GET {base_url}/ticker/price?symbol=BTCEUR which returns
    {"symbol": "BTCEUR", "price": "45000.12000000"}.
    """

    PROVIDER_NAME = "Binance"
    TICKER_PATH = "/ticker/price"
    DOCUMENTATION_URL = "https://developers.binance.com/docs/binance-spot-api-docs"
    RATE_LIMIT = "1200 requests per minute"

    PAIRS: Dict[str, str] = {
        "EUR/BTC": "BTCEUR",
        "EUR/ETH": "ETHEUR",
        "EUR/LTC": "LTCEUR",
    }

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[int] = None):
        """
        Initialize Binance API provider.

        Args:
            base_url: Optional custom API base URL (defaults to settings.binance_base_url)
            timeout: Optional HTTP timeout in seconds (defaults to settings.http_timeout_seconds)
        """
        self.base_url = (base_url or settings.binance_base_url).rstrip("/")
        self.timeout = timeout or settings.http_timeout_seconds
        self.headers = {
            "User-Agent": f"ratetick/{__version__}",
            "Accept": "application/json",
        }

    @property
    def url(self) -> str:
        return self.base_url + self.TICKER_PATH

    def fetch_rates(self) -> Dict[str, str]:
        """
        Fetch the latest price for every supported pair.

        Returns:
            Mapping of pair to price string for the pairs that succeeded

        Raises:
            ProviderError: If no pair could be fetched
        """
        rates: Dict[str, str] = {}

        for pair, symbol in self.PAIRS.items():
            try:
                rate = self._fetch_single_rate(symbol)
            except ProviderError as e:
                log.warning(
                    "Failed to fetch rate from %s: pair=%s symbol=%s error=%s",
                    self.PROVIDER_NAME, pair, symbol, e,
                )
                continue

            rates[pair] = rate
            log.info(
                "Fetched rate from %s: pair=%s symbol=%s rate=%s",
                self.PROVIDER_NAME, pair, symbol, rate,
            )

        if not rates:
            raise ProviderError(f"Failed to fetch any exchange rates from {self.PROVIDER_NAME} API")

        return rates

    def _fetch_single_rate(self, symbol: str) -> str:
        """
        Fetch the price of one Binance symbol.

        Args:
            symbol: Binance symbol (e.g. "BTCEUR")

        Returns:
            Price as returned by the API, as a string

        Raises:
            ProviderError: On transport errors, non-200 status, invalid JSON, or a missing or unstorable price
        """
        try:
            resp = requests.get(
                self.url,
                params={"symbol": symbol},
                headers=self.headers,
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            raise ProviderError(f"Binance API timeout after {self.timeout}s for symbol {symbol}") from e
        except requests.exceptions.RequestException as e:
            raise ProviderError(f"HTTP client error for symbol {symbol}: {e}") from e

        if resp.status_code != 200:
            raise ProviderError(f"HTTP {resp.status_code} response from Binance API for symbol {symbol}")

        try:
            data = resp.json()
        except ValueError as e:
            raise ProviderError(f"Binance API returned invalid JSON for symbol {symbol}: {e}") from e

        price = data.get("price") if isinstance(data, dict) else None
        if not self._is_numeric(price):
            log.debug("Binance unexpected response for %s: %r", symbol, data)
            raise ProviderError(f"Invalid response format from Binance API for symbol {symbol}")

        try:
            normalize_rate(str(price).strip())
        except ValidationError as e:
            raise ProviderError(f"Out-of-range price from Binance API for symbol {symbol}: {price!r}") from e

        return str(price)

    @staticmethod
    def _is_numeric(value: Any) -> bool:
        """True for ints, floats and numeric strings; False for bools, None and NaN/inf."""
        if value is None or isinstance(value, bool):
            return False
        if not isinstance(value, (int, float, str)):
            return False
        try:
            return Decimal(str(value).strip()).is_finite()
        except InvalidOperation:
            return False

    def get_supported_pairs(self) -> Dict[str, str]:
        return dict(self.PAIRS)

    def is_pair_supported(self, pair: str) -> bool:
        return pair in self.PAIRS

    def get_provider_name(self) -> str:
        return self.PROVIDER_NAME

    def get_provider_info(self) -> Dict[str, Any]:
        return {
            "name": self.PROVIDER_NAME,
            "base_url": self.base_url,
            "timeout": self.timeout,
            "supported_pairs_count": len(self.PAIRS),
            "rate_limit": self.RATE_LIMIT,
            "documentation": self.DOCUMENTATION_URL,
        }
