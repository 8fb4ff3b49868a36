"""Bitcoin price and percentage change from CoinGecko or CoinMarketCap."""

import logging
import math
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any

import requests

from config import (
    CMC_BASE_URL,
    COINGECKO_BASE_URL,
    REQUEST_TIMEOUT,
    SUPPORTED_PROVIDERS,
)
from currencies import CURRENCIES, Currency

logger = logging.getLogger(__name__)


class NetworkError(Exception):
    """Raised when a price provider could not be reached or answered nonsense."""


class PercentageWindow(Enum):
    HOUR = "1h"
    DAY = "24h"
    WEEK = "7d"


def _to_number(value: Any, what: str) -> float:
    """Coerce a payload field to a finite float, raising NetworkError otherwise."""
    if value is None or isinstance(value, bool):
        raise NetworkError(f"Missing {what}")
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise NetworkError(f"Malformed {what}: {value!r}") from e
    if not math.isfinite(number):
        raise NetworkError(f"Malformed {what}: {value!r}")
    return number


def format_value(value: float, as_decimal: bool = False) -> str:
    """Round half up to whole units, or to at most two decimals when ``as_decimal``."""
    amount = Decimal(str(value))
    if as_decimal:
        rounded = amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
        text = f"{rounded:f}"
        if "." in text:
            text = text.rstrip("0").rstrip(".")
        return text
    return f"{amount.quantize(Decimal('1'), rounding=ROUND_HALF_UP):f}"


class PriceClient:
    """Fetches Bitcoin market data from the configured provider."""

    def __init__(self, provider: str = "coingecko", api_key: str = "", session: requests.Session | None = None):
        self.session = session or requests.Session()
        self.session.headers.update({
            "User-Agent": "btc-value/1.0"
        })
        self.api_key = api_key
        self.provider = "coingecko"
        self.set_provider(provider)

    def set_api_key(self, key: str) -> None:
        self.api_key = key

    def set_provider(self, provider: str) -> None:
        if provider not in SUPPORTED_PROVIDERS:
            raise ValueError(f"Unsupported provider: {provider!r}")
        self.provider = provider

    def list_currencies(self) -> list[Currency]:
        """Currencies the providers can convert into, in display order."""
        return list(CURRENCIES)

    def _get_json(self, url: str, params: dict = None, headers: dict = None) -> Any:
        """GET ``url`` and decode the JSON body, raising NetworkError on any failure."""
        logger.debug("GET %s params=%s", url, params)
        try:
            response = self.session.get(url, params=params, headers=headers, timeout=REQUEST_TIMEOUT)
            response.raise_for_status()
            return response.json()
        except requests.RequestException as e:
            raise NetworkError(f"Request to {url} failed: {e}") from e
        except ValueError as e:
            raise NetworkError(f"Invalid JSON from {url}: {e}") from e

    def _fetch_coingecko_market(self, currency_code: str) -> dict[str, Any]:
        url = f"{COINGECKO_BASE_URL}/coins/markets"
        params = {
            "vs_currency": currency_code.lower(),
            "ids": "bitcoin",
            "price_change_percentage": "1h,24h,7d",
        }
        data = self._get_json(url, params)
        if not isinstance(data, list) or not data or not isinstance(data[0], dict):
            raise NetworkError("CoinGecko returned no market data for bitcoin")
        return data[0]

    def _fetch_cmc_quote(self, currency_code: str) -> dict[str, Any]:
        url = f"{CMC_BASE_URL}/cryptocurrency/quotes/latest"
        params = {"symbol": "BTC", "convert": currency_code.upper()}
        headers = {"X-CMC_PRO_API_KEY": self.api_key, "Accept": "application/json"}
        data = self._get_json(url, params, headers)
        try:
            quote = data["data"]["BTC"]["quote"][currency_code.upper()]
        except (KeyError, TypeError) as e:
            raise NetworkError(f"CoinMarketCap returned no quote for {currency_code}") from e
        if not isinstance(quote, dict):
            raise NetworkError(f"CoinMarketCap returned no quote for {currency_code}")
        return quote

    def fetch_price(self, currency_code: str = "USD") -> float:
        """Current price of one Bitcoin in ``currency_code``."""
        if self.provider == "cmc":
            price = self._fetch_cmc_quote(currency_code).get("price")
        else:
            price = self._fetch_coingecko_market(currency_code).get("current_price")

        return _to_number(price, f"{self.provider} price for {currency_code}")

    def get_price(self, currency_code: str = "USD", quantity: float = 1, as_decimal: bool = False) -> str:
        """Formatted value of ``quantity`` Bitcoin in ``currency_code``."""
        price = self.fetch_price(currency_code)
        return format_value(price * quantity, as_decimal)

    def get_percentage_change(self, window: PercentageWindow) -> float:
        """Percentage change of the USD price over ``window``, rounded to two decimals."""
        if self.provider == "cmc":
            key = {
                PercentageWindow.HOUR: "percent_change_1h",
                PercentageWindow.DAY: "percent_change_24h",
                PercentageWindow.WEEK: "percent_change_7d",
            }[window]
            change = self._fetch_cmc_quote("USD").get(key)
        else:
            key = f"price_change_percentage_{window.value}_in_currency"
            change = self._fetch_coingecko_market("USD").get(key)

        return round(_to_number(change, f"{self.provider} {window.value} percentage change"), 2)
