"""Shared fixtures: recording console, temporary config store, fake HTTP session."""

import io

import pytest
import requests
from rich.console import Console

from config_store import ConfigStore
from data_fetcher import PriceClient


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")

    def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


class FakeSession:
    """Stands in for requests.Session, answering from a handler function."""

    def __init__(self, handler):
        self.handler = handler
        self.headers = {}
        self.calls = []

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append({"url": url, "params": params, "headers": headers, "timeout": timeout})
        return self.handler(url, params or {})


def coingecko_handler(prices, changes=None):
    """Answer /coins/markets with ``prices`` keyed by lower-case currency code."""
    changes = changes or {}

    def handler(url, params):
        vs_currency = params["vs_currency"]
        if vs_currency not in prices:
            return FakeResponse({"error": "invalid vs_currency"}, status_code=400)
        return FakeResponse([{
            "id": "bitcoin",
            "current_price": prices[vs_currency],
            "price_change_percentage_1h_in_currency": changes.get("1h"),
            "price_change_percentage_24h_in_currency": changes.get("24h"),
            "price_change_percentage_7d_in_currency": changes.get("7d"),
        }])

    return handler


@pytest.fixture
def console():
    return Console(file=io.StringIO(), width=200, color_system=None, highlight=False)


@pytest.fixture
def output(console):
    return lambda: console.file.getvalue()


@pytest.fixture
def store(tmp_path):
    return ConfigStore(str(tmp_path / "config.json"))


@pytest.fixture
def market_session():
    return FakeSession(coingecko_handler(
        {"usd": 16258, "nok": 130064, "eur": 15500.456},
        {"1h": -0.0812, "24h": 1.234, "7d": 5.5},
    ))


@pytest.fixture
def client(market_session):
    return PriceClient(session=market_session)
