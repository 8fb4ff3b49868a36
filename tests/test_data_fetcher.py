"""Tests for the price client against canned provider responses."""

import pytest
import requests

from conftest import FakeResponse, FakeSession, coingecko_handler
from data_fetcher import NetworkError, PercentageWindow, PriceClient, format_value


class TestFormatValue:
    def test_integer_rounds_half_up(self):
        assert format_value(16258.5) == "16259"
        assert format_value(16258.49) == "16258"

    def test_decimal_keeps_two_places(self):
        assert format_value(16258.236, as_decimal=True) == "16258.24"
        assert format_value(16258.205, as_decimal=True) == "16258.21"

    def test_decimal_drops_trailing_zeros(self):
        assert format_value(16258.2, as_decimal=True) == "16258.2"
        assert format_value(16258.0, as_decimal=True) == "16258"


class TestCoinGecko:
    def test_price_multiplied_by_quantity(self, client):
        assert client.get_price("NOK", quantity=2) == "260128"

    def test_decimal_price(self, client):
        assert client.get_price("eur", as_decimal=True) == "15500.46"

    def test_requests_bitcoin_market_in_currency(self, client, market_session):
        client.get_price("NOK")

        call = market_session.calls[0]
        assert call["url"].endswith("/coins/markets")
        assert call["params"]["vs_currency"] == "nok"
        assert call["params"]["ids"] == "bitcoin"
        assert call["timeout"] > 0

    @pytest.mark.parametrize("window,expected", [
        (PercentageWindow.HOUR, -0.08),
        (PercentageWindow.DAY, 1.23),
        (PercentageWindow.WEEK, 5.5),
    ])
    def test_percentage_change(self, client, window, expected):
        assert client.get_percentage_change(window) == expected

    def test_no_api_key_header(self, client, market_session):
        client.get_price()

        assert not market_session.calls[0]["headers"]

    def test_user_agent_set(self, client, market_session):
        assert "btc-value" in market_session.headers["User-Agent"]


class TestCoinMarketCap:
    @pytest.fixture
    def cmc_session(self):
        def handler(url, params):
            code = params["convert"]
            return FakeResponse({"data": {"BTC": {"quote": {code: {
                "price": {"USD": 16258.0, "NOK": 130064.0}[code],
                "percent_change_1h": 0.1234,
                "percent_change_24h": -2.5,
                "percent_change_7d": 10.0,
            }}}}})

        return FakeSession(handler)

    def test_price_uses_key_header(self, cmc_session):
        client = PriceClient(provider="cmc", api_key="secret", session=cmc_session)

        assert client.get_price("nok") == "130064"
        call = cmc_session.calls[0]
        assert call["headers"]["X-CMC_PRO_API_KEY"] == "secret"
        assert call["params"] == {"symbol": "BTC", "convert": "NOK"}

    def test_percentage_change(self, cmc_session):
        client = PriceClient(provider="cmc", api_key="secret", session=cmc_session)

        assert client.get_percentage_change(PercentageWindow.HOUR) == 0.12
        assert client.get_percentage_change(PercentageWindow.DAY) == -2.5

    def test_missing_quote_is_network_error(self):
        session = FakeSession(lambda url, params: FakeResponse({"status": {"error_code": 1002}}))
        client = PriceClient(provider="cmc", api_key="bad", session=session)

        with pytest.raises(NetworkError):
            client.get_price("USD")


class TestFailures:
    def test_connection_error(self):
        def handler(url, params):
            raise requests.ConnectionError("offline")

        client = PriceClient(session=FakeSession(handler))

        with pytest.raises(NetworkError):
            client.get_price()

    def test_http_error_status(self):
        client = PriceClient(session=FakeSession(coingecko_handler({"usd": 1})))

        with pytest.raises(NetworkError):
            client.get_price("NOK")

    def test_invalid_json(self):
        session = FakeSession(lambda url, params: FakeResponse(ValueError("bad json")))
        client = PriceClient(session=session)

        with pytest.raises(NetworkError):
            client.get_price()

    def test_empty_market_list(self):
        client = PriceClient(session=FakeSession(lambda url, params: FakeResponse([])))

        with pytest.raises(NetworkError):
            client.get_percentage_change(PercentageWindow.DAY)

    @pytest.mark.parametrize("payload", [["bitcoin"], [None], "bitcoin", {"current_price": 1}])
    def test_coingecko_non_object_market(self, payload):
        client = PriceClient(session=FakeSession(lambda url, params: FakeResponse(payload)))

        with pytest.raises(NetworkError):
            client.get_price()

    @pytest.mark.parametrize("price", ["n/a", [], {"usd": 1}, "NaN", True])
    def test_coingecko_malformed_price(self, price):
        session = FakeSession(lambda url, params: FakeResponse([{"current_price": price}]))
        client = PriceClient(session=session)

        with pytest.raises(NetworkError):
            client.get_price()

    def test_cmc_non_object_quote(self):
        session = FakeSession(lambda url, params: FakeResponse({"data": {"BTC": {"quote": {"USD": "down"}}}}))
        client = PriceClient(provider="cmc", api_key="key", session=session)

        with pytest.raises(NetworkError):
            client.get_percentage_change(PercentageWindow.HOUR)

    def test_cmc_malformed_percentage(self):
        quote = {"price": 16258.0, "percent_change_24h": "soon"}
        session = FakeSession(lambda url, params: FakeResponse({"data": {"BTC": {"quote": {"USD": quote}}}}))
        client = PriceClient(provider="cmc", api_key="key", session=session)

        with pytest.raises(NetworkError):
            client.get_percentage_change(PercentageWindow.DAY)


def test_unknown_provider_rejected():
    with pytest.raises(ValueError):
        PriceClient(provider="binance", session=FakeSession(None))


def test_set_provider_and_key():
    client = PriceClient(session=FakeSession(None))
    client.set_provider("cmc")
    client.set_api_key("abc")

    assert client.provider == "cmc"
    assert client.api_key == "abc"
