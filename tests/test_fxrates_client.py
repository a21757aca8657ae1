"""Tests for the exchange-rate API client."""

from datetime import date
from decimal import Decimal

import httpx
import pytest

from splitty.clients.fxrates import FxRatesClient
from splitty.exceptions import RatesAPIError


def make_client(handler) -> FxRatesClient:
    return FxRatesClient(
        base_url="https://rates.test", transport=httpx.MockTransport(handler)
    )


class TestGetHistoricalRate:
    """Parsing of the /historical endpoint."""

    def test_returns_decimal_rate(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["params"] = dict(request.url.params)
            return httpx.Response(
                200,
                content=b'{"success": true, "base": "USD", "rates": {"EUR": 0.912345}}',
                headers={"Content-Type": "application/json"},
            )

        with make_client(handler) as client:
            rate = client.get_historical_rate(date(2024, 1, 31), "USD", "EUR")

        assert rate == Decimal("0.912345")
        assert seen["path"] == "/historical"
        assert seen["params"] == {
            "date": "2024-01-31",
            "base": "USD",
            "currencies": "EUR",
        }

    def test_missing_currency_raises(self):
        def handler(request):
            return httpx.Response(200, json={"success": True, "rates": {"GBP": 0.8}})

        with make_client(handler) as client:
            with pytest.raises(RatesAPIError, match="no EUR rate"):
                client.get_historical_rate(date(2024, 1, 31), "USD", "EUR")

    def test_unsuccessful_response_raises(self):
        def handler(request):
            return httpx.Response(
                200, json={"success": False, "description": "Invalid base currency"}
            )

        with make_client(handler) as client:
            with pytest.raises(RatesAPIError, match="Invalid base currency"):
                client.get_historical_rate(date(2024, 1, 31), "XXX", "EUR")

    def test_http_error_propagates(self):
        def handler(request):
            return httpx.Response(503)

        with make_client(handler) as client:
            with pytest.raises(httpx.HTTPStatusError):
                client.get_historical_rate(date(2024, 1, 31), "USD", "EUR")
