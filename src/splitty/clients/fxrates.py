"""Historical exchange-rate API client."""

import logging
from datetime import date
from decimal import Decimal

import httpx

from ..exceptions import RatesAPIError

logger = logging.getLogger(__name__)


class FxRatesClient:
    """Client for the fxratesapi.com historical rates endpoint."""

    BASE_URL = "https://api.fxratesapi.com"

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the rates client."""
        self.client = httpx.Client(
            base_url=base_url or self.BASE_URL,
            headers={"Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    def close(self):
        """Close the HTTP client."""
        self.client.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()

    def get_historical_rate(
        self, on: date, from_currency: str, to_currency: str
    ) -> Decimal:
        """
        Get the exchange rate from one currency to another on a given day.

        Args:
            on: The day the rate should be valid for
            from_currency: ISO code of the source currency
            to_currency: ISO code of the target currency

        Returns:
            Units of to_currency per unit of from_currency

        Raises:
            httpx.HTTPError: If the request fails
            RatesAPIError: If the response does not contain the rate
        """
        params = {
            "date": on.isoformat(),
            "base": from_currency,
            "currencies": to_currency,
        }
        response = self.client.get("/historical", params=params)
        response.raise_for_status()
        data = response.json(parse_float=Decimal)

        if data.get("success") is False:
            raise RatesAPIError(
                f"Rates API refused {from_currency}->{to_currency} on {on}: "
                f"{data.get('description') or data.get('error') or 'unknown error'}"
            )

        rate = (data.get("rates") or {}).get(to_currency)
        if rate is None:
            raise RatesAPIError(
                f"Rates API returned no {to_currency} rate for base "
                f"{from_currency} on {on}"
            )

        rate = Decimal(str(rate))
        if rate <= 0:
            raise RatesAPIError(f"Rates API returned a non-positive rate: {rate}")

        logger.debug(f"Fetched rate {from_currency}->{to_currency} on {on}: {rate}")
        return rate
