"""Currency conversion for balance computation.

Converters take and return minor units. The result is a Decimal that is not
rounded: callers accumulate converted values and round once at the end.
"""

import logging
from collections.abc import Mapping
from datetime import date
from decimal import Decimal
from typing import Protocol

import httpx

from .clients.fxrates import FxRatesClient
from .db import Database
from .exceptions import ConversionUnavailable, RatesAPIError
from .models import ExchangeRate

logger = logging.getLogger(__name__)


class CurrencyConverter(Protocol):
    """Anything that can convert an amount between currencies on a given day."""

    def convert(
        self, on: date, from_currency: str, to_currency: str, amount_cents: int
    ) -> Decimal:
        """
        Convert amount_cents of from_currency into to_currency minor units.

        Raises:
            ConversionUnavailable: If no rate is known for the day and pair
        """
        ...


class StaticRateConverter:
    """Converter backed by a fixed {(from, to): rate} table.

    The inverse of each pair is derived when it is not listed explicitly.
    Rates do not depend on the day.
    """

    def __init__(self, rates: Mapping[tuple[str, str], Decimal] | None = None):
        self.rates: dict[tuple[str, str], Decimal] = {}
        for (from_currency, to_currency), rate in (rates or {}).items():
            self.rates[(from_currency, to_currency)] = Decimal(rate)
            self.rates.setdefault((to_currency, from_currency), 1 / Decimal(rate))

    def convert(
        self, on: date, from_currency: str, to_currency: str, amount_cents: int
    ) -> Decimal:
        if from_currency == to_currency:
            return Decimal(amount_cents)
        rate = self.rates.get((from_currency, to_currency))
        if rate is None:
            raise ConversionUnavailable(on, from_currency, to_currency)
        return amount_cents * rate


class CachingRateConverter:
    """
    Converter that looks rates up in the local cache before asking the API.

    Flow:
    1. Same currency: return the amount unchanged
    2. Check the database for a rate on that day
    3. If not cached, fetch from the rates API and cache it
    """

    def __init__(self, client: FxRatesClient, database: Database):
        """
        Initialize the converter.

        Args:
            client: Open rates API client
            database: Database holding the rate cache
        """
        self.client = client
        self.db = database

    def get_rate(self, on: date, from_currency: str, to_currency: str) -> Decimal:
        """
        Resolve the rate for a day and currency pair.

        Raises:
            ConversionUnavailable: If the rate is not cached and cannot be fetched
        """
        cached = self.db.get_rate(on, from_currency, to_currency)
        if cached:
            logger.debug(
                f"Cache hit for {from_currency}->{to_currency} on {on}: {cached.rate}"
            )
            return cached.rate

        logger.debug(f"Cache miss for {from_currency}->{to_currency} on {on}")
        try:
            rate = self.client.get_historical_rate(on, from_currency, to_currency)
        except (httpx.HTTPError, RatesAPIError) as e:
            logger.warning(
                f"Could not fetch {from_currency}->{to_currency} rate for {on}: {e}"
            )
            raise ConversionUnavailable(
                on,
                from_currency,
                to_currency,
                f"No exchange rate available for {from_currency}->{to_currency} "
                f"on {on}: {e}",
            ) from e

        self.db.save_rate(
            ExchangeRate(
                rate_date=on,
                from_currency=from_currency,
                to_currency=to_currency,
                rate=rate,
            )
        )
        logger.info(f"Cached rate {from_currency}->{to_currency} on {on}: {rate}")

        return rate

    def convert(
        self, on: date, from_currency: str, to_currency: str, amount_cents: int
    ) -> Decimal:
        if from_currency == to_currency:
            return Decimal(amount_cents)
        return amount_cents * self.get_rate(on, from_currency, to_currency)
