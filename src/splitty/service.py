"""Service layer that composes rate lookup, balances, settlement and allocation.

This module provides a higher-level API over events. The engine functions it
calls are pure; the only I/O happens in the rate converter.
"""

import logging
import random
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from datetime import date
from decimal import Decimal

from .allocation import allocate
from .balances import compute_balances, compute_summaries
from .clients.fxrates import FxRatesClient
from .config import Settings
from .converter import CachingRateConverter, CurrencyConverter
from .db import Database
from .exceptions import ParticipantNotFoundError
from .models import Event, Expense, Participant, ParticipantSummary, SettlementReport
from .settlement import settle

logger = logging.getLogger(__name__)


class LedgerService:
    """Service for computing balances and settlements of events."""

    def __init__(
        self,
        settings: Settings,
        database: Database,
        converter: CurrencyConverter | None = None,
    ):
        """
        Initialize the ledger service.

        Args:
            settings: Application settings
            database: Database holding the rate cache
            converter: Converter to use instead of the cached rates API
        """
        self.settings = settings
        self.db = database
        self.converter = converter

    @contextmanager
    def _open_converter(self) -> Iterator[CurrencyConverter]:
        if self.converter is not None:
            yield self.converter
            return

        with FxRatesClient(
            base_url=self.settings.rates_api_url,
            timeout=self.settings.rates_timeout,
        ) as client:
            yield CachingRateConverter(client, self.db)

    def compute_balances(
        self, event: Event, base_currency: str | None = None
    ) -> dict[Participant, int]:
        """
        Compute each participant's net balance in the base currency.

        Raises:
            ConversionUnavailable: If an expense's currency cannot be converted
        """
        currency = base_currency or self.settings.base_currency
        with self._open_converter() as converter:
            return compute_balances(
                event.participants, event.expenses, currency, converter
            )

    def summarize(
        self, event: Event, base_currency: str | None = None
    ) -> list[ParticipantSummary]:
        """Compute owed, debt and balance totals for every participant."""
        currency = base_currency or self.settings.base_currency
        with self._open_converter() as converter:
            return compute_summaries(
                event.participants, event.expenses, currency, converter
            )

    def settle_event(
        self, event: Event, base_currency: str | None = None
    ) -> SettlementReport:
        """
        Compute balances for an event and the payments that settle them.

        Args:
            event: The event to settle
            base_currency: Currency to settle in (defaults to settings)

        Returns:
            Report with per-participant totals and the payments
        """
        currency = base_currency or self.settings.base_currency
        summaries = self.summarize(event, currency)
        balances = {s.participant: s.balance_cents for s in summaries}

        debts = settle(balances)
        slack = abs(sum(balances.values()))

        logger.info(
            f"Settled event '{event.title}' in {currency}: "
            f"{len(debts)} payments, {slack} unit(s) of rounding slack"
        )

        return SettlementReport(
            base_currency=currency,
            summaries=summaries,
            debts=debts,
            slack_cents=slack,
        )

    def split_expense(
        self,
        event: Event,
        *,
        title: str,
        amount_cents: int,
        currency: str,
        on: date,
        payee_ref: str | int,
        participant_refs: Sequence[str | int] | None = None,
        seed: int | None = None,
        rng: random.Random | None = None,
    ) -> Expense:
        """
        Create an expense whose amount is allocated across participants.

        When participant_refs is None the expense is shared by everyone in the
        event. Otherwise it is shared by the referenced participants; the payee
        is always included.

        Returns:
            The new expense (the event itself is not modified)

        Raises:
            ParticipantNotFoundError: If a reference matches nobody
            InvalidAmount: If amount_cents is negative
        """
        payee = find_participant(event, payee_ref)

        if participant_refs is None:
            participants = list(event.participants)
        else:
            participants = [payee]
            for ref in participant_refs:
                participant = find_participant(event, ref)
                if participant not in participants:
                    participants.append(participant)

        split = allocate(amount_cents, payee, participants, rng=rng, seed=seed)

        next_id = max((e.id or 0 for e in event.expenses), default=0) + 1
        expense = Expense(
            id=next_id,
            title=title,
            amount_cents=amount_cents,
            currency=currency,
            date=on,
            payee=payee,
            split=tuple(split),
        )

        logger.info(
            f"Split '{title}' ({amount_cents} {currency}) paid by {payee.name} "
            f"across {len(participants)} participants"
        )

        return expense

    def get_rate(self, on: date, from_currency: str, to_currency: str) -> Decimal:
        """Get the exchange rate for one major unit of from_currency."""
        with self._open_converter() as converter:
            return converter.convert(on, from_currency, to_currency, 100) / 100


def find_participant(event: Event, ref: str | int) -> Participant:
    """
    Find a participant by id or by case-insensitive name.

    Raises:
        ParticipantNotFoundError: If nobody matches
    """
    text = str(ref).strip()
    if text.isdigit():
        for participant in event.participants:
            if participant.id == int(text):
                return participant

    for participant in event.participants:
        if participant.name.lower() == text.lower():
            return participant

    raise ParticipantNotFoundError(ref)
