"""Net balance computation from an event's expenses."""

import logging
from collections.abc import Iterable, Sequence
from decimal import Decimal

from .converter import CurrencyConverter
from .models import Expense, Participant, ParticipantSummary
from .money import round_cents

logger = logging.getLogger(__name__)


def _accumulate(
    participants: Iterable[Participant],
    expenses: Sequence[Expense],
    base_currency: str,
    converter: CurrencyConverter,
) -> tuple[dict[Participant, Decimal], dict[Participant, Decimal]]:
    """
    Sum, without rounding, what each participant is owed and owes.

    A share held by the payee is skipped entirely. Only shares involving one of
    the given participants are converted, so an unknown rate on an unrelated
    expense does not fail the computation.

    Returns:
        Tuple of (owed, debt) in base-currency minor units
    """
    owed = {p: Decimal(0) for p in participants}
    debt = {p: Decimal(0) for p in owed}

    for expense in expenses:
        payee_tracked = expense.payee in owed
        for share in expense.split:
            if share.participant == expense.payee:
                continue

            participant_tracked = share.participant in debt
            if not (payee_tracked or participant_tracked):
                continue

            converted = converter.convert(
                expense.date, expense.currency, base_currency, share.amount_cents
            )
            if participant_tracked:
                debt[share.participant] += converted
            if payee_tracked:
                owed[expense.payee] += converted

    return owed, debt


def compute_balance(
    participant: Participant,
    expenses: Sequence[Expense],
    base_currency: str,
    converter: CurrencyConverter,
) -> int:
    """
    Compute one participant's net balance.

    Args:
        participant: Participant to compute the balance for
        expenses: The event's expenses
        base_currency: Currency the balance is expressed in
        converter: Converts each share into the base currency

    Returns:
        Balance in base-currency minor units; positive means they are owed money

    Raises:
        ConversionUnavailable: If a share cannot be converted
    """
    owed, debt = _accumulate([participant], expenses, base_currency, converter)
    return round_cents(owed[participant] - debt[participant])


def compute_balances(
    participants: Iterable[Participant],
    expenses: Sequence[Expense],
    base_currency: str,
    converter: CurrencyConverter,
) -> dict[Participant, int]:
    """
    Compute the net balance of every participant.

    Each balance is rounded once, after all expenses are accumulated.

    Args:
        participants: Participants to report, in the order they should appear
        expenses: The event's expenses
        base_currency: Currency the balances are expressed in
        converter: Converts each share into the base currency

    Returns:
        Mapping of participant to balance in base-currency minor units

    Raises:
        ConversionUnavailable: If a share cannot be converted
    """
    owed, debt = _accumulate(participants, expenses, base_currency, converter)
    balances = {p: round_cents(owed[p] - debt[p]) for p in owed}

    logger.debug(
        f"Computed {len(balances)} balances in {base_currency} "
        f"from {len(expenses)} expenses (sum: {sum(balances.values())})"
    )

    return balances


def compute_summaries(
    participants: Iterable[Participant],
    expenses: Sequence[Expense],
    base_currency: str,
    converter: CurrencyConverter,
) -> list[ParticipantSummary]:
    """Compute owed, debt and balance totals for every participant."""
    owed, debt = _accumulate(participants, expenses, base_currency, converter)
    return [
        ParticipantSummary(
            participant=p,
            owed_cents=round_cents(owed[p]),
            debt_cents=round_cents(debt[p]),
            balance_cents=round_cents(owed[p] - debt[p]),
        )
        for p in owed
    ]
