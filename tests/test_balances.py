"""Tests for balance computation."""

from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from pydantic import ValidationError

from splitty.balances import compute_balance, compute_balances, compute_summaries
from splitty.converter import StaticRateConverter
from splitty.exceptions import ConversionUnavailable
from splitty.models import Expense, Participant, ParticipantShare


def make_expense(
    payee: Participant,
    shares: list[tuple[Participant, int]],
    currency: str = "EUR",
    on: date = date(2024, 3, 1),
) -> Expense:
    """Create an expense whose amount is the sum of its shares."""
    return Expense(
        title="Test expense",
        amount_cents=sum(amount for _, amount in shares),
        currency=currency,
        date=on,
        payee=payee,
        split=tuple(ParticipantShare(participant=p, amount_cents=a) for p, a in shares),
    )


@pytest.fixture
def converter():
    return StaticRateConverter({("USD", "EUR"): Decimal("0.5")})


class TestNetting:
    """Balances net what a participant fronted against what they owe."""

    def test_scenario_three_way_split(self, alice, bob, carol, converter):
        """10.00 paid by Alice, split 3.34/3.33/3.33."""
        expenses = [make_expense(alice, [(alice, 334), (bob, 333), (carol, 333)])]

        balances = compute_balances([alice, bob, carol], expenses, "EUR", converter)

        assert balances == {alice: 666, bob: -333, carol: -333}
        assert sum(balances.values()) == 0

    def test_single_balance_matches_full_map(self, alice, bob, carol, converter):
        """compute_balance agrees with compute_balances."""
        expenses = [
            make_expense(alice, [(alice, 500), (bob, 500)]),
            make_expense(bob, [(bob, 200), (carol, 700)]),
        ]

        balances = compute_balances([alice, bob, carol], expenses, "EUR", converter)

        for participant in (alice, bob, carol):
            assert (
                compute_balance(participant, expenses, "EUR", converter)
                == balances[participant]
            )
        assert balances == {alice: 500, bob: 200, carol: -700}

    def test_self_share_is_never_converted(self, alice, bob):
        """The payee's own share contributes nothing and is skipped."""
        spy = MagicMock()
        spy.convert.side_effect = lambda on, f, t, amount: Decimal(amount)
        expenses = [make_expense(alice, [(alice, 600), (bob, 400)])]

        balances = compute_balances([alice, bob], expenses, "EUR", spy)

        assert balances == {alice: 400, bob: -400}
        converted_amounts = [call.args[3] for call in spy.convert.call_args_list]
        assert 600 not in converted_amounts

    def test_payee_only_expense_nets_to_zero(self, alice, bob, converter):
        """An expense the payee shares with nobody leaves everyone at zero."""
        expenses = [make_expense(alice, [(alice, 1000)])]

        assert compute_balances([alice, bob], expenses, "EUR", converter) == {
            alice: 0,
            bob: 0,
        }

    def test_no_expenses(self, alice, bob, converter):
        assert compute_balances([alice, bob], [], "EUR", converter) == {
            alice: 0,
            bob: 0,
        }


class TestConservation:
    """Balances over all participants add up to zero."""

    def test_many_expenses_sum_to_zero(self, alice, bob, carol, dave, converter):
        everyone = [alice, bob, carol, dave]
        expenses = [
            make_expense(alice, [(alice, 2500), (bob, 2500), (carol, 2500), (dave, 2500)]),
            make_expense(bob, [(bob, 1234), (carol, 1233)]),
            make_expense(dave, [(alice, 999), (carol, 1)]),
            make_expense(carol, [(carol, 50), (dave, 50)], currency="USD"),
        ]

        balances = compute_balances(everyone, expenses, "EUR", converter)

        assert abs(sum(balances.values())) <= 1

    def test_is_idempotent(self, alice, bob, carol, converter):
        """Same inputs, same balances."""
        expenses = [
            make_expense(alice, [(alice, 334), (bob, 333), (carol, 333)]),
            make_expense(carol, [(bob, 123)], currency="USD"),
        ]

        first = compute_balances([alice, bob, carol], expenses, "EUR", converter)
        second = compute_balances([alice, bob, carol], expenses, "EUR", converter)

        assert first == second


class TestCurrencyConversion:
    """Shares are converted to the base currency before netting."""

    def test_foreign_expense_is_converted(self, alice, bob, converter):
        expenses = [make_expense(alice, [(alice, 1000), (bob, 1000)], currency="USD")]

        balances = compute_balances([alice, bob], expenses, "EUR", converter)

        assert balances == {alice: 500, bob: -500}

    def test_rounds_once_after_accumulating(self, alice, bob, converter):
        """Two half-cent shares add up to one cent, not two."""
        expenses = [
            make_expense(alice, [(bob, 1)], currency="USD"),
            make_expense(alice, [(bob, 1)], currency="USD"),
        ]

        balances = compute_balances([alice, bob], expenses, "EUR", converter)

        assert balances == {alice: 1, bob: -1}

    def test_rounds_half_up(self, alice, bob, converter):
        """A single half cent rounds away from zero on both sides."""
        expenses = [make_expense(alice, [(bob, 1)], currency="USD")]

        balances = compute_balances([alice, bob], expenses, "EUR", converter)

        assert balances == {alice: 1, bob: -1}

    def test_missing_rate_propagates(self, alice, bob, converter):
        """An unknown rate raises ConversionUnavailable, no default is used."""
        expenses = [make_expense(alice, [(alice, 100), (bob, 100)], currency="JPY")]

        with pytest.raises(ConversionUnavailable) as exc_info:
            compute_balances([alice, bob], expenses, "EUR", converter)

        assert exc_info.value.from_currency == "JPY"
        assert exc_info.value.to_currency == "EUR"
        assert exc_info.value.on == date(2024, 3, 1)

    def test_unrelated_missing_rate_does_not_fail(self, alice, bob, carol, converter):
        """Only shares involving the requested participant are converted."""
        expenses = [
            make_expense(alice, [(alice, 100), (carol, 100)]),
            make_expense(bob, [(bob, 100), (carol, 100)], currency="JPY"),
        ]

        assert compute_balance(alice, expenses, "EUR", converter) == 100
        with pytest.raises(ConversionUnavailable):
            compute_balance(bob, expenses, "EUR", converter)


class TestSummaries:
    """Owed and debt totals per participant."""

    def test_owed_debt_and_balance(self, alice, bob, carol, converter):
        expenses = [
            make_expense(alice, [(alice, 300), (bob, 300), (carol, 300)]),
            make_expense(bob, [(alice, 100), (bob, 100)]),
        ]

        summaries = compute_summaries([alice, bob, carol], expenses, "EUR", converter)
        by_participant = {s.participant: s for s in summaries}

        assert [s.participant for s in summaries] == [alice, bob, carol]
        assert by_participant[alice].owed_cents == 600
        assert by_participant[alice].debt_cents == 100
        assert by_participant[alice].balance_cents == 500
        assert by_participant[bob].owed_cents == 100
        assert by_participant[bob].debt_cents == 300
        assert by_participant[bob].balance_cents == -200
        assert by_participant[carol].balance_cents == -300


class TestExpenseValidation:
    """Malformed expenses are rejected before they reach the engine."""

    def test_split_must_add_up(self, alice, bob):
        with pytest.raises(ValidationError, match="add up to"):
            Expense(
                amount_cents=1000,
                currency="EUR",
                date=date(2024, 3, 1),
                payee=alice,
                split=(
                    ParticipantShare(participant=alice, amount_cents=500),
                    ParticipantShare(participant=bob, amount_cents=400),
                ),
            )

    def test_amount_must_be_positive(self, alice):
        with pytest.raises(ValidationError):
            make_expense(alice, [(alice, 0)])

    def test_split_must_not_be_empty(self, alice):
        with pytest.raises(ValidationError):
            Expense(
                amount_cents=100,
                currency="EUR",
                date=date(2024, 3, 1),
                payee=alice,
                split=(),
            )
