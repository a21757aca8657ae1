"""Pydantic domain models for Splitty."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .exceptions import ParticipantNotFoundError
from .money import from_cents

# ============================================================================
# Participants
# ============================================================================


class Participant(BaseModel):
    """A member of an event. Two participants are equal when their ids are."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    email: str | None = None
    iban: str | None = None
    bic: str | None = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Participant):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __str__(self) -> str:
        return self.name


class ParticipantShare(BaseModel):
    """One participant's assigned share of an expense, in minor units."""

    model_config = ConfigDict(frozen=True)

    participant: Participant
    amount_cents: int = Field(ge=0)


# ============================================================================
# Expenses
# ============================================================================


class Expense(BaseModel):
    """An expense fronted by the payee and split across participants.

    The split shares must add up to amount_cents exactly; the engine relies on
    this and does not check it again.
    """

    model_config = ConfigDict(frozen=True)

    id: int | None = None
    title: str = ""
    amount_cents: int = Field(gt=0)
    currency: str = Field(pattern=r"^[A-Z]{3}$")
    date: date
    payee: Participant
    split: tuple[ParticipantShare, ...] = Field(min_length=1)

    @model_validator(mode="after")
    def _check_split_total(self) -> "Expense":
        total = sum(share.amount_cents for share in self.split)
        if total != self.amount_cents:
            raise ValueError(
                f"Split shares add up to {total} but expense amount is "
                f"{self.amount_cents}"
            )
        return self

    @property
    def participants(self) -> list[Participant]:
        return [share.participant for share in self.split]


# ============================================================================
# Settlement
# ============================================================================


class Debt(BaseModel):
    """A single payment that moves money from a debtor to a creditor."""

    model_config = ConfigDict(frozen=True)

    debtor: Participant
    creditor: Participant
    amount_cents: int = Field(gt=0)

    @model_validator(mode="after")
    def _check_distinct(self) -> "Debt":
        if self.debtor == self.creditor:
            raise ValueError(f"{self.debtor.name} cannot owe money to themselves")
        return self

    @property
    def amount(self) -> Decimal:
        return from_cents(self.amount_cents)

    def payment_details(self) -> str | None:
        """Bank details for paying the creditor, or None when they have no IBAN."""
        if not self.creditor.iban:
            return None
        details = f"{self.creditor.name}\nIBAN: {self.creditor.iban}"
        if self.creditor.bic:
            details += f"\nBIC: {self.creditor.bic}"
        return details


class ParticipantSummary(BaseModel):
    """Totals for one participant in the base currency, in minor units.

    owed_cents: what others owe this participant for expenses they paid
    debt_cents: what this participant owes for expenses others paid
    balance_cents: owed - debt, rounded once from the unrounded totals
    """

    participant: Participant
    owed_cents: int
    debt_cents: int
    balance_cents: int


class SettlementReport(BaseModel):
    """Balances and the payments that settle them."""

    base_currency: str
    summaries: list[ParticipantSummary]
    debts: list[Debt]
    slack_cents: int = 0  # rounding residue left unsettled

    @property
    def balances(self) -> dict[Participant, int]:
        return {s.participant: s.balance_cents for s in self.summaries}


# ============================================================================
# Events
# ============================================================================


class Event(BaseModel):
    """A group of participants and the expenses they share."""

    id: int | None = None
    title: str
    participants: list[Participant] = Field(default_factory=list)
    expenses: list[Expense] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_membership(self) -> "Event":
        ids = [p.id for p in self.participants]
        if len(ids) != len(set(ids)):
            raise ValueError(f"Event '{self.title}' lists a participant twice")
        for expense in self.expenses:
            self._check_expense_members(expense)
        return self

    def _check_expense_members(self, expense: Expense) -> None:
        members = set(self.participants)
        for participant in [expense.payee, *expense.participants]:
            if participant not in members:
                raise ParticipantNotFoundError(
                    participant.id,
                    f"{participant.name} (id {participant.id}) is not part of "
                    f"event '{self.title}'",
                )

    def with_expense(self, expense: Expense) -> "Event":
        """Return a new event with the expense appended."""
        self._check_expense_members(expense)
        return self.model_copy(update={"expenses": [*self.expenses, expense]})


# ============================================================================
# Exchange rates
# ============================================================================


class ExchangeRate(BaseModel):
    """A cached exchange rate: units of to_currency per unit of from_currency."""

    id: int | None = None
    rate_date: date
    from_currency: str
    to_currency: str
    rate: Decimal = Field(gt=0)
    fetched_at: datetime = Field(default_factory=datetime.now)
