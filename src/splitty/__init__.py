"""Splitty - Shared expense balances, settlements and fair splits."""

__version__ = "0.1.0"

from .allocation import allocate
from .balances import compute_balance, compute_balances, compute_summaries
from .config import Settings, load_settings
from .converter import CachingRateConverter, CurrencyConverter, StaticRateConverter
from .db import Database
from .exceptions import (
    ConversionUnavailable,
    InvalidAmount,
    InvalidParticipantSet,
    SplittyError,
)
from .models import (
    Debt,
    Event,
    Expense,
    Participant,
    ParticipantShare,
    ParticipantSummary,
    SettlementReport,
)
from .service import LedgerService
from .settlement import settle

__all__ = [
    "allocate",
    "compute_balance",
    "compute_balances",
    "compute_summaries",
    "settle",
    "Settings",
    "load_settings",
    "Database",
    "CachingRateConverter",
    "CurrencyConverter",
    "StaticRateConverter",
    "ConversionUnavailable",
    "InvalidAmount",
    "InvalidParticipantSet",
    "SplittyError",
    "Debt",
    "Event",
    "Expense",
    "Participant",
    "ParticipantShare",
    "ParticipantSummary",
    "SettlementReport",
    "LedgerService",
]
