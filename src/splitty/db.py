"""SQLite database operations for Splitty."""

import sqlite3
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path

from .models import ExchangeRate


class Database:
    """SQLite database manager for the exchange-rate cache."""

    def __init__(self, db_path: Path):
        """Initialize database connection."""
        self.db_path = db_path
        self.conn = sqlite3.connect(str(db_path))
        self.conn.row_factory = sqlite3.Row
        self._init_schema()

    def _init_schema(self):
        """Initialize database schema."""
        cursor = self.conn.cursor()

        # Rates are stored as TEXT so Decimal precision survives the round trip
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS exchange_rates (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                rate_date DATE NOT NULL,
                from_currency TEXT NOT NULL,
                to_currency TEXT NOT NULL,
                rate TEXT NOT NULL,
                fetched_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                UNIQUE (rate_date, from_currency, to_currency)
            )
        """
        )

        self.conn.commit()

    def close(self):
        """Close database connection."""
        self.conn.close()

    # ========================================================================
    # Exchange rate operations
    # ========================================================================

    def get_rate(
        self, rate_date: date, from_currency: str, to_currency: str
    ) -> ExchangeRate | None:
        """Get a cached rate for a day and currency pair."""
        cursor = self.conn.cursor()
        cursor.execute(
            """
            SELECT id, rate_date, from_currency, to_currency, rate, fetched_at
            FROM exchange_rates
            WHERE rate_date = ? AND from_currency = ? AND to_currency = ?
            """,
            (rate_date.isoformat(), from_currency, to_currency),
        )
        row = cursor.fetchone()
        return _row_to_rate(row) if row else None

    def save_rate(self, rate: ExchangeRate) -> int:
        """Save an exchange rate, replacing any cached value for the same key."""
        cursor = self.conn.cursor()
        cursor.execute(
            """
            INSERT INTO exchange_rates (
                rate_date, from_currency, to_currency, rate, fetched_at
            ) VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(rate_date, from_currency, to_currency) DO UPDATE SET
                rate = excluded.rate,
                fetched_at = excluded.fetched_at
            """,
            (
                rate.rate_date.isoformat(),
                rate.from_currency,
                rate.to_currency,
                str(rate.rate),
                rate.fetched_at.isoformat(),
            ),
        )
        self.conn.commit()
        row_id = cursor.lastrowid
        if row_id is None:
            raise RuntimeError("Failed to insert exchange rate")
        return row_id

    def list_rates(self) -> list[ExchangeRate]:
        """Get all cached rates, newest day first."""
        cursor = self.conn.cursor()
        cursor.execute(
            """
            SELECT id, rate_date, from_currency, to_currency, rate, fetched_at
            FROM exchange_rates
            ORDER BY rate_date DESC, from_currency, to_currency
            """
        )
        return [_row_to_rate(row) for row in cursor.fetchall()]


def _row_to_rate(row: sqlite3.Row) -> ExchangeRate:
    return ExchangeRate(
        id=row["id"],
        rate_date=date.fromisoformat(row["rate_date"]),
        from_currency=row["from_currency"],
        to_currency=row["to_currency"],
        rate=Decimal(row["rate"]),
        fetched_at=datetime.fromisoformat(row["fetched_at"]),
    )
