"""Tests for minor-unit money helpers."""

from decimal import Decimal

import pytest

from splitty.exceptions import InvalidAmount
from splitty.money import from_cents, parse_amount, round_cents, to_cents


class TestConversions:
    def test_to_cents_exact(self):
        assert to_cents(Decimal("12.34")) == 1234

    def test_to_cents_rounds_half_up(self):
        assert to_cents(Decimal("0.005")) == 1
        assert to_cents(Decimal("0.004")) == 0
        assert to_cents(Decimal("-0.005")) == -1

    def test_round_cents(self):
        assert round_cents(Decimal("333.5")) == 334
        assert round_cents(Decimal("-333.5")) == -334
        assert round_cents(Decimal("333.49")) == 333

    def test_from_cents(self):
        assert from_cents(1234) == Decimal("12.34")
        assert from_cents(-5) == Decimal("-0.05")
        assert str(from_cents(100)) == "1.00"


class TestParseAmount:
    @pytest.mark.parametrize(
        ("text", "cents"),
        [("10", 1000), ("10.5", 1050), ("0.01", 1), (" 3.33 ", 333), ("0", 0)],
    )
    def test_valid(self, text, cents):
        assert parse_amount(text) == cents

    @pytest.mark.parametrize("text", ["abc", "", "1.234", "-5", "NaN", "Infinity"])
    def test_invalid(self, text):
        with pytest.raises(InvalidAmount):
            parse_amount(text)
