"""Conversions between major currency units and integer minor units (cents)."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from .exceptions import InvalidAmount

CENTS = Decimal("0.01")


def to_cents(amount: Decimal) -> int:
    """
    Convert a Decimal major-unit amount to integer minor units.
    Uses ROUND_HALF_UP for consistency.

    Args:
        amount: Amount in major units (e.g. euros)

    Returns:
        Amount in minor units (integer)
    """
    return round_cents(amount * 100)


def round_cents(value: Decimal) -> int:
    """Round a fractional minor-unit value to a whole minor unit (ROUND_HALF_UP)."""
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_cents(cents: int) -> Decimal:
    """Convert integer minor units back to a two-place Decimal major amount."""
    return (Decimal(cents) / 100).quantize(CENTS)


def parse_amount(text: str) -> int:
    """
    Parse user input such as "12.34" into minor units.

    Args:
        text: Amount in major units, at most two decimal places

    Returns:
        Amount in minor units

    Raises:
        InvalidAmount: If the text is not a finite, non-negative amount with
                       at most two decimal places
    """
    try:
        amount = Decimal(text.strip())
    except InvalidOperation as e:
        raise InvalidAmount(f"Not a valid amount: '{text}'") from e

    if not amount.is_finite():
        raise InvalidAmount(f"Not a valid amount: '{text}'")
    if amount < 0:
        raise InvalidAmount(f"Amount must not be negative: {text}")

    exponent = amount.as_tuple().exponent
    if isinstance(exponent, int) and exponent < -2:
        raise InvalidAmount(f"Amount has more than two decimal places: {text}")

    return to_cents(amount)
