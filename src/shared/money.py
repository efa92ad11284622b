"""Cents conversion and display helpers.

Money is stored and transmitted as integer cents everywhere. Rand amounts
typed into admin forms are converted once with ``to_cents`` before they reach
a command.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from protean.exceptions import ValidationError


def _as_decimal(value, field: str) -> Decimal:
    if isinstance(value, bool):
        raise ValidationError({field: [f"Expected a number, got {value!r}"]})
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError({field: [f"Expected a number, got {value!r}"]}) from None
    if not amount.is_finite():
        raise ValidationError({field: [f"Expected a number, got {value!r}"]})
    return amount


def to_cents(rand, field: str = "amount") -> int:
    """Convert a Rand amount (``12.5``, ``"12.50"``) to integer cents.

    Half-cents round away from zero so ``0.005`` becomes ``1`` rather than
    falling foul of binary float representation.
    """
    amount = _as_decimal(rand, field)
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_cents(cents: int) -> float:
    """Convert integer cents back to a Rand amount for display."""
    return (cents or 0) / 100


def format_zar(cents: int | None) -> str:
    """Render cents as ``R 1 234.50``."""
    if cents is None:
        return "R 0.00"
    sign = "-" if cents < 0 else ""
    whole, fraction = divmod(abs(int(cents)), 100)
    grouped = f"{whole:,}".replace(",", " ")
    return f"{sign}R {grouped}.{fraction:02d}"


def parse_number(value, field: str) -> float:
    """Coerce admin form input to a float, rejecting non-numeric values."""
    return float(_as_decimal(value, field))


def round_half_up(value) -> int:
    """Round to the nearest integer, halves away from zero (checkout rounding)."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
