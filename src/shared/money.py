"""Money helpers: amounts are Decimals rounded half-up to cents."""

from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")


def D(value) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value or "0"))


def round_money(value) -> Decimal:
    return D(value).quantize(CENT, rounding=ROUND_HALF_UP)


def from_minor_units(value) -> Decimal:
    """Convert an amount in cents (as providers report it) to currency units."""
    return round_money(D(value) / 100)


def to_float(value) -> float:
    """Money as stored in Float fields."""
    return float(round_money(value))
