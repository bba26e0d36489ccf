# utils/money.py
from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal("0.01")


def from_minor_units(amount: int) -> Decimal:
     """Convert processor minor units (cents) to a 2-place decimal amount."""
     return (Decimal(int(amount)) / 100).quantize(CENT, rounding=ROUND_HALF_UP)


def to_minor_units(amount: Decimal) -> int:
     return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
