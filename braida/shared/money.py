"""Money helpers - all amounts are integer pence"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

Number = Union[int, Decimal]


def round_to_pence(amount: Number) -> int:
    """Round a (possibly fractional) pence amount to a whole penny, half away from zero"""
    return int(Decimal(amount).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def apply_rate(amount_pence: int, rate: Decimal) -> int:
    """Multiply a pence amount by a fractional rate and round the result"""
    return round_to_pence(Decimal(amount_pence) * rate)


def apply_percentage(amount_pence: int, percentage: int) -> int:
    """Take a whole-number percentage (0-100) of a pence amount"""
    return round_to_pence(Decimal(amount_pence) * Decimal(percentage) / Decimal(100))


def format_pence(pence: int) -> str:
    """Format pence for display, e.g. 1234 -> '£12.34', -70 -> '-£0.70'"""
    sign = "-" if pence < 0 else ""
    pounds, remainder = divmod(abs(pence), 100)
    return f"{sign}£{pounds:,}.{remainder:02d}"
