"""Rounding helpers shared by the converter and the trade generator"""

import math
from decimal import Decimal, ROUND_HALF_UP


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, halves toward positive infinity.

    -2.5 rounds to -2 so a sell delta never exceeds a fractional position.
    """
    return math.floor(value + 0.5)


def round_cents(value: float) -> float:
    """Round a dollar amount to cents, halves away from zero."""
    return float(Decimal(value).quantize(Decimal('0.01'), ROUND_HALF_UP))
