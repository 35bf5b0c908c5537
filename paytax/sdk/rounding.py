"""Cent rounding and monetary input validation.

Every amount the engine returns passes through round_to_cents, so no
calculator ever returns more than two decimal digits.
"""

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

CENT = Decimal("0.01")


class InvalidAmountError(ValueError):
    """Raised when a monetary input is negative, NaN or infinite."""
    pass


def round_to_cents(amount: float) -> float:
    """Round to the nearest cent, halves rounding up.

    Rounds the shortest decimal representation of the float, so values that
    print as an exact half cent round up even when their binary value sits
    just below it. Example: 1.005 -> 1.01, 161.596153... -> 161.6
    """
    rounded = float(Decimal(str(amount)).quantize(CENT, rounding=ROUND_HALF_UP))
    # Normalize -0.0
    return rounded if rounded != 0 else 0.0


def sum_cents(amounts: Iterable[float]) -> float:
    """Sum amounts and round the total once."""
    return round_to_cents(math.fsum(amounts))


def require_amount(name: str, value: float) -> float:
    """Validate a monetary input at the SDK boundary.

    Args:
        name: Field name used in the error message
        value: Amount to check

    Returns:
        The value as a float

    Raises:
        InvalidAmountError: If the value is not a finite, non-negative number
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidAmountError(f"{name} must be a number, got: {value!r}")
    if not math.isfinite(value):
        raise InvalidAmountError(f"{name} must be finite, got: {value}")
    if value < 0:
        raise InvalidAmountError(f"{name} must be non-negative, got: {value}")
    return float(value)
