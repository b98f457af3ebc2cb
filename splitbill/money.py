"""
Money helpers shared by the models and the engine.

All monetary values are plain floats in the currency's display unit.
Two operations are allowed to touch them: clamping (anything that is not a
finite, non-negative number becomes 0) and rounding (half away from zero,
done with Decimal so 0.125 rounds the way a person would expect).
"""

import math
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Any

# Wide enough to quantize any finite float without InvalidOperation
_WIDE_CONTEXT = Context(prec=400)


def is_valid_amount(value: Any) -> bool:
    """True if `value` is a finite, non-negative number (None counts as valid)."""
    if value is None:
        return True
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return False
    number = float(value)
    return math.isfinite(number) and number >= 0


def clamp_amount(value: Any) -> float:
    """Return `value` as a float, or 0.0 if it is missing or malformed."""
    if value is None or not is_valid_amount(value):
        return 0.0
    return float(value)


def round_money(value: float, places: int = 2) -> float:
    """
    Round to `places` decimal places, half away from zero.
    
    Non-finite input rounds to 0.0. Negative zero is normalized to 0.0.
    """
    if not math.isfinite(value):
        return 0.0
    quantum = Decimal(1).scaleb(-places)
    rounded = Decimal(repr(value)).quantize(
        quantum, rounding=ROUND_HALF_UP, context=_WIDE_CONTEXT
    )
    return float(rounded) + 0.0
