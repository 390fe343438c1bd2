"""Money / rounding helpers.

Centralized so formatting, conversion and captions use identical rounding
semantics (half-up on the decimal representation, never on the binary float).
"""

from __future__ import annotations
import math
from decimal import Context, Decimal, ROUND_HALF_UP
from typing import Any

# Wide enough for any finite float at two decimals
_WIDE = Context(prec=400)


def to_fixed(value: float, places: int) -> str:
    """Fixed-point string with `places` decimals, e.g. to_fixed(2.005, 2) -> '2.01'."""
    quantum = Decimal(1).scaleb(-places)
    text = format(
        Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP, context=_WIDE), "f"
    )
    # Decimal keeps the sign of negative zero ('-0.00')
    if text.startswith("-") and not text.strip("-0."):
        text = text[1:]
    return text


def is_valid_number(value: Any) -> bool:
    if value is None or isinstance(value, bool):
        return False
    if not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)
