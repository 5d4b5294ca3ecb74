"""Canonical display form for numeric cell values.

Numbers are rounded half away from zero to two decimal places.  Integral
results are shown without a decimal point; everything else always shows
exactly two decimals (``3.1`` -> ``"3.10"``).
"""

from __future__ import annotations

import math
import re
from decimal import ROUND_HALF_UP, Context, Decimal

_NUMBER_RE = re.compile(r"-?\d+(\.\d+)?")

_CENTS = Decimal("0.01")

# Wide enough to hold any finite float to the cent.
_CONTEXT = Context(prec=400)


def is_number(text: str) -> bool:
    """Return True if *text* is a signed decimal literal such as ``-3.5``."""
    return _NUMBER_RE.fullmatch(text) is not None


def beautify(number: float) -> str:
    """Format *number* for display.

    Raises:
        ValueError: If *number* is infinite or NaN.
    """
    if not math.isfinite(number):
        raise ValueError(f"Cannot format non-finite number: {number}")
    # repr() gives the shortest decimal that round-trips, so 2.675 rounds
    # to 2.68 the way it reads rather than the way it is stored.
    rounded = Decimal(repr(float(number))).quantize(_CENTS, rounding=ROUND_HALF_UP, context=_CONTEXT)
    if rounded == rounded.to_integral_value():
        return str(int(rounded))
    return f"{rounded:f}"


def beautify_string(text: str) -> str:
    """Beautify *text* if it is a number, otherwise return it trimmed."""
    output = text.strip()
    if is_number(output):
        return beautify(float(output))
    return output
