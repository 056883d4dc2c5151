"""Coerce loosely typed numeric values into fixed-precision decimals."""

import re
import sys
from decimal import Context, Decimal, InvalidOperation
from typing import Any

# Ten fractional digits absorb float representation noise between payloads
PRECISION = Decimal("0.0000000001")
# Wide enough for any finite double plus the fractional digits
_CONTEXT = Context(prec=330)

# Anything beyond the double range reads as infinity
MAX_MAGNITUDE = Decimal(sys.float_info.max)

# Leading decimal literal, parsed leniently like a float prefix parser
_NUMBER_RE = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def normalize_number(value: Any) -> Decimal | None:
    """
    Normalize a price/quantity-like value.

    A comma is read as the decimal separator ("12,5" -> 12.5). Values whose
    string form has no leading numeric literal, or that are not finite,
    return None.

    Args:
        value: Raw value from a JSON payload

    Returns:
        Decimal quantized to 10 fractional digits, or None
    """
    if value is None or isinstance(value, (bool, dict, list, tuple)):
        return None

    match = _NUMBER_RE.match(str(value).replace(",", ".", 1))
    if not match:
        return None

    try:
        number = Decimal(match.group(1))
        if not number.is_finite() or number.copy_abs() > MAX_MAGNITUDE:
            return None
        number = number.quantize(PRECISION, context=_CONTEXT)
    except InvalidOperation:
        # Malformed exponent
        return None

    if number.is_zero():
        return abs(number)
    return number
