"""
Money helpers: amount normalization and currency display.
"""

import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

_CURRENCY_CHARS = re.compile(r'[$€£¥,\s]')
_CENT = Decimal('0.01')


def to_decimal(value: Any) -> Decimal:
    """
    Normalize an amount to a Decimal.

    Accepts ints, floats, Decimals and numeric strings, including strings with
    currency symbols and thousands separators ("$1,234.50"). ``None`` and the
    empty string count as zero. NaN and infinities are rejected.

    Raises:
        ValueError: If the value is not a number
    """
    if value is None:
        return Decimal('0')
    if isinstance(value, bool):
        raise ValueError(f"Cannot convert {value!r} to an amount")
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float)):
        amount = Decimal(str(value))
    elif isinstance(value, str):
        cleaned = _CURRENCY_CHARS.sub('', value)
        if not cleaned:
            return Decimal('0')
        try:
            amount = Decimal(cleaned)
        except InvalidOperation:
            raise ValueError(f"Invalid amount: {value!r}")
    else:
        raise ValueError(f"Cannot convert {type(value).__name__} to an amount")

    if not amount.is_finite():
        raise ValueError(f"Amount must be a finite number: {value!r}")
    return amount


def format_currency(amount: Decimal) -> str:
    """Format an amount in US dollars, e.g. ``$1,234.50`` or ``-$12.00``"""
    rounded = to_decimal(amount).quantize(_CENT, rounding=ROUND_HALF_UP)
    sign = '-' if rounded < 0 else ''
    return f"{sign}${abs(rounded):,.2f}"
