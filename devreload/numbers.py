"""Lenient numeric conversions that fall back to a default instead of raising."""

from __future__ import annotations

import re
import sys

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_DECIMAL_INT = re.compile(r"[+-]?[0-9]+")


def parse_float_2f(value: float) -> float:
    """Return ``value`` rounded to two decimal places, as ``%.2f`` formats it."""
    try:
        return float(f"{value:.2f}")
    except (TypeError, ValueError):
        print("failed to round float to two decimal places", file=sys.stderr)
        return value


def parse_string_to_int64(value: str) -> int:
    """Parse a base-10 signed 64-bit integer, returning 0 when it cannot."""
    if isinstance(value, str) and _DECIMAL_INT.fullmatch(value):
        number = int(value)
        if _INT64_MIN <= number <= _INT64_MAX:
            return number
    print("failed to convert string to int64", file=sys.stderr)
    return 0