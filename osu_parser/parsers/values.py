"""Permissive numeric decoding for comma-delimited ``.osu`` fields.

Malformed numbers never abort a parse: they decode to ``math.nan`` and the
nan flows through any arithmetic that consumes them.
"""

import math
import re

_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")

# Integers above 2**53 lose precision as floats
_MAX_EXACT_INT = 2 ** 53
_MAX_EXACT_DIGITS = len(str(_MAX_EXACT_INT))


def parse_int(text: str | None) -> float:
    """Decode the leading integer of *text*, or nan if there is none.

    Returns an ``int`` on success; the ``float`` annotation covers the nan.
    Digit runs beyond exact float precision decode as a float, which is
    ``±inf`` past the float range.
    """
    if text is None:
        return math.nan
    match = _INT_PREFIX.match(text)
    if match is None:
        return math.nan
    digits = match.group(1)
    if len(digits.lstrip("+-").lstrip("0")) > _MAX_EXACT_DIGITS:
        return float(digits)
    value = int(digits)
    if abs(value) > _MAX_EXACT_INT:
        return float(digits)
    return value


def parse_float(text: str | None) -> float:
    """Decode the leading decimal number of *text*, or nan if there is none."""
    if text is None:
        return math.nan
    match = _FLOAT_PREFIX.match(text)
    if match is None:
        return math.nan
    return float(match.group(1))


def parse_flags(text: str | None) -> int:
    """Decode a bit-flag field; anything that is not an integer means no flags."""
    value = parse_int(text)
    if isinstance(value, float):
        return 0
    return value


def field_at(fields: list[str], index: int) -> str | None:
    """Return ``fields[index]`` or None when the record is too short."""
    if 0 <= index < len(fields):
        return fields[index]
    return None


def safe_div(numerator: float, denominator: float) -> float:
    """IEEE-style division: x/0 is ±inf, 0/0 and nan operands are nan."""
    if math.isnan(numerator) or math.isnan(denominator):
        return math.nan
    if denominator == 0:
        if numerator == 0:
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)
    return numerator / denominator


def safe_ceil(value: float) -> float:
    if not math.isfinite(value):
        return math.nan
    return math.ceil(value)


def safe_floor(value: float) -> float:
    if not math.isfinite(value):
        return math.nan
    return math.floor(value)
