"""Coercion of raw form strings to numbers."""

from __future__ import annotations

import math
import re

# Longest leading decimal literal, e.g. "8" in "8h" or "2.5" in "2.5e"
_NUMBER_PREFIX = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def parse_number(value: object) -> float | None:
    """Parse a raw form value as a finite float.

    Text is read up to the end of its leading decimal literal, so ``"8h"``
    is 8 and ``"1_000"`` is 1. Returns None for missing, blank or
    non-numeric input and for values that are NaN or infinite. Booleans are
    not numbers here even though Python treats them as ints.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        match = _NUMBER_PREFIX.match(value.strip())
        if match is None:
            return None
        number = float(match.group())
    else:
        return None
    if not math.isfinite(number):
        return None
    return number


def parse_number_or(value: object, default: float) -> float:
    """Like :func:`parse_number` but falls back to ``default``."""
    number = parse_number(value)
    return default if number is None else number


def is_blank(value: object) -> bool:
    """True for missing values and strings that are empty after stripping."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False
