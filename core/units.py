# ============================================================================
# UNIT CONVERSION HELPERS
# ============================================================================
# STATUS: Core - Byte and duration formatting
# PURPOSE: PHP shorthand byte parsing and human-readable output
# ============================================================================
"""
Unit helpers shared by checks.

PHP ini byte values use shorthand notation (128M, 1G, 512K). The
conversion follows PHP's own rule: take the leading integer, then
multiply by 1024 per step of the trailing k/m/g suffix.
"""

import math
import re
from typing import Optional, Union

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

_SUFFIX_MULTIPLIERS = {
    "g": 1024 * 1024 * 1024,
    "m": 1024 * 1024,
    "k": 1024,
}

BYTE_UNITS = ["B", "KB", "MB", "GB", "TB"]


def convert_to_bytes(value: Optional[str]) -> int:
    """
    Convert a PHP shorthand byte value to an integer.

    Empty strings and "0" are 0. A value with no leading digits is 0
    (matching PHP's integer cast).
    """
    if value is None:
        return 0

    value = str(value).strip()
    if value in ("", "0"):
        return 0

    match = _LEADING_INT.match(value)
    number = int(match.group(1)) if match else 0

    return number * _SUFFIX_MULTIPLIERS.get(value[-1].lower(), 1)


def format_bytes(size: Union[int, float]) -> str:
    """
    Format bytes using 1024 steps, rounded to 2 decimals.

    Trailing zeros are dropped: 1536 -> "1.5 KB", 2048 -> "2 KB".
    """
    value = float(size)
    index = 0
    while value >= 1024 and index < len(BYTE_UNITS) - 1:
        value /= 1024
        index += 1

    rounded = round(value, 2)
    if rounded == int(rounded):
        return f"{int(rounded)} {BYTE_UNITS[index]}"
    return f"{rounded:g} {BYTE_UNITS[index]}"


def format_bytes_fixed(size: int) -> str:
    """Format bytes with exactly two decimals ("1.50 GB"); 0 is "0 B"."""
    if size <= 0:
        return "0 B"

    power = min(int(math.floor(math.log(size, 1024))), len(BYTE_UNITS) - 1)
    return f"{size / (1024 ** power):.2f} {BYTE_UNITS[power]}"


def php_int(value: Optional[str]) -> int:
    """Integer value of an ini string, the way PHP's (int) cast reads it."""
    if value is None:
        return 0
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else 0


def format_percent(value: float) -> str:
    """Percentage rounded to 1 decimal, without a trailing ".0"."""
    rounded = round(value, 1)
    if rounded == int(rounded):
        return str(int(rounded))
    return f"{rounded:.1f}"


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


def format_time_diff(seconds: int) -> str:
    """
    Format a duration in seconds.

    Examples:
        45    -> "45 seconds"
        61    -> "1 minute 1 second"
        7260  -> "2 hours 1 minute"
    """
    if seconds >= 3600:
        hours = seconds // 3600
        minutes = (seconds % 3600) // 60
        return f"{_plural(hours, 'hour')} {_plural(minutes, 'minute')}"

    if seconds >= 60:
        return f"{_plural(seconds // 60, 'minute')} {_plural(seconds % 60, 'second')}"

    return _plural(seconds, "second")


__all__ = [
    "convert_to_bytes",
    "format_bytes",
    "format_bytes_fixed",
    "format_time_diff",
    "format_percent",
    "php_int",
]
