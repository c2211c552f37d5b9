"""Human-readable formatting for byte counts, rates and durations."""

from typing import Tuple

_BYTE_BASE = 1024.0
_BYTE_UNITS: Tuple[str, ...] = ("B", "KB", "MB", "GB", "TB")
_SECONDS_IN_HOUR = 3600.0
_SECONDS_IN_MINUTE = 60.0


def _scale_bytes(amount: float) -> Tuple[float, str]:
    unit_index = 0
    while amount >= _BYTE_BASE and unit_index < len(_BYTE_UNITS) - 1:
        amount /= _BYTE_BASE
        unit_index += 1
    # Promote values that would print as "1024.0" after rounding.
    if 0 < unit_index < len(_BYTE_UNITS) - 1 and round(amount, 1) >= _BYTE_BASE:
        amount /= _BYTE_BASE
        unit_index += 1
    return amount, _BYTE_UNITS[unit_index]


def format_bytes(num_bytes: object) -> str:
    """
    Format a byte count using binary (1024) units.

    Args:
        num_bytes: Byte count

    Returns:
        Human-readable size (e.g., "512 B", "1.5 KB", "2.0 GB"). Terabytes
        are the largest unit; zero, negative and non-numeric input give "0 B".
    """
    if isinstance(num_bytes, bool) or not isinstance(num_bytes, (int, float)):
        return "0 B"
    if num_bytes <= 0:
        return "0 B"

    scaled, unit = _scale_bytes(float(num_bytes))
    if unit == "B":
        return f"{int(scaled)} B"
    return f"{scaled:.1f} {unit}"


def format_rate(bytes_per_second: object) -> str:
    """Format a transfer rate, e.g. "1.2 MB/s"."""
    return f"{format_bytes(bytes_per_second)}/s"


def format_duration(seconds: object) -> str:
    """
    Format duration in seconds to human-readable string.

    Args:
        seconds: Duration in seconds

    Returns:
        Human-readable duration string (e.g., "1.23h", "45.67m", "12.34s")
    """
    if isinstance(seconds, bool) or not isinstance(seconds, (int, float)):
        return "0s"

    amount = float(seconds)
    if amount <= 0:
        return "0s"
    if amount >= _SECONDS_IN_HOUR:
        return f"{amount / _SECONDS_IN_HOUR:.2f}h"
    if amount >= _SECONDS_IN_MINUTE:
        return f"{amount / _SECONDS_IN_MINUTE:.2f}m"
    return f"{amount:.2f}s"


__all__ = ["format_bytes", "format_duration", "format_rate"]
