"""Human-readable formatting of byte counts."""

from __future__ import annotations

_UNITS = ("B", "KB", "MB", "GB", "TB")


def format_bytes(size: int) -> str:
    """Format a byte count with binary units, e.g. ``1.5 KB``."""
    if size < 0:
        raise ValueError(f"byte count cannot be negative: {size}")
    if size == 0:
        return "0 B"

    value = float(size)
    unit = 0
    while value >= 1024.0 and unit < len(_UNITS) - 1:
        value /= 1024.0
        unit += 1

    if unit == 0:
        return f"{size} {_UNITS[0]}"
    return f"{value:.1f} {_UNITS[unit]}"