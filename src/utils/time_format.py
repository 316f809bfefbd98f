from __future__ import annotations
import math
import re
from typing import Optional, Tuple

# "m:ss" with optional leading sign and whitespace
_MIN_SEC = re.compile(r"^\s*(-?)(\d+)\s*:\s*(\d{1,2})\s*$")


def _split_minutes(value: Optional[float]) -> Optional[Tuple[str, int, int]]:
    """(sign, minutes, seconds) with seconds rounded and 60 carried; None for None/NaN."""
    if value is None:
        return None
    value = float(value)
    if math.isnan(value):
        return None
    total = int(round(abs(value) * 60))
    minutes, seconds = divmod(total, 60)
    sign = "-" if value < 0 and total else ""
    return sign, minutes, seconds


def decimal_minutes_to_min_sec(value: Optional[float]) -> str:
    """Render minutes as 'm:ss' (1.5 -> '1:30', 3.75 -> '3:45').

    Seconds are rounded to the nearest whole second; None and NaN render as ''.
    """
    parts = _split_minutes(value)
    if parts is None:
        return ""
    sign, minutes, seconds = parts
    return f"{sign}{minutes}:{seconds:02d}"


def format_time_for_display(value: Optional[float]) -> str:
    """Read-only rendering of minutes: 1.5 -> '1m 30s', 0.25 -> '0m 15s'."""
    parts = _split_minutes(value)
    if parts is None:
        return ""
    sign, minutes, seconds = parts
    return f"{sign}{minutes}m {seconds:02d}s"


def is_valid_min_sec(text: Optional[str]) -> bool:
    """True for a non-negative 'm:ss' entry with seconds below 60."""
    if text is None:
        return False
    m = _MIN_SEC.match(str(text))
    return bool(m) and not m.group(1) and int(m.group(3)) < 60


def min_sec_to_decimal_minutes(text: Optional[str]) -> float:
    """Parse 'm:ss' (or a bare number of minutes) into decimal minutes.

    Anything unparseable yields 0.0, matching how the time input treats bad text.
    """
    if text is None:
        return 0.0
    s = str(text).strip()
    m = _MIN_SEC.match(s)
    if m:
        sign = -1.0 if m.group(1) else 1.0
        return sign * (int(m.group(2)) + int(m.group(3)) / 60.0)
    try:
        return float(s)
    except ValueError:
        return 0.0


def step_time(value: float, steps: int = 1, increment_seconds: int = 15) -> float:
    """Move ``value`` (minutes) by ``steps`` increments of ``increment_seconds``.

    Never goes below zero; rounded to 4 decimals to keep quarter-minute values exact.
    """
    new_value = float(value or 0.0) + steps * increment_seconds / 60.0
    return max(0.0, round(new_value, 4))


def format_temperature(
    temperature_min: Optional[float],
    temperature_max: Optional[float] = None,
    unit: str = "°C",
) -> str:
    """'20°C' for a single target, '20-25°C' for a range, '' when unknown."""
    if temperature_min is None:
        return ""

    def _num(x: float) -> str:
        return f"{x:g}"

    if temperature_max is None or temperature_max == temperature_min:
        return f"{_num(temperature_min)}{unit}"
    return f"{_num(temperature_min)}-{_num(temperature_max)}{unit}"


__all__ = [
    "decimal_minutes_to_min_sec",
    "min_sec_to_decimal_minutes",
    "format_time_for_display",
    "is_valid_min_sec",
    "step_time",
    "format_temperature",
]
