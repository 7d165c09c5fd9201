"""
Display helpers for indicator series.

Label and number formatting belong to presentation; the adapter only calls
whatever label formatter it is given, and these are the defaults.
"""
import math
from typing import Callable, Optional

import pandas as pd

from ..shared.defaults import DISPLAY_TIMEZONE

_LABEL_PATTERNS = {
    "time": "%H:%M",
    "day": "%m/%d %H:%M",
}


def format_timestamp(timestamp: int, fmt: str = "day", tz: str = DISPLAY_TIMEZONE, unit: str = "s") -> str:
    """
    Format an epoch timestamp in the display timezone.

    Args:
        timestamp: Epoch value in `unit`
        fmt: "time" (HH:MM) or "day" (MM/DD HH:MM)
        tz: Display timezone (Japan time by default)
        unit: Epoch unit ("s", "ms", ...)
    """
    if fmt not in _LABEL_PATTERNS:
        raise ValueError(f"Unknown label format '{fmt}'. Use one of {list(_LABEL_PATTERNS)}")
    ts = pd.Timestamp(timestamp, unit=unit, tz="UTC").tz_convert(tz)
    return ts.strftime(_LABEL_PATTERNS[fmt])


def make_label_formatter(fmt: str = "day", tz: str = DISPLAY_TIMEZONE, unit: str = "s") -> Callable[[int], str]:
    """Label formatter for SeriesAdapter bound to a format and timezone."""
    if fmt not in _LABEL_PATTERNS:
        raise ValueError(f"Unknown label format '{fmt}'. Use one of {list(_LABEL_PATTERNS)}")

    def _format(timestamp: int) -> str:
        return format_timestamp(timestamp, fmt=fmt, tz=tz, unit=unit)

    return _format


def format_number(value: float) -> str:
    """
    Compact volume formatting with Japanese units.

    >= 1e8 -> "x.y億", >= 1e4 -> "x.y万" (floored to one decimal), else the plain value.
    """
    if value >= 100_000_000:
        return f"{math.floor(value / 100_000_000 * 10) / 10:.1f}億"
    if value >= 10_000:
        return f"{math.floor(value / 10_000 * 10) / 10:.1f}万"
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def tail_for_display(frame: pd.DataFrame, visible: Optional[int]) -> pd.DataFrame:
    """
    Keep only the last `visible` rows for display.

    Computation always runs on the full history; this only trims the view.
    None shows everything.
    """
    if visible is None:
        return frame
    if visible < 0:
        raise ValueError(f"visible must be >= 0, got {visible}")
    if visible >= len(frame):
        return frame
    return frame.iloc[len(frame) - visible:]
