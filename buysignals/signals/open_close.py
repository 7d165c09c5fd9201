"""
Price-action buy-signal detectors working directly on closes.
"""
from typing import List, Sequence

from ..indicators.rolling import mean
from ..shared.defaults import CONSECUTIVE_RISE_PERIOD, CLOSE_MA_PERIOD, RANGE_BREAK_PERIOD

OPEN_CLOSE_SIGNAL_NAMES = ("consecutive_rise", "ma_cross", "range_break")


def check_consecutive_rise(closes: Sequence[float], period: int = CONSECUTIVE_RISE_PERIOD) -> bool:
    """At least period - 1 up-closes among the last `period` closes."""
    if len(closes) < period:
        return False
    recent = list(closes[-period:])
    up_count = sum(1 for i in range(1, period) if recent[i] > recent[i - 1])
    return up_count >= period - 1


def check_ma_cross(closes: Sequence[float], period: int = CLOSE_MA_PERIOD) -> bool:
    """Latest close is above the mean of the last `period` closes."""
    if len(closes) < period:
        return False
    return closes[-1] > mean(closes[-period:])


def check_range_break(closes: Sequence[float], period: int = RANGE_BREAK_PERIOD) -> bool:
    """
    Latest close strictly exceeds the highest of the preceding period - 1 closes.

    Equal to the previous high does not count as a break.
    """
    if period < 2:
        raise ValueError(f"Range break period must be >= 2, got {period}")
    if len(closes) < period:
        return False
    previous_high = max(closes[-period:-1])
    return closes[-1] > previous_high


def check_buy_signal_of_open_close(
    closes: Sequence[float],
    rise_period: int = CONSECUTIVE_RISE_PERIOD,
    ma_period: int = CLOSE_MA_PERIOD,
    break_period: int = RANGE_BREAK_PERIOD,
) -> List[bool]:
    """
    Evaluate all price-action detectors on the latest close.

    Returns:
        [consecutive rise, above own average, range break]
    """
    return [
        check_consecutive_rise(closes, rise_period),
        check_ma_cross(closes, ma_period),
        check_range_break(closes, break_period),
    ]
