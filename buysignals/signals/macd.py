"""
MACD buy-signal detectors.

`macd` holds the defined MACD line values and `signal` the defined signal
line values, both oldest first and both ending on the latest bar (signal is
shorter because its EMA starts later).
"""
from typing import List, Sequence

from ..shared.defaults import MACD_DIVERGENCE_THRESHOLD

MACD_SIGNAL_NAMES = ("golden_cross", "cross_above_zero", "divergence_wide", "histogram_increasing")


def is_golden_cross(macd: Sequence[float], signal: Sequence[float]) -> bool:
    """MACD line crosses above the signal line on the latest bar."""
    if len(macd) < 2 or len(signal) < 2:
        return False
    return macd[-1] > signal[-1] and macd[-2] <= signal[-2]


def is_cross_above_zero(macd: Sequence[float]) -> bool:
    """MACD line crosses above zero on the latest bar."""
    if len(macd) < 2:
        return False
    return macd[-1] > 0 and macd[-2] <= 0


def is_divergence_wide(
    macd: Sequence[float],
    signal: Sequence[float],
    threshold: float = MACD_DIVERGENCE_THRESHOLD,
) -> bool:
    """MACD line is more than `threshold` above the signal line."""
    if not macd or not signal:
        return False
    return macd[-1] - signal[-1] > threshold


def is_histogram_increasing(macd: Sequence[float], signal: Sequence[float]) -> bool:
    """The last three histogram values (macd - signal) are strictly increasing."""
    if len(macd) < 3 or len(signal) < 3:
        return False
    histogram1 = macd[-1] - signal[-1]
    histogram2 = macd[-2] - signal[-2]
    histogram3 = macd[-3] - signal[-3]
    return histogram1 > histogram2 and histogram2 > histogram3


def check_buy_signal_of_macd(
    macd: Sequence[float],
    signal: Sequence[float],
    divergence_threshold: float = MACD_DIVERGENCE_THRESHOLD,
) -> List[bool]:
    """
    Evaluate all MACD detectors on the latest bar.

    Returns:
        [golden cross, cross above zero, wide divergence, histogram increasing]
    """
    return [
        is_golden_cross(macd, signal),
        is_cross_above_zero(macd),
        is_divergence_wide(macd, signal, divergence_threshold),
        is_histogram_increasing(macd, signal),
    ]
