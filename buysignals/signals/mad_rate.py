"""
Moving-average deviation rate (MAD rate) buy-signal detectors.

MAD values are percentages: (close - SMA) / SMA * 100.
"""
from typing import List, Sequence

from ..shared.defaults import MAD_OVERSOLD

MAD_RATE_SIGNAL_NAMES = ("golden_cross", "oversold_rebound", "positive_divergence")


def is_golden_cross(short_mad: Sequence[float], long_mad: Sequence[float]) -> bool:
    """Short MAD crosses above long MAD on the latest bar."""
    if len(short_mad) < 2 or len(long_mad) < 2:
        return False
    return short_mad[-2] <= long_mad[-2] and short_mad[-1] > long_mad[-1]


def is_oversold_rebound(mad: Sequence[float], oversold: float = MAD_OVERSOLD) -> bool:
    """Any of the last 5 MAD values was below `oversold` and the latest is positive."""
    if len(mad) < 5:
        return False
    recent = list(mad[-5:])
    return any(value < oversold for value in recent) and recent[-1] > 0


def is_positive_divergence(mad: Sequence[float], prices: Sequence[float]) -> bool:
    """
    Price sits at a new 5-bar low while the MAD rate does not.

    The latest close is the lowest of the last 5 closes, and the latest MAD
    is above the lowest of the last 5 MAD values.
    """
    if len(mad) < 5 or len(prices) < 5:
        return False
    if prices[-1] > min(prices[-5:]):
        return False
    return mad[-1] > min(mad[-5:])


def check_buy_signal_of_mad_rate(
    short_mad: Sequence[float],
    long_mad: Sequence[float],
    prices: Sequence[float],
    oversold: float = MAD_OVERSOLD,
) -> List[bool]:
    """
    Evaluate all MAD rate detectors on the latest bar.

    Returns:
        [golden cross, oversold rebound, positive divergence]
    """
    return [
        is_golden_cross(short_mad, long_mad),
        is_oversold_rebound(short_mad, oversold),
        is_positive_divergence(short_mad, prices),
    ]
