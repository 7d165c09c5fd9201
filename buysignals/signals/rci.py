"""
RCI (Rank Correlation Index) buy-signal detectors.

All detectors read the trailing RCI values (oldest first); -80 is the
oversold line.
"""
from typing import List, Optional, Sequence

from ..indicators.technical import calculate_lower_band
from ..shared.defaults import (
    RCI_OVERSOLD, RCI_DIVERGENCE_CEILING,
    BOLLINGER_PERIOD, BOLLINGER_STD_DEV,
)

RCI_SIGNAL_NAMES = ("crossover", "double_bottom", "bollinger", "divergence")


def is_rci_crossover_buy_signal(rci: Sequence[float], oversold: float = RCI_OVERSOLD) -> bool:
    """RCI was below the oversold line and is now above it."""
    if len(rci) < 2:
        return False
    return rci[-2] < oversold and rci[-1] > oversold


def is_rci_double_bottom_buy_signal(rci: Sequence[float], oversold: float = RCI_OVERSOLD) -> bool:
    """
    Two consecutive oversold readings among the previous three, then a cross above.

    Either (3 back, 2 back) or (2 back, previous) are below the line, and
    previous < line < current.
    """
    if len(rci) < 4:
        return False
    current, previous, two_back, three_back = rci[-1], rci[-2], rci[-3], rci[-4]
    has_double_bottom = (
        (three_back < oversold and two_back < oversold)
        or (two_back < oversold and previous < oversold)
    )
    crosses_above = previous < oversold and current > oversold
    return has_double_bottom and crosses_above


def is_rci_bollinger_buy_signal(
    rci: Sequence[float],
    price: float,
    lower_band: Optional[float],
    oversold: float = RCI_OVERSOLD,
) -> bool:
    """RCI is oversold and price closes below the lower Bollinger band."""
    if not rci or lower_band is None:
        return False
    return rci[-1] < oversold and price < lower_band


def is_rci_divergence_buy_signal(
    rci: Sequence[float],
    prices: Sequence[float],
    ceiling: float = RCI_DIVERGENCE_CEILING,
) -> bool:
    """
    Price falls for three bars while RCI rises for three bars, still below `ceiling`.
    """
    if len(rci) < 3 or len(prices) < 3:
        return False
    price_downtrend = prices[-1] < prices[-2] and prices[-2] < prices[-3]
    rci_uptrend = rci[-1] > rci[-2] and rci[-2] > rci[-3]
    return price_downtrend and rci_uptrend and rci[-1] < ceiling


def check_buy_signal_of_rci(
    rci: Sequence[float],
    prices: Sequence[float],
    band_period: int = BOLLINGER_PERIOD,
    band_std: float = BOLLINGER_STD_DEV,
    oversold: float = RCI_OVERSOLD,
    divergence_ceiling: float = RCI_DIVERGENCE_CEILING,
) -> List[bool]:
    """
    Evaluate all RCI detectors on the latest bar.

    Returns:
        [crossover, double bottom, Bollinger, divergence]
    """
    if not prices:
        return [False, False, False, False]
    lower_band = calculate_lower_band(prices, band_period, band_std)
    return [
        is_rci_crossover_buy_signal(rci, oversold),
        is_rci_double_bottom_buy_signal(rci, oversold),
        is_rci_bollinger_buy_signal(rci, prices[-1], lower_band, oversold),
        is_rci_divergence_buy_signal(rci, prices, divergence_ceiling),
    ]
