"""
Technical indicator formulas over plain price sequences.

Each function takes the history seen so far (oldest first) and returns the
indicator value for the latest point, or None when there is not enough
history yet. The streaming indicators in implementations.py evaluate these
same formulas over their own rolling windows.
"""
from typing import List, Optional, Sequence

import numpy as np

from .rolling import mean, min_of, max_of, rank
from ..shared.defaults import RSI_FLAT, BOLLINGER_PERIOD, BOLLINGER_STD_DEV


def calculate_sma(prices: Sequence[float], period: int) -> Optional[float]:
    """
    Simple Moving Average of the last `period` prices.

    SMA = (p1 + p2 + ... + pN) / N
    """
    if len(prices) < period:
        return None
    return mean(prices[-period:])


def calculate_ema(data: Sequence[float], period: int) -> Optional[float]:
    """
    Exponential Moving Average of the whole sequence.

    Seeded with the SMA of the first `period` values, then
    EMA = (value - EMA_prev) * 2 / (period + 1) + EMA_prev for every later value.
    With exactly `period` values the result is the seed SMA.
    """
    if len(data) < period:
        return None
    smoothing = 2 / (period + 1)
    ema = mean(data[:period])
    for value in data[period:]:
        ema = (value - ema) * smoothing + ema
    return ema


def rsi_from_changes(changes: Sequence[float], period: int) -> float:
    """RSI from `period` successive price differences."""
    avg_gain = sum(c if c > 0 else 0 for c in changes) / period
    avg_loss = sum(-c if c < 0 else 0 for c in changes) / period

    if avg_gain == 0 and avg_loss == 0:
        return RSI_FLAT
    if avg_loss == 0:
        return 100.0
    return 100 - 100 / (1 + avg_gain / avg_loss)


def calculate_rsi(prices: Sequence[float], period: int) -> Optional[float]:
    """
    Relative Strength Index over the last `period + 1` prices.

    RSI = 100 - 100 / (1 + RS), RS = average gain / average loss, where both
    averages divide the summed moves by `period` (no smoothing).

    A flat window returns 50, a window without losses returns 100.
    """
    if len(prices) < period + 1:
        return None
    window = list(prices[-period - 1:])
    changes = [window[i] - window[i - 1] for i in range(1, len(window))]
    return rsi_from_changes(changes, period)


def rci_from_window(closes: Sequence[float]) -> float:
    """
    Rank Correlation Index of a full window of closes (oldest first).

    RCI = (1 - 6 * sum(d^2) / (n * (n^2 - 1))) * 100 where d is the difference
    between a point's chronological rank (1 = newest) and its price rank
    (1 = highest, ties averaged).
    """
    n = len(closes)
    price_ranks = rank(closes)
    sum_d2 = 0.0
    for i, price_rank in enumerate(price_ranks):
        d = price_rank - (n - i)
        sum_d2 += d * d
    return (1 - (6 * sum_d2) / (n * (n ** 2 - 1))) * 100


def calculate_rci(closes: Sequence[float], period: int) -> Optional[float]:
    """
    Rank Correlation Index over the trailing `period` closes.

    Returns 100 for a strictly rising window and -100 for a strictly falling one.
    """
    if period < 2:
        raise ValueError(f"RCI period must be >= 2, got {period}")
    if len(closes) < period:
        return None
    return rci_from_window(list(closes[-period:]))


def calculate_ma_series(values: Sequence[float], period: int) -> List[float]:
    """Moving average for every full window of `period` values (oldest first)."""
    return [mean(values[i - period + 1:i + 1]) for i in range(period - 1, len(values))]


def calculate_lower_band(
    prices: Sequence[float],
    period: int = BOLLINGER_PERIOD,
    num_std: float = BOLLINGER_STD_DEV,
) -> Optional[float]:
    """
    Lower Bollinger band: SMA(period) - num_std * population std of the same closes.
    """
    if len(prices) < period:
        return None
    window = list(prices[-period:])
    return mean(window) - num_std * float(np.std(window))


def calculate_stochastic_k(highs: Sequence[float], lows: Sequence[float], close: float) -> float:
    """
    Stochastic %K of `close` against the given highs and lows.

    %K = (close - lowest low) / (highest high - lowest low) * 100; a zero
    range yields 0.
    """
    highest = max_of(highs)
    lowest = min_of(lows)
    price_range = highest - lowest
    if price_range == 0:
        return 0.0
    return (close - lowest) / price_range * 100


def calculate_mad_rate(close: float, sma: Optional[float]) -> Optional[float]:
    """Moving-average deviation rate in percent: (close - SMA) / SMA * 100."""
    if sma is None or sma == 0:
        return None
    return (close - sma) / sma * 100
