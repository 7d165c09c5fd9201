"""
Shared types for the indicator and signal modules.

This module consolidates the bar record, the weighted signal result and the
signal family enum used across indicators, detectors and the aggregator.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import pandas as pd


class BarValidationError(ValueError):
    """Raised when a bar sequence is malformed (ordering, parallel arrays, columns)."""
    pass


@dataclass(frozen=True)
class PriceBar:
    """
    One OHLCV sample of price history.

    A close of 0, None, NaN or NA marks a bar without trades; such bars are gaps and
    never reach an indicator.
    """
    timestamp: int
    open: Optional[float]
    high: Optional[float]
    low: Optional[float]
    close: Optional[float]
    volume: Optional[float] = None

    @property
    def is_gap(self) -> bool:
        """True if the bar carries no usable close."""
        return bool(pd.isna(self.close)) or self.close == 0


class SignalFamily(Enum):
    """Indicator family a group of detectors belongs to."""
    RSI = "rsi"
    MACD = "macd"
    MAD_RATE = "mad_rate"
    RCI = "rci"
    OPEN_CLOSE = "open_close"


@dataclass(frozen=True)
class WeightedSignal:
    """
    Result of a strength-aware detector.

    strength is in [0, 1] and grows with how far the pattern condition is
    exceeded; it is 0 whenever is_signal is False.
    """
    name: str
    is_signal: bool
    strength: float = 0.0


def no_signal(name: str) -> WeightedSignal:
    """Shorthand for a detector result that did not fire."""
    return WeightedSignal(name=name, is_signal=False, strength=0.0)
