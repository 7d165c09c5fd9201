"""
Shared types and defaults for the buy-signal engine.

This module provides:
- PriceBar, WeightedSignal and SignalFamily types
- Centralized default values for all indicator and signal parameters
"""
from .types import BarValidationError, PriceBar, SignalFamily, WeightedSignal, no_signal
from .defaults import (
    SMA_PERIODS,
    RSI_PERIOD, RSI_OVERSOLD,
    RCI_PERIODS, RCI_SIGNAL_PERIOD, RCI_OVERSOLD,
    MACD_FAST, MACD_SLOW, MACD_SIGNAL,
    STOCH_K_PERIOD, STOCH_D_PERIOD,
    MAD_SHORT_PERIOD, MAD_LONG_PERIOD,
    RSI_PATTERN_WEIGHTS,
)

__all__ = [
    'BarValidationError',
    'PriceBar',
    'SignalFamily',
    'WeightedSignal',
    'no_signal',
    'SMA_PERIODS',
    'RSI_PERIOD', 'RSI_OVERSOLD',
    'RCI_PERIODS', 'RCI_SIGNAL_PERIOD', 'RCI_OVERSOLD',
    'MACD_FAST', 'MACD_SLOW', 'MACD_SIGNAL',
    'STOCH_K_PERIOD', 'STOCH_D_PERIOD',
    'MAD_SHORT_PERIOD', 'MAD_LONG_PERIOD',
    'RSI_PATTERN_WEIGHTS',
]
