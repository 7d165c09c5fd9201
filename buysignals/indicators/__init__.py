"""
Indicator calculation module.

Provides all indicators used by the signal detectors:
- Rolling-window arithmetic (mean, min, max, rank)
- Whole-sequence formulas (SMA, EMA, RSI, RCI, Bollinger lower band, Stochastic %K, MAD rate)
- Streaming indicators that own their rolling windows

All streaming indicators follow the Indicator interface.
"""
from .rolling import RollingWindow, mean, min_of, max_of, rank, rank_first
from .technical import (
    calculate_sma,
    calculate_ema,
    calculate_rsi,
    calculate_rci,
    calculate_ma_series,
    calculate_lower_band,
    calculate_stochastic_k,
    calculate_mad_rate,
)
from .base import Indicator
from .implementations import (
    SMAIndicator,
    EMAIndicator,
    RSIIndicator,
    RCIIndicator,
    MACDIndicator,
    MacdPoint,
    StochasticIndicator,
    MADRateIndicator,
    BollingerLowerBand,
)

__all__ = [
    'RollingWindow',
    'mean',
    'min_of',
    'max_of',
    'rank',
    'rank_first',
    'calculate_sma',
    'calculate_ema',
    'calculate_rsi',
    'calculate_rci',
    'calculate_ma_series',
    'calculate_lower_band',
    'calculate_stochastic_k',
    'calculate_mad_rate',
    'Indicator',
    'SMAIndicator',
    'EMAIndicator',
    'RSIIndicator',
    'RCIIndicator',
    'MACDIndicator',
    'MacdPoint',
    'StochasticIndicator',
    'MADRateIndicator',
    'BollingerLowerBand',
]
