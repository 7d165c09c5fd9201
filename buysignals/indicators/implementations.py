"""
Streaming indicator implementations following the Indicator interface.

Every class owns its rolling windows and evaluates the formulas from
technical.py over them, so a streamed value is bit-identical to the value
of the corresponding whole-sequence function.
"""
from typing import NamedTuple, Optional, Tuple, Union

import pandas as pd

from .base import Indicator, is_missing
from .rolling import RollingWindow, mean
from .technical import (
    calculate_lower_band,
    calculate_mad_rate,
    calculate_stochastic_k,
    rci_from_window,
    rsi_from_changes,
)
from ..shared.types import PriceBar
from ..shared.defaults import (
    RSI_PERIOD, RCI_SIGNAL_PERIOD,
    MACD_FAST, MACD_SLOW, MACD_SIGNAL,
    STOCH_K_PERIOD, STOCH_D_PERIOD,
    MAD_SHORT_PERIOD,
    BOLLINGER_PERIOD, BOLLINGER_STD_DEV,
)


def _check_period(name: str, period: int, minimum: int = 1) -> None:
    if period < minimum:
        raise ValueError(f"{name} period must be >= {minimum}, got {period}")


class SMAIndicator(Indicator):
    """Simple Moving Average indicator."""

    def __init__(self, period: int):
        _check_period("SMA", period)
        self.period = period
        self.min_history = period
        self.reset()

    def reset(self) -> None:
        self._window: RollingWindow[float] = RollingWindow(self.period)
        self._value: Optional[float] = None

    def update(self, value: float) -> Optional[float]:
        self._window.push(value)
        self._value = mean(self._window) if self._window.is_full else None
        return self._value

    @property
    def value(self) -> Optional[float]:
        return self._value


class EMAIndicator(Indicator):
    """
    Exponential Moving Average indicator.

    Seeded with the SMA of the first `period` samples.
    """

    def __init__(self, period: int):
        _check_period("EMA", period)
        self.period = period
        self.min_history = period
        self.smoothing = 2 / (period + 1)
        self.reset()

    def reset(self) -> None:
        self._seed: RollingWindow[float] = RollingWindow(self.period)
        self._value: Optional[float] = None

    def update(self, value: float) -> Optional[float]:
        if self._value is None:
            self._seed.push(value)
            if self._seed.is_full:
                self._value = mean(self._seed)
        else:
            self._value = (value - self._value) * self.smoothing + self._value
        return self._value

    @property
    def value(self) -> Optional[float]:
        return self._value


class RSIIndicator(Indicator):
    """Relative Strength Index over the last period + 1 closes (simple averages)."""

    def __init__(self, period: int = RSI_PERIOD):
        _check_period("RSI", period)
        self.period = period
        self.min_history = period + 1
        self.reset()

    def reset(self) -> None:
        self._closes: RollingWindow[float] = RollingWindow(self.period + 1)
        self._value: Optional[float] = None

    def update(self, value: float) -> Optional[float]:
        self._closes.push(value)
        if not self._closes.is_full:
            self._value = None
            return None
        closes = self._closes.values()
        changes = [closes[i] - closes[i - 1] for i in range(1, len(closes))]
        self._value = rsi_from_changes(changes, self.period)
        return self._value

    @property
    def value(self) -> Optional[float]:
        return self._value


class RCIIndicator(Indicator):
    """Rank Correlation Index between chronological order and price rank."""

    def __init__(self, period: int = RCI_SIGNAL_PERIOD):
        _check_period("RCI", period, minimum=2)
        self.period = period
        self.min_history = period
        self.reset()

    def reset(self) -> None:
        self._closes: RollingWindow[float] = RollingWindow(self.period)
        self._value: Optional[float] = None

    def update(self, value: float) -> Optional[float]:
        self._closes.push(value)
        self._value = rci_from_window(self._closes.values()) if self._closes.is_full else None
        return self._value

    @property
    def value(self) -> Optional[float]:
        return self._value


class MacdPoint(NamedTuple):
    """MACD components after one sample; each is None until defined."""
    macd: Optional[float]
    signal: Optional[float]
    histogram: Optional[float]


class MACDIndicator(Indicator):
    """
    MACD (Moving Average Convergence Divergence) indicator.

    macd = EMA(fast) - EMA(slow); signal = EMA(signal) of the macd values;
    histogram = macd - signal. update() returns the histogram, the most
    commonly used MACD value; all three components are on .point.
    """

    def __init__(
        self,
        fast: int = MACD_FAST,
        slow: int = MACD_SLOW,
        signal: int = MACD_SIGNAL,
    ):
        if fast >= slow:
            raise ValueError(f"MACD fast period ({fast}) must be less than slow period ({slow})")
        self.fast = fast
        self.slow = slow
        self.signal = signal
        self.min_history = slow + signal - 1
        self.reset()

    def reset(self) -> None:
        self._ema_fast = EMAIndicator(self.fast)
        self._ema_slow = EMAIndicator(self.slow)
        self._ema_signal = EMAIndicator(self.signal)
        self.point = MacdPoint(None, None, None)

    def update(self, value: float) -> Optional[float]:
        fast = self._ema_fast.update(value)
        slow = self._ema_slow.update(value)
        if fast is None or slow is None:
            self.point = MacdPoint(None, None, None)
            return None
        macd = fast - slow
        signal = self._ema_signal.update(macd)
        histogram = macd - signal if signal is not None else None
        self.point = MacdPoint(macd, signal, histogram)
        return histogram

    @property
    def value(self) -> Optional[float]:
        return self.point.histogram

    def calculate_components(self, prices: pd.Series) -> Tuple[pd.Series, pd.Series, pd.Series]:
        """Calculate all MACD components: line, signal, histogram."""
        runner = self.fresh()
        rows = []
        for price in prices.tolist():
            if is_missing(price):
                rows.append(MacdPoint(None, None, None))
            else:
                runner.update(float(price))
                rows.append(runner.point)
        columns = []
        for field in MacdPoint._fields:
            columns.append(pd.Series(
                [getattr(r, field) for r in rows], index=prices.index, dtype="Float64", name=field,
            ))
        return columns[0], columns[1], columns[2]


class StochasticIndicator(Indicator):
    """
    Stochastic oscillator (%K and %D).

    Uses high/low/close when given a bar; a bare close is treated as a bar
    whose high and low equal the close (close-only approximation).
    """

    def __init__(self, k_period: int = STOCH_K_PERIOD, d_period: int = STOCH_D_PERIOD):
        _check_period("Stochastic %K", k_period)
        _check_period("Stochastic %D", d_period)
        self.k_period = k_period
        self.d_period = d_period
        self.min_history = k_period
        self.reset()

    def reset(self) -> None:
        self._highs: RollingWindow[float] = RollingWindow(self.k_period)
        self._lows: RollingWindow[float] = RollingWindow(self.k_period)
        self._k_values: RollingWindow[float] = RollingWindow(self.d_period)
        self.k: Optional[float] = None
        self.d: Optional[float] = None

    def update(self, value: float, high: Optional[float] = None, low: Optional[float] = None) -> Optional[float]:
        self._highs.push(value if high is None else high)
        self._lows.push(value if low is None else low)
        if not self._highs.is_full:
            self.k, self.d = None, None
            return None
        self.k = calculate_stochastic_k(self._highs, self._lows, value)
        self._k_values.push(self.k)
        self.d = mean(self._k_values) if self._k_values.is_full else None
        return self.k

    def update_bar(self, bar: PriceBar) -> Optional[float]:
        return self.update(bar.close, high=bar.high, low=bar.low)

    @property
    def value(self) -> Optional[float]:
        return self.k

    def calculate_components(self, data: Union[pd.Series, pd.DataFrame]) -> Tuple[pd.Series, pd.Series]:
        """
        Calculate %K and %D.

        Args:
            data: DataFrame with high/low/close columns (any case) or a close Series

        Returns:
            Tuple of (%K, %D) nullable Float64 series
        """
        runner = self.fresh()
        if isinstance(data, pd.DataFrame):
            cols = {c.lower(): c for c in data.columns}
            closes = data[cols["close"]].tolist()
            highs = data[cols["high"]].tolist() if "high" in cols else [None] * len(closes)
            lows = data[cols["low"]].tolist() if "low" in cols else [None] * len(closes)
        else:
            closes = data.tolist()
            highs = lows = [None] * len(closes)
        k_out, d_out = [], []
        for close, high, low in zip(closes, highs, lows):
            if is_missing(close):
                k_out.append(None)
                d_out.append(None)
                continue
            runner.update(
                float(close),
                high=None if is_missing(high) else float(high),
                low=None if is_missing(low) else float(low),
            )
            k_out.append(runner.k)
            d_out.append(runner.d)
        return (
            pd.Series(k_out, index=data.index, dtype="Float64", name="k"),
            pd.Series(d_out, index=data.index, dtype="Float64", name="d"),
        )


class MADRateIndicator(Indicator):
    """Moving-average deviation rate: (close - SMA) / SMA * 100."""

    def __init__(self, period: int = MAD_SHORT_PERIOD):
        _check_period("MAD rate", period)
        self.period = period
        self.min_history = period
        self.reset()

    def reset(self) -> None:
        self._sma = SMAIndicator(self.period)
        self._value: Optional[float] = None

    def update(self, value: float) -> Optional[float]:
        self._value = calculate_mad_rate(value, self._sma.update(value))
        return self._value

    @property
    def value(self) -> Optional[float]:
        return self._value


class BollingerLowerBand(Indicator):
    """Lower Bollinger band: SMA - num_std * population standard deviation."""

    def __init__(self, period: int = BOLLINGER_PERIOD, num_std: float = BOLLINGER_STD_DEV):
        _check_period("Bollinger", period)
        self.period = period
        self.num_std = num_std
        self.min_history = period
        self.reset()

    def reset(self) -> None:
        self._closes: RollingWindow[float] = RollingWindow(self.period)
        self._value: Optional[float] = None

    def update(self, value: float) -> Optional[float]:
        self._closes.push(value)
        self._value = calculate_lower_band(self._closes.values(), self.period, self.num_std)
        return self._value

    @property
    def value(self) -> Optional[float]:
        return self._value
