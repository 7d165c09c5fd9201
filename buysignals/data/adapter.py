"""
Series adapter: bars in, aligned indicator table out.

Makes a single pass over the bars. Each output column is driven by its own
indicator instance (no sharing between the MAD rate's SMA and the SMA
columns, for example), so every column is exactly what the standalone
indicator would produce. Gap bars (close missing or 0) keep their row with
missing indicator values and are never fed to an indicator.
"""
import logging
from typing import Callable, Dict, List, Optional, Sequence

import pandas as pd

from .bars import bars_from_frame, validate_bars
from .formatting import make_label_formatter
from ..indicators import (
    BollingerLowerBand,
    Indicator,
    MACDIndicator,
    MADRateIndicator,
    RCIIndicator,
    RSIIndicator,
    SMAIndicator,
    StochasticIndicator,
)
from ..shared.types import PriceBar
from ..signals.config import DEFAULT_CONFIG, EngineConfig

logger = logging.getLogger(__name__)

PRICE_COLUMNS = ["open", "high", "low", "close", "volume"]
MACD_COLUMNS = ["macd", "macd_signal", "macd_histogram"]
STOCH_COLUMNS = ["stoch_k", "stoch_d"]


def sma_column(period: int) -> str:
    return f"sma_{period}"


def mad_column(period: int) -> str:
    return f"mad_{period}"


def rci_column(period: int) -> str:
    return f"rci_{period}"


class SeriesAdapter:
    """
    Compute every indicator series for one instrument.

    Usage:
        adapter = SeriesAdapter(config)
        frame = adapter.run(bars)
    """

    def __init__(
        self,
        config: EngineConfig = DEFAULT_CONFIG,
        label_formatter: Optional[Callable[[int], str]] = None,
    ):
        self.config = config
        if label_formatter is None:
            label_formatter = make_label_formatter(
                config.label_format, config.display_timezone, config.timestamp_unit,
            )
        self.label_formatter = label_formatter

    def _build_indicators(self) -> Dict[str, Indicator]:
        """One fresh instance per single-valued column."""
        cfg = self.config
        indicators: Dict[str, Indicator] = {}
        for period in cfg.sma_periods:
            indicators[sma_column(period)] = SMAIndicator(period)
        indicators["rsi"] = RSIIndicator(cfg.rsi_period)
        indicators[mad_column(cfg.mad_short_period)] = MADRateIndicator(cfg.mad_short_period)
        indicators[mad_column(cfg.mad_long_period)] = MADRateIndicator(cfg.mad_long_period)
        for period in sorted(set(cfg.rci_periods) | {cfg.rci_signal_period}):
            indicators[rci_column(period)] = RCIIndicator(period)
        indicators["lower_band"] = BollingerLowerBand(cfg.bollinger_period, cfg.bollinger_std_dev)
        return indicators

    def columns(self) -> List[str]:
        """Output column order."""
        single = list(self._build_indicators())
        return ["label"] + PRICE_COLUMNS + single + MACD_COLUMNS + STOCH_COLUMNS

    def run(self, bars: Sequence[PriceBar]) -> pd.DataFrame:
        """
        Compute the indicator table.

        Args:
            bars: Bars in strictly ascending timestamp order

        Returns:
            DataFrame indexed by timestamp with a label column, the raw
            OHLCV values and one nullable Float64 column per indicator

        Raises:
            BarValidationError: If bars are out of order or carry negative prices
        """
        validate_bars(bars)
        cfg = self.config
        indicators = self._build_indicators()
        macd = MACDIndicator(cfg.macd_fast, cfg.macd_slow, cfg.macd_signal)
        stoch = StochasticIndicator(cfg.stoch_k_period, cfg.stoch_d_period)

        data: Dict[str, List] = {name: [] for name in PRICE_COLUMNS}
        data.update({name: [] for name in indicators})
        data.update({name: [] for name in MACD_COLUMNS + STOCH_COLUMNS})
        labels: List[str] = []
        gaps = 0

        for bar in bars:
            labels.append(self.label_formatter(bar.timestamp))
            data["open"].append(bar.open)
            data["high"].append(bar.high)
            data["low"].append(bar.low)
            data["volume"].append(bar.volume)

            if bar.is_gap:
                gaps += 1
                data["close"].append(None)
                for name in list(indicators) + MACD_COLUMNS + STOCH_COLUMNS:
                    data[name].append(None)
                continue

            data["close"].append(bar.close)
            for name, indicator in indicators.items():
                data[name].append(indicator.update_bar(bar))
            macd.update_bar(bar)
            data["macd"].append(macd.point.macd)
            data["macd_signal"].append(macd.point.signal)
            data["macd_histogram"].append(macd.point.histogram)
            stoch.update_bar(bar)
            data["stoch_k"].append(stoch.k)
            data["stoch_d"].append(stoch.d)

        if gaps:
            logger.debug("%d of %d bars are gaps (no close)", gaps, len(bars))

        index = pd.Index([bar.timestamp for bar in bars], name="timestamp")
        frame = pd.DataFrame(
            {name: pd.Series(values, index=index, dtype="Float64") for name, values in data.items()},
            index=index,
        )
        frame.insert(0, "label", pd.Series(labels, index=index, dtype="object"))
        return frame[self.columns()]

    def run_frame(self, df: pd.DataFrame) -> pd.DataFrame:
        """Like run(), for a DataFrame of OHLCV columns."""
        return self.run(bars_from_frame(df))
