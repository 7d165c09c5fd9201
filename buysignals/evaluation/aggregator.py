"""
Signal aggregation: run every detector family on an indicator table.

Two aggregation policies live side by side:
- weighted RSI scoring (RsiAssessment.is_buy), and
- the raw count: every detector boolean of every family (the 7 RSI pattern
  flags, not the RSI is_buy decision) is tallied into a combined count
  used for ranking and highlighting.

Indicator columns only hold defined values on a suffix of the non-gap bars,
so each family's inputs are the defined values of its columns, aligned on
the latest bar.
"""
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Union

import pandas as pd

from ..data.adapter import SeriesAdapter, mad_column, rci_column
from ..shared.defaults import HIGHLIGHT_MIN_COUNT
from ..shared.types import PriceBar, SignalFamily
from ..signals.config import DEFAULT_CONFIG, EngineConfig
from ..signals.macd import MACD_SIGNAL_NAMES, check_buy_signal_of_macd
from ..signals.mad_rate import MAD_RATE_SIGNAL_NAMES, check_buy_signal_of_mad_rate
from ..signals.open_close import OPEN_CLOSE_SIGNAL_NAMES, check_buy_signal_of_open_close
from ..signals.rci import RCI_SIGNAL_NAMES, check_buy_signal_of_rci
from ..signals.rsi import RsiAssessment, RsiPattern, assess_rsi

logger = logging.getLogger(__name__)

# Longest look-back of any RSI detector (MA cross: 13 + 1, W bottom: 15)
_RSI_TAIL = 15
_PRICE_TAIL = 5
_MACD_TAIL = 3
_MAD_TAIL = 5
_RCI_TAIL = 4


@dataclass
class FamilySignals:
    """Detector booleans of one family, in detector order."""
    family: SignalFamily
    names: Sequence[str]
    flags: List[bool]

    @property
    def count(self) -> int:
        return sum(1 for f in self.flags if f)

    def as_dict(self) -> Dict[str, bool]:
        return dict(zip(self.names, self.flags))


@dataclass
class SignalReport:
    """All detector results for the latest bar of one instrument."""
    timestamp: Optional[int]
    families: Dict[SignalFamily, FamilySignals]
    rsi: RsiAssessment
    highlight_min_count: int = HIGHLIGHT_MIN_COUNT

    @property
    def combined_count(self) -> int:
        """
        Number of detectors that fired across all families.

        The RSI family adds its 7 pattern flags to the count, not its single
        weighted is_buy decision, so the count ranges over 21 detectors.
        """
        return sum(f.count for f in self.families.values())

    @property
    def is_highlighted(self) -> bool:
        return self.combined_count >= self.highlight_min_count

    def flags(self, family: SignalFamily) -> List[bool]:
        return self.families[family].flags

    def to_dict(self) -> Dict[str, object]:
        """Flat dict for tabular output."""
        row: Dict[str, object] = {"timestamp": self.timestamp}
        for family, signals in self.families.items():
            for name, flag in signals.as_dict().items():
                row[f"{family.value}.{name}"] = flag
        row["rsi.score"] = self.rsi.total_score
        row["rsi.buy"] = self.rsi.is_buy
        row["count"] = self.combined_count
        row["highlighted"] = self.is_highlighted
        return row


@dataclass
class DetectorInputs:
    """
    Defined indicator values of one instrument, oldest first.

    closes/timestamps cover every non-gap bar; each indicator list is a
    suffix of them (it becomes defined later and stays defined).
    """
    timestamps: List[int]
    closes: List[float]
    rsi: List[float]
    macd: List[float]
    macd_signal: List[float]
    short_mad: List[float]
    long_mad: List[float]
    rci: List[float]

    @classmethod
    def from_frame(cls, frame: pd.DataFrame, config: EngineConfig = DEFAULT_CONFIG) -> "DetectorInputs":
        """Extract detector inputs from a SeriesAdapter table."""
        def defined(column: str) -> List[float]:
            return frame[column].dropna().astype(float).tolist()

        traded = frame["close"].notna()
        return cls(
            timestamps=[int(t) for t in frame.index[traded.to_numpy(dtype=bool)]],
            closes=defined("close"),
            rsi=defined("rsi"),
            macd=defined("macd"),
            macd_signal=defined("macd_signal"),
            short_mad=defined(mad_column(config.mad_short_period)),
            long_mad=defined(mad_column(config.mad_long_period)),
            rci=defined(rci_column(config.rci_signal_period)),
        )

    def upto(self, values: List[float], end: int, tail: Optional[int] = None) -> List[float]:
        """
        Values of an indicator list defined on the first `end` non-gap bars.

        Args:
            values: One of the indicator lists (a suffix of closes)
            end: Number of non-gap bars considered
            tail: Keep only the last `tail` values
        """
        stop = end - (len(self.closes) - len(values))
        if stop <= 0:
            return []
        start = 0 if tail is None else max(0, stop - tail)
        return values[start:stop]


def _rsi_assessment(
    inputs: DetectorInputs,
    end: int,
    config: EngineConfig,
    support: Optional[float] = None,
) -> RsiAssessment:
    rsi = inputs.upto(inputs.rsi, end, _RSI_TAIL)
    prices = inputs.closes[max(0, end - _PRICE_TAIL):end]
    return assess_rsi(
        rsi,
        prices,
        weights=config.pattern_weights(),
        score_threshold=config.rsi_score_threshold,
        min_active_signals=config.rsi_min_active_signals,
        strong_signal=config.rsi_strong_signal,
        support=support,
    )


def _macd_flags(inputs: DetectorInputs, end: int, config: EngineConfig) -> List[bool]:
    return check_buy_signal_of_macd(
        inputs.upto(inputs.macd, end, _MACD_TAIL),
        inputs.upto(inputs.macd_signal, end, _MACD_TAIL),
        config.macd_divergence_threshold,
    )


def _mad_rate_flags(inputs: DetectorInputs, end: int, config: EngineConfig) -> List[bool]:
    return check_buy_signal_of_mad_rate(
        inputs.upto(inputs.short_mad, end, _MAD_TAIL),
        inputs.upto(inputs.long_mad, end, _MAD_TAIL),
        inputs.closes[max(0, end - _PRICE_TAIL):end],
        config.mad_oversold,
    )


def _rci_flags(inputs: DetectorInputs, end: int, config: EngineConfig) -> List[bool]:
    price_tail = max(config.bollinger_period, 3)
    return check_buy_signal_of_rci(
        inputs.upto(inputs.rci, end, _RCI_TAIL),
        inputs.closes[max(0, end - price_tail):end],
        band_period=config.bollinger_period,
        band_std=config.bollinger_std_dev,
        oversold=config.rci_oversold,
        divergence_ceiling=config.rci_divergence_ceiling,
    )


def _open_close_flags(inputs: DetectorInputs, end: int, config: EngineConfig) -> List[bool]:
    price_tail = max(config.consecutive_rise_period, config.close_ma_period, config.range_break_period)
    return check_buy_signal_of_open_close(
        inputs.closes[max(0, end - price_tail):end],
        rise_period=config.consecutive_rise_period,
        ma_period=config.close_ma_period,
        break_period=config.range_break_period,
    )


def _as_frame(
    data: Union[pd.DataFrame, Sequence[PriceBar]],
    config: EngineConfig,
) -> pd.DataFrame:
    if isinstance(data, pd.DataFrame):
        return data
    return SeriesAdapter(config).run(data)


def evaluate_signals(
    data: Union[pd.DataFrame, Sequence[PriceBar]],
    config: EngineConfig = DEFAULT_CONFIG,
) -> SignalReport:
    """
    Evaluate every detector family on the latest bar.

    Args:
        data: SeriesAdapter output table, or bars (run through a SeriesAdapter)
        config: Engine configuration

    Returns:
        SignalReport with per-family flags, the weighted RSI assessment and
        the combined count
    """
    frame = _as_frame(data, config)
    inputs = DetectorInputs.from_frame(frame, config)
    end = len(inputs.closes)

    # Support floor spans the whole RSI history, not just the detector tail
    support = min(inputs.rsi[:-3]) if len(inputs.rsi) >= 4 else None
    rsi = _rsi_assessment(inputs, end, config, support=support)
    families = {
        SignalFamily.RSI: FamilySignals(SignalFamily.RSI, tuple(p.key for p in RsiPattern), rsi.flags),
        SignalFamily.MACD: FamilySignals(SignalFamily.MACD, MACD_SIGNAL_NAMES, _macd_flags(inputs, end, config)),
        SignalFamily.MAD_RATE: FamilySignals(
            SignalFamily.MAD_RATE, MAD_RATE_SIGNAL_NAMES, _mad_rate_flags(inputs, end, config),
        ),
        SignalFamily.RCI: FamilySignals(SignalFamily.RCI, RCI_SIGNAL_NAMES, _rci_flags(inputs, end, config)),
        SignalFamily.OPEN_CLOSE: FamilySignals(
            SignalFamily.OPEN_CLOSE, OPEN_CLOSE_SIGNAL_NAMES, _open_close_flags(inputs, end, config),
        ),
    }
    report = SignalReport(
        timestamp=inputs.timestamps[-1] if inputs.timestamps else None,
        families=families,
        rsi=rsi,
        highlight_min_count=config.highlight_min_count,
    )
    logger.debug(
        "Signals at %s: %s (count=%d)",
        report.timestamp,
        {family.value: signals.count for family, signals in families.items()},
        report.combined_count,
    )
    return report


def _flag_frame(rows: List[List[bool]], names: Sequence[str], index: List[int]) -> pd.DataFrame:
    return pd.DataFrame(
        rows if rows else None,
        index=pd.Index(index, name="timestamp"),
        columns=list(names),
        dtype="boolean",
    )


def signal_series(
    data: Union[pd.DataFrame, Sequence[PriceBar]],
    config: EngineConfig = DEFAULT_CONFIG,
) -> Dict[SignalFamily, pd.DataFrame]:
    """
    Evaluate every detector family at every bar where it can be evaluated.

    Each family's frame is indexed by the timestamps of the bars on which
    its driving indicator is defined (RSI for the RSI patterns, the MACD
    line, the short MAD rate, the signal-period RCI, every non-gap bar for
    open/close). Columns are nullable booleans, one per detector; the RSI
    frame also carries the weighted `score` and `buy` decision.

    The RSI support floor is tracked incrementally rather than rescanning
    the history at every bar.
    """
    frame = _as_frame(data, config)
    inputs = DetectorInputs.from_frame(frame, config)
    total = len(inputs.closes)

    def span(values: List[float]) -> range:
        return range(total - len(values) + 1, total + 1)

    # RSI
    rsi_names = [p.key for p in RsiPattern]
    rsi_rows, scores, buys, rsi_index = [], [], [], []
    floor: Optional[float] = None
    offset = total - len(inputs.rsi)
    for end in span(inputs.rsi):
        defined = end - offset
        if defined >= 4:
            value = inputs.rsi[defined - 4]
            floor = value if floor is None else min(floor, value)
        assessment = _rsi_assessment(inputs, end, config, support=floor)
        rsi_rows.append(assessment.flags)
        scores.append(assessment.total_score)
        buys.append(assessment.is_buy)
        rsi_index.append(inputs.timestamps[end - 1])
    rsi_frame = _flag_frame(rsi_rows, rsi_names, rsi_index)
    rsi_frame["score"] = pd.Series(scores, index=rsi_frame.index, dtype="Float64")
    rsi_frame["buy"] = pd.Series(buys, index=rsi_frame.index, dtype="boolean")

    result = {SignalFamily.RSI: rsi_frame}
    families = [
        (SignalFamily.MACD, MACD_SIGNAL_NAMES, inputs.macd, _macd_flags),
        (SignalFamily.MAD_RATE, MAD_RATE_SIGNAL_NAMES, inputs.short_mad, _mad_rate_flags),
        (SignalFamily.RCI, RCI_SIGNAL_NAMES, inputs.rci, _rci_flags),
        (SignalFamily.OPEN_CLOSE, OPEN_CLOSE_SIGNAL_NAMES, inputs.closes, _open_close_flags),
    ]
    for family, names, driver, evaluate in families:
        ends = list(span(driver))
        rows = [evaluate(inputs, end, config) for end in ends]
        result[family] = _flag_frame(rows, names, [inputs.timestamps[end - 1] for end in ends])

    logger.debug(
        "Signal series: %s",
        {family.value: len(f) for family, f in result.items()},
    )
    return result
