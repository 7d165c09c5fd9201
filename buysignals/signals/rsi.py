"""
RSI buy-pattern detectors and the weighted RSI aggregation.

Every detector looks at the trailing RSI values (oldest first) and returns a
WeightedSignal whose strength grows with how clearly the pattern formed.
RsiPattern ties each pattern to its weight so the two can not drift apart.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Mapping, Optional, Sequence

from ..indicators.technical import calculate_ma_series
from ..shared.types import WeightedSignal, no_signal
from ..shared.defaults import (
    RSI_OVERSOLD,
    RSI_PATTERN_WEIGHTS,
    RSI_SCORE_THRESHOLD, RSI_MIN_ACTIVE_SIGNALS, RSI_STRONG_SIGNAL,
    RSI_MA_SHORT, RSI_MA_LONG,
    RSI_DOUBLE_BOTTOM_WINDOW, RSI_DOUBLE_BOTTOM_MAX_GAP,
    RSI_W_BOTTOM_WINDOW, RSI_W_BOTTOM_MAX_GAP,
    RSI_SUPPORT_MARGIN,
)

logger = logging.getLogger(__name__)

# Previous RSI values below this all count as a maximal reversal
_REVERSAL_CAP = 20


def detect_oversold_reversal(rsi: Sequence[float]) -> WeightedSignal:
    """RSI was at or below the oversold level and turned up on the latest value."""
    name = RsiPattern.OVERSOLD_REVERSAL.key
    if len(rsi) < 2:
        return no_signal(name)
    latest, previous = rsi[-1], rsi[-2]
    if previous <= RSI_OVERSOLD and latest > previous:
        strength = (RSI_OVERSOLD - min(previous, _REVERSAL_CAP)) / RSI_OVERSOLD
        return WeightedSignal(name, True, strength)
    return no_signal(name)


def detect_trendline_break(rsi: Sequence[float]) -> WeightedSignal:
    """
    Break of a falling RSI trendline.

    Over the last 5 values the final slope is positive while every earlier
    slope was <= 0, and the latest RSI is above the oversold level.
    """
    name = RsiPattern.TRENDLINE_BREAK.key
    if len(rsi) < 5:
        return no_signal(name)
    recent = list(rsi[-5:])
    slopes = [recent[i] - recent[i - 1] for i in range(1, len(recent))]
    breaking_up = slopes[-1] > 0 and all(slope <= 0 for slope in slopes[:-1])
    if breaking_up and recent[-1] > RSI_OVERSOLD:
        return WeightedSignal(name, True, min(abs(slopes[-1]) / 10, 1))
    return no_signal(name)


def detect_bullish_divergence(rsi: Sequence[float], prices: Sequence[float]) -> WeightedSignal:
    """
    Price makes a lower low over the last 5 points while RSI makes a higher low.

    Lows are compared between the first three and the last three of the five.
    """
    name = RsiPattern.BULLISH_DIVERGENCE.key
    if len(rsi) < 5 or len(prices) < 5:
        return no_signal(name)
    last_rsi = list(rsi[-5:])
    last_prices = list(prices[-5:])
    rsi_low1, rsi_low2 = min(last_rsi[:3]), min(last_rsi[-3:])
    price_low1, price_low2 = min(last_prices[:3]), min(last_prices[-3:])
    if price_low2 < price_low1 and rsi_low2 > rsi_low1:
        return WeightedSignal(name, True, min((rsi_low2 - rsi_low1) / 10, 1))
    return no_signal(name)


def _find_bottoms(values: Sequence[float]) -> List[float]:
    """Local minima strictly below the oversold level, in chronological order."""
    bottoms = []
    for i in range(1, len(values) - 1):
        if values[i] < values[i - 1] and values[i] < values[i + 1] and values[i] < RSI_OVERSOLD:
            bottoms.append(values[i])
    return bottoms


def detect_double_bottom(rsi: Sequence[float]) -> WeightedSignal:
    """Two oversold local minima within the last 10 values, less than 5 apart."""
    name = RsiPattern.DOUBLE_BOTTOM.key
    bottoms = _find_bottoms(list(rsi[-RSI_DOUBLE_BOTTOM_WINDOW:]))
    if len(bottoms) >= 2 and abs(bottoms[0] - bottoms[1]) < RSI_DOUBLE_BOTTOM_MAX_GAP:
        return WeightedSignal(name, True, (RSI_OVERSOLD - min(bottoms)) / RSI_OVERSOLD)
    return no_signal(name)


def detect_w_bottom(rsi: Sequence[float]) -> WeightedSignal:
    """
    W-bottom within the last 15 values.

    The second oversold minimum is strictly higher than the first and less
    than 7 above it.
    """
    name = RsiPattern.W_BOTTOM.key
    bottoms = _find_bottoms(list(rsi[-RSI_W_BOTTOM_WINDOW:]))
    if (
        len(bottoms) >= 2
        and bottoms[1] > bottoms[0]
        and abs(bottoms[1] - bottoms[0]) < RSI_W_BOTTOM_MAX_GAP
    ):
        return WeightedSignal(name, True, (RSI_OVERSOLD - min(bottoms)) / RSI_OVERSOLD)
    return no_signal(name)


def detect_support_bounce(rsi: Sequence[float], support: Optional[float] = None) -> WeightedSignal:
    """
    Bounce off the RSI support floor.

    The floor is the minimum of every value except the last three (pass it
    in as `support` when it is tracked incrementally). Fires when the
    previous value sits within 2 of the floor and the latest rises above it.
    """
    name = RsiPattern.SUPPORT_BOUNCE.key
    if len(rsi) < 4:
        return no_signal(name)
    if support is None:
        support = min(rsi[:-3])
    latest, previous = rsi[-1], rsi[-2]
    if previous <= support + RSI_SUPPORT_MARGIN and latest > previous:
        return WeightedSignal(name, True, min((latest - previous) / 5, 1))
    return no_signal(name)


def detect_ma_cross(rsi: Sequence[float]) -> WeightedSignal:
    """5-period average of RSI crosses above its 13-period average on the latest value."""
    name = RsiPattern.MA_CROSS.key
    if len(rsi) < RSI_MA_LONG + 1:
        return no_signal(name)
    # The last two averages only depend on the trailing RSI_MA_LONG + 1 values
    tail = list(rsi[-(RSI_MA_LONG + 1):])
    ma_short = calculate_ma_series(tail, RSI_MA_SHORT)
    ma_long = calculate_ma_series(tail, RSI_MA_LONG)
    if ma_short[-2] <= ma_long[-2] and ma_short[-1] > ma_long[-1]:
        return WeightedSignal(name, True, min((ma_short[-1] - ma_long[-1]) / 5, 1))
    return no_signal(name)


class RsiPattern(Enum):
    """One member per RSI detector, carrying its default aggregation weight."""
    OVERSOLD_REVERSAL = ("oversold_reversal", RSI_PATTERN_WEIGHTS["oversold_reversal"])
    TRENDLINE_BREAK = ("trendline_break", RSI_PATTERN_WEIGHTS["trendline_break"])
    BULLISH_DIVERGENCE = ("bullish_divergence", RSI_PATTERN_WEIGHTS["bullish_divergence"])
    DOUBLE_BOTTOM = ("double_bottom", RSI_PATTERN_WEIGHTS["double_bottom"])
    SUPPORT_BOUNCE = ("support_bounce", RSI_PATTERN_WEIGHTS["support_bounce"])
    MA_CROSS = ("ma_cross", RSI_PATTERN_WEIGHTS["ma_cross"])
    W_BOTTOM = ("w_bottom", RSI_PATTERN_WEIGHTS["w_bottom"])

    def __init__(self, key: str, weight: float):
        self.key = key
        self.weight = weight

    @classmethod
    def from_key(cls, key: str) -> "RsiPattern":
        for pattern in cls:
            if pattern.key == key:
                return pattern
        raise ValueError(f"Unknown RSI pattern '{key}'. Known: {[p.key for p in cls]}")

    def detect(
        self,
        rsi: Sequence[float],
        prices: Sequence[float],
        support: Optional[float] = None,
    ) -> WeightedSignal:
        """Run this pattern's detector."""
        if self is RsiPattern.BULLISH_DIVERGENCE:
            return detect_bullish_divergence(rsi, prices)
        if self is RsiPattern.SUPPORT_BOUNCE:
            return detect_support_bounce(rsi, support)
        return _RSI_ONLY_DETECTORS[self](rsi)


_RSI_ONLY_DETECTORS: Dict[RsiPattern, Callable[[Sequence[float]], WeightedSignal]] = {
    RsiPattern.OVERSOLD_REVERSAL: detect_oversold_reversal,
    RsiPattern.TRENDLINE_BREAK: detect_trendline_break,
    RsiPattern.DOUBLE_BOTTOM: detect_double_bottom,
    RsiPattern.MA_CROSS: detect_ma_cross,
    RsiPattern.W_BOTTOM: detect_w_bottom,
}


@dataclass
class RsiAssessment:
    """Weighted RSI evaluation at one point in time."""
    signals: Dict[RsiPattern, WeightedSignal]
    total_score: float
    active_signals: int
    has_strong_signal: bool
    is_buy: bool

    @property
    def flags(self) -> List[bool]:
        """Raw per-pattern booleans in RsiPattern order (for count-based ranking)."""
        return [self.signals[p].is_signal for p in RsiPattern]


def score_rsi_patterns(
    signals: Mapping[RsiPattern, WeightedSignal],
    weights: Optional[Mapping[RsiPattern, float]] = None,
    score_threshold: float = RSI_SCORE_THRESHOLD,
    min_active_signals: int = RSI_MIN_ACTIVE_SIGNALS,
    strong_signal: float = RSI_STRONG_SIGNAL,
) -> RsiAssessment:
    """
    Aggregate per-pattern results into a buy decision.

    buy = (total weighted score >= score_threshold and at least
    min_active_signals patterns fired) or any fired pattern has
    strength >= strong_signal.
    """
    total_score = 0.0
    for pattern in RsiPattern:
        weight = weights[pattern] if weights is not None else pattern.weight
        total_score += signals[pattern].strength * weight
    active = sum(1 for s in signals.values() if s.is_signal)
    strong = any(s.is_signal and s.strength >= strong_signal for s in signals.values())
    is_buy = (total_score >= score_threshold and active >= min_active_signals) or strong
    return RsiAssessment(
        signals=dict(signals),
        total_score=total_score,
        active_signals=active,
        has_strong_signal=strong,
        is_buy=is_buy,
    )


def assess_rsi(
    rsi: Sequence[float],
    prices: Sequence[float],
    weights: Optional[Mapping[RsiPattern, float]] = None,
    score_threshold: float = RSI_SCORE_THRESHOLD,
    min_active_signals: int = RSI_MIN_ACTIVE_SIGNALS,
    strong_signal: float = RSI_STRONG_SIGNAL,
    support: Optional[float] = None,
) -> RsiAssessment:
    """
    Run every RSI detector on the latest point and aggregate.

    Args:
        rsi: Defined RSI values, oldest first
        prices: Closes ending on the same bar as rsi (may be longer)
        weights: Optional per-pattern weight override (defaults from RsiPattern)
        support: Pre-computed support floor for the support-bounce detector
    """
    signals = {pattern: pattern.detect(rsi, prices, support) for pattern in RsiPattern}
    assessment = score_rsi_patterns(
        signals,
        weights=weights,
        score_threshold=score_threshold,
        min_active_signals=min_active_signals,
        strong_signal=strong_signal,
    )
    logger.debug(
        "RSI assessment: score=%.3f active=%d strong=%s buy=%s",
        assessment.total_score, assessment.active_signals, assessment.has_strong_signal, assessment.is_buy,
    )
    return assessment


def check_buy_signal_of_rsi(rsi: Sequence[float], prices: Sequence[float], **kwargs) -> bool:
    """True if the weighted RSI aggregation calls a buy on the latest point."""
    return assess_rsi(rsi, prices, **kwargs).is_buy
