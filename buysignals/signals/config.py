"""
Engine configuration for indicators and buy-signal detection.

Contains the engine configuration and presets.
Config validation runs at construction time (fail fast with clear errors).
"""
import math
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from .rsi import RsiPattern
from ..shared.defaults import (
    SMA_PERIODS,
    RSI_PERIOD,
    RCI_PERIODS, RCI_SIGNAL_PERIOD, RCI_OVERSOLD, RCI_DIVERGENCE_CEILING,
    MACD_FAST, MACD_SLOW, MACD_SIGNAL, MACD_DIVERGENCE_THRESHOLD,
    STOCH_K_PERIOD, STOCH_D_PERIOD,
    MAD_SHORT_PERIOD, MAD_LONG_PERIOD, MAD_OVERSOLD,
    BOLLINGER_PERIOD, BOLLINGER_STD_DEV,
    CONSECUTIVE_RISE_PERIOD, CLOSE_MA_PERIOD, RANGE_BREAK_PERIOD,
    RSI_SCORE_THRESHOLD, RSI_MIN_ACTIVE_SIGNALS, RSI_STRONG_SIGNAL,
    HIGHLIGHT_MIN_COUNT, DISPLAY_TIMEZONE,
)

LABEL_FORMATS = ("day", "time")
TIMESTAMP_UNITS = ("s", "ms", "us", "ns")


def _validate_config(config: "EngineConfig") -> None:
    """Validate indicator and signal parameters. Raises ValueError with clear message on failure."""
    periods = {
        "rsi_period": config.rsi_period,
        "macd_fast": config.macd_fast,
        "macd_slow": config.macd_slow,
        "macd_signal": config.macd_signal,
        "stoch_k_period": config.stoch_k_period,
        "stoch_d_period": config.stoch_d_period,
        "mad_short_period": config.mad_short_period,
        "mad_long_period": config.mad_long_period,
        "bollinger_period": config.bollinger_period,
        "consecutive_rise_period": config.consecutive_rise_period,
        "close_ma_period": config.close_ma_period,
    }
    for name, period in periods.items():
        if period < 1:
            raise ValueError(f"{name} must be >= 1, got {period}")
    for period in config.sma_periods:
        if period < 1:
            raise ValueError(f"sma_periods must all be >= 1, got {list(config.sma_periods)}")
    for period in tuple(config.rci_periods) + (config.rci_signal_period,):
        if period < 2:
            raise ValueError(f"RCI periods must be >= 2, got {period}")
    if config.range_break_period < 2:
        raise ValueError(f"range_break_period must be >= 2, got {config.range_break_period}")
    if config.macd_fast >= config.macd_slow:
        raise ValueError(
            f"MACD fast ({config.macd_fast}) must be less than slow ({config.macd_slow})"
        )
    if config.mad_short_period >= config.mad_long_period:
        raise ValueError(
            f"MAD short_period ({config.mad_short_period}) must be less than long_period ({config.mad_long_period})"
        )
    if config.bollinger_std_dev <= 0:
        raise ValueError(f"bollinger_std_dev must be > 0, got {config.bollinger_std_dev}")
    if not (0 <= config.rsi_score_threshold <= 1):
        raise ValueError(f"rsi_score_threshold must be in [0, 1], got {config.rsi_score_threshold}")
    if not (0 <= config.rsi_strong_signal <= 1):
        raise ValueError(f"rsi_strong_signal must be in [0, 1], got {config.rsi_strong_signal}")
    if config.rsi_min_active_signals < 0:
        raise ValueError(f"rsi_min_active_signals must be >= 0, got {config.rsi_min_active_signals}")
    if not (-100 <= config.rci_oversold <= 100):
        raise ValueError(f"rci_oversold must be in [-100, 100], got {config.rci_oversold}")
    if config.highlight_min_count < 0:
        raise ValueError(f"highlight_min_count must be >= 0, got {config.highlight_min_count}")
    if config.label_format not in LABEL_FORMATS:
        raise ValueError(f"label_format must be one of {LABEL_FORMATS}, got '{config.label_format}'")
    if config.timestamp_unit not in TIMESTAMP_UNITS:
        raise ValueError(f"timestamp_unit must be one of {TIMESTAMP_UNITS}, got '{config.timestamp_unit}'")
    if config.rsi_weights is not None:
        keys = set(config.rsi_weights)
        known = {p.key for p in RsiPattern}
        if keys != known:
            missing = sorted(known - keys)
            unknown = sorted(keys - known)
            raise ValueError(
                f"rsi_weights must name every RSI pattern exactly once (missing: {missing}, unknown: {unknown})"
            )
        if any(w < 0 for w in config.rsi_weights.values()):
            raise ValueError("rsi_weights must be non-negative")
        total = sum(config.rsi_weights.values())
        if not math.isclose(total, 1.0, abs_tol=1e-9):
            raise ValueError(f"rsi_weights must sum to 1, got {total}")


@dataclass
class EngineConfig:
    """Configuration for indicator series and buy-signal evaluation."""

    name: str = "default"
    description: str = ""

    # Display series (from shared.defaults)
    sma_periods: Tuple[int, ...] = SMA_PERIODS
    rci_periods: Tuple[int, ...] = RCI_PERIODS

    # Indicator parameters used by the detectors
    rsi_period: int = RSI_PERIOD
    rci_signal_period: int = RCI_SIGNAL_PERIOD
    macd_fast: int = MACD_FAST
    macd_slow: int = MACD_SLOW
    macd_signal: int = MACD_SIGNAL
    stoch_k_period: int = STOCH_K_PERIOD
    stoch_d_period: int = STOCH_D_PERIOD
    mad_short_period: int = MAD_SHORT_PERIOD
    mad_long_period: int = MAD_LONG_PERIOD
    bollinger_period: int = BOLLINGER_PERIOD
    bollinger_std_dev: float = BOLLINGER_STD_DEV

    # Detector thresholds
    macd_divergence_threshold: float = MACD_DIVERGENCE_THRESHOLD
    mad_oversold: float = MAD_OVERSOLD
    rci_oversold: float = RCI_OVERSOLD
    rci_divergence_ceiling: float = RCI_DIVERGENCE_CEILING
    consecutive_rise_period: int = CONSECUTIVE_RISE_PERIOD
    close_ma_period: int = CLOSE_MA_PERIOD
    range_break_period: int = RANGE_BREAK_PERIOD

    # Weighted RSI aggregation. If rsi_weights is None, RsiPattern weights apply.
    rsi_weights: Optional[Dict[str, float]] = None
    rsi_score_threshold: float = RSI_SCORE_THRESHOLD
    rsi_min_active_signals: int = RSI_MIN_ACTIVE_SIGNALS
    rsi_strong_signal: float = RSI_STRONG_SIGNAL

    # Ranking / display
    highlight_min_count: int = HIGHLIGHT_MIN_COUNT
    display_timezone: str = DISPLAY_TIMEZONE
    label_format: str = "day"  # "day" (MM/DD HH:MM) or "time" (HH:MM)
    timestamp_unit: str = "s"  # epoch unit of bar timestamps, used for labels only

    def __post_init__(self) -> None:
        self.sma_periods = tuple(self.sma_periods)
        self.rci_periods = tuple(self.rci_periods)
        _validate_config(self)

    def pattern_weights(self) -> Optional[Dict[RsiPattern, float]]:
        """rsi_weights keyed by RsiPattern, or None to use the built-in weights."""
        if self.rsi_weights is None:
            return None
        return {RsiPattern.from_key(key): weight for key, weight in self.rsi_weights.items()}


DEFAULT_CONFIG = EngineConfig(
    name="default",
    description="Daily bars: RSI(14), MACD(12,26,9), MAD 5/25, RCI 9/14/25, Stochastic(5,3)",
)

PRESET_CONFIGS = {
    "default": DEFAULT_CONFIG,

    # Intraday bars only differ in how labels are shown
    "intraday": EngineConfig(
        name="intraday",
        description="Intraday bars labelled HH:MM",
        label_format="time",
    ),
}


def get_preset(name: str) -> EngineConfig:
    """Get a preset configuration by name."""
    if name not in PRESET_CONFIGS:
        available = ", ".join(PRESET_CONFIGS.keys())
        raise ValueError(f"Unknown preset: {name}. Available: {available}")
    return PRESET_CONFIGS[name]
