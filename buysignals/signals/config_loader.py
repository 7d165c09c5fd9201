"""
YAML configuration loader for the buy-signal engine.

Loads engine configurations from YAML files, allowing easy sharing
and modification of indicator periods and thresholds without code changes.
"""
from pathlib import Path
from typing import Union

import yaml

from .config import EngineConfig
from ..shared.defaults import *


def load_config_from_yaml(yaml_path: Union[str, Path]) -> EngineConfig:
    """
    Load engine configuration from YAML file.

    Args:
        yaml_path: Path to YAML configuration file

    Returns:
        EngineConfig object

    Raises:
        FileNotFoundError: If YAML file doesn't exist
        ValueError: If YAML is empty or holds invalid values
    """
    yaml_path = Path(yaml_path)

    if not yaml_path.exists():
        raise FileNotFoundError(f"Config file not found: {yaml_path}")

    with open(yaml_path, 'r') as f:
        config_dict = yaml.safe_load(f)

    if not config_dict:
        raise ValueError(f"Empty config file: {yaml_path}")
    if not isinstance(config_dict, dict):
        raise ValueError(f"Config file must contain a mapping: {yaml_path}")

    name = config_dict.get('name', yaml_path.stem)
    description = config_dict.get('description', '')

    # Indicators
    indicators = config_dict.get('indicators', {}) or {}
    sma = indicators.get('sma', {}) or {}
    rsi = indicators.get('rsi', {}) or {}
    rci = indicators.get('rci', {}) or {}
    macd = indicators.get('macd', {}) or {}
    stochastic = indicators.get('stochastic', {}) or {}
    mad_rate = indicators.get('mad_rate', {}) or {}
    bollinger = indicators.get('bollinger', {}) or {}

    # Signals
    signals = config_dict.get('signals', {}) or {}
    rsi_signals = signals.get('rsi', {}) or {}
    macd_signals = signals.get('macd', {}) or {}
    mad_signals = signals.get('mad_rate', {}) or {}
    rci_signals = signals.get('rci', {}) or {}
    open_close = signals.get('open_close', {}) or {}

    # Display
    display = config_dict.get('display', {}) or {}

    return EngineConfig(
        name=name,
        description=description,

        sma_periods=tuple(sma.get('periods', SMA_PERIODS)),
        rsi_period=rsi.get('period', RSI_PERIOD),
        rci_periods=tuple(rci.get('periods', RCI_PERIODS)),
        rci_signal_period=rci.get('signal_period', RCI_SIGNAL_PERIOD),
        macd_fast=macd.get('fast', MACD_FAST),
        macd_slow=macd.get('slow', MACD_SLOW),
        macd_signal=macd.get('signal', MACD_SIGNAL),
        stoch_k_period=stochastic.get('k_period', STOCH_K_PERIOD),
        stoch_d_period=stochastic.get('d_period', STOCH_D_PERIOD),
        mad_short_period=mad_rate.get('short_period', MAD_SHORT_PERIOD),
        mad_long_period=mad_rate.get('long_period', MAD_LONG_PERIOD),
        bollinger_period=bollinger.get('period', BOLLINGER_PERIOD),
        bollinger_std_dev=bollinger.get('std_dev', BOLLINGER_STD_DEV),

        rsi_weights=rsi_signals.get('weights'),
        rsi_score_threshold=rsi_signals.get('score_threshold', RSI_SCORE_THRESHOLD),
        rsi_min_active_signals=rsi_signals.get('min_active_signals', RSI_MIN_ACTIVE_SIGNALS),
        rsi_strong_signal=rsi_signals.get('strong_signal', RSI_STRONG_SIGNAL),
        macd_divergence_threshold=macd_signals.get('divergence_threshold', MACD_DIVERGENCE_THRESHOLD),
        mad_oversold=mad_signals.get('oversold', MAD_OVERSOLD),
        rci_oversold=rci_signals.get('oversold', RCI_OVERSOLD),
        rci_divergence_ceiling=rci_signals.get('divergence_ceiling', RCI_DIVERGENCE_CEILING),
        consecutive_rise_period=open_close.get('rise_period', CONSECUTIVE_RISE_PERIOD),
        close_ma_period=open_close.get('ma_period', CLOSE_MA_PERIOD),
        range_break_period=open_close.get('break_period', RANGE_BREAK_PERIOD),

        highlight_min_count=display.get('highlight_min_count', HIGHLIGHT_MIN_COUNT),
        display_timezone=display.get('timezone', DISPLAY_TIMEZONE),
        label_format=display.get('label_format', 'day'),
        timestamp_unit=display.get('timestamp_unit', 's'),
    )


def save_config_to_yaml(config: EngineConfig, yaml_path: Union[str, Path]):
    """
    Save engine configuration to YAML file.

    Args:
        config: EngineConfig object to save
        yaml_path: Path where to save YAML file
    """
    yaml_path = Path(yaml_path)

    config_dict = {
        'name': config.name,
        'description': config.description,

        'indicators': {
            'sma': {'periods': list(config.sma_periods)},
            'rsi': {'period': config.rsi_period},
            'rci': {
                'periods': list(config.rci_periods),
                'signal_period': config.rci_signal_period,
            },
            'macd': {
                'fast': config.macd_fast,
                'slow': config.macd_slow,
                'signal': config.macd_signal,
            },
            'stochastic': {
                'k_period': config.stoch_k_period,
                'd_period': config.stoch_d_period,
            },
            'mad_rate': {
                'short_period': config.mad_short_period,
                'long_period': config.mad_long_period,
            },
            'bollinger': {
                'period': config.bollinger_period,
                'std_dev': config.bollinger_std_dev,
            },
        },

        'signals': {
            'rsi': {
                **({'weights': dict(config.rsi_weights)} if config.rsi_weights is not None else {}),
                'score_threshold': config.rsi_score_threshold,
                'min_active_signals': config.rsi_min_active_signals,
                'strong_signal': config.rsi_strong_signal,
            },
            'macd': {'divergence_threshold': config.macd_divergence_threshold},
            'mad_rate': {'oversold': config.mad_oversold},
            'rci': {
                'oversold': config.rci_oversold,
                'divergence_ceiling': config.rci_divergence_ceiling,
            },
            'open_close': {
                'rise_period': config.consecutive_rise_period,
                'ma_period': config.close_ma_period,
                'break_period': config.range_break_period,
            },
        },

        'display': {
            'highlight_min_count': config.highlight_min_count,
            'timezone': config.display_timezone,
            'label_format': config.label_format,
            'timestamp_unit': config.timestamp_unit,
        },
    }

    # Ensure parent directory exists
    yaml_path.parent.mkdir(parents=True, exist_ok=True)

    with open(yaml_path, 'w') as f:
        yaml.dump(config_dict, f, default_flow_style=False, sort_keys=False)
