"""
Buy-signal detection module.

Detectors interpret indicator series; they never compute indicators
themselves. Each family exposes its detectors plus a check_buy_signal_of_*
function returning the family's booleans in a fixed order. RSI patterns
also carry a strength and feed the weighted RSI aggregation.
"""
from .config import EngineConfig, DEFAULT_CONFIG, PRESET_CONFIGS, get_preset
from .config_loader import load_config_from_yaml, save_config_to_yaml
from .rsi import (
    RsiPattern,
    RsiAssessment,
    assess_rsi,
    score_rsi_patterns,
    check_buy_signal_of_rsi,
)
from .macd import MACD_SIGNAL_NAMES, check_buy_signal_of_macd
from .mad_rate import MAD_RATE_SIGNAL_NAMES, check_buy_signal_of_mad_rate
from .rci import RCI_SIGNAL_NAMES, check_buy_signal_of_rci
from .open_close import OPEN_CLOSE_SIGNAL_NAMES, check_buy_signal_of_open_close

__all__ = [
    'EngineConfig',
    'DEFAULT_CONFIG',
    'PRESET_CONFIGS',
    'get_preset',
    'load_config_from_yaml',
    'save_config_to_yaml',
    'RsiPattern',
    'RsiAssessment',
    'assess_rsi',
    'score_rsi_patterns',
    'check_buy_signal_of_rsi',
    'MACD_SIGNAL_NAMES',
    'check_buy_signal_of_macd',
    'MAD_RATE_SIGNAL_NAMES',
    'check_buy_signal_of_mad_rate',
    'RCI_SIGNAL_NAMES',
    'check_buy_signal_of_rci',
    'OPEN_CLOSE_SIGNAL_NAMES',
    'check_buy_signal_of_open_close',
]
