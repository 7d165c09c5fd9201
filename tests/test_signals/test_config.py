"""
Tests for engine configuration and the YAML loader.
"""
import tempfile
from pathlib import Path

import pytest

from buysignals.signals.config import EngineConfig, DEFAULT_CONFIG, PRESET_CONFIGS, get_preset
from buysignals.signals.config_loader import load_config_from_yaml, save_config_to_yaml
from buysignals.signals.rsi import RsiPattern
from buysignals.shared.defaults import (
    RSI_PERIOD, MACD_FAST, MACD_SLOW, RCI_SIGNAL_PERIOD, HIGHLIGHT_MIN_COUNT, RSI_PATTERN_WEIGHTS,
)

REPO_ROOT = Path(__file__).resolve().parents[2]


class TestEngineConfig:
    """Test EngineConfig dataclass."""

    def test_default_uses_shared_defaults(self):
        assert DEFAULT_CONFIG.rsi_period == RSI_PERIOD
        assert DEFAULT_CONFIG.macd_fast == MACD_FAST
        assert DEFAULT_CONFIG.macd_slow == MACD_SLOW
        assert DEFAULT_CONFIG.rci_signal_period == RCI_SIGNAL_PERIOD
        assert DEFAULT_CONFIG.highlight_min_count == HIGHLIGHT_MIN_COUNT

    def test_periods_become_tuples(self):
        config = EngineConfig(sma_periods=[5, 20], rci_periods=[9])
        assert config.sma_periods == (5, 20)
        assert config.rci_periods == (9,)

    def test_macd_fast_must_be_below_slow(self):
        with pytest.raises(ValueError, match="MACD fast"):
            EngineConfig(macd_fast=26, macd_slow=12)

    def test_mad_short_must_be_below_long(self):
        with pytest.raises(ValueError, match="MAD short_period"):
            EngineConfig(mad_short_period=25, mad_long_period=5)

    def test_non_positive_period(self):
        with pytest.raises(ValueError, match="rsi_period"):
            EngineConfig(rsi_period=0)

    def test_rci_period_minimum(self):
        with pytest.raises(ValueError, match="RCI periods"):
            EngineConfig(rci_periods=(1, 9))

    def test_range_break_period_minimum(self):
        with pytest.raises(ValueError, match="range_break_period"):
            EngineConfig(range_break_period=1)

    def test_label_format(self):
        with pytest.raises(ValueError, match="label_format"):
            EngineConfig(label_format="week")

    def test_timestamp_unit(self):
        assert EngineConfig().timestamp_unit == "s"
        assert EngineConfig(timestamp_unit="ms").timestamp_unit == "ms"
        with pytest.raises(ValueError, match="timestamp_unit"):
            EngineConfig(timestamp_unit="minutes")

    def test_score_threshold_range(self):
        with pytest.raises(ValueError, match="rsi_score_threshold"):
            EngineConfig(rsi_score_threshold=1.5)


class TestRsiWeights:
    """Weight overrides must cover every pattern and sum to 1."""

    def test_default_is_none(self):
        assert DEFAULT_CONFIG.pattern_weights() is None

    def test_override(self):
        weights = {key: 0.0 for key in RSI_PATTERN_WEIGHTS}
        weights["oversold_reversal"] = 0.5
        weights["bullish_divergence"] = 0.5
        config = EngineConfig(rsi_weights=weights)

        mapping = config.pattern_weights()
        assert mapping[RsiPattern.OVERSOLD_REVERSAL] == 0.5
        assert mapping[RsiPattern.W_BOTTOM] == 0.0

    def test_missing_pattern(self):
        weights = dict(RSI_PATTERN_WEIGHTS)
        del weights["w_bottom"]
        with pytest.raises(ValueError, match="missing"):
            EngineConfig(rsi_weights=weights)

    def test_unknown_pattern(self):
        weights = dict(RSI_PATTERN_WEIGHTS)
        weights["cup_and_handle"] = 0.0
        with pytest.raises(ValueError, match="unknown"):
            EngineConfig(rsi_weights=weights)

    def test_must_sum_to_one(self):
        weights = {key: 0.1 for key in RSI_PATTERN_WEIGHTS}
        with pytest.raises(ValueError, match="sum to 1"):
            EngineConfig(rsi_weights=weights)

    def test_negative_weight(self):
        weights = dict(RSI_PATTERN_WEIGHTS)
        weights["ma_cross"] = -0.05
        weights["w_bottom"] = 0.2
        with pytest.raises(ValueError, match="non-negative"):
            EngineConfig(rsi_weights=weights)


class TestPresets:
    def test_presets_exist(self):
        assert "default" in PRESET_CONFIGS
        assert get_preset("default") is DEFAULT_CONFIG
        assert get_preset("intraday").label_format == "time"

    def test_unknown_preset(self):
        with pytest.raises(ValueError, match="Unknown preset"):
            get_preset("weekly")


class TestConfigLoader:
    """Test YAML loading and saving."""

    def test_shipped_default_matches_defaults(self):
        config = load_config_from_yaml(REPO_ROOT / "configs" / "default.yaml")

        assert config.name == "default"
        assert config.sma_periods == DEFAULT_CONFIG.sma_periods
        assert config.rci_periods == DEFAULT_CONFIG.rci_periods
        assert config.rsi_period == DEFAULT_CONFIG.rsi_period
        assert config.macd_signal == DEFAULT_CONFIG.macd_signal
        assert config.bollinger_std_dev == DEFAULT_CONFIG.bollinger_std_dev
        assert config.rsi_weights == RSI_PATTERN_WEIGHTS
        assert config.highlight_min_count == DEFAULT_CONFIG.highlight_min_count
        assert config.timestamp_unit == "s"

    def test_partial_yaml_uses_defaults(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "fast.yaml"
            path.write_text(
                "indicators:\n"
                "  rsi:\n"
                "    period: 9\n"
                "display:\n"
                "  label_format: time\n"
                "  timestamp_unit: ms\n"
            )
            config = load_config_from_yaml(path)

        assert config.name == "fast"
        assert config.rsi_period == 9
        assert config.label_format == "time"
        assert config.timestamp_unit == "ms"
        assert config.macd_fast == MACD_FAST

    def test_invalid_values_raise(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "bad.yaml"
            path.write_text("indicators:\n  macd:\n    fast: 30\n")
            with pytest.raises(ValueError, match="MACD fast"):
                load_config_from_yaml(path)

    def test_missing_file(self):
        with pytest.raises(FileNotFoundError):
            load_config_from_yaml("/nonexistent/config.yaml")

    def test_empty_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "empty.yaml"
            path.write_text("")
            with pytest.raises(ValueError, match="Empty"):
                load_config_from_yaml(path)

    def test_not_a_mapping(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "list.yaml"
            path.write_text("- 1\n- 2\n")
            with pytest.raises(ValueError, match="mapping"):
                load_config_from_yaml(path)

    def test_save_and_load(self):
        config = EngineConfig(
            name="custom",
            description="tuned",
            sma_periods=(5, 25),
            rci_signal_period=14,
            mad_oversold=-5.0,
            label_format="time",
            timestamp_unit="ms",
        )
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "nested" / "custom.yaml"
            save_config_to_yaml(config, path)
            loaded = load_config_from_yaml(path)

        assert loaded == config
