"""
Tests for the whole-sequence indicator formulas.
"""
import numpy as np
import pytest

from buysignals.indicators.technical import (
    calculate_sma,
    calculate_ema,
    calculate_rsi,
    calculate_rci,
    calculate_ma_series,
    calculate_lower_band,
    calculate_stochastic_k,
    calculate_mad_rate,
)


class TestSMA:
    """Test simple moving average."""

    def test_last_window(self):
        assert calculate_sma([1, 2, 3, 4, 5], 3) == pytest.approx(4.0)

    def test_insufficient_history(self):
        assert calculate_sma([1, 2], 3) is None

    def test_period_one_is_identity(self):
        assert calculate_sma([7.0, 9.0], 1) == 9.0


class TestEMA:
    """Test exponential moving average."""

    def test_seed_equals_sma(self):
        prices = [3.0, 5.0, 4.0, 6.0, 7.0]
        assert calculate_ema(prices, 5) == calculate_sma(prices, 5)

    def test_linear_series(self):
        """EMA(5) of 1..10 settles two steps behind the latest value."""
        assert calculate_ema(list(range(1, 11)), 5) == pytest.approx(8.0)

    def test_insufficient_history(self):
        assert calculate_ema([1.0, 2.0], 5) is None


class TestRSI:
    """Test RSI with simple (unsmoothed) averages."""

    def test_flat_is_50(self):
        assert calculate_rsi([100.0] * 15, 14) == 50.0

    def test_only_gains_is_100(self):
        assert calculate_rsi(list(range(1, 16)), 14) == 100.0

    def test_only_losses_is_0(self):
        assert calculate_rsi(list(range(15, 0, -1)), 14) == 0.0

    def test_known_value(self):
        prices = [10, 12, 11, 13, 12, 14, 13, 15]
        assert calculate_rsi(prices, 7) == pytest.approx(72.7272727, rel=1e-6)

    def test_uses_last_window_only(self):
        prices = [50.0, 10.0] + [10, 12, 11, 13, 12, 14, 13, 15]
        assert calculate_rsi(prices, 7) == pytest.approx(calculate_rsi(prices[2:], 7))

    def test_insufficient_history(self):
        assert calculate_rsi([1.0] * 14, 14) is None


class TestRCI:
    """Test rank correlation index."""

    def test_strictly_rising_is_100(self):
        assert calculate_rci([1, 2, 3, 4, 5, 6, 7, 8, 9], 9) == pytest.approx(100.0)

    def test_strictly_falling_is_minus_100(self):
        assert calculate_rci([9, 8, 7, 6, 5, 4, 3, 2, 1], 9) == pytest.approx(-100.0)

    def test_known_value(self):
        assert calculate_rci([105, 102, 108, 103, 106], 5) == pytest.approx(30.0)

    def test_constant_prices_use_average_ranks(self):
        assert calculate_rci([100.0] * 5, 5) == pytest.approx(50.0)

    def test_trailing_window(self):
        closes = [1, 1, 1, 105, 102, 108, 103, 106]
        assert calculate_rci(closes, 5) == pytest.approx(30.0)

    def test_period_too_small(self):
        with pytest.raises(ValueError, match="RCI period"):
            calculate_rci([1.0, 2.0], 1)

    def test_insufficient_history(self):
        assert calculate_rci([1.0, 2.0], 3) is None


class TestHelpers:
    """Test moving-average series, Bollinger band, %K and MAD rate."""

    def test_ma_series(self):
        assert calculate_ma_series([1, 2, 3, 4, 5], 3) == pytest.approx([2.0, 3.0, 4.0])

    def test_ma_series_short_input(self):
        assert calculate_ma_series([1, 2], 3) == []

    def test_lower_band_uses_population_std(self):
        prices = [2.0, 4.0, 4.0, 4.0, 5.0, 5.0, 7.0, 9.0]
        # mean 5, population std 2
        assert calculate_lower_band(prices, 8, 2.0) == pytest.approx(1.0)
        assert calculate_lower_band(prices, 8, 2.0) == pytest.approx(np.mean(prices) - 2 * np.std(prices))

    def test_lower_band_insufficient(self):
        assert calculate_lower_band([1.0, 2.0], 10) is None

    def test_stochastic_k(self):
        assert calculate_stochastic_k([10, 12, 14], [8, 9, 10], 11) == pytest.approx(50.0)

    def test_stochastic_k_zero_range(self):
        assert calculate_stochastic_k([10, 10], [10, 10], 10) == 0.0

    def test_mad_rate(self):
        assert calculate_mad_rate(110.0, 100.0) == pytest.approx(10.0)
        assert calculate_mad_rate(95.0, 100.0) == pytest.approx(-5.0)

    def test_mad_rate_undefined(self):
        assert calculate_mad_rate(100.0, None) is None
        assert calculate_mad_rate(100.0, 0.0) is None
