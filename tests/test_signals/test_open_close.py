"""
Tests for the price-action (open/close) detectors.
"""
import pytest

from buysignals.signals.open_close import (
    check_buy_signal_of_open_close,
    check_consecutive_rise,
    check_ma_cross,
    check_range_break,
)


class TestConsecutiveRise:
    def test_rise(self):
        assert check_consecutive_rise([1, 2, 3])
        assert check_consecutive_rise([1, 2, 3, 4, 5], period=5)

    def test_interrupted(self):
        assert not check_consecutive_rise([1, 3, 2])
        assert not check_consecutive_rise([1, 2, 3, 2, 4], period=5)

    def test_insufficient(self):
        assert not check_consecutive_rise([1, 2])


class TestMACross:
    def test_above_mean(self):
        assert check_ma_cross([1, 2, 3, 4, 5])

    def test_below_or_equal(self):
        assert not check_ma_cross([5, 4, 3, 2, 1])
        assert not check_ma_cross([3, 3, 3, 3, 3])


class TestRangeBreak:
    def test_break(self):
        assert check_range_break([1, 2, 3, 4, 5])

    def test_equal_to_previous_high_is_not_a_break(self):
        assert not check_range_break([1, 2, 5, 4, 5])

    def test_window_is_trailing(self):
        assert check_range_break([10, 1, 2, 3, 4, 5])

    def test_period_too_small(self):
        with pytest.raises(ValueError, match="period"):
            check_range_break([1, 2], period=1)

    def test_insufficient(self):
        assert not check_range_break([1, 2, 3, 4])


class TestCheckBuySignalOfOpenClose:
    def test_vector(self):
        assert check_buy_signal_of_open_close([1, 2, 3, 4, 5]) == [True, True, True]
        assert check_buy_signal_of_open_close([5, 4, 3, 2, 1]) == [False, False, False]

    def test_custom_periods(self):
        closes = [5, 4, 3, 4, 5]
        assert check_buy_signal_of_open_close(closes, rise_period=3, ma_period=2, break_period=2) == [
            True, True, True,
        ]
