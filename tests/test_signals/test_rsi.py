"""
Tests for the RSI pattern detectors and the weighted RSI aggregation.
"""
import pytest

from buysignals.shared.types import WeightedSignal, no_signal
from buysignals.signals.rsi import (
    RsiPattern,
    assess_rsi,
    check_buy_signal_of_rsi,
    detect_bullish_divergence,
    detect_double_bottom,
    detect_ma_cross,
    detect_oversold_reversal,
    detect_support_bounce,
    detect_trendline_break,
    detect_w_bottom,
    score_rsi_patterns,
)


def _signals(**strengths):
    """Pattern results with the given strengths firing and everything else silent."""
    result = {}
    for pattern in RsiPattern:
        if pattern.key in strengths:
            result[pattern] = WeightedSignal(pattern.key, True, strengths[pattern.key])
        else:
            result[pattern] = no_signal(pattern.key)
    return result


class TestOversoldReversal:
    def test_fires_on_turn_up(self):
        signal = detect_oversold_reversal([40, 25, 28])
        assert signal.is_signal
        # previous values above 20 count as 20
        assert signal.strength == pytest.approx(1 / 3)

    def test_strength_grows_with_depth(self):
        assert detect_oversold_reversal([40, 15, 18]).strength == pytest.approx(0.5)
        assert detect_oversold_reversal([40, 0, 5]).strength == pytest.approx(1.0)

    def test_boundary_at_30(self):
        assert detect_oversold_reversal([40, 30, 31]).is_signal
        assert not detect_oversold_reversal([40, 30.5, 31]).is_signal

    def test_no_turn_up(self):
        assert not detect_oversold_reversal([40, 25, 24]).is_signal

    def test_insufficient(self):
        signal = detect_oversold_reversal([25])
        assert not signal.is_signal
        assert signal.strength == 0


class TestTrendlineBreak:
    def test_break(self):
        signal = detect_trendline_break([50, 45, 40, 38, 45])
        assert signal.is_signal
        assert signal.strength == pytest.approx(0.7)

    def test_strength_capped(self):
        assert detect_trendline_break([60, 50, 40, 30, 45]).strength == 1

    def test_latest_must_be_above_oversold(self):
        assert not detect_trendline_break([40, 35, 30, 25, 28]).is_signal

    def test_prior_rise_breaks_pattern(self):
        assert not detect_trendline_break([50, 52, 40, 38, 45]).is_signal

    def test_insufficient(self):
        assert not detect_trendline_break([50, 45, 40, 45]).is_signal


class TestBullishDivergence:
    def test_price_lower_low_rsi_higher_low(self):
        signal = detect_bullish_divergence([30, 25, 28, 27, 29], [100, 98, 97, 96, 95])
        assert signal.is_signal
        assert signal.strength == pytest.approx(0.2)

    def test_no_price_lower_low(self):
        assert not detect_bullish_divergence([30, 25, 28, 27, 29], [100, 98, 97, 98, 99]).is_signal

    def test_rsi_lower_low(self):
        assert not detect_bullish_divergence([30, 25, 28, 24, 29], [100, 98, 97, 96, 95]).is_signal

    def test_insufficient_prices(self):
        assert not detect_bullish_divergence([30, 25, 28, 27, 29], [97, 96, 95]).is_signal


class TestBottoms:
    def test_double_bottom(self):
        signal = detect_double_bottom([40, 25, 35, 27, 40])
        assert signal.is_signal
        assert signal.strength == pytest.approx(5 / 30)

    def test_double_bottom_gap_too_wide(self):
        assert not detect_double_bottom([40, 20, 35, 25, 40]).is_signal

    def test_double_bottom_only_last_ten(self):
        rsi = [40, 25, 35] + [40] * 8 + [27, 40]
        assert not detect_double_bottom(rsi).is_signal

    def test_w_bottom(self):
        signal = detect_w_bottom([40, 20, 35, 25, 40])
        assert signal.is_signal
        assert signal.strength == pytest.approx(10 / 30)

    def test_w_bottom_needs_higher_second_low(self):
        assert not detect_w_bottom([40, 25, 35, 22, 40]).is_signal
        assert detect_double_bottom([40, 25, 35, 22, 40]).is_signal

    def test_bottoms_must_be_oversold(self):
        assert not detect_double_bottom([50, 35, 45, 36, 50]).is_signal


class TestSupportBounce:
    def test_bounce(self):
        signal = detect_support_bounce([40, 35, 45, 50, 36, 39])
        assert signal.is_signal
        assert signal.strength == pytest.approx(0.6)

    def test_explicit_support(self):
        assert not detect_support_bounce([40, 35, 45, 50, 36, 39], support=20).is_signal
        assert detect_support_bounce([40, 35, 45, 50, 36, 39], support=35).is_signal

    def test_insufficient(self):
        assert not detect_support_bounce([35, 36, 39]).is_signal


class TestMACross:
    def test_cross_up(self):
        signal = detect_ma_cross([50.0] * 13 + [60.0])
        assert signal.is_signal
        assert signal.strength == pytest.approx((52 - 660 / 13) / 5)

    def test_cross_down(self):
        assert not detect_ma_cross([50.0] * 13 + [40.0]).is_signal

    def test_insufficient(self):
        assert not detect_ma_cross([50.0] * 12 + [60.0]).is_signal

    def test_only_trailing_values_matter(self):
        assert detect_ma_cross([10.0] * 20 + [50.0] * 13 + [60.0]).is_signal


class TestRsiPattern:
    def test_weights_sum_to_one(self):
        assert sum(p.weight for p in RsiPattern) == pytest.approx(1.0)

    def test_from_key(self):
        assert RsiPattern.from_key("w_bottom") is RsiPattern.W_BOTTOM
        with pytest.raises(ValueError, match="Unknown RSI pattern"):
            RsiPattern.from_key("head_and_shoulders")


class TestScoring:
    def test_two_full_strength_signals_cross_threshold(self):
        assessment = score_rsi_patterns(_signals(oversold_reversal=1.0, bullish_divergence=1.0))
        assert assessment.total_score == pytest.approx(0.45)
        assert assessment.active_signals == 2
        assert assessment.is_buy

    def test_weak_signals_stay_below_threshold(self):
        assessment = score_rsi_patterns(_signals(oversold_reversal=0.5, trendline_break=0.5))
        assert assessment.total_score == pytest.approx(0.2)
        assert not assessment.has_strong_signal
        assert not assessment.is_buy

    def test_single_strong_signal_is_enough(self):
        assessment = score_rsi_patterns(_signals(oversold_reversal=0.9))
        assert assessment.active_signals == 1
        assert assessment.has_strong_signal
        assert assessment.is_buy

    def test_score_needs_active_signals(self):
        weights = {p: 0.0 for p in RsiPattern}
        weights[RsiPattern.OVERSOLD_REVERSAL] = 1.0
        assessment = score_rsi_patterns(_signals(oversold_reversal=0.5), weights=weights)
        assert assessment.total_score == pytest.approx(0.5)
        assert not assessment.is_buy

    def test_flags_in_pattern_order(self):
        assessment = score_rsi_patterns(_signals(w_bottom=0.2))
        assert assessment.flags == [False] * 6 + [True]


class TestAssessRsi:
    def test_short_history_only_reversal(self):
        assessment = assess_rsi([40, 25, 28], [100, 99, 100])
        assert assessment.signals[RsiPattern.OVERSOLD_REVERSAL].is_signal
        assert assessment.active_signals == 1
        assert not assessment.is_buy

    def test_deep_reversal_is_buy(self):
        assert check_buy_signal_of_rsi([50, 0, 5], [100, 99, 100])

    def test_empty(self):
        assessment = assess_rsi([], [])
        assert assessment.total_score == 0
        assert not assessment.is_buy
