"""
Tests for the Indicator base interface.
"""
from abc import ABC

import numpy as np
import pandas as pd
import pytest

from buysignals.indicators.base import Indicator, is_missing
from buysignals.indicators.implementations import (
    SMAIndicator,
    EMAIndicator,
    RSIIndicator,
    RCIIndicator,
    MACDIndicator,
    StochasticIndicator,
    MADRateIndicator,
    BollingerLowerBand,
)

ALL_INDICATORS = (
    SMAIndicator,
    EMAIndicator,
    RSIIndicator,
    RCIIndicator,
    MACDIndicator,
    StochasticIndicator,
    MADRateIndicator,
    BollingerLowerBand,
)


class TestIndicatorInterface:
    """Test Indicator abstract base class."""

    def test_indicator_is_abstract(self):
        assert issubclass(Indicator, ABC)
        with pytest.raises(TypeError):
            Indicator()

    def test_streaming_methods_are_abstract(self):
        assert {'update', 'reset', 'value'} <= set(Indicator.__abstractmethods__)

    def test_concrete_indicators_implement_update(self):
        for cls in ALL_INDICATORS:
            assert cls.update is not Indicator.update
            assert not getattr(cls, '__abstractmethods__', set())


class TestIsMissing:
    """Gap detection for raw close values."""

    @pytest.mark.parametrize("value", [None, pd.NA, float('nan'), 0, 0.0])
    def test_missing(self, value):
        assert is_missing(value)

    @pytest.mark.parametrize("value", [1, 0.01, -3.0, 100.0])
    def test_present(self, value):
        assert not is_missing(value)


class TestCalculate:
    """Replaying a pandas Series through a fresh instance."""

    def test_returns_nullable_float(self):
        prices = pd.Series([1.0, 2.0, 3.0, 4.0])
        result = SMAIndicator(3).calculate(prices)

        assert str(result.dtype) == "Float64"
        assert result.isna().tolist() == [True, True, False, False]
        assert result.iloc[-1] == pytest.approx(3.0)

    def test_gaps_are_skipped(self):
        """A zero or NaN close is not a price: it is skipped and reported as missing."""
        prices = pd.Series([1.0, 2.0, 0.0, 3.0, np.nan, 4.0])
        result = SMAIndicator(3).calculate(prices)

        assert pd.isna(result.iloc[2])
        assert pd.isna(result.iloc[4])
        assert result.iloc[3] == pytest.approx(2.0)
        assert result.iloc[5] == pytest.approx(3.0)

    def test_does_not_touch_own_state(self):
        indicator = SMAIndicator(2)
        indicator.update(10.0)
        indicator.calculate(pd.Series([1.0, 2.0, 3.0]))
        assert indicator.update(20.0) == pytest.approx(15.0)

    def test_preserves_index(self):
        dates = pd.date_range('2024-01-01', periods=5, freq='D')
        prices = pd.Series([1.0, 2.0, 3.0, 4.0, 5.0], index=dates)
        result = RSIIndicator(3).calculate(prices)
        assert result.index.equals(dates)

    def test_get_value_at(self):
        dates = pd.date_range('2024-01-01', periods=5, freq='D')
        prices = pd.Series([1.0, 2.0, 3.0, 4.0, 5.0], index=dates)
        indicator = SMAIndicator(2)

        assert indicator.get_value_at(prices, dates[-1]) == pytest.approx(4.5)
        assert indicator.get_value_at(prices, dates[0]) is None
        assert indicator.get_value_at(prices, pd.Timestamp('2030-01-01')) is None

    def test_fresh_is_independent(self):
        indicator = EMAIndicator(2)
        indicator.update(1.0)
        clone = indicator.fresh()
        assert clone.value is None
        assert clone.period == 2
        assert clone is not indicator
