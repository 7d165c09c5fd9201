"""
Base indicator interface.

All indicators follow this pattern:
1. Accept the next price and update their own rolling state
2. Report the latest value, or None while history is insufficient
3. Optionally replay a whole pandas Series through a fresh instance
"""
import copy
import math
from abc import ABC, abstractmethod
from typing import List, Optional

import pandas as pd

from ..shared.types import PriceBar


def is_missing(value) -> bool:
    """True for values that mark a gap (None, NA, NaN or a zero close)."""
    if value is None or value is pd.NA:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return value == 0


class Indicator(ABC):
    """
    Base class for all streaming indicators.

    An instance owns its rolling windows; feeding it is O(1) or O(period) per
    step and never rescans the full history. Indicators calculate values;
    they do not generate signals.
    """

    #: Number of samples required before the first defined value
    min_history: int = 1

    @abstractmethod
    def update(self, value: float) -> Optional[float]:
        """
        Feed the next close.

        Returns:
            Indicator value after this sample, or None if not yet computable
        """
        pass

    @abstractmethod
    def reset(self) -> None:
        """Drop all accumulated state (rebinding, not clearing, owned windows)."""
        pass

    @property
    @abstractmethod
    def value(self) -> Optional[float]:
        """Latest value, None while history is insufficient."""
        pass

    def update_bar(self, bar: PriceBar) -> Optional[float]:
        """Feed a bar; close-driven indicators only look at the close."""
        return self.update(bar.close)

    def fresh(self) -> "Indicator":
        """Independent instance with the same parameters and empty state."""
        clone = copy.deepcopy(self)
        clone.reset()
        return clone

    def calculate(self, prices: pd.Series) -> pd.Series:
        """
        Calculate indicator values for every element of a price series.

        Runs a fresh instance so this indicator's own state is untouched.
        Gap entries (NaN, None, 0) are skipped and reported as missing.

        Args:
            prices: Price series (any index, oldest first)

        Returns:
            Nullable Float64 series aligned with prices; <NA> = not computable
        """
        runner = self.fresh()
        out: List[Optional[float]] = []
        for price in prices.tolist():
            out.append(None if is_missing(price) else runner.update(float(price)))
        return pd.Series(out, index=prices.index, dtype="Float64", name=prices.name)

    def get_value_at(self, prices: pd.Series, timestamp) -> Optional[float]:
        """
        Get indicator value at a specific index label.

        Returns:
            Indicator value at timestamp, or None if missing or insufficient data
        """
        values = self.calculate(prices)
        if timestamp not in values.index:
            return None
        val = values[timestamp]
        return None if pd.isna(val) else float(val)
