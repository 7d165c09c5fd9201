"""
Bar construction and validation.

Turns provider-shaped data (parallel arrays, DataFrames, CSV files) into
PriceBar sequences and rejects malformed input eagerly:
- timestamps must be strictly ascending
- parallel arrays must have equal length
- OHLC columns must be present and prices non-negative
"""
import logging
import math
from pathlib import Path
from typing import List, Optional, Sequence, Union

import pandas as pd

from ..shared.types import BarValidationError, PriceBar

logger = logging.getLogger(__name__)

OHLC_COLUMNS = ("open", "high", "low", "close")


def _clean(value) -> Optional[float]:
    """None for missing values (None, NaN, NA), float otherwise."""
    if value is None or value is pd.NA:
        return None
    value = float(value)
    return None if math.isnan(value) else value


def validate_bars(bars: Sequence[PriceBar]) -> None:
    """
    Check a bar sequence before it is fed to indicators.

    Raises:
        BarValidationError: On non-ascending or duplicate timestamps or negative prices
    """
    previous = None
    for i, bar in enumerate(bars):
        if previous is not None and bar.timestamp <= previous:
            raise BarValidationError(
                f"Timestamps must be strictly ascending: bar {i} has {bar.timestamp} after {previous}"
            )
        previous = bar.timestamp
        for name in OHLC_COLUMNS:
            value = getattr(bar, name)
            if not pd.isna(value) and value < 0:
                raise BarValidationError(f"Negative {name} price {value} in bar {i} ({bar.timestamp})")


def bars_from_arrays(
    timestamps: Sequence[int],
    opens: Sequence[Optional[float]],
    highs: Sequence[Optional[float]],
    lows: Sequence[Optional[float]],
    closes: Sequence[Optional[float]],
    volumes: Optional[Sequence[Optional[float]]] = None,
) -> List[PriceBar]:
    """
    Build bars from parallel arrays (one entry per timestamp).

    Missing entries (None/NaN) are kept; a missing close makes the bar a gap.

    Raises:
        BarValidationError: If array lengths differ or ordering is invalid
    """
    lengths = {
        "timestamps": len(timestamps),
        "opens": len(opens),
        "highs": len(highs),
        "lows": len(lows),
        "closes": len(closes),
    }
    if volumes is not None:
        lengths["volumes"] = len(volumes)
    if len(set(lengths.values())) > 1:
        raise BarValidationError(f"Parallel arrays have mismatched lengths: {lengths}")

    bars = [
        PriceBar(
            timestamp=int(timestamps[i]),
            open=_clean(opens[i]),
            high=_clean(highs[i]),
            low=_clean(lows[i]),
            close=_clean(closes[i]),
            volume=_clean(volumes[i]) if volumes is not None else None,
        )
        for i in range(len(timestamps))
    ]
    validate_bars(bars)
    return bars


def _epoch_seconds(index: pd.Index) -> List[int]:
    """Epoch seconds for a DatetimeIndex (naive values are taken as UTC)."""
    index = pd.DatetimeIndex(index)
    if index.tz is not None:
        index = index.tz_convert("UTC").tz_localize(None)
    return [int(ts.value // 10**9) for ts in index]


def bars_from_frame(df: pd.DataFrame) -> List[PriceBar]:
    """
    Build bars from a DataFrame.

    Column names are matched case-insensitively. Timestamps come from a
    'timestamp' column (epoch) if present, otherwise from a DatetimeIndex.

    Raises:
        BarValidationError: If OHLC columns are missing or ordering is invalid
    """
    cols = {str(c).lower(): c for c in df.columns}
    missing = [c for c in OHLC_COLUMNS if c not in cols]
    if missing:
        raise BarValidationError(f"Missing columns {missing}. Available: {list(df.columns)}")

    if "timestamp" in cols:
        timestamps = [int(t) for t in df[cols["timestamp"]].tolist()]
    elif isinstance(df.index, pd.DatetimeIndex):
        timestamps = _epoch_seconds(df.index)
    else:
        raise BarValidationError("DataFrame needs a 'timestamp' column or a DatetimeIndex")

    return bars_from_arrays(
        timestamps,
        df[cols["open"]].tolist(),
        df[cols["high"]].tolist(),
        df[cols["low"]].tolist(),
        df[cols["close"]].tolist(),
        df[cols["volume"]].tolist() if "volume" in cols else None,
    )


def load_bars_csv(csv_path: Union[str, Path]) -> List[PriceBar]:
    """
    Load bars for one instrument from a CSV file.

    The file holds either a 'timestamp' column (epoch seconds) or a date
    index in the first column, plus open/high/low/close[/volume]. Rows are
    sorted by time and duplicate timestamps are dropped (last row wins)
    before validation.

    Raises:
        FileNotFoundError: If the file doesn't exist
        BarValidationError: If required columns are missing
    """
    csv_path = Path(csv_path)
    if not csv_path.exists():
        raise FileNotFoundError(f"Data file not found: {csv_path}")

    df = pd.read_csv(csv_path)
    cols = {str(c).lower(): c for c in df.columns}
    if "timestamp" in cols:
        ts_col = cols["timestamp"]
    else:
        ts_col = df.columns[0]
        df[ts_col] = _epoch_seconds(pd.to_datetime(df[ts_col]))
        df = df.rename(columns={ts_col: "timestamp"})
        ts_col = "timestamp"

    before = len(df)
    df = df.sort_values(ts_col, kind="mergesort").drop_duplicates(subset=ts_col, keep="last")
    if len(df) < before:
        logger.warning("%s: dropped %d duplicate timestamps", csv_path.name, before - len(df))

    return bars_from_frame(df.reset_index(drop=True))


def bars_to_frame(bars: Sequence[PriceBar]) -> pd.DataFrame:
    """DataFrame of bars indexed by timestamp (inverse of bars_from_frame)."""
    return pd.DataFrame(
        {
            "open": [b.open for b in bars],
            "high": [b.high for b in bars],
            "low": [b.low for b in bars],
            "close": [b.close for b in bars],
            "volume": [b.volume for b in bars],
        },
        index=pd.Index([b.timestamp for b in bars], name="timestamp"),
        dtype="Float64",
    )
