"""
Data layer: bar loading/validation, the series adapter and display formatting.
"""
from .bars import (
    bars_from_arrays,
    bars_from_frame,
    bars_to_frame,
    load_bars_csv,
    validate_bars,
)
from .adapter import SeriesAdapter, sma_column, mad_column, rci_column
from .formatting import format_number, format_timestamp, make_label_formatter, tail_for_display

__all__ = [
    'bars_from_arrays',
    'bars_from_frame',
    'bars_to_frame',
    'load_bars_csv',
    'validate_bars',
    'SeriesAdapter',
    'sma_column',
    'mad_column',
    'rci_column',
    'format_number',
    'format_timestamp',
    'make_label_formatter',
    'tail_for_display',
]
