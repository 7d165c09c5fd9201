"""
Evaluation module.

Runs the detector families over indicator tables: the per-instrument
SignalReport (weighted RSI decision plus combined count) and the
multi-instrument scan that ranks instruments by combined count.
"""
from .aggregator import (
    DetectorInputs,
    FamilySignals,
    SignalReport,
    evaluate_signals,
    signal_series,
)
from .scanner import ScanEntry, ScanResult, rank_key, scan_instruments

__all__ = [
    'DetectorInputs',
    'FamilySignals',
    'SignalReport',
    'evaluate_signals',
    'signal_series',
    'ScanEntry',
    'ScanResult',
    'rank_key',
    'scan_instruments',
]
