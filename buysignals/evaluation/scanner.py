"""
Multi-instrument scan: evaluate every instrument and rank by signal count.

Instruments are independent, so each one runs in its own worker with its
own SeriesAdapter. An instrument whose bars fail validation is skipped with
a reason instead of aborting the scan.
"""
import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from .aggregator import SignalReport, evaluate_signals
from ..data.adapter import SeriesAdapter
from ..shared.types import BarValidationError, PriceBar
from ..signals.config import DEFAULT_CONFIG, EngineConfig

logger = logging.getLogger(__name__)


@dataclass
class ScanEntry:
    """One ranked instrument."""
    code: str
    report: SignalReport
    bar_count: int

    @property
    def combined_count(self) -> int:
        return self.report.combined_count

    @property
    def is_highlighted(self) -> bool:
        return self.report.is_highlighted


@dataclass
class ScanResult:
    """Ranked entries plus instruments that could not be evaluated."""
    entries: List[ScanEntry]
    skipped: Dict[str, str] = field(default_factory=dict)

    @property
    def highlighted(self) -> List[ScanEntry]:
        return [e for e in self.entries if e.is_highlighted]

    def top(self, n: Optional[int]) -> List[ScanEntry]:
        return self.entries if n is None else self.entries[:n]


def rank_key(entry: ScanEntry) -> Tuple[int, float, str]:
    """Combined count descending, then weighted RSI score descending, then code."""
    return (-entry.combined_count, -entry.report.rsi.total_score, entry.code)


def _scan_one(
    code: str,
    bars: Sequence[PriceBar],
    config: EngineConfig,
) -> Tuple[str, Optional[ScanEntry], Optional[str]]:
    """Evaluate one instrument. Returns (code, entry or None, skip_reason or None)."""
    if not bars:
        return (code, None, "no bars")
    try:
        frame = SeriesAdapter(config).run(bars)
    except BarValidationError as e:
        return (code, None, f"{type(e).__name__}: {e}")
    report = evaluate_signals(frame, config)
    return (code, ScanEntry(code=code, report=report, bar_count=len(bars)), None)


def scan_instruments(
    bars_by_code: Mapping[str, Sequence[PriceBar]],
    config: EngineConfig = DEFAULT_CONFIG,
    max_workers: Optional[int] = None,
) -> ScanResult:
    """
    Evaluate and rank a set of instruments.

    Args:
        bars_by_code: Bars per instrument code
        config: Engine configuration shared by all instruments
        max_workers: Thread pool size (default: cpu_count); 1 = sequential.

    Returns:
        ScanResult with entries sorted by rank_key
    """
    workers = (
        max(1, max_workers)
        if max_workers is not None
        else (os.cpu_count() or 1)
    )

    results = []
    if workers <= 1 or len(bars_by_code) <= 1:
        for code, bars in bars_by_code.items():
            results.append(_scan_one(code, bars, config))
    else:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [
                executor.submit(_scan_one, code, bars, config)
                for code, bars in bars_by_code.items()
            ]
            for future in as_completed(futures):
                results.append(future.result())

    entries: List[ScanEntry] = []
    skipped: Dict[str, str] = {}
    for code, entry, reason in results:
        if entry is None:
            logger.warning("Skipping %s: %s", code, reason)
            skipped[code] = reason
        else:
            entries.append(entry)

    entries.sort(key=rank_key)
    logger.info(
        "Scanned %d instruments: %d ranked, %d highlighted, %d skipped",
        len(bars_by_code), len(entries), sum(1 for e in entries if e.is_highlighted), len(skipped),
    )
    return ScanResult(entries=entries, skipped=skipped)
