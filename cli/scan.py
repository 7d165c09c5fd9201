#!/usr/bin/env python3
"""
Scan instruments for buy signals and rank them.

Each CSV file holds the bars of one instrument (the file name without
extension is the instrument code). Every instrument is run through the
indicator engine, all detector families are evaluated on its latest bar,
and instruments are ranked by how many detectors fired.

Usage:
    python -m cli.scan data/*.csv [--config CONFIG] [--top N] [--visible N]
"""
import sys
import logging
import argparse
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd

from buysignals.data import SeriesAdapter, format_number, load_bars_csv, tail_for_display
from buysignals.evaluation import ScanEntry, scan_instruments
from buysignals.shared.types import BarValidationError, PriceBar, SignalFamily
from buysignals.signals import EngineConfig, get_preset, load_config_from_yaml

logger = logging.getLogger(__name__)

FAMILY_HEADERS = {
    SignalFamily.RSI: "RSI",
    SignalFamily.MACD: "MACD",
    SignalFamily.MAD_RATE: "MAD",
    SignalFamily.RCI: "RCI",
    SignalFamily.OPEN_CLOSE: "O/C",
}

SERIES_COLUMNS = ["label", "close", "volume", "rsi", "macd_histogram", "stoch_k", "stoch_d"]


def setup_logging(log_path: Optional[Path] = None, verbose: bool = False):
    """
    Setup logging to stdout and optionally to file.

    Args:
        log_path: Path to log file (None = stdout only)
        verbose: If True, use DEBUG level, otherwise INFO
    """
    level = logging.DEBUG if verbose else logging.INFO

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_path:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


def load_instruments(paths: List[Path]) -> Dict[str, List[PriceBar]]:
    """Load bars per instrument code. Unreadable or malformed files are skipped with a warning."""
    bars_by_code: Dict[str, List[PriceBar]] = {}
    for path in paths:
        try:
            bars_by_code[path.stem] = load_bars_csv(path)
        except (FileNotFoundError, BarValidationError) as e:
            logger.warning("Skipping %s: %s", path, e)
    return bars_by_code


def _flag_cell(entry: ScanEntry, family: SignalFamily) -> str:
    return "".join("↑" if flag else "·" for flag in entry.report.flags(family))


def format_ranking(entries: List[ScanEntry]) -> str:
    """Ranking table: one row per instrument, per-family detector flags."""
    rows = []
    for rank, entry in enumerate(entries, start=1):
        row = {
            "#": rank,
            "code": entry.code + (" *" if entry.is_highlighted else ""),
            "count": entry.combined_count,
            "rsi score": f"{entry.report.rsi.total_score:.2f}",
            "rsi buy": "yes" if entry.report.rsi.is_buy else "no",
        }
        for family, header in FAMILY_HEADERS.items():
            row[header] = _flag_cell(entry, family)
        rows.append(row)
    return pd.DataFrame(rows).to_string(index=False)


def format_series(frame: pd.DataFrame, visible: int) -> str:
    """Last `visible` rows of the indicator table with compact volume labels."""
    view = tail_for_display(frame, visible)[SERIES_COLUMNS].copy()
    view["volume"] = [
        "" if pd.isna(v) else format_number(float(v)) for v in view["volume"]
    ]
    return view.to_string(index=False, float_format=lambda v: f"{v:.2f}", na_rep="-")


def main():
    """Main entry point for the signal scan."""
    parser = argparse.ArgumentParser(
        description="Rank instruments by the number of buy signals on their latest bar",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Rank all instruments in a directory
    python -m cli.scan data/*.csv

    # Use a custom configuration and show the ten best
    python -m cli.scan data/*.csv --config configs/default.yaml --top 10

    # Also print the last 20 bars of indicators for each listed instrument
    python -m cli.scan data/7203.csv --visible 20
        """
    )

    parser.add_argument("csv", nargs="+", type=Path, help="CSV file per instrument (file stem = code)")
    parser.add_argument("--config", type=Path, help="Engine configuration YAML")
    parser.add_argument("--preset", type=str, default="default", help="Preset name when no --config is given")
    parser.add_argument("--top", type=int, help="Only list the N best instruments")
    parser.add_argument("--visible", type=int, default=0, help="Print the last N bars of indicators per listed instrument")
    parser.add_argument("--workers", type=int, help="Worker threads (default: cpu count, 1 = sequential)")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-file", type=Path, help="Also write log output to this file")

    args = parser.parse_args()
    setup_logging(args.log_file, args.verbose)

    try:
        if args.config:
            config: EngineConfig = load_config_from_yaml(args.config)
        else:
            config = get_preset(args.preset)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error loading config: {e}")
        return 1

    bars_by_code = load_instruments(args.csv)
    if not bars_by_code:
        print("Error: no instrument could be loaded")
        return 1

    result = scan_instruments(bars_by_code, config, max_workers=args.workers)
    entries = result.top(args.top)

    print("=" * 60)
    print(f"BUY SIGNAL RANKING ({config.name})")
    print("=" * 60)
    if entries:
        print(format_ranking(entries))
    else:
        print("No instrument could be evaluated.")
    print()
    print(f"Highlighted (count >= {config.highlight_min_count}): {len(result.highlighted)}")
    if result.skipped:
        print(f"Skipped {len(result.skipped)}: {', '.join(sorted(result.skipped))}")

    if args.visible > 0:
        adapter = SeriesAdapter(config)
        for entry in entries:
            print()
            print(f"--- {entry.code} ---")
            print(format_series(adapter.run(bars_by_code[entry.code]), args.visible))

    return 0


if __name__ == "__main__":
    sys.exit(main())
