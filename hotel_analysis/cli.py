import argparse
import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from dotenv import load_dotenv

from hotel_analysis.config import DEFAULT_CONFIG_PATH, load_analysis_config
from hotel_analysis.models import AnalysisReport
from hotel_analysis.parser import DEFAULT_ENCODING, load_bookings
from hotel_analysis.report import build_report, render_report


def run_analysis(
    dataset_path: Path,
    encoding: str = DEFAULT_ENCODING,
) -> Tuple[Optional[AnalysisReport], Dict[str, object]]:
    """Core analysis runner used by both CLI and dashboard.

    Returns:
        (report or None when nothing valid was loaded, context_dict)
    """
    parsed = load_bookings(Path(dataset_path), encoding=encoding)
    report = build_report(parsed)

    context = {
        "dataset_path": Path(dataset_path),
        "encoding": encoding,
        "record_count": parsed.loaded,
        "skipped_lines": parsed.skipped,
    }
    return report, context


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Hotel booking analysis – busiest destination, best value and most profitable hotels"
    )
    parser.add_argument("--dataset", default=None,
                        help="path to the booking CSV (overrides config and env)")
    parser.add_argument("--encoding", default=None,
                        help=f"dataset character encoding (default: {DEFAULT_ENCODING})")
    parser.add_argument("--config-file", default=str(DEFAULT_CONFIG_PATH))
    parser.add_argument("--top", type=int, default=None,
                        help="number of best-ranked hotel groups to show")
    parser.add_argument("--bottom", type=int, default=None,
                        help="number of worst-ranked hotel groups to show")
    parser.add_argument("--log-level", default=None,
                        help="logging level, e.g. DEBUG to list skipped lines")

    args = parser.parse_args(argv)

    load_dotenv()
    cfg = load_analysis_config(Path(args.config_file))

    # Overrides
    if args.dataset is not None:
        cfg.dataset_path = Path(args.dataset)
    if args.encoding is not None:
        cfg.encoding = args.encoding
    if args.top is not None:
        cfg.top_n = args.top
    if args.bottom is not None:
        cfg.bottom_n = args.bottom
    if args.log_level is not None:
        cfg.log_level = args.log_level.upper()

    logging.basicConfig(
        level=getattr(logging, cfg.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    report, ctx = run_analysis(cfg.dataset_path, encoding=cfg.encoding)

    if report is None:
        print(f"Successfully loaded {ctx['record_count']} bookings.")
        print("No valid bookings to analyse. Nothing to report.")
        return 0

    print(f"\nHotel booking analysis for {ctx['dataset_path']}")
    print("=" * 90)
    for line in render_report(report, top_n=cfg.top_n, bottom_n=cfg.bottom_n):
        print(line)
    print()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
