"""Average time per user per day, over a trailing window of sessions.

Scans every SESSION item whose startTime falls in [now - N days, now],
groups sessions by user and calendar day, and prints the mean of each
duration bucket, page count and unique fact count across user-days.

Usage:
    fastmath-session-metrics [--days N] [--stage-times] [-l]

Environment:
    SESSION_TABLE   DynamoDB table to scan (default FastMath2)
    FASTMATH_STORE  dynamodb (default) or sql

Exit codes:
    0: Report printed, or no data in the window
    1: The store could not be read
    2: Invalid configuration
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import TextIO

from fastmath_analytics.aggregation.session_metrics import SessionAggregator, format_report
from fastmath_analytics.aggregation.stage_times import format_stage_times, stage_time_stats
from fastmath_analytics.core.config import Settings
from fastmath_analytics.core.window import trailing_window
from fastmath_analytics.models.domain import TimeWindow
from fastmath_analytics.models.types import SessionRecord
from fastmath_analytics.store import SessionStore, StoreError, build_store

logger = logging.getLogger(__name__)

LOG_LEVELS = [logging.WARNING, logging.INFO, logging.DEBUG]


def configure_logging(default_level: str, verbosity: int) -> None:
    """Log to stderr; each -l raises verbosity one step above WARNING."""
    if verbosity > 0:
        level = LOG_LEVELS[min(len(LOG_LEVELS) - 1, verbosity)]
    else:
        level = logging.getLevelName(default_level)
        if not isinstance(level, int):
            level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def run_session_metrics(
    store: SessionStore,
    window: TimeWindow,
    *,
    stage_times: bool = False,
    out: TextIO | None = None,
) -> int:
    """Scan, aggregate and print the report.

    Args:
        store: Store to scan.
        window: Inclusive startTime window.
        stage_times: Also print per-fact stage time percentiles.
        out: Stream for the report. Defaults to stdout.

    Returns:
        Process exit code: 0 on success (including no data), 1 if the
        store could not be read.
    """
    if out is None:
        out = sys.stdout

    logger.info(f"Scanning sessions from {window.start} to {window.end}")

    aggregator = SessionAggregator()
    records: list[SessionRecord] = []
    try:
        for item in store.scan(window):
            record = aggregator.add_item(item)
            if stage_times and record is not None:
                records.append(record)
    except StoreError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    report = aggregator.report(window)
    for line in format_report(report):
        print(line, file=out)

    if stage_times and report.averages is not None:
        print("", file=out)
        for line in format_stage_times(stage_time_stats(records)):
            print(line, file=out)

    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-l",
        "--log_level",
        action="count",
        default=0,
        help="Set logging level, multiples for more detailed.",
    )
    parser.add_argument(
        "--days",
        type=int,
        default=None,
        help="Length of the trailing window in days (default FASTMATH_WINDOW_DAYS or 180).",
    )
    parser.add_argument(
        "--stage-times",
        action="store_true",
        help="Also print seconds-per-fact percentiles for each learning stage.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    try:
        settings = Settings.from_env()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    configure_logging(settings.log_level, args.log_level)

    days = args.days if args.days is not None else settings.window_days
    try:
        window = trailing_window(days)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    try:
        store = build_store(settings)
    except StoreError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return run_session_metrics(store, window, stage_times=args.stage_times)


if __name__ == "__main__":
    sys.exit(main())
