# aggregate.py
import os
import sys
import argparse
import logging
import tempfile
from dataclasses import dataclass
from datetime import datetime

import pandas as pd

from config import (
    DESCRIPTION_COLUMN,
    OUTPUT_PATH,
    RETENTION_DAYS,
    STATUS_COLUMN,
    TIMESTAMP_COLUMN,
)
from dedup import Deduplicator
from filters import StatusFilter, TemporalFilter
from ingest import ingest_csv
from selector import select_files
from utils import PipelineError, setup_logging

log = logging.getLogger(__name__)

DEFAULT_COLUMNS = [TIMESTAMP_COLUMN, DESCRIPTION_COLUMN, STATUS_COLUMN]


@dataclass
class RunStats:
    output: str
    files_selected: int = 0
    files_skipped: int = 0
    rows_read: int = 0
    rows_skipped: int = 0
    duplicates: int = 0
    dropped_by_window: int = 0
    dropped_by_status: int = 0
    written: int = 0


def sort_events(events):
    """Oldest first; events with equal timestamps keep their encounter order."""
    return sorted(events, key=lambda e: e.timestamp)


def write_events(events, columns, output=OUTPUT_PATH):
    """
    Write events as CSV, replacing `output` atomically.
    The previous file stays intact if anything fails before the final rename.
    """
    columns = list(columns) or list(DEFAULT_COLUMNS)
    df = pd.DataFrame([e.as_row() for e in events], columns=columns).fillna("")

    out_dir = os.path.dirname(os.path.abspath(output))
    tmp_path = None
    try:
        fd, tmp_path = tempfile.mkstemp(prefix=".events.", suffix=".tmp", dir=out_dir)
        os.close(fd)
        df.to_csv(tmp_path, index=False)
        os.chmod(tmp_path, 0o644)
        os.replace(tmp_path, output)
        tmp_path = None
    except OSError as err:
        raise PipelineError(f"Failed to write {output}: {err}") from err
    finally:
        if tmp_path and os.path.exists(tmp_path):
            os.unlink(tmp_path)
    return len(df)


# === Pipeline ===
def aggregate(directory, days_back, output=OUTPUT_PATH, now=None,
              retention_days=RETENTION_DAYS, rules=None):
    """
    Select recent exports from `directory`, merge them into one deduplicated,
    filtered and sorted event list, and write it to `output`.
    Returns RunStats. Raises PipelineError on fatal conditions.
    """
    now = now or datetime.now()
    temporal = TemporalFilter(days_back, retention_days=retention_days, now=now)
    status = StatusFilter()
    stats = RunStats(output=output)

    files = select_files(directory, days_back, now=now)
    stats.files_selected = len(files)

    unique = Deduplicator()
    columns = []
    for f in files:
        log.info("Processing file: %s", f.path)
        result = ingest_csv(f.path, rules=rules)
        stats.rows_read += result.rows_read
        stats.rows_skipped += result.rows_skipped
        if not result.ok:
            stats.files_skipped += 1
            continue
        stats.duplicates += result.duplicates
        unique.extend(result.events)
        columns.extend(c for c in result.columns if c not in columns)
    stats.duplicates += unique.duplicates

    in_window = temporal.apply(unique)
    stats.dropped_by_window = len(unique) - len(in_window)
    blocked = status.apply(in_window)
    stats.dropped_by_status = len(in_window) - len(blocked)

    stats.written = write_events(sort_events(blocked), columns, output)
    log.info("Wrote %d event(s) to %s", stats.written, output)
    return stats


# === CLI ===
def non_negative_int(value):
    try:
        days = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number of days: {value!r}")
    if days < 0:
        raise argparse.ArgumentTypeError(f"days_back must be >= 0, got {days}")
    return days


def build_parser():
    parser = argparse.ArgumentParser(
        prog="events-aggregate",
        description="Merge recent firewall CSV exports into one deduplicated events.csv",
    )
    parser.add_argument("log_directory", help="Directory holding the CSV exports")
    parser.add_argument("days_back", type=non_negative_int,
                        help="Only consider files and events from the last N days")
    parser.add_argument("--output", default=OUTPUT_PATH,
                        help="Output CSV path (default: ./events.csv)")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    try:
        stats = aggregate(args.log_directory, args.days_back, output=args.output)
    except PipelineError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1

    print("\n=== Aggregation Summary ===")
    print(f"Files processed: {stats.files_selected - stats.files_skipped}/{stats.files_selected}")
    print(f"Rows read: {stats.rows_read} (skipped: {stats.rows_skipped})")
    print(f"Duplicates removed: {stats.duplicates}")
    print(f"Dropped outside window: {stats.dropped_by_window}")
    print(f"Dropped by status: {stats.dropped_by_status}")
    print(f"Events written: {stats.written} -> {stats.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
