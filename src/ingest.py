# ingest.py
import csv
import logging
from dataclasses import dataclass, field
from typing import List, Optional

import pandas as pd

from config import CHUNK_ROWS, DESCRIPTION_COLUMN, REQUIRED_COLUMNS
from dedup import Deduplicator
from normalize import Event, RowError, normalize_row

log = logging.getLogger(__name__)


class HeaderError(ValueError):
    """The file has no header or lacks a required column."""


FILE_ERRORS = (
    OSError,
    UnicodeDecodeError,
    csv.Error,
    pd.errors.ParserError,
    pd.errors.EmptyDataError,
    HeaderError,
)


@dataclass
class IngestResult:
    path: str
    columns: List[str] = field(default_factory=list)
    events: List[Event] = field(default_factory=list)
    rows_read: int = 0
    rows_skipped: int = 0
    duplicates: int = 0
    error: Optional[str] = None

    @property
    def ok(self):
        return self.error is None


def _check_header(columns):
    missing = [c for c in REQUIRED_COLUMNS if c not in columns]
    if missing:
        raise HeaderError(f"missing required column(s): {', '.join(missing)}")


def _read_header(values):
    """Column names from the first line; blanks named the way pandas names them."""
    columns = []
    for i, value in enumerate(values):
        name = "" if _missing(value) else str(value).strip()
        columns.append(name or f"Unnamed: {i}")
    duplicated = sorted({c for c in columns if columns.count(c) > 1})
    if duplicated:
        raise HeaderError(f"duplicate column(s): {', '.join(duplicated)}")
    _check_header(columns)
    return columns


def _missing(value):
    return not isinstance(value, str) and pd.isna(value)


def ingest_csv(filepath: str, rules=None, chunk_rows: int = CHUNK_ROWS) -> IngestResult:
    """
    Stream one CSV export into cleaned, per-file-deduplicated Events.

    The header line fixes the row width: longer rows go through `on_bad_lines`,
    shorter rows come back padded with NaN, and both are counted and skipped.
    Any file-level failure (unreadable, not CSV, missing required columns)
    leaves `events` empty and sets `error`, so a half-read file never reaches
    the caller.
    """
    result = IngestResult(path=filepath)
    seen = Deduplicator()
    bad_lines = []
    header = None

    def on_bad_line(fields):
        bad_lines.append(fields)
        return None

    try:
        # header=None: the header is read as data so pandas never guesses an
        # index column from a long first row
        reader = pd.read_csv(
            filepath,
            header=None,
            dtype=str,
            keep_default_na=False,
            skipinitialspace=True,
            engine="python",
            on_bad_lines=on_bad_line,
            encoding_errors="strict",
            chunksize=chunk_rows,
        )
        with reader:
            for chunk in reader:
                for values in chunk.itertuples(index=False, name=None):
                    if header is None:
                        header = _read_header(values)
                        result.columns = list(header)
                        if DESCRIPTION_COLUMN not in result.columns:
                            result.columns.append(DESCRIPTION_COLUMN)
                        continue
                    result.rows_read += 1
                    if any(_missing(v) for v in values):
                        result.rows_skipped += 1
                        log.debug("Skipping short record in %s: %d of %d fields",
                                  filepath, sum(not _missing(v) for v in values), len(header))
                        continue
                    try:
                        seen.add(normalize_row(dict(zip(header, values)), rules))
                    except RowError as e:
                        result.rows_skipped += 1
                        log.debug("Skipping record in %s: %s", filepath, e)
    except FILE_ERRORS as e:
        result.error = f"{type(e).__name__}: {e}"
        log.warning("Skipping file %s (%s)", filepath, result.error)
        return result

    if bad_lines:
        result.rows_read += len(bad_lines)
        result.rows_skipped += len(bad_lines)
        log.debug("Skipped %d overlong line(s) in %s", len(bad_lines), filepath)

    result.events = list(seen)
    result.duplicates = seen.duplicates
    return result
