# utils.py
import logging
import datetime

import dateutil.parser as dp

from config import TIMESTAMP_FORMAT

# two unrelated defaults; see parse_ts
_DEFAULT_A = datetime.datetime(2000, 1, 1)
_DEFAULT_B = datetime.datetime(2001, 2, 2)


class PipelineError(RuntimeError):
    """Fatal condition: the run stops before events.csv is touched."""


def parse_ts(ts):
    """
    Parse a log timestamp into a naive local datetime.
    Returns None when the value is empty, unparseable, or lacks a full date.
    """
    if ts is None:
        return None
    text = str(ts).strip()
    if not text:
        return None
    try:
        return datetime.datetime.strptime(text, TIMESTAMP_FORMAT)
    except ValueError:
        pass
    try:
        parsed = dp.parse(text, default=_DEFAULT_A)
        other = dp.parse(text, default=_DEFAULT_B)
    except (ValueError, OverflowError):
        return None
    # dateutil fills absent fields from `default`; a value that changes with
    # the default had no full date in it ("5", "10:00", "June")
    if parsed.date() != other.date():
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def start_of_day(moment):
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def window_start(now, days):
    """Inclusive lower bound of a `days`-day window ending at `now`.

    The window is anchored at midnight, so days=0 means "today".
    """
    if isinstance(days, bool) or not isinstance(days, int) or days < 0:
        raise ValueError(f"days must be a non-negative integer, got {days!r}")
    return start_of_day(now) - datetime.timedelta(days=days)


def setup_logging(level="INFO"):
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="[%(levelname)s] %(message)s",
    )
