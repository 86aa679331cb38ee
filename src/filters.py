# filters.py
from datetime import datetime

from config import RETENTION_DAYS, STATUS_FLAG
from utils import window_start


class TemporalFilter:
    """
    Keep events inside both the user window (`days_back`) and the fixed
    retention ceiling. Both bounds are midnight-anchored and inclusive;
    the upper bound is `now`, exclusive.
    """

    def __init__(self, days_back, retention_days=RETENTION_DAYS, now=None):
        self.now = now or datetime.now()
        self.window_start = window_start(self.now, days_back)
        self.retention_start = window_start(self.now, retention_days)
        self.cutoff = max(self.window_start, self.retention_start)

    def accepts(self, event):
        return self.cutoff <= event.timestamp < self.now

    def apply(self, events):
        return [e for e in events if self.accepts(e)]


class StatusFilter:
    """Exact, case-sensitive match on the status column ("Blocked" by default)."""

    def __init__(self, flag=STATUS_FLAG):
        self.flag = flag

    def accepts(self, event):
        return event.status == self.flag

    def apply(self, events):
        return [e for e in events if self.accepts(e)]
