import csv
import os
from datetime import datetime, timedelta

import pytest

HEADER = ["Priority", "Event Description", "Date/Time", "Source IP Address",
          "Destination IP Address", "Status"]


@pytest.fixture
def now():
    return datetime(2024, 6, 15, 12, 0, 0)


def stamp(moment):
    return moment.strftime("%Y/%m/%d %H:%M:%S")


def row(ts, description="blocked connection", status="Blocked",
        src="10.0.0.1", dst="10.0.0.2", priority="High"):
    return [priority, description, stamp(ts), src, dst, status]


def write_csv(path, rows, header=HEADER, mtime=None):
    with open(path, "w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        if header:
            w.writerow(header)
        w.writerows(rows)
    if mtime is not None:
        ts = mtime.timestamp()
        os.utime(path, (ts, ts))
    return str(path)


def read_csv(path):
    with open(path, newline="", encoding="utf-8") as f:
        return list(csv.DictReader(f))


def days_ago(now, days, hours=0):
    return now - timedelta(days=days, hours=hours)
