import os
from datetime import timedelta

import pytest

from conftest import days_ago, write_csv
from selector import list_candidates, select_files
from utils import PipelineError


def names(selected):
    return [os.path.basename(c.path) for c in selected]


def test_selects_files_within_window_oldest_first(tmp_path, now):
    write_csv(tmp_path / "new.csv", [], mtime=days_ago(now, 1))
    write_csv(tmp_path / "old.csv", [], mtime=days_ago(now, 20))
    write_csv(tmp_path / "mid.csv", [], mtime=days_ago(now, 3))

    assert names(select_files(tmp_path, 5, now=now)) == ["mid.csv", "new.csv"]


def test_equal_mtimes_ordered_by_name(tmp_path, now):
    t = days_ago(now, 1)
    write_csv(tmp_path / "b.csv", [], mtime=t)
    write_csv(tmp_path / "a.csv", [], mtime=t)
    assert names(select_files(tmp_path, 2, now=now)) == ["a.csv", "b.csv"]


def test_days_back_zero_means_today(tmp_path, now):
    midnight = now.replace(hour=0, minute=0, second=0)
    write_csv(tmp_path / "this_morning.csv", [], mtime=midnight + timedelta(minutes=5))
    write_csv(tmp_path / "at_midnight.csv", [], mtime=midnight)
    write_csv(tmp_path / "last_night.csv", [], mtime=midnight - timedelta(minutes=5))

    assert names(select_files(tmp_path, 0, now=now)) == ["at_midnight.csv", "this_morning.csv"]


def test_future_mtime_is_excluded(tmp_path, now):
    write_csv(tmp_path / "future.csv", [], mtime=now + timedelta(hours=2))
    assert select_files(tmp_path, 5, now=now) == []


def test_exporter_names_and_csv_only(tmp_path, now):
    t = days_ago(now, 1)
    write_csv(tmp_path / "fwddmp.log.tmp.0001", [], mtime=t)
    write_csv(tmp_path / "export.csv", [], mtime=t)
    write_csv(tmp_path / "notes.txt", [], mtime=t)
    (tmp_path / "nested.csv").mkdir()

    assert sorted(names(list_candidates(tmp_path))) == ["export.csv", "fwddmp.log.tmp.0001"]


def test_missing_directory_is_fatal(tmp_path, now):
    with pytest.raises(PipelineError):
        select_files(tmp_path / "nope", 5, now=now)


def test_file_instead_of_directory_is_fatal(tmp_path, now):
    path = write_csv(tmp_path / "a.csv", [])
    with pytest.raises(PipelineError):
        select_files(path, 5, now=now)


def test_negative_days_back_rejected(tmp_path, now):
    with pytest.raises(ValueError):
        select_files(tmp_path, -1, now=now)
