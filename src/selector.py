# selector.py
import os
import stat
import fnmatch
import logging
from dataclasses import dataclass
from datetime import datetime

from config import CANDIDATE_PATTERNS
from utils import PipelineError, window_start

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CandidateFile:
    path: str
    modified: datetime


def _matches(name, patterns):
    return any(fnmatch.fnmatch(name, p) for p in patterns)


def list_candidates(directory, patterns=CANDIDATE_PATTERNS):
    """
    Return a CandidateFile for every readable regular file directly inside
    `directory` whose name matches one of `patterns`.
    Raises PipelineError if the directory itself cannot be listed.
    """
    if not os.path.isdir(directory):
        raise PipelineError(f"Log directory not found: {directory}")
    try:
        names = os.listdir(directory)
    except OSError as err:
        raise PipelineError(f"Cannot read log directory {directory}: {err}") from err

    candidates = []
    for name in names:
        if not _matches(name, patterns):
            continue
        path = os.path.join(directory, name)
        try:
            st = os.stat(path)
        except OSError as e:
            # vanished between listdir and stat, or unreadable metadata
            log.debug("Skipping %s: %s", path, e)
            continue
        if not stat.S_ISREG(st.st_mode) or not os.access(path, os.R_OK):
            log.debug("Skipping %s: not a readable regular file", path)
            continue
        candidates.append(CandidateFile(path, datetime.fromtimestamp(st.st_mtime)))
    return candidates


def select_files(directory, days_back, now=None, patterns=CANDIDATE_PATTERNS):
    """Candidate files modified within the last `days_back` days, oldest first."""
    now = now or datetime.now()
    cutoff = window_start(now, days_back)
    selected = [
        c for c in list_candidates(directory, patterns)
        if cutoff <= c.modified < now
    ]
    selected.sort(key=lambda c: (c.modified, os.path.basename(c.path)))
    log.info("Selected %d file(s) modified since %s", len(selected), cutoff.isoformat())
    return selected
