# normalize.py
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional, Sequence, Tuple, Union

import pandas as pd

from config import (
    CLEANING_RULES,
    DESCRIPTION_COLUMN,
    STATUS_COLUMN,
    TIMESTAMP_COLUMN,
)
from utils import parse_ts

Rule = Tuple[re.Pattern, str]


class RowError(ValueError):
    """A single CSV row could not be turned into an Event."""


@dataclass(frozen=True)
class Event:
    """
    One cleaned firewall log record.

    `fields` holds every column of the source row as (column, value) pairs,
    sorted by column name, with the description already cleaned. Equality and
    hashing use `fields` only; `timestamp` is derived from it.
    """
    fields: Tuple[Tuple[str, str], ...]
    timestamp: datetime = field(compare=False, hash=False)

    def get(self, column, default=""):
        for name, value in self.fields:
            if name == column:
                return value
        return default

    @property
    def description(self):
        return self.get(DESCRIPTION_COLUMN)

    @property
    def status(self):
        return self.get(STATUS_COLUMN)

    def as_row(self):
        return dict(self.fields)


# === CLEANING ===
def compile_rules(rules: Iterable[Tuple[Union[str, re.Pattern], str]]) -> List[Rule]:
    compiled = []
    for pattern, replacement in rules:
        if isinstance(pattern, str):
            pattern = re.compile(pattern)
        compiled.append((pattern, replacement))
    return compiled


DEFAULT_RULES = compile_rules(CLEANING_RULES)


def clean_description(text: str, rules: Optional[Sequence[Rule]] = None) -> str:
    """
    Normalize an event description so cosmetic variants collapse to one string.

    The rules run in order and the whole pass repeats until the text stops
    changing, which makes clean(clean(s)) == clean(s) hold for any input.
    Rules must only delete text or shrink whitespace, or the loop may not end.
    """
    if rules is None:
        rules = DEFAULT_RULES
    current = text or ""
    while True:
        cleaned = current
        for pattern, replacement in rules:
            cleaned = pattern.sub(replacement, cleaned)
        if cleaned == current:
            return cleaned
        current = cleaned


# === PARSING ===
def _text(value):
    if value is None:
        return ""
    if not isinstance(value, str) and pd.isna(value):
        return ""
    return str(value).strip()


def normalize_row(row: dict, rules: Optional[Sequence[Rule]] = None) -> Event:
    """
    Turn one CSV row (header -> value) into an Event.
    Raises RowError when the timestamp or status is missing or unparseable.
    """
    values = {_text(k): _text(v) for k, v in row.items() if k is not None}

    ts_text = values.get(TIMESTAMP_COLUMN, "")
    if not ts_text:
        raise RowError(f"missing {TIMESTAMP_COLUMN!r}")
    ts = parse_ts(ts_text)
    if ts is None:
        raise RowError(f"invalid date: {ts_text!r}")

    if not values.get(STATUS_COLUMN):
        raise RowError(f"missing {STATUS_COLUMN!r}")

    values[DESCRIPTION_COLUMN] = clean_description(values.get(DESCRIPTION_COLUMN, ""), rules)

    return Event(fields=tuple(sorted(values.items())), timestamp=ts)
