# dedup.py
from typing import Dict, Iterable, Iterator

from normalize import Event


class Deduplicator:
    """
    Ordered set of Events keyed by full-field identity.
    The first instance of each distinct event wins; iteration follows
    encounter order.
    """

    def __init__(self):
        self._seen: Dict[Event, None] = {}
        self.duplicates = 0

    def add(self, event: Event) -> bool:
        if event in self._seen:
            self.duplicates += 1
            return False
        self._seen[event] = None
        return True

    def extend(self, events: Iterable[Event]) -> int:
        """Add events lazily; returns how many were new."""
        return sum(1 for e in events if self.add(e))

    def __contains__(self, event):
        return event in self._seen

    def __iter__(self) -> Iterator[Event]:
        return iter(self._seen)

    def __len__(self):
        return len(self._seen)
