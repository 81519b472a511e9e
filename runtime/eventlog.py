from typing import List, Tuple
from minibattles.model import Event

class EventLog:
    """Every event a battle has produced, in frame order, read back by offset."""

    def __init__(self):
        self._log: List[Event] = []

    def __len__(self) -> int:
        return len(self._log)

    def append_many(self, evts: List[Event]) -> Tuple[int, int]:
        """Store evts; returns the offsets of the first and last one stored."""
        first = len(self._log)
        self._log.extend(evts)
        return first, len(self._log) - 1

    def since(self, offset: int, limit: int = 1000) -> Tuple[List[Event], int]:
        """Up to limit events from offset on, plus the offset to ask for next."""
        offset = max(0, offset)
        page = self._log[offset: offset + limit]
        return page, offset + len(page)
