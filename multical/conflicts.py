"""
Conflict detection over a calendar's events.

ConflictIndex keeps every stored Event in an interval tree keyed on its
closed [start, end] range, so overlap and point-in-time queries only
visit candidate events. Two events conflict when their closed intervals
intersect; an event ending exactly when another starts is a conflict.
"""

from datetime import datetime
from typing import Iterable, Iterator, Optional

from .event import Event
from .interval_tree import IntervalTree, IntervalHandle


def events_conflict(a: Event, b: Event) -> bool:
    """Symmetric closed-interval overlap test."""
    return a.start <= b.end and a.end >= b.start


class ConflictIndex:
    """Interval index of the events owned by one calendar."""

    def __init__(self, events: Iterable[Event] = ()):
        self._tree: IntervalTree[datetime] = IntervalTree()
        self._handles: dict[str, IntervalHandle[datetime]] = {}
        for event in events:
            self.add(event)

    def __len__(self) -> int:
        return len(self._tree)

    def __contains__(self, event: Event) -> bool:
        return event.id in self._handles

    def __iter__(self) -> Iterator[Event]:
        """Indexed events ordered by start."""
        for handle in self._tree:
            yield handle.data

    # ==================== Maintenance ====================

    def add(self, event: Event) -> None:
        if event.id in self._handles:
            raise ValueError(f"Event already indexed: {event.id}")
        self._handles[event.id] = self._tree.insert(event.start, event.end, event)

    def remove(self, event: Event) -> bool:
        handle = self._handles.pop(event.id, None)
        if handle is None:
            return False
        self._tree.delete(handle)
        return True

    def reindex(self, event: Event) -> None:
        """Refresh the stored bounds after an event's start/end changed."""
        self.remove(event)
        self.add(event)

    def clear(self) -> None:
        self._tree = IntervalTree()
        self._handles = {}

    # ==================== Queries ====================

    def first_conflict(self, candidate: Event, ignore: Optional[Event] = None) -> Optional[Event]:
        """Earliest-starting indexed event that conflicts with candidate."""
        if ignore is None:
            handle = self._tree.any_intersecting(candidate.start, candidate.end)
            return handle.data if handle else None
        for handle in self._tree.find_intersecting(candidate.start, candidate.end):
            if handle.data.id == ignore.id:
                continue
            return handle.data
        return None

    def conflicts(self, candidate: Event, ignore: Optional[Event] = None) -> bool:
        return self.first_conflict(candidate, ignore) is not None

    def conflicts_any(self, candidates: Iterable[Event]) -> bool:
        """True if any candidate (e.g. one series occurrence) hits an indexed event."""
        return any(self.conflicts(c) for c in candidates)

    def intersecting(self, start: datetime, end: datetime) -> list[Event]:
        return [h.data for h in self._tree.find_intersecting(start, end)]

    def covering(self, moment: datetime) -> list[Event]:
        return [h.data for h in self._tree.find_overlapping(moment)]

    def verify(self) -> None:
        self._tree.verify_integrity()
        for event_id, handle in self._handles.items():
            if handle.data.id != event_id:
                raise RuntimeError(f"Handle for {event_id} points at {handle.data.id}")
            if (handle.start, handle.end) != (handle.data.start, handle.data.end):
                raise RuntimeError(f"Stale bounds for {event_id}")
