"""Tests for multical/conflicts.py"""

from datetime import datetime, timedelta

import pytest

from multical.conflicts import ConflictIndex, events_conflict
from multical.event import Event


def _event(subject, hour, minutes=60):
    start = datetime(2023, 1, 2, hour, 0)
    return Event(subject, start, start + timedelta(minutes=minutes))


class TestEventsConflict:
    """Tests for the pairwise overlap rule."""

    def test_event_conflicts_with_itself(self):
        event = _event("A", 9)
        assert events_conflict(event, event)

    def test_symmetry(self):
        a, b = _event("A", 9, 90), _event("B", 10)
        assert events_conflict(a, b) == events_conflict(b, a) is True

    def test_disjoint(self):
        assert not events_conflict(_event("A", 9, 30), _event("B", 10))


class TestConflictIndex:
    """Tests for indexed queries."""

    def test_first_conflict_is_earliest(self):
        index = ConflictIndex([_event("Late", 11), _event("Early", 9, 150)])
        candidate = _event("New", 10, 90)
        assert index.first_conflict(candidate).subject == "Early"

    def test_ignore_skips_the_event_itself(self):
        event = _event("Self", 9)
        index = ConflictIndex([event])
        assert index.conflicts(event)
        assert not index.conflicts(event, ignore=event)

    def test_ignore_falls_through_to_next_conflict(self):
        early, late = _event("Early", 9, 150), _event("Late", 11)
        index = ConflictIndex([early, late])
        assert index.first_conflict(_event("New", 10, 90), ignore=early) is late

    def test_duplicate_add_rejected(self):
        event = _event("A", 9)
        index = ConflictIndex([event])
        with pytest.raises(ValueError):
            index.add(event)

    def test_reindex_after_move(self):
        event = _event("Moving", 9)
        index = ConflictIndex([event])
        event.reschedule(datetime(2023, 1, 2, 15, 0), datetime(2023, 1, 2, 16, 0))
        index.reindex(event)
        index.verify()
        assert index.covering(datetime(2023, 1, 2, 15, 30)) == [event]
        assert index.covering(datetime(2023, 1, 2, 9, 30)) == []

    def test_remove(self):
        event = _event("Gone", 9)
        index = ConflictIndex([event])
        assert index.remove(event) is True
        assert index.remove(event) is False
        assert len(index) == 0
        assert event not in index

    def test_conflicts_any(self):
        index = ConflictIndex([_event("Busy", 12)])
        assert index.conflicts_any([_event("A", 8), _event("B", 12)])
        assert not index.conflicts_any([_event("A", 8), _event("B", 14)])
