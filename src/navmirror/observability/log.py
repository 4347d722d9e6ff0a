"""Event log — bounded store of mirror events.

Keeps the most recent ``MirrorEvent`` objects in a ring buffer so a running
session (or a test) can ask what happened: which pushes were rejected, how
often the channel reconnected, which content responses arrived stale.

Thread Safety:
    Guarded by a ``threading.Lock``.  The session appends from its event
    loop; the log may be read from another thread (e.g. a stats reporter).

"""

import threading
from collections import Counter, deque
from typing import Any

from navmirror.observability.events import MirrorEvent


def _subject(event: MirrorEvent) -> str:
    """Document path of an event, or its URL for snapshot/channel events."""
    return getattr(event, "path", "") or getattr(event, "url", "")


class EventLog:
    """Ring buffer of mirror events with simple filtering.

    Args:
        max_events: Capacity; once full, the oldest event is dropped for
            every new one.

    """

    __slots__ = ("_events", "_lock", "_max_events")

    def __init__(self, max_events: int = 10_000) -> None:
        self._max_events = max_events
        self._events: deque[MirrorEvent] = deque(maxlen=max_events)
        self._lock = threading.Lock()

    def append(self, event: MirrorEvent) -> None:
        with self._lock:
            self._events.append(event)

    def query(
        self,
        *,
        event_type: type | None = None,
        since_ns: int = 0,
        path: str | None = None,
        limit: int = 100,
    ) -> list[MirrorEvent]:
        """Return matching events, newest first.

        Args:
            event_type: Keep only instances of this event class.
            since_ns: Keep only events stamped at or after this time.
            path: Keep only events whose path (or URL) contains this string.
            limit: Stop after this many matches.

        """
        with self._lock:
            snapshot = list(self._events)

        matches: list[MirrorEvent] = []
        for event in reversed(snapshot):
            if event_type is not None and not isinstance(event, event_type):
                continue
            if event.timestamp_ns < since_ns:
                continue
            if path is not None and path not in _subject(event):
                continue
            matches.append(event)
            if len(matches) == limit:
                break
        return matches

    def recent(self, n: int = 20) -> list[MirrorEvent]:
        """The last ``n`` events in the order they were recorded."""
        with self._lock:
            return list(self._events)[-n:]

    def clear(self) -> int:
        """Drop every event; returns how many were dropped."""
        with self._lock:
            dropped = len(self._events)
            self._events.clear()
        return dropped

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def stats(self) -> dict[str, Any]:
        """Totals per event class, for the exit summary."""
        with self._lock:
            by_type = Counter(type(event).__name__ for event in self._events)
            total = len(self._events)
        return {"total": total, "max_events": self._max_events, "by_type": dict(by_type)}
