"""Session observability — one event model for the whole client.

Aggregates events from:
- **Snapshot loader**: full-tree fetches and their failures
- **Synchronizer**: applied and rejected push events
- **Presenter**: content fetches, including stale responses
- **Channel**: connection state and reconnect backoff

All events are frozen dataclasses with nanosecond timestamps.

Quick Start:
    >>> from navmirror.observability import MirrorCollector, EventLog
    >>> log = EventLog()
    >>> collector = MirrorCollector(log)
    >>> collector.record_applied("CREATED", "Home.md")
    >>> log.stats()["total"]
    1

"""

from navmirror.observability.collector import MirrorCollector
from navmirror.observability.events import (
    ChannelStateChanged,
    ContentLoaded,
    EventApplied,
    EventRejected,
    MirrorEvent,
    SnapshotFailed,
    SnapshotLoaded,
    now_ns,
)
from navmirror.observability.log import EventLog

__all__ = [
    "ChannelStateChanged",
    "ContentLoaded",
    "EventApplied",
    "EventLog",
    "EventRejected",
    "MirrorCollector",
    "MirrorEvent",
    "SnapshotFailed",
    "SnapshotLoaded",
    "now_ns",
]
