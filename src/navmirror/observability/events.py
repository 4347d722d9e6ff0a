"""Event model for mirror observability.

Defines event types for the snapshot loader, the synchronizer, the content
presenter and the push channel.

All events are frozen dataclasses with:
- ``timestamp_ns``: Monotonic nanosecond timestamp
- Descriptive fields for the specific event type

"""

import time
from dataclasses import dataclass
from typing import Literal


# ---------------------------------------------------------------------------
# Snapshot events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SnapshotLoaded:
    """The full tree was fetched and materialized.

    Attributes:
        url: Snapshot URL.
        nodes: Number of nodes inserted (roots and children).
        attempts: Fetch attempts it took.
        duration_ms: Time from first request to last insertion.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    url: str
    nodes: int
    attempts: int
    duration_ms: float
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class SnapshotFailed:
    """Every snapshot attempt failed; the navigation keeps its previous state.

    Attributes:
        url: Snapshot URL.
        error: Description of the last failure.
        attempts: Fetch attempts made.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    url: str
    error: str
    attempts: int
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Synchronizer events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class EventApplied:
    """A push event changed (or confirmed) the mirrored tree.

    Attributes:
        kind: Wire event type.
        path: Document path of the event.
        removed: Number of nodes removed (DELETED cascades).
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    kind: str
    path: str
    removed: int
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class EventRejected:
    """A push event was dropped without changing the tree.

    Attributes:
        kind: Wire event type (or ``"?"`` when undecodable).
        path: Document path of the event (may be empty).
        reason: Why the event was dropped.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    kind: str
    path: str
    reason: Literal["unsupported_depth", "malformed", "unknown_type", "drift"]
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Presenter events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ContentLoaded:
    """A content fetch completed.

    Attributes:
        path: Route that was fetched.
        status: HTTP status (0 for transport failures).
        stale: True if a newer navigation superseded this response.
        duration_ms: Request duration in milliseconds.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    status: int
    stale: bool
    duration_ms: float
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Channel events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ChannelStateChanged:
    """The push channel connected, dropped or scheduled a reconnect.

    Attributes:
        url: Socket URL.
        state: New channel state.
        attempt: Consecutive failed attempts so far.
        delay_s: Backoff delay before the next attempt (``waiting`` only).
        detail: Error description, if any.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    url: str
    state: Literal["open", "closed", "waiting"]
    attempt: int
    delay_s: float
    detail: str
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

type MirrorEvent = (
    SnapshotLoaded
    | SnapshotFailed
    | EventApplied
    | EventRejected
    | ContentLoaded
    | ChannelStateChanged
)


def now_ns() -> int:
    """Return the current monotonic clock value in nanoseconds."""
    return time.monotonic_ns()
