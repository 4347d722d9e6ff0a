"""Mirror collector — records session events into the event log.

Each component gets the collector injected and calls the ``record_*``
method for what it just did, so components never construct events or
timestamps themselves.

"""

from __future__ import annotations

from typing import Literal

from navmirror.observability.events import (
    ChannelStateChanged,
    ContentLoaded,
    EventApplied,
    EventRejected,
    SnapshotFailed,
    SnapshotLoaded,
    now_ns,
)
from navmirror.observability.log import EventLog


class MirrorCollector:
    """Event collector for one mirror session.

    Args:
        log: The EventLog to store events in.

    """

    __slots__ = ("_log",)

    def __init__(self, log: EventLog | None = None) -> None:
        self._log = log if log is not None else EventLog()

    @property
    def log(self) -> EventLog:
        """The underlying event log."""
        return self._log

    # ----- Snapshot -----

    def record_snapshot(
        self, url: str, *, nodes: int, attempts: int, duration_ms: float = 0.0,
    ) -> None:
        self._log.append(
            SnapshotLoaded(
                url=url,
                nodes=nodes,
                attempts=attempts,
                duration_ms=duration_ms,
                timestamp_ns=now_ns(),
            )
        )

    def record_snapshot_failure(self, url: str, error: str, *, attempts: int) -> None:
        self._log.append(
            SnapshotFailed(url=url, error=error, attempts=attempts, timestamp_ns=now_ns())
        )

    # ----- Synchronizer -----

    def record_applied(self, kind: str, path: str, *, removed: int = 0) -> None:
        self._log.append(
            EventApplied(kind=kind, path=path, removed=removed, timestamp_ns=now_ns())
        )

    def record_rejected(
        self,
        kind: str,
        path: str,
        reason: Literal["unsupported_depth", "malformed", "unknown_type", "drift"],
    ) -> None:
        self._log.append(
            EventRejected(kind=kind, path=path, reason=reason, timestamp_ns=now_ns())
        )

    # ----- Presenter -----

    def record_content(
        self, path: str, *, status: int, stale: bool = False, duration_ms: float = 0.0,
    ) -> None:
        self._log.append(
            ContentLoaded(
                path=path,
                status=status,
                stale=stale,
                duration_ms=duration_ms,
                timestamp_ns=now_ns(),
            )
        )

    # ----- Channel -----

    def record_channel(
        self,
        url: str,
        state: Literal["open", "closed", "waiting"],
        *,
        attempt: int = 0,
        delay_s: float = 0.0,
        detail: str = "",
    ) -> None:
        self._log.append(
            ChannelStateChanged(
                url=url,
                state=state,
                attempt=attempt,
                delay_s=delay_s,
                detail=detail,
                timestamp_ns=now_ns(),
            )
        )
