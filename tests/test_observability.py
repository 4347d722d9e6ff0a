"""Tests for navmirror.observability — event log and collector."""

import pytest

from navmirror.observability import (
    ChannelStateChanged,
    ContentLoaded,
    EventApplied,
    EventLog,
    EventRejected,
    MirrorCollector,
    SnapshotFailed,
    SnapshotLoaded,
    now_ns,
)


def applied(path: str, ts: int = 0) -> EventApplied:
    return EventApplied(kind="CREATED", path=path, removed=0, timestamp_ns=ts)


class TestEvents:
    def test_frozen(self) -> None:
        event = applied("a.md")
        with pytest.raises(AttributeError):
            event.path = "b.md"  # type: ignore[misc]

    def test_now_ns_monotonic(self) -> None:
        assert now_ns() <= now_ns()


class TestEventLog:
    def test_ring_buffer(self) -> None:
        log = EventLog(max_events=3)
        for i in range(5):
            log.append(applied(f"{i}.md"))
        assert len(log) == 3
        assert [e.path for e in log.recent()] == ["2.md", "3.md", "4.md"]

    def test_query_newest_first(self) -> None:
        log = EventLog()
        log.append(applied("a.md"))
        log.append(applied("b.md"))
        assert [e.path for e in log.query()] == ["b.md", "a.md"]

    def test_query_by_type(self) -> None:
        log = EventLog()
        log.append(applied("a.md"))
        log.append(EventRejected(kind="DELETED", path="x", reason="drift", timestamp_ns=1))
        assert len(log.query(event_type=EventRejected)) == 1

    def test_query_since(self) -> None:
        log = EventLog()
        log.append(applied("old.md", ts=10))
        log.append(applied("new.md", ts=20))
        assert [e.path for e in log.query(since_ns=15)] == ["new.md"]

    def test_query_by_path_or_url(self) -> None:
        log = EventLog()
        log.append(applied("guides/setup.md"))
        log.append(applied("Home.md"))
        log.append(
            SnapshotLoaded(url="http://docs.test/tree.json", nodes=1, attempts=1,
                           duration_ms=0.0, timestamp_ns=1)
        )
        assert [e.path for e in log.query(path="guides")] == ["guides/setup.md"]
        assert len(log.query(path="tree.json")) == 1

    def test_query_limit(self) -> None:
        log = EventLog()
        for i in range(10):
            log.append(applied(f"{i}.md"))
        assert len(log.query(limit=4)) == 4

    def test_clear(self) -> None:
        log = EventLog()
        log.append(applied("a.md"))
        assert log.clear() == 1
        assert len(log) == 0

    def test_stats(self) -> None:
        log = EventLog(max_events=50)
        log.append(applied("a.md"))
        log.append(applied("b.md"))
        log.append(EventRejected(kind="?", path="", reason="malformed", timestamp_ns=1))
        assert log.stats() == {
            "total": 3,
            "max_events": 50,
            "by_type": {"EventApplied": 2, "EventRejected": 1},
        }


class TestMirrorCollector:
    def test_default_log(self) -> None:
        assert isinstance(MirrorCollector().log, EventLog)

    def test_records_every_kind(self) -> None:
        collector = MirrorCollector()
        collector.record_snapshot("u", nodes=3, attempts=1, duration_ms=1.5)
        collector.record_snapshot_failure("u", "boom", attempts=3)
        collector.record_applied("DELETED", "guides", removed=2)
        collector.record_rejected("CREATED", "a/b/c", "unsupported_depth")
        collector.record_content("Home.md", status=200)
        collector.record_channel("ws://x/ws", "waiting", attempt=2, delay_s=1.0)

        types = [type(e) for e in collector.log.recent()]
        assert types == [
            SnapshotLoaded,
            SnapshotFailed,
            EventApplied,
            EventRejected,
            ContentLoaded,
            ChannelStateChanged,
        ]
        channel = collector.log.query(event_type=ChannelStateChanged)[0]
        assert channel.state == "waiting"
        assert channel.delay_s == 1.0
        assert all(e.timestamp_ns > 0 for e in collector.log.recent())
