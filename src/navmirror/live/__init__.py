"""Live layer — the server-facing side of the mirror.

Fetches the initial snapshot over HTTP and consumes the push channel,
reconnecting with backoff when it drops.
"""

from navmirror.live.backoff import Backoff
from navmirror.live.channel import ChangeChannel, decode_message
from navmirror.live.snapshot import SnapshotLoader, parse_snapshot

__all__ = [
    "Backoff",
    "ChangeChannel",
    "SnapshotLoader",
    "decode_message",
    "parse_snapshot",
]
