"""Tree layer — the mirrored document hierarchy and its synchronizer.

Holds the two-level node model, the typed push events, and the
synchronizer that applies snapshots and events to the model.
"""

from navmirror.tree.events import Created, Deleted, PushEvent, UnknownEvent, Updated, decode_event
from navmirror.tree.model import Node, NodeKey, Tree
from navmirror.tree.sync import SyncResult, TreeSynchronizer

__all__ = [
    "Created",
    "Deleted",
    "Node",
    "NodeKey",
    "PushEvent",
    "SyncResult",
    "Tree",
    "TreeSynchronizer",
    "UnknownEvent",
    "Updated",
    "decode_event",
]
