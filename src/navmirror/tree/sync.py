"""Tree synchronizer — applies push events to the mirrored tree.

Owns every mutation of the ``Tree``. Invariants it keeps under any event
interleaving:

- A path appears at most once (CREATED of a known path replaces it in place).
- Depth never exceeds two levels; a directory's children are files.
- Deleting a directory removes its children with it.

Events that cannot be applied never raise. They come back as a rejected
``SyncResult``: unsupported depth is reported through the warning sink
(user-visible), malformed messages and drift (unknown path, missing parent)
are logged to stderr.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from navmirror._errors import ProtocolError, UnsupportedDepthError
from navmirror.tree.events import (
    Created,
    Deleted,
    PushEvent,
    UnknownEvent,
    Updated,
    decode_event,
)
from navmirror.tree.model import Node, NodeKey, Tree

if TYPE_CHECKING:
    from collections.abc import Iterable

    from navmirror._types import DocPath, Payload, WarningSink
    from navmirror.observability.collector import MirrorCollector

type RejectReason = Literal["unsupported_depth", "malformed", "unknown_type", "drift"]


@dataclass(frozen=True, slots=True)
class SyncResult:
    """Outcome of applying one event.

    Attributes:
        kind: Wire event type (``"CREATED"``, ``"UPDATED"``, ``"DELETED"``,
            or whatever unknown type arrived).
        path: Document path the event referred to.
        applied: True if the tree was changed or confirmed by the event.
        reason: Why the event was rejected (None when applied).
        removed: Paths removed from the tree, parents before children.

    """

    kind: str
    path: DocPath
    applied: bool
    reason: RejectReason | None = None
    removed: tuple[DocPath, ...] = ()

    @property
    def drift(self) -> bool:
        """The event referred to state the mirror does not have."""
        return self.reason == "drift"

    def covers(self, route: DocPath) -> bool:
        """Whether ``route`` is this event's path or lies beneath it."""
        return route == self.path or route.startswith(self.path + "/")


def _stderr_warning(message: str) -> None:
    print(f"  ! {message}", file=sys.stderr)


class TreeSynchronizer:
    """Applies snapshot nodes and push events to a ``Tree``.

    Args:
        tree: Tree to mutate (a new empty tree by default).
        warn: Sink for user-visible warnings (unsupported depth).
        collector: Optional collector recording applied/rejected events.

    """

    def __init__(
        self,
        tree: Tree | None = None,
        *,
        warn: WarningSink | None = None,
        collector: MirrorCollector | None = None,
    ) -> None:
        self._tree = tree if tree is not None else Tree()
        self._warn = warn or _stderr_warning
        self._collector = collector

    @property
    def tree(self) -> Tree:
        return self._tree

    # ----- Insertion primitive (snapshot + CREATED) -----

    def insert(self, node: Node) -> SyncResult:
        """Insert or replace ``node`` (and its children) in the tree.

        Root-level paths go to the root list; ``"<dir>/<file>"`` paths go
        under their directory, which must already exist. A known path is
        replaced in place, children included.

        """
        try:
            key = NodeKey.parse(node.path)
        except UnsupportedDepthError as exc:
            return self._reject("CREATED", node.path, "unsupported_depth", str(exc))
        except ProtocolError as exc:
            return self._reject("CREATED", node.path, "malformed", str(exc))

        if key.child is not None:
            parent = self._tree.find_parent(node.path)
            if parent is None:
                return self._reject(
                    "CREATED", node.path, "drift",
                    f"parent directory {key.root!r} of {node.path!r} is not in the tree",
                )
            return self._insert_child(parent, node)

        incoming = node.copy()
        children, incoming.children = incoming.children, []
        roots = self._tree.roots
        existing = self._tree.find_root(incoming.path)
        if existing is not None:
            roots[roots.index(existing)] = incoming
        else:
            roots.append(incoming)

        for child in children:
            self._insert_child(incoming, child)
        return SyncResult(kind="CREATED", path=incoming.path, applied=True)

    def _insert_child(self, parent: Node, node: Node) -> SyncResult:
        try:
            key = NodeKey.parse(node.path)
        except UnsupportedDepthError as exc:
            return self._reject("CREATED", node.path, "unsupported_depth", str(exc))
        except ProtocolError as exc:
            return self._reject("CREATED", node.path, "malformed", str(exc))

        if key.child is None or key.root != parent.path:
            return self._reject(
                "CREATED", node.path, "malformed",
                f"{node.path!r} cannot be a child of {parent.path!r}",
            )
        if node.is_dir:
            return self._reject(
                "CREATED", node.path, "unsupported_depth",
                f"directory {node.path!r} would nest more than one level of folder "
                "hierarchy, which is not supported",
            )

        incoming = node.copy()
        existing = parent.find_child(incoming.path)
        if existing is not None:
            parent.children[parent.children.index(existing)] = incoming
        else:
            parent.children.append(incoming)
        return SyncResult(kind="CREATED", path=incoming.path, applied=True)

    def reset(self, nodes: Iterable[Node]) -> int:
        """Replace the whole tree with ``nodes``; returns the resulting node count."""
        self._tree.clear()
        for node in nodes:
            self.insert(node)
        return len(self._tree)

    # ----- Push events -----

    def apply_payload(self, payload: Payload) -> SyncResult:
        """Decode one push payload and apply it."""
        kind = str(payload.get("Type", "?"))
        path = payload.get("Path")
        path = path if isinstance(path, str) else ""
        try:
            event = decode_event(payload)
        except UnsupportedDepthError as exc:
            return self._record(self._reject(kind, path, "unsupported_depth", str(exc)))
        except ProtocolError as exc:
            return self._record(self._reject(kind, path, "malformed", str(exc)))
        return self.apply(event)

    def apply(self, event: PushEvent) -> SyncResult:
        """Apply one decoded event."""
        match event:
            case Created(node=node):
                result = self.insert(node)
            case Updated(path=path, node=node):
                result = self._updated(path, node)
            case Deleted(key=key):
                result = self._deleted(key)
            case UnknownEvent(type_name=type_name, path=path):
                print(f"  Unhandled event type {type_name!r} for {path!r}", file=sys.stderr)
                result = SyncResult(
                    kind=type_name, path=path, applied=False, reason="unknown_type",
                )
        return self._record(result)

    def _updated(self, path: DocPath, node: Node | None) -> SyncResult:
        existing = self._tree.find(path)
        if existing is None:
            if path.count("/") > 1:
                # Deeper than the tree holds: nothing to refresh, but the
                # document itself changed and may be on screen.
                return SyncResult(kind="UPDATED", path=path, applied=True)
            return self._reject(
                "UPDATED", path, "drift", f"update for unknown path {path!r}",
            )
        # Content updates never move a node; only display metadata is refreshed.
        if node is not None and node.node_type == existing.node_type:
            existing.meta = dict(node.meta)
        return SyncResult(kind="UPDATED", path=path, applied=True)

    def _deleted(self, key: NodeKey) -> SyncResult:
        path = key.path
        if key.child is None:
            owner = self._tree.roots
            node = self._tree.find_root(path)
        else:
            parent = self._tree.find_parent(path)
            owner = parent.children if parent is not None else []
            node = parent.find_child(path) if parent is not None else None

        if node is None:
            return self._reject("DELETED", path, "drift", f"delete for unknown path {path!r}")

        owner.remove(node)
        removed = (node.path, *(c.path for c in node.children))
        return SyncResult(kind="DELETED", path=path, applied=True, removed=removed)

    # ----- Reporting -----

    def _reject(self, kind: str, path: DocPath, reason: RejectReason, message: str) -> SyncResult:
        if reason == "unsupported_depth":
            self._warn(f"Received {kind} for {path!r}: {message}")
        elif reason == "drift":
            print(f"  Drift: {message}", file=sys.stderr)
        else:
            print(f"  Malformed {kind} event: {message}", file=sys.stderr)
        return SyncResult(kind=kind, path=path, applied=False, reason=reason)

    def _record(self, result: SyncResult) -> SyncResult:
        if self._collector is None:
            return result
        if result.applied:
            self._collector.record_applied(result.kind, result.path, removed=len(result.removed))
        elif result.reason is not None:
            self._collector.record_rejected(result.kind, result.path, result.reason)
        return result
