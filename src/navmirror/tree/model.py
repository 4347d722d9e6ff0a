"""Node model — the two-level document tree held by the client.

A tree is an ordered list of root nodes. Directory nodes own an ordered list
of file children whose paths are ``"<dir>/<file>"``. The model only stores
and looks up; the synchronizer is responsible for the invariants.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from navmirror._errors import ProtocolError, UnsupportedDepthError
from navmirror._types import DocPath, NodeType

_NODE_TYPES: frozenset[str] = frozenset({"file", "dir"})

# Wire fields interpreted by the model; everything else is display metadata.
_STRUCTURAL_KEYS = frozenset({"Path", "NodeType", "Children"})


@dataclass(frozen=True, slots=True)
class NodeKey:
    """Validated two-level key for a document path.

    Attributes:
        root: First path segment (a root file or a directory name).
        child: Second path segment, or None for root-level entries.

    """

    root: str
    child: str | None = None

    @classmethod
    def parse(cls, path: DocPath) -> NodeKey:
        """Split ``path`` on ``/`` into a two-level key.

        Raises:
            UnsupportedDepthError: The path has more than two segments.
            ProtocolError: The path is empty or has an empty segment.

        """
        segments = path.split("/")
        if len(segments) > 2:
            raise UnsupportedDepthError(path)
        if not all(segments):
            msg = f"invalid document path {path!r}"
            raise ProtocolError(msg)
        if len(segments) == 1:
            return cls(root=segments[0])
        return cls(root=segments[0], child=segments[1])

    @property
    def path(self) -> DocPath:
        if self.child is None:
            return self.root
        return f"{self.root}/{self.child}"

    @property
    def depth(self) -> int:
        return 1 if self.child is None else 2

    @property
    def parent(self) -> NodeKey | None:
        """Key of the owning directory (None for root-level entries)."""
        if self.child is None:
            return None
        return NodeKey(root=self.root)


@dataclass(slots=True)
class Node:
    """One entry in the navigation tree.

    Attributes:
        path: Unique document path, also the routing key.
        node_type: ``"file"`` or ``"dir"``.
        children: Ordered file children (directories only).
        meta: Display metadata passed through to rendering (e.g. ``Title``).

    """

    path: DocPath
    node_type: NodeType
    children: list[Node] = field(default_factory=list)
    meta: dict[str, Any] = field(default_factory=dict)

    @property
    def is_dir(self) -> bool:
        return self.node_type == "dir"

    @property
    def name(self) -> str:
        """Last path segment."""
        return self.path.rsplit("/", 1)[-1]

    @property
    def title(self) -> str:
        """Display title: ``meta["Title"]`` or the last path segment."""
        title = self.meta.get("Title")
        return str(title) if title else self.name

    def find_child(self, path: DocPath) -> Node | None:
        for child in self.children:
            if child.path == path:
                return child
        return None

    @classmethod
    def from_wire(cls, data: object) -> Node:
        """Build a node (and its children) from a decoded JSON object.

        Raises:
            ProtocolError: Required fields are missing or have the wrong type.

        """
        if not isinstance(data, dict):
            msg = f"node must be a JSON object, got {type(data).__name__}"
            raise ProtocolError(msg)
        path = data.get("Path")
        node_type = data.get("NodeType")
        if not isinstance(path, str) or not path:
            msg = f"node is missing a Path: {data!r}"
            raise ProtocolError(msg)
        if node_type not in _NODE_TYPES:
            msg = f"node {path!r} has unknown NodeType {node_type!r}"
            raise ProtocolError(msg)
        raw_children = data.get("Children") or []
        if not isinstance(raw_children, list):
            msg = f"node {path!r} has non-list Children"
            raise ProtocolError(msg)
        children = [cls.from_wire(c) for c in raw_children] if node_type == "dir" else []
        meta = {k: v for k, v in data.items() if k not in _STRUCTURAL_KEYS}
        return cls(path=path, node_type=node_type, children=children, meta=meta)

    def to_wire(self) -> dict[str, Any]:
        data: dict[str, Any] = {**self.meta, "Path": self.path, "NodeType": self.node_type}
        if self.is_dir:
            data["Children"] = [c.to_wire() for c in self.children]
        return data

    def copy(self) -> Node:
        """Deep copy; the tree never shares nodes with decoded events."""
        return Node(
            path=self.path,
            node_type=self.node_type,
            children=[c.copy() for c in self.children],
            meta=dict(self.meta),
        )


class Tree:
    """The full two-level forest mirrored from the server."""

    __slots__ = ("_roots",)

    def __init__(self, roots: list[Node] | None = None) -> None:
        self._roots: list[Node] = list(roots) if roots else []

    @property
    def roots(self) -> list[Node]:
        """Root-level nodes in display order (the live list)."""
        return self._roots

    def find_root(self, path: DocPath) -> Node | None:
        """Find a root-level node by path."""
        for node in self._roots:
            if node.path == path:
                return node
        return None

    def find_parent(self, child_path: DocPath) -> Node | None:
        """Find the directory that owns ``child_path``.

        The parent is the root node named by the segment before the first
        ``/``. Returns None for root-level paths or when no such directory
        exists.

        """
        if "/" not in child_path:
            return None
        parent = self.find_root(child_path.split("/", 1)[0])
        if parent is None or not parent.is_dir:
            return None
        return parent

    def find(self, path: DocPath) -> Node | None:
        """Find any node (root or child) by path."""
        if "/" not in path:
            return self.find_root(path)
        parent = self.find_parent(path)
        return parent.find_child(path) if parent is not None else None

    def paths(self) -> Iterator[DocPath]:
        """Every path in display order, parents before their children."""
        for node in self._roots:
            yield node.path
            for child in node.children:
                yield child.path

    def clear(self) -> None:
        self._roots.clear()

    def to_wire(self) -> dict[str, Any]:
        return {"Children": [n.to_wire() for n in self._roots]}

    def __len__(self) -> int:
        return sum(1 for _ in self.paths())

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and self.find(path) is not None

    def __iter__(self) -> Iterator[Node]:
        return iter(self._roots)
