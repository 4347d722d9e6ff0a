"""Push events — typed CREATED / UPDATED / DELETED notifications.

Each message on the push channel is a JSON object::

    {"Type": "CREATED", "Path": "guides/setup.md", "NodeInfo": {...}}

``decode_event`` turns a decoded payload into one of the event dataclasses
below. CREATED and DELETED paths are validated into a ``NodeKey`` at decode
time, so those events always respect the two-level depth cap. UPDATED never
changes the tree, so its path is kept as sent: a document deeper than the
tree holds can still be refreshed when it is on screen. Unknown ``Type`` values
decode to ``UnknownEvent`` and take an explicit unhandled path in the
synchronizer instead of disappearing.
"""

from __future__ import annotations

from dataclasses import dataclass

from navmirror._errors import ProtocolError
from navmirror._types import DocPath, Payload
from navmirror.tree.model import Node, NodeKey


@dataclass(frozen=True, slots=True)
class Created:
    """A document or directory appeared on the server."""

    key: NodeKey
    node: Node

    @property
    def path(self) -> DocPath:
        return self.key.path


@dataclass(frozen=True, slots=True)
class Updated:
    """A document's content (or metadata) changed."""

    path: DocPath
    node: Node | None = None


@dataclass(frozen=True, slots=True)
class Deleted:
    """A document or directory was removed."""

    key: NodeKey

    @property
    def path(self) -> DocPath:
        return self.key.path


@dataclass(frozen=True, slots=True)
class UnknownEvent:
    """A message whose ``Type`` is not one of the known kinds."""

    type_name: str
    path: DocPath


type PushEvent = Created | Updated | Deleted | UnknownEvent


def event_kind(event: PushEvent) -> str:
    """Wire name of an event's kind (``"CREATED"``, ... or the unknown type)."""
    match event:
        case Created():
            return "CREATED"
        case Updated():
            return "UPDATED"
        case Deleted():
            return "DELETED"
        case UnknownEvent(type_name=type_name):
            return type_name


def decode_event(payload: Payload) -> PushEvent:
    """Decode one push payload into a typed event.

    Raises:
        UnsupportedDepthError: A CREATED or DELETED ``Path`` nests more than
            one directory deep.
        ProtocolError: Required fields are missing or malformed, or
            ``NodeInfo`` disagrees with ``Path``.

    """
    type_name = payload.get("Type")
    path = payload.get("Path")
    if not isinstance(type_name, str):
        msg = f"push message has no Type: {payload!r}"
        raise ProtocolError(msg)
    if not isinstance(path, str):
        msg = f"push message has no Path: {payload!r}"
        raise ProtocolError(msg)

    if type_name not in ("CREATED", "UPDATED", "DELETED"):
        return UnknownEvent(type_name=type_name, path=path)

    raw_node = payload.get("NodeInfo")
    if type_name == "UPDATED":
        node = _decode_node_info(raw_node, path) if _has_node_info(raw_node) else None
        return Updated(path=path, node=node)

    key = NodeKey.parse(path)
    if type_name == "DELETED":
        return Deleted(key=key)

    if not _has_node_info(raw_node):
        msg = f"CREATED message for {path!r} carries no NodeInfo"
        raise ProtocolError(msg)
    return Created(key=key, node=_decode_node_info(raw_node, path))


def _decode_node_info(raw: object, path: DocPath) -> Node:
    node = Node.from_wire(raw)
    if node.path != path:
        msg = f"NodeInfo path {node.path!r} does not match event path {path!r}"
        raise ProtocolError(msg)
    return node


def _has_node_info(raw: object) -> bool:
    # Servers serializing a zero-valued NodeInfo send {"Path": "", ...}.
    return isinstance(raw, dict) and bool(raw.get("Path"))
