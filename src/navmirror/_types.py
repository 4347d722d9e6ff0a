"""Shared type definitions for navmirror."""

from collections.abc import Awaitable, Callable
from typing import Any, Literal

# Document path, e.g. "Home.md" or "guides/setup.md"
type DocPath = str

# Kind of tree entry
type NodeType = Literal["file", "dir"]

# Decoded JSON object from the snapshot endpoint or the push channel
type Payload = dict[str, Any]

# Async consumer of decoded push payloads
type PayloadHandler = Callable[[Payload], Awaitable[None]]

# Sink for user-visible warnings
type WarningSink = Callable[[str], None]
