"""navmirror error hierarchy.

All navmirror-specific errors inherit from NavMirrorError for easy catching.
"""


class NavMirrorError(Exception):
    """Base error for all navmirror operations."""


class ConfigError(NavMirrorError):
    """Invalid or missing configuration."""


class ProtocolError(NavMirrorError):
    """A snapshot or push message does not match the wire contract."""


class UnsupportedDepthError(ProtocolError):
    """A path nests more than one directory level deep."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(
            f"path {path!r} contains more than one level of folder hierarchy, "
            "which is not supported"
        )


class FetchError(NavMirrorError):
    """An HTTP fetch (snapshot or content) failed."""
