"""navmirror configuration.

MirrorConfig is the central configuration object, frozen after creation.
"""

from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urljoin, urlsplit, urlunsplit

from navmirror._errors import ConfigError


@dataclass(frozen=True, slots=True)
class MirrorConfig:
    """Configuration for a navmirror session.

    Attributes:
        base_url: Base URL of the document server. Always normalized to end
            with ``/`` on construction.
        tree_endpoint: Snapshot document, relative to ``base_url``.
        ws_endpoint: Push channel, relative to ``base_url``.
        content_prefix: Prefix for content bodies, relative to ``base_url``.
        home_document: Route shown when the fragment is empty.
        snapshot_attempts: Tries for the snapshot fetch before giving up.
        reconnect_initial_delay: First backoff delay in seconds.
        reconnect_max_delay: Upper bound for backoff delays in seconds.
        request_timeout: Timeout for HTTP requests in seconds.
        resync_on_reconnect: Re-fetch the snapshot after the channel reconnects.
        resync_on_drift: Re-fetch the snapshot when an event does not fit the tree.
        templates_dir: Optional directory whose templates override the bundled ones.
        output: Optional HTML file rewritten after every render.

    """

    base_url: str = "http://127.0.0.1:3456/norris_md/"
    tree_endpoint: str = "tree.json"
    ws_endpoint: str = "ws"
    content_prefix: str = "content/"
    home_document: str = "Home.md"
    snapshot_attempts: int = 3
    reconnect_initial_delay: float = 0.5
    reconnect_max_delay: float = 30.0
    request_timeout: float = 10.0
    resync_on_reconnect: bool = True
    resync_on_drift: bool = True
    templates_dir: Path | None = None
    output: Path | None = None

    def __post_init__(self) -> None:
        scheme = urlsplit(self.base_url).scheme
        if scheme not in ("http", "https"):
            msg = f"base_url must be an http(s) URL, got {self.base_url!r}"
            raise ConfigError(msg)
        if self.snapshot_attempts < 1:
            msg = f"snapshot_attempts must be at least 1, got {self.snapshot_attempts}"
            raise ConfigError(msg)
        if self.reconnect_initial_delay <= 0 or self.reconnect_max_delay < self.reconnect_initial_delay:
            msg = (
                "reconnect delays must satisfy 0 < initial <= max, got "
                f"{self.reconnect_initial_delay} and {self.reconnect_max_delay}"
            )
            raise ConfigError(msg)
        # Relative joins below drop the last segment unless the base ends with "/".
        if not self.base_url.endswith("/"):
            object.__setattr__(self, "base_url", self.base_url + "/")

    @property
    def tree_url(self) -> str:
        """Absolute URL of the snapshot document."""
        return urljoin(self.base_url, self.tree_endpoint)

    @property
    def ws_url(self) -> str:
        """Absolute URL of the push channel (``ws://`` or ``wss://``)."""
        parts = urlsplit(urljoin(self.base_url, self.ws_endpoint))
        scheme = "wss" if parts.scheme == "https" else "ws"
        return urlunsplit((scheme, parts.netloc, parts.path, parts.query, ""))

    def content_url(self, path: str) -> str:
        """Absolute URL of the content body for a document path."""
        return urljoin(self.base_url, self.content_prefix + path.lstrip("/"))
