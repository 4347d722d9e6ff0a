"""Tests for navmirror.config."""

import pytest

from navmirror._errors import ConfigError
from navmirror.config import MirrorConfig


class TestMirrorConfig:
    """MirrorConfig — frozen dataclass with sensible defaults."""

    def test_defaults(self) -> None:
        config = MirrorConfig()
        assert config.base_url == "http://127.0.0.1:3456/norris_md/"
        assert config.home_document == "Home.md"
        assert config.snapshot_attempts == 3
        assert config.resync_on_reconnect is True
        assert config.resync_on_drift is True
        assert config.templates_dir is None
        assert config.output is None

    def test_frozen(self) -> None:
        config = MirrorConfig()
        with pytest.raises(AttributeError):
            config.home_document = "Index.md"  # type: ignore[misc]

    def test_trailing_slash_added(self) -> None:
        config = MirrorConfig(base_url="http://docs.test/norris_md")
        assert config.base_url == "http://docs.test/norris_md/"

    def test_tree_url(self) -> None:
        config = MirrorConfig(base_url="http://docs.test/norris_md/")
        assert config.tree_url == "http://docs.test/norris_md/tree.json"

    def test_ws_url_plain(self) -> None:
        config = MirrorConfig(base_url="http://docs.test:3456/norris_md/")
        assert config.ws_url == "ws://docs.test:3456/norris_md/ws"

    def test_ws_url_secure(self) -> None:
        config = MirrorConfig(base_url="https://docs.test/norris_md/")
        assert config.ws_url == "wss://docs.test/norris_md/ws"

    def test_content_url(self) -> None:
        config = MirrorConfig(base_url="http://docs.test/norris_md/")
        assert config.content_url("guides/setup.md") == (
            "http://docs.test/norris_md/content/guides/setup.md"
        )

    def test_content_url_strips_leading_slash(self) -> None:
        config = MirrorConfig(base_url="http://docs.test/norris_md/")
        assert config.content_url("/Home.md") == "http://docs.test/norris_md/content/Home.md"

    def test_custom_endpoints(self) -> None:
        config = MirrorConfig(
            base_url="http://docs.test/",
            tree_endpoint="api/tree",
            ws_endpoint="events",
            content_prefix="",
        )
        assert config.tree_url == "http://docs.test/api/tree"
        assert config.ws_url == "ws://docs.test/events"
        assert config.content_url("Home.md") == "http://docs.test/Home.md"

    def test_rejects_non_http_url(self) -> None:
        with pytest.raises(ConfigError, match="http"):
            MirrorConfig(base_url="ftp://docs.test/")

    def test_rejects_zero_attempts(self) -> None:
        with pytest.raises(ConfigError, match="snapshot_attempts"):
            MirrorConfig(snapshot_attempts=0)

    def test_rejects_inverted_delays(self) -> None:
        with pytest.raises(ConfigError, match="reconnect delays"):
            MirrorConfig(reconnect_initial_delay=5.0, reconnect_max_delay=1.0)
