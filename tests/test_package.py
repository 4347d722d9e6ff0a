"""Tests for the navmirror package surface."""

import pytest

import navmirror


class TestPublicApi:
    def test_version(self) -> None:
        assert navmirror.__version__ == "0.1.0"

    def test_lazy_exports(self) -> None:
        from navmirror.app import MirrorSession, show_tree, watch
        from navmirror.config import MirrorConfig

        assert navmirror.MirrorConfig is MirrorConfig
        assert navmirror.MirrorSession is MirrorSession
        assert navmirror.watch is watch
        assert navmirror.show_tree is show_tree

    def test_all_resolves(self) -> None:
        for name in navmirror.__all__:
            assert getattr(navmirror, name) is not None

    def test_unknown_attribute(self) -> None:
        with pytest.raises(AttributeError, match="no attribute"):
            navmirror.nonexistent  # noqa: B018
