"""Tests for navmirror.view.navigation — rendering the tree."""

from __future__ import annotations

import re

import pytest

from navmirror.config import MirrorConfig
from navmirror.tree.model import Node, Tree
from navmirror.view.navigation import NavigationView
from navmirror.view.templating import create_environment

from conftest import dir_node, file_node


@pytest.fixture
def view(config: MirrorConfig) -> NavigationView:
    return NavigationView(create_environment(config))


@pytest.fixture
def tree() -> Tree:
    return Tree([
        Node.from_wire(file_node("Home.md", "Home")),
        Node.from_wire(dir_node("guides", [file_node("guides/setup.md", "Setup")])),
    ])


def active_count(markup: str) -> int:
    return len(re.findall(r"\bactive\b", markup))


class TestRender:
    def test_lists_every_entry(self, view: NavigationView, tree: Tree) -> None:
        markup = view.render(tree)
        assert 'id="navmirror-nav"' in markup
        assert '<a href="#Home.md">Home</a>' in markup
        assert 'href="#guides" class="dropdown-toggle">guides</a>' in markup
        assert '<a href="#guides/setup.md">Setup</a>' in markup

    def test_child_nested_under_dir(self, view: NavigationView, tree: Tree) -> None:
        markup = view.render(tree)
        menu_start = markup.index('class="dropdown-menu"')
        assert markup.index("#guides/setup.md") > menu_start
        assert markup.index("#Home.md") < menu_start

    def test_no_active_without_route(self, view: NavigationView, tree: Tree) -> None:
        assert active_count(view.render(tree)) == 0

    def test_exactly_one_active(self, view: NavigationView, tree: Tree) -> None:
        markup = view.render(tree, "guides/setup.md")
        assert active_count(markup) == 1
        assert '<li class="active"><a href="#guides/setup.md">' in markup
        assert 'class="dropdown open"' in markup

    def test_active_root_file(self, view: NavigationView, tree: Tree) -> None:
        markup = view.render(tree, "Home.md")
        assert active_count(markup) == 1
        assert "open" not in markup

    def test_unknown_route_marks_nothing(self, view: NavigationView, tree: Tree) -> None:
        assert active_count(view.render(tree, "missing.md")) == 0

    def test_escapes_titles(self, view: NavigationView) -> None:
        tree = Tree([Node.from_wire(file_node("x.md", "<b>bold</b>"))])
        markup = view.render(tree)
        assert "&lt;b&gt;bold&lt;/b&gt;" in markup
        assert "<b>" not in markup

    def test_empty_tree(self, view: NavigationView) -> None:
        markup = view.render(Tree())
        assert "<li" not in markup

    def test_user_template_overrides(self, tmp_path, tree: Tree) -> None:  # type: ignore[no-untyped-def]
        (tmp_path / "nav_file.html").write_text("<li data-doc=\"{{ path }}\">{{ title }}</li>")
        config = MirrorConfig(templates_dir=tmp_path)
        markup = NavigationView(create_environment(config)).render(tree)
        assert '<li data-doc="Home.md">Home</li>' in markup
        assert 'class="dropdown-menu"' in markup


class TestOutline:
    def test_outline(self, tree: Tree) -> None:
        assert NavigationView.outline(tree, "guides/setup.md") == (
            "  Home  [Home.md]\n"
            "  guides/  [guides]\n"
            ">   Setup  [guides/setup.md]"
        )

    def test_empty(self) -> None:
        assert NavigationView.outline(Tree()) == "  (empty)"
