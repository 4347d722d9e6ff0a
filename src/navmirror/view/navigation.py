"""Navigation view — renders the mirrored tree as navigation markup.

``render`` is a pure function of the tree and the active route: the session
calls it after every mutation and every navigation, so the markup can never
drift from the model. Exactly one entry (the one whose path equals the
route) carries the ``active`` class; its directory carries ``open``.
"""

from __future__ import annotations

import html
from typing import TYPE_CHECKING

from navmirror.view.templating import render_template

if TYPE_CHECKING:
    from kida import Environment

    from navmirror._types import DocPath
    from navmirror.tree.model import Node, Tree


class NavigationView:
    """Renders a ``Tree`` through the ``nav*.html`` templates.

    Args:
        env: Kida environment holding ``nav.html``, ``nav_dir.html`` and
            ``nav_file.html``.

    """

    def __init__(self, env: Environment) -> None:
        self._env = env

    def render(self, tree: Tree, active: DocPath | None = None) -> str:
        """Render the whole navigation list."""
        items = "".join(self._render_node(node, active) for node in tree)
        return render_template(self._env, "nav.html", items=items)

    def _render_node(self, node: Node, active: DocPath | None) -> str:
        if not node.is_dir:
            return self._render_entry("nav_file.html", node, active)
        items = "".join(self._render_entry("nav_file.html", c, active) for c in node.children)
        return self._render_entry("nav_dir.html", node, active, items=items)

    def _render_entry(
        self, template_name: str, node: Node, active: DocPath | None, items: str = "",
    ) -> str:
        return render_template(
            self._env,
            template_name,
            path=html.escape(node.path),
            title=html.escape(node.title),
            css_class=_css_class(node, active),
            items=items,
        )

    @staticmethod
    def outline(tree: Tree, active: DocPath | None = None) -> str:
        """Plain-text outline of the tree, marking the active route with ``>``."""
        lines: list[str] = []
        for node in tree:
            marker = ">" if node.path == active else " "
            suffix = "/" if node.is_dir else ""
            lines.append(f"{marker} {node.title}{suffix}  [{node.path}]")
            for child in node.children:
                marker = ">" if child.path == active else " "
                lines.append(f"{marker}   {child.title}  [{child.path}]")
        if not lines:
            lines.append("  (empty)")
        return "\n".join(lines)


def _css_class(node: Node, active: DocPath | None) -> str:
    if active is None:
        return ""
    if node.path == active:
        return "active"
    if node.is_dir and active.startswith(node.path + "/"):
        return "open"
    return ""
