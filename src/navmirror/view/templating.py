"""Kida environment for navigation, diagnostic and page templates.

Templates only substitute values; every value is escaped (or pre-rendered
markup) before it reaches a template, so autoescaping stays off.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from kida import Environment, FileSystemLoader

from navmirror.theme import get_template_dirs

if TYPE_CHECKING:
    from navmirror.config import MirrorConfig


def create_environment(config: MirrorConfig) -> Environment:
    """Build the Kida environment with user templates ahead of the bundled theme."""
    return Environment(
        loader=FileSystemLoader([str(d) for d in get_template_dirs(config)]),
        autoescape=False,
    )


def render_template(env: Environment, template_name: str, **context: Any) -> str:
    """Render a template to a string."""
    return env.get_template(template_name).render(**context)
