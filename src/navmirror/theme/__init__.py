"""Theme loader — fallback chain for navigation and page templates.

User templates (``templates_dir``) take priority.  When a template is not
found in the user directory, Kida falls through to the bundled default
theme.

"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from navmirror.config import MirrorConfig


def _bundled_theme_path() -> Path:
    """Return the absolute path to the bundled default theme."""
    return Path(__file__).parent / "default"


def get_template_dirs(config: MirrorConfig) -> list[Path]:
    """Return template directories in priority order.

    Returns:
        ``[user_templates_dir, bundled_default_templates]``, or only the
        bundled directory when no ``templates_dir`` is configured.

    """
    bundled = _bundled_theme_path() / "templates"
    dirs: list[Path] = []
    if config.templates_dir is not None and config.templates_dir != bundled:
        dirs.append(config.templates_dir)
    dirs.append(bundled)
    return dirs
