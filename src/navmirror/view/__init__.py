"""View layer — navigation markup and the content region.

Renders the mirrored tree through Kida templates and presents document
content for the active route.
"""

from navmirror.view.navigation import NavigationView
from navmirror.view.presenter import ContentPresenter
from navmirror.view.templating import create_environment, render_template

__all__ = [
    "ContentPresenter",
    "NavigationView",
    "create_environment",
    "render_template",
]
