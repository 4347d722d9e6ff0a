"""navmirror — a live mirror of a document server's navigation tree.

Fetches a two-level document tree once, then follows the server's pushed
CREATED / UPDATED / DELETED events to keep the navigation and the displayed
document in sync.

Quick start::

    import navmirror

    navmirror.watch("http://127.0.0.1:3456/norris_md/")

Programmatic use::

    from navmirror import MirrorConfig, MirrorSession

    async with MirrorSession(MirrorConfig()) as session:
        await session.start("#guides/setup.md")
        print(session.nav_html)
        await session.wait()

"""

__version__ = "0.1.0"
__all__ = [
    "MirrorConfig",
    "MirrorSession",
    "__version__",
    "show_tree",
    "watch",
]


def __getattr__(name: str) -> object:
    """Lazy imports for the public API.

    Keeps ``import navmirror`` fast while providing a clean top-level API.
    """
    if name == "MirrorConfig":
        from navmirror.config import MirrorConfig

        return MirrorConfig

    if name == "MirrorSession":
        from navmirror.app import MirrorSession

        return MirrorSession

    if name == "watch":
        from navmirror.app import watch

        return watch

    if name == "show_tree":
        from navmirror.app import show_tree

        return show_tree

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
