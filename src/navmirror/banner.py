"""Terminal output — startup banner, warnings and the exit summary.

Everything goes to stderr so stdout stays free for the tree outline.
Colors are dropped when ``NO_COLOR`` is set, ``TERM`` is ``dumb`` or
stderr is not a terminal.
"""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from navmirror.config import MirrorConfig


def _color_enabled() -> bool:
    if os.environ.get("NO_COLOR") or os.environ.get("TERM") == "dumb":
        return False
    return sys.stderr.isatty()


_COLOR = _color_enabled()

_CODES = {
    "bold": "1",
    "dim": "2",
    "green": "32",
    "yellow": "33",
    "cyan": "36",
}


def _paint(text: object, *styles: str) -> str:
    """Wrap ``text`` in ANSI styles (no-op without color support)."""
    if not _COLOR or not styles:
        return str(text)
    codes = ";".join(_CODES[s] for s in styles)
    return f"\033[{codes}m{text}\033[0m"


def _link(url: str) -> str:
    """OSC 8 hyperlink, so terminals that support it make the URL clickable."""
    if not _COLOR:
        return url
    return f"\033]8;;{url}\033\\{_paint(url, 'bold', 'cyan')}\033]8;;\033\\"


_BADGE_STYLE = {"watch": "green", "tree": "cyan"}


def print_banner(
    config: MirrorConfig,
    node_count: int,
    mode: str,
    *,
    load_ms: float = 0.0,
    warnings: list[str] | None = None,
) -> None:
    """Print the startup banner to stderr.

    Args:
        config: Resolved MirrorConfig.
        node_count: Nodes in the tree after the initial snapshot.
        mode: ``"watch"`` or ``"tree"``.
        load_ms: Snapshot load time in milliseconds.
        warnings: Extra lines flagged with ``!`` at the bottom.

    """
    from navmirror import __version__

    badge = _paint(f"[{mode}]", _BADGE_STYLE.get(mode, "dim"))
    rows = [f"{node_count} {'node' if node_count == 1 else 'nodes'} loaded"]
    if load_ms > 0:
        rows[0] += " " + _paint(f"in {load_ms:.0f}ms", "dim")
    rows.append(f"home: {_paint(config.home_document, 'dim')}")
    if mode == "watch":
        rows.append(f"{_paint('live', 'green')} push channel {_paint(config.ws_url, 'dim')}")
        if config.output is not None:
            rows.append(f"output: {_paint(config.output, 'dim')}")

    lines = [
        "",
        f"  {_paint('navmirror', 'bold')} {_paint('v' + __version__, 'dim')}  {badge}",
        "  " + _paint("─" * 43, "dim"),
    ]
    for i, row in enumerate(rows):
        branch = "└─" if i == len(rows) - 1 else "├─"
        lines.append(f"  {_paint(branch, 'dim')} {row}")
    lines += ["", f"  {_link(config.base_url)}"]
    if mode == "watch":
        lines += ["", "  " + _paint("Listening for changes...", "dim")]
    if warnings:
        lines.append("")
        lines.extend(f"  {_paint('!', 'yellow')} {w}" for w in warnings)
    lines.append("")

    print("\n".join(lines), file=sys.stderr)


def print_warning(message: str) -> None:
    """User-visible warning line on stderr."""
    print(f"  {_paint('!', 'yellow')} {message}", file=sys.stderr)


def print_stats(stats: dict[str, Any]) -> None:
    """One-line summary of the session's event log."""
    by_type = stats.get("by_type", {})
    detail = ", ".join(f"{name}={count}" for name, count in sorted(by_type.items()))
    total = stats.get("total", 0)
    print(f"  {_paint(f'{total} events', 'dim')} {detail}", file=sys.stderr)
