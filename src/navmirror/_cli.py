"""navmirror CLI — navmirror watch / navmirror tree.

Entry point for the ``navmirror`` command-line interface.
"""

from __future__ import annotations

import argparse
import sys


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the navmirror CLI."""
    parser = argparse.ArgumentParser(
        prog="navmirror",
        description="Live mirror of a document server's navigation tree.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # navmirror watch
    watch_parser = subparsers.add_parser(
        "watch",
        help="Mirror the tree and follow pushed changes",
    )
    watch_parser.add_argument("base_url", nargs="?", default=None, help="Server base URL")
    watch_parser.add_argument("--route", default="", help="Initial document (URL fragment)")
    watch_parser.add_argument("--home", default=None, help="Document shown for an empty route")
    watch_parser.add_argument("--output", default=None, help="HTML file rewritten on every change")
    watch_parser.add_argument("--config", default=".", help="Directory holding navmirror.yaml")

    # navmirror tree
    tree_parser = subparsers.add_parser(
        "tree",
        help="Print the server's tree once",
    )
    tree_parser.add_argument("base_url", nargs="?", default=None, help="Server base URL")
    tree_parser.add_argument("--config", default=".", help="Directory holding navmirror.yaml")

    return parser


def _get_version() -> str:
    """Get the package version."""
    from navmirror import __version__

    return __version__


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    from navmirror._errors import ConfigError
    from navmirror.app import show_tree, watch

    try:
        if args.command == "watch":
            watch(
                args.base_url,
                route=args.route,
                config_dir=args.config,
                home_document=args.home,
                output=args.output,
            )
        elif args.command == "tree":
            sys.exit(show_tree(args.base_url, config_dir=args.config))
    except ConfigError as exc:
        print(f"navmirror: {exc}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
