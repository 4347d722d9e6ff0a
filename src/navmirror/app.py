"""Mirror session — wires snapshot, channel, synchronizer and views together.

Startup flow:
    1. SnapshotLoader fetches ``tree.json`` and fills the tree through the
       synchronizer's insertion primitive
    2. ChangeChannel starts consuming the push socket in a background task
    3. ContentPresenter shows the initial route

Each push payload then flows through ``MirrorSession.handle_payload``:
synchronizer -> navigation re-render -> presenter reaction -> optional
resync. Everything runs on one event loop; handlers run to completion in
arrival order, so the tree needs no locking.
"""

from __future__ import annotations

import asyncio
import contextlib
import html
import sys
import time
from pathlib import Path
from typing import TYPE_CHECKING

import httpx

from navmirror.config_loader import load_config
from navmirror.live.backoff import Backoff
from navmirror.live.channel import ChangeChannel
from navmirror.live.snapshot import SnapshotLoader
from navmirror.observability.collector import MirrorCollector
from navmirror.tree.model import Tree
from navmirror.tree.sync import TreeSynchronizer
from navmirror.view.navigation import NavigationView
from navmirror.view.presenter import ContentPresenter
from navmirror.view.templating import create_environment, render_template

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from navmirror._types import Payload, WarningSink
    from navmirror.config import MirrorConfig
    from navmirror.live.channel import Connector
    from navmirror.tree.sync import SyncResult


class MirrorSession:
    """One client session mirroring a document server.

    Args:
        config: Session configuration.
        client: httpx client to use; the session creates (and closes) its
            own when omitted.
        connector: Socket connector for the channel (websockets by default).
        warn: Sink for user-visible warnings.
        collector: Event collector (a fresh one by default).
        sleep: Awaitable sleep for backoff delays.
        on_render: Called with the session after every render.

    """

    def __init__(
        self,
        config: MirrorConfig,
        *,
        client: httpx.AsyncClient | None = None,
        connector: Connector | None = None,
        warn: WarningSink | None = None,
        collector: MirrorCollector | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        on_render: Callable[[MirrorSession], None] | None = None,
    ) -> None:
        from navmirror.banner import print_warning

        self.config = config
        self.collector = collector if collector is not None else MirrorCollector()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=config.request_timeout)
        self._env = create_environment(config)
        self._on_render = on_render
        self._nav_html = ""
        self._channel_task: asyncio.Task[None] | None = None

        self.tree = Tree()
        self.sync = TreeSynchronizer(
            self.tree, warn=warn or print_warning, collector=self.collector,
        )
        self.navigation = NavigationView(self._env)
        self.presenter = ContentPresenter(
            self._client, config, self._env,
            collector=self.collector, on_render=self._render,
        )
        self.loader = SnapshotLoader(
            self._client, config, collector=self.collector, sleep=sleep,
        )
        self.channel = ChangeChannel(
            config.ws_url,
            self.handle_payload,
            backoff=Backoff(config.reconnect_initial_delay, config.reconnect_max_delay),
            connector=connector,
            on_reconnect=self.resync if config.resync_on_reconnect else None,
            collector=self.collector,
            sleep=sleep,
            open_timeout=config.request_timeout,
        )

    @property
    def nav_html(self) -> str:
        """Navigation markup for the current tree and route."""
        return self._nav_html

    @property
    def content_html(self) -> str:
        return self.presenter.content_html

    @property
    def active_route(self) -> str | None:
        return self.presenter.active_route

    async def start(self, fragment: str = "", *, listen: bool = True) -> int | None:
        """Load the snapshot, start the channel and show ``fragment``.

        Returns the number of nodes loaded, or None if the snapshot failed
        (the session keeps running with an empty navigation).

        """
        count = await self.loader.load_into(self.sync)
        self._render()
        if listen:
            self._channel_task = asyncio.create_task(self.channel.run(), name="navmirror-channel")
        await self.presenter.navigate(fragment)
        return count

    async def navigate(self, fragment: str) -> bool:
        """Client-side navigation to ``#fragment``."""
        return await self.presenter.navigate(fragment)

    async def handle_payload(self, payload: Payload) -> SyncResult:
        """Apply one push payload and reconcile the views with it."""
        result = self.sync.apply_payload(payload)
        self._render()
        await self.presenter.react(result)
        # Unknown DELETED targets are expected after a cascade; only missing
        # parents and unknown updates suggest the mirror has diverged.
        if result.drift and result.kind != "DELETED" and self.config.resync_on_drift:
            await self.resync()
        return result

    async def resync(self) -> bool:
        """Replace the tree with a fresh snapshot. Returns False if it failed."""
        count = await self.loader.load_into(self.sync)
        if count is None:
            return False
        print(f"  Resynced: {count} nodes", file=sys.stderr)
        self._render()
        return True

    async def wait(self) -> None:
        """Block until the channel task finishes (normally: until closed)."""
        if self._channel_task is not None:
            await self._channel_task

    async def close(self) -> None:
        """Stop the channel and release the HTTP client."""
        self.channel.close()
        if self._channel_task is not None and not self._channel_task.done():
            self._channel_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._channel_task
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> MirrorSession:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    def page_html(self) -> str:
        """Full HTML page: navigation plus content region."""
        route = self.presenter.active_route or ""
        return render_template(
            self._env,
            "page.html",
            title=html.escape(route or self.config.home_document),
            route=html.escape(route),
            nav=self._nav_html,
            content=self.presenter.content_html,
        )

    def _render(self) -> None:
        self._nav_html = self.navigation.render(self.tree, self.presenter.active_route)
        if self.config.output is not None:
            self.config.output.write_text(self.page_html(), encoding="utf-8")
        if self._on_render is not None:
            self._on_render(self)


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------


def watch(
    base_url: str | None = None,
    *,
    route: str = "",
    config_dir: str | Path = ".",
    **kwargs: object,
) -> None:
    """Mirror a document server until interrupted.

    Prints the navigation outline whenever it changes; with ``output`` set,
    rewrites an HTML page after every render.

    Args:
        base_url: Server base URL (overrides the config file).
        route: Initial fragment to show.
        config_dir: Directory searched for ``navmirror.yaml``/``.toml``.
        **kwargs: Override MirrorConfig fields.

    """
    config = load_config(Path(config_dir), base_url=base_url, **kwargs)
    try:
        asyncio.run(_watch(config, route))
    except KeyboardInterrupt:
        pass


async def _watch(config: MirrorConfig, route: str) -> None:
    from navmirror.banner import print_banner, print_stats

    last_outline = ""

    def show(session: MirrorSession) -> None:
        nonlocal last_outline
        outline = NavigationView.outline(session.tree, session.active_route)
        if outline != last_outline:
            last_outline = outline
            print(outline, flush=True)

    t0 = time.perf_counter()
    session = MirrorSession(config, on_render=show)
    try:
        count = await session.start(route, listen=False)
        warnings = [] if count is not None else ["snapshot unavailable; navigation starts empty"]
        print_banner(
            config, count or 0, mode="watch",
            load_ms=(time.perf_counter() - t0) * 1000, warnings=warnings,
        )
        await session.channel.run()
    finally:
        print_stats(session.collector.log.stats())
        await session.close()


def show_tree(base_url: str | None = None, *, config_dir: str | Path = ".", **kwargs: object) -> int:
    """Fetch the snapshot once and print its outline. Returns an exit code."""
    config = load_config(Path(config_dir), base_url=base_url, **kwargs)
    return asyncio.run(_show_tree(config))


async def _show_tree(config: MirrorConfig) -> int:
    async with httpx.AsyncClient(timeout=config.request_timeout) as client:
        sync = TreeSynchronizer()
        count = await SnapshotLoader(client, config).load_into(sync)
    if count is None:
        return 1
    print(NavigationView.outline(sync.tree))
    return 0
