"""Content presenter — routes fragments to documents and shows their content.

Two triggers reach the content region:

- Navigation (``navigate``): always resolves the fragment, marks the new
  route active and fetches its content.
- Tree mutation (``react``): an UPDATED for the active route re-fetches it
  once; a DELETED covering the active route sends the view home.

Every fetch is tagged with a generation number. A response that arrives
after a newer fetch was started is discarded, so a slow response for a
route the user already left can never overwrite the newer view.
"""

from __future__ import annotations

import html
import sys
import time
from typing import TYPE_CHECKING

import httpx

from navmirror.view.templating import render_template

if TYPE_CHECKING:
    from collections.abc import Callable

    from kida import Environment

    from navmirror._types import DocPath
    from navmirror.config import MirrorConfig
    from navmirror.observability.collector import MirrorCollector
    from navmirror.tree.sync import SyncResult


class ContentPresenter:
    """Owns the active route and the content region.

    Args:
        client: Shared httpx client (owned by the session).
        config: Session configuration (content URLs, home document).
        env: Kida environment holding ``diagnostic.html``.
        collector: Optional collector for ContentLoaded events.
        on_render: Called whenever the active route or the content changes.

    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        config: MirrorConfig,
        env: Environment,
        *,
        collector: MirrorCollector | None = None,
        on_render: Callable[[], None] | None = None,
    ) -> None:
        self._client = client
        self._config = config
        self._env = env
        self._collector = collector
        self._on_render = on_render
        self._route: DocPath | None = None
        self._content = ""
        self._generation = 0

    @property
    def active_route(self) -> DocPath | None:
        """Route currently shown (None before the first navigation)."""
        return self._route

    @property
    def content_html(self) -> str:
        """Markup of the content region."""
        return self._content

    def resolve(self, fragment: str) -> DocPath:
        """Map a URL fragment (``"#guides/setup.md"``) to a document path."""
        path = fragment.removeprefix("#")
        return path or self._config.home_document

    async def navigate(self, fragment: str = "") -> bool:
        """Show the document named by ``fragment``.

        Returns True if the fetched content was displayed, False if a newer
        fetch superseded it.

        """
        self._route = self.resolve(fragment)
        self._notify()
        return await self._show(self._route)

    async def reload(self) -> bool:
        """Re-fetch the active route."""
        if self._route is None:
            return False
        return await self._show(self._route)

    async def react(self, result: SyncResult) -> None:
        """Bring the content region in line with one synchronizer result."""
        if self._route is None:
            return
        # Rejected events (bad depth, malformed, unknown type) change nothing.
        if not (result.applied or result.drift):
            return
        if result.kind == "UPDATED" and result.path == self._route:
            await self.reload()
        elif result.kind == "DELETED" and result.covers(self._route):
            print(f"  {self._route} was deleted; returning home", file=sys.stderr)
            await self.navigate("")

    async def _show(self, route: DocPath) -> bool:
        self._generation += 1
        generation = self._generation
        t0 = time.perf_counter()
        body, status = await self._fetch(route)
        stale = generation != self._generation

        if self._collector is not None:
            self._collector.record_content(
                route,
                status=status,
                stale=stale,
                duration_ms=(time.perf_counter() - t0) * 1000,
            )
        if stale:
            return False

        self._content = body
        self._notify()
        return True

    async def _fetch(self, route: DocPath) -> tuple[str, int]:
        """Fetch a content body; failures come back as a diagnostic block."""
        url = self._config.content_url(route)
        try:
            response = await self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            response = exc.response
            print(f"  Content error: {url} answered {response.status_code}", file=sys.stderr)
            detail = response.text or str(exc)
            return self._diagnostic(response.status_code, response.reason_phrase, detail), response.status_code
        except httpx.HTTPError as exc:
            print(f"  Content error: {url}: {exc}", file=sys.stderr)
            return self._diagnostic(0, "error", str(exc) or type(exc).__name__), 0
        return response.text, response.status_code

    def _diagnostic(self, status: int, status_text: str, detail: str) -> str:
        return render_template(
            self._env,
            "diagnostic.html",
            status=status,
            status_text=html.escape(status_text),
            detail=html.escape(detail),
        )

    def _notify(self) -> None:
        if self._on_render is not None:
            self._on_render()
