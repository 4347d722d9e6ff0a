"""Snapshot loader — fetches the full tree once and materializes it.

The snapshot is ``GET <base>/tree.json`` returning ``{"Children": [Node, ...]}``.
Nodes go into the tree through ``TreeSynchronizer.reset``, which inserts
each one through the same primitive that handles live CREATED events.

Failed fetches are retried with exponential backoff. When every attempt
fails the failure is logged and recorded and the tree is left untouched;
the push channel keeps running independently.
"""

from __future__ import annotations

import asyncio
import sys
import time
from typing import TYPE_CHECKING

import httpx

from navmirror._errors import FetchError, ProtocolError
from navmirror.live.backoff import Backoff
from navmirror.tree.model import Node

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from navmirror.config import MirrorConfig
    from navmirror.observability.collector import MirrorCollector
    from navmirror.tree.sync import TreeSynchronizer


def parse_snapshot(data: object) -> list[Node]:
    """Decode a snapshot document into root nodes.

    Malformed entries are skipped with a log line; a document that is not
    ``{"Children": [...]}`` raises.

    Raises:
        ProtocolError: The document does not have the snapshot shape.

    """
    if not isinstance(data, dict) or not isinstance(data.get("Children"), list):
        msg = "snapshot must be a JSON object with a Children list"
        raise ProtocolError(msg)

    nodes: list[Node] = []
    for raw in data["Children"]:
        try:
            nodes.append(Node.from_wire(raw))
        except ProtocolError as exc:
            print(f"  Snapshot entry skipped: {exc}", file=sys.stderr)
    return nodes


class SnapshotLoader:
    """Fetches the tree snapshot over HTTP.

    Args:
        client: Shared httpx client (owned by the session).
        config: Session configuration (URLs, attempts, backoff delays).
        collector: Optional collector for SnapshotLoaded/SnapshotFailed events.
        sleep: Awaitable sleep used between attempts (injectable for tests).

    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        config: MirrorConfig,
        *,
        collector: MirrorCollector | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._client = client
        self._config = config
        self._collector = collector
        self._sleep = sleep
        self._attempts = 0

    @property
    def url(self) -> str:
        return self._config.tree_url

    @property
    def attempts(self) -> int:
        """Fetch attempts made by the most recent ``load()``."""
        return self._attempts

    async def fetch(self) -> list[Node]:
        """Fetch and decode the snapshot once.

        Raises:
            FetchError: Transport failure or non-2xx response.
            ProtocolError: The body is not a snapshot document.

        """
        try:
            response = await self._client.get(self.url, headers={"Accept": "application/json"})
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            msg = f"{self.url} answered {status} {exc.response.reason_phrase}"
            raise FetchError(msg) from exc
        except httpx.HTTPError as exc:
            msg = f"{self.url}: {exc or type(exc).__name__}"
            raise FetchError(msg) from exc

        try:
            data = response.json()
        except ValueError as exc:
            msg = f"{self.url} did not return JSON: {exc}"
            raise ProtocolError(msg) from exc
        return parse_snapshot(data)

    async def load(self) -> list[Node] | None:
        """Fetch the snapshot, retrying transport failures with backoff.

        Returns the root nodes, or None once every attempt has failed.

        """
        backoff = Backoff(
            self._config.reconnect_initial_delay, self._config.reconnect_max_delay,
        )
        attempts = self._config.snapshot_attempts
        error = ""
        for attempt in range(1, attempts + 1):
            self._attempts = attempt
            try:
                return await self.fetch()
            except ProtocolError as exc:
                error = str(exc)
                break
            except FetchError as exc:
                error = str(exc)
                if attempt == attempts:
                    break
                delay = backoff.next_delay()
                print(
                    f"  Snapshot error (attempt {attempt}/{attempts}): {exc}; "
                    f"retrying in {delay:.1f}s",
                    file=sys.stderr,
                )
                await self._sleep(delay)

        print(f"  Snapshot failed: {error}", file=sys.stderr)
        if self._collector is not None:
            self._collector.record_snapshot_failure(
                self.url, error, attempts=self._attempts,
            )
        return None

    async def load_into(self, sync: TreeSynchronizer) -> int | None:
        """Load the snapshot and replace the synchronizer's tree with it.

        Returns the number of nodes now in the tree, or None if loading
        failed (the tree is then left as it was).

        """
        t0 = time.perf_counter()
        nodes = await self.load()
        if nodes is None:
            return None
        count = sync.reset(nodes)
        if self._collector is not None:
            self._collector.record_snapshot(
                self.url,
                nodes=count,
                attempts=self._attempts,
                duration_ms=(time.perf_counter() - t0) * 1000,
            )
        return count
