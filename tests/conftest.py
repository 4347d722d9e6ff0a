"""Shared test fixtures for navmirror."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from navmirror.config import MirrorConfig

BASE_URL = "http://docs.test/norris_md/"


@pytest.fixture
def config() -> MirrorConfig:
    """A MirrorConfig pointing at the fake document server, with fast backoff."""
    return MirrorConfig(
        base_url=BASE_URL,
        reconnect_initial_delay=0.01,
        reconnect_max_delay=0.08,
    )


@pytest.fixture
def snapshot_doc() -> dict[str, Any]:
    """A snapshot with one root file and one directory holding one file."""
    return {
        "Children": [
            {"NodeType": "file", "Title": "Home", "Path": "Home.md", "Children": []},
            {
                "NodeType": "dir",
                "Title": "guides",
                "Path": "guides",
                "Children": [
                    {
                        "NodeType": "file",
                        "Title": "Setup",
                        "Path": "guides/setup.md",
                        "Children": [],
                    },
                ],
            },
        ]
    }


def mock_client(handler: Callable[[httpx.Request], Any]) -> httpx.AsyncClient:
    """An AsyncClient whose requests are answered by ``handler``."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class FakeServer:
    """Scripted document server for httpx's MockTransport.

    Serves ``tree.json`` from ``snapshot`` and content bodies from
    ``pages`` (path -> HTML). Unknown content paths answer 404. Every
    request path is recorded in ``requests``.
    """

    def __init__(self, snapshot: dict[str, Any], pages: dict[str, str] | None = None) -> None:
        self.snapshot = snapshot
        self.pages = pages or {}
        self.requests: list[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.requests.append(path)
        if path == "/norris_md/tree.json":
            return httpx.Response(200, json=self.snapshot)
        prefix = "/norris_md/content/"
        if path.startswith(prefix) and path[len(prefix):] in self.pages:
            return httpx.Response(200, text=self.pages[path[len(prefix):]])
        return httpx.Response(404, text=f"no such document: {path}")

    def count(self, doc_path: str) -> int:
        return self.requests.count(f"/norris_md/content/{doc_path}")


class FakeSocket:
    """Async context manager yielding a fixed list of messages, then closing."""

    def __init__(self, messages: list[str | bytes]) -> None:
        self._messages = messages

    async def __aenter__(self) -> FakeSocket:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        return None

    async def __aiter__(self):  # type: ignore[no-untyped-def]
        for message in self._messages:
            yield message


class FakeConnector:
    """Plays back one script per connection attempt.

    Each script is a list of messages (delivered, then the socket closes) or
    an exception instance (raised by the connection attempt). Once the
    scripts run out, every attempt fails with ``OSError``.
    """

    def __init__(self, *scripts: list[str | bytes] | BaseException) -> None:
        self._scripts = list(scripts)
        self.urls: list[str] = []

    def __call__(self, url: str) -> FakeSocket:
        self.urls.append(url)
        script = self._scripts.pop(0) if self._scripts else OSError("connection refused")
        if isinstance(script, BaseException):
            raise script
        return FakeSocket(script)


def message(type_name: str, path: str, node: dict[str, Any] | None = None) -> str:
    """Encode one push message the way the server sends it."""
    payload: dict[str, Any] = {"Type": type_name, "Path": path}
    if node is not None:
        payload["NodeInfo"] = node
    return json.dumps(payload)


def file_node(path: str, title: str | None = None) -> dict[str, Any]:
    return {"NodeType": "file", "Title": title or path.rsplit("/", 1)[-1], "Path": path, "Children": []}


def dir_node(path: str, children: list[dict[str, Any]] | None = None) -> dict[str, Any]:
    return {"NodeType": "dir", "Title": path, "Path": path, "Children": children or []}
