"""Change channel — the long-lived push socket delivering tree events.

Connects to ``<base>/ws`` and hands every decoded message to an async
handler, in arrival order. The channel keeps itself alive:

- A message that is not a JSON object is logged and skipped; the
  connection stays open.
- A handler exception is logged; the next message is still delivered.
- Any disconnect (server close, network error, failed handshake) schedules
  a reconnect with exponential backoff. The backoff resets once a
  connection opens, and ``on_reconnect`` runs on every connection after
  the first so the owner can resync what it missed while disconnected.
"""

from __future__ import annotations

import asyncio
import json
import sys
from typing import TYPE_CHECKING

from websockets.asyncio.client import connect
from websockets.exceptions import WebSocketException

from navmirror._errors import ProtocolError

if TYPE_CHECKING:
    from collections.abc import AsyncIterable, Awaitable, Callable
    from contextlib import AbstractAsyncContextManager

    from navmirror._types import Payload, PayloadHandler
    from navmirror.live.backoff import Backoff
    from navmirror.observability.collector import MirrorCollector

    type Connector = Callable[[str], AbstractAsyncContextManager[AsyncIterable[str | bytes]]]


def decode_message(message: str | bytes) -> Payload:
    """Decode one socket message into a JSON object.

    Raises:
        ProtocolError: The message is not UTF-8 JSON, or not an object.

    """
    try:
        text = message.decode("utf-8") if isinstance(message, bytes) else message
        data = json.loads(text)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        msg = f"push message is not JSON: {exc}"
        raise ProtocolError(msg) from exc
    if not isinstance(data, dict):
        msg = f"push message must be a JSON object, got {type(data).__name__}"
        raise ProtocolError(msg)
    return data


class ChangeChannel:
    """Reconnecting consumer of the push socket.

    Args:
        url: Socket URL (``ws://`` or ``wss://``).
        handler: Async callable receiving each decoded payload.
        backoff: Delay sequence between reconnect attempts.
        connector: Callable returning an async context manager that yields
            an async iterable of messages. Defaults to ``websockets``.
        on_reconnect: Awaited after every connection except the first.
        collector: Optional collector for channel state events.
        sleep: Awaitable sleep used for backoff (injectable for tests).
        open_timeout: Handshake timeout for the default connector.

    """

    def __init__(
        self,
        url: str,
        handler: PayloadHandler,
        *,
        backoff: Backoff,
        connector: Connector | None = None,
        on_reconnect: Callable[[], Awaitable[None]] | None = None,
        collector: MirrorCollector | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        open_timeout: float = 10.0,
    ) -> None:
        self._url = url
        self._handler = handler
        self._backoff = backoff
        self._connector = connector or (lambda u: connect(u, open_timeout=open_timeout))
        self._on_reconnect = on_reconnect
        self._collector = collector
        self._sleep = sleep
        self._closed = False
        self._open = False
        self._connections = 0

    @property
    def url(self) -> str:
        return self._url

    @property
    def is_open(self) -> bool:
        """Whether a socket is currently connected."""
        return self._open

    @property
    def connections(self) -> int:
        """Number of successful connections so far."""
        return self._connections

    def close(self) -> None:
        """Stop after the current message; no reconnect is attempted."""
        self._closed = True

    async def run(self) -> None:
        """Connect, consume, and reconnect until ``close()`` is called."""
        while not self._closed:
            try:
                async with self._connector(self._url) as socket:
                    await self._opened()
                    async for message in socket:
                        await self._dispatch(message)
                        if self._closed:
                            break
                detail = "closed by server"
            except (OSError, TimeoutError, WebSocketException) as exc:
                detail = str(exc) or type(exc).__name__
            self._open = False

            if self._closed:
                break

            if self._collector is not None:
                self._collector.record_channel(
                    self._url, "closed", attempt=self._backoff.attempts, detail=detail,
                )
            delay = self._backoff.next_delay()
            print(f"  Channel down ({detail}); reconnecting in {delay:.1f}s", file=sys.stderr)
            if self._collector is not None:
                self._collector.record_channel(
                    self._url, "waiting", attempt=self._backoff.attempts, delay_s=delay,
                )
            await self._sleep(delay)

        self._open = False

    async def _opened(self) -> None:
        self._open = True
        self._connections += 1
        self._backoff.reset()
        if self._collector is not None:
            self._collector.record_channel(self._url, "open")
        if self._connections > 1:
            print(f"  Channel reconnected: {self._url}", file=sys.stderr)
            if self._on_reconnect is not None:
                await self._on_reconnect()

    async def _dispatch(self, message: str | bytes) -> None:
        try:
            payload = decode_message(message)
        except ProtocolError as exc:
            print(f"  Malformed push message: {exc}", file=sys.stderr)
            if self._collector is not None:
                self._collector.record_rejected("?", "", "malformed")
            return

        try:
            await self._handler(payload)
        except Exception as exc:
            print(f"  Handler error ({payload.get('Type')} {payload.get('Path')}): {exc}", file=sys.stderr)
