"""Exponential backoff shared by the snapshot retry and the channel reconnect."""

from __future__ import annotations


class Backoff:
    """Exponential delay sequence capped at ``maximum``.

    ``next_delay()`` returns ``initial``, ``initial * factor``, ... up to
    ``maximum``; ``reset()`` starts over after a success.

    """

    __slots__ = ("_attempts", "_factor", "_initial", "_maximum")

    def __init__(self, initial: float, maximum: float, factor: float = 2.0) -> None:
        self._initial = initial
        self._maximum = maximum
        self._factor = factor
        self._attempts = 0

    @property
    def attempts(self) -> int:
        """Delays handed out since the last reset."""
        return self._attempts

    def next_delay(self) -> float:
        delay = min(self._initial * self._factor**self._attempts, self._maximum)
        self._attempts += 1
        return delay

    def reset(self) -> None:
        self._attempts = 0
