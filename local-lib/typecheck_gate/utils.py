"""Shared utilities for the Stop type-check gate."""

from __future__ import annotations

# Standard Library
import time

HOOK_NAME = 'stop-typecheck'


class Timer:
    """Simple stopwatch-style timer for measuring elapsed time."""

    def __init__(self):
        self._start = time.perf_counter()

    def elapsed(self) -> float:
        """Return elapsed time in seconds."""
        return time.perf_counter() - self._start

    def elapsed_ms(self) -> int:
        """Return elapsed time in milliseconds."""
        return int(self.elapsed() * 1000)


def truncate(text: str, limit: int = 200) -> str:
    """Shorten text for single-line log messages."""
    text = ' '.join(text.split())
    if len(text) <= limit:
        return text
    return text[: limit - 3] + '...'
