"""Simple stopwatch reporting elapsed milliseconds."""

from __future__ import annotations

import time


class TicToc:
    """Stopwatch started on creation; toc() returns milliseconds since tic()."""

    def __init__(self) -> None:
        self._start = 0.0
        self.tic()

    def tic(self) -> None:
        """Restart the stopwatch."""
        self._start = time.perf_counter()

    def toc(self) -> float:
        """Milliseconds elapsed since the last tic()."""
        return (time.perf_counter() - self._start) * 1000.0