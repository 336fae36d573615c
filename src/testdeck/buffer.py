#
# src/testdeck/buffer.py
#
"""
Bounded, append-only store for the lines shown in the output pane.
"""

from collections import deque
from itertools import islice

import structlog

log = structlog.get_logger("buffer")

DEFAULT_CAPACITY = 1000


class OutputBuffer:
    """Rolling buffer of output lines with viewport slicing.

    Holds at most ``capacity`` lines; appending past that evicts the oldest
    lines first, so the buffer always contains the most recent output.

    Text is accepted in arbitrary chunks. A chunk that does not end with a
    newline leaves its last line *open*, and the next ``append`` continues
    that line instead of starting a new one.

    Not thread-safe: only the consumer of the output channel (the UI thread)
    may touch it.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._capacity = capacity
        self._lines: deque[str] = deque(maxlen=capacity)
        self._line_open = False

    @property
    def capacity(self) -> int:
        return self._capacity

    def append(self, text: str) -> None:
        """Split ``text`` into lines and append them, evicting from the front."""
        if not text:
            return

        pieces = text.split("\n")
        # "a\nb\n" splits into ["a", "b", ""]; the trailing "" only means "closed".
        ends_closed = pieces[-1] == ""
        if ends_closed:
            pieces.pop()

        if self._line_open and self._lines and pieces:
            self._lines[-1] += pieces.pop(0)

        for piece in pieces:
            self._lines.append(piece.rstrip("\r"))

        self._line_open = not ends_closed

    def clear(self) -> None:
        self._lines.clear()
        self._line_open = False
        log.debug("Output buffer cleared")

    def line_count(self) -> int:
        return len(self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    def slice(self, start: int, count: int) -> list[str]:
        """Return up to ``count`` lines from ``start``, clamped to what exists."""
        total = len(self._lines)
        start = min(max(0, start), total)
        end = min(start + max(0, count), total)
        return list(islice(self._lines, start, end))

    def lines(self) -> list[str]:
        return list(self._lines)


# 🔼⚙️
