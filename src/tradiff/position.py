"""Offset to line/column mapping for diagnostics."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class LinePosition:
    """1-based line and column."""

    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


class LineLocator:
    """Resolve character offsets in a text to line/column positions.

    Line starts are collected in a single pass on construction; each lookup
    is a binary search. A newline belongs to the line it terminates.
    """

    def __init__(self, text: str) -> None:
        self._length = len(text)
        self._line_starts = [0]
        start = text.find("\n")
        while start != -1:
            self._line_starts.append(start + 1)
            start = text.find("\n", start + 1)

    def locate(self, offset: int) -> LinePosition | None:
        """Return the position of *offset*, or None when it is past the last character."""
        if offset < 0 or offset >= self._length:
            return None
        idx = bisect_right(self._line_starts, offset) - 1
        return LinePosition(idx + 1, offset - self._line_starts[idx] + 1)

    def locate_clamped(self, offset: int) -> LinePosition:
        """Like locate(), but an offset at or past the end maps to just after the last character."""
        pos = self.locate(offset)
        if pos is not None:
            return pos
        if self._length == 0:
            return LinePosition(1, 1)
        last = self._length - 1
        idx = bisect_right(self._line_starts, last) - 1
        if self._line_starts[-1] == self._length:
            # Text ends with a newline, the end sits at the start of an empty line
            return LinePosition(len(self._line_starts), 1)
        return LinePosition(idx + 1, self._length - self._line_starts[idx] + 1)


def line_position(text: str, offset: int) -> LinePosition | None:
    """Convenience function: locate a single offset in *text*."""
    return LineLocator(text).locate(offset)
