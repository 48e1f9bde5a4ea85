"""Byte offset to line/column conversion."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from typing import NamedTuple

__all__ = ["Position", "LineIndex"]

_NEWLINE = 0x0A


class Position(NamedTuple):
    """Zero-indexed line and byte column."""

    line: int
    column: int


@dataclass(frozen=True, slots=True)
class LineIndex:
    """Starting byte offset of every line in a source buffer.

    A line starts at offset 0 and after each newline, except a newline that
    ends the buffer: a trailing newline does not open an empty last line.

    Example:
        >>> index = LineIndex.from_text("package main\\nfunc foo() {}\\n")
        >>> index.line_starts
        (0, 13)
        >>> index.line_and_col(18)
        Position(line=1, column=5)
        >>> index.range(13, 17)
        (1, 0, 4)
    """

    line_starts: tuple[int, ...]
    size: int

    @classmethod
    def from_bytes(cls, data: bytes) -> "LineIndex":
        starts = [0]
        last = len(data) - 1
        for position, value in enumerate(data):
            if value == _NEWLINE and position != last:
                starts.append(position + 1)
        return cls(line_starts=tuple(starts), size=len(data))

    @classmethod
    def from_text(cls, text: str) -> "LineIndex":
        """Index ``text`` by its UTF-8 byte offsets."""

        return cls.from_bytes(text.encode("utf-8"))

    def line_and_col(self, offset: int) -> Position:
        """Return the line containing ``offset`` and the column within it.

        Offsets past the final line start resolve to the last line, so an
        end offset at the buffer end stays addressable.
        """

        if offset < 0:
            raise ValueError(f"Offset must be >= 0 (got {offset})")
        line = bisect_right(self.line_starts, offset) - 1
        return Position(line, offset - self.line_starts[line])

    def range(self, start: int, end: int) -> tuple[int, ...]:
        """Return the packed range for the byte span ``[start, end)``."""

        start_line, start_col = self.line_and_col(start)
        end_line, end_col = self.line_and_col(end)
        if start_line == end_line:
            return (start_line, start_col, end_col)
        return (start_line, start_col, end_line, end_col)
