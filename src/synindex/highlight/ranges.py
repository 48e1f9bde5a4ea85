"""Packed range representation and ordering."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

__all__ = [
    "PackedRange",
    "range_sort_key",
    "sort_ranges",
]


@dataclass(frozen=True, slots=True)
class PackedRange:
    """Decoded form of a packed ``[line, col, col]`` or 4-element range.

    Example:
        >>> PackedRange.from_sequence([2, 4, 9]).to_sequence()
        (2, 4, 9)
        >>> PackedRange.from_sequence([0, 3, 1, 0]).end_line
        1
    """

    start_line: int
    start_col: int
    end_line: int
    end_col: int

    def __post_init__(self) -> None:
        values = (self.start_line, self.start_col, self.end_line, self.end_col)
        if any(value < 0 for value in values):
            raise ValueError(f"Range components must be >= 0: {values}")
        if (self.start_line, self.start_col) > (self.end_line, self.end_col):
            raise ValueError(f"Range start follows its end: {values}")

    @classmethod
    def from_sequence(cls, values: Sequence[int]) -> "PackedRange":
        """Decode a 3-element same-line or 4-element cross-line range."""

        if len(values) == 3:
            line, start_col, end_col = values
            return cls(int(line), int(start_col), int(line), int(end_col))
        if len(values) == 4:
            start_line, start_col, end_line, end_col = values
            return cls(
                int(start_line),
                int(start_col),
                int(end_line),
                int(end_col),
            )
        raise ValueError(f"Unexpected range length {len(values)}: {values!r}")

    @property
    def single_line(self) -> bool:
        return self.start_line == self.end_line

    def to_sequence(self) -> tuple[int, ...]:
        """Return the canonical packed form."""

        if self.single_line:
            return (self.start_line, self.start_col, self.end_col)
        return (self.start_line, self.start_col, self.end_line, self.end_col)

    def sort_key(self) -> tuple[int, int, int]:
        """Return ``(start_line, end_line, start_col)``.

        ``end_col`` is not part of the key: ranges that differ only in their
        end column compare equal for sorting.
        """

        return (self.start_line, self.end_line, self.start_col)


def range_sort_key(values: Sequence[int]) -> tuple[int, int, int]:
    """Return the sort key for a packed range sequence."""

    return PackedRange.from_sequence(values).sort_key()


def sort_ranges(ranges: Iterable[Sequence[int]]) -> list[tuple[int, ...]]:
    """Stable-sort packed ranges by :func:`range_sort_key`.

    Example:
        >>> sort_ranges([[1, 0, 3], [0, 0, 5]])
        [(0, 0, 5), (1, 0, 3)]
    """

    return [tuple(values) for values in sorted(ranges, key=range_sort_key)]
