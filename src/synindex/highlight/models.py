"""Occurrence and document values produced by the emitter."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .captures import SyntaxKind
from .ranges import PackedRange, range_sort_key

__all__ = ["Occurrence", "Document"]


@dataclass(frozen=True, slots=True)
class Occurrence:
    """One classified span: a packed range and its syntax kind."""

    range: tuple[int, ...]
    syntax_kind: SyntaxKind

    @property
    def packed(self) -> PackedRange:
        return PackedRange.from_sequence(self.range)

    def to_payload(self) -> dict[str, Any]:
        return {"range": list(self.range), "syntax_kind": int(self.syntax_kind)}


@dataclass(frozen=True, slots=True)
class Document:
    """Occurrences of one source file in scan order plus its path.

    Example:
        >>> doc = Document(
        ...     relative_path="main.go",
        ...     occurrences=(Occurrence((0, 0, 14), SyntaxKind.COMMENT),),
        ... )
        >>> doc.to_payload()["occurrences"]
        [{'range': [0, 0, 14], 'syntax_kind': 1}]
    """

    relative_path: str = ""
    occurrences: tuple[Occurrence, ...] = ()

    def __len__(self) -> int:
        return len(self.occurrences)

    def sorted_occurrences(self) -> tuple[Occurrence, ...]:
        """Return occurrences stable-sorted by packed range order."""

        return tuple(
            sorted(self.occurrences, key=lambda occ: range_sort_key(occ.range))
        )

    def to_payload(self) -> dict[str, Any]:
        """Return plain JSON-ready data for transport."""

        return {
            "relative_path": self.relative_path,
            "occurrences": [occ.to_payload() for occ in self.occurrences],
        }
