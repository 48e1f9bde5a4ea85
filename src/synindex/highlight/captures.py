"""Capture name table mapping classification ids to syntax kinds."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterable, Iterator

from .errors import CaptureTableError

__all__ = [
    "SyntaxKind",
    "CaptureTable",
    "DEFAULT_CAPTURES",
    "get_default_capture_table",
]


class SyntaxKind(IntEnum):
    """Coarse, language-independent category of a classified span."""

    UNSPECIFIED = 0
    COMMENT = 1
    KEYWORD = 2
    OPERATOR = 3
    IDENTIFIER = 4
    BUILTIN_IDENTIFIER = 5
    TYPE_IDENTIFIER = 6
    FUNCTION_DEFINITION = 7
    METHOD_IDENTIFIER = 8
    STRING_LITERAL = 9

    @property
    def label(self) -> str:
        """Return the CamelCase display name used in snapshots.

        Example:
            >>> SyntaxKind.STRING_LITERAL.label
            'StringLiteral'
        """

        if self is SyntaxKind.UNSPECIFIED:
            return "UnspecifiedSyntaxKind"
        return "".join(part.capitalize() for part in self.name.split("_"))


# Order matters: an entry's position is the classification id the tokenizer
# is configured to emit for that capture name.
DEFAULT_CAPTURES: tuple[tuple[str, SyntaxKind], ...] = (
    ("attribute", SyntaxKind.UNSPECIFIED),
    ("constant", SyntaxKind.IDENTIFIER),
    ("constant.builtin", SyntaxKind.BUILTIN_IDENTIFIER),
    ("comment", SyntaxKind.COMMENT),
    ("function.builtin", SyntaxKind.FUNCTION_DEFINITION),
    ("function", SyntaxKind.FUNCTION_DEFINITION),
    ("method", SyntaxKind.IDENTIFIER),
    ("include", SyntaxKind.KEYWORD),
    ("keyword", SyntaxKind.KEYWORD),
    ("keyword.function", SyntaxKind.KEYWORD),
    ("keyword.return", SyntaxKind.KEYWORD),
    ("operator", SyntaxKind.OPERATOR),
    ("property", SyntaxKind.UNSPECIFIED),
    ("punctuation", SyntaxKind.UNSPECIFIED),
    ("punctuation.bracket", SyntaxKind.UNSPECIFIED),
    ("punctuation.delimiter", SyntaxKind.UNSPECIFIED),
    ("string", SyntaxKind.STRING_LITERAL),
    ("string.special", SyntaxKind.STRING_LITERAL),
    ("tag", SyntaxKind.UNSPECIFIED),
    ("type", SyntaxKind.TYPE_IDENTIFIER),
    ("type.builtin", SyntaxKind.TYPE_IDENTIFIER),
    ("variable", SyntaxKind.IDENTIFIER),
    ("variable.builtin", SyntaxKind.UNSPECIFIED),
    ("variable.parameter", SyntaxKind.UNSPECIFIED),
    ("conditional", SyntaxKind.KEYWORD),
    ("boolean", SyntaxKind.BUILTIN_IDENTIFIER),
)


@dataclass(frozen=True, slots=True)
class CaptureTable:
    """Immutable ordered ``(capture_name, SyntaxKind)`` table.

    Several capture names may share a kind; the reduction is intentionally
    lossy so output stays comparable across languages.

    Example:
        >>> table = CaptureTable.from_pairs([("comment", SyntaxKind.COMMENT)])
        >>> table.resolve(0)
        <SyntaxKind.COMMENT: 1>
        >>> table.id_for("comment")
        0
    """

    entries: tuple[tuple[str, SyntaxKind], ...]
    _ids: dict[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        ids: dict[str, int] = {}
        duplicates: list[str] = []
        for index, (name, _kind) in enumerate(self.entries):
            if name in ids:
                duplicates.append(name)
            ids[name] = index
        if duplicates:
            joined = ", ".join(sorted(set(duplicates)))
            raise CaptureTableError(f"Duplicate capture names: {joined}")
        object.__setattr__(self, "_ids", ids)

    @classmethod
    def from_pairs(
        cls,
        pairs: Iterable[tuple[str, SyntaxKind | int]],
    ) -> "CaptureTable":
        entries = tuple(
            (str(name).strip(), SyntaxKind(kind)) for name, kind in pairs
        )
        return cls(entries=entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[tuple[str, SyntaxKind]]:
        return iter(self.entries)

    @property
    def names(self) -> tuple[str, ...]:
        """Capture names in id order, as handed to the tokenizer."""

        return tuple(name for name, _kind in self.entries)

    def resolve(self, highlight: int) -> SyntaxKind:
        """Return the syntax kind for classification id ``highlight``.

        Raises:
            CaptureTableError: If the id was never assigned by this table.
        """

        if not 0 <= highlight < len(self.entries):
            raise CaptureTableError(
                f"Classification id {highlight} outside capture table of "
                f"{len(self.entries)} entries"
            )
        return self.entries[highlight][1]

    def id_for(self, name: str) -> int | None:
        """Return the classification id assigned to ``name``."""

        return self._ids.get(name)

    def unknown_names(self, names: Iterable[str]) -> tuple[str, ...]:
        """Return the names from ``names`` missing from the table."""

        return tuple(
            sorted({name for name in names if name not in self._ids})
        )

    def validate_capture_names(
        self,
        names: Iterable[str],
        *,
        source: str | None = None,
    ) -> None:
        """Fail when any capture in ``names`` is absent from the table.

        Raises:
            CaptureTableError: Listing every unknown capture name.
        """

        unknown = self.unknown_names(names)
        if unknown:
            where = f" in {source}" if source else ""
            raise CaptureTableError(
                f"Unknown capture names{where}: {', '.join(unknown)}"
            )


_DEFAULT_TABLE: CaptureTable | None = None
_DEFAULT_TABLE_LOCK = threading.Lock()


def get_default_capture_table() -> CaptureTable:
    """Return the shared default table, built once on first use."""

    global _DEFAULT_TABLE
    table = _DEFAULT_TABLE
    if table is not None:
        return table
    with _DEFAULT_TABLE_LOCK:
        if _DEFAULT_TABLE is None:
            _DEFAULT_TABLE = CaptureTable.from_pairs(DEFAULT_CAPTURES)
        return _DEFAULT_TABLE
