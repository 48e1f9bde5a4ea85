"""Annotated source dumps of occurrence documents."""

from __future__ import annotations

from collections import deque

from .captures import SyntaxKind
from .models import Document

__all__ = ["dump_document"]


def _source_lines(source: str) -> list[str]:
    """Split on newlines only, so line numbers agree with byte offsets."""

    if not source:
        return []
    lines = source.split("\n")
    if source.endswith("\n"):
        lines.pop()
    return [line.removesuffix("\r") for line in lines]


def dump_document(document: Document, source: str) -> str:
    """Render ``source`` with a caret line under each classified span.

    Occurrences are consumed in packed-range order. Unspecified kinds and
    spans crossing lines are skipped.

    Example:
        >>> from synindex.highlight.models import Occurrence
        >>> doc = Document(occurrences=(Occurrence((0, 0, 2), SyntaxKind.COMMENT),))
        >>> print(dump_document(doc, "//"), end="")
          //
        //^^ Comment
    """

    pending = deque(document.sorted_occurrences())
    lines: list[str] = []

    for index, line in enumerate(_source_lines(source)):
        lines.append("  " + line.replace("\t", " "))

        while pending:
            occurrence = pending.popleft()
            if occurrence.syntax_kind == SyntaxKind.UNSPECIFIED:
                continue
            packed = occurrence.packed
            if not packed.single_line:
                continue
            if packed.start_line > index:
                pending.appendleft(occurrence)
                break
            if packed.start_line < index:
                continue
            width = packed.end_col - packed.start_col
            lines.append(
                "//"
                + " " * packed.start_col
                + "^" * width
                + f" {occurrence.syntax_kind.label}"
            )

    return "".join(f"{line}\n" for line in lines)
