"""Tree-sitter backed producer of highlight events."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Iterator, Protocol

from synindex.core.logging import Logger, get_logger

from .captures import CaptureTable
from .errors import TokenizerError
from .events import HighlightEnd, HighlightEvent, HighlightStart, Source
from .languages import TOKENIZER_MODULE, LanguageConfiguration

__all__ = [
    "CaptureSpan",
    "Tokenizer",
    "TreeSitterTokenizer",
    "events_from_spans",
]


class Tokenizer(Protocol):
    """Anything able to turn source bytes into highlight events."""

    def highlight(
        self,
        configuration: LanguageConfiguration,
        source: bytes,
    ) -> Iterator[HighlightEvent]: ...


@dataclass(frozen=True, slots=True)
class CaptureSpan:
    """A capture resolved to a classification id over ``[start, end)``."""

    start: int
    end: int
    highlight: int


def events_from_spans(
    spans: list[CaptureSpan],
    size: int,
) -> Iterator[HighlightEvent]:
    """Yield a balanced event stream for possibly nested ``spans``.

    ``spans`` must be ordered by start ascending and, for equal starts, by
    end descending so parents precede children. A child reaching past its
    parent is clipped to the parent's end. ``Source`` events cover
    ``[0, size)`` left to right without overlap.

    Example:
        >>> spans = [CaptureSpan(0, 6, 16), CaptureSpan(2, 4, 17)]
        >>> [type(e).__name__ for e in events_from_spans(spans, 8)]
        ['HighlightStart', 'Source', 'HighlightStart', 'Source', 'HighlightEnd', 'Source', 'HighlightEnd', 'Source']
    """

    cursor = 0
    open_ends: list[int] = []

    for span in spans:
        while open_ends and open_ends[-1] <= span.start:
            end = open_ends.pop()
            if cursor < end:
                yield Source(cursor, end)
                cursor = end
            yield HighlightEnd()

        start = max(span.start, cursor)
        end = min(span.end, open_ends[-1]) if open_ends else span.end
        if end <= start:
            continue
        if cursor < start:
            yield Source(cursor, start)
            cursor = start
        yield HighlightStart(span.highlight)
        open_ends.append(end)

    while open_ends:
        end = open_ends.pop()
        if cursor < end:
            yield Source(cursor, end)
            cursor = end
        yield HighlightEnd()

    if cursor < size:
        yield Source(cursor, size)


@dataclass(slots=True)
class _QueryResources:
    language: Any
    query: Any
    lock: threading.Lock


class TreeSitterTokenizer:
    """Highlight events from :mod:`tree_sitter_languages` grammars.

    Compiled queries are cached per language. When several captures cover
    the same node, the first one reported by tree-sitter wins, which follows
    pattern order in the query file.
    """

    def __init__(
        self,
        capture_table: CaptureTable,
        *,
        logger: Logger | None = None,
    ) -> None:
        self._captures = capture_table
        self._logger = logger or get_logger(__name__, component="tokenizer")
        self._resources: dict[str, _QueryResources] = {}
        self._resources_lock = threading.Lock()

    def highlight(
        self,
        configuration: LanguageConfiguration,
        source: bytes,
    ) -> Iterator[HighlightEvent]:
        spans = self._capture_spans(configuration, source)
        return events_from_spans(spans, len(source))

    def _capture_spans(
        self,
        configuration: LanguageConfiguration,
        source: bytes,
    ) -> list[CaptureSpan]:
        resources = self._load(configuration)
        try:
            from tree_sitter_languages import get_parser

            parser = get_parser(configuration.grammar)
            tree = parser.parse(source)
            with resources.lock:
                captures = list(resources.query.captures(tree.root_node))
        except Exception as exc:
            raise TokenizerError(
                f"tree-sitter failed to highlight {configuration.name}: {exc}"
            ) from exc

        seen: set[tuple[int, int]] = set()
        spans: list[CaptureSpan] = []
        for node, name in captures:
            highlight = self._captures.id_for(name)
            if highlight is None:
                continue
            key = (node.start_byte, node.end_byte)
            if key in seen or key[0] >= key[1]:
                continue
            seen.add(key)
            spans.append(CaptureSpan(key[0], key[1], highlight))

        spans.sort(key=lambda span: (span.start, -span.end))
        self._logger.debug(
            "tokenizer-captures",
            language=configuration.name,
            captures=len(captures),
            spans=len(spans),
        )
        return spans

    def _load(self, configuration: LanguageConfiguration) -> _QueryResources:
        with self._resources_lock:
            cached = self._resources.get(configuration.name)
            if cached is not None:
                return cached
            try:
                from tree_sitter_languages import get_language
            except ImportError as exc:
                raise TokenizerError(
                    f"Highlighting {configuration.display_name} requires "
                    f"{TOKENIZER_MODULE}."
                ) from exc
            try:
                language = get_language(configuration.grammar)
                query = language.query(configuration.query_source)
            except Exception as exc:
                raise TokenizerError(
                    f"Failed to compile {configuration.name} highlight query: "
                    f"{exc}"
                ) from exc
            resources = _QueryResources(
                language=language,
                query=query,
                lock=threading.Lock(),
            )
            self._resources[configuration.name] = resources
            return resources
