"""Tests for :mod:`synindex.highlight.tokenizer`."""

from __future__ import annotations

import pytest

from synindex.core.config import EmissionPolicy
from synindex.highlight.captures import CaptureTable, SyntaxKind
from synindex.highlight.emitter import DocumentEmitter
from synindex.highlight.events import HighlightEnd, HighlightStart, Source
from synindex.highlight.languages import (
    DEFAULT_LANGUAGES,
    LanguageConfiguration,
    load_language_configuration,
)
from synindex.highlight.offsets import LineIndex
from synindex.highlight.tokenizer import (
    CaptureSpan,
    TreeSitterTokenizer,
    events_from_spans,
)


def _go_configuration(table: CaptureTable) -> LanguageConfiguration:
    descriptor = next(d for d in DEFAULT_LANGUAGES if d.name == "go")
    return load_language_configuration(descriptor, table)


def test_events_from_spans_covers_buffer_without_overlap() -> None:
    spans = [CaptureSpan(0, 7, 8), CaptureSpan(8, 12, 21)]

    events = list(events_from_spans(spans, 13))

    assert events == [
        HighlightStart(8),
        Source(0, 7),
        HighlightEnd(),
        Source(7, 8),
        HighlightStart(21),
        Source(8, 12),
        HighlightEnd(),
        Source(12, 13),
    ]


def test_events_from_spans_nests_and_clips_children() -> None:
    spans = [CaptureSpan(0, 6, 16), CaptureSpan(2, 4, 17), CaptureSpan(5, 9, 3)]

    events = list(events_from_spans(spans, 10))

    assert events == [
        HighlightStart(16),
        Source(0, 2),
        HighlightStart(17),
        Source(2, 4),
        HighlightEnd(),
        Source(4, 5),
        HighlightStart(3),
        Source(5, 6),
        HighlightEnd(),
        HighlightEnd(),
        Source(6, 10),
    ]


def test_events_from_spans_without_spans_is_plain_source() -> None:
    assert list(events_from_spans([], 4)) == [Source(0, 4)]
    assert list(events_from_spans([], 0)) == []


def test_events_from_spans_are_stack_balanced() -> None:
    spans = [
        CaptureSpan(0, 20, 3),
        CaptureSpan(0, 10, 16),
        CaptureSpan(1, 3, 17),
        CaptureSpan(12, 25, 8),
    ]

    depth = 0
    cursor = 0
    for event in events_from_spans(spans, 30):
        if isinstance(event, HighlightStart):
            depth += 1
        elif isinstance(event, HighlightEnd):
            depth -= 1
            assert depth >= 0
        else:
            assert event.start == cursor
            cursor = event.end
    assert depth == 0
    assert cursor == 30


def test_tree_sitter_go_declaration(capture_table: CaptureTable) -> None:
    pytest.importorskip("tree_sitter_languages")
    source = "package main\nfunc foo() {}\n"
    tokenizer = TreeSitterTokenizer(capture_table)
    emitter = DocumentEmitter(capture_table)

    events = tokenizer.highlight(_go_configuration(capture_table), source.encode())
    document = emitter.emit(events, source, relative_path="main.go")

    classified = [
        (occ.range, occ.syntax_kind)
        for occ in document.occurrences
        if occ.syntax_kind is not SyntaxKind.UNSPECIFIED
    ]
    assert classified == [
        ((0, 0, 7), SyntaxKind.KEYWORD),
        ((0, 8, 12), SyntaxKind.IDENTIFIER),
        ((1, 0, 4), SyntaxKind.KEYWORD),
        ((1, 5, 8), SyntaxKind.FUNCTION_DEFINITION),
    ]


def test_tree_sitter_query_is_compiled_once(capture_table: CaptureTable) -> None:
    pytest.importorskip("tree_sitter_languages")
    tokenizer = TreeSitterTokenizer(capture_table)
    configuration = _go_configuration(capture_table)

    first = list(tokenizer.highlight(configuration, b"// one\n"))
    second = list(tokenizer.highlight(configuration, b"// one\n"))

    assert first == second
    assert list(tokenizer._resources) == ["go"]


GO_FIXTURE = (
    "package main\r\n"
    "\r\n"
    'import "fmt"\n'
    "\n"
    "// Greet prints a héllo.\n"
    "func Greet(name string) (int, error) {\n"
    '\tmsg := "héllo\\t" + name + `raw\n'
    "string`\n"
    "\tif len(msg) > 0 && true {\n"
    "\t\treturn fmt.Println(msg, 'x', nil)\n"
    "\t}\n"
    "\treturn 0, nil\n"
    "}\n"
)

PYTHON_FIXTURE = (
    "import os\n"
    "\n"
    "\n"
    "class Greeter:\n"
    '    """Say héllo."""\n'
    "\n"
    "    def greet(self, name: str = \"wörld\\n\") -> str:\n"
    "        # comment with ünïcode\r\n"
    "        if name and not None:\n"
    "            return os.path.join(name, f\"{name}!\")\n"
    "        return str(True)\n"
)


@pytest.mark.parametrize("policy", list(EmissionPolicy))
@pytest.mark.parametrize(
    ("language", "source"),
    [("go", GO_FIXTURE), ("python", PYTHON_FIXTURE)],
)
def test_tree_sitter_documents_stay_in_bounds_and_ordered(
    capture_table: CaptureTable,
    language: str,
    source: str,
    policy: EmissionPolicy,
) -> None:
    pytest.importorskip("tree_sitter_languages")
    descriptor = next(d for d in DEFAULT_LANGUAGES if d.name == language)
    configuration = load_language_configuration(descriptor, capture_table)
    data = source.encode("utf-8")
    index = LineIndex.from_bytes(data)
    tokenizer = TreeSitterTokenizer(capture_table)
    emitter = DocumentEmitter(capture_table, policy=policy)

    document = emitter.emit(tokenizer.highlight(configuration, data), data)

    assert len(document) > 0
    previous = (0, 0)
    for occurrence in document.occurrences:
        packed = occurrence.packed
        assert packed.start_line < len(index.line_starts)
        assert packed.end_line < len(index.line_starts)
        start = index.line_starts[packed.start_line] + packed.start_col
        end = index.line_starts[packed.end_line] + packed.end_col
        assert 0 <= start < end <= len(data)
        assert (packed.start_line, packed.start_col) >= previous
        previous = (packed.start_line, packed.start_col)
