"""Tests for :mod:`synindex.highlight.service`."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import PurePosixPath, PureWindowsPath

import pytest

from synindex.core.config import EmissionPolicy, HighlightSettings
from synindex.highlight.captures import DEFAULT_CAPTURES, CaptureTable, SyntaxKind
from synindex.highlight.errors import CaptureTableError, TokenizerError
from synindex.highlight.events import HighlightEvent, HighlightFailure
from synindex.highlight.languages import LanguageConfiguration
from synindex.highlight.models import Document
from synindex.highlight.service import (
    HighlightConfig,
    HighlightService,
    UnsupportedLanguage,
)
from synindex.highlight.tokenizer import CaptureSpan, events_from_spans


class RecordingTokenizer:
    """Tokenizer double returning canned spans and recording calls."""

    def __init__(self, spans: list[CaptureSpan] | None = None) -> None:
        self.spans = spans or []
        self.calls: list[tuple[str, bytes]] = []

    def highlight(
        self,
        configuration: LanguageConfiguration,
        source: bytes,
    ) -> Iterator[HighlightEvent]:
        self.calls.append((configuration.name, source))
        return events_from_spans(self.spans, len(source))


class FailingTokenizer:
    def highlight(
        self,
        configuration: LanguageConfiguration,
        source: bytes,
    ) -> Iterator[HighlightEvent]:
        yield HighlightFailure(f"{configuration.name} parser timed out")


def test_unsupported_language_skips_tokenizer(
    highlight_config: HighlightConfig,
) -> None:
    tokenizer = RecordingTokenizer()
    service = HighlightService(highlight_config, tokenizer=tokenizer)

    result = service.index("hello", path="notes.txt")

    assert result == UnsupportedLanguage(path="notes.txt")
    assert "notes.txt" in result.reason
    assert tokenizer.calls == []


def test_unknown_filetype_reports_the_filetype(
    highlight_config: HighlightConfig,
) -> None:
    service = HighlightService(highlight_config, tokenizer=RecordingTokenizer())

    result = service.index("x", path="main.go", filetype="cobol")

    assert isinstance(result, UnsupportedLanguage)
    assert "cobol" in result.reason


def test_index_returns_document_for_detected_language(
    highlight_config: HighlightConfig,
) -> None:
    comment = highlight_config.capture_table.id_for("comment")
    tokenizer = RecordingTokenizer([CaptureSpan(0, 14, comment)])
    service = HighlightService(highlight_config, tokenizer=tokenizer)

    result = service.index("// Hello World", path=PurePosixPath("cmd/main.go"))

    assert isinstance(result, Document)
    assert result.relative_path == "cmd/main.go"
    assert [(occ.range, occ.syntax_kind) for occ in result.occurrences] == [
        ((0, 0, 14), SyntaxKind.COMMENT),
    ]
    assert tokenizer.calls == [("go", b"// Hello World")]


def test_filetype_overrides_extension(highlight_config: HighlightConfig) -> None:
    tokenizer = RecordingTokenizer()
    service = HighlightService(highlight_config, tokenizer=tokenizer)

    service.index("x = 1", path="script", filetype="python")

    assert tokenizer.calls == [("python", b"x = 1")]


def test_windows_paths_are_normalized(highlight_config: HighlightConfig) -> None:
    service = HighlightService(highlight_config, tokenizer=RecordingTokenizer())

    result = service.index("", path=PureWindowsPath("pkg\\main.go"))

    assert isinstance(result, Document)
    assert result.relative_path == "pkg/main.go"


def test_tokenizer_failure_surfaces_as_error(
    highlight_config: HighlightConfig,
) -> None:
    service = HighlightService(highlight_config, tokenizer=FailingTokenizer())

    with pytest.raises(TokenizerError, match="timed out"):
        service.index("package main", path="main.go")


def test_empty_capture_table_fails_query_validation() -> None:
    with pytest.raises(CaptureTableError, match="Unknown capture names"):
        HighlightConfig.from_settings(
            HighlightSettings(),
            capture_table=CaptureTable.from_pairs([]),
        )


def test_explicit_capture_table_is_kept() -> None:
    table = CaptureTable.from_pairs(DEFAULT_CAPTURES)

    config = HighlightConfig.from_settings(HighlightSettings(), capture_table=table)

    assert config.capture_table is table


def test_config_policy_reaches_the_emitter() -> None:
    settings = HighlightSettings(policy="LAYERED")
    config = HighlightConfig.from_settings(settings)
    comment = config.capture_table.id_for("comment")
    keyword = config.capture_table.id_for("keyword")
    tokenizer = RecordingTokenizer(
        [CaptureSpan(0, 4, comment), CaptureSpan(0, 2, keyword)]
    )
    service = HighlightService(config, tokenizer=tokenizer)

    result = service.index("abcd", path="a.go")

    assert config.policy is EmissionPolicy.LAYERED
    assert [(occ.range, occ.syntax_kind) for occ in result.occurrences] == [
        ((0, 0, 2), SyntaxKind.COMMENT),
        ((0, 0, 2), SyntaxKind.KEYWORD),
        ((0, 2, 4), SyntaxKind.COMMENT),
    ]
