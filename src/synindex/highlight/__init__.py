"""Highlight pipeline: tokenizer events to syntax occurrence documents."""

from __future__ import annotations

from .captures import (
    DEFAULT_CAPTURES,
    CaptureTable,
    SyntaxKind,
    get_default_capture_table,
)
from .emitter import DocumentEmitter
from .errors import (
    CaptureTableError,
    EmitterContractError,
    HighlightError,
    TokenizerError,
)
from .events import (
    HighlightEnd,
    HighlightEvent,
    HighlightFailure,
    HighlightStart,
    Source,
)
from .languages import (
    HealthStatus,
    LanguageAvailability,
    LanguageConfiguration,
    LanguageRegistry,
    build_default_registry,
    query_capture_names,
)
from .models import Document, Occurrence
from .offsets import LineIndex, Position
from .ranges import PackedRange, range_sort_key, sort_ranges
from .service import HighlightConfig, HighlightService, UnsupportedLanguage
from .snapshot import dump_document
from .tokenizer import TreeSitterTokenizer, events_from_spans
from .transport import HighlightQuery, highlight_response

__all__ = [
    "DEFAULT_CAPTURES",
    "CaptureTable",
    "CaptureTableError",
    "Document",
    "DocumentEmitter",
    "EmitterContractError",
    "HealthStatus",
    "HighlightConfig",
    "HighlightEnd",
    "HighlightError",
    "HighlightEvent",
    "HighlightFailure",
    "HighlightQuery",
    "HighlightService",
    "HighlightStart",
    "LanguageAvailability",
    "LanguageConfiguration",
    "LanguageRegistry",
    "LineIndex",
    "Occurrence",
    "PackedRange",
    "Position",
    "Source",
    "SyntaxKind",
    "TokenizerError",
    "TreeSitterTokenizer",
    "UnsupportedLanguage",
    "build_default_registry",
    "dump_document",
    "events_from_spans",
    "get_default_capture_table",
    "highlight_response",
    "query_capture_names",
    "range_sort_key",
    "sort_ranges",
]
