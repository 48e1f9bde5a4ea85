"""Highlight service orchestrating detection, tokenizing and emission."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path, PurePath
from time import perf_counter

from synindex.core.config import EmissionPolicy, HighlightSettings
from synindex.core.logging import Logger, get_logger

from .captures import CaptureTable, get_default_capture_table
from .emitter import DocumentEmitter
from .languages import LanguageRegistry, build_default_registry
from .models import Document
from .tokenizer import Tokenizer, TreeSitterTokenizer

__all__ = [
    "HighlightConfig",
    "HighlightService",
    "UnsupportedLanguage",
]


@dataclass(frozen=True, slots=True)
class HighlightConfig:
    """Read-only configuration shared by every highlight request.

    Build it once at startup; loading validates every language query against
    the capture table, so capture mismatches fail here rather than per
    request.
    """

    capture_table: CaptureTable
    languages: LanguageRegistry
    policy: EmissionPolicy = EmissionPolicy.INNERMOST

    @classmethod
    def from_settings(
        cls,
        settings: HighlightSettings,
        *,
        capture_table: CaptureTable | None = None,
    ) -> "HighlightConfig":
        if capture_table is None:
            capture_table = get_default_capture_table()
        return cls(
            capture_table=capture_table,
            languages=build_default_registry(settings, capture_table),
            policy=settings.policy,
        )


@dataclass(frozen=True, slots=True)
class UnsupportedLanguage:
    """Result returned when no enabled language matches a request."""

    path: str
    filetype: str | None = None

    @property
    def reason(self) -> str:
        if self.filetype:
            return f"unsupported filetype {self.filetype!r}"
        return f"no highlighter for {self.path!r}"


class HighlightService:
    """Index source files into occurrence documents.

    Example:
        >>> from synindex.core.config import HighlightSettings
        >>> service = HighlightService(HighlightConfig.from_settings(HighlightSettings()))
        >>> service.index("x = 1", path="notes.txt")
        UnsupportedLanguage(path='notes.txt', filetype=None)
    """

    def __init__(
        self,
        config: HighlightConfig,
        *,
        tokenizer: Tokenizer | None = None,
        logger: Logger | None = None,
    ) -> None:
        self._config = config
        self._logger = logger or get_logger(__name__, component="highlight")
        self._tokenizer = tokenizer or TreeSitterTokenizer(
            config.capture_table,
            logger=self._logger,
        )
        self._emitter = DocumentEmitter(
            config.capture_table,
            policy=config.policy,
            logger=self._logger,
        )

    @property
    def config(self) -> HighlightConfig:
        return self._config

    def index(
        self,
        code: str,
        *,
        path: Path | PurePath | str,
        filetype: str | None = None,
    ) -> Document | UnsupportedLanguage:
        """Return the occurrence document for ``code``.

        The emitter never runs for undetectable languages; an
        :class:`UnsupportedLanguage` value is returned instead.

        Raises:
            TokenizerError: If the tokenizer fails for this input.
        """

        relative_path = PurePath(path).as_posix()
        language = self._config.languages.detect(
            relative_path,
            filetype=filetype,
        )
        if language is None:
            unsupported = UnsupportedLanguage(
                path=relative_path,
                filetype=filetype,
            )
            self._logger.info(
                "highlight-unsupported",
                path=relative_path,
                filetype=filetype,
            )
            return unsupported

        source = code.encode("utf-8")
        started = perf_counter()
        events = self._tokenizer.highlight(language, source)
        document = self._emitter.emit(
            events,
            source,
            relative_path=relative_path,
        )
        self._logger.debug(
            "highlight-emit",
            path=relative_path,
            language=language.name,
            policy=self._emitter.policy.value,
            occurrences=len(document),
            seconds=round(perf_counter() - started, 6),
        )
        return document
