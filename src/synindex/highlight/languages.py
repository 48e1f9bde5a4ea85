"""Per-language highlight configurations and language detection."""

from __future__ import annotations

import importlib
import re
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Iterable

from synindex.core.config import HighlightSettings
from synindex.resources import get_resource

from .captures import CaptureTable

__all__ = [
    "HealthStatus",
    "LanguageAvailability",
    "LanguageConfiguration",
    "LanguageDescriptor",
    "LanguageRegistry",
    "DEFAULT_LANGUAGES",
    "TOKENIZER_MODULE",
    "build_default_registry",
    "load_language_configuration",
    "query_capture_names",
]

TOKENIZER_MODULE = "tree_sitter_languages"


class HealthStatus(StrEnum):
    """Normalized availability states reported for languages."""

    OK = "ok"
    ERROR = "error"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class LanguageDescriptor:
    """Static description of a bundled language."""

    name: str
    display_name: str
    extensions: tuple[str, ...] = ()
    grammar: str | None = None

    @property
    def grammar_name(self) -> str:
        return self.grammar or self.name

    @property
    def query_resource(self) -> str:
        return f"queries/{self.name}/highlights.scm"


DEFAULT_LANGUAGES: tuple[LanguageDescriptor, ...] = (
    LanguageDescriptor(name="go", display_name="Go", extensions=("go",)),
    LanguageDescriptor(
        name="python",
        display_name="Python",
        extensions=("py", "pyi", "pyw"),
    ),
)


@dataclass(frozen=True, slots=True)
class LanguageConfiguration:
    """A language's validated highlight query and detection data."""

    name: str
    display_name: str
    grammar: str
    extensions: tuple[str, ...]
    query_source: str
    capture_names: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class LanguageAvailability:
    """Snapshot of language enablement and tokenizer dependency health."""

    name: str
    display_name: str
    enabled: bool
    extensions: tuple[str, ...]
    status: HealthStatus
    summary: str | None = None


# String literals and ``;`` comments can contain ``@`` without naming a
# capture, so both are blanked before scanning.
_QUERY_NOISE_RE = re.compile(r'"(?:\\.|[^"\\])*"|;[^\n]*')
_CAPTURE_RE = re.compile(r"@([A-Za-z_][\w.\-]*)")


def query_capture_names(query_source: str) -> tuple[str, ...]:
    """Return the distinct capture names referenced by ``query_source``.

    Names starting with ``_`` are predicate helpers and never highlighted,
    so they are left out.

    Example:
        >>> query_capture_names('(comment) @comment ; @ignored\\n"func" @keyword')
        ('comment', 'keyword')
    """

    stripped = _QUERY_NOISE_RE.sub(" ", query_source)
    names = (
        match.group(1)
        for match in _CAPTURE_RE.finditer(stripped)
        if not match.group(1).startswith("_")
    )
    return tuple(dict.fromkeys(names))


def load_language_configuration(
    descriptor: LanguageDescriptor,
    capture_table: CaptureTable,
    *,
    extensions: Iterable[str] | None = None,
    query_source: str | None = None,
) -> LanguageConfiguration:
    """Load and validate the highlight query for ``descriptor``.

    Raises:
        CaptureTableError: If the query references captures missing from
            ``capture_table``.
        FileNotFoundError: If the packaged query is missing.
    """

    if query_source is None:
        query_source = get_resource(descriptor.query_resource).read_text(
            encoding="utf-8"
        )
    names = query_capture_names(query_source)
    capture_table.validate_capture_names(
        names,
        source=descriptor.query_resource,
    )
    return LanguageConfiguration(
        name=descriptor.name,
        display_name=descriptor.display_name,
        grammar=descriptor.grammar_name,
        extensions=tuple(extensions or descriptor.extensions),
        query_source=query_source,
        capture_names=names,
    )


def _probe_tokenizer() -> tuple[HealthStatus, str | None]:
    try:
        importlib.import_module(TOKENIZER_MODULE)
    except ImportError as exc:
        return HealthStatus.ERROR, f"Missing dependency: {exc}"
    return HealthStatus.OK, None


class LanguageRegistry:
    """Map paths and filetype hints to language configurations."""

    def __init__(
        self,
        *,
        configurations: Iterable[LanguageConfiguration],
        settings: HighlightSettings,
    ) -> None:
        self._settings = settings
        self._configurations: dict[str, LanguageConfiguration] = {
            config.name: config for config in configurations
        }
        self._extensions: dict[str, str] = {}
        self._aliases: dict[str, str] = {}
        for config in self._configurations.values():
            self._aliases[config.name.lower()] = config.name
            self._aliases[config.display_name.lower()] = config.name
            if not self._is_enabled(config.name):
                continue
            for extension in config.extensions:
                self._extensions[extension.lower().lstrip(".")] = config.name

    def detect(
        self,
        path: Path | str | None,
        *,
        filetype: str | None = None,
    ) -> LanguageConfiguration | None:
        """Return the enabled language for ``path``/``filetype`` or ``None``.

        An explicit ``filetype`` wins over the path extension.
        """

        name: str | None = None
        if filetype and filetype.strip():
            name = self._aliases.get(filetype.strip().lower())
        elif path is not None:
            extension = _infer_extension(Path(path))
            if extension:
                name = self._extensions.get(extension)

        if name is None or not self._is_enabled(name):
            return None
        return self._configurations[name]

    def availability(self) -> tuple[LanguageAvailability, ...]:
        """Return availability snapshots for every registered language."""

        status, summary = _probe_tokenizer()
        snapshots: list[LanguageAvailability] = []
        for name, config in sorted(self._configurations.items()):
            enabled = self._is_enabled(name)
            snapshots.append(
                LanguageAvailability(
                    name=name,
                    display_name=config.display_name,
                    enabled=enabled,
                    extensions=config.extensions,
                    status=status if enabled else HealthStatus.UNKNOWN,
                    summary=summary,
                )
            )
        return tuple(snapshots)

    def _is_enabled(self, name: str) -> bool:
        return self._settings.language(name).enabled


def _infer_extension(path: Path) -> str | None:
    suffix = path.suffix
    if not suffix:
        return None
    return suffix.lstrip(".").lower()


def build_default_registry(
    settings: HighlightSettings,
    capture_table: CaptureTable,
    *,
    descriptors: Iterable[LanguageDescriptor] = DEFAULT_LANGUAGES,
) -> LanguageRegistry:
    """Load every bundled language, validating its query up front."""

    configurations = []
    for descriptor in descriptors:
        overrides = settings.language(descriptor.name).extensions
        configurations.append(
            load_language_configuration(
                descriptor,
                capture_table,
                extensions=overrides or None,
            )
        )
    return LanguageRegistry(configurations=configurations, settings=settings)
