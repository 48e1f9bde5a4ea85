"""Turn a nested highlight event stream into an occurrence document."""

from __future__ import annotations

from synindex.core.config import EmissionPolicy
from synindex.core.logging import Logger, get_logger

from .captures import CaptureTable
from .errors import EmitterContractError, TokenizerError
from .events import (
    HighlightEnd,
    HighlightEventStream,
    HighlightFailure,
    HighlightStart,
    Source,
)
from .models import Document, Occurrence
from .offsets import LineIndex

__all__ = ["DocumentEmitter"]


class DocumentEmitter:
    """Consume highlight events and build a :class:`Document`.

    The emitter keeps a stack of open classification ids. Every ``Source``
    span seen while the stack is non-empty becomes an occurrence; spans
    outside any classification are dropped. Under
    :attr:`EmissionPolicy.INNERMOST` only the top of the stack is recorded.
    :attr:`EmissionPolicy.LAYERED` records one occurrence per open id,
    outermost first.

    The emitter holds no per-call state, so one instance can serve many
    concurrent calls.

    Example:
        >>> from synindex.highlight.captures import get_default_capture_table
        >>> from synindex.highlight.events import HighlightStart, HighlightEnd, Source
        >>> emitter = DocumentEmitter(get_default_capture_table())
        >>> doc = emitter.emit(
        ...     [HighlightStart(3), Source(0, 14), HighlightEnd()],
        ...     "// Hello World",
        ... )
        >>> doc.occurrences[0].range
        (0, 0, 14)
    """

    def __init__(
        self,
        capture_table: CaptureTable,
        *,
        policy: EmissionPolicy = EmissionPolicy.INNERMOST,
        logger: Logger | None = None,
    ) -> None:
        self._captures = capture_table
        self._policy = EmissionPolicy(policy)
        self._logger = logger or get_logger(__name__, component="emitter")

    @property
    def policy(self) -> EmissionPolicy:
        return self._policy

    def emit(
        self,
        events: HighlightEventStream,
        source: str | bytes,
        *,
        relative_path: str = "",
    ) -> Document:
        """Return the document for ``source`` described by ``events``.

        Args:
            events: Tokenizer events over the UTF-8 bytes of ``source``.
            source: Text (or raw bytes) the event offsets refer to.
            relative_path: Path metadata copied onto the document.

        Raises:
            TokenizerError: If the stream reports or raises a failure. No
                partial document is returned.
            EmitterContractError: If the stream ends an unopened
                classification or reports an invalid span.
            CaptureTableError: If an id has no capture table entry.
        """

        if isinstance(source, bytes):
            index = LineIndex.from_bytes(source)
        else:
            index = LineIndex.from_text(source)

        stack: list[int] = []
        occurrences: list[Occurrence] = []

        for event in events:
            if isinstance(event, HighlightStart):
                stack.append(event.highlight)
            elif isinstance(event, HighlightEnd):
                if not stack:
                    raise EmitterContractError(
                        "Highlight end received with no open highlight"
                    )
                stack.pop()
            elif isinstance(event, Source):
                if not stack:
                    continue
                self._check_span(event, index)
                if len(stack) > 1:
                    self._logger.debug(
                        "highlight-nested",
                        depth=len(stack),
                        highlights=list(stack),
                        start=event.start,
                        end=event.end,
                    )
                packed = index.range(event.start, event.end)
                occurrences.extend(
                    Occurrence(range=packed, syntax_kind=self._captures.resolve(hl))
                    for hl in self._active(stack)
                )
            elif isinstance(event, HighlightFailure):
                raise TokenizerError(event.message)
            else:
                raise EmitterContractError(
                    f"Unsupported highlight event: {event!r}"
                )

        return Document(
            relative_path=relative_path,
            occurrences=tuple(occurrences),
        )

    def _active(self, stack: list[int]) -> list[int]:
        if self._policy is EmissionPolicy.LAYERED:
            return list(stack)
        return [stack[-1]]

    @staticmethod
    def _check_span(event: Source, index: LineIndex) -> None:
        if event.start < 0 or event.end < event.start or event.end > index.size:
            raise EmitterContractError(
                f"Source span [{event.start}, {event.end}) outside buffer of "
                f"{index.size} bytes"
            )
