"""Domain-specific exceptions for the highlight pipeline."""

from __future__ import annotations


class HighlightError(RuntimeError):
    """Base error for highlight pipeline failures."""


class TokenizerError(HighlightError):
    """Raised when the tokenizer fails while producing highlight events."""


class CaptureTableError(HighlightError):
    """Raised when capture names or ids disagree with the capture table.

    This is a configuration fault: a query references a capture the table does
    not know, or the tokenizer emitted an id the table never assigned.
    """


class EmitterContractError(AssertionError):
    """Raised when the event stream breaks stack discipline.

    An ``End`` without a matching ``Start`` means the tokenizer is broken;
    callers are not expected to recover from it.
    """


__all__ = [
    "HighlightError",
    "TokenizerError",
    "CaptureTableError",
    "EmitterContractError",
]
