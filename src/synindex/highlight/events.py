"""Highlight events produced by the tokenizer and consumed by the emitter."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Union

__all__ = [
    "HighlightStart",
    "HighlightEnd",
    "Source",
    "HighlightFailure",
    "HighlightEvent",
    "HighlightEventStream",
]


@dataclass(frozen=True, slots=True)
class HighlightStart:
    """Open classification ``highlight`` (an id from the capture table)."""

    highlight: int


@dataclass(frozen=True, slots=True)
class HighlightEnd:
    """Close the innermost open classification."""


@dataclass(frozen=True, slots=True)
class Source:
    """Byte span ``[start, end)`` of source text under the open classifications."""

    start: int
    end: int


@dataclass(frozen=True, slots=True)
class HighlightFailure:
    """Terminal error value reported by the tokenizer in place of an event."""

    message: str


HighlightEvent = Union[HighlightStart, HighlightEnd, Source, HighlightFailure]
HighlightEventStream = Iterable[HighlightEvent]
