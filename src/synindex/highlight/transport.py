"""JSON response envelopes for highlight requests."""

from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel, Field, ValidationError

from synindex.core.logging import Logger, get_logger

from .errors import TokenizerError
from .service import HighlightService, UnsupportedLanguage

__all__ = [
    "HighlightQuery",
    "highlight_response",
]

_LOGGER = get_logger(__name__, component="transport")


class HighlightQuery(BaseModel):
    """Incoming highlight request payload."""

    filepath: str = Field(description="Path of the file, used for detection.")
    code: str = Field(description="Full source text of the file.")
    filetype: str | None = Field(
        default=None,
        description="Explicit language name overriding extension detection.",
    )

    model_config = {"str_strip_whitespace": False, "extra": "ignore"}


def _error(message: str, code: str) -> dict[str, Any]:
    return {"error": message, "code": code}


def highlight_response(
    service: HighlightService,
    query: Mapping[str, Any] | HighlightQuery,
    *,
    logger: Logger | None = None,
) -> dict[str, Any]:
    """Run ``query`` through ``service`` and wrap the outcome.

    Every failure becomes a structured ``{"error", "code"}`` payload so the
    serving process keeps running.
    """

    log = logger or _LOGGER
    try:
        request = (
            query
            if isinstance(query, HighlightQuery)
            else HighlightQuery.model_validate(query)
        )
    except ValidationError as exc:
        return _error(
            f"invalid request: {exc.error_count()} error(s)",
            "invalid_request",
        )

    try:
        result = service.index(
            request.code,
            path=request.filepath,
            filetype=request.filetype,
        )
    except TokenizerError as exc:
        log.warning(
            "highlight-tokenizer-failed",
            path=request.filepath,
            error=str(exc),
        )
        return _error(str(exc), "tokenizer_error")
    except Exception:
        log.exception("highlight-panic", path=request.filepath)
        return _error("panic while highlighting code", "panic")

    if isinstance(result, UnsupportedLanguage):
        return _error(result.reason, "unsupported_language")
    return {"data": result.to_payload(), "plaintext": False}
