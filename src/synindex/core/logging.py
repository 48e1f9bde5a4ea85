"""Logging helpers for :mod:`synindex`."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
import structlog

Logger = structlog.stdlib.BoundLogger

_PRE_CHAIN = (
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
)

LOG_FILENAME = "synindex.log"


def _handler(
    handler: logging.Handler,
    level: int,
    renderer: Any,
) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=list(_PRE_CHAIN),
        )
    )
    return handler


def configure_logging(
    *,
    level: str = "INFO",
    workspace_path: str | Path | None = None,
    console: Console | None = None,
) -> None:
    """Route structlog events through Rich on stderr.

    stdout stays reserved for command output such as JSON documents. When
    ``workspace_path`` is given, events are also appended as JSON lines to
    ``<workspace>/logs/synindex.log``.

    Raises:
        ValueError: If ``level`` is not a recognized log level name.
    """

    log_level = logging.getLevelName(level.strip().upper())
    if isinstance(log_level, str):  # ``getLevelName`` echoes unknown names.
        raise ValueError(f"Unsupported log level: {level!r}")

    structlog.reset_defaults()
    structlog.configure(
        processors=[
            *_PRE_CHAIN,
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handlers = [
        _handler(
            RichHandler(
                console=console or Console(stderr=True),
                show_path=False,
                markup=False,
                log_time_format="%Y-%m-%d %H:%M:%S",
            ),
            log_level,
            structlog.dev.ConsoleRenderer(colors=False),
        )
    ]
    if workspace_path is not None:
        log_dir = Path(workspace_path).expanduser().resolve() / "logs"
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(
            _handler(
                logging.FileHandler(
                    log_dir / LOG_FILENAME,
                    encoding="utf-8",
                    delay=True,
                ),
                log_level,
                structlog.processors.JSONRenderer(sort_keys=True),
            )
        )

    root = logging.getLogger()
    root.setLevel(log_level)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)


def get_logger(name: str | None = None, **initial_context: Any) -> Logger:
    """Return a structured logger bound to an optional context."""

    return structlog.get_logger(name).bind(**initial_context)


__all__ = ["LOG_FILENAME", "Logger", "configure_logging", "get_logger"]
