"""Core utilities shared across :mod:`synindex` modules.

The core namespace provides configuration loading, logging setup, and
workspace path resolution so the highlight pipeline stays lightweight.
"""

from __future__ import annotations

from .config import AppConfig, EmissionPolicy, HighlightSettings, load_config
from .logging import configure_logging, get_logger
from .paths import WorkspacePaths, resolve_workspace

__all__ = [
    "AppConfig",
    "EmissionPolicy",
    "HighlightSettings",
    "configure_logging",
    "get_logger",
    "load_config",
    "WorkspacePaths",
    "resolve_workspace",
]
