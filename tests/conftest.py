"""Shared pytest fixtures for highlight pipeline tests."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from synindex.core.config import HighlightSettings
from synindex.highlight import (
    CaptureTable,
    DocumentEmitter,
    HighlightConfig,
    get_default_capture_table,
)


@pytest.fixture(autouse=True)
def reset_root_handlers() -> Iterator[None]:
    """Keep handlers installed by ``configure_logging`` from leaking."""

    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()


@pytest.fixture
def capture_table() -> CaptureTable:
    """Return the shared default capture table."""

    return get_default_capture_table()


@pytest.fixture
def emitter(capture_table: CaptureTable) -> DocumentEmitter:
    return DocumentEmitter(capture_table)


@pytest.fixture
def highlight_config(capture_table: CaptureTable) -> HighlightConfig:
    """Configuration with the bundled languages and default settings."""

    return HighlightConfig.from_settings(
        HighlightSettings(),
        capture_table=capture_table,
    )


@pytest.fixture
def isolated_env(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> Path:
    """Point HOME and the workspace at ``tmp_path`` and quiet the logs."""

    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", home.as_posix())
    monkeypatch.setenv("USERPROFILE", home.as_posix())
    monkeypatch.setenv("SYNINDEX_WORKSPACE", (tmp_path / "workspace").as_posix())
    monkeypatch.setenv("SYNINDEX_LOG_LEVEL", "ERROR")
    monkeypatch.setenv("SYNINDEX_QUIET", "true")
    monkeypatch.delenv("SYNINDEX_POLICY", raising=False)
    return tmp_path / "workspace"
