"""Tests for the :mod:`synindex.__main__` entrypoint."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from synindex.__main__ import main


def test_main_invokes_cli(
    monkeypatch: pytest.MonkeyPatch,
    isolated_env: Path,
) -> None:
    monkeypatch.setattr(sys, "argv", ["synindex", "init"])

    configured: dict[str, object] = {}

    def fake_configure_logging(
        *,
        level: str,
        workspace_path: Path | None = None,
        console=None,
    ) -> None:
        configured["level"] = level
        configured["workspace"] = workspace_path

    monkeypatch.setattr("synindex.cli.configure_logging", fake_configure_logging)

    with pytest.raises(SystemExit) as exc:
        main()

    assert exc.value.code == 0
    assert isolated_env.exists()
    assert configured["level"] == "ERROR"
    assert configured["workspace"] == isolated_env.resolve()
