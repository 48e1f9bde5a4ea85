"""Tests for :mod:`synindex.core.paths`."""

from __future__ import annotations

from pathlib import Path

import pytest

from synindex.core.paths import WorkspacePaths, resolve_workspace


def test_resolve_workspace_defaults_to_home_dot_synindex(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Resolver defaults to ``$HOME/.synindex`` when overrides are absent."""

    monkeypatch.setenv("HOME", tmp_path.as_posix())
    monkeypatch.setenv("USERPROFILE", tmp_path.as_posix())

    paths = resolve_workspace()

    expected = (tmp_path / ".synindex").resolve(strict=False)
    assert paths.workspace == expected
    assert paths.config_file == expected / "synindex.toml"
    assert paths.logs_dir == expected / "logs"


def test_resolve_workspace_prefers_cli_override(tmp_path: Path) -> None:
    """CLI override should take precedence over env and defaults."""

    paths = resolve_workspace(
        workspace_override=tmp_path / "from-cli",
        env_override=tmp_path / "from-env",
    )

    assert paths.workspace == (tmp_path / "from-cli").resolve()


def test_resolve_workspace_uses_env_override(tmp_path: Path) -> None:
    paths = resolve_workspace(env_override=tmp_path / "from-env")

    assert paths.workspace == (tmp_path / "from-env").resolve()


def test_resolve_workspace_rejects_files(tmp_path: Path) -> None:
    target = tmp_path / "not-a-dir"
    target.write_text("x", encoding="utf-8")

    with pytest.raises(ValueError):
        resolve_workspace(workspace_override=target)


def test_ensure_directories_creates_layout(tmp_path: Path) -> None:
    paths: WorkspacePaths = resolve_workspace(workspace_override=tmp_path / "ws")

    paths.ensure_directories()

    assert paths.workspace.is_dir()
    assert paths.logs_dir.is_dir()
    assert not paths.config_file.exists()
    assert paths.config_file.parent == paths.workspace
