"""Helpers for the ``synindex init`` command and config resolution."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any, Mapping

from synindex.core.config import (
    AppConfig,
    load_config,
    load_packaged_defaults,
    render_user_config,
)
from synindex.core.paths import WorkspacePaths, resolve_workspace


def read_user_config(paths: WorkspacePaths) -> dict[str, Any] | None:
    """Return the parsed workspace ``synindex.toml`` when present."""

    if not paths.config_file.is_file():
        return None
    return tomllib.loads(paths.config_file.read_text(encoding="utf-8"))


def resolve_config(
    paths: WorkspacePaths,
    *,
    env_config: Mapping[str, Any] | None = None,
    cli_overrides: Mapping[str, Any] | None = None,
) -> AppConfig:
    """Load configuration for ``paths`` applying the precedence stack."""

    return load_config(
        defaults=load_packaged_defaults(),
        user_config=read_user_config(paths),
        env_config=env_config,
        cli_overrides=cli_overrides,
    )


def init_workspace(
    *,
    workspace: Path,
    refresh: bool = False,
    cli_overrides: Mapping[str, Any] | None = None,
    env_config: Mapping[str, Any] | None = None,
) -> AppConfig:
    """Bootstrap the workspace directory and its ``synindex.toml``.

    An existing config file is left untouched unless ``refresh`` is set.

    Args:
        workspace: Target directory for the workspace.
        refresh: Whether to overwrite an existing ``synindex.toml``.
        cli_overrides: Settings supplied via CLI flags.
        env_config: Settings derived from environment variables.

    Returns:
        The resolved configuration after applying overrides.
    """

    paths = resolve_workspace(workspace_override=workspace)
    paths.ensure_directories()

    config = resolve_config(
        paths,
        env_config=env_config,
        cli_overrides=cli_overrides,
    )

    if refresh or not paths.config_file.exists():
        paths.config_file.write_text(
            render_user_config(config),
            encoding="utf-8",
        )

    return config


__all__ = ["init_workspace", "read_user_config", "resolve_config"]
