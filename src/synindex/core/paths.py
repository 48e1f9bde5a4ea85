"""Workspace path helpers for :mod:`synindex`."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

__all__ = [
    "CONFIG_FILENAME",
    "WorkspacePaths",
    "resolve_workspace",
]

CONFIG_FILENAME = "synindex.toml"


@dataclass(frozen=True, slots=True)
class WorkspacePaths:
    """Resolved locations for a workspace instance.

    Example:
        >>> from pathlib import Path
        >>> paths = WorkspacePaths(
        ...     workspace=Path("/tmp/synindex"),
        ...     config_file=Path("/tmp/synindex/synindex.toml"),
        ...     logs_dir=Path("/tmp/synindex/logs"),
        ... )
        >>> paths.logs_dir.name
        'logs'
    """

    workspace: Path
    config_file: Path
    logs_dir: Path

    def ensure_directories(self) -> None:
        """Create the workspace and log directories if missing."""

        self.workspace.mkdir(parents=True, exist_ok=True)
        self.logs_dir.mkdir(parents=True, exist_ok=True)


def resolve_workspace(
    *,
    workspace_override: Path | None = None,
    env_override: Path | None = None,
) -> WorkspacePaths:
    """Resolve canonical workspace locations.

    Args:
        workspace_override: Optional override provided by CLI flags.
        env_override: Optional override from environment variables.

    Returns:
        Resolved workspace paths after precedence rules are applied.

    Raises:
        ValueError: If the resolved workspace points to a regular file.
    """

    base = workspace_override or env_override or Path.home() / ".synindex"
    raw = Path(base).expanduser()
    if not raw.is_absolute():
        raw = Path.cwd() / raw
    workspace = raw.resolve(strict=False)

    if workspace.is_file():
        raise ValueError(f"Workspace file path not allowed: {workspace}")

    return WorkspacePaths(
        workspace=workspace,
        config_file=workspace / CONFIG_FILENAME,
        logs_dir=workspace / "logs",
    )
