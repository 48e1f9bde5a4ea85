"""Command-line interface for :mod:`synindex`.

This module exposes the Typer application behind the ``synindex`` console
script: workspace bootstrap plus the ``index``, ``snapshot`` and ``features``
commands built on :mod:`synindex.highlight`.

Example:
    >>> import typer
    >>> from synindex.cli import create_app
    >>> isinstance(create_app(), typer.Typer)
    True
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import typer
from pydantic import ValidationError

from synindex.cli.init import init_workspace, resolve_config
from synindex.core.config import AppConfig, EmissionPolicy, env_overrides
from synindex.core.logging import Logger, configure_logging, get_logger
from synindex.core.paths import WorkspacePaths, resolve_workspace
from synindex.highlight import (
    CaptureTableError,
    HighlightConfig,
    HighlightService,
    TokenizerError,
    UnsupportedLanguage,
    dump_document,
    highlight_response,
)

_app_help = (
    "Index source files into syntax occurrence documents."
    "\n\n"
    "Use `synindex init` to bootstrap a workspace and populate "
    "`synindex.toml`."
)


def _resolve_paths(workspace: Path | None) -> WorkspacePaths:
    env_workspace = os.environ.get("SYNINDEX_WORKSPACE")
    env_path = Path(env_workspace).expanduser() if env_workspace else None
    try:
        return resolve_workspace(
            workspace_override=workspace,
            env_override=env_path,
        )
    except ValueError as exc:
        typer.secho(f"Workspace error: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc


def _cli_overrides(
    *,
    log_level: str | None = None,
    policy: EmissionPolicy | None = None,
) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if log_level:
        overrides["log_level"] = log_level
    if policy is not None:
        overrides["highlight"] = {"policy": policy.value}
    return overrides


def _load_config(
    paths: WorkspacePaths,
    *,
    log_level: str | None,
    policy: EmissionPolicy | None = None,
) -> AppConfig:
    try:
        return resolve_config(
            paths,
            env_config=env_overrides(os.environ),
            cli_overrides=_cli_overrides(log_level=log_level, policy=policy),
        )
    except (ValidationError, ValueError) as exc:
        typer.secho(f"Configuration error: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc


def _build_service(config: AppConfig, logger: Logger) -> HighlightService:
    try:
        highlight_config = HighlightConfig.from_settings(config.highlight)
    except CaptureTableError as exc:
        logger.error("highlight-config-invalid", error=str(exc))
        typer.secho(f"Configuration error: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc

    if not config.quiet:
        for snapshot in highlight_config.languages.availability():
            logger.info(
                "highlight-language",
                language=snapshot.name,
                enabled=snapshot.enabled,
                status=snapshot.status.value,
                extensions=list(snapshot.extensions),
            )
    return HighlightService(highlight_config, logger=logger)


def _read_source(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        typer.secho(f"Failed to read {path}: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc


def _emit_features(config: AppConfig) -> None:
    highlight_config = HighlightConfig.from_settings(config.highlight)

    typer.secho("Languages", bold=True)
    for snapshot in highlight_config.languages.availability():
        state = "enabled" if snapshot.enabled else "disabled"
        extensions = ", ".join(snapshot.extensions) or "-"
        suffix = f" - {snapshot.summary}" if snapshot.summary else ""
        typer.echo(
            f"  - {snapshot.name}: {state} ({snapshot.status.value}) "
            f"[{extensions}]{suffix}"
        )

    typer.echo(f"Policy: {config.highlight.policy.value}")
    typer.secho("Captures", bold=True)
    for highlight, (name, kind) in enumerate(highlight_config.capture_table):
        typer.echo(f"  {highlight:>3} {name:<24} {kind.label}")


def _workspace_option() -> Any:
    return typer.Option(
        None,
        "--workspace",
        "-w",
        help=(
            "Override the workspace directory (defaults to $HOME/.synindex "
            "or SYNINDEX_WORKSPACE)."
        ),
    )


def _log_level_option() -> Any:
    return typer.Option(
        None,
        "--log-level",
        "-l",
        help="Override the logging level (DEBUG/INFO/WARNING/ERROR).",
    )


def _policy_option() -> Any:
    return typer.Option(
        None,
        "--policy",
        help="Occurrence policy for nested classifications.",
        case_sensitive=False,
    )


def _filetype_option() -> Any:
    return typer.Option(
        None,
        "--filetype",
        "-t",
        help="Language name overriding extension detection.",
    )


def create_app() -> "typer.Typer":
    """Return the Typer application powering the ``synindex`` CLI."""

    app = typer.Typer(
        help=_app_help,
        no_args_is_help=True,
        rich_markup_mode="rich",
    )

    @app.callback()
    def main_callback() -> None:
        """Top-level CLI callback ensuring subcommands are dispatched."""

        return None

    @app.command(
        "init",
        help="Bootstrap a workspace and seed synindex.toml.",
    )
    def init_command(
        workspace: Path | None = _workspace_option(),
        refresh: bool = typer.Option(
            False,
            "--refresh",
            help="Rewrite synindex.toml even if it already exists.",
        ),
        log_level: str | None = _log_level_option(),
        policy: EmissionPolicy | None = _policy_option(),
    ) -> None:
        paths = _resolve_paths(workspace)
        existing = paths.config_file.exists()

        try:
            config = init_workspace(
                workspace=paths.workspace,
                refresh=refresh,
                env_config=env_overrides(os.environ),
                cli_overrides=_cli_overrides(log_level=log_level, policy=policy),
            )
        except (ValidationError, ValueError, OSError) as exc:
            typer.secho(
                f"Failed to initialize workspace: {exc}",
                fg=typer.colors.RED,
                err=True,
            )
            raise typer.Exit(code=1) from exc

        configure_logging(level=config.log_level, workspace_path=paths.workspace)
        logger = get_logger(__name__, command="init")
        logger.info(
            "init-complete",
            workspace=str(paths.workspace),
            refresh=refresh,
        )

        typer.secho("Workspace initialized", fg=typer.colors.GREEN, bold=True)
        typer.echo(f"  workspace: {paths.workspace}")
        typer.echo(f"  config: {paths.config_file}")
        typer.echo(f"  log level: {config.log_level}")
        typer.echo(f"  policy: {config.highlight.policy.value}")
        if existing and not refresh:
            typer.echo("  note: existing config detected; file left untouched")

    @app.command(
        "index",
        help="Print the occurrence document for FILE as a JSON envelope.",
    )
    def index_command(
        file: Path = typer.Argument(
            ...,
            exists=True,
            dir_okay=False,
            readable=True,
            help="Source file to index.",
        ),
        filetype: str | None = _filetype_option(),
        workspace: Path | None = _workspace_option(),
        log_level: str | None = _log_level_option(),
        policy: EmissionPolicy | None = _policy_option(),
        indent: int | None = typer.Option(
            None,
            "--indent",
            min=0,
            help="Pretty-print the JSON output.",
        ),
    ) -> None:
        paths = _resolve_paths(workspace)
        config = _load_config(paths, log_level=log_level, policy=policy)
        configure_logging(level=config.log_level)
        logger = get_logger(__name__, command="index")

        service = _build_service(config, logger)
        code = _read_source(file)
        response = highlight_response(
            service,
            {"filepath": file.as_posix(), "code": code, "filetype": filetype},
            logger=logger,
        )
        typer.echo(json.dumps(response, indent=indent))
        if "error" in response:
            raise typer.Exit(code=1)

    @app.command(
        "snapshot",
        help="Print FILE annotated with a caret line per occurrence.",
    )
    def snapshot_command(
        file: Path = typer.Argument(
            ...,
            exists=True,
            dir_okay=False,
            readable=True,
            help="Source file to annotate.",
        ),
        filetype: str | None = _filetype_option(),
        workspace: Path | None = _workspace_option(),
        log_level: str | None = _log_level_option(),
    ) -> None:
        paths = _resolve_paths(workspace)
        config = _load_config(paths, log_level=log_level)
        configure_logging(level=config.log_level)
        logger = get_logger(__name__, command="snapshot")

        service = _build_service(config, logger)
        code = _read_source(file)
        try:
            result = service.index(code, path=file.as_posix(), filetype=filetype)
        except TokenizerError as exc:
            typer.secho(f"Highlight failed: {exc}", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=1) from exc

        if isinstance(result, UnsupportedLanguage):
            typer.secho(
                f"Unsupported language: {result.reason}",
                fg=typer.colors.YELLOW,
                err=True,
            )
            raise typer.Exit(code=1)

        typer.echo(dump_document(result, code), nl=False)

    @app.command(
        "features",
        help="List languages, their availability and the capture table.",
    )
    def features_command(
        workspace: Path | None = _workspace_option(),
        log_level: str | None = _log_level_option(),
    ) -> None:
        paths = _resolve_paths(workspace)
        config = _load_config(paths, log_level=log_level)
        configure_logging(level=config.log_level)
        try:
            _emit_features(config)
        except CaptureTableError as exc:
            typer.secho(f"Configuration error: {exc}", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=1) from exc

    return app


__all__ = ["create_app"]
