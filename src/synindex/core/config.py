"""Configuration models and loaders for :mod:`synindex`."""

from __future__ import annotations

from collections.abc import Mapping as MappingABC
from enum import StrEnum
from typing import Any, Mapping

import tomllib
import tomlkit
from pydantic import BaseModel, Field, field_validator, model_validator

from synindex.resources import get_resource

DEFAULTS_RESOURCE_NAME = "synindex.defaults.toml"


class EmissionPolicy(StrEnum):
    """How a span covered by nested classifications becomes occurrences."""

    INNERMOST = "innermost"
    LAYERED = "layered"


class LanguageSettings(BaseModel):
    """Per-language toggle and detection overrides."""

    enabled: bool = Field(
        default=True,
        description="Whether files of this language are highlighted.",
    )
    extensions: tuple[str, ...] = Field(
        default_factory=tuple,
        description=(
            "Extensions detected as this language; empty keeps the "
            "packaged defaults."
        ),
    )

    model_config = {
        "frozen": True,
        "str_strip_whitespace": True,
    }

    @field_validator("extensions", mode="before")
    @classmethod
    def _normalize_extensions(cls, value: Any) -> tuple[str, ...]:
        if not value:
            return ()
        if isinstance(value, str):
            value = (value,)
        normalized = (str(item).strip().lower().lstrip(".") for item in value)
        return tuple(dict.fromkeys(item for item in normalized if item))


_DEFAULT_LANGUAGE_NAMES: tuple[str, ...] = ("go", "python")


def _default_languages() -> dict[str, LanguageSettings]:
    return {name: LanguageSettings() for name in _DEFAULT_LANGUAGE_NAMES}


class HighlightSettings(BaseModel):
    """Settings for the highlight pipeline."""

    policy: EmissionPolicy = Field(
        default=EmissionPolicy.INNERMOST,
        description=(
            "Occurrence policy for nested classifications: 'innermost' keeps "
            "only the innermost, 'layered' records every active one."
        ),
    )
    languages: dict[str, LanguageSettings] = Field(
        default_factory=_default_languages,
        description="Per-language settings keyed by language name.",
    )

    model_config = {
        "frozen": True,
        "str_strip_whitespace": True,
    }

    @field_validator("policy", mode="before")
    @classmethod
    def _normalize_policy(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @model_validator(mode="after")
    def _normalize_languages(self) -> "HighlightSettings":
        normalized: dict[str, LanguageSettings] = {}
        for name, settings in self.languages.items():
            key = name.strip().lower()
            if not key:
                raise ValueError("Language names cannot be blank.")
            normalized[key] = settings
        object.__setattr__(self, "languages", normalized)
        return self

    def language(self, name: str) -> LanguageSettings:
        """Return settings for ``name`` or defaults."""

        return self.languages.get(name, LanguageSettings())


class AppConfig(BaseModel):
    """Root configuration for the :mod:`synindex` application."""

    log_level: str = Field(
        default="INFO",
        description="Default logging level for the application runtime.",
    )
    quiet: bool = Field(
        default=False,
        description="Suppress the feature summary printed by commands.",
    )
    highlight: HighlightSettings = Field(
        default_factory=HighlightSettings,
        description="Highlight pipeline settings.",
    )

    model_config = {
        "str_strip_whitespace": True,
        "validate_assignment": True,
    }

    @model_validator(mode="after")
    def _post_process(self) -> "AppConfig":
        object.__setattr__(self, "log_level", self.log_level.upper())
        return self


def read_packaged_defaults_text() -> str:
    """Return the raw packaged defaults TOML content.

    Example:
        >>> read_packaged_defaults_text().startswith("#")
        True
    """

    return get_resource(DEFAULTS_RESOURCE_NAME).read_text(encoding="utf-8")


def load_packaged_defaults() -> dict[str, Any]:
    """Load the packaged defaults as a plain dictionary.

    Example:
        >>> load_packaged_defaults()["log_level"]
        'INFO'
    """

    return tomllib.loads(read_packaged_defaults_text())


def _deep_merge(
    base: Mapping[str, Any],
    overlay: Mapping[str, Any],
) -> dict[str, Any]:
    """Recursively merge ``overlay`` into ``base`` returning a new dict."""

    merged: dict[str, Any] = dict(base)
    for key, value in overlay.items():
        if (
            key in merged
            and isinstance(merged[key], MappingABC)
            and isinstance(value, MappingABC)
        ):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _coerce_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    normalized = str(value).strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off", ""}:
        return False
    raise ValueError(f"Unsupported boolean value: {value!r}")


def env_overrides(environ: Mapping[str, str]) -> dict[str, Any]:
    """Translate ``SYNINDEX_*`` environment variables into a config layer.

    Example:
        >>> env_overrides({"SYNINDEX_QUIET": "true"})
        {'quiet': True}
    """

    layer: dict[str, Any] = {}
    level = environ.get("SYNINDEX_LOG_LEVEL")
    if level:
        layer["log_level"] = level
    quiet = environ.get("SYNINDEX_QUIET")
    if quiet is not None:
        layer["quiet"] = _coerce_bool(quiet)
    policy = environ.get("SYNINDEX_POLICY")
    if policy:
        layer["highlight"] = {"policy": policy}
    return layer


def load_config(
    *,
    defaults: Mapping[str, Any],
    user_config: Mapping[str, Any] | None = None,
    env_config: Mapping[str, Any] | None = None,
    cli_overrides: Mapping[str, Any] | None = None,
) -> AppConfig:
    """Load configuration according to the precedence stack.

    Args:
        defaults: Packaged defaults shipped with the application.
        user_config: Parsed user ``synindex.toml`` content.
        env_config: Settings derived from environment variables.
        cli_overrides: Settings supplied via CLI flags.

    Returns:
        A validated :class:`AppConfig` instance.
    """

    stack = dict(defaults)
    for layer in (user_config, env_config, cli_overrides):
        if layer:
            stack = _deep_merge(stack, layer)
    return AppConfig(**stack)


def render_user_config(
    config: AppConfig,
    *,
    include_defaults: bool = True,
) -> str:
    """Render a ``synindex.toml`` template for users to customize."""

    document = tomlkit.document()

    if include_defaults:
        document.add(tomlkit.comment("Generated by synindex init"))
        document.add(
            tomlkit.comment(
                "Precedence: CLI flags > env vars > synindex.toml > defaults"
            )
        )
        document.add(tomlkit.comment("Environment overrides:"))
        document.add(tomlkit.comment("  SYNINDEX_LOG_LEVEL=info"))
        document.add(tomlkit.comment("  SYNINDEX_QUIET=true"))
        document.add(tomlkit.comment("  SYNINDEX_POLICY=innermost"))
        document.add(tomlkit.nl())

    document["log_level"] = config.log_level
    document["quiet"] = config.quiet

    highlight_table = tomlkit.table()
    highlight_table["policy"] = config.highlight.policy.value

    languages_table = tomlkit.table(is_super_table=True)
    for name in sorted(config.highlight.languages):
        settings = config.highlight.languages[name]
        entry = tomlkit.table()
        entry["enabled"] = settings.enabled
        if settings.extensions:
            entry["extensions"] = list(settings.extensions)
        languages_table.add(name, entry)
    highlight_table.add("languages", languages_table)
    document["highlight"] = highlight_table

    return tomlkit.dumps(document)


__all__ = [
    "AppConfig",
    "DEFAULTS_RESOURCE_NAME",
    "EmissionPolicy",
    "HighlightSettings",
    "LanguageSettings",
    "env_overrides",
    "load_config",
    "load_packaged_defaults",
    "read_packaged_defaults_text",
    "render_user_config",
]
