"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``SOILDEPLOY_*`` prefix
  3. TOML file    — ``soildeploy.toml`` discovered via walk-up
  4. Code defaults — baked into the section models

Uses Pydantic Settings v2 with a custom :class:`TomlSettingsSource` that
reuses the ``find_config`` walk-up discovery from
:mod:`soildeploy.config.discovery`.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any, ClassVar

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from soildeploy.config.discovery import find_config
from soildeploy.config.models import (
    DockerConfig,
    LayoutConfig,
    StartupConfig,
    SummaryConfig,
)


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``soildeploy.toml`` file discovered via walk-up."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                import click

                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class DeploySettings(BaseSettings):
    """Unified settings for the soildeploy CLI.

    Stored on the :class:`~soildeploy.commands._context.AppContext` at the
    CLI root level and passed explicitly to every service.

    Attributes:
        project_dir: Directory holding ``docker-compose.yml`` and ``.env``
            (``--project-dir``, else parent of ``soildeploy.toml``, else CWD).
        config_path: Resolved ``soildeploy.toml``, or None.
        env_file: Stack configuration file, relative to *project_dir*.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "SOILDEPLOY_",
        "env_nested_delimiter": "__",
    }

    # --- Resolved paths ---
    project_dir: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None
    env_file: str = ".env"

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    docker: DockerConfig = Field(default_factory=DockerConfig)
    startup: StartupConfig = Field(default_factory=StartupConfig)
    summary: SummaryConfig = Field(default_factory=SummaryConfig)

    # Retained for type-checker visibility; not used at runtime.
    _toml_path: ClassVar[Path | None] = None

    @property
    def env_path(self) -> Path:
        return self.project_dir / self.env_file

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        project_dir: Path | None = None,
        **cli_flags: Any,
    ) -> DeploySettings:
        """Construct settings from CLI invocation.

        Discovers ``soildeploy.toml`` via walk-up from *project_dir* (or
        uses an explicit *config_path*), resolves the project directory,
        and merges CLI flags as highest-priority overrides. Flags passed
        as ``None`` are treated as unset.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(project_dir)

        resolved_dir = project_dir
        if resolved_dir is None:
            resolved_dir = toml_path.parent if toml_path else Path.cwd()

        overrides = {key: value for key, value in cli_flags.items() if value is not None}

        _tls.toml_path = toml_path
        try:
            return cls(
                project_dir=resolved_dir,
                config_path=toml_path,
                **overrides,
            )
        finally:
            _tls.toml_path = None
