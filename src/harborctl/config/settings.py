"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``HARBORCTL_*`` prefix
  3. TOML file    — ``harbor.toml`` discovered via walk-up
  4. Code defaults — baked into the section models

The persisted ``HARBOR_*`` service configuration (``.env``) is a separate
store; see :mod:`harborctl.infrastructure.store`.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from harborctl.config.discovery import locate_config
from harborctl.config.models import ComposeConfig, StoreConfig, TunnelConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``harbor.toml`` file discovered via walk-up."""

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
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class HarborSettings(BaseSettings):
    """Unified settings for the harbor CLI.

    Attributes:
        harbor_home: Directory holding the compose layers and the ``.env``
            store (parent of ``harbor.toml``, or CWD if no config found).
        config_path: The ``harbor.toml`` in effect, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "HARBORCTL_",
        "env_nested_delimiter": "__",
    }

    harbor_home: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    compose: ComposeConfig = Field(default_factory=ComposeConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    tunnel: TunnelConfig = Field(default_factory=TunnelConfig)

    @property
    def env_path(self) -> Path:
        return self.harbor_home / self.store.env_file

    @property
    def defaults_path(self) -> Path:
        return self.harbor_home / self.store.defaults_file

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
        harbor_home: Path | None = None,
        **cli_flags: Any,
    ) -> HarborSettings:
        """Construct settings from a CLI invocation.

        Discovers ``harbor.toml`` via walk-up from *harbor_home* (or CWD),
        or uses the explicit *config_path*. The harbor home defaults to
        the config file's directory.
        """
        toml_path = locate_config(config_path, harbor_home)

        resolved_home = harbor_home
        if resolved_home is None:
            resolved_home = toml_path.parent if toml_path else Path.cwd()

        _tls.toml_path = toml_path
        try:
            return cls(
                harbor_home=resolved_home,
                config_path=toml_path,
                **cli_flags,
            )
        finally:
            _tls.toml_path = None
