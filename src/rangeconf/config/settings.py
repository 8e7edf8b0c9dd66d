"""Unified settings — CLI flags, env vars, and TOML settings in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``RANGECONF_*`` prefix
  3. TOML file    — ``rangeconf.toml`` discovered via walk-up
  4. Code defaults

A ``rangeconf.toml`` typically names the schema and default profiles::

    schema = "myapp.settings:SCHEMA"
    profiles = ["production"]
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from rangeconf.config.discovery import ConfigLoadError, find_settings_file


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``rangeconf.toml`` file discovered via walk-up."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise ConfigLoadError(msg) from exc
            if "schema" in data:
                data["schema_ref"] = data.pop("schema")
            self._data = data

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class RangeconfSettings(BaseSettings):
    """Settings for the rangeconf CLI.

    Attributes:
        schema_ref: ``"module:ATTR"`` or ``"file.py:ATTR"`` naming the schema.
        profiles: Profiles applied when a command names none.
        settings_path: The ``rangeconf.toml`` in effect, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "RANGECONF_",
        "extra": "ignore",
    }

    schema_ref: str | None = None
    profiles: list[str] = Field(default_factory=list)
    settings_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

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
        start: Path | None = None,
        **cli_flags: Any,
    ) -> RangeconfSettings:
        """Construct settings from a CLI invocation.

        Discovers ``rangeconf.toml`` via walk-up from *start* and merges
        CLI flags as highest-priority overrides.  Flags passed as None
        are treated as not given.
        """
        toml_path = find_settings_file(start)
        flags = {k: v for k, v in cli_flags.items() if v is not None}

        _tls.toml_path = toml_path
        try:
            return cls(settings_path=toml_path, **flags)
        finally:
            _tls.toml_path = None
