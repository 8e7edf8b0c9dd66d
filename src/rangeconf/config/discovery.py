"""Settings-file discovery, raw config loading, and schema resolution.

Walk-up finder locates rangeconf.toml, similar to how git finds .git/.
Supports the RANGECONF_SETTINGS env var override.

Configuration files to be validated are parsed here into plain nested
maps (TOML or YAML, by suffix); everything after parsing belongs to the
domain engine.
"""

from __future__ import annotations

import importlib
import importlib.util
import os
import sys
import tomllib
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from rangeconf.domain.schema import Schema

SETTINGS_FILENAME = "rangeconf.toml"
SETTINGS_ENV_VAR = "RANGECONF_SETTINGS"

_YAML_SUFFIXES = frozenset({".yaml", ".yml"})


class ConfigLoadError(ValueError):
    """Raised when a file or schema reference cannot be loaded."""


def find_settings_file(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for rangeconf.toml.

    Returns the path to the settings file, or None if not found.
    Checks RANGECONF_SETTINGS env var first.
    """
    env_path = os.environ.get(SETTINGS_ENV_VAR)
    if env_path:
        p = Path(env_path)
        if p.is_file():
            return p
        return None

    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / SETTINGS_FILENAME
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def load_raw_config(path: Path) -> dict[str, Any]:
    """Parse a TOML or YAML file into a nested map.

    An empty YAML document loads as ``{}``.  The root must be a map.
    """
    if not path.is_file():
        raise ConfigLoadError(f"config file not found: {path}")

    raw = path.read_text(encoding="utf-8")
    if path.suffix.lower() in _YAML_SUFFIXES:
        try:
            data = YAML(typ="safe", pure=True).load(raw)
        except YAMLError as exc:
            raise ConfigLoadError(f"Invalid YAML in {path}: {exc}") from exc
        if data is None:
            data = {}
    else:
        try:
            data = tomllib.loads(raw)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigLoadError(f"Invalid TOML in {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigLoadError(f"config root must be a map: {path}")
    return data


def resolve_schema(ref: str) -> Schema:
    """Import the schema named by *ref*.

    *ref* is ``"package.module:ATTR"`` or ``"path/to/file.py:ATTR"``.
    """
    target, sep, attr = ref.rpartition(":")
    if not sep or not target or not attr:
        raise ConfigLoadError(f"schema reference must look like 'module:ATTR', got {ref!r}")

    if target.endswith(".py"):
        module = _load_module_from_file(Path(target))
    else:
        try:
            module = importlib.import_module(target)
        except ImportError as exc:
            raise ConfigLoadError(f"cannot import schema module {target!r}: {exc}") from exc

    obj = getattr(module, attr, None)
    if not isinstance(obj, Schema):
        raise ConfigLoadError(f"{ref!r} does not name a Schema")
    return obj


def _load_module_from_file(py_file: Path) -> Any:
    if not py_file.is_file():
        raise ConfigLoadError(f"schema file not found: {py_file}")
    module_name = f"rangeconf_schema_{py_file.stem}"
    spec = importlib.util.spec_from_file_location(module_name, py_file)
    if spec is None or spec.loader is None:
        raise ConfigLoadError(f"could not create module spec for {py_file}")
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        sys.modules.pop(module_name, None)
        raise ConfigLoadError(f"failed to load schema file {py_file}: {exc}") from exc
    return module
