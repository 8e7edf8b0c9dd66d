"""Configuration — the validated, read-only result of normalization.

A :class:`Configuration` is only ever produced by
:func:`make_configuration`.  It owns a private deep copy of its map, so
nothing the caller holds can change it afterwards.
"""

from __future__ import annotations

import copy
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import Any, NamedTuple, NoReturn

from rangeconf.domain.errors import FatalKind, report
from rangeconf.domain.normalize import normalize_and_check, schema_range
from rangeconf.domain.ranges import FoldFn, Path, RangeError, format_path
from rangeconf.domain.schema import Schema


class Configuration:
    """Immutable pair of a fully normalized map and its schema."""

    __slots__ = ("_schema", "_values")

    def __init__(self, values: Mapping[str, Any], schema: Schema) -> None:
        object.__setattr__(self, "_values", copy.deepcopy(dict(values)))
        object.__setattr__(self, "_schema", schema)

    @property
    def schema(self) -> Schema:
        return self._schema

    @property
    def values(self) -> Mapping[str, Any]:
        """Read-only view of the top level of the normalized map."""
        return MappingProxyType(self._values)

    def as_dict(self) -> dict[str, Any]:
        return copy.deepcopy(self._values)

    def access(self, setting: str, *sections: str) -> Any:
        return access(self, setting, *sections)

    def section(self, *sections: str) -> dict[str, Any]:
        return access_section(self, *sections)

    def subconfig(self, *sections: str) -> Configuration:
        return section_subconfig(self, *sections)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Configuration is immutable")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Configuration):
            return NotImplemented
        return self._schema is other._schema and self._values == other._values

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Configuration({self._schema.description!r}, {self._values!r})"


def make_configuration(
    schema: Schema,
    profile_names: Iterable[str],
    config_map: Mapping[str, Any],
) -> Configuration:
    """Normalize ``config_map`` and wrap the result.

    A validation failure is fatal: the report carries the path, the
    offending value and the description of the rejecting range.
    """
    result = normalize_and_check(schema, profile_names, config_map)
    if isinstance(result, RangeError):
        report(
            FatalKind.INVALID_CONFIGURATION,
            "make_configuration",
            result.describe(),
            path=list(result.path),
            value=result.value,
            range=result.range.description if result.range is not None else None,
        )
    return Configuration(result, schema)


# ---------------------------------------------------------------------------
# Access
# ---------------------------------------------------------------------------


def _unknown(source: str, walked: list[str]) -> NoReturn:
    report(
        FatalKind.UNKNOWN_ACCESS_PATH,
        source,
        f"no such configuration path: {format_path(walked)}",
        path=walked,
    )


def _walk(
    config: Configuration, source: str, sections: Path
) -> tuple[Mapping[str, Any], Schema]:
    """Descend through ``sections``, each of which must be declared a section."""
    value: Any = config._values
    current = config.schema
    walked: list[str] = []
    for key in sections:
        walked.append(key)
        section = current.section(key)
        if section is None or not isinstance(value, Mapping) or key not in value:
            _unknown(source, walked)
        value = value[key]
        current = section.schema
    return value, current


def access(config: Configuration, setting: str, *sections: str) -> Any:
    """Value of ``setting`` inside the nested ``sections`` (outermost first)."""
    value, current = _walk(config, "access", sections)
    if setting not in current.settings_by_key or setting not in value:
        _unknown("access", [*sections, setting])
    return copy.deepcopy(value[setting])


def access_section(config: Configuration, *sections: str) -> dict[str, Any]:
    """Normalized map of the nested section ``sections`` (outermost first)."""
    value, _ = _walk(config, "access_section", sections)
    return copy.deepcopy(dict(value))


def section_subconfig(config: Configuration, *sections: str) -> Configuration:
    """The nested section as a configuration of its own schema."""
    value, current = _walk(config, "section_subconfig", sections)
    return Configuration(value, current)


# ---------------------------------------------------------------------------
# Diff and fold
# ---------------------------------------------------------------------------


class SettingDiff(NamedTuple):
    path: Path
    old: Any
    new: Any


def diff_configurations(
    schema: Schema,
    config_a: Configuration,
    config_b: Configuration,
) -> Iterator[SettingDiff]:
    """Yield one :class:`SettingDiff` per setting whose values differ.

    Only settings are compared; a section contributes the differences of
    the settings nested in it, never an entry of its own.
    """
    return _diff_level(schema, (), config_a._values, config_b._values)


def _diff_level(
    schema: Schema,
    path: Path,
    a: Mapping[str, Any],
    b: Mapping[str, Any],
) -> Iterator[SettingDiff]:
    for setting in schema.settings:
        old = a.get(setting.key)
        new = b.get(setting.key)
        if old != new:
            yield SettingDiff((*path, setting.key), old, new)
    for section in schema.sections:
        yield from _diff_level(
            section.schema,
            (*path, section.key),
            a.get(section.key) or {},
            b.get(section.key) or {},
        )


def reduce_scalar_settings(
    schema: Schema,
    f: FoldFn,
    init: Any,
    config_map: Mapping[str, Any],
) -> Any:
    """Fold ``f(range, path, acc, value)`` over every scalar leaf of ``config_map``.

    Defaults are filled in first, so every declared setting is visited.
    """
    return schema_range(schema).fold((), f, init, config_map)
