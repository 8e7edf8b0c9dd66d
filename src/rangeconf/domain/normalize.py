"""Normalization — validate a raw map against a schema and complete it.

One recursive pass over the schema tree turns a sparse raw map into a
fully defaulted one.  Order at each level:

1. profiles are overlaid (top level only),
2. settings present in the input are completed, in input order,
3. keys unknown to the schema are rejected,
4. absent settings are filled from inherited values or their defaults,
5. sections present in the input are normalized recursively,
6. absent sections are filled from inherited values or their defaults.

The first :class:`RangeError` anywhere aborts the pass and is returned
unchanged; no partial result is ever produced.

Inheritance flows outer to inner: an inherit-marked setting contributes
its raw value, an inherit-marked section its completed value, as the
default for same-named entries in every nested section that does not
set them itself.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from rangeconf.domain.errors import FatalKind, report
from rangeconf.domain.merge import apply_profiles
from rangeconf.domain.ranges import FoldFn, Path, Range, RangeError
from rangeconf.domain.schema import Schema

logger = logging.getLogger(__name__)


def normalize_and_check(
    schema: Schema,
    profile_names: Iterable[str],
    config_map: Mapping[str, Any],
    inherited: Mapping[str, Any] | None = None,
    path: Path = (),
) -> dict[str, Any] | RangeError:
    """Return the completed map for ``config_map``, or the first RangeError.

    Args:
        schema: The schema to check against.
        profile_names: Profiles to overlay, applied left to right.
        config_map: Raw configuration data; never mutated.
        inherited: Values inherited from enclosing levels.
        path: Location of ``config_map`` within the whole configuration.
    """
    if not isinstance(config_map, Mapping):
        report(
            FatalKind.NOT_A_MAP,
            "normalize_and_check",
            f"configuration must be a map, got {type(config_map).__name__}",
            value=config_map,
        )
    resolved = apply_profiles(schema, config_map, profile_names)
    logger.debug("Normalizing %s", schema.description)
    return _normalize(schema, resolved, dict(inherited or {}), tuple(path))


def _normalize(
    schema: Schema,
    config_map: Mapping[str, Any],
    inherited: dict[str, Any],
    path: Path,
) -> dict[str, Any] | RangeError:
    inherited = dict(inherited)
    result: dict[str, Any] = {}

    for key, value in config_map.items():
        setting = schema.setting(key)
        if setting is not None:
            completed = setting.range.complete((*path, key), value)
            if isinstance(completed, RangeError):
                return completed
            result[key] = completed
            if setting.inherit:
                inherited[key] = value
        elif key not in schema.sections_by_key:
            return RangeError(None, (*path, key), value)

    for setting in schema.settings:
        if setting.key in result:
            continue
        slot = (*path, setting.key)
        completed = setting.range.complete(slot, inherited.get(setting.key))
        if isinstance(completed, RangeError):
            return completed
        result[setting.key] = completed

    for key, value in config_map.items():
        section = schema.section(key)
        if section is None:
            continue
        slot = (*path, key)
        if value is None:
            value = {}
        elif not isinstance(value, Mapping):
            return RangeError(None, slot, value)
        completed = _normalize(section.schema, value, inherited, slot)
        if isinstance(completed, RangeError):
            return completed
        result[key] = completed
        if section.inherit:
            inherited[key] = completed

    for section in schema.sections:
        if section.key in result:
            continue
        if section.key in inherited:
            result[section.key] = inherited[section.key]
            continue
        completed = _normalize(section.schema, {}, inherited, (*path, section.key))
        if isinstance(completed, RangeError):
            return completed
        result[section.key] = completed

    return result


# ---------------------------------------------------------------------------
# Whole-schema range
# ---------------------------------------------------------------------------


class SchemaRange(Range):
    """A schema viewed as a range over maps.

    Completion is normalization without profiles.  Folding visits the
    settings of each level before its sections, in the order the
    normalized map holds them.
    """

    def __init__(self, schema: Schema) -> None:
        super().__init__(schema.description)
        self.schema = schema

    def complete(self, path: Path, value: Any) -> Any:
        if value is None:
            value = {}
        if not isinstance(value, Mapping):
            return self.error(path, value)
        return _normalize(self.schema, value, {}, tuple(path))

    def fold(self, path: Path, f: FoldFn, init: Any, value: Any) -> Any:
        return _fold_map(self.schema, tuple(path), f, init, self.completed(path, value))


def _fold_map(schema: Schema, path: Path, f: FoldFn, init: Any, completed: Mapping[str, Any]) -> Any:
    acc = init
    for key, value in completed.items():
        setting = schema.setting(key)
        if setting is not None:
            acc = setting.range.fold((*path, key), f, acc, value)
    for key, value in completed.items():
        section = schema.section(key)
        if section is not None:
            acc = _fold_map(section.schema, (*path, key), f, acc, value)
    return acc


def schema_range(schema: Schema) -> Range:
    """Wrap ``schema`` as a :class:`Range`, e.g. for sequences of sub-configurations."""
    return SchemaRange(schema)
