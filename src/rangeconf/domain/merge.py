"""Raw-map composition before validation — merging and profile overlay.

Merging works on raw, unvalidated maps, guided by the schema only to tell
settings (replaced wholesale) from sections (merged recursively).  Keys
the schema does not know, non-map inputs, and undefined profiles are
programmer errors and go to the fatal tier.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from rangeconf.domain.errors import FatalKind, report
from rangeconf.domain.ranges import Path, format_path
from rangeconf.domain.schema import Schema

logger = logging.getLogger(__name__)

PROFILES_KEY = "profiles"


def _require_map(source: str, path: Path, value: Any) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        report(
            FatalKind.NOT_A_MAP,
            source,
            f"expected a map at {format_path(path)}, got {type(value).__name__}",
            path=list(path),
            value=value,
        )
    return value


def merge_sans_profiles(
    schema: Schema,
    path: Path,
    c1: Mapping[str, Any],
    c2: Mapping[str, Any],
) -> dict[str, Any]:
    """Deep-merge two raw maps under ``schema``; ``c2`` wins.

    For a setting, ``c2``'s value is taken whenever ``c2`` has the key,
    even if that value is ``None``.  Sections merge recursively, a missing
    side standing in as ``{}``.
    """
    path = tuple(path)
    c1 = _require_map("merge_sans_profiles", path, c1)
    c2 = _require_map("merge_sans_profiles", path, c2)

    out: dict[str, Any] = {}
    for key in (*c1.keys(), *(k for k in c2.keys() if k not in c1)):
        if key in schema.settings_by_key:
            out[key] = c2[key] if key in c2 else c1[key]
        elif (section := schema.section(key)) is not None:
            out[key] = merge_sans_profiles(
                section.schema,
                (*path, key),
                c1.get(key, {}),
                c2.get(key, {}),
            )
        else:
            report(
                FatalKind.UNKNOWN_SCHEMA_KEY,
                "merge_sans_profiles",
                f"key {format_path((*path, key))} is neither a setting nor a section "
                f"of {schema.description!r}",
                path=[*path, key],
            )
    return out


def merge_config_maps(
    schema: Schema,
    c1: Mapping[str, Any],
    c2: Mapping[str, Any],
    *more: Mapping[str, Any],
) -> dict[str, Any]:
    """Merge two or more raw top-level maps, later maps winning.

    Profile definitions under ``profiles`` are merged by plain key
    overwrite and are not checked against the schema here.

    Examples:
        >>> from rangeconf.domain.schema import Setting, schema
        >>> from rangeconf.domain.ranges import integer_range
        >>> s = schema("demo", Setting("port", "Port", integer_range(80)))
        >>> merge_config_maps(s, {"port": 1}, {"profiles": {"dev": {"port": 2}}})
        {'port': 1, 'profiles': {'dev': {'port': 2}}}
    """
    merged = _merge_two(schema, c1, c2)
    for c in more:
        merged = _merge_two(schema, merged, c)
    return merged


def _merge_two(schema: Schema, c1: Mapping[str, Any], c2: Mapping[str, Any]) -> dict[str, Any]:
    c1 = _require_map("merge_config_maps", (), c1)
    c2 = _require_map("merge_config_maps", (), c2)
    base1 = {k: v for k, v in c1.items() if k != PROFILES_KEY}
    base2 = {k: v for k, v in c2.items() if k != PROFILES_KEY}
    out = merge_sans_profiles(schema, (), base1, base2)
    if PROFILES_KEY in c1 or PROFILES_KEY in c2:
        p1 = _require_map("merge_config_maps", (PROFILES_KEY,), c1.get(PROFILES_KEY) or {})
        p2 = _require_map("merge_config_maps", (PROFILES_KEY,), c2.get(PROFILES_KEY) or {})
        out[PROFILES_KEY] = {**p1, **p2}
    return out


def apply_profiles(
    schema: Schema,
    config_map: Mapping[str, Any],
    profile_names: Iterable[str],
) -> dict[str, Any]:
    """Strip ``profiles`` from ``config_map`` and overlay the named ones.

    Profiles are applied left to right, so later names override earlier
    ones and the base.  A map without ``profiles`` is returned as is and
    the names are ignored; otherwise naming an undefined profile is fatal.
    """
    config_map = _require_map("apply_profiles", (), config_map)
    if PROFILES_KEY not in config_map:
        logger.debug("No profiles defined; ignoring %s", list(profile_names))
        return dict(config_map)
    profiles = _require_map("apply_profiles", (PROFILES_KEY,), config_map.get(PROFILES_KEY) or {})
    base = {k: v for k, v in config_map.items() if k != PROFILES_KEY}

    names = list(profile_names)
    overlays: list[Mapping[str, Any]] = []
    for name in names:
        if name not in profiles:
            report(
                FatalKind.MISSING_PROFILE,
                "apply_profiles",
                f"profile {name!r} is not defined",
                profile=name,
                available=sorted(profiles),
            )
        overlays.append(profiles[name])

    result = base
    for name, overlay in zip(names, overlays):
        logger.debug("Applying profile %s", name)
        result = merge_sans_profiles(schema, (), result, overlay)
    return result
