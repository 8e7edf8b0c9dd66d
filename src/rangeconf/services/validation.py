"""ValidationService — validate, default, and diff configuration files.

Wraps the domain engine for the CLI.  Sources are either paths to
TOML/YAML files or already-parsed maps; several sources are merged left
to right before profiles are applied.  Fatal domain errors and load
failures become failed ServiceResults instead of propagating.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import Any

from rangeconf.config.discovery import ConfigLoadError, load_raw_config
from rangeconf.domain.configuration import (
    Configuration,
    diff_configurations,
    reduce_scalar_settings,
)
from rangeconf.domain.errors import ConfigFatalError
from rangeconf.domain.merge import PROFILES_KEY, apply_profiles, merge_config_maps
from rangeconf.domain.normalize import normalize_and_check
from rangeconf.domain.ranges import Range, RangeError, format_path
from rangeconf.domain.schema import Schema
from rangeconf.services.result import ServiceError, ServiceResult
from rangeconf.services.telemetry import trace_span, traced

logger = logging.getLogger(__name__)

Source = Path | Mapping[str, Any]

LOAD_ERROR = "LOAD_ERROR"


def to_plain(value: Any) -> Any:
    """Convert completed values into JSON-friendly structures."""
    if isinstance(value, Mapping):
        return {str(k): to_plain(v) for k, v in value.items()}
    if isinstance(value, (set, frozenset)):
        return sorted((to_plain(v) for v in value), key=repr)
    if isinstance(value, (list, tuple)):
        return [to_plain(v) for v in value]
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return repr(value)


class _Failure(Exception):
    def __init__(self, error: ServiceError) -> None:
        super().__init__(error.message)
        self.error = error
        self.code = error.code


class ValidationService:
    """Validation operations against one schema."""

    def __init__(self, schema: Schema) -> None:
        self._schema = schema

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @traced
    def validate(self, sources: Sequence[Source], profiles: Iterable[str] = ()) -> ServiceResult:
        """Merge, profile, and validate ``sources``."""
        profiles = list(profiles)
        warnings: list[str] = []
        try:
            config, resolved = self._configure(sources, profiles, warnings)
        except _Failure as exc:
            return ServiceResult.failure("validate", exc.error)

        with trace_span("count_leaves") as span:
            count = reduce_scalar_settings(self._schema, _count_leaf, 0, resolved)
            if span:
                span.annotate("leaves", count)

        return ServiceResult(
            ok=True,
            op="validate",
            data={
                "schema": self._schema.description,
                "profiles": profiles,
                "leaves": count,
                "config": to_plain(config.as_dict()),
            },
            warnings=warnings,
        )

    @traced
    def defaults(self) -> ServiceResult:
        """The configuration an empty input normalizes to."""
        try:
            config, _ = self._configure([{}], [], [])
        except _Failure as exc:
            return ServiceResult.failure("defaults", exc.error)
        return ServiceResult(
            ok=True,
            op="defaults",
            data={"schema": self._schema.description, "config": to_plain(config.as_dict())},
        )

    @traced
    def diff(
        self,
        source_a: Source,
        source_b: Source,
        profiles: Iterable[str] = (),
    ) -> ServiceResult:
        """Setting-level differences between two validated configurations."""
        profiles = list(profiles)
        warnings: list[str] = []
        try:
            config_a, _ = self._configure([source_a], profiles, warnings)
            config_b, _ = self._configure([source_b], profiles, warnings)
        except _Failure as exc:
            return ServiceResult.failure("diff", exc.error)

        with trace_span("diff_configurations"):
            changes = [
                {"path": format_path(d.path), "old": to_plain(d.old), "new": to_plain(d.new)}
                for d in diff_configurations(self._schema, config_a, config_b)
            ]
        return ServiceResult(
            ok=True,
            op="diff",
            data={"changes": changes, "count": len(changes)},
            warnings=list(dict.fromkeys(warnings)),
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _load(self, source: Source) -> Mapping[str, Any]:
        if isinstance(source, Mapping):
            return source
        try:
            return load_raw_config(Path(source))
        except ConfigLoadError as exc:
            raise _Failure(
                ServiceError(code=LOAD_ERROR, message=str(exc), detail={"path": str(source)})
            ) from exc

    def _configure(
        self, sources: Sequence[Source], profiles: list[str], warnings: list[str]
    ) -> tuple[Configuration, dict[str, Any]]:
        """Build the configuration; also return the profile-resolved raw map.

        Profiles requested of sources that define none are ignored, and a
        note saying so is appended to ``warnings``.
        """
        with trace_span("load"):
            maps = [self._load(s) for s in sources]
        try:
            with trace_span("merge"):
                if not maps:
                    merged: Mapping[str, Any] = {}
                elif len(maps) == 1:
                    merged = maps[0]
                else:
                    merged = merge_config_maps(self._schema, *maps)
                if profiles and isinstance(merged, Mapping) and PROFILES_KEY not in merged:
                    warnings.append(
                        f"profiles {', '.join(profiles)} requested but no profiles are defined"
                    )
                resolved = apply_profiles(self._schema, merged, profiles)
            with trace_span("normalize"):
                result = normalize_and_check(self._schema, (), resolved)
        except ConfigFatalError as exc:
            raise _Failure(ServiceError.from_fatal(exc, to_plain)) from exc

        if isinstance(result, RangeError):
            logger.debug("Validation failed at %s", format_path(result.path))
            raise _Failure(ServiceError.from_range_error(result, to_plain))
        return Configuration(result, self._schema), resolved


def _count_leaf(_range: Range, _path: tuple[Any, ...], acc: int, _value: Any) -> int:
    return acc + 1
