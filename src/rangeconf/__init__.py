"""rangeconf — schema-driven configuration validation and composition.

Describe admissible values with ranges, group them into a schema of
settings and sections, then normalize raw nested maps against it::

    from rangeconf import Section, Setting, integer_between_range, make_configuration
    from rangeconf import schema, string_range

    DEMO = schema(
        "demo",
        Setting("port", "Listen port", integer_between_range(1, 65535, 8080)),
        Section("db", schema("database", Setting("host", "Host", string_range(""))))
    )
    config = make_configuration(DEMO, [], {"port": 9090})
    config.access("host", "db")
"""

from __future__ import annotations

from rangeconf.domain.configuration import (
    Configuration,
    SettingDiff,
    access,
    access_section,
    diff_configurations,
    make_configuration,
    reduce_scalar_settings,
    section_subconfig,
)
from rangeconf.domain.errors import ConfigFatalError, FatalKind, FatalReport
from rangeconf.domain.merge import (
    PROFILES_KEY,
    apply_profiles,
    merge_config_maps,
    merge_sans_profiles,
)
from rangeconf.domain.normalize import normalize_and_check, schema_range
from rangeconf.domain.ranges import (
    Range,
    RangeError,
    ScalarRange,
    any_of_range,
    any_value_range,
    boolean_range,
    integer_between_range,
    integer_range,
    map_of_range,
    max_string_length_range,
    natural_range,
    non_nil_range,
    nonempty_string_range,
    number_range,
    one_of_range,
    optional_default_range,
    optional_range,
    predicate_range,
    range_map,
    sequence_of_range,
    set_of_range,
    some_of_range,
    string_range,
    tuple_of_range,
)
from rangeconf.domain.schema import Schema, Section, Setting, schema

__version__ = "0.1.0"

__all__ = [
    "PROFILES_KEY",
    "ConfigFatalError",
    "Configuration",
    "FatalKind",
    "FatalReport",
    "Range",
    "RangeError",
    "ScalarRange",
    "Schema",
    "Section",
    "Setting",
    "SettingDiff",
    "access",
    "access_section",
    "any_of_range",
    "any_value_range",
    "apply_profiles",
    "boolean_range",
    "diff_configurations",
    "integer_between_range",
    "integer_range",
    "make_configuration",
    "map_of_range",
    "max_string_length_range",
    "merge_config_maps",
    "merge_sans_profiles",
    "natural_range",
    "non_nil_range",
    "nonempty_string_range",
    "normalize_and_check",
    "number_range",
    "one_of_range",
    "optional_default_range",
    "optional_range",
    "predicate_range",
    "range_map",
    "reduce_scalar_settings",
    "schema",
    "schema_range",
    "section_subconfig",
    "sequence_of_range",
    "set_of_range",
    "some_of_range",
    "string_range",
    "tuple_of_range",
]
