"""Schema used by CLI tests through ``--schema path/to/demo_schema.py:DEMO``."""

from rangeconf.domain.ranges import (
    boolean_range,
    integer_between_range,
    one_of_range,
    sequence_of_range,
    string_range,
)
from rangeconf.domain.schema import Section, Setting, schema

DEMO = schema(
    "Demo",
    Setting("port", "Listen port", integer_between_range(1, 65535, 8080)),
    Setting("debug", "Debug mode", boolean_range(False), inherit=True),
    Setting("mode", "Run mode", one_of_range(["dev", "prod"], "dev")),
    Section(
        "db",
        schema(
            "Database",
            Setting("host", "Database host", string_range("")),
            Setting("debug", "Debug queries", boolean_range(False)),
            Setting("replicas", "Replica hosts", sequence_of_range(string_range())),
        ),
    ),
)
