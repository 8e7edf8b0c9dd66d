"""Tests for the schema model and the schema constructor."""

from __future__ import annotations

import pytest

from rangeconf.domain.errors import ConfigFatalError, FatalKind
from rangeconf.domain.ranges import integer_range, string_range
from rangeconf.domain.schema import Schema, Section, Setting, schema


class TestSchemaConstructor:
    def test_partitions_settings_and_sections(self, demo_schema: Schema) -> None:
        assert [s.key for s in demo_schema.settings] == ["port"]
        assert [s.key for s in demo_schema.sections] == ["db"]

    def test_preserves_declaration_order(self) -> None:
        s = schema(
            "ordered",
            Setting("b", "B", integer_range()),
            Section("z", schema("Z")),
            Setting("a", "A", integer_range()),
        )
        assert [x.key for x in s.settings] == ["b", "a"]
        assert list(s.keys()) == ["b", "a", "z"]

    def test_lookup_tables(self, demo_schema: Schema) -> None:
        assert demo_schema.setting("port") is demo_schema.settings[0]
        assert demo_schema.section("db") is demo_schema.sections[0]
        assert demo_schema.setting("db") is None
        assert demo_schema.section("port") is None

    def test_contains(self, demo_schema: Schema) -> None:
        assert "port" in demo_schema
        assert "db" in demo_schema
        assert "nope" not in demo_schema

    def test_empty_schema(self) -> None:
        s = schema("empty")
        assert s.settings == ()
        assert s.sections == ()

    def test_inherit_flags_default_false(self) -> None:
        setting = Setting("x", "X", string_range())
        assert setting.inherit is False
        assert Section("s", schema("S")).inherit is False


class TestSchemaErrors:
    def test_duplicate_setting_is_fatal(self) -> None:
        with pytest.raises(ConfigFatalError) as excinfo:
            schema(
                "dup",
                Setting("port", "one", integer_range()),
                Setting("port", "two", integer_range()),
            )
        assert excinfo.value.kind == FatalKind.DUPLICATE_SCHEMA_KEY
        assert excinfo.value.detail["key"] == "port"

    def test_setting_section_collision_is_fatal(self) -> None:
        with pytest.raises(ConfigFatalError) as excinfo:
            schema("dup", Setting("db", "D", string_range()), Section("db", schema("DB")))
        assert excinfo.value.kind == FatalKind.DUPLICATE_SCHEMA_KEY

    def test_invalid_element_is_fatal(self) -> None:
        with pytest.raises(ConfigFatalError) as excinfo:
            schema("bad", "port")  # type: ignore[arg-type]
        assert excinfo.value.kind == FatalKind.INVALID_SCHEMA_ELEMENT


class TestImmutability:
    def test_schema_is_frozen(self, demo_schema: Schema) -> None:
        with pytest.raises(AttributeError):
            demo_schema.description = "changed"  # type: ignore[misc]

    def test_lookup_tables_are_read_only(self, demo_schema: Schema) -> None:
        with pytest.raises(TypeError):
            demo_schema.settings_by_key["x"] = None  # type: ignore[index]
