"""Tests for settings discovery, raw config loading, and schema resolution."""

from pathlib import Path

import pytest

from rangeconf.config.discovery import (
    ConfigLoadError,
    find_settings_file,
    load_raw_config,
    resolve_schema,
)
from rangeconf.domain.schema import Schema


class TestFindSettingsFile:
    def test_finds_in_current_dir(self, tmp_path: Path) -> None:
        toml = tmp_path / "rangeconf.toml"
        toml.write_text("")
        assert find_settings_file(tmp_path) == toml

    def test_walks_up(self, tmp_path: Path) -> None:
        toml = tmp_path / "rangeconf.toml"
        toml.write_text("")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_settings_file(nested) == toml

    def test_not_found(self, tmp_path: Path) -> None:
        assert find_settings_file(tmp_path) is None

    def test_env_var_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        custom = tmp_path / "custom.toml"
        custom.write_text("")
        monkeypatch.setenv("RANGECONF_SETTINGS", str(custom))
        assert find_settings_file(tmp_path / "elsewhere") == custom

    def test_env_var_missing_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "rangeconf.toml").write_text("")
        monkeypatch.setenv("RANGECONF_SETTINGS", str(tmp_path / "nope.toml"))
        assert find_settings_file(tmp_path) is None


class TestLoadRawConfig:
    def test_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "app.toml"
        path.write_text('port = 1\n[db]\nhost = "h"\n')
        assert load_raw_config(path) == {"port": 1, "db": {"host": "h"}}

    def test_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "app.yml"
        path.write_text("port: 1\nprofiles:\n  prod:\n    port: 443\n")
        assert load_raw_config(path) == {"port": 1, "profiles": {"prod": {"port": 443}}}

    def test_yaml_null_value_kept(self, tmp_path: Path) -> None:
        path = tmp_path / "app.yaml"
        path.write_text("db:\n")
        assert load_raw_config(path) == {"db": None}

    def test_empty_yaml_is_empty_map(self, tmp_path: Path) -> None:
        path = tmp_path / "app.yaml"
        path.write_text("")
        assert load_raw_config(path) == {}

    def test_yaml_root_must_be_map(self, tmp_path: Path) -> None:
        path = tmp_path / "app.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ConfigLoadError, match="must be a map"):
            load_raw_config(path)

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "app.yaml"
        path.write_text("a: [1, 2\n")
        with pytest.raises(ConfigLoadError, match="Invalid YAML"):
            load_raw_config(path)

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "app.toml"
        path.write_text("port = = 1\n")
        with pytest.raises(ConfigLoadError, match="Invalid TOML"):
            load_raw_config(path)

    def test_missing(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigLoadError, match="not found"):
            load_raw_config(tmp_path / "nope.toml")


class TestResolveSchema:
    def test_from_file(self, demo_schema_ref: str) -> None:
        schema = resolve_schema(demo_schema_ref)
        assert isinstance(schema, Schema)
        assert schema.description == "Demo"

    def test_from_module(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "my_schemas.py").write_text(
            "from rangeconf import schema\nS = schema('Mod')\n"
        )
        monkeypatch.syspath_prepend(str(tmp_path))
        assert resolve_schema("my_schemas:S").description == "Mod"

    def test_malformed_reference(self) -> None:
        with pytest.raises(ConfigLoadError, match="module:ATTR"):
            resolve_schema("no-colon")

    def test_missing_module(self) -> None:
        with pytest.raises(ConfigLoadError, match="cannot import"):
            resolve_schema("no_such_module_xyz:S")

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigLoadError, match="not found"):
            resolve_schema(f"{tmp_path / 'gone.py'}:S")

    def test_attribute_not_a_schema(self, tmp_path: Path) -> None:
        path = tmp_path / "not_schema.py"
        path.write_text("S = 42\n")
        with pytest.raises(ConfigLoadError, match="does not name a Schema"):
            resolve_schema(f"{path}:S")

    def test_broken_file(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.py"
        path.write_text("raise RuntimeError('boom')\n")
        with pytest.raises(ConfigLoadError, match="boom"):
            resolve_schema(f"{path}:S")
