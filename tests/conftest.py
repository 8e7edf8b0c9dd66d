"""Shared pytest fixtures and test helpers for rangeconf tests."""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from rangeconf.domain.ranges import integer_between_range, string_range
from rangeconf.domain.schema import Schema, Section, Setting, schema
from rangeconf.services.telemetry import disable_telemetry

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore root logger state after each test (the CLI reconfigures it)."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    rc = logging.getLogger("rangeconf")
    rc_level = rc.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    rc.setLevel(rc_level)
    disable_telemetry()


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep a developer's rangeconf.toml and RANGECONF_* vars out of tests."""
    for name in ("RANGECONF_SETTINGS", "RANGECONF_SCHEMA_REF", "RANGECONF_PROFILES"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def demo_schema() -> Schema:
    """``port`` (1-65535, default 8080) and section ``db`` with ``host``."""
    return schema(
        "Demo",
        Setting("port", "Listen port", integer_between_range(1, 65535, 8080)),
        Section("db", schema("Database", Setting("host", "Database host", string_range("")))),
    )


@pytest.fixture
def demo_schema_ref() -> str:
    """``--schema`` reference to the demo schema loaded from a file."""
    return f"{FIXTURES / 'demo_schema.py'}:DEMO"
