"""Command: validate configuration files against the schema."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from rangeconf.commands._base import CONFIG_FILE, RangeconfCommand, profile_option

if TYPE_CHECKING:
    from rangeconf.commands._context import AppContext


@click.command(
    cls=RangeconfCommand,
    examples="""\
  rangeconf -s myapp.settings:SCHEMA validate app.toml
  rangeconf validate base.toml local.yaml
  rangeconf validate app.toml -p production
  rangeconf --json validate app.toml -p production -p eu""",
)
@click.argument(
    "files",
    nargs=-1,
    required=True,
    type=CONFIG_FILE,
)
@profile_option
@click.pass_obj
def validate(app: AppContext, files: tuple[Path, ...], profiles: tuple[str, ...]) -> None:
    """Validate FILES, merged left to right, and print the completed configuration."""
    from rangeconf.services.validation import ValidationService

    svc = ValidationService(app.schema)
    app.emit(svc.validate(list(files), app.profiles(profiles)))
