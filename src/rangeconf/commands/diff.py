"""Command: compare two configurations setting by setting."""

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
  rangeconf diff old.toml new.toml
  rangeconf diff app.toml app.toml -p production
  rangeconf --json diff staging.yaml production.yaml""",
)
@click.argument("file_a", type=CONFIG_FILE)
@click.argument("file_b", type=CONFIG_FILE)
@profile_option
@click.pass_obj
def diff(app: AppContext, file_a: Path, file_b: Path, profiles: tuple[str, ...]) -> None:
    """Show settings whose validated values differ between FILE_A and FILE_B."""
    from rangeconf.services.validation import ValidationService

    svc = ValidationService(app.schema)
    app.emit(svc.diff(file_a, file_b, app.profiles(profiles)))
