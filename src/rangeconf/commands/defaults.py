"""Command: print the fully defaulted configuration."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from rangeconf.commands._base import RangeconfCommand

if TYPE_CHECKING:
    from rangeconf.commands._context import AppContext


@click.command(
    cls=RangeconfCommand,
    examples="""\
  rangeconf -s myapp.settings:SCHEMA defaults
  rangeconf --json defaults""",
)
@click.pass_obj
def defaults(app: AppContext) -> None:
    """Print the configuration an empty file normalizes to."""
    from rangeconf.services.validation import ValidationService

    app.emit(ValidationService(app.schema).defaults())
