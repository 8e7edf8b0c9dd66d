"""Subcommand modules for rangeconf.

Provides register_commands() which uses deferred imports to keep
``rangeconf --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from rangeconf.commands.defaults import defaults
    from rangeconf.commands.diff import diff
    from rangeconf.commands.validate import validate

    cli.add_command(validate)
    cli.add_command(diff)
    cli.add_command(defaults)
