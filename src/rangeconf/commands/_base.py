"""Shared Click pieces for rangeconf commands.

* :class:`RangeconfCommand` adds an eager ``--examples`` flag that prints
  usage examples and exits, keeping ``--help`` short.
* :func:`profile_option` is the repeatable ``-p/--profile`` flag.
* :data:`CONFIG_FILE` is the parameter type of every configuration file
  argument (TOML or YAML, chosen by suffix at load time).
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click

CONFIG_FILE = click.Path(dir_okay=False, path_type=Path)


class RangeconfCommand(click.Command):
    """Click Command that accepts an ``examples`` text."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=self._show_examples,
                    help="Show usage examples.",
                )
            )

    def _show_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(self.examples)
        ctx.exit(0)


def profile_option(func: Any) -> Any:
    """``-p/--profile NAME``, repeatable; profiles apply in the order given."""
    return click.option(
        "-p",
        "--profile",
        "profiles",
        multiple=True,
        metavar="NAME",
        help="Profile to apply; repeat to stack, later profiles win.",
    )(func)
