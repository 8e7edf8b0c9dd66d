"""Root CLI group for rangeconf with global flags and command registration."""

from __future__ import annotations

import click

from rangeconf import __version__
from rangeconf.commands import register_commands
from rangeconf.commands._context import AppContext
from rangeconf.config.discovery import ConfigLoadError
from rangeconf.config.settings import RangeconfSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="rangeconf")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logs and timing.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-s", "--schema", "schema_ref", default=None, help="Schema as module:ATTR.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    schema_ref: str | None,
) -> None:
    """rangeconf — validate, complete, and diff configuration files."""
    try:
        settings = RangeconfSettings.from_cli(
            json_output=json_output or None,
            quiet=quiet or None,
            verbose=verbose or None,
            log_json=log_json or None,
            schema_ref=schema_ref,
        )
    except ConfigLoadError as exc:
        raise click.ClickException(str(exc)) from exc
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
