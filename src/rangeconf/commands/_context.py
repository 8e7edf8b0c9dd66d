"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy schema resolution and centralized
result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import click

from rangeconf.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from rangeconf.config.settings import RangeconfSettings
    from rangeconf.domain.schema import Schema
    from rangeconf.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The schema is resolved on first use so ``--help`` and ``--version``
    never import user code.
    """

    def __init__(self, settings: RangeconfSettings) -> None:
        self.settings = settings
        self._schema: Schema | None = None

        from rangeconf.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from rangeconf.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def schema(self) -> Schema:
        """The schema named by ``--schema`` or ``rangeconf.toml``."""
        if self._schema is None:
            from rangeconf.config.discovery import ConfigLoadError, resolve_schema

            ref = self.settings.schema_ref
            if not ref:
                raise click.UsageError(
                    "No schema given: pass --schema module:ATTR or set it in rangeconf.toml."
                )
            try:
                self._schema = resolve_schema(ref)
            except ConfigLoadError as exc:
                raise click.ClickException(str(exc)) from exc
        return self._schema

    def profiles(self, given: Sequence[str]) -> list[str]:
        """Profiles from the command line, else those from settings."""
        return list(given) if given else list(self.settings.profiles)

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
