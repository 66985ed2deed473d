"""AppContext — the object Click hands to every subcommand.

Holds the resolved settings, bootstraps the plan service on first use,
and turns a ServiceResult into output and an exit status.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from weaveplan.config.logging import configure_logging
from weaveplan.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from weaveplan.config.settings import WeaveSettings
    from weaveplan.services.plan import PlanService
    from weaveplan.services.result import ServiceResult

EXIT_FAILURE = 1


class AppContext:
    """Shared state for one CLI invocation.

    Plugins are only loaded when a command first touches :attr:`service`,
    so ``--help`` and ``--examples`` stay side-effect free.
    """

    def __init__(self, settings: WeaveSettings) -> None:
        self.settings = settings
        self.output = OutputSettings(
            json_output=settings.json_output,
            quiet=settings.quiet,
            verbose=settings.verbose,
        )
        self._service: PlanService | None = None
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def service(self) -> PlanService:
        if self._service is None:
            from weaveplan.services.plan import PlanService

            self._service = PlanService.from_settings(self.settings)
        return self._service

    def emit(self, result: ServiceResult) -> None:
        """Print *result*; exit with status 1 if it failed.

        Successful output goes to stdout so it can be piped. Failures and
        warnings go to stderr; JSON output already carries the warnings.
        """
        text = format_result(result, settings=self.output)
        if not result.ok:
            click.echo(text, err=True)
            raise SystemExit(EXIT_FAILURE)
        click.echo(text)
        if self.output.json_output:
            return
        for warning in result.warnings:
            click.secho(f"WARNING: {warning}", fg="yellow", err=True)
