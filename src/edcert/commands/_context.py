"""AppContext: settings plus centralized result emission.

Created once per invocation by the root command.  Configures logging and
routes each ServiceResult to stdout or stderr with the right exit code.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from edcert.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from edcert.config.settings import EdcertSettings
    from edcert.services.result import ServiceResult


class AppContext:
    """Per-invocation context shared by the command and its helpers."""

    def __init__(self, settings: EdcertSettings) -> None:
        self.settings = settings

        # Configure structured logging
        from edcert.config.logging import configure_logging

        configure_logging(
            verbose=settings.verbose,
            quiet=settings.quiet,
            log_json=settings.log_json,
        )

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
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(result.exit_code)
