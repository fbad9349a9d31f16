"""Custom Click base class with --examples support and exit-code policy.

:class:`EdcertCommand` accepts an ``examples`` parameter; ``--examples``
prints them and exits, keeping ``--help`` concise.  Every usage error
(missing domain list, unknown flag, bad value) exits with status 1.
"""

from __future__ import annotations

from typing import Any

import click

USAGE_EXIT_CODE = 1


class EdcertUsageError(click.UsageError):
    """Missing or invalid arguments. Printed with usage to stderr, exit 1."""

    exit_code = USAGE_EXIT_CODE


def _add_examples_option(cmd: click.Command, examples: str) -> None:
    """Attach an eager ``--examples`` flag to a Click command."""

    def show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(examples)
        ctx.exit(0)

    cmd.params.append(
        click.Option(
            ["--examples"],
            is_flag=True,
            expose_value=False,
            is_eager=True,
            callback=show_examples,
            help="Show usage examples.",
        )
    )


class EdcertCommand(click.Command):
    """Click Command subclass with ``--examples`` and exit status 1 on usage errors."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as exc:
            exc.exit_code = USAGE_EXIT_CODE
            raise
