"""Root edcert command: flags, settings resolution and the issue pipeline."""

from __future__ import annotations

import click
from pydantic import ValidationError

from edcert import __version__
from edcert.commands._base import EdcertCommand, EdcertUsageError
from edcert.commands._context import AppContext
from edcert.config.models import BACKENDS
from edcert.config.settings import EdcertSettings

USAGE_HINT = "edcert -d domain.com,www.domain.com,sub.domain.com [-e expiry_years] [-p /path/to/save]"

_EXAMPLES = """\
  edcert -d example.com
  edcert -d example.com,www.example.com -e 1 -p /etc/nginx/ssl
  edcert -d internal.lan --backend openssl
  edcert --json -d example.com,api.example.com
  edcert -q -d example.com -p /tmp"""


def _validation_message(exc: ValidationError) -> str:
    return "; ".join(err["msg"] for err in exc.errors())


@click.command(cls=EdcertCommand, examples=_EXAMPLES)
@click.version_option(version=__version__, prog_name="edcert")
@click.option(
    "-d",
    "--domains",
    "domain_list",
    default=None,
    metavar="DOMAINS",
    help="Comma-separated domains; the first one becomes the Common Name.",
)
@click.option(
    "-e",
    "--expiry",
    "expiry_years",
    type=click.IntRange(min=1),
    default=None,
    help="Validity in years, 365 days each [default: 10].",
)
@click.option(
    "-p",
    "--path",
    "output_path",
    default=None,
    help="Directory that receives ed25519-<domain>/ [default: ./].",
)
@click.option(
    "--backend",
    type=click.Choice(BACKENDS),
    default=None,
    help="Crypto toolkit [default: cryptography].",
)
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Print only the generated file paths.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
def cli(
    domain_list: str | None,
    expiry_years: int | None,
    output_path: str | None,
    backend: str | None,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """edcert: self-signed Ed25519 TLS certificates for one or more domains.

    Writes DIR/ed25519-<primary>/<primary>.{key,csr,crt} and prints the
    matching Nginx ssl_certificate lines.
    """
    if not domain_list:
        raise EdcertUsageError(
            f"Missing option '-d' / '--domains'.\n  {USAGE_HINT}",
            ctx=click.get_current_context(),
        )

    settings = EdcertSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    app = AppContext(settings)

    from edcert.domain.request import CertRequest

    try:
        request = CertRequest.build(
            domain_list,
            expiry_years=expiry_years or settings.defaults.expiry_years,
            output_path=output_path if output_path is not None else settings.defaults.output_path,
        )
    except ValidationError as exc:
        raise EdcertUsageError(
            f"Invalid option '-d' / '--domains': {_validation_message(exc)}",
            ctx=click.get_current_context(),
        ) from exc

    from edcert.services.issue import IssueService

    app.emit(IssueService(settings, backend_name=backend).issue(request))
