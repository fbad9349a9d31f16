"""structlog configuration for edcert.

Stdlib loggers under ``edcert`` are rendered by structlog on stderr, either
for a terminal or as JSON lines (``--log-json``).  Fields bound with
:func:`bind_run` (backend, primary domain) are merged into every record
logged while a certificate is being issued.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager

import structlog

LOGGER_NAME = "edcert"


def _level(*, verbose: bool, quiet: bool) -> int:
    if verbose:
        return logging.DEBUG
    return logging.ERROR if quiet else logging.WARNING


def _renderer_chain(log_json: bool) -> list[structlog.types.Processor]:
    if log_json:
        return [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]


def configure_logging(*, verbose: bool = False, quiet: bool = False, log_json: bool = False) -> None:
    """Route stdlib and structlog records to a single stderr handler.

    Args:
        verbose: DEBUG for the ``edcert`` logger; wins over *quiet*.
        quiet: Only ERROR and above, to keep ``-q`` output pipe-friendly.
        log_json: JSON lines instead of the console renderer.

    Safe to call repeatedly: the root handler is replaced, never stacked.
    """
    shared: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *_renderer_chain(log_json),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.WARNING)
    logging.getLogger(LOGGER_NAME).setLevel(_level(verbose=verbose, quiet=quiet))


@contextmanager
def bind_run(*, backend: str, primary_domain: str) -> Iterator[None]:
    """Tag every record logged inside the block with the run's identity."""
    with structlog.contextvars.bound_contextvars(backend=backend, primary_domain=primary_domain):
        yield
