"""Jinja2 rendering of the OpenSSL config documents and the Nginx snippet.

The two OpenSSL documents list every domain as ``DNS.<n> = <domain>`` in an
``[alt_names]`` section, 1-indexed, in input order.  Packaged templates live
in ``edcert/templates/<group>/``; a user directory may override them.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from jinja2 import BaseLoader, ChoiceLoader, Environment, FileSystemLoader, PackageLoader

from edcert.domain.request import DomainSet, GeneratedArtifacts

logger = logging.getLogger(__name__)

CSR_CONFIG_NAME = "csr.conf"
CERT_CONFIG_NAME = "cert.conf"


def build_template_environment(group: str, *, override_dir: Path | None = None) -> Environment:
    """Build a Jinja2 environment with user overrides before packaged defaults.

    Both a namespaced directory (for example ``<override_dir>/openssl/``)
    and the override root itself are searched.
    """
    loaders: list[BaseLoader] = []
    if override_dir is not None:
        loaders.append(FileSystemLoader([str(override_dir / group), str(override_dir)]))

    loaders.append(PackageLoader("edcert", f"templates/{group}"))
    return Environment(loader=ChoiceLoader(loaders), keep_trailing_newline=True)


def render_csr_config(domains: DomainSet, *, override_dir: Path | None = None) -> str:
    """Render the request config: Common Name plus SAN extension block."""
    env = build_template_environment("openssl", override_dir=override_dir)
    return env.get_template("csr.conf.j2").render(
        primary_domain=domains.primary,
        domains=domains.names,
    )


def render_cert_config(domains: DomainSet, *, override_dir: Path | None = None) -> str:
    """Render the signing config: SAN extension only."""
    env = build_template_environment("openssl", override_dir=override_dir)
    return env.get_template("cert.conf.j2").render(domains=domains.names)


def render_nginx_snippet(
    artifacts: GeneratedArtifacts, *, override_dir: Path | None = None
) -> str:
    """Render the ``ssl_certificate``/``ssl_certificate_key`` lines."""
    env = build_template_environment("nginx", override_dir=override_dir)
    return env.get_template("ssl.conf.j2").render(
        certificate=str(artifacts.certificate),
        private_key=str(artifacts.private_key),
    )


@contextmanager
def openssl_config_files(
    domains: DomainSet,
    *,
    workdir: Path | None = None,
    override_dir: Path | None = None,
) -> Iterator[tuple[Path, Path]]:
    """Write ``csr.conf`` and ``cert.conf`` for the duration of the block.

    Files go to *workdir* (default: cwd) under fixed names, replacing any
    existing files.  Both are removed on exit, including on error.
    Concurrent runs sharing a working directory race on these names.

    Yields:
        ``(csr_config_path, cert_config_path)``
    """
    base = workdir or Path.cwd()
    csr_conf = base / CSR_CONFIG_NAME
    cert_conf = base / CERT_CONFIG_NAME
    try:
        csr_conf.write_text(render_csr_config(domains, override_dir=override_dir), encoding="utf-8")
        cert_conf.write_text(
            render_cert_config(domains, override_dir=override_dir), encoding="utf-8"
        )
        logger.debug("Wrote %s and %s", csr_conf, cert_conf)
        yield csr_conf, cert_conf
    finally:
        csr_conf.unlink(missing_ok=True)
        cert_conf.unlink(missing_ok=True)
        logger.debug("Removed %s and %s", csr_conf, cert_conf)
