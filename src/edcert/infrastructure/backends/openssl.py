"""OpenSSL command-line backend.

Runs ``genpkey``, ``req`` and ``x509 -req`` in sequence with ``csr.conf`` and
``cert.conf`` written to the working directory for the duration of the run.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from edcert.domain.request import CertRequest, GeneratedArtifacts
from edcert.infrastructure.backends import ExternalToolError
from edcert.infrastructure.templates import openssl_config_files

logger = logging.getLogger(__name__)


class OpenSSLBackend:
    """Toolkit backed by an ``openssl`` binary (1.1.1 or later for Ed25519)."""

    name = "openssl"

    def __init__(
        self,
        *,
        binary: str = "openssl",
        workdir: Path | None = None,
        template_dir: Path | None = None,
    ) -> None:
        self._binary = binary
        self._workdir = workdir
        self._template_dir = template_dir

    def issue(self, request: CertRequest, artifacts: GeneratedArtifacts) -> None:
        with openssl_config_files(
            request.domains,
            workdir=self._workdir,
            override_dir=self._template_dir,
        ) as (csr_conf, cert_conf):
            self._run(
                "generate_key",
                "genpkey",
                "-algorithm",
                "ED25519",
                "-out",
                str(artifacts.private_key),
            )
            self._run(
                "generate_csr",
                "req",
                "-new",
                "-key",
                str(artifacts.private_key),
                "-out",
                str(artifacts.csr),
                "-config",
                str(csr_conf),
            )
            self._run(
                "self_sign",
                "x509",
                "-req",
                "-in",
                str(artifacts.csr),
                "-signkey",
                str(artifacts.private_key),
                "-out",
                str(artifacts.certificate),
                "-days",
                str(request.validity_days),
                "-extfile",
                str(cert_conf),
                "-extensions",
                "v3_ca",
            )

    def decode_certificate(self, artifacts: GeneratedArtifacts) -> str:
        proc = self._run(
            "decode_certificate",
            "x509",
            "-in",
            str(artifacts.certificate),
            "-text",
            "-noout",
        )
        return proc.stdout

    # ------------------------------------------------------------------
    # Subprocess helper
    # ------------------------------------------------------------------

    def _run(self, step: str, *args: str) -> subprocess.CompletedProcess[str]:
        """Run one openssl subcommand. Raises ExternalToolError on failure."""
        cmd = [self._binary, *args]
        logger.debug("Running %s: %s", step, " ".join(cmd))
        try:
            return subprocess.run(cmd, capture_output=True, text=True, check=True)
        except OSError as exc:
            msg = f"could not run {self._binary}: {exc.strerror or exc}"
            raise ExternalToolError(step, msg) from exc
        except subprocess.CalledProcessError as exc:
            stderr = (exc.stderr or "").strip()
            logger.debug("%s failed (exit %s): %s", step, exc.returncode, stderr)
            msg = f"openssl {args[0]} failed with exit code {exc.returncode}"
            raise ExternalToolError(
                step, msg, returncode=exc.returncode, stderr=stderr
            ) from exc
