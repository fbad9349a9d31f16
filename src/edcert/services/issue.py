"""IssueService: the key -> CSR -> self-signed certificate pipeline.

Steps run strictly in order and each blocks until done.  A failing step
stops the run; files written by earlier steps are left on disk.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from jinja2 import TemplateError

from edcert.config.logging import bind_run
from edcert.infrastructure.backends import ExternalToolError, get_backend
from edcert.infrastructure.certinfo import summarize_certificate
from edcert.infrastructure.filesystem import ensure_directory
from edcert.infrastructure.templates import render_nginx_snippet
from edcert.services.result import ErrorCode, ServiceResult

if TYPE_CHECKING:
    from edcert.config.settings import EdcertSettings
    from edcert.domain.request import CertRequest
    from edcert.infrastructure.backends import CryptoBackend

logger = logging.getLogger(__name__)

OP = "issue_certificate"


class IssueService:
    """Issue one self-signed Ed25519 certificate.

    Usage::

        result = IssueService(settings).issue(request)
    """

    def __init__(
        self,
        settings: EdcertSettings,
        *,
        backend: CryptoBackend | None = None,
        backend_name: str | None = None,
    ) -> None:
        self._settings = settings
        name = backend_name or settings.defaults.backend
        self._backend = backend or get_backend(name, settings)

    @property
    def backend(self) -> CryptoBackend:
        return self._backend

    def issue(self, request: CertRequest) -> ServiceResult:
        """Create the domain directory, run the backend, and describe the result."""
        with bind_run(backend=self._backend.name, primary_domain=request.primary_domain):
            return self._issue(request)

    def _issue(self, request: CertRequest) -> ServiceResult:
        started = time.perf_counter()
        artifacts = request.artifacts
        logger.debug("Issuing certificate for %s", ", ".join(request.domains.names))

        try:
            ensure_directory(request.domain_dir)
            self._backend.issue(request, artifacts)
            details = self._backend.decode_certificate(artifacts)
            summary = summarize_certificate(artifacts.certificate)
            nginx = render_nginx_snippet(
                artifacts, override_dir=self._settings.openssl.override_dir
            )
        except ExternalToolError as exc:
            logger.debug("Step %s failed: %s", exc.step, exc)
            return ServiceResult.failure(
                OP, ErrorCode.EXTERNAL_TOOL_FAILED, str(exc), **exc.to_detail()
            )
        except TemplateError as exc:
            # TemplateNotFound is also an OSError; it belongs here.
            name = getattr(exc, "name", None) or getattr(exc, "filename", None)
            logger.debug("Template %s failed: %s", name, exc)
            return ServiceResult.failure(
                OP,
                ErrorCode.TEMPLATE_FAILED,
                f"template error: {exc.message or type(exc).__name__}",
                template=name,
            )
        except OSError as exc:
            path = str(exc.filename or request.domain_dir)
            return ServiceResult.failure(
                OP,
                ErrorCode.OUTPUT_NOT_WRITABLE,
                f"{exc.strerror or exc}: {path}",
                path=path,
            )

        warnings: list[str] = []
        if len(set(request.domains.names)) != len(request.domains.names):
            warnings.append("Duplicate domains were kept in the SAN list")

        elapsed_ms = round((time.perf_counter() - started) * 1000, 1)
        return ServiceResult(
            ok=True,
            op=OP,
            data={
                "primary_domain": request.primary_domain,
                "domains": list(request.domains.names),
                "validity_days": request.validity_days,
                "domain_dir": request.domain_dir,
                **artifacts.to_dict(),
                "nginx": nginx,
                "summary": summary,
                "details": details,
            },
            warnings=warnings,
            meta={"backend": self._backend.name, "duration_ms": elapsed_ms},
        )
