"""ServiceResult and ServiceError: what a service hands back to the CLI.

INVARIANT: ``ok`` is False exactly when ``error`` is set.  Every output
mode (human, ``--quiet``, ``--json``) and the exit code derive from it.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field, model_validator

ARTIFACT_KEYS = ("private_key", "certificate", "csr")


class ErrorCode(StrEnum):
    EXTERNAL_TOOL_FAILED = "EXTERNAL_TOOL_FAILED"
    OUTPUT_NOT_WRITABLE = "OUTPUT_NOT_WRITABLE"
    TEMPLATE_FAILED = "TEMPLATE_FAILED"


class ServiceError(BaseModel):
    model_config = {"frozen": True}

    code: ErrorCode
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of one service operation.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (``"issue_certificate"``).
        data: Artifact paths, Nginx lines and certificate details on success.
        warnings: Non-fatal issues, printed to stderr in human mode.
        error: Set exactly when ``ok`` is False.
        meta: Backend name and duration, shown with ``--verbose``.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @model_validator(mode="after")
    def _error_matches_ok(self) -> ServiceResult:
        if self.ok == (self.error is not None):
            msg = "error must be set exactly when ok is False"
            raise ValueError(msg)
        return self

    @classmethod
    def failure(cls, op: str, code: ErrorCode, message: str, **detail: Any) -> ServiceResult:
        return cls(ok=False, op=op, error=ServiceError(code=code, message=message, detail=detail))

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1

    @property
    def artifact_paths(self) -> list[str]:
        """Key, certificate and CSR paths, in that order, for issued results."""
        return [str(self.data[key]) for key in ARTIFACT_KEYS if key in self.data]
