"""Crypto backends: the toolkit that generates keys, CSRs and certificates.

Two implementations share the :class:`CryptoBackend` protocol:

- ``cryptography``: in-process, via the ``cryptography`` library.
- ``openssl``: shells out to the ``openssl`` binary with templated configs.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from edcert.config.settings import EdcertSettings
    from edcert.domain.request import CertRequest, GeneratedArtifacts


class ExternalToolError(Exception):
    """A toolkit step failed. Never retried; partial artifacts stay on disk."""

    def __init__(
        self,
        step: str,
        message: str,
        *,
        returncode: int | None = None,
        stderr: str = "",
    ) -> None:
        super().__init__(message)
        self.step = step
        self.returncode = returncode
        self.stderr = stderr

    def to_detail(self) -> dict[str, object]:
        return {"step": self.step, "returncode": self.returncode, "stderr": self.stderr}


class CryptoBackend(Protocol):
    """Capabilities edcert needs from a cryptographic toolkit."""

    name: str

    def issue(self, request: CertRequest, artifacts: GeneratedArtifacts) -> None:
        """Generate key, CSR and self-signed certificate, in that order."""
        ...

    def decode_certificate(self, artifacts: GeneratedArtifacts) -> str:
        """Return a human-readable dump of the issued certificate."""
        ...


def get_backend(name: str, settings: EdcertSettings) -> CryptoBackend:
    """Instantiate the backend registered under *name*."""
    if name == "cryptography":
        from edcert.infrastructure.backends.native import NativeBackend

        return NativeBackend()
    if name == "openssl":
        from edcert.infrastructure.backends.openssl import OpenSSLBackend

        return OpenSSLBackend(
            binary=settings.openssl.binary,
            template_dir=settings.openssl.override_dir,
        )
    msg = f"Unknown backend: {name!r}"
    raise ValueError(msg)
