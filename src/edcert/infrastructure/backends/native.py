"""In-process backend built on the ``cryptography`` library.

Mirrors the OpenSSL pipeline step for step: each stage reads the previous
stage's file from disk, so a run leaves the same three artifacts behind.
No temporary config files are involved.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta

from cryptography import x509
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)
from cryptography.x509.oid import NameOID

from edcert.domain.request import CertRequest, DomainSet, GeneratedArtifacts
from edcert.infrastructure.backends import ExternalToolError
from edcert.infrastructure.certinfo import (
    colon_hex,
    load_certificate,
    public_key_algorithm_name,
    san_dns_names,
    signature_algorithm_name,
)
from edcert.infrastructure.filesystem import write_private_key, write_public_file

logger = logging.getLogger(__name__)

_DATE_FORMAT = "%b %d %H:%M:%S %Y GMT"


def _subject(common_name: str) -> x509.Name:
    try:
        return x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    except ValueError as exc:
        raise ExternalToolError("generate_csr", f"invalid Common Name: {exc}") from exc


def _san(domains: DomainSet, *, step: str) -> x509.SubjectAlternativeName:
    try:
        return x509.SubjectAlternativeName([x509.DNSName(name) for name in domains.names])
    except ValueError as exc:
        raise ExternalToolError(step, f"invalid DNS name: {exc}") from exc


def _hex_block(data: bytes, *, indent: int, per_line: int) -> list[str]:
    """Lowercase colon-hex split into rows of *per_line* bytes, openssl style."""
    rows = [data[i : i + per_line] for i in range(0, len(data), per_line)]
    return [
        " " * indent + colon_hex(row).lower() + (":" if n < len(rows) - 1 else "")
        for n, row in enumerate(rows)
    ]


class NativeBackend:
    """Toolkit backed by ``cryptography``'s Ed25519 and X.509 builders."""

    name = "cryptography"

    def issue(self, request: CertRequest, artifacts: GeneratedArtifacts) -> None:
        self.generate_private_key(artifacts)
        self.generate_csr(request, artifacts)
        self.self_sign(request, artifacts)

    def generate_private_key(self, artifacts: GeneratedArtifacts) -> None:
        key = Ed25519PrivateKey.generate()
        pem = key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
        write_private_key(artifacts.private_key, pem)
        logger.debug("Generated Ed25519 private key %s", artifacts.private_key)

    def generate_csr(self, request: CertRequest, artifacts: GeneratedArtifacts) -> None:
        key = self._load_private_key(artifacts, step="generate_csr")
        csr = (
            x509.CertificateSigningRequestBuilder()
            .subject_name(_subject(request.primary_domain))
            .add_extension(_san(request.domains, step="generate_csr"), critical=False)
            .sign(key, None)
        )
        write_public_file(artifacts.csr, csr.public_bytes(serialization.Encoding.PEM))
        logger.debug("Generated CSR %s", artifacts.csr)

    def self_sign(self, request: CertRequest, artifacts: GeneratedArtifacts) -> None:
        key = self._load_private_key(artifacts, step="self_sign")
        csr = x509.load_pem_x509_csr(artifacts.csr.read_bytes())
        if not csr.is_signature_valid:
            msg = f"CSR signature check failed for {artifacts.csr}"
            raise ExternalToolError("self_sign", msg)

        now = datetime.now(UTC)
        cert = (
            x509.CertificateBuilder()
            .subject_name(csr.subject)
            .issuer_name(csr.subject)
            .public_key(csr.public_key())
            .serial_number(x509.random_serial_number())
            .not_valid_before(now)
            .not_valid_after(now + timedelta(days=request.validity_days))
            .add_extension(_san(request.domains, step="self_sign"), critical=False)
            .sign(key, None)
        )
        write_public_file(artifacts.certificate, cert.public_bytes(serialization.Encoding.PEM))
        logger.debug(
            "Self-signed certificate %s valid for %d days",
            artifacts.certificate,
            request.validity_days,
        )

    def decode_certificate(self, artifacts: GeneratedArtifacts) -> str:
        """Dump the certificate in the layout of ``openssl x509 -text``."""
        cert = load_certificate(artifacts.certificate)
        public_key = cert.public_key()
        serial = cert.serial_number.to_bytes(20, "big").lstrip(b"\x00")
        lines = [
            "Certificate:",
            "    Data:",
            f"        Version: {cert.version.value + 1} ({hex(cert.version.value)})",
            "        Serial Number:",
            f"            {colon_hex(serial).lower()}",
            f"        Signature Algorithm: {signature_algorithm_name(cert)}",
            f"        Issuer: {cert.issuer.rfc4514_string()}",
            "        Validity",
            f"            Not Before: {cert.not_valid_before_utc.strftime(_DATE_FORMAT)}",
            f"            Not After : {cert.not_valid_after_utc.strftime(_DATE_FORMAT)}",
            f"        Subject: {cert.subject.rfc4514_string()}",
            "        Subject Public Key Info:",
            f"            Public Key Algorithm: {public_key_algorithm_name(cert)}",
        ]
        if isinstance(public_key, Ed25519PublicKey):
            raw = public_key.public_bytes(
                serialization.Encoding.Raw, serialization.PublicFormat.Raw
            )
            lines.append("                ED25519 Public-Key:")
            lines.append("                pub:")
            lines.extend(_hex_block(raw, indent=20, per_line=15))
        names = san_dns_names(cert)
        if names:
            lines.append("        X509v3 extensions:")
            lines.append("            X509v3 Subject Alternative Name:")
            lines.append("                " + ", ".join(f"DNS:{name}" for name in names))
        lines.append(f"    Signature Algorithm: {signature_algorithm_name(cert)}")
        lines.append("    Signature Value:")
        lines.extend(_hex_block(cert.signature, indent=8, per_line=18))
        return "\n".join(lines) + "\n"

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _load_private_key(artifacts: GeneratedArtifacts, *, step: str) -> Ed25519PrivateKey:
        key = serialization.load_pem_private_key(artifacts.private_key.read_bytes(), password=None)
        if not isinstance(key, Ed25519PrivateKey):
            msg = f"{artifacts.private_key} does not hold an Ed25519 key"
            raise ExternalToolError(step, msg)
        return key
