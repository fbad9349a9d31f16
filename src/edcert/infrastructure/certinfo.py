"""Structured certificate summary, independent of the backend that issued it."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey
from cryptography.x509.oid import SignatureAlgorithmOID


def load_certificate(path: Path) -> x509.Certificate:
    return x509.load_pem_x509_certificate(path.read_bytes())


def signature_algorithm_name(cert: x509.Certificate) -> str:
    oid = cert.signature_algorithm_oid
    if oid == SignatureAlgorithmOID.ED25519:
        return "ED25519"
    return oid.dotted_string


def public_key_algorithm_name(cert: x509.Certificate) -> str:
    if isinstance(cert.public_key(), Ed25519PublicKey):
        return "ED25519"
    return type(cert.public_key()).__name__


def san_dns_names(cert: x509.Certificate) -> list[str]:
    """DNS names from the SAN extension, in certificate order. Empty if absent."""
    try:
        ext = cert.extensions.get_extension_for_class(x509.SubjectAlternativeName)
    except x509.ExtensionNotFound:
        return []
    return ext.value.get_values_for_type(x509.DNSName)


def colon_hex(data: bytes) -> str:
    """``b"\\x01\\xab"`` -> ``"01:AB"``."""
    return ":".join(f"{b:02X}" for b in data)


def summarize_certificate(path: Path) -> dict[str, Any]:
    """Return JSON-friendly fields of the PEM certificate at *path*."""
    cert = load_certificate(path)
    not_before = cert.not_valid_before_utc
    not_after = cert.not_valid_after_utc
    public_raw = cert.public_key().public_bytes(
        serialization.Encoding.DER, serialization.PublicFormat.SubjectPublicKeyInfo
    )
    return {
        "subject": cert.subject.rfc4514_string(),
        "issuer": cert.issuer.rfc4514_string(),
        "self_signed": cert.subject == cert.issuer,
        "serial_number": format(cert.serial_number, "x"),
        "not_valid_before": not_before.isoformat(),
        "not_valid_after": not_after.isoformat(),
        "validity_days": (not_after - not_before).days,
        "dns_names": san_dns_names(cert),
        "public_key_algorithm": public_key_algorithm_name(cert),
        "public_key_sha256": _sha256_hex(public_raw),
        "signature_algorithm": signature_algorithm_name(cert),
        "fingerprint_sha256": colon_hex(cert.fingerprint(hashes.SHA256())),
    }


def _sha256_hex(data: bytes) -> str:
    digest = hashes.Hash(hashes.SHA256())
    digest.update(data)
    return digest.finalize().hex()
