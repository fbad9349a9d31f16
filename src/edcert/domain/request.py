"""Certificate request model: domain set, validity, and derived paths.

Everything here is pure: paths are computed, never touched.  Directory
creation lives in :mod:`edcert.infrastructure.filesystem`.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

DAYS_PER_YEAR = 365
DOMAIN_DIR_PREFIX = "ed25519-"


class DomainSet(BaseModel):
    """Ordered, non-empty list of domain names.

    The first name is the primary domain and becomes the Common Name.
    Duplicates are kept as given.
    """

    model_config = {"frozen": True}

    names: tuple[str, ...]

    @field_validator("names")
    @classmethod
    def _check_names(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if not value:
            msg = "at least one domain is required"
            raise ValueError(msg)
        if any(not name for name in value):
            msg = "domain names must not be empty"
            raise ValueError(msg)
        return value

    @classmethod
    def parse(cls, raw: str) -> DomainSet:
        """Split a comma-separated domain list.

        Surrounding whitespace is stripped and empty tokens are skipped,
        so ``"a.com,,b.com,"`` yields ``("a.com", "b.com")``.

        Raises:
            ValueError: If no domain remains after splitting.
        """
        names = tuple(token.strip() for token in raw.split(",") if token.strip())
        return cls(names=names)

    @property
    def primary(self) -> str:
        return self.names[0]


def normalize_output_path(raw: str) -> str:
    """Return *raw* ending with exactly one path separator.

    Examples:
        >>> normalize_output_path("/tmp/out")
        '/tmp/out/'
        >>> normalize_output_path("/tmp/out//")
        '/tmp/out/'
        >>> normalize_output_path("")
        './'
    """
    stripped = raw.rstrip(os.sep)
    if not stripped:
        # "" means the current directory, "/" the filesystem root.
        return os.sep if raw else f".{os.sep}"
    return stripped + os.sep


class GeneratedArtifacts(BaseModel):
    """Paths of the three files produced by one run."""

    model_config = {"frozen": True}

    private_key: Path
    csr: Path
    certificate: Path

    def to_dict(self) -> dict[str, str]:
        return {
            "private_key": str(self.private_key),
            "csr": str(self.csr),
            "certificate": str(self.certificate),
        }


class CertRequest(BaseModel):
    """One self-signed certificate to issue.

    Attributes:
        domains: Names to cover; the first is the Common Name.
        expiry_years: Requested lifetime; converted at 365 days per year.
        output_path: Base directory, normalized to a trailing separator.
    """

    model_config = {"frozen": True}

    domains: DomainSet
    expiry_years: int = Field(gt=0)
    output_path: str

    @field_validator("output_path")
    @classmethod
    def _normalize(cls, value: str) -> str:
        return normalize_output_path(value)

    @classmethod
    def build(cls, domain_list: str, *, expiry_years: int, output_path: str) -> CertRequest:
        """Build a request straight from raw CLI values."""
        return cls(
            domains=DomainSet.parse(domain_list),
            expiry_years=expiry_years,
            output_path=output_path,
        )

    @property
    def primary_domain(self) -> str:
        return self.domains.primary

    @property
    def validity_days(self) -> int:
        return self.expiry_years * DAYS_PER_YEAR

    @property
    def domain_dir(self) -> str:
        """``<output_path>ed25519-<primary>/``, always with a trailing separator."""
        return f"{self.output_path}{DOMAIN_DIR_PREFIX}{self.primary_domain}{os.sep}"

    @property
    def file_prefix(self) -> str:
        return f"{self.domain_dir}{self.primary_domain}"

    @property
    def artifacts(self) -> GeneratedArtifacts:
        prefix = self.file_prefix
        return GeneratedArtifacts(
            private_key=Path(f"{prefix}.key"),
            csr=Path(f"{prefix}.csr"),
            certificate=Path(f"{prefix}.crt"),
        )
