"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, edcert.toml only contains overrides.
Unknown keys inside a section are rejected so a typo never passes silently.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

BackendName = Literal["cryptography", "openssl"]
BACKENDS: tuple[str, ...] = ("cryptography", "openssl")

DEFAULT_EXPIRY_YEARS = 10
DEFAULT_OUTPUT_PATH = "./"


class DefaultsConfig(BaseModel):
    """[defaults] section: fallbacks for omitted CLI options."""

    model_config = {"frozen": True, "extra": "forbid"}

    expiry_years: int = Field(default=DEFAULT_EXPIRY_YEARS, gt=0)
    output_path: str = DEFAULT_OUTPUT_PATH
    backend: BackendName = "cryptography"


class OpenSSLConfig(BaseModel):
    """[openssl] section.

    ``template_dir`` points at user templates that take precedence over the
    packaged ``openssl/csr.conf.j2``, ``openssl/cert.conf.j2`` and
    ``nginx/ssl.conf.j2``.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    binary: str = "openssl"
    template_dir: str | None = None

    @property
    def override_dir(self) -> Path | None:
        return Path(self.template_dir).expanduser() if self.template_dir else None
