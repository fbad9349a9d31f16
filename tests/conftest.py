"""Shared pytest fixtures and test helpers for edcert tests."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest
from click.testing import CliRunner

from edcert.config.settings import EdcertSettings
from edcert.domain.request import CertRequest


def _openssl_supports_ed25519() -> bool:
    binary = shutil.which("openssl")
    if binary is None:
        return False
    proc = subprocess.run(
        [binary, "genpkey", "-algorithm", "ED25519"],
        capture_output=True,
        text=True,
        check=False,
    )
    return proc.returncode == 0


@pytest.fixture(scope="session")
def openssl_binary() -> str:
    """Path to an Ed25519-capable openssl; skips the test otherwise."""
    if not _openssl_supports_ed25519():
        pytest.skip("openssl with Ed25519 support not available")
    binary = shutil.which("openssl")
    assert binary is not None
    return binary


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's EDCERT_* environment out of every test."""
    for name in (
        "EDCERT_CONFIG",
        "EDCERT_QUIET",
        "EDCERT_VERBOSE",
        "EDCERT_JSON_OUTPUT",
        "EDCERT_LOG_JSON",
        "EDCERT_DEFAULTS__EXPIRY_YEARS",
        "EDCERT_DEFAULTS__OUTPUT_PATH",
        "EDCERT_DEFAULTS__BACKEND",
        "EDCERT_OPENSSL__BINARY",
        "EDCERT_OPENSSL__TEMPLATE_DIR",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Change CWD to a fresh temp directory so transient files land there."""
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    return work


@pytest.fixture
def settings(workdir: Path) -> EdcertSettings:
    """Default settings with no TOML file in reach."""
    return EdcertSettings.from_cli(search_from=workdir)


@pytest.fixture
def out_dir(tmp_path: Path) -> Path:
    out = tmp_path / "out"
    out.mkdir()
    return out


@pytest.fixture
def request_example(out_dir: Path) -> CertRequest:
    """``example.com,www.example.com`` for one year under *out_dir*."""
    return CertRequest.build(
        "example.com,www.example.com",
        expiry_years=1,
        output_path=str(out_dir),
    )
