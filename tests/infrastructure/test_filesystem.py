"""Tests for artifact filesystem helpers."""

from __future__ import annotations

import stat
from pathlib import Path

from edcert.infrastructure.filesystem import (
    PRIVATE_KEY_MODE,
    ensure_directory,
    write_private_key,
    write_public_file,
)


class TestEnsureDirectory:
    def test_creates_missing_ancestors(self, tmp_path: Path) -> None:
        target = tmp_path / "a" / "b" / "ed25519-example.com"
        result = ensure_directory(f"{target}/")
        assert result.is_dir()
        assert target.is_dir()

    def test_idempotent(self, tmp_path: Path) -> None:
        target = tmp_path / "ed25519-example.com"
        ensure_directory(target)
        ensure_directory(target)
        assert target.is_dir()


class TestWriteFiles:
    def test_private_key_is_owner_only(self, tmp_path: Path) -> None:
        path = tmp_path / "example.com.key"
        write_private_key(path, b"secret")
        assert path.read_bytes() == b"secret"
        assert stat.S_IMODE(path.stat().st_mode) == PRIVATE_KEY_MODE

    def test_private_key_overwrites(self, tmp_path: Path) -> None:
        path = tmp_path / "example.com.key"
        write_private_key(path, b"first-and-longer")
        write_private_key(path, b"second")
        assert path.read_bytes() == b"second"

    def test_public_file(self, tmp_path: Path) -> None:
        path = tmp_path / "example.com.crt"
        write_public_file(path, b"-----BEGIN CERTIFICATE-----\n")
        assert path.read_bytes().startswith(b"-----BEGIN CERTIFICATE-----")
