"""Tests for EdcertSettings: unified settings with TOML source."""

from pathlib import Path

import click
import pytest

from edcert.config.settings import EdcertSettings


class TestDefaults:
    def test_all_defaults(self, workdir: Path) -> None:
        settings = EdcertSettings.from_cli()
        assert settings.config_path is None
        assert settings.json_output is False
        assert settings.quiet is False
        assert settings.defaults.expiry_years == 10
        assert settings.defaults.output_path == "./"
        assert settings.defaults.backend == "cryptography"
        assert settings.openssl.binary == "openssl"
        assert settings.openssl.override_dir is None

    def test_frozen(self, workdir: Path) -> None:
        settings = EdcertSettings.from_cli()
        with pytest.raises(Exception):
            settings.quiet = True  # type: ignore[misc]


class TestTomlSource:
    def test_discovered_in_cwd(self, workdir: Path) -> None:
        (workdir / "edcert.toml").write_text(
            '[defaults]\nexpiry_years = 2\noutput_path = "/etc/ssl"\n'
        )
        settings = EdcertSettings.from_cli()
        assert settings.config_path == workdir / "edcert.toml"
        assert settings.defaults.expiry_years == 2
        assert settings.defaults.output_path == "/etc/ssl"
        assert settings.defaults.backend == "cryptography"  # default preserved

    def test_discovered_in_parent(self, workdir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (workdir / "edcert.toml").write_text('[openssl]\nbinary = "/usr/local/bin/openssl"\n')
        nested = workdir / "a" / "b"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)
        assert EdcertSettings.from_cli().openssl.binary == "/usr/local/bin/openssl"

    def test_explicit_config_path(self, workdir: Path, tmp_path: Path) -> None:
        custom = tmp_path / "custom" / "my.toml"
        custom.parent.mkdir(parents=True)
        custom.write_text('[defaults]\nbackend = "openssl"\n')
        settings = EdcertSettings.from_cli(config_path=str(custom))
        assert settings.defaults.backend == "openssl"
        assert settings.config_path == custom

    def test_template_dir(self, workdir: Path) -> None:
        (workdir / "edcert.toml").write_text('[openssl]\ntemplate_dir = "/srv/edcert-templates"\n')
        settings = EdcertSettings.from_cli()
        assert settings.openssl.override_dir == Path("/srv/edcert-templates")

    def test_unknown_section_rejected(self, workdir: Path) -> None:
        (workdir / "edcert.toml").write_text('[templates]\ndir = "/srv/edcert-templates"\n')
        with pytest.raises(click.ClickException, match=r"Unknown key\(s\) in .*: templates"):
            EdcertSettings.from_cli()

    def test_unknown_key_in_section_rejected(self, workdir: Path) -> None:
        (workdir / "edcert.toml").write_text('[openssl]\ntemplate_dirs = "/srv"\n')
        with pytest.raises(click.ClickException, match="openssl.template_dirs"):
            EdcertSettings.from_cli()

    def test_invalid_toml(self, workdir: Path) -> None:
        (workdir / "edcert.toml").write_text("[defaults\n")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            EdcertSettings.from_cli()

    def test_invalid_expiry_rejected(self, workdir: Path) -> None:
        (workdir / "edcert.toml").write_text("[defaults]\nexpiry_years = 0\n")
        with pytest.raises(click.ClickException, match="defaults.expiry_years"):
            EdcertSettings.from_cli()

    def test_invalid_backend_rejected(self, workdir: Path) -> None:
        (workdir / "edcert.toml").write_text('[defaults]\nbackend = "gnutls"\n')
        with pytest.raises(click.ClickException, match="defaults.backend"):
            EdcertSettings.from_cli()


class TestCliFlags:
    def test_cli_flags_override_toml(self, workdir: Path) -> None:
        (workdir / "edcert.toml").write_text("quiet = true\n")
        settings = EdcertSettings.from_cli(quiet=False)
        assert settings.quiet is False


class TestEnvVars:
    def test_env_var_override(self, workdir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("EDCERT_QUIET", "true")
        assert EdcertSettings.from_cli().quiet is True

    def test_nested_env_var_override(self, workdir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("EDCERT_DEFAULTS__EXPIRY_YEARS", "5")
        assert EdcertSettings.from_cli().defaults.expiry_years == 5

    def test_env_beats_toml(self, workdir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (workdir / "edcert.toml").write_text('[openssl]\nbinary = "from-toml"\n')
        monkeypatch.setenv("EDCERT_OPENSSL__BINARY", "from-env")
        assert EdcertSettings.from_cli().openssl.binary == "from-env"

    def test_nested_template_dir_env_var(self, workdir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("EDCERT_OPENSSL__TEMPLATE_DIR", "/srv/tpl")
        assert EdcertSettings.from_cli().openssl.override_dir == Path("/srv/tpl")

    def test_invalid_env_value(self, workdir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("EDCERT_DEFAULTS__EXPIRY_YEARS", "0")
        with pytest.raises(click.ClickException, match="Invalid configuration"):
            EdcertSettings.from_cli()
