"""Unified settings: CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  (CLI flags passed by Click)
  2. Env vars     (``EDCERT_*`` prefix, ``__`` between section and key)
  3. TOML file    (see :func:`edcert.config.discovery.resolve_config`)
  4. Code defaults baked into the section models
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field, ValidationError
from pydantic.fields import FieldInfo
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsError

from edcert.config.discovery import resolve_config
from edcert.config.models import DefaultsConfig, OpenSSLConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read the sections of one ``edcert.toml`` file."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._path = toml_path
        self._data: dict[str, Any] = {}
        if toml_path is None:
            return
        try:
            self._data = tomllib.loads(toml_path.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as exc:
            msg = f"Invalid TOML in {toml_path}: {exc}"
            raise click.ClickException(msg) from exc

    def get_field_value(self, field: FieldInfo, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        values: dict[str, Any] = {}
        for name, field in self.settings_cls.model_fields.items():
            value, key, found = self.get_field_value(field, name)
            if found:
                values[key] = value

        unknown = sorted(set(self._data) - set(values))
        if unknown:
            msg = f"Unknown key(s) in {self._path}: {', '.join(unknown)}"
            raise click.ClickException(msg)
        return values


# Thread-local storage for TOML path during construction.
_tls = threading.local()


def _describe(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
    )


class EdcertSettings(BaseSettings):
    """Frozen merge of CLI flags, ``EDCERT_*`` env vars, TOML and defaults.

    Attributes:
        config_path: The TOML file that was loaded, or None.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "EDCERT_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    openssl: OpenSSLConfig = Field(default_factory=OpenSSLConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, getattr(_tls, "toml_path", None)),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        search_from: Path | None = None,
        **cli_flags: Any,
    ) -> EdcertSettings:
        """Construct settings for one CLI invocation.

        Raises:
            click.ClickException: The config file is missing or malformed,
                or a TOML or environment value fails validation.
        """
        toml_path = resolve_config(config_path, search_from=search_from)

        _tls.toml_path = toml_path
        try:
            return cls(config_path=toml_path, **cli_flags)
        except ValidationError as exc:
            msg = f"Invalid configuration: {_describe(exc)}"
            raise click.ClickException(msg) from exc
        except SettingsError as exc:
            msg = f"Invalid configuration (environment): {exc}"
            raise click.ClickException(msg) from exc
        finally:
            _tls.toml_path = None
