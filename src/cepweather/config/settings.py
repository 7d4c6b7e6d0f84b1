"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``CEPWEATHER_*`` prefix (``__`` for nested sections)
  3. TOML file    — ``cepweather.toml`` discovered via walk-up
  4. Code defaults — baked into the section models

The weather API key is the one exception to the prefix rule: it is also
read from the bare ``WEATHER_API_KEY`` variable that deployments already set.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any, ClassVar

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from cepweather.config.discovery import find_config
from cepweather.config.models import (
    GatewayConfig,
    HttpConfig,
    ResolverConfig,
    TracingConfig,
)


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``cepweather.toml`` file discovered via walk-up."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                import click

                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class CepWeatherSettings(BaseSettings):
    """Settings shared by both services and the CLI.

    Stored on the Click context by the root group and handed to the
    application factories, which read only the sections they need.

    Attributes:
        config_path: The TOML file that was loaded, or None.
        weather_api_key: Credential for the weather API. None is allowed;
            the resolver warns at startup and upstream calls will fail.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "CEPWEATHER_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None

    # --- CLI flags ---
    verbose: bool = False
    log_json: bool = False

    weather_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("weather_api_key", "cepweather_weather_api_key"),
    )

    # --- TOML sections ---
    gateway: GatewayConfig = Field(default_factory=GatewayConfig)
    resolver: ResolverConfig = Field(default_factory=ResolverConfig)
    http: HttpConfig = Field(default_factory=HttpConfig)
    tracing: TracingConfig = Field(default_factory=TracingConfig)

    # Retained for type-checker visibility; not used at runtime.
    _toml_path: ClassVar[Path | None] = None

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
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        search_from: Path | None = None,
        **cli_flags: Any,
    ) -> CepWeatherSettings:
        """Construct settings from a CLI invocation.

        An explicit *config_path* that does not exist is ignored rather than
        falling back to discovery. Otherwise ``cepweather.toml`` is searched
        for from *search_from* (default: cwd) upward.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(search_from)

        _tls.toml_path = toml_path
        try:
            return cls(config_path=toml_path, **cli_flags)
        finally:
            _tls.toml_path = None
