"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, cepweather.toml only contains
overrides. A local run against the public APIs needs no file at all, only
``WEATHER_API_KEY`` in the environment.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

# --- cepweather.toml sections ---


class GatewayConfig(BaseModel):
    """[gateway] section."""

    model_config = {"frozen": True}

    host: str = "0.0.0.0"
    port: int = 8081
    resolver_url: str = "http://service_b:8082"


class ResolverConfig(BaseModel):
    """[resolver] section."""

    model_config = {"frozen": True}

    host: str = "0.0.0.0"
    port: int = 8082
    directory_url: str = "https://viacep.com.br/ws"
    weather_url: str = "http://api.weatherapi.com/v1"


class HttpConfig(BaseModel):
    """[http] section — applies to every outbound call."""

    model_config = {"frozen": True}

    timeout_seconds: float = Field(default=10.0, gt=0)
    user_agent: str = Field(default="cepweather/0.1", min_length=1)


class TracingConfig(BaseModel):
    """[tracing] section.

    ``endpoint`` left unset lets the OTLP exporter read the standard
    ``OTEL_EXPORTER_OTLP_*`` variables itself.
    """

    model_config = {"frozen": True}

    enabled: bool = True
    exporter: Literal["otlp", "console", "none"] = "otlp"
    endpoint: str | None = None

