"""Back Resolver application.

Endpoints:
- GET /weather?cep=<code> -> 200 WeatherResult | 422 | 404 | 500
- GET /health

Usage:
    cepweather serve resolver
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request, Response

from cepweather import __version__
from cepweather.api.responses import finish_request
from cepweather.config.settings import CepWeatherSettings
from cepweather.domain.types import ServiceName
from cepweather.infrastructure.directory import DirectoryClient
from cepweather.infrastructure.http import build_http_client
from cepweather.infrastructure.weather import WeatherClient
from cepweather.services.resolver import ResolverService
from cepweather.services.telemetry import TracingContext, setup_tracing

logger = logging.getLogger(__name__)


def create_resolver_app(
    settings: CepWeatherSettings | None = None,
    *,
    tracing: TracingContext | None = None,
    http_client: httpx.Client | None = None,
) -> FastAPI:
    """Build the resolver app.

    A *tracing* context or *http_client* passed in is borrowed: the app
    uses it but leaves closing it to the caller. Anything built here is
    released when the app shuts down.
    """
    settings = settings or CepWeatherSettings.from_cli()
    owns_tracing = tracing is None
    owns_client = http_client is None
    tracing = tracing or setup_tracing(ServiceName.RESOLVER, settings.tracing)
    client = http_client or build_http_client(settings.http)

    service = ResolverService(
        tracing,
        DirectoryClient(client, settings.resolver.directory_url),
        WeatherClient(client, settings.resolver.weather_url, settings.weather_api_key),
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if not settings.weather_api_key:
            logger.warning("WEATHER_API_KEY is not set; temperature lookups will fail")
        logger.info(
            "Resolver ready (directory=%s, weather=%s)",
            settings.resolver.directory_url,
            settings.resolver.weather_url,
        )
        yield
        if owns_client:
            client.close()
        if owns_tracing:
            tracing.shutdown()

    app = FastAPI(title="cepweather resolver", version=__version__, lifespan=lifespan)
    app.state.service = service
    app.state.tracing = tracing

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok", "service": ServiceName.RESOLVER}

    @app.get("/weather")
    def get_weather(request: Request, cep: str = "") -> Response:
        with tracing.request_span(
            "getWeatherData", request.headers, attributes={"cepweather.cep": cep}
        ) as span:
            return finish_request(span, service.resolve(cep))

    return app
