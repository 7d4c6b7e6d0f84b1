"""Front Gateway application.

Endpoints:
- POST /get-weather  body ``{"cep": "<8 chars>"}`` -> 200 WeatherResult | 422 | 500
- GET  /health

The body is read raw so that malformed JSON and wrong-length codes share
the same plain-text 422 instead of FastAPI's validation payload.

Usage:
    cepweather serve gateway
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request, Response
from fastapi.concurrency import run_in_threadpool

from cepweather import __version__
from cepweather.api.responses import finish_request
from cepweather.config.settings import CepWeatherSettings
from cepweather.domain.types import ServiceName
from cepweather.infrastructure.http import build_http_client
from cepweather.infrastructure.resolver_client import ResolverClient
from cepweather.services.gateway import GatewayService
from cepweather.services.telemetry import TracingContext, setup_tracing

logger = logging.getLogger(__name__)


def create_gateway_app(
    settings: CepWeatherSettings | None = None,
    *,
    tracing: TracingContext | None = None,
    http_client: httpx.Client | None = None,
) -> FastAPI:
    """Build the gateway app.

    Borrowed *tracing* and *http_client* follow the same ownership rule as
    :func:`cepweather.api.resolver.create_resolver_app`.
    """
    settings = settings or CepWeatherSettings.from_cli()
    owns_tracing = tracing is None
    owns_client = http_client is None
    tracing = tracing or setup_tracing(ServiceName.GATEWAY, settings.tracing)
    client = http_client or build_http_client(settings.http)

    service = GatewayService(tracing, ResolverClient(client, settings.gateway.resolver_url))

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Gateway ready (resolver=%s)", settings.gateway.resolver_url)
        yield
        if owns_client:
            client.close()
        if owns_tracing:
            tracing.shutdown()

    app = FastAPI(title="cepweather gateway", version=__version__, lifespan=lifespan)
    app.state.service = service
    app.state.tracing = tracing

    def handle(body: bytes, headers: Mapping[str, str]) -> Response:
        with tracing.request_span("getWeather", headers) as span:
            return finish_request(span, service.get_weather_from_body(body))

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok", "service": ServiceName.GATEWAY}

    @app.post("/get-weather")
    async def get_weather(request: Request) -> Response:
        body = await request.body()
        return await run_in_threadpool(handle, body, request.headers)

    return app
