"""Shared pytest fixtures and test helpers for cepweather tests."""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path

import httpx
import pytest
from click.testing import CliRunner
from opentelemetry.sdk.trace import ReadableSpan
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from cepweather.config.models import TracingConfig
from cepweather.config.settings import CepWeatherSettings
from cepweather.services.telemetry import TracingContext, setup_tracing

DIRECTORY_URL = "https://viacep.com.br/ws"
WEATHER_URL = "http://api.weatherapi.com/v1"
RESOLVER_URL = "http://service_b:8082"

DIRECTORY_HOST = "viacep.com.br"
WEATHER_HOST = "api.weatherapi.com"


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's environment out of settings resolution."""
    for var in ("WEATHER_API_KEY", "CEPWEATHER_WEATHER_API_KEY", "CEPWEATHER_CONFIG"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore root logger state after each test (CLI runs reconfigure it)."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    app_logger = logging.getLogger("cepweather")
    app_level = app_logger.level
    access_logger = logging.getLogger("uvicorn.access")
    access_level = access_logger.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    app_logger.setLevel(app_level)
    access_logger.setLevel(access_level)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def settings(tmp_path: Path) -> CepWeatherSettings:
    """Default settings with an API key and no exporter."""
    return CepWeatherSettings.from_cli(
        search_from=tmp_path,
        weather_api_key="test-key",
        tracing=TracingConfig(exporter="none"),
    )


@pytest.fixture
def span_exporter() -> InMemorySpanExporter:
    return InMemorySpanExporter()


@pytest.fixture
def tracing(span_exporter: InMemorySpanExporter) -> Generator[TracingContext]:
    """Tracing context exporting into memory."""
    ctx = setup_tracing("test", exporter=span_exporter)
    try:
        yield ctx
    finally:
        ctx.shutdown()


@pytest.fixture
def upstreams() -> FakeUpstreams:
    ups = FakeUpstreams()
    ups.cities["01310900"] = "São Paulo"
    ups.temperatures["São Paulo"] = 25.0
    return ups


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


class FakeUpstreams:
    """Scripted ViaCEP and WeatherAPI behind one ``httpx.MockTransport``.

    Unknown codes answer like ViaCEP does (``200 {"erro": true}``). Set
    ``directory_status``/``weather_status`` to force an HTTP failure, or
    ``directory_down``/``weather_down`` to raise a connection error.
    ``weather_body`` replaces the weather JSON with raw text.
    """

    def __init__(self) -> None:
        self.cities: dict[str, str] = {}
        self.temperatures: dict[str, float] = {}
        self.directory_status = 200
        self.weather_status = 200
        self.directory_down = False
        self.weather_down = False
        self.weather_body: str | None = None
        self.requests: list[httpx.Request] = []

    def calls_to(self, host: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host == host]

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self._handle))

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host == DIRECTORY_HOST:
            return self._directory(request)
        if request.url.host == WEATHER_HOST:
            return self._weather(request)
        return httpx.Response(502, text=f"unexpected host {request.url.host}")

    def _directory(self, request: httpx.Request) -> httpx.Response:
        if self.directory_down:
            raise httpx.ConnectError("directory unreachable", request=request)
        if self.directory_status != 200:
            return httpx.Response(self.directory_status, text="Bad Request")
        cep = request.url.path.split("/")[2]
        city = self.cities.get(cep)
        if city is None:
            return httpx.Response(200, json={"erro": True})
        return httpx.Response(200, json={"cep": cep, "localidade": city, "uf": "SP"})

    def _weather(self, request: httpx.Request) -> httpx.Response:
        if self.weather_down:
            raise httpx.ConnectError("weather unreachable", request=request)
        if self.weather_status != 200:
            return httpx.Response(
                self.weather_status, json={"error": {"code": 2006, "message": "API key is invalid."}}
            )
        if self.weather_body is not None:
            return httpx.Response(
                200, text=self.weather_body, headers={"content-type": "application/json"}
            )
        city = request.url.params["q"]
        if city not in self.temperatures:
            return httpx.Response(400, json={"error": {"code": 1006, "message": "No location found."}})
        return httpx.Response(
            200, json={"location": {"name": city}, "current": {"temp_c": self.temperatures[city]}}
        )


def finished_spans(tracing: TracingContext, exporter: InMemorySpanExporter) -> dict[str, ReadableSpan]:
    """Flush *tracing* and return its finished spans keyed by name."""
    tracing.force_flush()
    return {span.name: span for span in exporter.get_finished_spans()}
