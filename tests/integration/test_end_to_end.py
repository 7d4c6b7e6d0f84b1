"""Gateway chained onto an in-process resolver, with scripted external APIs."""

from __future__ import annotations

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from cepweather.api.gateway import create_gateway_app
from cepweather.api.resolver import create_resolver_app
from cepweather.config.settings import CepWeatherSettings
from cepweather.services.telemetry import TracingContext, setup_tracing
from tests.conftest import RESOLVER_URL, WEATHER_HOST, FakeUpstreams, finished_spans


class Stack:
    """Both services wired together, each with its own tracing context."""

    def __init__(self, settings: CepWeatherSettings, upstreams: FakeUpstreams) -> None:
        self.gateway_spans = InMemorySpanExporter()
        self.resolver_spans = InMemorySpanExporter()
        self.gateway_tracing = setup_tracing("gateway", exporter=self.gateway_spans)
        self.resolver_tracing = setup_tracing("resolver", exporter=self.resolver_spans)

        resolver_app = create_resolver_app(
            settings, tracing=self.resolver_tracing, http_client=upstreams.client()
        )
        self.resolver = TestClient(resolver_app, base_url=RESOLVER_URL)
        gateway_app = create_gateway_app(
            settings, tracing=self.gateway_tracing, http_client=self.resolver
        )
        self.gateway = TestClient(gateway_app)

    def spans(self, tracing: TracingContext, exporter: InMemorySpanExporter) -> dict:
        return finished_spans(tracing, exporter)

    def close(self) -> None:
        self.gateway_tracing.shutdown()
        self.resolver_tracing.shutdown()


@pytest.fixture
def stack(settings: CepWeatherSettings, upstreams: FakeUpstreams) -> Generator[Stack]:
    s = Stack(settings, upstreams)
    try:
        yield s
    finally:
        s.close()


class TestEndToEnd:
    def test_sao_paulo(self, stack: Stack) -> None:
        direct = stack.resolver.get("/weather", params={"cep": "01310900"})
        relayed = stack.gateway.post("/get-weather", json={"cep": "01310900"})

        assert direct.status_code == 200
        assert relayed.status_code == 200
        body = relayed.json()
        assert body == direct.json()
        assert body["city"] == "São Paulo"
        assert body["temp_C"] == 25.0
        assert body["temp_F"] == pytest.approx(77.0)
        assert body["temp_K"] == pytest.approx(298.15)
        assert body["temp_F"] == body["temp_C"] * 1.8 + 32
        assert body["temp_K"] == body["temp_C"] + 273.15

    def test_unknown_code_404_then_500(self, stack: Stack, upstreams: FakeUpstreams) -> None:
        upstreams.directory_status = 400
        direct = stack.resolver.get("/weather", params={"cep": "00000000"})
        relayed = stack.gateway.post("/get-weather", json={"cep": "00000000"})

        assert direct.status_code == 404
        assert relayed.status_code == 500
        assert upstreams.calls_to(WEATHER_HOST) == []

    def test_weather_outage_500_through_gateway(
        self, stack: Stack, upstreams: FakeUpstreams
    ) -> None:
        upstreams.weather_down = True
        resp = stack.gateway.post("/get-weather", json={"cep": "01310900"})
        assert resp.status_code == 500
        assert resp.text == "error fetching weather"

    def test_invalid_code_reaches_nobody(self, stack: Stack, upstreams: FakeUpstreams) -> None:
        resp = stack.gateway.post("/get-weather", json={"cep": "0131090"})
        assert resp.status_code == 422
        assert resp.text == "invalid zipcode"
        assert upstreams.requests == []
        assert stack.spans(stack.resolver_tracing, stack.resolver_spans) == {}

    def test_single_trace_across_both_hops(self, stack: Stack) -> None:
        stack.gateway.post("/get-weather", json={"cep": "01310900"})

        gateway = stack.spans(stack.gateway_tracing, stack.gateway_spans)
        resolver = stack.spans(stack.resolver_tracing, stack.resolver_spans)

        front = gateway["getWeather"]
        back = resolver["getWeatherData"]
        assert back.context.trace_id == front.context.trace_id
        assert back.parent is not None
        assert back.parent.span_id == front.context.span_id
        assert resolver["fetchCity"].context.trace_id == front.context.trace_id
        assert resolver["fetchTemperature"].context.trace_id == front.context.trace_id
