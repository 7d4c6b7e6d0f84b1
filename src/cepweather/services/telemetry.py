"""Tracing primitives — setup_tracing, TracingContext, record_failure.

Both services bootstrap OpenTelemetry through :func:`setup_tracing`. The
returned :class:`TracingContext` owns its provider and propagator and is
passed explicitly to the application factories; nothing is installed as
the process-global tracer provider.

Span hierarchy per request::

    gateway:  getWeather ──traceparent──▶ resolver: getWeatherData
                                              ├─ fetchCity
                                              └─ fetchTemperature

Every span ends on every exit path. Completed spans are echoed to the log
as ``span.complete`` debug events.
"""

from __future__ import annotations

from collections.abc import Generator, Mapping, MutableMapping
from contextlib import contextmanager
from typing import Any

import structlog
from opentelemetry import trace
from opentelemetry.context import Context
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SpanExporter,
)
from opentelemetry.sdk.trace.sampling import ALWAYS_OFF, ALWAYS_ON
from opentelemetry.trace import Span, SpanKind, Status, StatusCode, format_trace_id
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

from cepweather.config.models import TracingConfig
from cepweather.services.result import ServiceError

log = structlog.get_logger(__name__)

ERROR_CODE_ATTR = "cepweather.error.code"
ERROR_REASON_ATTR = "cepweather.error.reason"


# ── Span logging ─────────────────────────────────────────────────────


def _log_span(span: Span) -> None:
    """Log a completed span. Non-recording spans log with zero duration."""
    start = getattr(span, "start_time", None)
    end = getattr(span, "end_time", None)
    duration_ms = (end - start) / 1_000_000 if start is not None and end is not None else 0.0
    status = getattr(span, "status", None)
    ok = status is None or status.status_code is not StatusCode.ERROR
    log.debug(
        "span.complete",
        span_name=getattr(span, "name", ""),
        duration_ms=round(duration_ms, 2),
        ok=ok,
        trace_id=format_trace_id(span.get_span_context().trace_id),
    )


def record_failure(span: Span, error: ServiceError) -> None:
    """Mark *span* as failed with the service error's code and reason."""
    span.set_status(Status(StatusCode.ERROR, error.message))
    span.set_attribute(ERROR_CODE_ATTR, str(error.code))
    reason = error.detail.get("reason")
    if reason:
        span.set_attribute(ERROR_REASON_ATTR, str(reason))


def get_current_trace_id() -> str | None:
    """Hex trace id of the active span, or None outside any trace."""
    ctx = trace.get_current_span().get_span_context()
    if not ctx.is_valid:
        return None
    return format_trace_id(ctx.trace_id)


# ── TracingContext ───────────────────────────────────────────────────


class TracingContext:
    """Per-service tracer, propagator, and provider lifecycle.

    Usage::

        tracing = setup_tracing("resolver", settings.tracing)
        with tracing.request_span("getWeatherData", request.headers):
            with tracing.span("fetchCity") as span:
                ...
        tracing.shutdown()
    """

    def __init__(self, service_name: str, provider: TracerProvider) -> None:
        self.service_name = service_name
        self._provider = provider
        self._tracer = provider.get_tracer(f"cepweather.{service_name}")
        self._propagator = TraceContextTextMapPropagator()
        self._closed = False

    @property
    def provider(self) -> TracerProvider:
        return self._provider

    def extract(self, headers: Mapping[str, str]) -> Context:
        """Parent context carried by inbound ``traceparent``/``tracestate`` headers."""
        return self._propagator.extract(carrier=headers)

    def inject(self, headers: MutableMapping[str, str]) -> MutableMapping[str, str]:
        """Write the active span's context into outbound *headers* and return them."""
        self._propagator.inject(headers)
        return headers

    @contextmanager
    def span(
        self,
        name: str,
        *,
        context: Context | None = None,
        kind: SpanKind = SpanKind.INTERNAL,
        attributes: Mapping[str, Any] | None = None,
    ) -> Generator[Span]:
        """Start *name* as the current span; it ends however the block exits.

        Exceptions escaping the block are recorded and set the span status
        to ERROR before propagating.
        """
        span = self._tracer.start_span(name, context=context, kind=kind, attributes=attributes)
        try:
            with trace.use_span(span, end_on_exit=True):
                yield span
        finally:
            _log_span(span)

    @contextmanager
    def request_span(
        self,
        name: str,
        headers: Mapping[str, str],
        attributes: Mapping[str, Any] | None = None,
    ) -> Generator[Span]:
        """Server span parented on the trace context found in *headers*."""
        with self.span(
            name, context=self.extract(headers), kind=SpanKind.SERVER, attributes=attributes
        ) as span:
            yield span

    def force_flush(self, timeout_millis: int = 30_000) -> bool:
        return self._provider.force_flush(timeout_millis)

    def shutdown(self) -> None:
        """Flush pending spans and release the exporter. Safe to call twice."""
        if self._closed:
            return
        self._closed = True
        try:
            self._provider.shutdown()
        except Exception:
            log.warning("tracing.shutdown_failed", service=self.service_name, exc_info=True)


# ── Bootstrap ────────────────────────────────────────────────────────


def _build_exporter(config: TracingConfig) -> SpanExporter | None:
    if config.exporter == "none":
        return None
    if config.exporter == "console":
        return ConsoleSpanExporter()

    from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter

    if config.endpoint:
        return OTLPSpanExporter(endpoint=config.endpoint)
    return OTLPSpanExporter()


def setup_tracing(
    service_name: str,
    config: TracingConfig | None = None,
    *,
    exporter: SpanExporter | None = None,
) -> TracingContext:
    """Build the tracing context for one service.

    An explicit *exporter* replaces the one selected by ``config.exporter``.
    With tracing disabled, every span is sampled out: the API still works
    and ``traceparent`` still propagates, but nothing is exported.
    """
    config = config or TracingConfig()
    provider = TracerProvider(
        sampler=ALWAYS_ON if config.enabled else ALWAYS_OFF,
        resource=Resource.create({SERVICE_NAME: service_name}),
    )
    if config.enabled:
        span_exporter = exporter if exporter is not None else _build_exporter(config)
        if span_exporter is not None:
            provider.add_span_processor(BatchSpanProcessor(span_exporter))

    log.debug(
        "tracing.configured",
        service=service_name,
        enabled=config.enabled,
        exporter=type(exporter).__name__ if exporter is not None else config.exporter,
    )
    return TracingContext(service_name, provider)
