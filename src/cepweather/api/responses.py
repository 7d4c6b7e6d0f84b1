"""ServiceResult -> HTTP response mapping shared by both applications.

Success bodies are the WeatherResult JSON. Failures are a short plain-text
message; no partial result is ever returned.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Response
from fastapi.responses import JSONResponse, PlainTextResponse

from cepweather.services.result import ErrorCode, ServiceResult
from cepweather.services.telemetry import record_failure

if TYPE_CHECKING:
    from opentelemetry.trace import Span

STATUS_BY_CODE: dict[ErrorCode, int] = {
    ErrorCode.INVALID_INPUT: 422,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.UPSTREAM_UNAVAILABLE: 500,
    ErrorCode.DECODE_ERROR: 500,
}


def to_response(result: ServiceResult) -> Response:
    if result.ok:
        return JSONResponse(result.data)
    assert result.error is not None
    return PlainTextResponse(result.error.message, status_code=STATUS_BY_CODE[result.error.code])


def finish_request(span: Span, result: ServiceResult) -> Response:
    """Render *result* and stamp the request span with its outcome."""
    response = to_response(result)
    span.set_attribute("http.response.status_code", response.status_code)
    if result.error is not None:
        record_failure(span, result.error)
    return response
