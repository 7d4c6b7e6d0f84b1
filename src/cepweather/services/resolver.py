"""ResolverService — CEP -> city -> temperature -> WeatherResult.

Linear pipeline; each stage either advances or ends the request:

1. length check            -> INVALID_INPUT (no outbound call)
2. ``fetchCity`` span       -> NOT_FOUND on any directory failure
3. ``fetchTemperature`` span -> UPSTREAM_UNAVAILABLE on any weather failure
4. Fahrenheit/Kelvin derived from Celsius; a non-finite result is a
   decode failure of the weather reading

An empty locality stays in the NOT_FOUND class; ``detail["reason"]``
(``empty_locality`` vs ``transport``/``http_status``/``decode``) keeps it
distinguishable in logs and spans.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError

from cepweather.domain.postal_code import cep_length, is_valid_cep
from cepweather.domain.types import WeatherResult
from cepweather.infrastructure.directory import DirectoryLookupError
from cepweather.infrastructure.http import FailureReason
from cepweather.infrastructure.weather import WeatherLookupError
from cepweather.services.base import BaseService
from cepweather.services.result import ErrorCode, ServiceResult
from cepweather.services.telemetry import get_current_trace_id

if TYPE_CHECKING:
    from cepweather.infrastructure.directory import DirectoryClient
    from cepweather.infrastructure.weather import WeatherClient
    from cepweather.services.telemetry import TracingContext

logger = logging.getLogger(__name__)

OP = "resolve_weather"

MSG_INVALID = "invalid zipcode"
MSG_NOT_FOUND = "can not find zipcode"
MSG_TEMPERATURE = "temperature service unavailable"


class ResolverService(BaseService):
    """Back-resolver pipeline over a directory client and a weather client."""

    def __init__(
        self,
        tracing: TracingContext,
        directory: DirectoryClient,
        weather: WeatherClient,
    ) -> None:
        super().__init__(tracing)
        self._directory = directory
        self._weather = weather

    def resolve(self, cep: str) -> ServiceResult:
        if not is_valid_cep(cep):
            return self._fail(
                None, OP, ErrorCode.INVALID_INPUT, MSG_INVALID, length=cep_length(cep)
            )

        with self._tracing.span("fetchCity", attributes={"cepweather.cep": cep}) as span:
            try:
                found = self._directory.lookup(cep)
            except DirectoryLookupError as exc:
                return self._fail(
                    span,
                    OP,
                    ErrorCode.NOT_FOUND,
                    MSG_NOT_FOUND,
                    reason=str(exc.reason),
                    upstream_status=exc.status_code,
                    cep=cep,
                )
            span.set_attribute("cepweather.city", found.city)

        with self._tracing.span(
            "fetchTemperature", attributes={"cepweather.city": found.city}
        ) as span:
            try:
                reading = self._weather.current(found.city)
            except WeatherLookupError as exc:
                return self._fail(
                    span,
                    OP,
                    ErrorCode.UPSTREAM_UNAVAILABLE,
                    MSG_TEMPERATURE,
                    reason=str(exc.reason),
                    upstream_status=exc.status_code,
                    city=found.city,
                )
            span.set_attribute("cepweather.temp_c", reading.temp_c)
            try:
                weather = WeatherResult.from_celsius(found.city, reading.temp_c)
            except ValidationError:
                # Celsius reading so large that F or K overflows to infinity.
                return self._fail(
                    span,
                    OP,
                    ErrorCode.UPSTREAM_UNAVAILABLE,
                    MSG_TEMPERATURE,
                    reason=str(FailureReason.DECODE),
                    upstream_status=None,
                    city=found.city,
                )

        logger.debug("Resolved %s to %s at %.2fC", cep, weather.city, weather.temp_c)
        return ServiceResult(
            ok=True,
            op=OP,
            data=weather.to_wire(),
            meta={"trace_id": get_current_trace_id()},
        )
