"""GatewayService — validate the request body and delegate to the resolver."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError

from cepweather.domain.postal_code import is_valid_cep
from cepweather.domain.types import PostalCodeRequest
from cepweather.infrastructure.http import FailureReason
from cepweather.infrastructure.resolver_client import ResolverCallError
from cepweather.services.base import BaseService
from cepweather.services.result import ErrorCode, ServiceResult
from cepweather.services.telemetry import get_current_trace_id

if TYPE_CHECKING:
    from cepweather.infrastructure.resolver_client import ResolverClient
    from cepweather.services.telemetry import TracingContext

logger = logging.getLogger(__name__)

OP = "get_weather"

MSG_INVALID = "invalid zipcode"
MSG_FETCH = "error fetching weather"
MSG_DECODE = "error decoding weather data"


class GatewayService(BaseService):
    """Front-gateway pipeline. The resolver's payload is relayed unchanged."""

    def __init__(self, tracing: TracingContext, resolver: ResolverClient) -> None:
        super().__init__(tracing)
        self._resolver = resolver

    def parse_request(self, body: bytes) -> PostalCodeRequest | None:
        """Decode a ``{"cep": "..."}`` body; None when malformed or the wrong length."""
        try:
            request = PostalCodeRequest.model_validate_json(body)
        except ValidationError:
            return None
        return request if is_valid_cep(request.cep) else None

    def get_weather_from_body(self, body: bytes) -> ServiceResult:
        request = self.parse_request(body)
        if request is None:
            return self._fail(None, OP, ErrorCode.INVALID_INPUT, MSG_INVALID)
        return self.get_weather(request.cep)

    def get_weather(self, cep: str) -> ServiceResult:
        if not is_valid_cep(cep):
            return self._fail(None, OP, ErrorCode.INVALID_INPUT, MSG_INVALID)

        headers = self._tracing.inject({})
        try:
            weather = self._resolver.fetch(cep, headers=headers)
        except ResolverCallError as exc:
            if exc.reason is FailureReason.DECODE:
                return self._fail(None, OP, ErrorCode.DECODE_ERROR, MSG_DECODE, reason=str(exc.reason))
            return self._fail(
                None,
                OP,
                ErrorCode.UPSTREAM_UNAVAILABLE,
                MSG_FETCH,
                reason=str(exc.reason),
                upstream_status=exc.status_code,
            )

        logger.debug("Relayed weather for %s (%s)", cep, weather.city)
        return ServiceResult(
            ok=True,
            op=OP,
            data=weather.to_wire(),
            meta={"trace_id": get_current_trace_id()},
        )
