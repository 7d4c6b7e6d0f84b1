"""Gateway-side client for the resolver's ``GET /weather`` endpoint."""

from __future__ import annotations

from collections.abc import Mapping

import httpx
from pydantic import ValidationError

from cepweather.domain.types import WeatherResult
from cepweather.infrastructure.http import FailureReason, UpstreamError, get_json


class ResolverCallError(UpstreamError):
    """The resolver was unreachable, answered non-200, or sent an unusable body."""


class ResolverClient:
    def __init__(self, client: httpx.Client, base_url: str) -> None:
        self._client = client
        self._base_url = base_url.rstrip("/")

    def fetch(self, cep: str, headers: Mapping[str, str] | None = None) -> WeatherResult:
        """Fetch the composed result for *cep*, forwarding *headers* (trace context)."""
        payload = get_json(
            self._client,
            f"{self._base_url}/weather",
            error_cls=ResolverCallError,
            params={"cep": cep},
            headers=dict(headers or {}),
        )
        try:
            return WeatherResult.model_validate(payload)
        except ValidationError as exc:
            raise ResolverCallError(
                "resolver returned an invalid weather payload", reason=FailureReason.DECODE
            ) from exc
