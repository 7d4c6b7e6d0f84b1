"""WeatherAPI client: city -> current Celsius temperature."""

from __future__ import annotations

import httpx
from pydantic import BaseModel, Field, ValidationError

from cepweather.domain.types import TemperatureLookupResult
from cepweather.infrastructure.http import FailureReason, UpstreamError, get_json


class WeatherLookupError(UpstreamError):
    """The weather API did not report a temperature."""


class _Current(BaseModel):
    temp_c: float = Field(allow_inf_nan=False)


class _CurrentResponse(BaseModel):
    current: _Current


class WeatherClient:
    """Calls ``{base_url}/current.json?key=...&q=<city>``.

    The city goes through httpx query encoding, so accents and spaces are
    escaped on the wire. A missing key is sent as an empty string and left
    for the API to reject.
    """

    def __init__(self, client: httpx.Client, base_url: str, api_key: str | None) -> None:
        self._client = client
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key or ""

    def current(self, city: str) -> TemperatureLookupResult:
        payload = get_json(
            self._client,
            f"{self._base_url}/current.json",
            error_cls=WeatherLookupError,
            params={"key": self._api_key, "q": city},
        )
        try:
            parsed = _CurrentResponse.model_validate(payload)
        except ValidationError as exc:
            raise WeatherLookupError(
                f"unexpected weather payload for {city!r}", reason=FailureReason.DECODE
            ) from exc
        return TemperatureLookupResult(temp_c=parsed.current.temp_c)
