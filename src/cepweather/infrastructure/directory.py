"""ViaCEP postal directory client: CEP -> city.

ViaCEP answers unknown-but-well-formed codes with ``200 {"erro": true}``,
so a missing or empty ``localidade`` is a failure in its own right.
"""

from __future__ import annotations

import httpx

from cepweather.domain.types import DirectoryLookupResult
from cepweather.infrastructure.http import FailureReason, UpstreamError, get_json


class DirectoryLookupError(UpstreamError):
    """The directory could not resolve a city for the code."""


class DirectoryClient:
    """Looks up ``{base_url}/{cep}/json/``."""

    def __init__(self, client: httpx.Client, base_url: str) -> None:
        self._client = client
        self._base_url = base_url.rstrip("/")

    def lookup(self, cep: str) -> DirectoryLookupResult:
        url = f"{self._base_url}/{cep}/json/"
        payload = get_json(self._client, url, error_cls=DirectoryLookupError)

        city = payload.get("localidade") if isinstance(payload, dict) else None
        if not isinstance(city, str) or not city:
            raise DirectoryLookupError(
                f"no locality for {cep}", reason=FailureReason.EMPTY_LOCALITY
            )
        return DirectoryLookupResult(city=city)
