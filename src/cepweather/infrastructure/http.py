"""Shared httpx client construction and the upstream error hierarchy.

Every outbound call in the system goes through a client built here so that
timeouts and headers are uniform. No retries: the first failure is terminal.
"""

from __future__ import annotations

from enum import StrEnum

import httpx

from cepweather.config.models import HttpConfig


class FailureReason(StrEnum):
    """Why an upstream call failed. Recorded in logs and span attributes."""

    TRANSPORT = "transport"
    HTTP_STATUS = "http_status"
    DECODE = "decode"
    EMPTY_LOCALITY = "empty_locality"


class UpstreamError(Exception):
    """An outbound call did not produce a usable payload."""

    def __init__(self, message: str, *, reason: FailureReason, status_code: int | None = None) -> None:
        super().__init__(message)
        self.reason = reason
        self.status_code = status_code


def build_http_client(
    config: HttpConfig | None = None,
    *,
    base_url: str = "",
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Create an ``httpx.Client`` with the configured timeout and User-Agent.

    *transport* is accepted so tests can route calls to an
    ``httpx.MockTransport`` or an in-process app.
    """
    config = config or HttpConfig()
    return httpx.Client(
        base_url=base_url,
        timeout=httpx.Timeout(config.timeout_seconds),
        headers={"User-Agent": config.user_agent, "Accept": "application/json"},
        transport=transport,
    )


def get_json(client: httpx.Client, url: str, *, error_cls: type[UpstreamError], **kwargs: object) -> object:
    """GET *url* and decode a JSON body, translating every failure into *error_cls*."""
    try:
        resp = client.get(url, **kwargs)  # type: ignore[arg-type]
    except httpx.HTTPError as exc:
        raise error_cls(f"request to {url} failed: {exc}", reason=FailureReason.TRANSPORT) from exc

    if resp.status_code != httpx.codes.OK:
        raise error_cls(
            f"{url} answered {resp.status_code}",
            reason=FailureReason.HTTP_STATUS,
            status_code=resp.status_code,
        )

    try:
        return resp.json()
    except ValueError as exc:
        raise error_cls(f"{url} returned malformed JSON", reason=FailureReason.DECODE) from exc
