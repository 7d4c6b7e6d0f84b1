"""BaseService — shared foundation for the resolver and gateway pipelines.

Every service receives a :class:`TracingContext` at construction time and
opens its stage spans through it. Failures are turned into ServiceResult
errors in one place so that the log line and the span status always agree.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from cepweather.services.result import ErrorCode, ServiceResult
from cepweather.services.telemetry import record_failure

if TYPE_CHECKING:
    from opentelemetry.trace import Span

    from cepweather.services.telemetry import TracingContext

logger = logging.getLogger(__name__)


class BaseService:
    """Base for the request pipelines.

    Usage::

        class ResolverService(BaseService):
            def resolve(self, cep: str) -> ServiceResult:
                with self._tracing.span("fetchCity") as span:
                    ...
                    return self._fail(span, "resolve_weather", ErrorCode.NOT_FOUND, "...")
    """

    def __init__(self, tracing: TracingContext) -> None:
        self._tracing = tracing

    def _fail(
        self,
        span: Span | None,
        op: str,
        code: ErrorCode,
        message: str,
        **detail: Any,
    ) -> ServiceResult:
        """Build a failed result and mark *span* (if any) as errored."""
        result = ServiceResult.failure(op, code, message, **detail)
        assert result.error is not None
        if span is not None:
            record_failure(span, result.error)
        logger.info("%s failed: %s %s", op, code, detail or "")
        return result
