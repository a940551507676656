"""Per-request access logging with correlation ids."""

from __future__ import annotations

import logging
import time
from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from app.core.error_handling import Environment, render_error
from app.core.logging_safety import safe_log_identifier

CORRELATION_HEADER = "X-Correlation-Id"

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs each request and renders unexpected errors inside the CORS layer."""

    def __init__(self, app: ASGIApp, *, environment: Environment) -> None:
        super().__init__(app)
        self.environment = environment

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or f"req-{uuid4()}"
        request.state.correlation_id = correlation_id
        safe_correlation_id = safe_log_identifier(correlation_id, prefix="cid")
        client_host = request.client.host if request.client else "-"

        logger.info(
            "request.started correlation_id=%s method=%s path=%s client=%s",
            safe_correlation_id,
            request.method,
            request.url.path,
            client_host,
        )
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                "request.failed correlation_id=%s method=%s path=%s duration_ms=%.1f",
                safe_correlation_id,
                request.method,
                request.url.path,
                (time.perf_counter() - started) * 1000,
            )
            response = render_error(request, exc, environment=self.environment)
        else:
            logger.info(
                "request.completed correlation_id=%s method=%s path=%s status=%s duration_ms=%.1f",
                safe_correlation_id,
                request.method,
                request.url.path,
                response.status_code,
                (time.perf_counter() - started) * 1000,
            )

        response.headers[CORRELATION_HEADER] = correlation_id
        return response
