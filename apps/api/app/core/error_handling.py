"""Central error classification and error-envelope rendering."""

from __future__ import annotations

import logging
import traceback
from datetime import UTC, datetime
from typing import Literal

from fastapi import Request
from fastapi.responses import JSONResponse

from app.errors import AppError, ErrorReport
from app.schemas.envelope import ErrorEnvelope

Environment = Literal["development", "production", "test"]

logger = logging.getLogger(__name__)

_GENERIC_SERVER_ERROR = "Internal Server Error"


def classify_error(exc: BaseException) -> ErrorReport:
    """Map an exception to its HTTP report; unknown errors become a generic 500."""
    if isinstance(exc, AppError):
        return exc.report()
    return ErrorReport(status_code=500, message=_GENERIC_SERVER_ERROR)


def build_error_envelope(
    exc: BaseException,
    report: ErrorReport,
    *,
    environment: Environment,
    now: datetime | None = None,
) -> ErrorEnvelope:
    message = report.message
    details = report.details
    if details is None and environment == "development":
        details = report.debug_details

    if environment == "production" and report.status_code == 500:
        message = _GENERIC_SERVER_ERROR
        details = None

    envelope = ErrorEnvelope(error=message, details=details)
    if environment == "development":
        envelope.stack = "".join(traceback.format_exception(exc))
        envelope.timestamp = now or datetime.now(UTC)
    return envelope


def log_error(exc: BaseException, report: ErrorReport, *, method: str, url: str) -> None:
    level = logging.ERROR if report.status_code >= 500 else logging.WARNING
    logger.log(
        level,
        "request.error status=%s method=%s url=%s message=%s timestamp=%s",
        report.status_code,
        method,
        url,
        str(exc) or type(exc).__name__,
        datetime.now(UTC).isoformat(),
        exc_info=exc,
    )


def render_error(request: Request, exc: BaseException, *, environment: Environment) -> JSONResponse:
    report = classify_error(exc)
    log_error(exc, report, method=request.method, url=str(request.url))
    envelope = build_error_envelope(exc, report, environment=environment)
    return JSONResponse(
        status_code=report.status_code,
        content=envelope.model_dump(mode="json", exclude_none=True),
    )


__all__ = ["Environment", "build_error_envelope", "classify_error", "log_error", "render_error"]
