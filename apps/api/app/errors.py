"""Application exception types.

Errors are tagged where they are raised: each subclass reports its own HTTP status,
message and details via ``report()``.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from app.schemas.envelope import ErrorEnvelope, FieldIssue


@dataclass(frozen=True, slots=True)
class ErrorReport:
    status_code: int
    message: str
    details: Any = None
    # Only surfaced when running in development.
    debug_details: str | None = None


class AppError(Exception):
    """Base class for errors that carry their own HTTP classification."""

    def report(self) -> ErrorReport:
        raise NotImplementedError


class ApiError(AppError):
    """Error raised with an explicit status code, used verbatim."""

    def __init__(self, status_code: int, message: str, details: Any = None) -> None:
        self.status_code = status_code
        self.message = message
        self.details = details
        super().__init__(message)

    def report(self) -> ErrorReport:
        return ErrorReport(status_code=self.status_code, message=self.message, details=self.details)


_BODY_LOCATIONS = frozenset({"body", "query", "path", "header", "cookie", "form"})


class RequestValidationFailed(AppError):
    """Client input failed schema validation."""

    def __init__(self, issues: Sequence[FieldIssue]) -> None:
        self.issues = list(issues)
        super().__init__("Validation Error")

    @classmethod
    def from_errors(cls, errors: Iterable[Mapping[str, Any]]) -> RequestValidationFailed:
        """Build from pydantic / FastAPI ``errors()`` output."""
        issues = []
        for error in errors:
            loc = [str(part) for part in error.get("loc", ())]
            if len(loc) > 1 and loc[0] in _BODY_LOCATIONS:
                loc = loc[1:]
            issues.append(FieldIssue(field=".".join(loc), message=str(error.get("msg", "Invalid value"))))
        return cls(issues)

    def report(self) -> ErrorReport:
        return ErrorReport(
            status_code=400,
            message="Validation Error",
            details=[issue.model_dump() for issue in self.issues],
        )


class PersistenceErrorCode(str, Enum):
    UNIQUE_CONSTRAINT = "P2002"
    FOREIGN_KEY_CONSTRAINT = "P2003"
    RELATION_VIOLATION = "P2014"
    COLUMN_NOT_FOUND = "P2022"
    RECORD_NOT_FOUND = "P2025"


class PersistenceError(AppError):
    """Constraint or lookup failure reported by the persistence layer."""

    def __init__(
        self,
        code: PersistenceErrorCode | str,
        message: str,
        *,
        target: Sequence[str] | None = None,
    ) -> None:
        self.code = code.value if isinstance(code, PersistenceErrorCode) else code
        self.message = message
        self.target = list(target) if target else []
        super().__init__(message)

    def report(self) -> ErrorReport:
        if self.code == PersistenceErrorCode.UNIQUE_CONSTRAINT:
            fields = ", ".join(self.target) or "unknown field"
            return ErrorReport(409, "Resource already exists", f"Duplicate value for: {fields}")
        if self.code == PersistenceErrorCode.RECORD_NOT_FOUND:
            return ErrorReport(404, "Resource not found")
        if self.code == PersistenceErrorCode.FOREIGN_KEY_CONSTRAINT:
            return ErrorReport(400, "Invalid reference", "Referenced resource does not exist")
        if self.code == PersistenceErrorCode.RELATION_VIOLATION:
            return ErrorReport(
                400,
                "Invalid relation",
                "The change you are trying to make would violate a relation constraint",
            )
        return ErrorReport(500, "Database error", debug_details=self.message)


class TokenError(AppError):
    """A bearer token could not be used."""

    message = "Invalid token"

    def __init__(self, reason: str | None = None) -> None:
        self.reason = reason
        super().__init__(reason or self.message)

    def report(self) -> ErrorReport:
        return ErrorReport(status_code=401, message=self.message)


class InvalidTokenError(TokenError):
    message = "Invalid token"


class TokenExpiredError(TokenError):
    message = "Token expired"


class UploadErrorCode(str, Enum):
    LIMIT_FILE_SIZE = "LIMIT_FILE_SIZE"
    LIMIT_FILE_COUNT = "LIMIT_FILE_COUNT"
    LIMIT_UNEXPECTED_FILE = "LIMIT_UNEXPECTED_FILE"


class UploadError(AppError):
    """Multipart upload exceeded a configured limit."""

    def __init__(
        self,
        code: UploadErrorCode,
        *,
        field: str | None = None,
        max_file_size: int | None = None,
    ) -> None:
        self.code = code
        self.field = field
        self.max_file_size = max_file_size
        super().__init__(code.value)

    def report(self) -> ErrorReport:
        if self.code is UploadErrorCode.LIMIT_FILE_SIZE:
            details = None
            if self.max_file_size:
                details = f"Maximum file size is {self.max_file_size // (1024 * 1024) or 1}MB"
            return ErrorReport(413, "File too large", details)
        if self.code is UploadErrorCode.LIMIT_FILE_COUNT:
            return ErrorReport(400, "Too many files")
        return ErrorReport(400, "Unexpected file field", self.field)


class AuthRejection(Exception):
    """Terminal authentication/authorization failure rendered without classification."""

    def __init__(self, status_code: int, error: str, message: str | None = None) -> None:
        self.status_code = status_code
        self.payload = ErrorEnvelope(error=error, message=message)
        super().__init__(message or error)


__all__ = [
    "ApiError",
    "AppError",
    "AuthRejection",
    "ErrorReport",
    "InvalidTokenError",
    "PersistenceError",
    "PersistenceErrorCode",
    "RequestValidationFailed",
    "TokenError",
    "TokenExpiredError",
    "UploadError",
    "UploadErrorCode",
]
