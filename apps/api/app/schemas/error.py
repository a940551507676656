"""API error response schemas."""

from pydantic import BaseModel


class AuthErrorResponse(BaseModel):
    success: bool = False
    error: str
    message: str | None = None


class ValidationErrorResponse(BaseModel):
    success: bool = False
    error: str
    details: list[dict[str, str]] | None = None


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    details: str | None = None
