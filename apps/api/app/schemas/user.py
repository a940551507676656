"""User API schemas."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from app.schemas.auth import UserRole


class User(BaseModel):
    id: str
    email: str
    first_name: str
    last_name: str
    phone: str | None = None
    role: UserRole
    is_active: bool
    created_at: datetime
    updated_at: datetime


class UpdateProfileRequest(BaseModel):
    """Partial profile update; omitted fields are left unchanged, names cannot be cleared."""

    first_name: str | None = Field(default=None, min_length=1)
    last_name: str | None = Field(default=None, min_length=1)
    phone: str | None = None

    @field_validator("first_name", "last_name")
    @classmethod
    def _reject_null_name(cls, value: str | None) -> str:
        if value is None:
            raise ValueError("Name cannot be null")
        return value


class UpdateUserStatusRequest(BaseModel):
    is_active: bool
