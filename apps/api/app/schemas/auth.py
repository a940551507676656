"""Authentication schemas."""

from enum import Enum

from pydantic import BaseModel, Field


class UserRole(str, Enum):
    CLIENT = "CLIENT"
    AGENT = "AGENT"
    ADMIN = "ADMIN"
    SUPER_ADMIN = "SUPER_ADMIN"
    CLAIMS_ADJUSTER = "CLAIMS_ADJUSTER"
    BILLING_SPECIALIST = "BILLING_SPECIALIST"


class AuthPrincipal(BaseModel):
    """Normalized authenticated principal used by business services."""

    id: str = Field(min_length=1)
    email: str = Field(min_length=1)
    role: UserRole = UserRole.CLIENT
