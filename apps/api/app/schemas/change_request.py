"""Policy change request API schemas."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class ChangeRequestStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class PolicyChangeRequest(BaseModel):
    id: str
    policy_id: str
    user_id: str
    request_type: str
    request_details: dict[str, Any]
    status: ChangeRequestStatus
    admin_notes: str | None = None
    submitted_at: datetime
    processed_at: datetime | None = None
    processed_by: str | None = None


class CreateChangeRequest(BaseModel):
    request_type: str = Field(min_length=1)
    request_details: dict[str, Any]


class ProcessChangeRequest(BaseModel):
    status: ChangeRequestStatus
    admin_notes: str | None = None
