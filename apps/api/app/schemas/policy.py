"""Policy API schemas."""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field


class PolicyType(str, Enum):
    AUTO = "AUTO"
    HOME = "HOME"
    LIFE = "LIFE"
    HEALTH = "HEALTH"
    OTHER = "OTHER"


class PolicyStatus(str, Enum):
    ACTIVE = "ACTIVE"
    PENDING_RENEWAL = "PENDING_RENEWAL"
    EXPIRED = "EXPIRED"
    CANCELLED = "CANCELLED"


class Policy(BaseModel):
    id: str
    policy_number: str
    user_id: str
    policy_type: PolicyType
    status: PolicyStatus
    premium_amount: Decimal
    start_date: date
    end_date: date
    created_at: datetime


class CreatePolicyRequest(BaseModel):
    user_id: str = Field(min_length=1)
    policy_number: str = Field(min_length=1)
    policy_type: PolicyType
    status: PolicyStatus = PolicyStatus.ACTIVE
    premium_amount: Decimal = Field(gt=0)
    start_date: date
    end_date: date
