"""Claim API schemas."""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field


class ClaimStatus(str, Enum):
    SUBMITTED = "SUBMITTED"
    UNDER_REVIEW = "UNDER_REVIEW"
    ADJUSTER_ASSIGNED = "ADJUSTER_ASSIGNED"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    PAID = "PAID"
    CLOSED = "CLOSED"


class Claim(BaseModel):
    id: str
    claim_number: str
    user_id: str
    policy_id: str
    status: ClaimStatus
    incident_date: date
    incident_location: str
    description: str
    assigned_adjuster_id: str | None = None
    payout_amount: Decimal | None = None
    submitted_at: datetime
    updated_at: datetime


class CreateClaimRequest(BaseModel):
    policy_id: str = Field(min_length=1)
    incident_date: date
    incident_location: str = Field(min_length=1)
    description: str = Field(min_length=10)


class UpdateClaimStatusRequest(BaseModel):
    status: ClaimStatus
    payout_amount: Decimal | None = Field(default=None, gt=0)


class AssignAdjusterRequest(BaseModel):
    adjuster_id: str = Field(min_length=1)
