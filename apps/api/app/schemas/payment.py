"""Payment and billing statement API schemas."""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field


class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"


class Payment(BaseModel):
    id: str
    user_id: str
    policy_id: str | None = None
    amount: Decimal
    status: PaymentStatus
    method: str
    transaction_id: str
    payment_date: datetime


class MakePaymentRequest(BaseModel):
    policy_id: str | None = None
    amount: Decimal = Field(gt=0)
    payment_method_token: str = Field(min_length=1)


class BillingStatement(BaseModel):
    id: str
    user_id: str
    policy_id: str
    statement_date: date
    due_date: date
    amount_due: Decimal
    is_paid: bool
