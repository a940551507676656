"""Client message API schemas."""

from datetime import datetime

from pydantic import BaseModel, Field


class Message(BaseModel):
    id: str
    sender_id: str
    receiver_id: str | None = None
    claim_id: str | None = None
    content: str
    is_read: bool
    is_internal: bool
    timestamp: datetime


class SendMessageRequest(BaseModel):
    receiver_id: str | None = None
    claim_id: str | None = None
    content: str = Field(min_length=1)
