"""Document API schemas."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel


class DocumentType(str, Enum):
    POLICY_CONTRACT = "POLICY_CONTRACT"
    DECLARATION_PAGE = "DECLARATION_PAGE"
    ENDORSEMENT = "ENDORSEMENT"
    BILLING_STATEMENT = "BILLING_STATEMENT"
    CLAIM_SUPPORT = "CLAIM_SUPPORT"
    ID_CARD = "ID_CARD"
    OTHER = "OTHER"


class Document(BaseModel):
    id: str
    user_id: str
    filename: str
    file_type: str
    file_size: int
    url: str
    document_type: DocumentType
    policy_id: str | None = None
    claim_id: str | None = None
    uploaded_at: datetime
