"""Document service layer."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from app.adapters.storage import StorageProvider
from app.core.logging_safety import safe_log_identifier
from app.core.query_params import build_where_clause
from app.errors import ApiError
from app.repositories.memory import DocumentRecord, InMemoryStore
from app.schemas.document import Document, DocumentType
from app.schemas.envelope import PaginationParams
from app.services.uploads import IncomingFile

DOCUMENT_FOLDER = "assureme-documents"

logger = logging.getLogger(__name__)


class DocumentService:
    def __init__(self, store: InMemoryStore, storage: StorageProvider) -> None:
        self._store = store
        self._storage = storage

    def list_documents(
        self,
        *,
        owner_id: str,
        pagination: PaginationParams,
        filters: dict[str, Any] | None = None,
    ) -> tuple[list[Document], int]:
        where = build_where_clause({**(filters or {}), "user_id": owner_id})
        records = self._store.find_documents(where, skip=pagination.skip, take=pagination.take)
        return [self._to_document(record) for record in records], self._store.count_documents(where)

    def upload_document(
        self,
        *,
        owner_id: str,
        incoming: IncomingFile,
        document_type: DocumentType,
        policy_id: str | None = None,
        claim_id: str | None = None,
    ) -> Document:
        if policy_id and self._store.get_policy_for_owner(owner_id=owner_id, policy_id=policy_id) is None:
            raise ApiError(status_code=404, message="Policy not found")
        if claim_id and self._store.get_claim_for_owner(owner_id=owner_id, claim_id=claim_id) is None:
            raise ApiError(status_code=404, message="Claim not found")

        timestamp_ms = int(datetime.now(UTC).timestamp() * 1000)
        stored = self._storage.upload(
            incoming.content,
            folder=DOCUMENT_FOLDER,
            public_id=f"{owner_id}_{timestamp_ms}_{uuid4().hex[:8]}",
            content_type=incoming.content_type,
        )
        record = self._store.create_document(
            user_id=owner_id,
            filename=incoming.filename,
            file_type=incoming.content_type,
            file_size=incoming.size,
            url=stored.url,
            document_type=document_type,
            policy_id=policy_id or None,
            claim_id=claim_id or None,
        )
        logger.info(
            "document.uploaded document_id=%s owner_id=%s size=%s type=%s",
            record.id,
            safe_log_identifier(owner_id, prefix="pid"),
            record.file_size,
            record.file_type,
        )
        return self._to_document(record)

    @staticmethod
    def _to_document(record: DocumentRecord) -> Document:
        return Document(
            id=record.id,
            user_id=record.user_id,
            filename=record.filename,
            file_type=record.file_type,
            file_size=record.file_size,
            url=record.url,
            document_type=record.document_type,
            policy_id=record.policy_id,
            claim_id=record.claim_id,
            uploaded_at=record.uploaded_at,
        )
