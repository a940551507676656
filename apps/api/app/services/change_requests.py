"""Policy change request service layer."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from app.core.logging_safety import safe_log_identifier
from app.core.query_params import build_where_clause
from app.errors import ApiError
from app.repositories.memory import ChangeRequestRecord, InMemoryStore
from app.schemas.change_request import (
    ChangeRequestStatus,
    CreateChangeRequest,
    PolicyChangeRequest,
    ProcessChangeRequest,
)
from app.schemas.envelope import PaginationParams

logger = logging.getLogger(__name__)


class ChangeRequestService:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    def submit(self, *, owner_id: str, policy_id: str, payload: CreateChangeRequest) -> PolicyChangeRequest:
        policy = self._store.get_policy_for_owner(owner_id=owner_id, policy_id=policy_id)
        if policy is None:
            raise ApiError(status_code=404, message="Policy not found")

        record = self._store.create_change_request(
            policy_id=policy.id,
            user_id=owner_id,
            request_type=payload.request_type,
            request_details=payload.request_details,
        )
        logger.info(
            "policy_change.submitted request_id=%s owner_id=%s type=%s",
            record.id,
            safe_log_identifier(owner_id, prefix="pid"),
            record.request_type,
        )
        return self._to_change_request(record)

    def list_for_owner(self, *, owner_id: str) -> list[PolicyChangeRequest]:
        records = self._store.find_change_requests({"user_id": owner_id})
        return [self._to_change_request(record) for record in records]

    def list_requests(
        self,
        *,
        pagination: PaginationParams,
        filters: dict[str, Any] | None = None,
    ) -> tuple[list[PolicyChangeRequest], int]:
        where = build_where_clause(filters or {})
        records = self._store.find_change_requests(where, skip=pagination.skip, take=pagination.take)
        return [self._to_change_request(record) for record in records], self._store.count_change_requests(where)

    def process(
        self,
        *,
        request_id: str,
        payload: ProcessChangeRequest,
        admin_id: str,
    ) -> PolicyChangeRequest:
        record = self._store.update_change_request(
            request_id,
            status=payload.status,
            admin_notes=payload.admin_notes,
            processed_at=datetime.now(UTC),
            processed_by=admin_id,
        )
        if record.status is ChangeRequestStatus.APPROVED:
            # Approved changes are applied to the policy by underwriting, outside this API.
            logger.info(
                "policy_change.approved request_id=%s policy_id=%s type=%s",
                record.id,
                record.policy_id,
                record.request_type,
            )
        return self._to_change_request(record)

    @staticmethod
    def _to_change_request(record: ChangeRequestRecord) -> PolicyChangeRequest:
        return PolicyChangeRequest(
            id=record.id,
            policy_id=record.policy_id,
            user_id=record.user_id,
            request_type=record.request_type,
            request_details=record.request_details,
            status=record.status,
            admin_notes=record.admin_notes,
            submitted_at=record.submitted_at,
            processed_at=record.processed_at,
            processed_by=record.processed_by,
        )
