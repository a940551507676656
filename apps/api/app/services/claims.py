"""Claim service layer."""

from __future__ import annotations

import logging
from typing import Any

from app.core.logging_safety import safe_log_identifier
from app.core.query_params import build_search_filter, build_where_clause
from app.errors import ApiError
from app.repositories.memory import ClaimRecord, InMemoryStore
from app.schemas.auth import UserRole
from app.schemas.claim import (
    AssignAdjusterRequest,
    Claim,
    ClaimStatus,
    CreateClaimRequest,
    UpdateClaimStatusRequest,
)
from app.schemas.envelope import PaginationParams

CLAIM_SEARCH_FIELDS = ("claim_number", "incident_location")
ADJUSTER_ROLES = frozenset({UserRole.CLAIMS_ADJUSTER, UserRole.ADMIN, UserRole.SUPER_ADMIN})

logger = logging.getLogger(__name__)


class ClaimService:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    def create_claim(self, *, owner_id: str, payload: CreateClaimRequest) -> Claim:
        policy = self._store.get_policy_for_owner(owner_id=owner_id, policy_id=payload.policy_id)
        if policy is None:
            raise ApiError(status_code=404, message="Policy not found")

        record = self._store.create_claim(
            user_id=owner_id,
            policy_id=payload.policy_id,
            incident_date=payload.incident_date,
            incident_location=payload.incident_location,
            description=payload.description,
        )
        logger.info(
            "claim.submitted claim_number=%s owner_id=%s",
            record.claim_number,
            safe_log_identifier(owner_id, prefix="pid"),
        )
        return self._to_claim(record)

    def get_claim(self, *, owner_id: str, claim_id: str) -> Claim:
        record = self._store.get_claim_for_owner(owner_id=owner_id, claim_id=claim_id)
        if record is None:
            raise ApiError(status_code=404, message="Claim not found")
        return self._to_claim(record)

    def list_claims(
        self,
        *,
        pagination: PaginationParams,
        owner_id: str | None = None,
        search: str | None = None,
        filters: dict[str, Any] | None = None,
    ) -> tuple[list[Claim], int]:
        where = build_where_clause(filters or {})
        if owner_id is not None:
            where["user_id"] = owner_id
        where.update(build_search_filter(search, CLAIM_SEARCH_FIELDS))
        records = self._store.find_claims(where, skip=pagination.skip, take=pagination.take)
        return [self._to_claim(record) for record in records], self._store.count_claims(where)

    def update_status(self, *, claim_id: str, payload: UpdateClaimStatusRequest) -> Claim:
        changes: dict[str, Any] = {"status": payload.status}
        if payload.payout_amount is not None:
            changes["payout_amount"] = payload.payout_amount
        record = self._store.update_claim(claim_id, **changes)
        logger.info("claim.status_updated claim_number=%s status=%s", record.claim_number, record.status.value)
        return self._to_claim(record)

    def assign_adjuster(self, *, claim_id: str, payload: AssignAdjusterRequest) -> Claim:
        adjuster = self._store.get_user(payload.adjuster_id)
        if adjuster is None or not adjuster.is_active or adjuster.role not in ADJUSTER_ROLES:
            raise ApiError(status_code=404, message="Adjuster not found or invalid role")

        record = self._store.update_claim(
            claim_id,
            assigned_adjuster_id=payload.adjuster_id,
            status=ClaimStatus.ADJUSTER_ASSIGNED,
        )
        return self._to_claim(record)

    @staticmethod
    def _to_claim(record: ClaimRecord) -> Claim:
        return Claim(
            id=record.id,
            claim_number=record.claim_number,
            user_id=record.user_id,
            policy_id=record.policy_id,
            status=record.status,
            incident_date=record.incident_date,
            incident_location=record.incident_location,
            description=record.description,
            assigned_adjuster_id=record.assigned_adjuster_id,
            payout_amount=record.payout_amount,
            submitted_at=record.submitted_at,
            updated_at=record.updated_at,
        )
