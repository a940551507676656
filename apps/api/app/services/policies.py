"""Policy service layer."""

from __future__ import annotations

from typing import Any

from app.core.query_params import build_search_filter, build_where_clause
from app.errors import ApiError
from app.repositories.memory import InMemoryStore, PolicyRecord
from app.schemas.envelope import PaginationParams
from app.schemas.policy import CreatePolicyRequest, Policy

POLICY_SEARCH_FIELDS = ("policy_number",)


class PolicyService:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    def create_policy(self, payload: CreatePolicyRequest) -> Policy:
        if payload.end_date <= payload.start_date:
            raise ApiError(status_code=400, message="Policy end date must be after start date")
        record = self._store.create_policy(**payload.model_dump())
        return self._to_policy(record)

    def get_policy(self, *, owner_id: str, policy_id: str) -> Policy:
        record = self._store.get_policy_for_owner(owner_id=owner_id, policy_id=policy_id)
        if record is None:
            raise ApiError(status_code=404, message="Policy not found")
        return self._to_policy(record)

    def list_policies(
        self,
        *,
        pagination: PaginationParams,
        owner_id: str | None = None,
        search: str | None = None,
        filters: dict[str, Any] | None = None,
    ) -> tuple[list[Policy], int]:
        where = build_where_clause(filters or {})
        if owner_id is not None:
            where["user_id"] = owner_id
        where.update(build_search_filter(search, POLICY_SEARCH_FIELDS))
        records = self._store.find_policies(where, skip=pagination.skip, take=pagination.take)
        return [self._to_policy(record) for record in records], self._store.count_policies(where)

    def delete_policy(self, *, policy_id: str) -> None:
        self._store.delete_policy(policy_id)

    @staticmethod
    def _to_policy(record: PolicyRecord) -> Policy:
        return Policy(
            id=record.id,
            policy_number=record.policy_number,
            user_id=record.user_id,
            policy_type=record.policy_type,
            status=record.status,
            premium_amount=record.premium_amount,
            start_date=record.start_date,
            end_date=record.end_date,
            created_at=record.created_at,
        )
