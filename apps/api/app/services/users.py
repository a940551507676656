"""User service layer."""

from __future__ import annotations

from typing import Any

from app.core.query_params import build_search_filter, build_where_clause
from app.errors import ApiError
from app.repositories.memory import InMemoryStore, UserRecord
from app.schemas.envelope import PaginationParams
from app.schemas.user import UpdateProfileRequest, User

USER_SEARCH_FIELDS = ("first_name", "last_name", "email")


class UserService:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    def get_user(self, *, user_id: str) -> User:
        record = self._store.get_user(user_id)
        if record is None:
            raise ApiError(status_code=404, message="User not found")
        return self._to_user(record)

    def update_profile(self, *, user_id: str, payload: UpdateProfileRequest) -> User:
        changes = payload.model_dump(exclude_unset=True)
        record = self._store.update_user(user_id, **changes)
        return self._to_user(record)

    def set_active(self, *, user_id: str, is_active: bool) -> User:
        record = self._store.update_user(user_id, is_active=is_active)
        return self._to_user(record)

    def list_users(
        self,
        *,
        pagination: PaginationParams,
        search: str | None = None,
        filters: dict[str, Any] | None = None,
    ) -> tuple[list[User], int]:
        where = build_where_clause(filters or {})
        where.update(build_search_filter(search, USER_SEARCH_FIELDS))
        records = self._store.find_users(where, skip=pagination.skip, take=pagination.take)
        return [self._to_user(record) for record in records], self._store.count_users(where)

    @staticmethod
    def _to_user(record: UserRecord) -> User:
        return User(
            id=record.id,
            email=record.email,
            first_name=record.first_name,
            last_name=record.last_name,
            phone=record.phone,
            role=record.role,
            is_active=record.is_active,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )
