"""Admin audit trail."""

from __future__ import annotations

import logging
from typing import Any

from fastapi.encoders import jsonable_encoder

from app.core.logging_safety import safe_log_identifier
from app.repositories.memory import AuditLogRecord, InMemoryStore
from app.schemas.audit import AuditAction

logger = logging.getLogger(__name__)


class AuditTrail:
    """Records one entry per admin mutation."""

    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    def record(
        self,
        *,
        admin_id: str,
        action: AuditAction,
        target_type: str,
        target_id: str,
        details: dict[str, Any] | None = None,
    ) -> AuditLogRecord:
        entry = self._store.create_audit_log(
            admin_user_id=admin_id,
            action=action,
            target_type=target_type,
            target_id=target_id,
            details=jsonable_encoder(details or {}),
        )
        logger.info(
            "audit.recorded action=%s target_type=%s target_id=%s admin_id=%s",
            action.value,
            target_type,
            target_id,
            safe_log_identifier(admin_id, prefix="pid"),
        )
        return entry
