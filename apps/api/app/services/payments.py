"""Payment and billing service layer."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from uuid import uuid4

from app.core.logging_safety import safe_log_identifier
from app.errors import ApiError
from app.repositories.memory import BillingStatementRecord, InMemoryStore, PaymentRecord
from app.schemas.payment import BillingStatement, MakePaymentRequest, Payment, PaymentStatus

PAYMENT_METHOD = "Credit Card"

logger = logging.getLogger(__name__)


def new_transaction_id(now: datetime | None = None) -> str:
    moment = now or datetime.now(UTC)
    return f"txn_{int(moment.timestamp() * 1000)}_{uuid4().hex[:9]}"


class PaymentService:
    """Records card payments as completed and serves billing statements."""

    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    def list_payments(self, *, owner_id: str) -> list[Payment]:
        return [self._to_payment(record) for record in self._store.find_payments({"user_id": owner_id})]

    def make_payment(self, *, owner_id: str, payload: MakePaymentRequest) -> Payment:
        policy_id = payload.policy_id or None
        if policy_id and self._store.get_policy_for_owner(owner_id=owner_id, policy_id=policy_id) is None:
            raise ApiError(status_code=404, message="Policy not found")

        record = self._store.create_payment(
            user_id=owner_id,
            policy_id=policy_id,
            amount=payload.amount,
            status=PaymentStatus.COMPLETED,
            method=PAYMENT_METHOD,
            transaction_id=new_transaction_id(),
        )
        logger.info(
            "payment.completed transaction_id=%s owner_id=%s",
            record.transaction_id,
            safe_log_identifier(owner_id, prefix="pid"),
        )
        return self._to_payment(record)

    def list_statements(self, *, owner_id: str) -> list[BillingStatement]:
        records = self._store.find_billing_statements({"user_id": owner_id})
        return [self._to_statement(record) for record in records]

    @staticmethod
    def _to_payment(record: PaymentRecord) -> Payment:
        return Payment(
            id=record.id,
            user_id=record.user_id,
            policy_id=record.policy_id,
            amount=record.amount,
            status=record.status,
            method=record.method,
            transaction_id=record.transaction_id,
            payment_date=record.payment_date,
        )

    @staticmethod
    def _to_statement(record: BillingStatementRecord) -> BillingStatement:
        return BillingStatement(
            id=record.id,
            user_id=record.user_id,
            policy_id=record.policy_id,
            statement_date=record.statement_date,
            due_date=record.due_date,
            amount_due=record.amount_due,
            is_paid=record.is_paid,
        )
