"""In-memory repositories used by the API scaffold and tests.

Queries accept the same ``where`` shapes the query helpers build: plain equality,
``{"contains": ..., "mode": "insensitive"}`` substring matches and an ``OR`` list.
Constraint failures raise :class:`PersistenceError` with provider error codes.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, fields, replace
from datetime import UTC, date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, TypeVar
from uuid import uuid4

from app.errors import PersistenceError, PersistenceErrorCode
from app.schemas.audit import AuditAction
from app.schemas.auth import UserRole
from app.schemas.change_request import ChangeRequestStatus
from app.schemas.claim import ClaimStatus
from app.schemas.document import DocumentType
from app.schemas.payment import PaymentStatus
from app.schemas.policy import PolicyStatus, PolicyType

RecordT = TypeVar("RecordT")


@dataclass(slots=True)
class UserRecord:
    id: str
    email: str
    first_name: str
    last_name: str
    role: UserRole
    is_active: bool
    created_at: datetime
    updated_at: datetime
    phone: str | None = None


@dataclass(slots=True)
class PolicyRecord:
    id: str
    policy_number: str
    user_id: str
    policy_type: PolicyType
    status: PolicyStatus
    premium_amount: Decimal
    start_date: date
    end_date: date
    created_at: datetime


@dataclass(slots=True)
class ClaimRecord:
    id: str
    claim_number: str
    user_id: str
    policy_id: str
    status: ClaimStatus
    incident_date: date
    incident_location: str
    description: str
    submitted_at: datetime
    updated_at: datetime
    assigned_adjuster_id: str | None = None
    payout_amount: Decimal | None = None


@dataclass(slots=True)
class DocumentRecord:
    id: str
    user_id: str
    filename: str
    file_type: str
    file_size: int
    url: str
    document_type: DocumentType
    uploaded_at: datetime
    policy_id: str | None = None
    claim_id: str | None = None


@dataclass(slots=True)
class ChangeRequestRecord:
    id: str
    policy_id: str
    user_id: str
    request_type: str
    request_details: dict[str, Any]
    status: ChangeRequestStatus
    submitted_at: datetime
    admin_notes: str | None = None
    processed_at: datetime | None = None
    processed_by: str | None = None


@dataclass(slots=True)
class MessageRecord:
    id: str
    sender_id: str
    content: str
    is_read: bool
    is_internal: bool
    timestamp: datetime
    receiver_id: str | None = None
    claim_id: str | None = None


@dataclass(slots=True)
class PaymentRecord:
    id: str
    user_id: str
    amount: Decimal
    status: PaymentStatus
    method: str
    transaction_id: str
    payment_date: datetime
    policy_id: str | None = None


@dataclass(slots=True)
class BillingStatementRecord:
    id: str
    user_id: str
    policy_id: str
    statement_date: date
    due_date: date
    amount_due: Decimal
    is_paid: bool


@dataclass(slots=True)
class AuditLogRecord:
    id: str
    admin_user_id: str
    action: AuditAction
    target_type: str
    target_id: str
    details: dict[str, Any]
    created_at: datetime


def _normalize(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float, Decimal, date)):
        return str(value)
    return value


def _matches_condition(actual: Any, condition: Any) -> bool:
    if isinstance(condition, Mapping):
        if "contains" in condition:
            needle = str(condition["contains"])
            haystack = "" if actual is None else str(_normalize(actual))
            if condition.get("mode") == "insensitive":
                return needle.lower() in haystack.lower()
            return needle in haystack
        if "equals" in condition:
            return _normalize(actual) == _normalize(condition["equals"])
        raise PersistenceError(
            PersistenceErrorCode.COLUMN_NOT_FOUND,
            f"Unsupported filter operator: {sorted(condition)}",
        )
    return _normalize(actual) == _normalize(condition)


def _matches(record: Any, where: Mapping[str, Any] | None) -> bool:
    if not where:
        return True

    names = {f.name for f in fields(record)}
    for key, condition in where.items():
        if key == "OR":
            if condition and not any(_matches(record, clause) for clause in condition):
                return False
            continue
        if key not in names:
            raise PersistenceError(
                PersistenceErrorCode.COLUMN_NOT_FOUND,
                f"The column `{key}` does not exist in the current database.",
            )
        if not _matches_condition(getattr(record, key), condition):
            return False
    return True


def _select(
    records: Iterable[RecordT],
    where: Mapping[str, Any] | None,
    *,
    skip: int = 0,
    take: int | None = None,
) -> list[RecordT]:
    # Newest first.
    matched = [record for record in reversed(list(records)) if _matches(record, where)]
    end = None if take is None else skip + take
    return matched[skip:end]


def _record_not_found() -> PersistenceError:
    return PersistenceError(PersistenceErrorCode.RECORD_NOT_FOUND, "Record to update not found.")


def _dangling_reference(field_name: str) -> PersistenceError:
    return PersistenceError(
        PersistenceErrorCode.FOREIGN_KEY_CONSTRAINT,
        f"Foreign key constraint failed on the field: `{field_name}`",
        target=[field_name],
    )


@dataclass(slots=True)
class InMemoryStore:
    """Simple, deterministic persistence layer for scaffolding and tests."""

    users: dict[str, UserRecord] = field(default_factory=dict)
    policies: dict[str, PolicyRecord] = field(default_factory=dict)
    claims: dict[str, ClaimRecord] = field(default_factory=dict)
    documents: dict[str, DocumentRecord] = field(default_factory=dict)
    change_requests: dict[str, ChangeRequestRecord] = field(default_factory=dict)
    messages: dict[str, MessageRecord] = field(default_factory=dict)
    payments: dict[str, PaymentRecord] = field(default_factory=dict)
    billing_statements: dict[str, BillingStatementRecord] = field(default_factory=dict)
    audit_logs: dict[str, AuditLogRecord] = field(default_factory=dict)
    claim_sequence: int = 0

    # Users

    def create_user(
        self,
        *,
        email: str,
        first_name: str,
        last_name: str,
        role: UserRole = UserRole.CLIENT,
        is_active: bool = True,
        phone: str | None = None,
        user_id: str | None = None,
    ) -> UserRecord:
        normalized_email = email.strip().lower()
        if any(user.email == normalized_email for user in self.users.values()):
            raise PersistenceError(
                PersistenceErrorCode.UNIQUE_CONSTRAINT,
                "Unique constraint failed on the fields: (`email`)",
                target=["email"],
            )
        new_id = user_id or str(uuid4())
        if new_id in self.users:
            raise PersistenceError(
                PersistenceErrorCode.UNIQUE_CONSTRAINT,
                "Unique constraint failed on the fields: (`id`)",
                target=["id"],
            )

        now = datetime.now(UTC)
        user = UserRecord(
            id=new_id,
            email=normalized_email,
            first_name=first_name,
            last_name=last_name,
            role=role,
            is_active=is_active,
            phone=phone,
            created_at=now,
            updated_at=now,
        )
        self.users[user.id] = user
        return user

    def get_user(self, user_id: str) -> UserRecord | None:
        return self.users.get(user_id)

    def update_user(self, user_id: str, **changes: Any) -> UserRecord:
        current = self.users.get(user_id)
        if current is None:
            raise _record_not_found()
        updated = replace(current, **changes, updated_at=datetime.now(UTC))
        self.users[user_id] = updated
        return updated

    def find_users(
        self,
        where: Mapping[str, Any] | None = None,
        *,
        skip: int = 0,
        take: int | None = None,
    ) -> list[UserRecord]:
        return _select(self.users.values(), where, skip=skip, take=take)

    def count_users(self, where: Mapping[str, Any] | None = None) -> int:
        return len(_select(self.users.values(), where))

    # Policies

    def create_policy(
        self,
        *,
        user_id: str,
        policy_number: str,
        policy_type: PolicyType,
        status: PolicyStatus,
        premium_amount: Decimal,
        start_date: date,
        end_date: date,
    ) -> PolicyRecord:
        if user_id not in self.users:
            raise _dangling_reference("user_id")
        if any(policy.policy_number == policy_number for policy in self.policies.values()):
            raise PersistenceError(
                PersistenceErrorCode.UNIQUE_CONSTRAINT,
                "Unique constraint failed on the fields: (`policy_number`)",
                target=["policy_number"],
            )

        policy = PolicyRecord(
            id=str(uuid4()),
            policy_number=policy_number,
            user_id=user_id,
            policy_type=policy_type,
            status=status,
            premium_amount=premium_amount,
            start_date=start_date,
            end_date=end_date,
            created_at=datetime.now(UTC),
        )
        self.policies[policy.id] = policy
        return policy

    def get_policy(self, policy_id: str) -> PolicyRecord | None:
        return self.policies.get(policy_id)

    def get_policy_for_owner(self, *, owner_id: str, policy_id: str) -> PolicyRecord | None:
        policy = self.policies.get(policy_id)
        if policy is None or policy.user_id != owner_id:
            return None
        return policy

    def find_policies(
        self,
        where: Mapping[str, Any] | None = None,
        *,
        skip: int = 0,
        take: int | None = None,
    ) -> list[PolicyRecord]:
        return _select(self.policies.values(), where, skip=skip, take=take)

    def count_policies(self, where: Mapping[str, Any] | None = None) -> int:
        return len(_select(self.policies.values(), where))

    def delete_policy(self, policy_id: str) -> PolicyRecord:
        policy = self.policies.get(policy_id)
        if policy is None:
            raise PersistenceError(
                PersistenceErrorCode.RECORD_NOT_FOUND,
                "Record to delete does not exist.",
            )
        if any(claim.policy_id == policy_id for claim in self.claims.values()):
            raise PersistenceError(
                PersistenceErrorCode.RELATION_VIOLATION,
                "The change you are trying to make would violate the required relation 'ClaimToPolicy'",
            )
        return self.policies.pop(policy_id)

    # Claims

    def create_claim(
        self,
        *,
        user_id: str,
        policy_id: str,
        incident_date: date,
        incident_location: str,
        description: str,
    ) -> ClaimRecord:
        if policy_id not in self.policies:
            raise _dangling_reference("policy_id")

        now = datetime.now(UTC)
        self.claim_sequence += 1
        claim = ClaimRecord(
            id=str(uuid4()),
            claim_number=f"CLM-{now.year}-{self.claim_sequence:06d}",
            user_id=user_id,
            policy_id=policy_id,
            status=ClaimStatus.SUBMITTED,
            incident_date=incident_date,
            incident_location=incident_location,
            description=description,
            submitted_at=now,
            updated_at=now,
        )
        self.claims[claim.id] = claim
        return claim

    def get_claim_for_owner(self, *, owner_id: str, claim_id: str) -> ClaimRecord | None:
        claim = self.claims.get(claim_id)
        if claim is None or claim.user_id != owner_id:
            return None
        return claim

    def update_claim(self, claim_id: str, **changes: Any) -> ClaimRecord:
        current = self.claims.get(claim_id)
        if current is None:
            raise _record_not_found()
        adjuster_id = changes.get("assigned_adjuster_id")
        if adjuster_id is not None and adjuster_id not in self.users:
            raise _dangling_reference("assigned_adjuster_id")
        updated = replace(current, **changes, updated_at=datetime.now(UTC))
        self.claims[claim_id] = updated
        return updated

    def find_claims(
        self,
        where: Mapping[str, Any] | None = None,
        *,
        skip: int = 0,
        take: int | None = None,
    ) -> list[ClaimRecord]:
        return _select(self.claims.values(), where, skip=skip, take=take)

    def count_claims(self, where: Mapping[str, Any] | None = None) -> int:
        return len(_select(self.claims.values(), where))

    # Documents

    def create_document(
        self,
        *,
        user_id: str,
        filename: str,
        file_type: str,
        file_size: int,
        url: str,
        document_type: DocumentType,
        policy_id: str | None = None,
        claim_id: str | None = None,
    ) -> DocumentRecord:
        document = DocumentRecord(
            id=str(uuid4()),
            user_id=user_id,
            filename=filename,
            file_type=file_type,
            file_size=file_size,
            url=url,
            document_type=document_type,
            policy_id=policy_id,
            claim_id=claim_id,
            uploaded_at=datetime.now(UTC),
        )
        self.documents[document.id] = document
        return document

    def find_documents(
        self,
        where: Mapping[str, Any] | None = None,
        *,
        skip: int = 0,
        take: int | None = None,
    ) -> list[DocumentRecord]:
        return _select(self.documents.values(), where, skip=skip, take=take)

    def count_documents(self, where: Mapping[str, Any] | None = None) -> int:
        return len(_select(self.documents.values(), where))

    # Policy change requests

    def create_change_request(
        self,
        *,
        policy_id: str,
        user_id: str,
        request_type: str,
        request_details: dict[str, Any],
    ) -> ChangeRequestRecord:
        if policy_id not in self.policies:
            raise _dangling_reference("policy_id")

        request = ChangeRequestRecord(
            id=str(uuid4()),
            policy_id=policy_id,
            user_id=user_id,
            request_type=request_type,
            request_details=dict(request_details),
            status=ChangeRequestStatus.PENDING,
            submitted_at=datetime.now(UTC),
        )
        self.change_requests[request.id] = request
        return request

    def update_change_request(self, request_id: str, **changes: Any) -> ChangeRequestRecord:
        current = self.change_requests.get(request_id)
        if current is None:
            raise _record_not_found()
        updated = replace(current, **changes)
        self.change_requests[request_id] = updated
        return updated

    def find_change_requests(
        self,
        where: Mapping[str, Any] | None = None,
        *,
        skip: int = 0,
        take: int | None = None,
    ) -> list[ChangeRequestRecord]:
        return _select(self.change_requests.values(), where, skip=skip, take=take)

    def count_change_requests(self, where: Mapping[str, Any] | None = None) -> int:
        return len(_select(self.change_requests.values(), where))

    # Messages

    def create_message(
        self,
        *,
        sender_id: str,
        content: str,
        receiver_id: str | None = None,
        claim_id: str | None = None,
        is_internal: bool = False,
    ) -> MessageRecord:
        if receiver_id is not None and receiver_id not in self.users:
            raise _dangling_reference("receiver_id")
        if claim_id is not None and claim_id not in self.claims:
            raise _dangling_reference("claim_id")

        message = MessageRecord(
            id=str(uuid4()),
            sender_id=sender_id,
            receiver_id=receiver_id,
            claim_id=claim_id,
            content=content,
            is_read=False,
            is_internal=is_internal,
            timestamp=datetime.now(UTC),
        )
        self.messages[message.id] = message
        return message

    def get_message(self, message_id: str) -> MessageRecord | None:
        return self.messages.get(message_id)

    def update_message(self, message_id: str, **changes: Any) -> MessageRecord:
        current = self.messages.get(message_id)
        if current is None:
            raise _record_not_found()
        updated = replace(current, **changes)
        self.messages[message_id] = updated
        return updated

    def find_messages(self, where: Mapping[str, Any] | None = None) -> list[MessageRecord]:
        return _select(self.messages.values(), where)

    # Payments and billing

    def create_payment(
        self,
        *,
        user_id: str,
        amount: Decimal,
        status: PaymentStatus,
        method: str,
        transaction_id: str,
        policy_id: str | None = None,
    ) -> PaymentRecord:
        if policy_id is not None and policy_id not in self.policies:
            raise _dangling_reference("policy_id")
        if any(payment.transaction_id == transaction_id for payment in self.payments.values()):
            raise PersistenceError(
                PersistenceErrorCode.UNIQUE_CONSTRAINT,
                "Unique constraint failed on the fields: (`transaction_id`)",
                target=["transaction_id"],
            )

        payment = PaymentRecord(
            id=str(uuid4()),
            user_id=user_id,
            policy_id=policy_id,
            amount=amount,
            status=status,
            method=method,
            transaction_id=transaction_id,
            payment_date=datetime.now(UTC),
        )
        self.payments[payment.id] = payment
        return payment

    def find_payments(self, where: Mapping[str, Any] | None = None) -> list[PaymentRecord]:
        return _select(self.payments.values(), where)

    def create_billing_statement(
        self,
        *,
        user_id: str,
        policy_id: str,
        statement_date: date,
        due_date: date,
        amount_due: Decimal,
        is_paid: bool = False,
    ) -> BillingStatementRecord:
        if policy_id not in self.policies:
            raise _dangling_reference("policy_id")

        statement = BillingStatementRecord(
            id=str(uuid4()),
            user_id=user_id,
            policy_id=policy_id,
            statement_date=statement_date,
            due_date=due_date,
            amount_due=amount_due,
            is_paid=is_paid,
        )
        self.billing_statements[statement.id] = statement
        return statement

    def find_billing_statements(self, where: Mapping[str, Any] | None = None) -> list[BillingStatementRecord]:
        return _select(self.billing_statements.values(), where)

    # Audit trail

    def create_audit_log(
        self,
        *,
        admin_user_id: str,
        action: AuditAction,
        target_type: str,
        target_id: str,
        details: dict[str, Any],
    ) -> AuditLogRecord:
        entry = AuditLogRecord(
            id=str(uuid4()),
            admin_user_id=admin_user_id,
            action=action,
            target_type=target_type,
            target_id=target_id,
            details=dict(details),
            created_at=datetime.now(UTC),
        )
        self.audit_logs[entry.id] = entry
        return entry

    def find_audit_logs(self, where: Mapping[str, Any] | None = None) -> list[AuditLogRecord]:
        return _select(self.audit_logs.values(), where)
