"""Client message service layer."""

from __future__ import annotations

from typing import Any

from app.errors import ApiError
from app.repositories.memory import InMemoryStore, MessageRecord
from app.schemas.message import Message, SendMessageRequest


class MessageService:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    def list_messages(
        self,
        *,
        user_id: str,
        claim_id: str | None = None,
        unread_only: bool = False,
    ) -> list[Message]:
        # Internal staff notes are never shown to clients.
        where: dict[str, Any] = {
            "OR": [{"sender_id": user_id}, {"receiver_id": user_id}],
            "is_internal": False,
        }
        if claim_id:
            where["claim_id"] = claim_id
        if unread_only:
            where["is_read"] = False
            where["receiver_id"] = user_id
        return [self._to_message(record) for record in self._store.find_messages(where)]

    def send(self, *, sender_id: str, payload: SendMessageRequest) -> Message:
        claim_id = payload.claim_id or None
        if claim_id and self._store.get_claim_for_owner(owner_id=sender_id, claim_id=claim_id) is None:
            raise ApiError(status_code=404, message="Claim not found")

        record = self._store.create_message(
            sender_id=sender_id,
            receiver_id=payload.receiver_id or None,
            claim_id=claim_id,
            content=payload.content,
        )
        return self._to_message(record)

    def mark_read(self, *, user_id: str, message_id: str) -> tuple[Message, bool]:
        """Mark a message read for its receiver; returns the message and whether it changed."""
        record = self._store.get_message(message_id)
        if record is None or user_id not in (record.sender_id, record.receiver_id):
            raise ApiError(status_code=404, message="Message not found")
        if record.receiver_id != user_id or record.is_read:
            return self._to_message(record), False

        record = self._store.update_message(message_id, is_read=True)
        return self._to_message(record), True

    @staticmethod
    def _to_message(record: MessageRecord) -> Message:
        return Message(
            id=record.id,
            sender_id=record.sender_id,
            receiver_id=record.receiver_id,
            claim_id=record.claim_id,
            content=record.content,
            is_read=record.is_read,
            is_internal=record.is_internal,
            timestamp=record.timestamp,
        )
