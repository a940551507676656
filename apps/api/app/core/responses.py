"""Builders for the success, paginated and error JSON envelopes."""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from typing import Any

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from app.schemas.envelope import ErrorEnvelope, PaginatedEnvelope


def _encode_payload(data: Mapping[str, Any] | BaseModel | None) -> dict[str, Any]:
    if data is None:
        return {}
    encoded = jsonable_encoder(data)
    if not isinstance(encoded, dict):
        raise TypeError("Envelope payload must encode to a JSON object")
    return encoded


def success_envelope(data: Mapping[str, Any] | BaseModel | None, message: str | None = None) -> dict[str, Any]:
    envelope: dict[str, Any] = {"success": True}
    if message is not None:
        envelope["message"] = message
    envelope.update(_encode_payload(data))
    return envelope


def send_success(
    data: Mapping[str, Any] | BaseModel | None,
    message: str | None = None,
    status_code: int = status.HTTP_200_OK,
) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=success_envelope(data, message))


def send_created(
    data: Mapping[str, Any] | BaseModel | None,
    message: str = "Resource created successfully",
) -> JSONResponse:
    return send_success(data, message, status.HTTP_201_CREATED)


def send_updated(
    data: Mapping[str, Any] | BaseModel | None,
    message: str = "Resource updated successfully",
) -> JSONResponse:
    return send_success(data, message)


def send_deleted(message: str = "Resource deleted successfully") -> JSONResponse:
    return send_success({}, message)


def build_paginated_envelope(
    data: Sequence[Any],
    total_count: int,
    page: int,
    limit: int,
    message: str | None = None,
) -> PaginatedEnvelope[Any]:
    total_pages = math.ceil(total_count / limit)
    return PaginatedEnvelope[Any](
        message=message,
        data=list(data),
        total_count=total_count,
        current_page=page,
        total_pages=total_pages,
        has_next_page=page < total_pages,
        has_prev_page=page > 1,
    )


def send_paginated(
    data: Sequence[Any],
    total_count: int,
    page: int,
    limit: int,
    message: str | None = None,
) -> JSONResponse:
    envelope = build_paginated_envelope(data, total_count, page, limit, message)
    content = envelope.model_dump(mode="json", by_alias=True)
    if content.get("message") is None:
        content.pop("message", None)
    return JSONResponse(status_code=status.HTTP_200_OK, content=content)


def send_error(
    message: str,
    status_code: int = status.HTTP_400_BAD_REQUEST,
    details: Any = None,
) -> JSONResponse:
    envelope = ErrorEnvelope(error=message, details=details)
    return JSONResponse(status_code=status_code, content=envelope.model_dump(mode="json", exclude_none=True))
