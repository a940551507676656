"""Client document routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from app.core.config import Settings
from app.core.query_params import parse_query_filters
from app.core.responses import send_created, send_paginated
from app.errors import ApiError, RequestValidationFailed
from app.routes.dependencies import get_app_settings, get_document_service, get_pagination, require_client
from app.schemas.auth import AuthPrincipal
from app.schemas.document import DocumentType
from app.schemas.envelope import FieldIssue, PaginationParams
from app.schemas.error import AuthErrorResponse, ErrorResponse, ValidationErrorResponse
from app.services.documents import DocumentService
from app.services.uploads import read_single_upload

router = APIRouter(prefix="/documents", tags=["Documents"])

DOCUMENT_FILTERS = ("document_type",)
UPLOAD_FIELD = "file"


@router.get("", responses={401: {"model": AuthErrorResponse}, 403: {"model": AuthErrorResponse}})
async def list_documents(
    request: Request,
    principal: Annotated[AuthPrincipal, Depends(require_client)],
    pagination: Annotated[PaginationParams, Depends(get_pagination)],
    service: Annotated[DocumentService, Depends(get_document_service)],
) -> JSONResponse:
    filters = parse_query_filters(request.query_params, DOCUMENT_FILTERS)
    documents, total = service.list_documents(owner_id=principal.id, pagination=pagination, filters=filters)
    return send_paginated(documents, total, pagination.page, pagination.take)


def _form_text(value: object) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


@router.post(
    "/upload",
    status_code=201,
    responses={
        400: {"model": ValidationErrorResponse},
        401: {"model": AuthErrorResponse},
        403: {"model": AuthErrorResponse},
        404: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
    },
)
async def upload_document(
    request: Request,
    principal: Annotated[AuthPrincipal, Depends(require_client)],
    settings: Annotated[Settings, Depends(get_app_settings)],
    service: Annotated[DocumentService, Depends(get_document_service)],
) -> JSONResponse:
    async with request.form() as form:
        incoming = await read_single_upload(
            form,
            field_name=UPLOAD_FIELD,
            max_file_size=settings.max_file_size,
            allowed_types=settings.allowed_upload_types,
        )
        raw_document_type = _form_text(form.get("document_type"))
        policy_id = _form_text(form.get("policy_id"))
        claim_id = _form_text(form.get("claim_id"))

    if incoming is None:
        raise ApiError(status_code=400, message="File is required")
    if raw_document_type is None:
        raise ApiError(status_code=400, message="Document type is required")
    try:
        document_type = DocumentType(raw_document_type)
    except ValueError as exc:
        raise RequestValidationFailed(
            [FieldIssue(field="document_type", message=f"Unknown document type: {raw_document_type}")]
        ) from exc

    document = service.upload_document(
        owner_id=principal.id,
        incoming=incoming,
        document_type=document_type,
        policy_id=policy_id,
        claim_id=claim_id,
    )
    return send_created({"document": document}, "Document uploaded successfully")
