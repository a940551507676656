"""Client claim routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, Request
from fastapi.responses import JSONResponse

from app.core.query_params import parse_query_filters
from app.core.responses import send_created, send_paginated, send_success
from app.routes.dependencies import get_claim_service, get_pagination, require_client
from app.schemas.auth import AuthPrincipal
from app.schemas.claim import CreateClaimRequest
from app.schemas.envelope import PaginationParams
from app.schemas.error import AuthErrorResponse, ErrorResponse, ValidationErrorResponse
from app.services.claims import ClaimService

router = APIRouter(prefix="/claims", tags=["Claims"])

CLAIM_FILTERS = ("status",)


@router.get("", responses={401: {"model": AuthErrorResponse}, 403: {"model": AuthErrorResponse}})
async def list_claims(
    request: Request,
    principal: Annotated[AuthPrincipal, Depends(require_client)],
    pagination: Annotated[PaginationParams, Depends(get_pagination)],
    service: Annotated[ClaimService, Depends(get_claim_service)],
    search: Annotated[str | None, Query()] = None,
) -> JSONResponse:
    filters = parse_query_filters(request.query_params, CLAIM_FILTERS)
    claims, total = service.list_claims(
        pagination=pagination,
        owner_id=principal.id,
        search=search,
        filters=filters,
    )
    return send_paginated(claims, total, pagination.page, pagination.take)


@router.get(
    "/{claimId}",
    responses={401: {"model": AuthErrorResponse}, 403: {"model": AuthErrorResponse}, 404: {"model": ErrorResponse}},
)
async def get_claim(
    claim_id: Annotated[str, Path(alias="claimId")],
    principal: Annotated[AuthPrincipal, Depends(require_client)],
    service: Annotated[ClaimService, Depends(get_claim_service)],
) -> JSONResponse:
    return send_success({"claim": service.get_claim(owner_id=principal.id, claim_id=claim_id)})


@router.post(
    "",
    status_code=201,
    responses={
        400: {"model": ValidationErrorResponse},
        401: {"model": AuthErrorResponse},
        403: {"model": AuthErrorResponse},
        404: {"model": ErrorResponse},
    },
)
async def create_claim(
    payload: CreateClaimRequest,
    principal: Annotated[AuthPrincipal, Depends(require_client)],
    service: Annotated[ClaimService, Depends(get_claim_service)],
) -> JSONResponse:
    claim = service.create_claim(owner_id=principal.id, payload=payload)
    return send_created({"claim": claim}, "Claim submitted successfully")
