"""Client policy routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, Request
from fastapi.responses import JSONResponse

from app.core.query_params import parse_query_filters
from app.core.responses import send_created, send_paginated, send_success
from app.routes.dependencies import get_change_request_service, get_pagination, get_policy_service, require_client
from app.schemas.auth import AuthPrincipal
from app.schemas.change_request import CreateChangeRequest
from app.schemas.envelope import PaginationParams
from app.schemas.error import AuthErrorResponse, ErrorResponse, ValidationErrorResponse
from app.services.change_requests import ChangeRequestService
from app.services.policies import PolicyService

router = APIRouter(prefix="/policies", tags=["Policies"])

POLICY_FILTERS = ("status", "policy_type")


@router.get("", responses={401: {"model": AuthErrorResponse}, 403: {"model": AuthErrorResponse}})
async def list_policies(
    request: Request,
    principal: Annotated[AuthPrincipal, Depends(require_client)],
    pagination: Annotated[PaginationParams, Depends(get_pagination)],
    service: Annotated[PolicyService, Depends(get_policy_service)],
    search: Annotated[str | None, Query()] = None,
) -> JSONResponse:
    filters = parse_query_filters(request.query_params, POLICY_FILTERS)
    policies, total = service.list_policies(
        pagination=pagination,
        owner_id=principal.id,
        search=search,
        filters=filters,
    )
    return send_paginated(policies, total, pagination.page, pagination.take)


@router.get("/requests", responses={401: {"model": AuthErrorResponse}, 403: {"model": AuthErrorResponse}})
async def list_change_requests(
    principal: Annotated[AuthPrincipal, Depends(require_client)],
    service: Annotated[ChangeRequestService, Depends(get_change_request_service)],
) -> JSONResponse:
    return send_success({"requests": service.list_for_owner(owner_id=principal.id)})


@router.get(
    "/{policyId}",
    responses={401: {"model": AuthErrorResponse}, 403: {"model": AuthErrorResponse}, 404: {"model": ErrorResponse}},
)
async def get_policy(
    policy_id: Annotated[str, Path(alias="policyId")],
    principal: Annotated[AuthPrincipal, Depends(require_client)],
    service: Annotated[PolicyService, Depends(get_policy_service)],
) -> JSONResponse:
    return send_success({"policy": service.get_policy(owner_id=principal.id, policy_id=policy_id)})


@router.post(
    "/{policyId}/change-request",
    status_code=201,
    responses={
        400: {"model": ValidationErrorResponse},
        401: {"model": AuthErrorResponse},
        403: {"model": AuthErrorResponse},
        404: {"model": ErrorResponse},
    },
)
async def submit_change_request(
    policy_id: Annotated[str, Path(alias="policyId")],
    payload: CreateChangeRequest,
    principal: Annotated[AuthPrincipal, Depends(require_client)],
    service: Annotated[ChangeRequestService, Depends(get_change_request_service)],
) -> JSONResponse:
    change_request = service.submit(owner_id=principal.id, policy_id=policy_id, payload=payload)
    return send_created({"request_id": change_request.id}, "Change request submitted successfully")
