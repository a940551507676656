"""User routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query
from fastapi.responses import JSONResponse

from app.core.query_params import parse_query_filters
from app.core.responses import send_paginated, send_success, send_updated
from app.routes.dependencies import (
    get_authenticated_principal,
    get_pagination,
    get_policy_service,
    get_user_service,
    require_resource_owner,
)
from app.schemas.auth import AuthPrincipal
from app.schemas.envelope import PaginationParams
from app.schemas.error import AuthErrorResponse, ErrorResponse, ValidationErrorResponse
from app.schemas.user import UpdateProfileRequest
from app.services.policies import PolicyService
from app.services.users import UserService

router = APIRouter(prefix="/users", tags=["Users"])

POLICY_FILTERS = ("status", "policy_type")


@router.get("/profile", responses={401: {"model": AuthErrorResponse}, 404: {"model": ErrorResponse}})
async def get_profile(
    principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> JSONResponse:
    return send_success({"user": service.get_user(user_id=principal.id)})


@router.put(
    "/profile",
    responses={
        400: {"model": ValidationErrorResponse},
        401: {"model": AuthErrorResponse},
        404: {"model": ErrorResponse},
    },
)
async def update_profile(
    payload: UpdateProfileRequest,
    principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> JSONResponse:
    user = service.update_profile(user_id=principal.id, payload=payload)
    return send_updated({"user": user}, "Profile updated successfully")


@router.get(
    "/{userId}",
    responses={401: {"model": AuthErrorResponse}, 403: {"model": AuthErrorResponse}, 404: {"model": ErrorResponse}},
)
async def get_user(
    user_id: Annotated[str, Path(alias="userId")],
    _: Annotated[AuthPrincipal, Depends(require_resource_owner("userId"))],
    service: Annotated[UserService, Depends(get_user_service)],
) -> JSONResponse:
    return send_success({"user": service.get_user(user_id=user_id)})


@router.get(
    "/{userId}/policies",
    responses={401: {"model": AuthErrorResponse}, 403: {"model": AuthErrorResponse}},
)
async def list_user_policies(
    user_id: Annotated[str, Path(alias="userId")],
    _: Annotated[AuthPrincipal, Depends(require_resource_owner("userId"))],
    pagination: Annotated[PaginationParams, Depends(get_pagination)],
    service: Annotated[PolicyService, Depends(get_policy_service)],
    status: Annotated[str | None, Query()] = None,
    policy_type: Annotated[str | None, Query()] = None,
) -> JSONResponse:
    filters = parse_query_filters({"status": status, "policy_type": policy_type}, POLICY_FILTERS)
    policies, total = service.list_policies(pagination=pagination, owner_id=user_id, filters=filters)
    return send_paginated(policies, total, pagination.page, pagination.take)
