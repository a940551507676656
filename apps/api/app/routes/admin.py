"""Admin portal routes.

Every mutation is recorded in the audit trail against the acting admin.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Path, Query, Request
from fastapi.responses import JSONResponse

from app.core.query_params import parse_query_filters
from app.core.responses import send_created, send_deleted, send_paginated, send_updated
from app.errors import RequestValidationFailed
from app.routes.dependencies import (
    get_audit_trail,
    get_change_request_service,
    get_claim_service,
    get_pagination,
    get_policy_service,
    get_user_service,
    require_admin,
    require_roles,
)
from app.schemas.audit import AuditAction
from app.schemas.auth import AuthPrincipal, UserRole
from app.schemas.change_request import ProcessChangeRequest
from app.schemas.claim import AssignAdjusterRequest, UpdateClaimStatusRequest
from app.schemas.envelope import FieldIssue, PaginationParams
from app.schemas.error import AuthErrorResponse, ErrorResponse, ValidationErrorResponse
from app.schemas.policy import CreatePolicyRequest
from app.schemas.user import UpdateUserStatusRequest
from app.services.audit import AuditTrail
from app.services.change_requests import ChangeRequestService
from app.services.claims import ClaimService
from app.services.policies import PolicyService
from app.services.users import UserService

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(require_admin)],
    responses={401: {"model": AuthErrorResponse}, 403: {"model": AuthErrorResponse}},
)

USER_FILTERS = ("role", "is_active")
POLICY_FILTERS = ("status", "policy_type", "user_id")
CHANGE_REQUEST_FILTERS = ("status",)
CLAIM_FILTERS = ("status", "assigned_adjuster_id")

# Policy issuance and removal stay with the two most privileged roles.
require_policy_manager = require_roles(UserRole.ADMIN, UserRole.SUPER_ADMIN)

AdminPrincipal = Annotated[AuthPrincipal, Depends(require_admin)]
Audit = Annotated[AuditTrail, Depends(get_audit_trail)]


def _parse_bool_filter(filters: dict[str, Any], key: str) -> None:
    if key not in filters:
        return
    raw = str(filters[key]).lower()
    if raw not in ("true", "false"):
        raise RequestValidationFailed([FieldIssue(field=key, message="Expected 'true' or 'false'")])
    filters[key] = raw == "true"


@router.get("/users")
async def list_users(
    request: Request,
    pagination: Annotated[PaginationParams, Depends(get_pagination)],
    service: Annotated[UserService, Depends(get_user_service)],
    search: Annotated[str | None, Query()] = None,
) -> JSONResponse:
    filters = parse_query_filters(request.query_params, USER_FILTERS)
    _parse_bool_filter(filters, "is_active")
    users, total = service.list_users(pagination=pagination, search=search, filters=filters)
    return send_paginated(users, total, pagination.page, pagination.take)


@router.put(
    "/users/{userId}/status",
    responses={400: {"model": ValidationErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_user_status(
    user_id: Annotated[str, Path(alias="userId")],
    payload: UpdateUserStatusRequest,
    principal: AdminPrincipal,
    audit: Audit,
    service: Annotated[UserService, Depends(get_user_service)],
) -> JSONResponse:
    user = service.set_active(user_id=user_id, is_active=payload.is_active)
    audit.record(
        admin_id=principal.id,
        action=AuditAction.UPDATE_USER_STATUS,
        target_type="User",
        target_id=user_id,
        details={"is_active": payload.is_active},
    )
    return send_updated({"user": user}, "User status updated successfully")


@router.get("/policies")
async def list_policies(
    request: Request,
    pagination: Annotated[PaginationParams, Depends(get_pagination)],
    service: Annotated[PolicyService, Depends(get_policy_service)],
    search: Annotated[str | None, Query()] = None,
) -> JSONResponse:
    filters = parse_query_filters(request.query_params, POLICY_FILTERS)
    policies, total = service.list_policies(pagination=pagination, search=search, filters=filters)
    return send_paginated(policies, total, pagination.page, pagination.take)


@router.post(
    "/policies",
    status_code=201,
    dependencies=[Depends(require_policy_manager)],
    responses={400: {"model": ValidationErrorResponse}, 409: {"model": ErrorResponse}},
)
async def create_policy(
    payload: CreatePolicyRequest,
    principal: AdminPrincipal,
    audit: Audit,
    service: Annotated[PolicyService, Depends(get_policy_service)],
) -> JSONResponse:
    policy = service.create_policy(payload)
    audit.record(
        admin_id=principal.id,
        action=AuditAction.CREATE_POLICY,
        target_type="Policy",
        target_id=policy.id,
        details={"policy_number": policy.policy_number, "user_id": policy.user_id},
    )
    return send_created({"policy": policy}, "Policy created successfully")


@router.delete(
    "/policies/{policyId}",
    dependencies=[Depends(require_policy_manager)],
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def delete_policy(
    policy_id: Annotated[str, Path(alias="policyId")],
    principal: AdminPrincipal,
    audit: Audit,
    service: Annotated[PolicyService, Depends(get_policy_service)],
) -> JSONResponse:
    service.delete_policy(policy_id=policy_id)
    audit.record(
        admin_id=principal.id,
        action=AuditAction.DELETE_POLICY,
        target_type="Policy",
        target_id=policy_id,
    )
    return send_deleted("Policy deleted successfully")


@router.get("/policy-requests")
async def list_change_requests(
    request: Request,
    pagination: Annotated[PaginationParams, Depends(get_pagination)],
    service: Annotated[ChangeRequestService, Depends(get_change_request_service)],
) -> JSONResponse:
    filters = parse_query_filters(request.query_params, CHANGE_REQUEST_FILTERS)
    requests, total = service.list_requests(pagination=pagination, filters=filters)
    return send_paginated(requests, total, pagination.page, pagination.take)


@router.put(
    "/policy-requests/{requestId}/status",
    responses={400: {"model": ValidationErrorResponse}, 404: {"model": ErrorResponse}},
)
async def process_change_request(
    request_id: Annotated[str, Path(alias="requestId")],
    payload: ProcessChangeRequest,
    principal: AdminPrincipal,
    audit: Audit,
    service: Annotated[ChangeRequestService, Depends(get_change_request_service)],
) -> JSONResponse:
    change_request = service.process(request_id=request_id, payload=payload, admin_id=principal.id)
    audit.record(
        admin_id=principal.id,
        action=AuditAction.PROCESS_POLICY_CHANGE_REQUEST,
        target_type="PolicyChangeRequest",
        target_id=request_id,
        details={"status": payload.status, "admin_notes": payload.admin_notes},
    )
    return send_updated({"request": change_request}, "Change request processed successfully")


@router.get("/claims")
async def list_claims(
    request: Request,
    pagination: Annotated[PaginationParams, Depends(get_pagination)],
    service: Annotated[ClaimService, Depends(get_claim_service)],
    search: Annotated[str | None, Query()] = None,
) -> JSONResponse:
    filters = parse_query_filters(request.query_params, CLAIM_FILTERS)
    claims, total = service.list_claims(pagination=pagination, search=search, filters=filters)
    return send_paginated(claims, total, pagination.page, pagination.take)


@router.put(
    "/claims/{claimId}/status",
    responses={400: {"model": ValidationErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_claim_status(
    claim_id: Annotated[str, Path(alias="claimId")],
    payload: UpdateClaimStatusRequest,
    principal: AdminPrincipal,
    audit: Audit,
    service: Annotated[ClaimService, Depends(get_claim_service)],
) -> JSONResponse:
    claim = service.update_status(claim_id=claim_id, payload=payload)
    audit.record(
        admin_id=principal.id,
        action=AuditAction.UPDATE_CLAIM_STATUS,
        target_type="Claim",
        target_id=claim_id,
        details={"status": payload.status, "payout_amount": payload.payout_amount},
    )
    return send_updated({"claim": claim}, "Claim status updated successfully")


@router.put(
    "/claims/{claimId}/assign-adjuster",
    responses={404: {"model": ErrorResponse}},
)
async def assign_adjuster(
    claim_id: Annotated[str, Path(alias="claimId")],
    payload: AssignAdjusterRequest,
    principal: AdminPrincipal,
    audit: Audit,
    service: Annotated[ClaimService, Depends(get_claim_service)],
) -> JSONResponse:
    claim = service.assign_adjuster(claim_id=claim_id, payload=payload)
    audit.record(
        admin_id=principal.id,
        action=AuditAction.ASSIGN_CLAIM_ADJUSTER,
        target_type="Claim",
        target_id=claim_id,
        details={"adjuster_id": payload.adjuster_id},
    )
    return send_updated({"claim": claim}, "Adjuster assigned successfully")
