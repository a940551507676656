"""Client payment and billing routes."""

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.core.responses import send_created, send_success
from app.routes.dependencies import get_payment_service, require_client
from app.schemas.auth import AuthPrincipal
from app.schemas.error import AuthErrorResponse, ErrorResponse, ValidationErrorResponse
from app.schemas.payment import MakePaymentRequest
from app.services.payments import PaymentService

router = APIRouter(
    prefix="/payments",
    tags=["Payments"],
    responses={401: {"model": AuthErrorResponse}, 403: {"model": AuthErrorResponse}},
)


@router.get("")
async def list_payments(
    principal: Annotated[AuthPrincipal, Depends(require_client)],
    service: Annotated[PaymentService, Depends(get_payment_service)],
) -> JSONResponse:
    return send_success({"payments": service.list_payments(owner_id=principal.id)})


@router.post(
    "",
    status_code=201,
    responses={400: {"model": ValidationErrorResponse}, 404: {"model": ErrorResponse}},
)
async def make_payment(
    payload: MakePaymentRequest,
    principal: Annotated[AuthPrincipal, Depends(require_client)],
    service: Annotated[PaymentService, Depends(get_payment_service)],
) -> JSONResponse:
    payment = service.make_payment(owner_id=principal.id, payload=payload)
    return send_created({"payment": payment}, "Payment processed successfully")


@router.get("/billing/statements")
async def list_billing_statements(
    principal: Annotated[AuthPrincipal, Depends(require_client)],
    service: Annotated[PaymentService, Depends(get_payment_service)],
) -> JSONResponse:
    return send_success({"statements": service.list_statements(owner_id=principal.id)})
