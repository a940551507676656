"""Client message routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query
from fastapi.responses import JSONResponse

from app.core.responses import send_created, send_success
from app.routes.dependencies import get_message_service, require_client
from app.schemas.auth import AuthPrincipal
from app.schemas.error import AuthErrorResponse, ErrorResponse, ValidationErrorResponse
from app.schemas.message import SendMessageRequest
from app.services.messages import MessageService

router = APIRouter(
    prefix="/messages",
    tags=["Messages"],
    responses={401: {"model": AuthErrorResponse}, 403: {"model": AuthErrorResponse}},
)


@router.get("")
async def list_messages(
    principal: Annotated[AuthPrincipal, Depends(require_client)],
    service: Annotated[MessageService, Depends(get_message_service)],
    claim_id: Annotated[str | None, Query()] = None,
    unread_only: Annotated[str | None, Query()] = None,
) -> JSONResponse:
    messages = service.list_messages(
        user_id=principal.id,
        claim_id=claim_id,
        unread_only=unread_only == "true",
    )
    return send_success({"messages": messages})


@router.post(
    "",
    status_code=201,
    responses={400: {"model": ValidationErrorResponse}, 404: {"model": ErrorResponse}},
)
async def send_message(
    payload: SendMessageRequest,
    principal: Annotated[AuthPrincipal, Depends(require_client)],
    service: Annotated[MessageService, Depends(get_message_service)],
) -> JSONResponse:
    message = service.send(sender_id=principal.id, payload=payload)
    return send_created({"message_data": message}, "Message sent successfully")


@router.put("/{messageId}/read", responses={404: {"model": ErrorResponse}})
async def mark_message_read(
    message_id: Annotated[str, Path(alias="messageId")],
    principal: Annotated[AuthPrincipal, Depends(require_client)],
    service: Annotated[MessageService, Depends(get_message_service)],
) -> JSONResponse:
    message, updated = service.mark_read(user_id=principal.id, message_id=message_id)
    if not updated:
        return send_success(
            {"message_data": message},
            "Message already marked as read or you are not the receiver",
        )
    return send_success({"message_data": message}, "Message marked as read")
