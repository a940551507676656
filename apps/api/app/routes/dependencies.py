"""Dependency wiring for routes."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Annotated, Any
from uuid import uuid4

from fastapi import Depends, Request, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.adapters.auth import (
    AuthStrategyError,
    AuthVerificationError,
    JwtTokenVerifier,
    MockTokenVerifier,
    TokenVerifier,
)
from app.adapters.storage import StorageProvider
from app.core.config import Settings
from app.core.logging_safety import safe_log_email, safe_log_identifier
from app.core.query_params import get_pagination_params
from app.domain.access_policy import ADMIN_ROLES, ensure_resource_access, ensure_role
from app.errors import AuthRejection, TokenError
from app.repositories.memory import InMemoryStore
from app.schemas.auth import AuthPrincipal, UserRole
from app.schemas.envelope import PaginationParams
from app.services.audit import AuditTrail
from app.services.change_requests import ChangeRequestService
from app.services.claims import ClaimService
from app.services.documents import DocumentService
from app.services.messages import MessageService
from app.services.payments import PaymentService
from app.services.policies import PolicyService
from app.services.users import UserService

bearer_scheme = HTTPBearer(auto_error=False, scheme_name="bearerAuth")
logger = logging.getLogger(__name__)

_BODY_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})

PrincipalDependency = Callable[..., Awaitable[AuthPrincipal]]


def _unauthorized(message: str) -> AuthRejection:
    return AuthRejection(status_code=401, error="Unauthorized", message=message)


def _request_correlation_id(request: Request) -> str:
    existing = getattr(request.state, "correlation_id", None)
    if isinstance(existing, str) and existing:
        return existing

    correlation_id = request.headers.get("X-Correlation-Id")
    if correlation_id:
        request.state.correlation_id = correlation_id
        return correlation_id

    generated = f"req-{uuid4()}"
    request.state.correlation_id = generated
    return generated


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> InMemoryStore:
    return request.app.state.store


def get_storage(request: Request) -> StorageProvider:
    return request.app.state.storage


def get_token_verifier(
    settings: Annotated[Settings, Depends(get_app_settings)],
    store: Annotated[InMemoryStore, Depends(get_store)],
) -> TokenVerifier:
    """Resolve provider adapter from configuration."""
    if settings.auth_provider == "jwt":
        return JwtTokenVerifier(secret=settings.jwt_secret, algorithm=settings.jwt_algorithm, users=store)
    return MockTokenVerifier()


async def get_authenticated_principal(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Security(bearer_scheme)],
    verifier: Annotated[TokenVerifier, Depends(get_token_verifier)],
) -> AuthPrincipal:
    """Validate bearer token and attach normalized principal to request context."""
    correlation_id = _request_correlation_id(request)
    safe_correlation_id = safe_log_identifier(correlation_id, prefix="cid")
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        logger.warning(
            "auth.rejected correlation_id=%s method=%s path=%s reason=invalid_or_missing_bearer",
            safe_correlation_id,
            request.method,
            request.url.path,
        )
        raise _unauthorized("Valid JWT token required")

    try:
        principal = verifier.verify_token(credentials.credentials)
    except AuthStrategyError:
        logger.exception(
            "auth.error correlation_id=%s method=%s path=%s reason=strategy_failure",
            safe_correlation_id,
            request.method,
            request.url.path,
        )
        raise AuthRejection(status_code=500, error="Authentication error") from None
    except (AuthVerificationError, TokenError) as exc:
        logger.warning(
            "auth.rejected correlation_id=%s method=%s path=%s reason=token_verification_failed",
            safe_correlation_id,
            request.method,
            request.url.path,
        )
        raise _unauthorized(str(exc) or "Valid JWT token required") from exc

    logger.info(
        "auth.accepted correlation_id=%s method=%s path=%s principal_id=%s email=%s role=%s",
        safe_correlation_id,
        request.method,
        request.url.path,
        safe_log_identifier(principal.id, prefix="pid"),
        safe_log_email(principal.email),
        principal.role.value,
    )
    request.state.auth_principal = principal
    return principal


def require_roles(*roles: UserRole, denied_message: str = "Insufficient permissions") -> PrincipalDependency:
    """Build a dependency that admits only principals holding one of ``roles``."""
    allowed = frozenset(roles)

    async def _require_roles(
        request: Request,
        principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
    ) -> AuthPrincipal:
        try:
            return ensure_role(principal, allowed, denied_message=denied_message)
        except AuthRejection:
            logger.warning(
                "authz.role_denied method=%s path=%s principal_id=%s role=%s",
                request.method,
                request.url.path,
                safe_log_identifier(principal.id, prefix="pid"),
                principal.role.value,
            )
            raise

    return _require_roles


require_client = require_roles(UserRole.CLIENT, denied_message="Client access only")
require_admin = require_roles(*ADMIN_ROLES, denied_message="Admin access required")


async def _json_body_value(request: Request, key: str) -> Any:
    try:
        body = await request.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    # Returned as decoded; a non-string id never equals a principal id.
    return body.get(key)


def require_resource_owner(param: str = "userId") -> PrincipalDependency:
    """Build a dependency enforcing that clients only reach resources they own.

    The owner id is read from the path parameter ``param``, then from the JSON body.
    """

    async def _require_resource_owner(
        request: Request,
        principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
    ) -> AuthPrincipal:
        owner_id = request.path_params.get(param)
        if owner_id is None and request.method in _BODY_METHODS:
            owner_id = await _json_body_value(request, param)

        try:
            decision = ensure_resource_access(principal, owner_id)
        except AuthRejection:
            logger.warning(
                "authz.ownership_denied method=%s path=%s principal_id=%s owner_id=%s",
                request.method,
                request.url.path,
                safe_log_identifier(principal.id, prefix="pid"),
                safe_log_identifier(owner_id, prefix="pid"),
            )
            raise

        logger.info(
            "authz.ownership_allowed method=%s path=%s role=%s decision=%s",
            request.method,
            request.url.path,
            principal.role.value,
            decision.value,
        )
        return principal

    return _require_resource_owner


def get_pagination(request: Request) -> PaginationParams:
    return get_pagination_params(request.query_params)


def get_user_service(store: Annotated[InMemoryStore, Depends(get_store)]) -> UserService:
    return UserService(store)


def get_policy_service(store: Annotated[InMemoryStore, Depends(get_store)]) -> PolicyService:
    return PolicyService(store)


def get_claim_service(store: Annotated[InMemoryStore, Depends(get_store)]) -> ClaimService:
    return ClaimService(store)


def get_document_service(
    store: Annotated[InMemoryStore, Depends(get_store)],
    storage: Annotated[StorageProvider, Depends(get_storage)],
) -> DocumentService:
    return DocumentService(store, storage)


def get_change_request_service(store: Annotated[InMemoryStore, Depends(get_store)]) -> ChangeRequestService:
    return ChangeRequestService(store)


def get_message_service(store: Annotated[InMemoryStore, Depends(get_store)]) -> MessageService:
    return MessageService(store)


def get_payment_service(store: Annotated[InMemoryStore, Depends(get_store)]) -> PaymentService:
    return PaymentService(store)


def get_audit_trail(store: Annotated[InMemoryStore, Depends(get_store)]) -> AuditTrail:
    return AuditTrail(store)
