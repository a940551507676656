"""Role and resource-ownership authorization rules."""

from __future__ import annotations

from collections.abc import Collection
from enum import Enum

from app.errors import AuthRejection
from app.schemas.auth import AuthPrincipal, UserRole

ADMIN_ROLES: frozenset[UserRole] = frozenset(
    {
        UserRole.ADMIN,
        UserRole.SUPER_ADMIN,
        UserRole.CLAIMS_ADJUSTER,
        UserRole.BILLING_SPECIALIST,
    }
)

UNRESTRICTED_ROLES: frozenset[UserRole] = frozenset({UserRole.SUPER_ADMIN, UserRole.ADMIN})

# Staff roles pass the ownership check here; individual endpoints may narrow access further.
DELEGATED_ROLES: frozenset[UserRole] = frozenset(
    {
        UserRole.AGENT,
        UserRole.CLAIMS_ADJUSTER,
        UserRole.BILLING_SPECIALIST,
    }
)


class AccessDecision(str, Enum):
    ALLOWED = "ALLOWED"
    ALLOWED_DELEGATED = "ALLOWED_DELEGATED"
    DENIED = "DENIED"


def _authentication_required() -> AuthRejection:
    return AuthRejection(status_code=401, error="Authentication required")


def ensure_role(
    principal: AuthPrincipal | None,
    allowed_roles: Collection[UserRole],
    *,
    denied_message: str = "Insufficient permissions",
) -> AuthPrincipal:
    """Return the principal if its role is in ``allowed_roles``."""
    if principal is None:
        raise _authentication_required()
    if principal.role not in allowed_roles:
        raise AuthRejection(status_code=403, error="Forbidden", message=denied_message)
    return principal


def resource_access_decision(principal: AuthPrincipal, resource_owner_id: object | None) -> AccessDecision:
    """Decide whether ``principal`` may touch a resource owned by ``resource_owner_id``.

    Ownership is strict string equality. A request that names no owner is left to the
    endpoint, which scopes its queries to the caller.
    """
    if principal.role in UNRESTRICTED_ROLES:
        return AccessDecision.ALLOWED
    if principal.role in DELEGATED_ROLES:
        return AccessDecision.ALLOWED_DELEGATED
    if resource_owner_id and resource_owner_id != principal.id:
        return AccessDecision.DENIED
    return AccessDecision.ALLOWED


def ensure_resource_access(principal: AuthPrincipal | None, resource_owner_id: object | None) -> AccessDecision:
    if principal is None:
        raise _authentication_required()
    decision = resource_access_decision(principal, resource_owner_id)
    if decision is AccessDecision.DENIED:
        raise AuthRejection(
            status_code=403,
            error="Forbidden",
            message="Can only access your own resources",
        )
    return decision


__all__ = [
    "ADMIN_ROLES",
    "DELEGATED_ROLES",
    "UNRESTRICTED_ROLES",
    "AccessDecision",
    "ensure_resource_access",
    "ensure_role",
    "resource_access_decision",
]
