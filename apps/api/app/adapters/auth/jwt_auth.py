"""JWT bearer token verifier backed by the user directory."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any, Protocol

import jwt

from app.adapters.auth.base import AuthStrategyError, AuthVerificationError, TokenVerifier
from app.errors import InvalidTokenError, TokenExpiredError
from app.schemas.auth import AuthPrincipal, UserRole


class UserDirectory(Protocol):
    def get_user(self, user_id: str) -> Any | None: ...


def create_access_token(
    subject: str,
    *,
    secret: str,
    algorithm: str = "HS256",
    expires_in: timedelta = timedelta(hours=1),
    now: datetime | None = None,
) -> str:
    """Issue a signed access token for ``subject``."""
    issued_at = now or datetime.now(UTC)
    payload = {
        "sub": subject,
        "iat": issued_at,
        "exp": issued_at + expires_in,
        "type": "access",
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


def decode_access_token(token: str, *, secret: str, algorithm: str = "HS256") -> dict[str, Any]:
    """Decode and validate a token, raising tagged token errors on failure."""
    try:
        return jwt.decode(token, secret, algorithms=[algorithm], options={"require": ["sub", "exp"]})
    except jwt.ExpiredSignatureError as exc:
        raise TokenExpiredError("Token expired") from exc
    except jwt.PyJWTError as exc:
        raise InvalidTokenError("Invalid token") from exc


class JwtTokenVerifier(TokenVerifier):
    """Verifies HS-signed JWTs and loads the active user they identify."""

    def __init__(self, secret: str | None, algorithm: str, users: UserDirectory) -> None:
        self._secret = secret
        self._algorithm = algorithm
        self._users = users

    def verify_token(self, token: str) -> AuthPrincipal:
        if not self._secret:
            raise AuthStrategyError("JWT secret is not configured")

        claims = decode_access_token(token, secret=self._secret, algorithm=self._algorithm)
        user_id = str(claims.get("sub") or "").strip()
        if not user_id:
            raise AuthVerificationError("Bearer token missing user identity")

        try:
            user = self._users.get_user(user_id)
        except Exception as exc:
            raise AuthStrategyError("User lookup failed") from exc

        if user is None or not user.is_active:
            raise AuthVerificationError("Valid JWT token required")

        return AuthPrincipal(id=user.id, email=user.email, role=UserRole(user.role))


__all__ = ["JwtTokenVerifier", "UserDirectory", "create_access_token", "decode_access_token"]
