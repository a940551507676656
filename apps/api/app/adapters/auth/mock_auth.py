"""Mock auth verifier for local development and tests."""

from app.adapters.auth.base import AuthVerificationError, TokenVerifier
from app.schemas.auth import AuthPrincipal, UserRole


class MockTokenVerifier(TokenVerifier):
    """Accepts deterministic test tokens only.

    Expected token format:
    - ``test:<user_id>``
    - ``test:<user_id>:<ROLE>``
    - ``test:<user_id>:<ROLE>:<email>``
    """

    def verify_token(self, token: str) -> AuthPrincipal:
        parts = token.split(":")
        if len(parts) not in (2, 3, 4) or parts[0] != "test":
            raise AuthVerificationError("Invalid bearer token")

        user_id = parts[1].strip()
        role_name = parts[2].strip().upper() if len(parts) >= 3 else UserRole.CLIENT.value
        email = parts[3].strip() if len(parts) == 4 else f"{user_id}@example.test"

        if not user_id:
            raise AuthVerificationError("Bearer token missing user identity")
        try:
            role = UserRole(role_name)
        except ValueError as exc:
            raise AuthVerificationError("Bearer token has unknown role") from exc

        return AuthPrincipal(id=user_id, email=email, role=role)


__all__ = ["MockTokenVerifier"]
