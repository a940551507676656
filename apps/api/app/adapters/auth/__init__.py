"""Auth verifier adapters."""

from .base import AuthStrategyError, AuthVerificationError, TokenVerifier
from .jwt_auth import JwtTokenVerifier, create_access_token, decode_access_token
from .mock_auth import MockTokenVerifier

__all__ = [
    "AuthStrategyError",
    "AuthVerificationError",
    "TokenVerifier",
    "JwtTokenVerifier",
    "MockTokenVerifier",
    "create_access_token",
    "decode_access_token",
]
