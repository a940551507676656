"""Authentication dependency and adapter tests."""

from __future__ import annotations

import os
import unittest
from datetime import UTC, datetime, timedelta

from fastapi import Depends, Request
from fastapi.testclient import TestClient

from app.adapters.auth.base import AuthStrategyError, AuthVerificationError
from app.adapters.auth.jwt_auth import JwtTokenVerifier, create_access_token, decode_access_token
from app.adapters.auth.mock_auth import MockTokenVerifier
from app.core.config import Settings, get_settings
from app.errors import InvalidTokenError, TokenExpiredError
from app.main import create_app
from app.repositories.memory import InMemoryStore
from app.routes.dependencies import get_authenticated_principal, require_resource_owner
from app.schemas.auth import AuthPrincipal, UserRole

JWT_SECRET = "test-jwt-secret"


class _SettingsEnvCase(unittest.TestCase):
    _env_keys = (
        "ASSUREME_AUTH_PROVIDER",
        "ASSUREME_ENVIRONMENT",
        "ASSUREME_JWT_SECRET",
    )

    def setUp(self) -> None:
        self._old_env = {k: os.environ.get(k) for k in self._env_keys}
        os.environ["ASSUREME_AUTH_PROVIDER"] = "jwt"
        os.environ["ASSUREME_ENVIRONMENT"] = "test"
        os.environ["ASSUREME_JWT_SECRET"] = JWT_SECRET
        get_settings.cache_clear()

    def tearDown(self) -> None:
        for key, value in self._old_env.items():
            if value is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = value
        get_settings.cache_clear()


class JwtAuthApiTests(_SettingsEnvCase):
    def setUp(self) -> None:
        super().setUp()
        self.app = create_app()
        self.client = TestClient(self.app)
        self.store: InMemoryStore = self.app.state.store
        self.store.create_user(
            user_id="user-1",
            email="Jane.Doe@Example.com",
            first_name="Jane",
            last_name="Doe",
        )

    def _headers(self, token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}

    def test_settings_are_loaded_from_environment(self) -> None:
        settings = self.app.state.settings
        self.assertEqual(settings.auth_provider, "jwt")
        self.assertEqual(settings.environment, "test")
        self.assertEqual(settings.jwt_secret, JWT_SECRET)

    def test_missing_header_is_rejected(self) -> None:
        response = self.client.get("/api/users/profile")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(
            response.json(),
            {"success": False, "error": "Unauthorized", "message": "Valid JWT token required"},
        )

    def test_non_bearer_scheme_is_rejected(self) -> None:
        response = self.client.get("/api/users/profile", headers={"Authorization": "Basic dXNlcjpwYXNz"})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["message"], "Valid JWT token required")

    def test_valid_token_reaches_handler(self) -> None:
        token = create_access_token("user-1", secret=JWT_SECRET)
        response = self.client.get("/api/users/profile", headers=self._headers(token))
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["user"]["id"], "user-1")
        self.assertEqual(body["user"]["email"], "jane.doe@example.com")
        self.assertEqual(body["user"]["role"], "CLIENT")

    def test_token_signed_with_other_secret_is_rejected(self) -> None:
        token = create_access_token("user-1", secret="another-secret")
        response = self.client.get("/api/users/profile", headers=self._headers(token))
        self.assertEqual(response.status_code, 401)
        self.assertEqual(
            response.json(),
            {"success": False, "error": "Unauthorized", "message": "Invalid token"},
        )

    def test_expired_token_is_rejected(self) -> None:
        token = create_access_token(
            "user-1",
            secret=JWT_SECRET,
            now=datetime.now(UTC) - timedelta(hours=2),
        )
        response = self.client.get("/api/users/profile", headers=self._headers(token))
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["message"], "Token expired")

    def test_unknown_and_inactive_users_are_rejected(self) -> None:
        self.store.create_user(
            user_id="user-2",
            email="inactive@example.com",
            first_name="In",
            last_name="Active",
            is_active=False,
        )
        for subject in ("user-2", "ghost"):
            with self.subTest(subject=subject):
                token = create_access_token(subject, secret=JWT_SECRET)
                response = self.client.get("/api/users/profile", headers=self._headers(token))
                self.assertEqual(response.status_code, 401)
                self.assertEqual(response.json()["message"], "Valid JWT token required")

    def test_missing_secret_is_a_server_side_failure(self) -> None:
        app = create_app(Settings(auth_provider="jwt", environment="test", jwt_secret=None))
        client = TestClient(app)
        token = create_access_token("user-1", secret=JWT_SECRET)

        response = client.get("/api/users/profile", headers=self._headers(token))

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"success": False, "error": "Authentication error"})

    def test_correlation_id_is_echoed(self) -> None:
        response = self.client.get("/health", headers={"X-Correlation-Id": "req-abc"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.headers["X-Correlation-Id"], "req-abc")


class PrincipalAttachmentTests(unittest.TestCase):
    def test_principal_is_attached_to_request_state(self) -> None:
        app = create_app(Settings(auth_provider="mock", environment="test"))

        @app.get("/_whoami")
        async def _whoami(
            request: Request,
            principal: AuthPrincipal = Depends(get_authenticated_principal),
        ) -> dict[str, str]:
            attached = request.state.auth_principal
            return {"id": attached.id, "role": attached.role.value, "same": str(attached is principal)}

        client = TestClient(app)
        response = client.get("/_whoami", headers={"Authorization": "Bearer test:agent-7:agent"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"id": "agent-7", "role": "AGENT", "same": "True"})

    def test_invalid_mock_token_is_unauthorized(self) -> None:
        client = TestClient(create_app(Settings(auth_provider="mock", environment="test")))
        response = client.get("/api/users/profile", headers={"Authorization": "Bearer nonsense"})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["error"], "Unauthorized")


class BodyOwnershipTests(unittest.TestCase):
    def setUp(self) -> None:
        app = create_app(Settings(auth_provider="mock", environment="test"))

        @app.post("/_owned")
        async def _owned(principal: AuthPrincipal = Depends(require_resource_owner("userId"))) -> dict[str, str]:
            return {"id": principal.id}

        self.client = TestClient(app)
        self.headers = {"Authorization": "Bearer test:123:CLIENT"}

    def test_string_owner_matching_principal_is_allowed(self) -> None:
        response = self.client.post("/_owned", headers=self.headers, json={"userId": "123"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"id": "123"})

    def test_numeric_owner_is_not_coerced(self) -> None:
        response = self.client.post("/_owned", headers=self.headers, json={"userId": 123})
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["message"], "Can only access your own resources")

    def test_other_owner_in_body_is_denied(self) -> None:
        response = self.client.post("/_owned", headers=self.headers, json={"userId": "456"})
        self.assertEqual(response.status_code, 403)


class MockTokenVerifierTests(unittest.TestCase):
    def test_defaults_role_and_email(self) -> None:
        principal = MockTokenVerifier().verify_token("test:user-1")
        self.assertEqual(principal.id, "user-1")
        self.assertIs(principal.role, UserRole.CLIENT)
        self.assertEqual(principal.email, "user-1@example.test")

    def test_explicit_role_and_email(self) -> None:
        principal = MockTokenVerifier().verify_token("test:admin-1:super_admin:boss@example.com")
        self.assertIs(principal.role, UserRole.SUPER_ADMIN)
        self.assertEqual(principal.email, "boss@example.com")

    def test_rejects_malformed_tokens(self) -> None:
        verifier = MockTokenVerifier()
        for token in ("user-1", "test:", "test:user-1:WIZARD", "prod:user-1"):
            with self.subTest(token=token):
                with self.assertRaises(AuthVerificationError):
                    verifier.verify_token(token)


class JwtTokenVerifierTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = InMemoryStore()
        self.store.create_user(
            user_id="adj-1",
            email="adjuster@example.com",
            first_name="Ada",
            last_name="Juster",
            role=UserRole.CLAIMS_ADJUSTER,
        )

    def test_principal_is_built_from_directory_record(self) -> None:
        verifier = JwtTokenVerifier(secret=JWT_SECRET, algorithm="HS256", users=self.store)
        principal = verifier.verify_token(create_access_token("adj-1", secret=JWT_SECRET))
        self.assertEqual(principal.id, "adj-1")
        self.assertEqual(principal.email, "adjuster@example.com")
        self.assertIs(principal.role, UserRole.CLAIMS_ADJUSTER)

    def test_decode_raises_tagged_token_errors(self) -> None:
        expired = create_access_token(
            "adj-1",
            secret=JWT_SECRET,
            now=datetime.now(UTC) - timedelta(days=1),
        )
        with self.assertRaises(TokenExpiredError):
            decode_access_token(expired, secret=JWT_SECRET)
        with self.assertRaises(InvalidTokenError):
            decode_access_token("not-a-jwt", secret=JWT_SECRET)

    def test_missing_secret_is_strategy_error(self) -> None:
        verifier = JwtTokenVerifier(secret=None, algorithm="HS256", users=self.store)
        with self.assertRaises(AuthStrategyError):
            verifier.verify_token("anything")

    def test_directory_failure_is_strategy_error(self) -> None:
        class _BrokenDirectory:
            def get_user(self, user_id: str) -> None:
                raise ConnectionError("directory unavailable")

        verifier = JwtTokenVerifier(secret=JWT_SECRET, algorithm="HS256", users=_BrokenDirectory())
        with self.assertRaises(AuthStrategyError):
            verifier.verify_token(create_access_token("adj-1", secret=JWT_SECRET))
