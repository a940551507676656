"""Error classification and error envelope tests."""

from __future__ import annotations

import unittest
from datetime import UTC, datetime

from fastapi import APIRouter
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.core.error_handling import build_error_envelope, classify_error
from app.errors import (
    ApiError,
    InvalidTokenError,
    PersistenceError,
    RequestValidationFailed,
    TokenExpiredError,
    UploadError,
    UploadErrorCode,
)
from app.main import create_app


def _raise_in_handler(exc: Exception):
    async def _handler() -> None:
        raise exc

    return _handler


def _client_with_failing_route(environment: str, exc: Exception) -> TestClient:
    app = create_app(Settings(auth_provider="mock", environment=environment))
    router = APIRouter()
    router.add_api_route("/boom", _raise_in_handler(exc), methods=["GET"])
    app.include_router(router)
    return TestClient(app, raise_server_exceptions=False)


class ClassifyErrorTests(unittest.TestCase):
    def test_persistence_codes(self) -> None:
        cases = [
            ("P2002", 409, "Resource already exists"),
            ("P2025", 404, "Resource not found"),
            ("P2003", 400, "Invalid reference"),
            ("P2014", 400, "Invalid relation"),
            ("P2034", 500, "Database error"),
        ]
        for code, status_code, message in cases:
            with self.subTest(code=code):
                report = classify_error(PersistenceError(code, "provider message"))
                self.assertEqual(report.status_code, status_code)
                self.assertEqual(report.message, message)

    def test_unique_constraint_details_name_target_fields(self) -> None:
        report = classify_error(PersistenceError("P2002", "dup", target=["email"]))
        self.assertEqual(report.details, "Duplicate value for: email")
        report = classify_error(PersistenceError("P2002", "dup"))
        self.assertEqual(report.details, "Duplicate value for: unknown field")

    def test_validation_error_has_field_details(self) -> None:
        exc = RequestValidationFailed.from_errors(
            [
                {"loc": ("body", "incident", "location"), "msg": "Field required"},
                {"loc": ("query", "limit"), "msg": "Input should be a valid integer"},
            ]
        )
        report = classify_error(exc)
        self.assertEqual(report.status_code, 400)
        self.assertEqual(report.message, "Validation Error")
        self.assertEqual(
            report.details,
            [
                {"field": "incident.location", "message": "Field required"},
                {"field": "limit", "message": "Input should be a valid integer"},
            ],
        )

    def test_explicit_status_is_used_verbatim(self) -> None:
        report = classify_error(ApiError(status_code=418, message="Teapot"))
        self.assertEqual((report.status_code, report.message), (418, "Teapot"))

    def test_token_errors(self) -> None:
        expired = classify_error(TokenExpiredError())
        self.assertEqual((expired.status_code, expired.message), (401, "Token expired"))
        invalid = classify_error(InvalidTokenError())
        self.assertEqual((invalid.status_code, invalid.message), (401, "Invalid token"))

    def test_upload_errors(self) -> None:
        too_large = classify_error(UploadError(UploadErrorCode.LIMIT_FILE_SIZE, max_file_size=10 * 1024 * 1024))
        self.assertEqual((too_large.status_code, too_large.message), (413, "File too large"))
        self.assertEqual(too_large.details, "Maximum file size is 10MB")

        too_many = classify_error(UploadError(UploadErrorCode.LIMIT_FILE_COUNT))
        self.assertEqual((too_many.status_code, too_many.message), (400, "Too many files"))

        unexpected = classify_error(UploadError(UploadErrorCode.LIMIT_UNEXPECTED_FILE, field="avatar"))
        self.assertEqual((unexpected.status_code, unexpected.message), (400, "Unexpected file field"))

    def test_unknown_error_falls_back_to_500(self) -> None:
        report = classify_error(RuntimeError("secret connection string"))
        self.assertEqual((report.status_code, report.message), (500, "Internal Server Error"))


class ErrorEnvelopeTests(unittest.TestCase):
    def test_production_scrubs_server_errors(self) -> None:
        exc = PersistenceError("P2034", "deadlock on table claims")
        envelope = build_error_envelope(exc, classify_error(exc), environment="production")
        self.assertEqual(envelope.error, "Internal Server Error")
        self.assertIsNone(envelope.details)
        self.assertIsNone(envelope.stack)

    def test_production_keeps_client_error_details(self) -> None:
        exc = PersistenceError("P2002", "dup", target=["policy_number"])
        envelope = build_error_envelope(exc, classify_error(exc), environment="production")
        self.assertEqual(envelope.error, "Resource already exists")
        self.assertEqual(envelope.details, "Duplicate value for: policy_number")

    def test_development_adds_stack_timestamp_and_debug_details(self) -> None:
        now = datetime(2024, 5, 1, tzinfo=UTC)
        try:
            raise PersistenceError("P2034", "deadlock on table claims")
        except PersistenceError as exc:
            envelope = build_error_envelope(exc, classify_error(exc), environment="development", now=now)
        self.assertEqual(envelope.error, "Database error")
        self.assertEqual(envelope.details, "deadlock on table claims")
        self.assertIn("PersistenceError", envelope.stack)
        self.assertEqual(envelope.timestamp, now)

    def test_test_environment_hides_debug_details_without_scrubbing(self) -> None:
        exc = PersistenceError("P2034", "deadlock")
        envelope = build_error_envelope(exc, classify_error(exc), environment="test")
        self.assertEqual(envelope.error, "Database error")
        self.assertIsNone(envelope.details)
        self.assertIsNone(envelope.timestamp)


class ErrorHandlerApiTests(unittest.TestCase):
    def test_unhandled_error_in_production_is_generic_500(self) -> None:
        client = _client_with_failing_route("production", RuntimeError("db password is hunter2"))
        response = client.get("/boom")
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"success": False, "error": "Internal Server Error"})

    def test_unhandled_error_keeps_cors_and_correlation_headers(self) -> None:
        client = _client_with_failing_route("production", RuntimeError("boom"))
        response = client.get(
            "/boom",
            headers={"Origin": "http://localhost:3000", "X-Correlation-Id": "req-cors-500"},
        )
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.headers["access-control-allow-origin"], "http://localhost:3000")
        self.assertEqual(response.headers["x-correlation-id"], "req-cors-500")
        self.assertEqual(response.json(), {"success": False, "error": "Internal Server Error"})

    def test_tagged_error_in_development_includes_stack(self) -> None:
        client = _client_with_failing_route("development", PersistenceError("P2025", "missing row"))
        response = client.get("/boom")
        self.assertEqual(response.status_code, 404)
        body = response.json()
        self.assertEqual(body["error"], "Resource not found")
        self.assertIn("stack", body)
        self.assertIn("timestamp", body)

    def test_token_error_raised_by_handler_is_401(self) -> None:
        client = _client_with_failing_route("test", TokenExpiredError())
        response = client.get("/boom")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"success": False, "error": "Token expired"})

    def test_unknown_route_uses_error_envelope(self) -> None:
        client = TestClient(create_app(Settings(auth_provider="mock", environment="test")))
        response = client.get("/api/does-not-exist")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"success": False, "error": "Not Found"})

    def test_request_body_validation_is_400_with_field_details(self) -> None:
        app = create_app(Settings(auth_provider="mock", environment="test"))
        client = TestClient(app)
        response = client.post(
            "/api/claims",
            headers={"Authorization": "Bearer test:client-1:CLIENT"},
            json={"policy_id": "p1", "incident_location": "Main St", "description": "short"},
        )
        self.assertEqual(response.status_code, 400)
        body = response.json()
        self.assertEqual(body["error"], "Validation Error")
        fields = {issue["field"] for issue in body["details"]}
        self.assertEqual(fields, {"incident_date", "description"})
