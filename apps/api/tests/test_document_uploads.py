"""Document upload limits and listing tests."""

from __future__ import annotations

import unittest
from datetime import date
from decimal import Decimal
from io import BytesIO

from fastapi.testclient import TestClient
from starlette.datastructures import FormData, Headers, UploadFile

from app.core.config import Settings
from app.errors import UploadError, UploadErrorCode
from app.main import create_app
from app.schemas.policy import PolicyStatus, PolicyType
from app.services.uploads import read_single_upload

CLIENT_A = {"Authorization": "Bearer test:client-a:CLIENT"}
PDF_BYTES = b"%PDF-1.4 tiny"


class DocumentUploadApiTests(unittest.TestCase):
    def setUp(self) -> None:
        self.app = create_app(Settings(auth_provider="mock", environment="test", max_file_size=64))
        self.client = TestClient(self.app)
        self.store = self.app.state.store
        for user_id in ("client-a", "client-b"):
            self.store.create_user(
                user_id=user_id,
                email=f"{user_id}@example.com",
                first_name="Test",
                last_name="User",
            )
        self.policy_b = self.store.create_policy(
            user_id="client-b",
            policy_number="POL-B",
            policy_type=PolicyType.AUTO,
            status=PolicyStatus.ACTIVE,
            premium_amount=Decimal("10"),
            start_date=date(2024, 1, 1),
            end_date=date(2025, 1, 1),
        )

    def _upload(self, files, data=None):
        return self.client.post(
            "/api/documents/upload",
            headers=CLIENT_A,
            files=files,
            data=data if data is not None else {"document_type": "CLAIM_SUPPORT"},
        )

    def test_upload_stores_file_and_records_document(self) -> None:
        response = self._upload({"file": ("receipt.pdf", PDF_BYTES, "application/pdf")})

        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body["message"], "Document uploaded successfully")
        document = body["document"]
        self.assertEqual(document["filename"], "receipt.pdf")
        self.assertEqual(document["file_type"], "application/pdf")
        self.assertEqual(document["file_size"], len(PDF_BYTES))
        self.assertEqual(document["document_type"], "CLAIM_SUPPORT")
        self.assertTrue(document["url"].startswith("memory://assureme-documents/client-a_"))

        storage = self.app.state.storage
        self.assertEqual(len(storage.objects), 1)
        stored_type, stored_bytes = next(iter(storage.objects.values()))
        self.assertEqual((stored_type, stored_bytes), ("application/pdf", PDF_BYTES))

        listed = self.client.get("/api/documents?document_type=CLAIM_SUPPORT", headers=CLIENT_A).json()
        self.assertEqual(listed["totalCount"], 1)
        self.assertEqual(listed["data"][0]["id"], document["id"])

    def test_file_over_limit_is_413(self) -> None:
        response = self._upload({"file": ("big.pdf", b"x" * 65, "application/pdf")})
        self.assertEqual(response.status_code, 413)
        self.assertEqual(response.json()["error"], "File too large")
        self.assertEqual(self.store.documents, {})

    def test_unexpected_file_field_is_400(self) -> None:
        response = self._upload({"avatar": ("me.png", b"png", "image/png")})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(
            response.json(),
            {"success": False, "error": "Unexpected file field", "details": "avatar"},
        )

    def test_more_than_one_file_is_400(self) -> None:
        response = self._upload(
            [
                ("file", ("a.pdf", PDF_BYTES, "application/pdf")),
                ("file", ("b.pdf", PDF_BYTES, "application/pdf")),
            ]
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "Too many files")

    def test_missing_file_is_400(self) -> None:
        response = self.client.post(
            "/api/documents/upload",
            headers=CLIENT_A,
            data={"document_type": "CLAIM_SUPPORT"},
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "File is required")

    def test_disallowed_mime_type_is_400(self) -> None:
        response = self._upload({"file": ("notes.txt", b"hello", "text/plain")})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "Invalid file type")

    def test_document_type_is_required_and_validated(self) -> None:
        missing = self._upload({"file": ("a.pdf", PDF_BYTES, "application/pdf")}, data={})
        self.assertEqual(missing.status_code, 400)
        self.assertEqual(missing.json()["error"], "Document type is required")

        unknown = self._upload(
            {"file": ("a.pdf", PDF_BYTES, "application/pdf")},
            data={"document_type": "SELFIE"},
        )
        self.assertEqual(unknown.status_code, 400)
        self.assertEqual(unknown.json()["error"], "Validation Error")
        self.assertEqual(unknown.json()["details"][0]["field"], "document_type")

    def test_cannot_attach_to_other_owners_policy(self) -> None:
        response = self._upload(
            {"file": ("a.pdf", PDF_BYTES, "application/pdf")},
            data={"document_type": "POLICY_CONTRACT", "policy_id": self.policy_b.id},
        )
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["error"], "Policy not found")
        self.assertEqual(self.app.state.storage.objects, {})

    def test_upload_requires_client_role(self) -> None:
        response = self.client.post(
            "/api/documents/upload",
            headers={"Authorization": "Bearer test:admin-1:ADMIN"},
            files={"file": ("a.pdf", PDF_BYTES, "application/pdf")},
            data={"document_type": "OTHER"},
        )
        self.assertEqual(response.status_code, 403)

    def test_back_to_back_uploads_get_distinct_storage_ids(self) -> None:
        first = self._upload({"file": ("a.pdf", PDF_BYTES, "application/pdf")}).json()["document"]
        second = self._upload({"file": ("b.pdf", b"%PDF-1.4 other", "application/pdf")}).json()["document"]

        self.assertNotEqual(first["url"], second["url"])
        self.assertEqual(len(self.app.state.storage.objects), 2)


class _RecordingStream(BytesIO):
    def __init__(self, payload: bytes) -> None:
        super().__init__(payload)
        self.read_sizes: list[int] = []

    def read(self, size: int | None = -1) -> bytes:
        self.read_sizes.append(-1 if size is None else size)
        return super().read(size)


class ReadSingleUploadTests(unittest.IsolatedAsyncioTestCase):
    async def test_oversized_file_is_read_only_past_the_limit(self) -> None:
        stream = _RecordingStream(b"x" * 10_000)
        upload = UploadFile(
            file=stream,
            filename="huge.pdf",
            headers=Headers({"content-type": "application/pdf"}),
        )

        with self.assertRaises(UploadError) as raised:
            await read_single_upload(
                FormData([("file", upload)]),
                field_name="file",
                max_file_size=64,
                allowed_types={"application/pdf"},
            )

        self.assertEqual(raised.exception.code, UploadErrorCode.LIMIT_FILE_SIZE)
        self.assertEqual(stream.read_sizes, [65])

    async def test_file_at_the_limit_is_accepted(self) -> None:
        upload = UploadFile(
            file=BytesIO(b"x" * 64),
            filename="exact.pdf",
            headers=Headers({"content-type": "application/pdf"}),
        )
        incoming = await read_single_upload(
            FormData([("file", upload)]),
            field_name="file",
            max_file_size=64,
            allowed_types={"application/pdf"},
        )
        self.assertEqual(incoming.size, 64)
        self.assertEqual(incoming.content_type, "application/pdf")
