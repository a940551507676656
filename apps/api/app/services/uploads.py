"""Multipart upload limits."""

from __future__ import annotations

from collections.abc import Collection
from dataclasses import dataclass

from starlette.datastructures import FormData, UploadFile

from app.errors import ApiError, UploadError, UploadErrorCode


@dataclass(frozen=True, slots=True)
class IncomingFile:
    field_name: str
    filename: str
    content_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)


async def read_single_upload(
    form: FormData,
    *,
    field_name: str,
    max_file_size: int,
    allowed_types: Collection[str],
) -> IncomingFile | None:
    """Return the single file posted under ``field_name``, enforcing upload limits.

    Returns ``None`` when the form carries no file at all.
    """
    uploads = [(key, value) for key, value in form.multi_items() if isinstance(value, UploadFile)]
    for key, _ in uploads:
        if key != field_name:
            raise UploadError(UploadErrorCode.LIMIT_UNEXPECTED_FILE, field=key)
    if len(uploads) > 1:
        raise UploadError(UploadErrorCode.LIMIT_FILE_COUNT)
    if not uploads:
        return None

    upload = uploads[0][1]
    # One byte past the limit is enough to know the file is too large.
    content = await upload.read(max_file_size + 1)
    if len(content) > max_file_size:
        raise UploadError(UploadErrorCode.LIMIT_FILE_SIZE, max_file_size=max_file_size)

    content_type = upload.content_type or "application/octet-stream"
    if content_type not in allowed_types:
        raise ApiError(status_code=400, message="Invalid file type")

    return IncomingFile(
        field_name=field_name,
        filename=upload.filename or "upload",
        content_type=content_type,
        content=content,
    )
