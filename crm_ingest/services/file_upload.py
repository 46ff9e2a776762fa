"""
crm_ingest/services/file_upload.py

Validation and decoding for uploaded CSV files before parsing begins.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from crm_ingest.config import DEFAULT_MAX_UPLOAD_BYTES
from crm_ingest.error_codes import UploadErrorCode

logger = logging.getLogger(__name__)

ACCEPTED_CONTENT_TYPES = {
    "text/csv",
    "application/csv",
    "text/plain",
    "application/vnd.ms-excel",
}


class FileUploadError(ValueError):
    """
    Raised when an uploaded file is rejected before parsing.
    """

    def __init__(self, *, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message}


@dataclass(frozen=True)
class FileMetadata:
    name: str
    size: int
    content_type: str
    last_modified: datetime | None = None


class FileUploadValidator:
    """
    Checks size and type of an uploaded file and decodes its text.
    """

    def __init__(self, *, max_size_bytes: int = DEFAULT_MAX_UPLOAD_BYTES) -> None:
        self._max_size_bytes = max(1, max_size_bytes)

    def validate(
        self,
        *,
        filename: str | None,
        size: int,
        content_type: str | None,
        last_modified: datetime | None = None,
    ) -> FileMetadata:
        name = (filename or "").strip()
        mime = (content_type or "").strip().lower()

        if size == 0:
            raise FileUploadError(code=UploadErrorCode.EMPTY_FILE, message="File is empty")

        if size > self._max_size_bytes:
            limit_mb = round(self._max_size_bytes / 1024 / 1024)
            raise FileUploadError(
                code=UploadErrorCode.FILE_TOO_LARGE,
                message=f"File exceeds maximum size of {limit_mb}MB",
            )

        if mime not in ACCEPTED_CONTENT_TYPES and not name.lower().endswith(".csv"):
            raise FileUploadError(code=UploadErrorCode.INVALID_TYPE, message="File must be a CSV file")

        return FileMetadata(name=name, size=size, content_type=mime, last_modified=last_modified)

    def read_text(self, raw: bytes, *, filename: str | None, content_type: str | None) -> tuple[str, FileMetadata]:
        """
        Validate an in-memory upload and decode it as UTF-8.
        """

        metadata = self.validate(filename=filename, size=len(raw), content_type=content_type)
        try:
            content = raw.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            logger.warning("CSV upload rejected name=%r: not valid UTF-8 (%s)", metadata.name, exc)
            raise FileUploadError(
                code=UploadErrorCode.ENCODING_ERROR,
                message="CSV must be UTF-8 encoded.",
            ) from exc

        logger.info("CSV upload accepted name=%r size=%s content_type=%r", metadata.name, metadata.size, metadata.content_type)
        return content, metadata
