"""
crm_ingest/api/dependencies.py

Shared FastAPI dependencies for request handling.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import File, HTTPException, UploadFile, status

from crm_ingest.error_codes import UploadErrorCode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadedCSV:
    raw: bytes
    filename: str | None
    content_type: str | None


def get_csv_upload(file: UploadFile = File(...)) -> UploadedCSV:
    """
    Read the uploaded file fully into memory.

    Size, type, and encoding checks happen in the import service so HTTP and
    non-HTTP callers share one set of rules.
    """

    try:
        raw = file.file.read()
    except OSError as exc:
        logger.warning("CSV upload read failed name=%r: %s", file.filename, exc)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"code": UploadErrorCode.READ_ERROR, "message": "Failed to read file"},
        ) from exc
    finally:
        file.file.close()

    return UploadedCSV(raw=raw, filename=file.filename, content_type=file.content_type)
