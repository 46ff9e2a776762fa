"""
crm_ingest/services package marker.
"""

from crm_ingest.services.file_upload import FileMetadata, FileUploadError, FileUploadValidator
from crm_ingest.services.import_service import (
    CSVImportService,
    HealthScoreCalculator,
    ImportReport,
    get_import_service,
)

__all__ = [
    "CSVImportService",
    "FileMetadata",
    "FileUploadError",
    "FileUploadValidator",
    "HealthScoreCalculator",
    "ImportReport",
    "get_import_service",
]
