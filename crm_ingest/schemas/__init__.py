"""
crm_ingest/schemas package marker.
"""

from crm_ingest.schemas.csv_import import (
    ImportReportResponse,
    ParseErrorResponse,
    ShapeDetectionResponse,
    ValidationErrorResponse,
)

__all__ = [
    "ImportReportResponse",
    "ParseErrorResponse",
    "ShapeDetectionResponse",
    "ValidationErrorResponse",
]
