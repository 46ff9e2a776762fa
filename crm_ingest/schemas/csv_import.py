"""
crm_ingest/schemas/csv_import.py

Response schemas for CSV import endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class ParseErrorResponse(BaseModel):
    """
    API response model for one row-level parse error.
    """

    row: int = Field(..., ge=0)
    message: str
    code: str
    column: str | None = None


class ValidationErrorResponse(BaseModel):
    """
    API response model for one field validation error.
    """

    row_number: int = Field(..., ge=1)
    field: str
    value: str
    message: str
    code: str


class ImportReportResponse(BaseModel):
    """
    API response model for one CSV import.
    """

    shape: str
    mode: str
    file_name: str | None = None
    total_rows: int = Field(..., ge=0)
    rows_imported: int = Field(..., ge=0)
    rows_failed: int = Field(..., ge=0)
    valid_records: int | None = Field(default=None, ge=0)
    invalid_records: int | None = Field(default=None, ge=0)
    parse_errors: list[ParseErrorResponse] = Field(default_factory=list)
    validation_errors: list[ValidationErrorResponse] = Field(default_factory=list)
    sanitization_warnings: list[str] = Field(default_factory=list)
    records: list[dict[str, str]] = Field(default_factory=list)
    health_scores: dict[str, float] = Field(default_factory=dict)


class ShapeDetectionResponse(BaseModel):
    shape: str | None = None
