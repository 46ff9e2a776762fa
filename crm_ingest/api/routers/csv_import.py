"""
crm_ingest/api/routers/csv_import.py

CSV import HTTP endpoints.
"""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query, status

from crm_ingest.api.dependencies import UploadedCSV, get_csv_upload
from crm_ingest.error_codes import UploadErrorCode
from crm_ingest.mappers.record_shapes import CUSTOMER_SHAPE, SENTIMENT_SHAPE, RecordShape
from crm_ingest.parsing.record_parser import CSVParseFailure
from crm_ingest.schemas.csv_import import (
    ImportReportResponse,
    ParseErrorResponse,
    ShapeDetectionResponse,
    ValidationErrorResponse,
)
from crm_ingest.services.file_upload import FileUploadError
from crm_ingest.services.import_service import CSVImportService, ImportReport, get_import_service

router = APIRouter(prefix="/import", tags=["import"])

ValidationModeQuery = Literal["strict", "lenient"]


@router.post("/customers", response_model=ImportReportResponse)
def import_customers(
    upload: UploadedCSV = Depends(get_csv_upload),
    mode: ValidationModeQuery | None = Query(
        default=None,
        description="Validation mode; defaults to the configured mode",
    ),
    import_service: CSVImportService = Depends(get_import_service),
) -> ImportReportResponse:
    """
    Import one customer account export.
    """

    report = _run_import(import_service, upload, shape=CUSTOMER_SHAPE, mode=mode)
    return _to_response(report)


@router.post("/sentiment", response_model=ImportReportResponse)
def import_sentiment(
    upload: UploadedCSV = Depends(get_csv_upload),
    mode: ValidationModeQuery | None = Query(
        default=None,
        description="Validation mode; defaults to the configured mode",
    ),
    import_service: CSVImportService = Depends(get_import_service),
) -> ImportReportResponse:
    """
    Import one customer sentiment export.
    """

    report = _run_import(import_service, upload, shape=SENTIMENT_SHAPE, mode=mode)
    return _to_response(report)


@router.post("/detect", response_model=ShapeDetectionResponse)
def detect_export_shape(
    upload: UploadedCSV = Depends(get_csv_upload),
    import_service: CSVImportService = Depends(get_import_service),
) -> ShapeDetectionResponse:
    """
    Report which export shape the uploaded header row matches, if any.
    """

    try:
        shape = import_service.detect_upload(
            raw=upload.raw,
            filename=upload.filename,
            content_type=upload.content_type,
        )
    except FileUploadError as exc:
        raise _upload_rejected(exc) from exc
    return ShapeDetectionResponse(shape=shape.name if shape else None)


def _run_import(
    import_service: CSVImportService,
    upload: UploadedCSV,
    *,
    shape: RecordShape,
    mode: str | None,
) -> ImportReport:
    try:
        return import_service.import_upload(
            raw=upload.raw,
            filename=upload.filename,
            content_type=upload.content_type,
            shape=shape,
            mode=mode,
        )
    except FileUploadError as exc:
        raise _upload_rejected(exc) from exc
    except CSVParseFailure as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=exc.to_dict(),
        ) from exc


def _upload_rejected(exc: FileUploadError) -> HTTPException:
    status_code = (
        status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
        if exc.code == UploadErrorCode.FILE_TOO_LARGE
        else status.HTTP_400_BAD_REQUEST
    )
    return HTTPException(status_code=status_code, detail=exc.to_dict())


def _to_response(report: ImportReport) -> ImportReportResponse:
    validation = report.validation
    return ImportReportResponse(
        shape=report.shape,
        mode=report.mode,
        file_name=report.file.name if report.file else None,
        total_rows=report.total_rows,
        rows_imported=report.rows_imported,
        rows_failed=report.rows_failed,
        valid_records=validation.valid_records if validation else None,
        invalid_records=validation.invalid_records if validation else None,
        parse_errors=[
            ParseErrorResponse(
                row=error.row,
                message=error.message,
                code=error.code,
                column=error.column,
            )
            for error in report.parse_errors
        ],
        validation_errors=[
            ValidationErrorResponse(
                row_number=error.row_number,
                field=error.field,
                value=error.value,
                message=error.message,
                code=error.code,
            )
            for error in report.validation_errors
        ],
        sanitization_warnings=report.sanitization_warnings,
        records=[record.as_row() for record in report.records],
        health_scores=report.health_scores,
    )
