"""
crm_ingest/services/import_service.py

Service layer for CSV import workflow orchestration.

One import runs the pipeline in this order:

    1. RecordParser     : structural checks, tokenizing, per-row mapping
    2. InputSanitizer   : formula / markup neutralization of every field
    3. RecordValidator  : strict or lenient checks on the parsed values
       (FieldValidator for customers, SentimentValidator for sentiment)
    4. HealthScoreCalculator (optional, injected): one score per valid
       customer record

Structural parse failures propagate as ``CSVParseFailure``; everything else
is reported row by row inside the returned ``ImportReport``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from functools import lru_cache
from typing import Any, Protocol, Sequence

from crm_ingest.config import get_import_settings
from crm_ingest.domain.records import CustomerRecord
from crm_ingest.domain.results import BatchValidationResult, ParseError, ParseResult, ValidationError
from crm_ingest.error_codes import ParseErrorCode
from crm_ingest.mappers.record_shapes import RecordShape, detect_shape
from crm_ingest.parsing.record_parser import CSVParseFailure, RecordParser
from crm_ingest.services.file_upload import FileMetadata, FileUploadValidator
from crm_ingest.validators.field_validator import LENIENT, STRICT, FieldValidator, RecordValidator
from crm_ingest.validators.input_sanitizer import InputSanitizer
from crm_ingest.validators.sentiment_validator import SentimentValidator

logger = logging.getLogger(__name__)


class HealthScoreCalculator(Protocol):
    """
    Downstream scorer fed with validated customer records.
    """

    def calculate(self, record: CustomerRecord) -> float: ...


@dataclass(frozen=True)
class ImportReport:
    """
    End-of-run import report.

    ``records`` holds the sanitized records that are safe to hand downstream:
    valid records in strict mode and every (defaulted) record in lenient mode.
    """

    shape: str
    mode: str
    parse_result: ParseResult
    records: list[Any] = field(default_factory=list)
    sanitization_warnings: list[str] = field(default_factory=list)
    validation: BatchValidationResult | None = None
    validation_errors: list[ValidationError] = field(default_factory=list)
    health_scores: dict[str, float] = field(default_factory=dict)
    file: FileMetadata | None = None

    @property
    def total_rows(self) -> int:
        return self.parse_result.total_rows

    @property
    def parse_errors(self) -> list[ParseError]:
        return self.parse_result.errors

    @property
    def rows_imported(self) -> int:
        return len(self.records)

    @property
    def rows_failed(self) -> int:
        return self.total_rows - self.rows_imported


class CSVImportService:
    """
    Coordinates CSV parsing, sanitization, validation, and scoring.
    """

    def __init__(
        self,
        *,
        default_mode: str,
        max_validation_errors: int,
        log_validation_errors: bool,
        upload_validator: FileUploadValidator | None = None,
        validator: FieldValidator | None = None,
        sentiment_validator: SentimentValidator | None = None,
        sanitizer: InputSanitizer | None = None,
        health_score_calculator: HealthScoreCalculator | None = None,
    ) -> None:
        self._default_mode = default_mode
        self._max_validation_errors = max(1, max_validation_errors)
        self._log_validation_errors = log_validation_errors
        self._upload_validator = upload_validator or FileUploadValidator()
        self._validator = validator or FieldValidator()
        self._sentiment_validator = sentiment_validator or SentimentValidator()
        self._sanitizer = sanitizer or InputSanitizer()
        self._health_score_calculator = health_score_calculator

    def import_upload(
        self,
        *,
        raw: bytes,
        filename: str | None,
        content_type: str | None,
        shape: RecordShape | None = None,
        mode: str | None = None,
    ) -> ImportReport:
        """
        Validate and decode one uploaded file, then import it.

        When ``shape`` is omitted it is detected from the header row.
        """

        content, metadata = self._upload_validator.read_text(
            raw,
            filename=filename,
            content_type=content_type,
        )
        if shape is None:
            shape = detect_shape(content)
            if shape is None:
                logger.warning("CSV upload name=%r matches no known export shape", metadata.name)
                raise CSVParseFailure(
                    ParseError(
                        row=1,
                        message="CSV headers match neither the customer nor the sentiment export",
                        code=ParseErrorCode.INVALID_HEADERS,
                    )
                )

        report = self.import_content(content, shape=shape, mode=mode)
        return replace(report, file=metadata)

    def detect_upload(
        self,
        *,
        raw: bytes,
        filename: str | None,
        content_type: str | None,
    ) -> RecordShape | None:
        """
        Run the upload checks on a file and report which export shape it carries.
        """

        content, _ = self._upload_validator.read_text(
            raw,
            filename=filename,
            content_type=content_type,
        )
        return detect_shape(content)

    def import_content(
        self,
        content: str,
        *,
        shape: RecordShape,
        mode: str | None = None,
    ) -> ImportReport:
        """
        Parse, sanitize, and validate one export.

        Validation reads the parsed values; the records handed back are their
        sanitized counterparts.
        """

        mode = mode or self._default_mode
        validator = self._validator_for(shape)
        parser: RecordParser = RecordParser(shape, log_row_errors=self._log_validation_errors)
        parse_result = parser.parse(content)

        sanitized = self._sanitizer.sanitize_batch(
            parse_result.records,
            row_numbers=parse_result.row_numbers,
        )
        if sanitized.warnings:
            logger.warning(
                "CSV %s import neutralized %d suspicious value(s)",
                shape.name,
                len(sanitized.warnings),
            )

        checked = validator.validate_batch(
            parse_result.records,
            mode=mode,
            row_numbers=parse_result.row_numbers,
        )
        validated_data = [
            replace(
                item,
                record=validator.apply_defaults(clean) if mode == LENIENT else clean,
            )
            for item, clean in zip(checked.validated_data, sanitized.value)
        ]
        validation = replace(checked, validated_data=validated_data)

        usable = [item.record for item in validated_data if item.is_valid or mode != STRICT]
        health_scores: dict[str, float] = {}
        if shape.record_type is CustomerRecord:
            health_scores = self._score([item.record for item in validated_data if item.is_valid])

        report = ImportReport(
            shape=shape.name,
            mode=mode,
            parse_result=parse_result,
            records=usable,
            sanitization_warnings=sanitized.warnings,
            validation=validation,
            validation_errors=self._capture_errors(validation.errors),
            health_scores=health_scores,
        )
        logger.info(
            "CSV %s import complete mode=%s total_rows=%s imported=%s invalid=%s",
            shape.name,
            mode,
            report.total_rows,
            report.rows_imported,
            validation.invalid_records,
        )
        return report

    def _validator_for(self, shape: RecordShape) -> RecordValidator:
        if shape.record_type is CustomerRecord:
            return self._validator
        return self._sentiment_validator

    def _score(self, records: Sequence[CustomerRecord]) -> dict[str, float]:
        if self._health_score_calculator is None:
            return {}

        scores: dict[str, float] = {}
        for record in records:
            try:
                scores[record.customer_id] = self._health_score_calculator.calculate(record)
            except Exception as exc:  # noqa: BLE001
                logger.warning(
                    "Health score calculation failed customer_id=%r: %s",
                    record.customer_id,
                    exc,
                )
        return scores

    def _capture_errors(self, errors: Sequence[ValidationError]) -> list[ValidationError]:
        if self._log_validation_errors:
            for error in errors:
                logger.warning(
                    "CSV validation error row=%s field=%s code=%s value=%r",
                    error.row_number,
                    error.field,
                    error.code,
                    error.value,
                )
        return list(errors[: self._max_validation_errors])


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_import_service() -> CSVImportService:
    """
    Build and cache the import service with env-driven settings.
    """
    settings = get_import_settings()
    return CSVImportService(
        default_mode=settings.default_validation_mode,
        max_validation_errors=settings.max_validation_errors,
        log_validation_errors=settings.log_validation_errors,
        upload_validator=FileUploadValidator(max_size_bytes=settings.max_upload_bytes),
    )
