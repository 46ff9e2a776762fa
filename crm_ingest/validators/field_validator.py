"""
crm_ingest/validators/field_validator.py

Field-level validation for customer records, and the strict/lenient policy
shared by every record validator.

Checks are cumulative: every applicable check runs and contributes its own
error. The caller picks the policy per call:

- ``strict``: any error rejects the record outright.
- ``lenient``: errors are attached and the record is kept, with blank
  optional fields replaced by defaults.
"""

from __future__ import annotations

import re
from dataclasses import replace
from datetime import datetime
from typing import Generic, Sequence, TypeVar

from crm_ingest.config import VALIDATION_MODES
from crm_ingest.domain.records import AccountType, CustomerRecord, CustomerStatus, header_for
from crm_ingest.domain.results import BatchValidationResult, ValidatedRecord, ValidationError
from crm_ingest.error_codes import ValidationErrorCode

STRICT = "strict"
LENIENT = "lenient"

RecordT = TypeVar("RecordT")

# DD/MM/YYYY with an optional ", HH:mm" suffix.
_DATE_PATTERN = re.compile(r"(\d{1,2})/(\d{1,2})/(\d{4})(?:, (\d{1,2}):(\d{2}))?", re.ASCII)
_NON_NUMERIC = re.compile(r"[^0-9.\-]")
_LEADING_FLOAT = re.compile(r"-?(?:\d+(?:\.\d*)?|\.\d+)")

MIN_YEAR = 1900
MAX_YEAR = 2100

REQUIRED_FIELDS: tuple[tuple[str, str], ...] = (
    ("customer_id", ValidationErrorCode.MISSING_CUSTOMER_ID),
    ("account_owner", ValidationErrorCode.MISSING_ACCOUNT_OWNER),
    ("status", ValidationErrorCode.MISSING_STATUS),
    ("account_type", ValidationErrorCode.MISSING_ACCOUNT_TYPE),
    ("created_date", ValidationErrorCode.MISSING_CREATED_DATE),
)

DATE_FIELDS: tuple[str, ...] = ("created_date", "latest_login")

ALLOWED_STATUSES = {CustomerStatus.ACTIVE, CustomerStatus.INACTIVE}
ALLOWED_ACCOUNT_TYPES = {AccountType.PRO, AccountType.STARTER}

LENIENT_DEFAULTS: dict[str, str] = {
    "mrr": "0",
    "channels": "",
    "language": "Unknown",
    "property_type": "Other",
}


class RecordValidator(Generic[RecordT]):
    """
    Strict/lenient policy shared by every record validator.

    Subclasses implement ``collect_errors`` and may override
    ``apply_defaults`` for lenient mode.
    """

    def validate(
        self,
        record: RecordT,
        row_number: int,
        mode: str = STRICT,
    ) -> tuple[ValidatedRecord[RecordT] | None, list[ValidationError]]:
        """
        Validate one record.

        Returns ``(None, errors)`` when a strict validation fails; otherwise a
        ``ValidatedRecord`` (defaulted in lenient mode) and the error list.
        """

        self._check_mode(mode)
        errors = self.collect_errors(record, row_number)

        is_valid = not errors
        if not is_valid and mode == STRICT:
            return None, errors

        return (
            ValidatedRecord(
                record=self.apply_defaults(record) if mode == LENIENT else record,
                is_valid=is_valid,
                errors=errors,
            ),
            errors,
        )

    def validate_batch(
        self,
        records: Sequence[RecordT],
        mode: str = STRICT,
        row_numbers: Sequence[int] | None = None,
    ) -> BatchValidationResult[RecordT]:
        """
        Validate records in input order and aggregate the outcome.

        ``row_numbers`` carries the original file row of each record; when
        omitted, the 1-based position in ``records`` is used.
        """

        self._check_mode(mode)
        if row_numbers is not None and len(row_numbers) != len(records):
            raise ValueError("row_numbers must have one entry per record.")

        validated_data: list[ValidatedRecord[RecordT]] = []
        all_errors: list[ValidationError] = []
        valid_count = 0

        for position, record in enumerate(records, start=1):
            row_number = row_numbers[position - 1] if row_numbers is not None else position
            validated, errors = self.validate(record, row_number, mode)

            if validated is None:
                validated = ValidatedRecord(record=record, is_valid=False, errors=errors)
            validated_data.append(validated)

            if validated.is_valid:
                valid_count += 1
            else:
                all_errors.extend(errors)

        return BatchValidationResult(
            total_records=len(records),
            valid_records=valid_count,
            invalid_records=len(records) - valid_count,
            errors=all_errors,
            validated_data=validated_data,
        )

    def collect_errors(self, record: RecordT, row_number: int) -> list[ValidationError]:
        raise NotImplementedError

    def apply_defaults(self, record: RecordT) -> RecordT:
        return record

    @staticmethod
    def _check_mode(mode: str) -> None:
        if mode not in VALIDATION_MODES:
            raise ValueError(f"Unsupported validation mode '{mode}'. Allowed values: {list(VALIDATION_MODES)}.")


class FieldValidator(RecordValidator[CustomerRecord]):
    """
    Validates required fields, formats, and value constraints of customer records.
    """

    def collect_errors(self, record: CustomerRecord, row_number: int) -> list[ValidationError]:
        errors: list[ValidationError] = []
        self._validate_required(record, row_number, errors)
        self._validate_dates(record, row_number, errors)
        mrr = self._validate_mrr_format(record, row_number, errors)
        self._validate_values(record, row_number, mrr, errors)
        return errors

    def apply_defaults(self, record: CustomerRecord) -> CustomerRecord:
        defaults = {
            attribute: default
            for attribute, default in LENIENT_DEFAULTS.items()
            if not getattr(record, attribute)
        }
        return replace(record, **defaults) if defaults else record

    def _validate_required(
        self,
        record: CustomerRecord,
        row_number: int,
        errors: list[ValidationError],
    ) -> None:
        for attribute, code in REQUIRED_FIELDS:
            value = getattr(record, attribute)
            if not value.strip():
                header = header_for(CustomerRecord, attribute)
                errors.append(
                    ValidationError(
                        row_number=row_number,
                        field=header,
                        value=value,
                        message=f"Required field '{header}' is missing",
                        code=code,
                    )
                )

    def _validate_dates(
        self,
        record: CustomerRecord,
        row_number: int,
        errors: list[ValidationError],
    ) -> None:
        for attribute in DATE_FIELDS:
            value = getattr(record, attribute)
            if value and not is_valid_export_date(value):
                errors.append(
                    ValidationError(
                        row_number=row_number,
                        field=header_for(CustomerRecord, attribute),
                        value=value,
                        message="Invalid date format. Expected DD/MM/YYYY or DD/MM/YYYY, HH:mm",
                        code=ValidationErrorCode.INVALID_DATE_FORMAT,
                    )
                )

    def _validate_mrr_format(
        self,
        record: CustomerRecord,
        row_number: int,
        errors: list[ValidationError],
    ) -> float | None:
        if not record.mrr:
            return None

        parsed = parse_mrr(record.mrr)
        if parsed is None:
            errors.append(
                ValidationError(
                    row_number=row_number,
                    field=header_for(CustomerRecord, "mrr"),
                    value=record.mrr,
                    message="Invalid number format for MRR",
                    code=ValidationErrorCode.INVALID_NUMBER,
                )
            )
        return parsed

    def _validate_values(
        self,
        record: CustomerRecord,
        row_number: int,
        mrr: float | None,
        errors: list[ValidationError],
    ) -> None:
        if record.status and record.status not in ALLOWED_STATUSES:
            errors.append(
                ValidationError(
                    row_number=row_number,
                    field=header_for(CustomerRecord, "status"),
                    value=record.status,
                    message=(
                        f"Invalid status. Must be '{CustomerStatus.ACTIVE}' "
                        f"or '{CustomerStatus.INACTIVE}'"
                    ),
                    code=ValidationErrorCode.INVALID_STATUS,
                )
            )

        if record.account_type and record.account_type not in ALLOWED_ACCOUNT_TYPES:
            errors.append(
                ValidationError(
                    row_number=row_number,
                    field=header_for(CustomerRecord, "account_type"),
                    value=record.account_type,
                    message=(
                        f"Invalid account type. Must be '{AccountType.PRO}' "
                        f"or '{AccountType.STARTER}'"
                    ),
                    code=ValidationErrorCode.INVALID_ACCOUNT_TYPE,
                )
            )

        if mrr is not None and mrr < 0:
            errors.append(
                ValidationError(
                    row_number=row_number,
                    field=header_for(CustomerRecord, "mrr"),
                    value=record.mrr,
                    message="MRR must be non-negative",
                    code=ValidationErrorCode.INVALID_MRR,
                )
            )


def is_valid_export_date(value: str) -> bool:
    """
    Return True for ``DD/MM/YYYY`` or ``DD/MM/YYYY, HH:mm`` with plausible parts.

    Every month accepts days up to 31; ``31/02/2024`` passes.
    """

    match = _DATE_PATTERN.fullmatch(value)
    if match is None:
        return False

    day, month, year = (int(part) for part in match.group(1, 2, 3))
    return 1 <= month <= 12 and 1 <= day <= 31 and MIN_YEAR <= year <= MAX_YEAR


def parse_export_date(value: str) -> datetime | None:
    """
    Convert a CRM export date into a naive ``datetime``.

    Returns None for blank values, malformed strings, and calendar-impossible
    dates that the format check alone lets through.
    """

    value = value.strip()
    if not value or not is_valid_export_date(value):
        return None

    match = _DATE_PATTERN.fullmatch(value)
    day, month, year = (int(part) for part in match.group(1, 2, 3))
    hour = int(match.group(4) or 0)
    minute = int(match.group(5) or 0)
    try:
        return datetime(year, month, day, hour, minute)
    except ValueError:
        return None


def parse_mrr(value: str) -> float | None:
    """
    Parse an MRR cell after dropping everything except digits, '.', and '-'.

    Like a lenient float reader, only the leading numeric part counts, so
    ``"1.5.2"`` reads as 1.5 and ``"abc"`` as None.
    """

    cleaned = _NON_NUMERIC.sub("", value)
    match = _LEADING_FLOAT.match(cleaned)
    if match is None:
        return None
    return float(match.group(0))
