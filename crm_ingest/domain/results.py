"""
crm_ingest/domain/results.py

Value objects produced by parsing, validation, and sanitization.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

RecordT = TypeVar("RecordT")
ValueT = TypeVar("ValueT")


@dataclass(frozen=True)
class ParseError:
    """
    One parse problem, either file-level (row 0 or 1) or scoped to a data row.
    """

    row: int
    message: str
    code: str
    column: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "row": self.row,
            "column": self.column,
            "message": self.message,
            "code": self.code,
        }


@dataclass(frozen=True)
class ParseResult(Generic[RecordT]):
    """
    Records and row-level errors from one successful parse call.
    """

    records: list[RecordT] = field(default_factory=list)
    errors: list[ParseError] = field(default_factory=list)
    total_rows: int = 0
    # File row number of each entry in ``records``.
    row_numbers: list[int] = field(default_factory=list)

    @property
    def successful_rows(self) -> int:
        return len(self.records)


@dataclass(frozen=True)
class HeaderValidation:
    """
    Outcome of comparing an observed header row with a header contract.
    """

    missing_headers: list[str]
    extra_headers: list[str]
    actual_headers: list[str]

    @property
    def valid(self) -> bool:
        return not self.missing_headers


@dataclass(frozen=True)
class ValidationError:
    """
    One field-scoped validation problem.
    """

    row_number: int
    field: str
    value: str
    message: str
    code: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "row_number": self.row_number,
            "field": self.field,
            "value": self.value,
            "message": self.message,
            "code": self.code,
        }


@dataclass(frozen=True)
class ValidatedRecord(Generic[RecordT]):
    record: RecordT
    is_valid: bool
    errors: list[ValidationError] = field(default_factory=list)


@dataclass(frozen=True)
class BatchValidationResult(Generic[RecordT]):
    """
    Running totals and per-record outcomes for one validation batch.
    """

    total_records: int
    valid_records: int
    invalid_records: int
    errors: list[ValidationError] = field(default_factory=list)
    validated_data: list[ValidatedRecord[RecordT]] = field(default_factory=list)


@dataclass(frozen=True)
class SanitizationResult(Generic[ValueT]):
    value: ValueT
    warnings: list[str] = field(default_factory=list)
