"""
crm_ingest/parsing/record_parser.py

Line-oriented CSV parser shared by every record shape.

Only structural problems (empty input, undecodable bytes, a header row that
breaks the shape's contract) stop a parse; they are raised as
``CSVParseFailure``. A bad data row is recorded as a ``MALFORMED_ROW`` error
and the remaining rows are still parsed.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from crm_ingest.domain.results import ParseError, ParseResult
from crm_ingest.error_codes import ParseErrorCode
from crm_ingest.parsing.tokenizer import tokenize_row

if TYPE_CHECKING:
    from crm_ingest.mappers.record_shapes import RecordShape

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT")


class CSVParseFailure(ValueError):
    """
    Raised when a CSV file cannot be parsed at all.
    """

    def __init__(self, error: ParseError) -> None:
        super().__init__(error.message)
        self.error = error

    @property
    def code(self) -> str:
        return self.error.code

    def to_dict(self) -> dict[str, Any]:
        return self.error.to_dict()


class RecordParser(Generic[RecordT]):
    """
    Parses CSV text into records of one shape.
    """

    def __init__(self, shape: RecordShape, *, log_row_errors: bool = True) -> None:
        self._shape = shape
        self._contract = shape.header_contract()
        self._log_row_errors = log_row_errors

    def parse(self, content: str) -> ParseResult[RecordT]:
        if not content or not content.strip():
            raise self._failure(row=0, message="CSV file is empty", code=ParseErrorCode.EMPTY_FILE)

        lines = self._split_lines(content)
        if len(lines) < 2:
            raise self._failure(
                row=0,
                message="CSV file must contain a header row and at least one data row",
                code=ParseErrorCode.EMPTY_FILE,
            )

        headers = tokenize_row(lines[0])
        validation = self._contract.validate(headers)
        if not validation.valid:
            raise self._failure(
                row=1,
                message=f"Invalid CSV headers. Missing: {', '.join(validation.missing_headers)}",
                code=ParseErrorCode.INVALID_HEADERS,
            )
        if validation.extra_headers:
            logger.info(
                "CSV %s export carries extra columns ignored=%s",
                self._shape.name,
                validation.extra_headers,
            )

        records: list[RecordT] = []
        errors: list[ParseError] = []
        row_numbers: list[int] = []

        for index, line in enumerate(lines[1:], start=1):
            row_number = index + 1
            fields = tokenize_row(line.strip())
            record, reason = self._shape.map_fields(fields, headers, row_number)
            if reason is not None:
                error = ParseError(row=row_number, message=reason, code=ParseErrorCode.MALFORMED_ROW)
                errors.append(error)
                if self._log_row_errors:
                    logger.warning("CSV malformed row row=%s message=%s", row_number, reason)
                continue
            if record is not None:
                records.append(record)
                row_numbers.append(row_number)

        result = ParseResult(
            records=records,
            errors=errors,
            total_rows=len(lines) - 1,
            row_numbers=row_numbers,
        )
        logger.info(
            "CSV %s parse complete total_rows=%s successful_rows=%s malformed_rows=%s",
            self._shape.name,
            result.total_rows,
            result.successful_rows,
            len(errors),
        )
        return result

    def parse_bytes(self, raw: bytes) -> ParseResult[RecordT]:
        """
        Decode UTF-8 file content (a leading BOM is dropped) and parse it.
        """

        try:
            content = raw.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise self._failure(
                row=0,
                message="Failed to read file",
                code=ParseErrorCode.INVALID_ENCODING,
            ) from exc
        return self.parse(content)

    def _failure(self, *, row: int, message: str, code: str) -> CSVParseFailure:
        logger.warning("CSV %s parse failed code=%s row=%s message=%s", self._shape.name, code, row, message)
        return CSVParseFailure(ParseError(row=row, message=message, code=code))

    @staticmethod
    def _split_lines(content: str) -> list[str]:
        normalized = content.replace("\r\n", "\n").replace("\r", "\n")
        return [line for line in normalized.split("\n") if line.strip()]
