"""
crm_ingest/validators/input_sanitizer.py

Neutralizes spreadsheet-formula and HTML injection in CSV string fields.

Sanitization never rejects data: values are rewritten and a warning is
recorded for every formula payload found.
"""

from __future__ import annotations

import re
from dataclasses import fields, replace
from typing import Sequence, TypeVar

from crm_ingest.domain.results import SanitizationResult

RecordT = TypeVar("RecordT")

FORMULA_TRIGGER_CHARS = frozenset({"=", "+", "-", "@", "\t", "\r", "\n"})
_SIGNED_NUMBER = re.compile(r"[-+]\d", re.ASCII)

HTML_ENTITIES: dict[str, str] = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#x27;",
}
_HTML_SPECIAL = re.compile("[&<>\"']")

PREVIEW_LENGTH = 20


class InputSanitizer:
    """
    Escapes untrusted CSV text before it is displayed or re-exported.
    """

    def sanitize_string(self, value: str) -> SanitizationResult[str]:
        warnings: list[str] = []
        if not value:
            return SanitizationResult(value="", warnings=warnings)

        sanitized = value
        if self.is_formula_injection(value):
            warnings.append(f'Potential formula injection detected: "{value[:PREVIEW_LENGTH]}..."')
            sanitized = "'" + sanitized

        return SanitizationResult(value=escape_html(sanitized), warnings=warnings)

    def sanitize_record(self, record: RecordT) -> SanitizationResult[RecordT]:
        """
        Sanitize every string field of a record; warnings are prefixed with the CSV column name.
        """

        warnings: list[str] = []
        updates: dict[str, str] = {}

        for item in fields(record):
            result = self.sanitize_string(getattr(record, item.name))
            updates[item.name] = result.value
            header = item.metadata.get("header", item.name)
            warnings.extend(f"{header}: {warning}" for warning in result.warnings)

        return SanitizationResult(value=replace(record, **updates), warnings=warnings)

    def sanitize_batch(
        self,
        records: Sequence[RecordT],
        row_numbers: Sequence[int] | None = None,
    ) -> SanitizationResult[list[RecordT]]:
        """
        Sanitize records in order.

        Warnings are prefixed with the record's row: its entry in
        ``row_numbers`` when given, else its 1-based position.
        """

        if row_numbers is not None and len(row_numbers) != len(records):
            raise ValueError("row_numbers must have one entry per record.")

        sanitized: list[RecordT] = []
        warnings: list[str] = []

        for position, record in enumerate(records, start=1):
            row = row_numbers[position - 1] if row_numbers is not None else position
            result = self.sanitize_record(record)
            sanitized.append(result.value)
            warnings.extend(f"Row {row}: {warning}" for warning in result.warnings)

        return SanitizationResult(value=sanitized, warnings=warnings)

    @staticmethod
    def is_formula_injection(value: str) -> bool:
        trimmed = value.strip()
        if not trimmed:
            return False
        if trimmed[0] not in FORMULA_TRIGGER_CHARS:
            return False
        return _SIGNED_NUMBER.match(trimmed) is None


def escape_html(value: str) -> str:
    return _HTML_SPECIAL.sub(lambda match: HTML_ENTITIES[match.group(0)], value)
