"""
crm_ingest/validators/sentiment_validator.py

Field-level validation for customer sentiment records.
"""

from __future__ import annotations

import re

from crm_ingest.domain.records import SentimentRecord, header_for
from crm_ingest.domain.results import ValidationError
from crm_ingest.error_codes import ValidationErrorCode
from crm_ingest.validators.field_validator import RecordValidator, is_valid_export_date

_LEADING_SCORE = re.compile(r"[-+]?(?:\d+(?:\.\d*)?|\.\d+)")

MIN_SENTIMENT_SCORE = -1.0
MAX_SENTIMENT_SCORE = 1.0

REQUIRED_FIELDS: tuple[tuple[str, str], ...] = (
    ("customer_id", ValidationErrorCode.MISSING_CUSTOMER_ID),
    ("case_number", ValidationErrorCode.MISSING_CASE_NUMBER),
    ("sentiment_score", ValidationErrorCode.MISSING_SENTIMENT_SCORE),
)


class SentimentValidator(RecordValidator[SentimentRecord]):
    """
    Validates identifiers, score range, and interaction date of sentiment records.

    A blank interaction date is accepted; a present one must use the export
    date format.
    """

    def collect_errors(self, record: SentimentRecord, row_number: int) -> list[ValidationError]:
        errors: list[ValidationError] = []

        for attribute, code in REQUIRED_FIELDS:
            value = getattr(record, attribute)
            if not value.strip():
                header = header_for(SentimentRecord, attribute)
                errors.append(
                    ValidationError(
                        row_number=row_number,
                        field=header,
                        value=value,
                        message=f"Required field '{header}' is missing",
                        code=code,
                    )
                )

        score_text = record.sentiment_score.strip()
        if score_text:
            score = parse_sentiment_score(score_text)
            if score is None or not MIN_SENTIMENT_SCORE <= score <= MAX_SENTIMENT_SCORE:
                errors.append(
                    ValidationError(
                        row_number=row_number,
                        field=header_for(SentimentRecord, "sentiment_score"),
                        value=record.sentiment_score,
                        message="Sentiment score must be between -1 and +1",
                        code=ValidationErrorCode.INVALID_SENTIMENT_SCORE,
                    )
                )

        created = record.interaction_created_date.strip()
        if created and not is_valid_export_date(created):
            errors.append(
                ValidationError(
                    row_number=row_number,
                    field=header_for(SentimentRecord, "interaction_created_date"),
                    value=record.interaction_created_date,
                    message="Invalid date format. Expected DD/MM/YYYY or DD/MM/YYYY, HH:mm",
                    code=ValidationErrorCode.INVALID_DATE_FORMAT,
                )
            )

        return errors


def parse_sentiment_score(value: str) -> float | None:
    """
    Read the leading number of a score cell; ``"0.5 (agent)"`` reads as 0.5.
    """

    match = _LEADING_SCORE.match(value.strip())
    if match is None:
        return None
    return float(match.group(0))
