"""
crm_ingest/validators package marker.
"""

from crm_ingest.validators.field_validator import (
    LENIENT,
    STRICT,
    FieldValidator,
    RecordValidator,
    is_valid_export_date,
    parse_export_date,
    parse_mrr,
)
from crm_ingest.validators.input_sanitizer import InputSanitizer, escape_html
from crm_ingest.validators.sentiment_validator import SentimentValidator, parse_sentiment_score

__all__ = [
    "LENIENT",
    "STRICT",
    "FieldValidator",
    "InputSanitizer",
    "RecordValidator",
    "SentimentValidator",
    "escape_html",
    "is_valid_export_date",
    "parse_export_date",
    "parse_mrr",
    "parse_sentiment_score",
]
