"""
crm_ingest/domain package marker.
"""

from crm_ingest.domain.records import (
    AccountType,
    CustomerRecord,
    CustomerStatus,
    RawRecord,
    SentimentRecord,
    header_for,
    record_headers,
)
from crm_ingest.domain.results import (
    BatchValidationResult,
    HeaderValidation,
    ParseError,
    ParseResult,
    SanitizationResult,
    ValidatedRecord,
    ValidationError,
)

__all__ = [
    "AccountType",
    "BatchValidationResult",
    "CustomerRecord",
    "CustomerStatus",
    "HeaderValidation",
    "ParseError",
    "ParseResult",
    "RawRecord",
    "SanitizationResult",
    "SentimentRecord",
    "ValidatedRecord",
    "ValidationError",
    "header_for",
    "record_headers",
]
