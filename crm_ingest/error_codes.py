"""Shared error code constants for CSV import error handling."""


class ParseErrorCode:
    INVALID_HEADERS = "INVALID_HEADERS"
    MALFORMED_ROW = "MALFORMED_ROW"
    EMPTY_FILE = "EMPTY_FILE"
    INVALID_ENCODING = "INVALID_ENCODING"


class ValidationErrorCode:
    MISSING_CUSTOMER_ID = "MISSING_CUSTOMER_ID"
    MISSING_ACCOUNT_OWNER = "MISSING_ACCOUNT_OWNER"
    MISSING_STATUS = "MISSING_STATUS"
    MISSING_ACCOUNT_TYPE = "MISSING_ACCOUNT_TYPE"
    MISSING_CREATED_DATE = "MISSING_CREATED_DATE"
    INVALID_STATUS = "INVALID_STATUS"
    INVALID_ACCOUNT_TYPE = "INVALID_ACCOUNT_TYPE"
    INVALID_DATE_FORMAT = "INVALID_DATE_FORMAT"
    INVALID_NUMBER = "INVALID_NUMBER"
    INVALID_MRR = "INVALID_MRR"
    MISSING_CASE_NUMBER = "MISSING_CASE_NUMBER"
    MISSING_SENTIMENT_SCORE = "MISSING_SENTIMENT_SCORE"
    INVALID_SENTIMENT_SCORE = "INVALID_SENTIMENT_SCORE"


class UploadErrorCode:
    INVALID_TYPE = "INVALID_TYPE"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    EMPTY_FILE = "EMPTY_FILE"
    ENCODING_ERROR = "ENCODING_ERROR"
    READ_ERROR = "READ_ERROR"
