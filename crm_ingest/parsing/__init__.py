"""
crm_ingest/parsing package marker.
"""

from crm_ingest.parsing.header_contract import HeaderContract
from crm_ingest.parsing.record_parser import CSVParseFailure, RecordParser
from crm_ingest.parsing.tokenizer import format_row, tokenize_row

__all__ = [
    "CSVParseFailure",
    "HeaderContract",
    "RecordParser",
    "format_row",
    "tokenize_row",
]
