"""
Run one CRM CSV import from the command line and print the report as JSON.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from crm_ingest.config import get_log_level
from crm_ingest.mappers.record_shapes import SHAPES
from crm_ingest.parsing.record_parser import CSVParseFailure
from crm_ingest.services.file_upload import FileUploadError
from crm_ingest.services.import_service import get_import_service


def main() -> int:
    parser = argparse.ArgumentParser(description="Parse, sanitize, and validate one CRM CSV export.")
    parser.add_argument("path", type=Path, help="CSV file to import.")
    parser.add_argument(
        "--shape",
        choices=sorted(SHAPES),
        default=None,
        help="Export shape; detected from the header row when omitted.",
    )
    parser.add_argument(
        "--mode",
        choices=("strict", "lenient"),
        default=None,
        help="Validation mode for customer exports.",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, get_log_level(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        stream=sys.stderr,
    )

    service = get_import_service()
    try:
        report = service.import_upload(
            raw=args.path.read_bytes(),
            filename=args.path.name,
            content_type=None,
            shape=SHAPES[args.shape] if args.shape else None,
            mode=args.mode,
        )
    except (FileUploadError, CSVParseFailure) as exc:
        print(json.dumps({"error": exc.to_dict()}, indent=2))
        return 1

    payload = {
        "shape": report.shape,
        "mode": report.mode,
        "total_rows": report.total_rows,
        "rows_imported": report.rows_imported,
        "rows_failed": report.rows_failed,
        "parse_errors": [error.to_dict() for error in report.parse_errors],
        "validation_errors": [error.to_dict() for error in report.validation_errors],
        "sanitization_warnings": report.sanitization_warnings,
    }
    print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
