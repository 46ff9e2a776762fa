from __future__ import annotations

import unittest

from crm_ingest.domain.records import CustomerRecord, SentimentRecord
from crm_ingest.error_codes import ParseErrorCode, UploadErrorCode, ValidationErrorCode
from crm_ingest.mappers.record_shapes import CUSTOMER_SHAPE, SENTIMENT_SHAPE
from crm_ingest.parsing.record_parser import CSVParseFailure
from crm_ingest.services.file_upload import FileUploadError, FileUploadValidator
from crm_ingest.services.import_service import CSVImportService
from tests.helpers import customer_csv, customer_values, sentiment_csv, sentiment_values


class _MrrScore:
    def __init__(self) -> None:
        self.seen: list[str] = []

    def calculate(self, record: CustomerRecord) -> float:
        self.seen.append(record.customer_id)
        if record.customer_id == "C-BROKEN":
            raise RuntimeError("scorer unavailable")
        return float(record.mrr) / 10


def _service(**overrides) -> CSVImportService:
    params = {
        "default_mode": "strict",
        "max_validation_errors": 50,
        "log_validation_errors": False,
    }
    params.update(overrides)
    return CSVImportService(**params)


class TestCustomerImport(unittest.TestCase):
    def setUp(self) -> None:
        self.content = customer_csv(
            customer_values(),
            customer_values(customer_id="C-1002", status="Unknown", language=""),
            customer_values(customer_id=""),
            customer_values(customer_id="C-1004", account_owner="=HYPERLINK(1)"),
        )

    def test_strict_import_keeps_only_valid_records(self) -> None:
        report = _service().import_content(self.content, shape=CUSTOMER_SHAPE)

        self.assertEqual(report.shape, "customer")
        self.assertEqual(report.mode, "strict")
        self.assertEqual(report.total_rows, 4)
        self.assertEqual([record.customer_id for record in report.records], ["C-1001", "C-1004"])
        self.assertEqual(report.rows_imported, 2)
        self.assertEqual(report.rows_failed, 2)
        self.assertEqual([error.row for error in report.parse_errors], [4])
        self.assertEqual(report.parse_errors[0].code, ParseErrorCode.MALFORMED_ROW)
        self.assertEqual(report.validation.valid_records, 2)
        self.assertEqual(report.validation.invalid_records, 1)

    def test_validation_errors_use_file_row_numbers(self) -> None:
        report = _service().import_content(self.content, shape=CUSTOMER_SHAPE)

        self.assertEqual(len(report.validation_errors), 1)
        error = report.validation_errors[0]
        self.assertEqual(error.row_number, 3)
        self.assertEqual(error.code, ValidationErrorCode.INVALID_STATUS)

    def test_formula_values_are_neutralized_before_use(self) -> None:
        report = _service().import_content(self.content, shape=CUSTOMER_SHAPE)

        self.assertEqual(report.records[1].account_owner, "&#x27;=HYPERLINK(1)")
        self.assertEqual(
            report.sanitization_warnings,
            ['Row 5: Account Owner: Potential formula injection detected: "=HYPERLINK(1)..."'],
        )

    def test_formula_valued_mrr_is_validated_on_parsed_value(self) -> None:
        scorer = _MrrScore()
        content = customer_csv(
            customer_values(mrr="=-500"),
            customer_values(customer_id="C-1002", mrr="- 5"),
        )

        report = _service(health_score_calculator=scorer).import_content(content, shape=CUSTOMER_SHAPE)

        self.assertEqual(report.validation.valid_records, 0)
        self.assertEqual(
            [error.code for error in report.validation_errors],
            [ValidationErrorCode.INVALID_MRR, ValidationErrorCode.INVALID_MRR],
        )
        self.assertEqual([error.value for error in report.validation_errors], ["=-500", "- 5"])
        self.assertEqual(report.records, [])
        self.assertEqual(scorer.seen, [])

    def test_lenient_records_are_sanitized_after_validation(self) -> None:
        content = customer_csv(customer_values(mrr="=-500", language=""))

        report = _service().import_content(content, shape=CUSTOMER_SHAPE, mode="lenient")

        record = report.records[0]
        self.assertEqual(record.mrr, "&#x27;=-500")
        self.assertEqual(record.language, "Unknown")
        self.assertEqual(report.validation.validated_data[0].record, record)

    def test_lenient_import_keeps_and_defaults_invalid_records(self) -> None:
        report = _service().import_content(self.content, shape=CUSTOMER_SHAPE, mode="lenient")

        self.assertEqual(report.mode, "lenient")
        self.assertEqual(report.rows_imported, 3)
        defaulted = report.records[1]
        self.assertEqual(defaulted.customer_id, "C-1002")
        self.assertEqual(defaulted.language, "Unknown")
        self.assertEqual(len(report.validation_errors), 1)

    def test_default_mode_comes_from_service(self) -> None:
        report = _service(default_mode="lenient").import_content(self.content, shape=CUSTOMER_SHAPE)

        self.assertEqual(report.mode, "lenient")

    def test_unknown_mode_raises(self) -> None:
        with self.assertRaises(ValueError):
            _service().import_content(self.content, shape=CUSTOMER_SHAPE, mode="loose")

    def test_validation_errors_are_capped(self) -> None:
        rows = [customer_values(customer_id=f"C-{index}", status="Nope") for index in range(5)]

        report = _service(max_validation_errors=2).import_content(customer_csv(*rows), shape=CUSTOMER_SHAPE)

        self.assertEqual(len(report.validation_errors), 2)
        self.assertEqual(len(report.validation.errors), 5)

    def test_health_scores_for_valid_records_only(self) -> None:
        scorer = _MrrScore()
        content = customer_csv(
            customer_values(),
            customer_values(customer_id="C-BROKEN"),
            customer_values(customer_id="C-1003", status="Unknown"),
        )

        report = _service(health_score_calculator=scorer).import_content(
            content,
            shape=CUSTOMER_SHAPE,
            mode="lenient",
        )

        self.assertEqual(scorer.seen, ["C-1001", "C-BROKEN"])
        self.assertEqual(report.health_scores, {"C-1001": 25.0})
        self.assertEqual(report.rows_imported, 3)

    def test_structural_failure_propagates(self) -> None:
        with self.assertRaises(CSVParseFailure) as ctx:
            _service().import_content("Account Owner,Status\nJane,Active Customer\n", shape=CUSTOMER_SHAPE)

        self.assertEqual(ctx.exception.code, ParseErrorCode.INVALID_HEADERS)


class TestSentimentImport(unittest.TestCase):
    def setUp(self) -> None:
        self.content = sentiment_csv(
            sentiment_values(),
            sentiment_values(sentiment_score="very good", case_number="00099"),
            sentiment_values(sentiment_score="", case_number="00100"),
            sentiment_values(sentiment_score="1.5", case_number="00101"),
            sentiment_values(interaction_created_date="2024-03-12", case_number="00102"),
        )

    def test_strict_import_rejects_invalid_scores_and_dates(self) -> None:
        report = _service().import_content(self.content, shape=SENTIMENT_SHAPE)

        self.assertEqual(report.shape, "sentiment")
        self.assertEqual(report.mode, "strict")
        self.assertEqual(report.rows_imported, 1)
        self.assertIsInstance(report.records[0], SentimentRecord)
        self.assertEqual(report.validation.invalid_records, 4)
        self.assertEqual(
            [(error.row_number, error.code) for error in report.validation_errors],
            [
                (3, ValidationErrorCode.INVALID_SENTIMENT_SCORE),
                (4, ValidationErrorCode.MISSING_SENTIMENT_SCORE),
                (5, ValidationErrorCode.INVALID_SENTIMENT_SCORE),
                (6, ValidationErrorCode.INVALID_DATE_FORMAT),
            ],
        )
        self.assertEqual(report.health_scores, {})

    def test_lenient_import_keeps_annotated_records(self) -> None:
        report = _service().import_content(self.content, shape=SENTIMENT_SHAPE, mode="lenient")

        self.assertEqual(report.mode, "lenient")
        self.assertEqual(report.rows_imported, 5)
        self.assertEqual(report.validation.valid_records, 1)
        self.assertEqual(len(report.validation_errors), 4)

    def test_sentiment_records_are_returned_sanitized(self) -> None:
        content = sentiment_csv(sentiment_values(case_number="=1+2"))

        report = _service().import_content(content, shape=SENTIMENT_SHAPE)

        self.assertEqual(report.records[0].case_number, "&#x27;=1+2")
        self.assertEqual(len(report.sanitization_warnings), 1)


class TestUploadImport(unittest.TestCase):
    def test_shape_is_detected_from_headers(self) -> None:
        raw = sentiment_csv(sentiment_values()).encode("utf-8")

        report = _service().import_upload(raw=raw, filename="cases.csv", content_type="text/csv")

        self.assertEqual(report.shape, "sentiment")
        self.assertEqual(report.file.name, "cases.csv")
        self.assertEqual(report.file.size, len(raw))

    def test_explicit_shape_wins(self) -> None:
        raw = customer_csv(customer_values()).encode("utf-8")

        with self.assertRaises(CSVParseFailure):
            _service().import_upload(
                raw=raw,
                filename="accounts.csv",
                content_type="text/csv",
                shape=SENTIMENT_SHAPE,
            )

    def test_unknown_headers_are_rejected(self) -> None:
        with self.assertRaises(CSVParseFailure) as ctx:
            _service().import_upload(raw=b"a,b\n1,2\n", filename="x.csv", content_type="text/csv")

        self.assertEqual(ctx.exception.code, ParseErrorCode.INVALID_HEADERS)
        self.assertEqual(ctx.exception.error.row, 1)

    def test_upload_checks_run_first(self) -> None:
        service = _service(upload_validator=FileUploadValidator(max_size_bytes=16))
        raw = customer_csv(customer_values()).encode("utf-8")

        with self.assertRaises(FileUploadError) as ctx:
            service.import_upload(raw=raw, filename="accounts.csv", content_type="text/csv")

        self.assertEqual(ctx.exception.code, UploadErrorCode.FILE_TOO_LARGE)

    def test_detect_upload_reports_shape(self) -> None:
        raw = customer_csv(customer_values()).encode("utf-8")

        shape = _service().detect_upload(raw=raw, filename="accounts.csv", content_type="text/csv")

        self.assertIs(shape, CUSTOMER_SHAPE)

    def test_detect_upload_applies_upload_checks(self) -> None:
        service = _service(upload_validator=FileUploadValidator(max_size_bytes=16))
        raw = sentiment_csv(sentiment_values()).encode("utf-8")

        with self.assertRaises(FileUploadError) as ctx:
            service.detect_upload(raw=raw, filename="cases.csv", content_type="text/csv")

        self.assertEqual(ctx.exception.code, UploadErrorCode.FILE_TOO_LARGE)

        with self.assertRaises(FileUploadError) as ctx:
            _service().detect_upload(raw=b"Case\n\xff\n", filename="cases.csv", content_type="text/csv")

        self.assertEqual(ctx.exception.code, UploadErrorCode.ENCODING_ERROR)


if __name__ == "__main__":
    unittest.main()
