from __future__ import annotations

import unittest

from crm_ingest.domain.records import SentimentRecord
from crm_ingest.error_codes import ValidationErrorCode
from crm_ingest.validators.field_validator import LENIENT, STRICT
from crm_ingest.validators.sentiment_validator import SentimentValidator, parse_sentiment_score
from tests.helpers import sentiment_values


def _sentiment(**overrides: str) -> SentimentRecord:
    return SentimentRecord.from_row(sentiment_values(**overrides))


class TestSentimentValidator(unittest.TestCase):
    def setUp(self) -> None:
        self.validator = SentimentValidator()

    def test_valid_record(self) -> None:
        validated, errors = self.validator.validate(_sentiment(), 2, STRICT)

        self.assertEqual(errors, [])
        self.assertTrue(validated.is_valid)

    def test_score_range_is_inclusive(self) -> None:
        for score in ("-1", "1", "0", "+0.25", "-0.999"):
            with self.subTest(score=score):
                _, errors = self.validator.validate(_sentiment(sentiment_score=score), 2, STRICT)
                self.assertEqual(errors, [])

    def test_out_of_range_or_non_numeric_score(self) -> None:
        for score in ("1.01", "-2", "4", "very good", "n/a"):
            with self.subTest(score=score):
                validated, errors = self.validator.validate(_sentiment(sentiment_score=score), 3, STRICT)
                self.assertIsNone(validated)
                self.assertEqual(len(errors), 1)
                self.assertEqual(errors[0].code, ValidationErrorCode.INVALID_SENTIMENT_SCORE)
                self.assertEqual(errors[0].field, "Customer Sentiment Score")
                self.assertEqual(errors[0].row_number, 3)
                self.assertEqual(errors[0].message, "Sentiment score must be between -1 and +1")

    def test_missing_fields_are_cumulative(self) -> None:
        record = _sentiment(sentiment_score=" ", case_number="", customer_id="")

        _, errors = self.validator.validate(record, 2, STRICT)

        self.assertEqual(
            [error.code for error in errors],
            [
                ValidationErrorCode.MISSING_CUSTOMER_ID,
                ValidationErrorCode.MISSING_CASE_NUMBER,
                ValidationErrorCode.MISSING_SENTIMENT_SCORE,
            ],
        )
        self.assertEqual(errors[1].message, "Required field 'Case' is missing")

    def test_interaction_date(self) -> None:
        _, blank = self.validator.validate(_sentiment(interaction_created_date=""), 2, STRICT)
        _, with_time = self.validator.validate(
            _sentiment(interaction_created_date="12/03/2024, 14:05"), 2, STRICT
        )
        _, iso = self.validator.validate(_sentiment(interaction_created_date="2024-03-12"), 2, STRICT)

        self.assertEqual(blank, [])
        self.assertEqual(with_time, [])
        self.assertEqual([error.code for error in iso], [ValidationErrorCode.INVALID_DATE_FORMAT])
        self.assertEqual(iso[0].field, "Interaction: Created Date")

    def test_lenient_mode_keeps_invalid_record(self) -> None:
        record = _sentiment(sentiment_score="9")

        validated, errors = self.validator.validate(record, 2, LENIENT)

        self.assertFalse(validated.is_valid)
        self.assertEqual(validated.record, record)
        self.assertEqual(validated.errors, errors)

    def test_batch_uses_row_numbers(self) -> None:
        records = [_sentiment(), _sentiment(sentiment_score="x"), _sentiment(case_number="")]

        result = self.validator.validate_batch(records, STRICT, row_numbers=[2, 4, 7])

        self.assertEqual((result.valid_records, result.invalid_records), (1, 2))
        self.assertEqual([error.row_number for error in result.errors], [4, 7])

    def test_unknown_mode_raises(self) -> None:
        with self.assertRaises(ValueError):
            self.validator.validate(_sentiment(), 2, "relaxed")


class TestParseSentimentScore(unittest.TestCase):
    def test_leading_number_is_read(self) -> None:
        self.assertEqual(parse_sentiment_score("0.5"), 0.5)
        self.assertEqual(parse_sentiment_score(" -0.75 "), -0.75)
        self.assertEqual(parse_sentiment_score("0.5 (agent)"), 0.5)
        self.assertEqual(parse_sentiment_score(".5"), 0.5)
        self.assertIsNone(parse_sentiment_score("positive"))
        self.assertIsNone(parse_sentiment_score(""))


if __name__ == "__main__":
    unittest.main()
