"""
crm_ingest/mappers/record_shapes.py

Record shapes: the header contract plus field mapping rules for one kind of
CRM export. Shapes are plain values handed to the generic parser.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Sequence, TypeVar

from crm_ingest.domain.records import CustomerRecord, SentimentRecord, record_headers
from crm_ingest.parsing.header_contract import HeaderContract
from crm_ingest.parsing.tokenizer import tokenize_row

RecordT = TypeVar("RecordT", CustomerRecord, SentimentRecord)

MappedRow = tuple[RecordT | None, str | None]


@dataclass(frozen=True)
class RecordShape(Generic[RecordT]):
    """
    Strategy describing one CSV export shape.

    ``identifier_headers`` are checked in order; the first blank one rejects
    the row.
    """

    name: str
    record_type: type[RecordT]
    identifier_headers: tuple[str, ...]

    @property
    def required_headers(self) -> tuple[str, ...]:
        return record_headers(self.record_type)

    def header_contract(self) -> HeaderContract:
        return HeaderContract(self.required_headers)

    def map_fields(
        self,
        fields: Sequence[str],
        headers: Sequence[str],
        row_number: int,
    ) -> MappedRow:
        """
        Map one tokenized row onto the shape's record type.

        Returns ``(record, None)`` on success or ``(None, reason)`` when the
        field count disagrees with the header row or an identifier is blank.
        """

        if len(fields) != len(headers):
            return None, f"Row {row_number}: Expected {len(headers)} fields but got {len(fields)}"

        lookup = {header.strip(): value for header, value in zip(headers, fields)}

        for identifier in self.identifier_headers:
            if not lookup.get(identifier, ""):
                return None, f"Row {row_number}: Missing required field '{identifier}'"

        return self.record_type.from_row(lookup), None


CUSTOMER_SHAPE: RecordShape[CustomerRecord] = RecordShape(
    name="customer",
    record_type=CustomerRecord,
    identifier_headers=("Sirvoy Customer ID",),
)

SENTIMENT_SHAPE: RecordShape[SentimentRecord] = RecordShape(
    name="sentiment",
    record_type=SentimentRecord,
    identifier_headers=("Account: Sirvoy Customer ID", "Case"),
)

SHAPES: dict[str, RecordShape] = {
    CUSTOMER_SHAPE.name: CUSTOMER_SHAPE,
    SENTIMENT_SHAPE.name: SENTIMENT_SHAPE,
}


def detect_shape(content: str) -> RecordShape | None:
    """
    Guess the export shape from the header row of ``content``.

    Sentiment is checked first because its contract is the smaller one.
    """

    for line in content.splitlines():
        if line.strip():
            headers = tokenize_row(line.lstrip("\ufeff"))
            break
    else:
        return None

    for shape in (SENTIMENT_SHAPE, CUSTOMER_SHAPE):
        if shape.header_contract().is_satisfied_by(headers):
            return shape
    return None
