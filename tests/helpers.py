"""
Shared CSV builders for the import test-suite.
"""

from __future__ import annotations

from crm_ingest.domain.records import CustomerRecord, SentimentRecord, header_for, record_headers
from crm_ingest.parsing.tokenizer import format_row

CUSTOMER_HEADERS = record_headers(CustomerRecord)
SENTIMENT_HEADERS = record_headers(SentimentRecord)


def customer_values(**overrides: str) -> dict[str, str]:
    """
    One valid customer row keyed by CSV header; overrides use record attribute names.
    """

    values = CustomerRecord(
        account_owner="Jane Doe",
        account_name="Seaside Hotel",
        latest_login="15/03/2024, 09:30",
        created_date="01/02/2020",
        last_cs_contact_date="10/03/2024",
        billing_country="Sweden",
        account_type="Pro",
        language="English; Swedish",
        status="Active Customer",
        account_status="Loyal",
        customer_id="C-1001",
        property_type="Hotel",
        mrr_currency="EUR",
        mrr="250.00",
        channels="Booking.com; Expedia",
    ).as_row()
    for attribute, value in overrides.items():
        values[header_for(CustomerRecord, attribute)] = value
    return values


def customer_record(**overrides: str) -> CustomerRecord:
    return CustomerRecord.from_row(customer_values(**overrides))


def customer_csv(*rows: dict[str, str], headers: tuple[str, ...] = CUSTOMER_HEADERS) -> str:
    lines = [format_row(headers)]
    lines.extend(format_row(row.get(header, "") for header in headers) for row in rows)
    return "\n".join(lines) + "\n"


def sentiment_values(**overrides: str) -> dict[str, str]:
    values = SentimentRecord(
        sentiment_score="0.8",
        interaction_created_date="12/03/2024",
        case_number="00012345",
        customer_id="C-1001",
    ).as_row()
    for attribute, value in overrides.items():
        values[header_for(SentimentRecord, attribute)] = value
    return values


def sentiment_csv(*rows: dict[str, str], headers: tuple[str, ...] = SENTIMENT_HEADERS) -> str:
    lines = [format_row(headers)]
    lines.extend(format_row(row.get(header, "") for header in headers) for row in rows)
    return "\n".join(lines) + "\n"
