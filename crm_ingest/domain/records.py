"""
crm_ingest/domain/records.py

Typed raw records produced from one CSV data row.

Attribute names are snake_case; the exact CSV column name for each attribute
lives in the dataclass field metadata under ``"header"`` and is only consulted
at the parsing and reporting boundaries.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Mapping


def _column(header: str) -> Any:
    return field(metadata={"header": header})


class AccountType:
    PRO = "Pro"
    STARTER = "Starter"


class CustomerStatus:
    ACTIVE = "Active Customer"
    INACTIVE = "Inactive Customer"


@dataclass(frozen=True)
class CustomerRecord:
    """
    One customer account row as exported by the CRM.
    """

    account_owner: str = _column("Account Owner")
    account_name: str = _column("Account Name")
    latest_login: str = _column("Latest Login")
    created_date: str = _column("Created Date")
    last_cs_contact_date: str = _column("Last Customer Success Contact Date")
    billing_country: str = _column("Billing Country")
    account_type: str = _column("Account Type")
    language: str = _column("Language")
    status: str = _column("Status")
    account_status: str = _column("Sirvoy Account Status")
    customer_id: str = _column("Sirvoy Customer ID")
    property_type: str = _column("Property Type")
    mrr_currency: str = _column("MRR (converted) Currency")
    mrr: str = _column("MRR (converted)")
    channels: str = _column("Channels")

    @classmethod
    def from_row(cls, row: Mapping[str, str]) -> "CustomerRecord":
        return cls(**_values_from_row(cls, row))

    def as_row(self) -> dict[str, str]:
        return _as_row(self)


@dataclass(frozen=True)
class SentimentRecord:
    """
    One customer-sentiment interaction row.
    """

    sentiment_score: str = _column("Customer Sentiment Score")
    interaction_created_date: str = _column("Interaction: Created Date")
    case_number: str = _column("Case")
    customer_id: str = _column("Account: Sirvoy Customer ID")

    @classmethod
    def from_row(cls, row: Mapping[str, str]) -> "SentimentRecord":
        return cls(**_values_from_row(cls, row))

    def as_row(self) -> dict[str, str]:
        return _as_row(self)


RawRecord = CustomerRecord | SentimentRecord


def record_headers(record_type: type) -> tuple[str, ...]:
    """
    Return the CSV column names of a record type in declaration order.
    """

    return tuple(item.metadata["header"] for item in fields(record_type))


def header_for(record_type: type, attribute: str) -> str:
    """
    Return the CSV column name backing one record attribute.
    """

    for item in fields(record_type):
        if item.name == attribute:
            return item.metadata["header"]
    raise KeyError(attribute)


def _values_from_row(record_type: type, row: Mapping[str, str]) -> dict[str, str]:
    return {item.name: row.get(item.metadata["header"], "") for item in fields(record_type)}


def _as_row(record: Any) -> dict[str, str]:
    return {item.metadata["header"]: getattr(record, item.name) for item in fields(record)}
