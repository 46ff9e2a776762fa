"""
crm_ingest/parsing/header_contract.py

Required-column contract for one CSV record shape.
"""

from __future__ import annotations

from typing import Sequence

from crm_ingest.domain.results import HeaderValidation


class HeaderContract:
    """
    Ordered set of column names a CSV export must carry.

    Column order in the file is irrelevant and unknown extra columns are
    reported but tolerated; only a missing required column fails validation.
    """

    def __init__(self, required_headers: Sequence[str]) -> None:
        self._required_headers = tuple(required_headers)
        self._required_set = frozenset(self._required_headers)

    @property
    def required_headers(self) -> tuple[str, ...]:
        return self._required_headers

    def validate(self, observed_headers: Sequence[str]) -> HeaderValidation:
        actual = [header.strip() for header in observed_headers]
        actual_set = set(actual)

        return HeaderValidation(
            missing_headers=[header for header in self._required_headers if header not in actual_set],
            extra_headers=[header for header in actual if header not in self._required_set],
            actual_headers=actual,
        )

    def is_satisfied_by(self, observed_headers: Sequence[str]) -> bool:
        return self.validate(observed_headers).valid
