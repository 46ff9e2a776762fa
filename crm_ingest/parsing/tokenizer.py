"""
crm_ingest/parsing/tokenizer.py

Row-level CSV tokenizing for comma-delimited, double-quoted exports.
"""

from __future__ import annotations

from typing import Iterable

_QUOTE = '"'
_DELIMITER = ","
_NEEDS_QUOTING = (_DELIMITER, _QUOTE, "\r", "\n")


def tokenize_row(line: str) -> list[str]:
    """
    Split one logical CSV line into trimmed fields.

    Quoted fields may contain commas; a doubled quote inside a quoted field
    is a literal quote. Malformed quoting never raises: an unterminated quote
    simply swallows the rest of the line into the current field, and the
    resulting field-count mismatch is what flags the row downstream.
    """

    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    i = 0
    length = len(line)

    while i < length:
        char = line[i]
        if in_quotes:
            if char == _QUOTE:
                if i + 1 < length and line[i + 1] == _QUOTE:
                    current.append(_QUOTE)
                    i += 2
                    continue
                in_quotes = False
            else:
                current.append(char)
        elif char == _QUOTE:
            in_quotes = True
        elif char == _DELIMITER:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)
        i += 1

    fields.append("".join(current).strip())
    return fields


def format_row(fields: Iterable[str]) -> str:
    """
    Serialize fields into one CSV line that ``tokenize_row`` reads back.
    """

    return _DELIMITER.join(_format_field(value) for value in fields)


def _format_field(value: str) -> str:
    if any(token in value for token in _NEEDS_QUOTING):
        return _QUOTE + value.replace(_QUOTE, _QUOTE * 2) + _QUOTE
    return value
