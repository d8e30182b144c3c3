"""
Amount parsing.

Two parsers live here on purpose:

- parse_amount is the strict one used for user input and the standard
  CSV dialect. Comma or dot as decimal separator, nothing else.
- parse_legacy_amount reads amounts from the old free-text export, where
  commas were also written as thousands separators and trailing text
  ("120 zl") was common.

Neither ever raises. Anything unreadable becomes None, which the ledger
treats the same as "amount not entered".
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

NO_AMOUNT = "-"

# Amounts with more integer digits than this are rejected.
MAX_INTEGER_DIGITS = 15

# Numeric prefix in the spirit of JavaScript's parseFloat.
_FLOAT_PREFIX = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_DIGITS = re.compile(r"[0-9]*")


def parse_amount(raw: Any) -> Optional[Decimal]:
    """
    Parse a user-entered amount.

    "" and "-" mean "no amount". "1234,56" and "1234.56" are the same
    value. Negative numbers, thousands separators and currency symbols
    are not accepted and yield None.
    """
    if not isinstance(raw, str):
        return None

    text = raw.strip()
    if text in ("", NO_AMOUNT) or "_" in text:
        return None

    try:
        value = Decimal(text.replace(",", "."))
    except InvalidOperation:
        return None

    if not value.is_finite() or value.is_signed():
        return None
    if value and value.adjusted() >= MAX_INTEGER_DIGITS:
        return None
    return value


def _normalize_legacy_separators(text: str) -> str:
    # A last comma followed by one or two digits is a decimal comma
    # ("250,00"); every other comma groups thousands ("1,234").
    last = text.rfind(",")
    if last == -1 or "." in text:
        return text.replace(",", "")

    tail = _DIGITS.match(text, last + 1).group()
    if 1 <= len(tail) <= 2:
        return text[:last].replace(",", "") + "." + text[last + 1:]
    return text.replace(",", "")


def parse_legacy_amount(raw: Any) -> Optional[Decimal]:
    """
    Parse the amount half of a legacy "name: amount" line.

    A single leading comma is dropped ("Woda:,120" was a common shape),
    commas are resolved as separators, and the leading number is taken
    the way parseFloat would take it.
    """
    if not isinstance(raw, str):
        return None

    text = raw.strip()
    if text.startswith(","):
        text = text[1:].strip()
    if text in ("", NO_AMOUNT):
        return None

    match = _FLOAT_PREFIX.match(_normalize_legacy_separators(text))
    if not match:
        return None

    try:
        value = Decimal(match.group())
    except InvalidOperation:
        return None
    if not value.is_finite() or (value and value.adjusted() >= MAX_INTEGER_DIGITS):
        return None
    return value
