"""
JSON Codec

Full-fidelity backup format. Every field of every month and bill is
written, so decode_json(encode_json(months)) == months.

DESIGN DECISION: JSON import is all-or-nothing. A backup that does not
validate is rejected as a whole rather than half-restored, unlike CSV
where bad rows are skipped.
"""

import json
from datetime import datetime, time, timezone
from decimal import Decimal
from typing import Iterable, Optional, Union

from pydantic import ValidationError

from billbook.codecs.errors import FormatError
from billbook.models.ledger import Bill, Month


def _amount_to_json(amount: Optional[Decimal]) -> Union[float, str, None]:
    # Numbers stay numbers while a float holds them exactly; longer
    # amounts are written as strings, which decode back to the same Decimal.
    if amount is None:
        return None
    as_float = float(amount)
    if Decimal(repr(as_float)) == amount:
        return as_float
    return str(amount)


def _bill_to_dict(bill: Bill) -> dict:
    """Convert a Bill to its wire shape."""
    data = {
        "id": bill.id,
        "name": bill.name,
        "amount": _amount_to_json(bill.amount),
    }
    if bill.category_id is not None:
        data["categoryId"] = bill.category_id
    if bill.comment is not None:
        data["comment"] = bill.comment
    return data


def _month_to_dict(month: Month) -> dict:
    """Convert a Month to its wire shape, date as a UTC timestamp."""
    timestamp = datetime.combine(month.date, time(0, 0), tzinfo=timezone.utc)
    data = {
        "id": month.id,
        "date": timestamp.isoformat(),
        "bills": [_bill_to_dict(bill) for bill in month.bills],
    }
    if month.notes is not None:
        data["notes"] = month.notes
    return data


def encode_json(months: Iterable[Month]) -> str:
    """Serialize months, preserving their order."""
    data = [_month_to_dict(month) for month in months]
    return json.dumps(data, indent=2, ensure_ascii=False)


def decode_json(content: str) -> list[Month]:
    """
    Parse a JSON backup into months.

    Raises:
        FormatError: invalid JSON, a top level that is not a list, or any
            element that fails schema validation.
    """
    try:
        payload = json.loads(content, parse_float=Decimal)
    except json.JSONDecodeError as e:
        raise FormatError(f"Failed to parse JSON: {e}") from e

    if not isinstance(payload, list):
        raise FormatError(
            f"Failed to parse JSON: expected a list of months, got {type(payload).__name__}"
        )

    months = []
    for index, item in enumerate(payload, start=1):
        if not isinstance(item, dict):
            raise FormatError(f"Month #{index} is not an object")
        try:
            months.append(Month.model_validate(item))
        except ValidationError as e:
            raise FormatError(f"Month #{index} is invalid: {e}") from e

    return months
