"""
CSV Export

One flat table, one row per bill, readable by a spreadsheet and by our
own standard-dialect importer. Category and comment are not exported.
"""

from typing import Iterable, Optional

from billbook.i18n import Localizer
from billbook.models.ledger import Bill, Month

HEADER_KEYS = (
    "export.headers.date",
    "export.headers.billName",
    "export.headers.amount",
)


def quote_field(value: str) -> str:
    """Always quote, doubling inner quotes (RFC 4180)."""
    return '"' + value.replace('"', '""') + '"'


def _bill_row(date_text: str, bill: Bill) -> str:
    amount = f"{bill.amount:.2f}" if bill.amount is not None else ""
    return f"{date_text},{quote_field(bill.name)},{amount}"


def encode_csv(months: Iterable[Month], localizer: Optional[Localizer] = None) -> str:
    """
    Flatten months into CSV text.

    Dates use the locale's display layout; a month without bills still
    gets one row with empty name and amount so it survives a round trip.
    """
    localizer = localizer or Localizer()
    rows = [",".join(localizer.t(key) for key in HEADER_KEYS)]

    for month in months:
        date_text = localizer.format_date(month.date)
        if not month.bills:
            rows.append(f"{date_text},,")
            continue
        for bill in month.bills:
            rows.append(_bill_row(date_text, bill))

    return "\n".join(rows)
