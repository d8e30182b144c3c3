"""
Date parsing for imported files.

Exactly three layouts are recognised, tried in order:

    YYYY-MM-DD   (ISO)
    DD.MM.YYYY   (Polish display format)
    DD/MM/YYYY   (British display format)

Each candidate must also be a real calendar date, so "2024-13-01" and
"31.02.2024" are rejected. Rejection is None, never an exception: the
caller drops that one record and carries on.
"""

import re
from datetime import date
from typing import Any, Optional

_DATE_LAYOUTS = (
    (re.compile(r"([0-9]{4})-([0-9]{2})-([0-9]{2})"), ("year", "month", "day")),
    (re.compile(r"([0-9]{2})\.([0-9]{2})\.([0-9]{4})"), ("day", "month", "year")),
    (re.compile(r"([0-9]{2})/([0-9]{2})/([0-9]{4})"), ("day", "month", "year")),
)


def parse_date(raw: Any) -> Optional[date]:
    """Parse one of the supported layouts; None when nothing matches."""
    if not isinstance(raw, str):
        return None

    text = raw.strip()
    for pattern, order in _DATE_LAYOUTS:
        match = pattern.fullmatch(text)
        if match is None:
            continue
        parts = dict(zip(order, (int(group) for group in match.groups())))
        try:
            return date(**parts)
        except ValueError:
            return None
    return None
