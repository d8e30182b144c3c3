"""
Legacy free-text dialect.

Older versions exported bills as plain text rather than a table:

    Rachunki 15.11.2024
    Prąd: 250,00
    Woda:,120

A marker line opens a month, every following "name: amount" line adds
a bill to it. Known limitation: the split happens at the first colon,
so a bill name containing ":" cannot be represented.
"""

import re
from enum import Enum
from typing import Optional, Sequence

from billbook.codecs.grouping import MonthGrouper, skip_row
from billbook.models.ledger import Bill, Month
from billbook.models.transfer import RowIssue, SkipReason
from billbook.parsing import parse_date, parse_legacy_amount

NOISE_LINE = ","


class LegacyState(Enum):
    NO_CURRENT_MONTH = "no_current_month"
    IN_MONTH = "in_month"


def parse_legacy_lines(
    lines: Sequence[str],
    marker: str,
) -> tuple[list[Month], list[RowIssue]]:
    """Run the line state machine over the whole file."""
    header = re.compile(re.escape(marker) + r"\s+([0-9]{2}\.[0-9]{2}\.[0-9]{4})")
    grouper = MonthGrouper()
    issues: list[RowIssue] = []

    state = LegacyState.NO_CURRENT_MONTH
    current = None

    for line_number, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line or line == NOISE_LINE:
            continue

        if line.startswith(marker):
            reason: Optional[SkipReason] = None
            match = header.match(line)
            day = parse_date(match.group(1)) if match else None
            if match is None:
                reason = SkipReason.MALFORMED_MARKER
            elif day is None:
                reason = SkipReason.INVALID_DATE

            if reason is not None:
                # the previous month, if any, stays current
                skip_row(issues, line_number, line, reason)
                continue

            current = grouper.open(day)
            state = LegacyState.IN_MONTH
            continue

        if state is LegacyState.NO_CURRENT_MONTH or ":" not in line:
            continue

        name, _, amount_text = line.partition(":")
        name = name.strip()
        if not name:
            skip_row(issues, line_number, line, SkipReason.EMPTY_NAME)
            continue

        grouper.add(current, Bill(name=name, amount=parse_legacy_amount(amount_text)))

    return grouper.months(), issues
