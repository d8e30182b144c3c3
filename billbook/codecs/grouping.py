"""Month grouping and row skipping shared by both CSV dialects."""

from datetime import date

import structlog

from billbook.models.ledger import Bill, Month, month_key, new_id
from billbook.models.transfer import RowIssue, SkipReason

logger = structlog.get_logger(__name__)


def skip_row(issues: list[RowIssue], line_number: int, line: str, reason: SkipReason) -> None:
    """Log a skipped line and record it for the import result."""
    logger.warning(
        "csv_row_skipped",
        line_number=line_number,
        line=line,
        reason=reason.value,
    )
    issues.append(RowIssue(line_number=line_number, line=line, reason=reason))


class MonthGrouper:
    """
    Collects bills under one Month per month key.

    Lives for a single parse call. Months come out in the order their
    key was first seen, bills in the order they were added. The first
    date seen for a key becomes the Month's date.
    """

    def __init__(self):
        self._dates: dict[date, date] = {}
        self._ids: dict[date, str] = {}
        self._bills: dict[date, list[Bill]] = {}

    def open(self, day: date) -> date:
        """Make sure a Month exists for day's key and return the key."""
        key = month_key(day)
        if key not in self._dates:
            self._dates[key] = day
            self._ids[key] = new_id()
            self._bills[key] = []
        return key

    def add(self, day: date, bill: Bill) -> None:
        key = self.open(day)
        self._bills[key].append(bill)

    def __len__(self) -> int:
        return len(self._dates)

    def months(self) -> list[Month]:
        return [
            Month(id=self._ids[key], date=day, bills=tuple(self._bills[key]))
            for key, day in self._dates.items()
        ]
