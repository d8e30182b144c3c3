"""
CSV Import

Reads both CSV dialects back into months:

STANDARD - the current export: a header row, then date,name,amount rows.
LEGACY   - the old free-text export, see billbook.codecs.legacy.

The dialect is decided by the first non-empty line alone. Parsing is
best effort: a bad row is skipped and reported, the rest of the file
still imports. Only a file with nothing to read at all is fatal.

IMPORTANT: name and date problems drop the row; amount problems only
blank the amount. A bill with an unknown amount is still worth keeping.
"""

from typing import Optional, Sequence

import structlog

from billbook.codecs.errors import FormatError
from billbook.codecs.grouping import MonthGrouper, skip_row
from billbook.codecs.legacy import parse_legacy_lines
from billbook.models.ledger import Bill, Month
from billbook.models.transfer import CsvDialect, ImportResult, RowIssue, SkipReason
from billbook.parsing import parse_amount, parse_date

logger = structlog.get_logger(__name__)

DEFAULT_LEGACY_MARKER = "Rachunki"
STANDARD_FIELD_COUNT = 3


def split_csv_line(line: str) -> list[str]:
    """
    Split one line into fields.

    A small RFC 4180 subset: quotes toggle quoted mode, a doubled quote
    inside quotes is a literal quote, and commas inside quotes belong to
    the field. Fields spanning several lines are not supported.
    """
    fields = []
    current = []
    in_quotes = False
    i = 0

    while i < len(line):
        char = line[i]
        if char == '"':
            if in_quotes and i + 1 < len(line) and line[i + 1] == '"':
                current.append('"')
                i += 1
            else:
                in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            fields.append("".join(current))
            current = []
        else:
            current.append(char)
        i += 1

    fields.append("".join(current))
    return fields


def _split_lines(content: str) -> list[str]:
    return content.lstrip("\ufeff").split("\n")


def detect_dialect(lines: Sequence[str], marker: str = DEFAULT_LEGACY_MARKER) -> CsvDialect:
    """
    Pick the dialect from the first non-empty line.

    Raises:
        FormatError: if there is no non-empty line at all.
    """
    for line in lines:
        text = line.strip()
        if text:
            return CsvDialect.LEGACY if text.startswith(marker) else CsvDialect.STANDARD
    raise FormatError("CSV file is empty or invalid")


def parse_standard_lines(lines: Sequence[str]) -> tuple[list[Month], list[RowIssue]]:
    """
    Parse the tabular dialect.

    Raises:
        FormatError: if there is no data row after the header.
    """
    numbered = [(n, line.strip()) for n, line in enumerate(lines, start=1) if line.strip()]
    if len(numbered) < 2:
        raise FormatError("CSV file is empty or invalid")

    grouper = MonthGrouper()
    issues: list[RowIssue] = []

    # numbered[0] is the header row
    for line_number, line in numbered[1:]:
        fields = split_csv_line(line)
        if len(fields) < STANDARD_FIELD_COUNT:
            skip_row(issues, line_number, line, SkipReason.TOO_FEW_FIELDS)
            continue

        date_text, name, amount_text = fields[:STANDARD_FIELD_COUNT]
        day = parse_date(date_text.strip())
        if day is None:
            skip_row(issues, line_number, line, SkipReason.INVALID_DATE)
            continue

        name = name.strip()
        if not name:
            if amount_text.strip():
                skip_row(issues, line_number, line, SkipReason.EMPTY_NAME)
            else:
                # "date,," is how the exporter writes a month without bills
                grouper.open(day)
            continue

        grouper.add(day, Bill(name=name, amount=parse_amount(amount_text)))

    return grouper.months(), issues


def read_csv(content: str, legacy_marker: Optional[str] = None) -> ImportResult:
    """
    Parse CSV text of either dialect.

    Returns an ImportResult with the months and every skipped row.

    Raises:
        FormatError: if the file holds nothing parseable at all.
    """
    marker = legacy_marker or DEFAULT_LEGACY_MARKER
    lines = _split_lines(content)
    dialect = detect_dialect(lines, marker)

    if dialect is CsvDialect.LEGACY:
        months, issues = parse_legacy_lines(lines, marker)
    else:
        months, issues = parse_standard_lines(lines)

    if issues:
        logger.warning(
            "csv_import_partial",
            dialect=dialect.value,
            months=len(months),
            skipped=len(issues),
        )

    return ImportResult(months=tuple(months), skipped=tuple(issues), dialect=dialect)


def parse_csv(content: str, legacy_marker: Optional[str] = None) -> list[Month]:
    """Parse CSV text and return only the months."""
    return list(read_csv(content, legacy_marker).months)
