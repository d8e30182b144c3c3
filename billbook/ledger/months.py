"""
Month helpers.

Totals treat a missing amount as zero; they never fail on an
incomplete month.
"""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Sequence, Union

from billbook.ledger.templates import template_to_bill
from billbook.models.ledger import Bill, BillTemplate, Month, new_id
from billbook.parsing.amounts import parse_amount

CENT = Decimal("0.01")


def total_for_month(month: Month) -> Decimal:
    """Sum of known amounts in one month."""
    return sum((bill.amount for bill in month.bills if bill.amount is not None), Decimal("0"))


def total_for_all_months(months: Iterable[Month]) -> Decimal:
    return sum((total_for_month(month) for month in months), Decimal("0"))


def average_per_month(months: Sequence[Month]) -> Decimal:
    """Mean monthly total rounded to cents; zero for an empty ledger."""
    if not months:
        return Decimal("0")
    average = total_for_all_months(months) / len(months)
    return average.quantize(CENT, rounding=ROUND_HALF_UP)


def sort_months_by_date(months: Iterable[Month], ascending: bool = False) -> list[Month]:
    """Newest first unless ascending is requested."""
    return sorted(months, key=lambda month: month.date, reverse=not ascending)


def available_years(months: Iterable[Month]) -> list[int]:
    """Distinct years present in the ledger, newest first."""
    return sorted({month.date.year for month in months}, reverse=True)


def filter_months_by_years(months: Iterable[Month], years: Iterable[int]) -> list[Month]:
    """Months whose year is selected. No selection means no months."""
    selected = set(years)
    if not selected:
        return []
    return [month for month in months if month.date.year in selected]


def create_bill(
    name: str,
    amount: Union[str, Decimal, int, None] = None,
    category_id: Optional[str] = None,
    comment: Optional[str] = None,
) -> Bill:
    """
    Build a new bill from form input.

    String amounts go through the same parser as CSV import, so "12,50"
    and "-" behave the same everywhere.
    """
    if isinstance(amount, str):
        amount = parse_amount(amount)
    elif amount is not None:
        amount = Decimal(amount)
    return Bill(
        id=new_id(),
        name=name,
        amount=amount,
        category_id=category_id,
        comment=comment,
    )


def create_month(
    day: date,
    templates: Iterable[BillTemplate] = (),
    notes: Optional[str] = None,
) -> Month:
    """New month pre-filled with a bill for every auto-add template."""
    bills = tuple(template_to_bill(t) for t in templates if t.auto_add)
    return Month(id=new_id(), date=day, bills=bills, notes=notes)
