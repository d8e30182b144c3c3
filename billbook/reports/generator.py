"""
Report projection.

Builds a print-ready description of the ledger: a title, a generated-at
line, one section per month (oldest first), an optional summary and a
"page X of Y" footer on every page. Every text is already localized and
every amount already formatted, so renderers only lay it out.
"""

from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from pydantic import BaseModel, Field

from billbook.i18n import Localizer, get_localizer
from billbook.ledger.months import (
    average_per_month,
    sort_months_by_date,
    total_for_all_months,
    total_for_month,
)
from billbook.models.category import Category, resolve_category
from billbook.models.ledger import Month

LABEL_KEYS = (
    "billName",
    "amount",
    "category",
    "notes",
    "noBills",
    "paymentDate",
    "monthTotal",
    "notesLabel",
    "summary",
    "month",
    "paymentDateHeader",
    "billsCount",
    "total",
    "totalLabel",
    "averageLabel",
)


class ReportBillRow(BaseModel):
    name: str
    amount: str
    category: str
    comment: str = ""


class MonthSection(BaseModel):
    """One month block: heading, bill table, total and notes."""
    heading: str = Field(..., description="Month name and year, e.g. 'Listopad 2024'")
    payment_date: str
    rows: list[ReportBillRow] = Field(default_factory=list)
    total: Decimal
    total_text: str
    notes: Optional[str] = None


class SummaryRow(BaseModel):
    month: str
    payment_date: str
    bill_count: int
    total_text: str


class ReportSummary(BaseModel):
    rows: list[SummaryRow]
    months_count_text: str
    bill_count: int
    total: Decimal
    total_text: str
    average: Decimal
    average_text: str


class ReportPage(BaseModel):
    number: int
    sections: list[MonthSection] = Field(default_factory=list)
    summary: Optional[ReportSummary] = None
    footer: str = ""


class ReportDocument(BaseModel):
    title: str
    generated_line: str
    labels: dict[str, str]
    pages: list[ReportPage]

    @property
    def sections(self) -> list[MonthSection]:
        return [section for page in self.pages for section in page.sections]

    @property
    def summary(self) -> Optional[ReportSummary]:
        for page in self.pages:
            if page.summary is not None:
                return page.summary
        return None


def _month_heading(month: Month, localizer: Localizer) -> str:
    return f"{localizer.month_name(month.date)} {month.date.year}"


def _category_name(
    category_id: Optional[str],
    localizer: Localizer,
    user_categories: Iterable[Category],
) -> str:
    if not category_id:
        return "-"
    return resolve_category(category_id, user_categories).display_name(localizer)


def _build_section(
    month: Month,
    localizer: Localizer,
    user_categories: Sequence[Category],
) -> MonthSection:
    total = total_for_month(month)
    rows = [
        ReportBillRow(
            name=bill.name,
            amount=localizer.format_money(bill.amount),
            category=_category_name(bill.category_id, localizer, user_categories),
            comment=bill.comment or "",
        )
        for bill in month.bills
    ]
    return MonthSection(
        heading=_month_heading(month, localizer),
        payment_date=localizer.format_date(month.date),
        rows=rows,
        total=total,
        total_text=localizer.format_money(total),
        notes=month.notes,
    )


def _build_summary(months: Sequence[Month], localizer: Localizer) -> ReportSummary:
    total = total_for_all_months(months)
    average = average_per_month(months)
    return ReportSummary(
        rows=[
            SummaryRow(
                month=_month_heading(month, localizer),
                payment_date=localizer.format_date(month.date),
                bill_count=len(month.bills),
                total_text=localizer.format_money(total_for_month(month)),
            )
            for month in months
        ],
        months_count_text=localizer.t("report.monthsCount", count=len(months)),
        bill_count=sum(len(month.bills) for month in months),
        total=total,
        total_text=localizer.format_money(total),
        average=average,
        average_text=localizer.format_money(average),
    )


def build_report(
    months: Sequence[Month],
    title: Optional[str] = None,
    localizer: Optional[Localizer] = None,
    generated_at: Optional[datetime] = None,
    months_per_page: Optional[int] = None,
    user_categories: Sequence[Category] = (),
) -> ReportDocument:
    """
    Project months into a ReportDocument.

    Months are laid out oldest first, `months_per_page` sections per
    page. With more than one month, a summary (per-month totals, grand
    total and average) follows on its own page.
    """
    localizer = localizer or get_localizer()
    if months_per_page is None:
        from billbook.config import get_settings
        months_per_page = get_settings().app.report_months_per_page
    months_per_page = max(1, months_per_page)
    generated_at = generated_at or datetime.now()

    ordered = sort_months_by_date(months, ascending=True)
    sections = [_build_section(month, localizer, user_categories) for month in ordered]

    pages = [
        ReportPage(number=0, sections=sections[start:start + months_per_page])
        for start in range(0, len(sections), months_per_page)
    ]
    if len(ordered) > 1:
        pages.append(ReportPage(number=0, summary=_build_summary(ordered, localizer)))
    if not pages:
        pages.append(ReportPage(number=0))

    page_count = len(pages)
    for number, page in enumerate(pages, start=1):
        page.number = number
        page.footer = localizer.t("report.page", current=number, total=page_count)

    return ReportDocument(
        title=title or localizer.t("report.title"),
        generated_line=(
            f"{localizer.t('report.generated')} "
            f"{localizer.format_date(generated_at.date())} {generated_at:%H:%M}"
        ),
        labels={key: localizer.t(f"report.{key}") for key in LABEL_KEYS},
        pages=pages,
    )
