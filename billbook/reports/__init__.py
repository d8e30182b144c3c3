"""Ledger reports."""

from billbook.reports.generator import (
    MonthSection,
    ReportBillRow,
    ReportDocument,
    ReportPage,
    ReportSummary,
    SummaryRow,
    build_report,
)
from billbook.reports.markdown import render_report_markdown

__all__ = [
    "MonthSection",
    "ReportBillRow",
    "ReportDocument",
    "ReportPage",
    "ReportSummary",
    "SummaryRow",
    "build_report",
    "render_report_markdown",
]
