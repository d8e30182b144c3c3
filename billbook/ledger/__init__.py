"""Ledger state, month helpers and bill templates."""

from billbook.ledger.months import (
    average_per_month,
    available_years,
    create_bill,
    create_month,
    filter_months_by_years,
    sort_months_by_date,
    total_for_all_months,
    total_for_month,
)
from billbook.ledger.templates import (
    create_template,
    load_templates,
    save_templates,
    template_to_bill,
)
from billbook.ledger.state import LedgerState

__all__ = [
    "LedgerState",
    "average_per_month",
    "available_years",
    "create_bill",
    "create_month",
    "create_template",
    "filter_months_by_years",
    "load_templates",
    "save_templates",
    "sort_months_by_date",
    "template_to_bill",
    "total_for_all_months",
    "total_for_month",
]
