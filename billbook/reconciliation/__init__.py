"""Reconciliation of imported months with the stored ledger."""

from billbook.reconciliation.planner import (
    MonthUpsert,
    ReconciliationPlan,
    plan_reconciliation,
)
from billbook.reconciliation.executor import execute_plan

__all__ = [
    "MonthUpsert",
    "ReconciliationPlan",
    "execute_plan",
    "plan_reconciliation",
]
