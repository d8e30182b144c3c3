"""
Reconciliation Planner

Decides how freshly imported months land in the existing ledger without
ever creating a second month for the same calendar month.

RULES:
1. Candidate months are grouped by month key first (a JSON backup may
   repeat a key; CSV parsers already group).
2. Key already in the ledger: the existing month keeps its id, date and
   notes; imported bills are appended. No content dedup - two "Prąd"
   bills with the same amount are two bills.
3. Key not in the ledger: a new month with a fresh id.
4. An imported bill whose id is already taken gets a fresh id, so an
   append can never overwrite an existing bill in storage.

The planner is pure. It reads snapshots and returns a plan; executing
the plan against storage is billbook.reconciliation.executor's job.
"""

from datetime import date
from typing import Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from billbook.models.ledger import Bill, Month, new_id


class MonthUpsert(BaseModel):
    """
    One step of a plan: upsert `month`, then upsert each of `new_bills`
    under `month.id`. `month` is the full record as it will look after
    the step, including bills that were already stored.
    """
    model_config = ConfigDict(frozen=True)

    month: Month
    new_bills: tuple[Bill, ...] = Field(default_factory=tuple)
    created: bool


class ReconciliationPlan(BaseModel):
    """Ordered upserts produced by plan_reconciliation."""
    model_config = ConfigDict(frozen=True)

    operations: tuple[MonthUpsert, ...] = Field(default_factory=tuple)

    @property
    def months_created(self) -> int:
        return sum(1 for op in self.operations if op.created)

    @property
    def months_merged(self) -> int:
        return sum(1 for op in self.operations if not op.created)

    @property
    def bills_added(self) -> int:
        return sum(len(op.new_bills) for op in self.operations)

    @property
    def is_empty(self) -> bool:
        return not self.operations

    def apply(self, existing: Sequence[Month]) -> list[Month]:
        """
        Ledger snapshot after the plan, without touching storage.

        Merged months stay at their position; created months are
        appended in plan order.
        """
        merged = {op.month.id: op.month for op in self.operations if not op.created}
        result = [merged.get(month.id, month) for month in existing]
        result.extend(op.month for op in self.operations if op.created)
        return result


class _CandidateGroup:
    """All candidate data collected for one month key."""

    def __init__(self, month: Month):
        self.date = month.date
        self.notes: Optional[str] = month.notes
        self.bills: list[Bill] = list(month.bills)

    def absorb(self, month: Month) -> None:
        self.bills.extend(month.bills)
        if self.notes is None:
            self.notes = month.notes


def _group_candidates(candidates: Sequence[Month]) -> dict[date, _CandidateGroup]:
    groups: dict[date, _CandidateGroup] = {}
    for month in candidates:
        group = groups.get(month.key)
        if group is None:
            groups[month.key] = _CandidateGroup(month)
        else:
            group.absorb(month)
    return groups


def plan_reconciliation(
    existing: Sequence[Month],
    candidates: Sequence[Month],
) -> ReconciliationPlan:
    """Build the upsert plan that merges candidates into existing."""
    by_key: dict[date, Month] = {}
    for month in existing:
        by_key.setdefault(month.key, month)

    taken_ids = {bill.id for month in existing for bill in month.bills}
    operations = []

    for key, group in _group_candidates(candidates).items():
        new_bills = []
        for bill in group.bills:
            if bill.id in taken_ids:
                bill = bill.model_copy(update={"id": new_id()})
            taken_ids.add(bill.id)
            new_bills.append(bill)

        target = by_key.get(key)
        if target is None:
            month = Month(
                id=new_id(),
                date=group.date,
                bills=tuple(new_bills),
                notes=group.notes,
            )
            operations.append(MonthUpsert(month=month, new_bills=tuple(new_bills), created=True))
        elif new_bills:
            month = target.model_copy(update={"bills": target.bills + tuple(new_bills)})
            operations.append(MonthUpsert(month=month, new_bills=tuple(new_bills), created=False))

    return ReconciliationPlan(operations=tuple(operations))
