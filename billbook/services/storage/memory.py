"""
In-Memory Storage Implementation

Keeps rows in dicts, shaped like the hosted tables (a months table and a
bills table keyed by id). Used by tests and for running without a
backend configured.
"""

from datetime import date
from typing import Optional
from uuid import UUID

from billbook.models.audit import AuditEvent
from billbook.models.ledger import Bill, Month, month_key
from billbook.services.storage.interface import (
    AuditStorageInterface,
    DuplicateError,
    LedgerStorageInterface,
    NotFoundError,
)


class _MonthRow:
    def __init__(self, user_id: str, month: Month):
        self.user_id = user_id
        self.id = month.id
        self.date: date = month.date
        self.notes: Optional[str] = month.notes


class _BillRow:
    def __init__(self, month_id: str, bill: Bill):
        self.month_id = month_id
        self.bill = bill


class InMemoryLedgerStorage(LedgerStorageInterface):
    """Dict-backed ledger storage. Insertion order is preserved."""

    def __init__(self):
        self._months: dict[str, _MonthRow] = {}
        self._bills: dict[str, _BillRow] = {}

    def _owned_month(self, user_id: str, month_id: str) -> Optional[_MonthRow]:
        row = self._months.get(month_id)
        if row is None or row.user_id != user_id:
            return None
        return row

    async def list_months(self, user_id: str) -> list[Month]:
        rows = [row for row in self._months.values() if row.user_id == user_id]
        rows.sort(key=lambda row: row.date, reverse=True)

        months = []
        for row in rows:
            bills = tuple(
                bill_row.bill
                for bill_row in self._bills.values()
                if bill_row.month_id == row.id
            )
            months.append(Month(id=row.id, date=row.date, notes=row.notes, bills=bills))
        return months

    async def upsert_month(self, user_id: str, month: Month) -> None:
        existing = self._months.get(month.id)
        if existing is not None and existing.user_id != user_id:
            raise NotFoundError(f"Month not found: {month.id}")
        for row in self._months.values():
            if row.user_id == user_id and row.id != month.id and month_key(row.date) == month.key:
                raise DuplicateError(f"Month {month.key:%Y-%m} already exists: {row.id}")
        self._months[month.id] = _MonthRow(user_id, month)

    async def delete_month(self, user_id: str, month_id: str) -> bool:
        if self._owned_month(user_id, month_id) is None:
            return False
        del self._months[month_id]
        for bill_id in [b for b, row in self._bills.items() if row.month_id == month_id]:
            del self._bills[bill_id]
        return True

    async def upsert_bill(self, user_id: str, bill: Bill, month_id: str) -> None:
        if self._owned_month(user_id, month_id) is None:
            raise NotFoundError(f"Month not found: {month_id}")
        existing = self._bills.get(bill.id)
        if existing is not None and self._owned_month(user_id, existing.month_id) is None:
            raise NotFoundError(f"Bill not found: {bill.id}")
        self._bills[bill.id] = _BillRow(month_id, bill)

    async def delete_bill(self, user_id: str, bill_id: str) -> bool:
        row = self._bills.get(bill_id)
        if row is None or self._owned_month(user_id, row.month_id) is None:
            return False
        del self._bills[bill_id]
        return True


class InMemoryAuditStorage(AuditStorageInterface):
    """List-backed, append-only audit storage."""

    def __init__(self):
        self.events: list[AuditEvent] = []

    async def append_event(self, event: AuditEvent) -> bool:
        self.events.append(event)
        return True

    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        events = [e for e in self.events if e.correlation_id == correlation_id]
        events.sort(key=lambda e: e.timestamp)
        return events
