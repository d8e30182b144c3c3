"""
Ledger State

DESIGN DECISION: One object owns the in-memory ledger snapshot and is the
only writer to it. Every mutation goes to storage first and updates the
snapshot only after storage accepted it, so the snapshot never shows a
change that was not persisted.

The month-key uniqueness rule is checked here before storage is called;
storage backends enforce it again as a backstop.
"""

from datetime import date
from typing import Optional, Sequence
from uuid import UUID

import structlog

from billbook.audit import AuditLogger
from billbook.models.ledger import Bill, Month, month_key
from billbook.reconciliation import ReconciliationPlan, execute_plan, plan_reconciliation
from billbook.services.storage import (
    DuplicateError,
    LedgerStorageInterface,
    NotFoundError,
    StorageError,
)

logger = structlog.get_logger(__name__)


class LedgerState:
    """
    The user's ledger as the application sees it.

    Usage:
        state = LedgerState(storage, user_id, audit_logger)
        await state.load()
        plan = await state.import_months(parse_csv(content))
    """

    def __init__(
        self,
        storage: LedgerStorageInterface,
        user_id: str,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._user_id = user_id
        self._audit = audit_logger
        self._months: tuple[Month, ...] = ()

    @property
    def months(self) -> tuple[Month, ...]:
        """Current snapshot, in storage order (newest first after load)."""
        return self._months

    @property
    def user_id(self) -> str:
        return self._user_id

    async def load(self) -> tuple[Month, ...]:
        """Replace the snapshot with what storage holds."""
        self._months = tuple(await self._storage.list_months(self._user_id))
        logger.debug("ledger_loaded", user_id=self._user_id, months=len(self._months))
        return self._months

    def find_month(self, month_id: str) -> Optional[Month]:
        for month in self._months:
            if month.id == month_id:
                return month
        return None

    def find_month_by_key(self, day: date) -> Optional[Month]:
        """The month holding `day`'s calendar month, if any."""
        key = month_key(day)
        for month in self._months:
            if month.key == key:
                return month
        return None

    def _replace(self, updated: Month) -> None:
        months = list(self._months)
        for idx, month in enumerate(months):
            if month.id == updated.id:
                months[idx] = updated
                break
        else:
            months.append(updated)
        self._months = tuple(months)

    async def _store_failed(self, operation: str, error: StorageError, correlation_id: Optional[UUID]) -> None:
        if self._audit:
            await self._audit.log_store_error(
                operation=operation,
                error_message=str(error),
                correlation_id=correlation_id,
            )

    async def upsert_month(
        self,
        month: Month,
        correlation_id: Optional[UUID] = None,
    ) -> Month:
        """
        Persist a whole month record: its row and every bill it carries.

        Bills the stored copy had but `month` no longer lists are deleted.

        Raises:
            DuplicateError: If a different month already owns the month key
            StorageError: If storage rejects a write
        """
        clash = self.find_month_by_key(month.date)
        if clash is not None and clash.id != month.id:
            raise DuplicateError(f"Month {month.key:%Y-%m} already exists: {clash.id}")

        previous = self.find_month(month.id)
        kept_ids = {bill.id for bill in month.bills}
        try:
            await self._storage.upsert_month(self._user_id, month)
            for bill in month.bills:
                await self._storage.upsert_bill(self._user_id, bill, month.id)
            if previous is not None:
                for bill in previous.bills:
                    if bill.id not in kept_ids:
                        await self._storage.delete_bill(self._user_id, bill.id)
        except StorageError as e:
            await self._store_failed("upsert_month", e, correlation_id)
            raise

        self._replace(month)
        if self._audit:
            await self._audit.log_month_upserted(
                month_id=month.id,
                key=month.key.strftime("%Y-%m"),
                created=previous is None,
                correlation_id=correlation_id,
            )
        return month

    async def upsert_bill(
        self,
        month_id: str,
        bill: Bill,
        correlation_id: Optional[UUID] = None,
    ) -> Month:
        """
        Add or replace one bill in a month. Returns the updated month.

        A bill id that currently lives in another month is moved.

        Raises:
            NotFoundError: If month_id is not in the ledger
        """
        target = self.find_month(month_id)
        if target is None:
            raise NotFoundError(f"Month not found: {month_id}")

        try:
            await self._storage.upsert_bill(self._user_id, bill, month_id)
        except StorageError as e:
            await self._store_failed("upsert_bill", e, correlation_id)
            raise

        for month in self._months:
            if month.id != month_id and any(b.id == bill.id for b in month.bills):
                self._replace(month.model_copy(
                    update={"bills": tuple(b for b in month.bills if b.id != bill.id)}
                ))

        if any(b.id == bill.id for b in target.bills):
            bills = tuple(bill if b.id == bill.id else b for b in target.bills)
        else:
            bills = target.bills + (bill,)
        updated = target.model_copy(update={"bills": bills})
        self._replace(updated)

        if self._audit:
            await self._audit.log_bill_upserted(
                bill_id=bill.id,
                month_id=month_id,
                name=bill.name,
                correlation_id=correlation_id,
            )
        return updated

    async def delete_month(
        self,
        month_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """
        Delete a month together with its bills.

        Raises:
            NotFoundError: If month_id is not in the ledger
        """
        if self.find_month(month_id) is None:
            raise NotFoundError(f"Month not found: {month_id}")

        try:
            await self._storage.delete_month(self._user_id, month_id)
        except StorageError as e:
            await self._store_failed("delete_month", e, correlation_id)
            raise

        self._months = tuple(m for m in self._months if m.id != month_id)
        if self._audit:
            await self._audit.log_month_deleted(month_id=month_id, correlation_id=correlation_id)

    async def delete_bill(
        self,
        bill_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """
        Remove a bill from whichever month holds it.

        Raises:
            NotFoundError: If no month holds bill_id
        """
        owner = next(
            (m for m in self._months if any(b.id == bill_id for b in m.bills)),
            None,
        )
        if owner is None:
            raise NotFoundError(f"Bill not found: {bill_id}")

        try:
            await self._storage.delete_bill(self._user_id, bill_id)
        except StorageError as e:
            await self._store_failed("delete_bill", e, correlation_id)
            raise

        self._replace(owner.model_copy(
            update={"bills": tuple(b for b in owner.bills if b.id != bill_id)}
        ))
        if self._audit:
            await self._audit.log_bill_deleted(bill_id=bill_id, correlation_id=correlation_id)

    async def import_months(
        self,
        candidates: Sequence[Month],
        correlation_id: Optional[UUID] = None,
    ) -> ReconciliationPlan:
        """
        Merge parsed months into the ledger.

        On a storage failure the writes already made stay in storage and
        the snapshot is reloaded from it before the error is re-raised.
        """
        plan = plan_reconciliation(self._months, candidates)
        try:
            await execute_plan(
                plan,
                self._storage,
                self._user_id,
                audit_logger=self._audit,
                correlation_id=correlation_id,
            )
        except StorageError as e:
            await self._store_failed("import_months", e, correlation_id)
            try:
                await self.load()
            except StorageError:
                logger.warning("ledger_reload_failed", user_id=self._user_id)
            raise

        self._months = tuple(plan.apply(self._months))
        return plan
