"""
Plan execution against the storage collaborator.

Steps run strictly in order and each month is written before its bills,
since a bill row references the month id. There is no transaction: if
storage fails halfway, the steps already written stay written and the
StorageError reaches the caller unchanged.
"""

from typing import Optional
from uuid import UUID

from billbook.audit import AuditLogger
from billbook.reconciliation.planner import ReconciliationPlan
from billbook.services.storage import LedgerStorageInterface


async def execute_plan(
    plan: ReconciliationPlan,
    storage: LedgerStorageInterface,
    user_id: str,
    audit_logger: Optional[AuditLogger] = None,
    correlation_id: Optional[UUID] = None,
) -> None:
    """
    Apply every upsert of the plan.

    Raises:
        StorageError: from the first failing storage call.
    """
    for op in plan.operations:
        await storage.upsert_month(user_id, op.month)
        if audit_logger:
            await audit_logger.log_month_upserted(
                month_id=op.month.id,
                key=op.month.key.strftime("%Y-%m"),
                created=op.created,
                correlation_id=correlation_id,
            )

        for bill in op.new_bills:
            await storage.upsert_bill(user_id, bill, op.month.id)
            if audit_logger:
                await audit_logger.log_bill_upserted(
                    bill_id=bill.id,
                    month_id=op.month.id,
                    name=bill.name,
                    correlation_id=correlation_id,
                )
