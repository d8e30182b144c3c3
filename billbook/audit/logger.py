"""
Audit Logger

DESIGN DECISION: Every import, export and ledger write is logged.
This provides:
1. Traceability of what an import changed
2. A record of rows that were dropped during parsing
3. Debugging capability when storage fails half way through

The audit logger:
- Is async so it composes with the async storage layer
- Gracefully handles failures (a broken audit sink never aborts an import)
- Supports correlation IDs to trace every write of one import
"""

from typing import Optional
from uuid import UUID, uuid4

import structlog

from billbook.models.audit import AuditEvent, AuditEventBuilder
from billbook.services.storage import AuditStorageInterface


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. Audit storage (Google Sheets or in-memory), when one is configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger()

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity.value in ("error", "critical"):
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_import_started(
        self,
        fmt: str,
        size: int,
        correlation_id: UUID,
    ) -> None:
        """Log the start of an import."""
        await self.log(AuditEventBuilder.import_started(
            fmt=fmt,
            size=size,
            correlation_id=correlation_id,
        ))

    async def log_import_completed(
        self,
        fmt: str,
        months_created: int,
        months_merged: int,
        bills_added: int,
        correlation_id: UUID,
    ) -> None:
        """Log a finished import with its counts."""
        await self.log(AuditEventBuilder.import_completed(
            fmt=fmt,
            months_created=months_created,
            months_merged=months_merged,
            bills_added=bills_added,
            correlation_id=correlation_id,
        ))

    async def log_import_failed(
        self,
        fmt: str,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        """Log a rejected file."""
        await self.log(AuditEventBuilder.import_failed(
            fmt=fmt,
            error_message=error_message,
            correlation_id=correlation_id,
        ))

    async def log_rows_skipped(
        self,
        skipped: list[dict],
        correlation_id: UUID,
    ) -> None:
        """Log rows the parser dropped."""
        await self.log(AuditEventBuilder.rows_skipped(
            skipped=skipped,
            correlation_id=correlation_id,
        ))

    async def log_import_empty(
        self,
        fmt: str,
        size: int,
        correlation_id: UUID,
    ) -> None:
        """Log a non-empty file that yielded nothing."""
        await self.log(AuditEventBuilder.import_empty(
            fmt=fmt,
            size=size,
            correlation_id=correlation_id,
        ))

    async def log_month_upserted(
        self,
        month_id: str,
        key: str,
        created: bool,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.month_upserted(
            month_id=month_id,
            key=key,
            created=created,
            correlation_id=correlation_id,
        ))

    async def log_month_deleted(
        self,
        month_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.month_deleted(
            month_id=month_id,
            correlation_id=correlation_id,
        ))

    async def log_bill_upserted(
        self,
        bill_id: str,
        month_id: str,
        name: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.bill_upserted(
            bill_id=bill_id,
            month_id=month_id,
            name=name,
            correlation_id=correlation_id,
        ))

    async def log_bill_deleted(
        self,
        bill_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.bill_deleted(
            bill_id=bill_id,
            correlation_id=correlation_id,
        ))

    async def log_export_completed(
        self,
        fmt: str,
        filename: str,
        month_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a produced export artifact."""
        await self.log(AuditEventBuilder.export_completed(
            fmt=fmt,
            filename=filename,
            month_count=month_count,
            correlation_id=correlation_id,
        ))

    async def log_store_error(
        self,
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a storage backend failure."""
        await self.log(AuditEventBuilder.store_error(
            operation=operation,
            error_message=error_message,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (e.g., a file import).
    Pass it through all subsequent operations.
    """
    return uuid4()
