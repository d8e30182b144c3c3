"""
Audit Models for billbook

Every import, export and ledger write is logged for audit purposes.
This provides:
1. Traceability of what an import changed
2. Debugging information when a file only partially parsed
3. A record of rows that were silently dropped

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

import json
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    Every step of an import, and every ledger write, has its own type.
    """
    # Import
    IMPORT_STARTED = "import_started"
    IMPORT_COMPLETED = "import_completed"
    IMPORT_FAILED = "import_failed"
    IMPORT_ROWS_SKIPPED = "import_rows_skipped"
    IMPORT_EMPTY = "import_empty"

    # Ledger writes
    MONTH_UPSERTED = "month_upserted"
    MONTH_DELETED = "month_deleted"
    BILL_UPSERTED = "bill_upserted"
    BILL_DELETED = "bill_deleted"

    # Export
    EXPORT_COMPLETED = "export_completed"

    # System events
    STORE_ERROR = "store_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'month', 'bill', 'import')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., all writes of one import)"
    )

    # Event details
    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_message: Optional[str] = None

    # User action tracking
    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }

    def to_sheets_row(self) -> list:
        """
        Convert to a row suitable for Google Sheets storage.

        Returns columns in order:
        [event_id, timestamp, event_type, severity, entity_type, entity_id,
         correlation_id, description, details_json, error_message, is_user_action]
        """
        return [
            str(self.event_id),
            self.timestamp.isoformat(),
            self.event_type.value,
            self.severity.value,
            self.entity_type or "",
            self.entity_id or "",
            str(self.correlation_id) if self.correlation_id else "",
            self.description,
            json.dumps(self.details, ensure_ascii=False) if self.details else "",
            self.error_message or "",
            str(self.is_user_action),
        ]


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.import_started("csv", 2048, correlation_id)
        event = AuditEventBuilder.month_upserted(month_id, "2024-11", True, correlation_id)
    """

    @staticmethod
    def import_started(
        fmt: str,
        size: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IMPORT_STARTED,
            entity_type="import",
            correlation_id=correlation_id,
            description=f"Import started: {fmt} ({size} characters)",
            details={
                "format": fmt,
                "size": size,
            },
            is_user_action=True,
        )

    @staticmethod
    def import_completed(
        fmt: str,
        months_created: int,
        months_merged: int,
        bills_added: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IMPORT_COMPLETED,
            entity_type="import",
            correlation_id=correlation_id,
            description=(
                f"Import completed: {months_created} new months, "
                f"{months_merged} merged, {bills_added} bills"
            ),
            details={
                "format": fmt,
                "months_created": months_created,
                "months_merged": months_merged,
                "bills_added": bills_added,
            },
        )

    @staticmethod
    def import_failed(
        fmt: str,
        error_message: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IMPORT_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="import",
            correlation_id=correlation_id,
            description=f"Import failed: {fmt} file rejected",
            error_message=error_message,
            details={
                "format": fmt,
            },
        )

    @staticmethod
    def rows_skipped(
        skipped: list[dict],
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IMPORT_ROWS_SKIPPED,
            severity=AuditSeverity.WARNING,
            entity_type="import",
            correlation_id=correlation_id,
            description=f"{len(skipped)} rows skipped during import",
            details={
                "rows": skipped,
            },
        )

    @staticmethod
    def import_empty(
        fmt: str,
        size: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IMPORT_EMPTY,
            severity=AuditSeverity.WARNING,
            entity_type="import",
            correlation_id=correlation_id,
            description="Import produced no months from a non-empty file",
            details={
                "format": fmt,
                "size": size,
            },
        )

    @staticmethod
    def month_upserted(
        month_id: str,
        key: str,
        created: bool,
        correlation_id: Optional[UUID]
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.MONTH_UPSERTED,
            entity_type="month",
            entity_id=month_id,
            correlation_id=correlation_id,
            description=f"Month {key} {'created' if created else 'updated'}",
            details={
                "month_key": key,
                "created": created,
            },
        )

    @staticmethod
    def month_deleted(
        month_id: str,
        correlation_id: Optional[UUID]
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.MONTH_DELETED,
            entity_type="month",
            entity_id=month_id,
            correlation_id=correlation_id,
            description="Month deleted",
            is_user_action=True,
        )

    @staticmethod
    def bill_upserted(
        bill_id: str,
        month_id: str,
        name: str,
        correlation_id: Optional[UUID]
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BILL_UPSERTED,
            entity_type="bill",
            entity_id=bill_id,
            correlation_id=correlation_id,
            description=f"Bill saved: {name}",
            details={
                "month_id": month_id,
                "name": name,
            },
        )

    @staticmethod
    def bill_deleted(
        bill_id: str,
        correlation_id: Optional[UUID]
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BILL_DELETED,
            entity_type="bill",
            entity_id=bill_id,
            correlation_id=correlation_id,
            description="Bill deleted",
            is_user_action=True,
        )

    @staticmethod
    def export_completed(
        fmt: str,
        filename: str,
        month_count: int,
        correlation_id: Optional[UUID]
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPORT_COMPLETED,
            entity_type="export",
            correlation_id=correlation_id,
            description=f"Exported {month_count} months as {fmt}",
            details={
                "format": fmt,
                "filename": filename,
                "month_count": month_count,
            },
            is_user_action=True,
        )

    @staticmethod
    def store_error(
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID]
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORE_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"Storage error during {operation}",
            error_message=error_message,
            details={
                "operation": operation,
            },
            correlation_id=correlation_id,
        )
