"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Swap Google Sheets for a hosted database later
2. Use in-memory storage for testing
3. Keep the import core decoupled from storage implementation

The interface mirrors what a row store with "upsert by id" offers.
Months and bills are separate rows; a bill row points at its month id.
Every call is scoped by the authenticated user's id.
"""

from abc import ABC, abstractmethod
from uuid import UUID

from billbook.models.audit import AuditEvent
from billbook.models.ledger import Bill, Month


class LedgerStorageInterface(ABC):
    """
    Abstract interface for ledger storage operations.

    Any storage implementation (Google Sheets, in-memory, a hosted
    database) must implement these methods.
    """

    @abstractmethod
    async def list_months(self, user_id: str) -> list[Month]:
        """
        Load the user's whole ledger.

        Args:
            user_id: Owner of the ledger

        Returns:
            Months (newest first) with their bills attached in
            insertion order

        Raises:
            StorageError: If the read fails
        """
        pass

    @abstractmethod
    async def upsert_month(self, user_id: str, month: Month) -> None:
        """
        Insert or update a month row, conflict key = month.id.

        Only id, date and notes are written; bills are written
        separately with upsert_bill.

        Raises:
            DuplicateError: If another of the user's months has the
                same month key
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def delete_month(self, user_id: str, month_id: str) -> bool:
        """
        Delete a month and every bill that belongs to it.

        Returns:
            True if a month was deleted, False if it did not exist
        """
        pass

    @abstractmethod
    async def upsert_bill(self, user_id: str, bill: Bill, month_id: str) -> None:
        """
        Insert or update a bill row under month_id, conflict key = bill.id.

        Raises:
            NotFoundError: If month_id is not one of the user's months
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def delete_bill(self, user_id: str, bill_id: str) -> bool:
        """
        Delete a bill by ID.

        Returns:
            True if deleted, False if no such bill exists for the user
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events for a correlation ID (e.g., one import).

        Returns:
            List of related events in chronological order
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
