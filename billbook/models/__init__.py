"""
Data Models Package

This package contains all Pydantic models used in billbook.
All data flowing through the import/export core must conform to these schemas.
"""

from billbook.models.ledger import (
    Bill,
    BillTemplate,
    Month,
    month_key,
    new_id,
)
from billbook.models.category import (
    DEFAULT_CATEGORIES,
    UNCATEGORIZED,
    Category,
    UserCategory,
    get_category_by_id,
    resolve_category,
)
from billbook.models.transfer import (
    CsvDialect,
    ExportArtifact,
    ExportFormat,
    ImportFormat,
    ImportResult,
    ImportSummary,
    RowIssue,
    SkipReason,
)
from billbook.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "Bill",
    "BillTemplate",
    "Month",
    "month_key",
    "new_id",
    # Categories
    "DEFAULT_CATEGORIES",
    "UNCATEGORIZED",
    "Category",
    "UserCategory",
    "get_category_by_id",
    "resolve_category",
    # Import/export
    "CsvDialect",
    "ExportArtifact",
    "ExportFormat",
    "ImportFormat",
    "ImportResult",
    "ImportSummary",
    "RowIssue",
    "SkipReason",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
