"""
Main Orchestrator for billbook

This module ties together all the components and defines the
end-to-end flows for:
1. Import (file → decode → parse → reconcile → persist)
2. Export (ledger → JSON backup, CSV table or printable report)

DESIGN DECISION: The orchestrator enforces the boundaries:
- A file that is structurally wrong is rejected whole, nothing is written
- CSV rows that cannot be read are skipped but always counted
- An import never creates a second month for a calendar month
- Every step is audited under one correlation ID
"""

from datetime import date
from pathlib import Path
from typing import Optional, Union
from uuid import UUID

import structlog

from billbook.audit import AuditLogger, create_correlation_id
from billbook.codecs import FormatError, decode_json, encode_csv, encode_json, read_csv
from billbook.config import get_settings
from billbook.i18n import Localizer, get_localizer
from billbook.ledger import LedgerState
from billbook.models.ledger import Month
from billbook.models.transfer import (
    ExportArtifact,
    ExportFormat,
    ImportFormat,
    ImportSummary,
    RowIssue,
)
from billbook.reports import build_report, render_report_markdown
from billbook.services.storage import (
    GoogleSheetsAuditStorage,
    GoogleSheetsClient,
    GoogleSheetsLedgerStorage,
    InMemoryLedgerStorage,
    LedgerStorageInterface,
)

logger = structlog.get_logger(__name__)

EXPORT_MIME_TYPES = {
    ExportFormat.JSON: "application/json",
    ExportFormat.CSV: "text/csv;charset=utf-8",
    ExportFormat.REPORT: "text/markdown",
}


def read_upload(
    source: Union[bytes, str, Path],
    max_bytes: Optional[int] = None,
) -> str:
    """
    Read an uploaded file as UTF-8 text.

    Accepts raw bytes or a filesystem path. A leading byte order mark is
    dropped.

    Raises:
        FormatError: If the file is too large or not valid UTF-8
    """
    if max_bytes is None:
        max_bytes = get_settings().app.max_import_size_bytes

    if isinstance(source, bytes):
        raw = source
    else:
        with open(source, "rb") as handle:
            raw = handle.read(max_bytes + 1)

    if len(raw) > max_bytes:
        raise FormatError(f"File is larger than {max_bytes} bytes")

    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise FormatError(f"File is not valid UTF-8: {e}") from e


def _issue_dict(issue: RowIssue) -> dict:
    return {
        "line_number": issue.line_number,
        "line": issue.line,
        "reason": issue.reason.value,
    }


class ImportFlow:
    """
    Orchestrates the import flow.

    Flow:
    1. Decode → JSON (all or nothing) or CSV (best effort, either dialect)
    2. Reconcile → plan upserts against the current ledger
    3. Persist → months before their bills
    4. Report → counts of what was created, merged and skipped
    """

    def __init__(
        self,
        state: LedgerState,
        audit_logger: Optional[AuditLogger] = None,
        legacy_marker: Optional[str] = None,
    ):
        self._state = state
        self._audit_logger = audit_logger
        self._legacy_marker = legacy_marker

    def _parse(self, content: str, fmt: ImportFormat) -> tuple[list[Month], list[RowIssue]]:
        if fmt is ImportFormat.JSON:
            return decode_json(content), []

        marker = self._legacy_marker or get_settings().app.legacy_marker
        result = read_csv(content, legacy_marker=marker)
        return list(result.months), list(result.skipped)

    async def import_content(
        self,
        content: str,
        fmt: ImportFormat,
        correlation_id: Optional[UUID] = None,
    ) -> ImportSummary:
        """
        Import decoded file content into the ledger.

        Raises:
            FormatError: If the content is structurally unreadable
            StorageError: If persisting fails part way
        """
        fmt = ImportFormat(fmt)
        correlation_id = correlation_id or create_correlation_id()

        if self._audit_logger:
            await self._audit_logger.log_import_started(
                fmt=fmt.value,
                size=len(content),
                correlation_id=correlation_id,
            )

        try:
            months, issues = self._parse(content, fmt)
        except FormatError as e:
            logger.warning("import_rejected", format=fmt.value, error=str(e))
            if self._audit_logger:
                await self._audit_logger.log_import_failed(
                    fmt=fmt.value,
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            raise

        if issues and self._audit_logger:
            await self._audit_logger.log_rows_skipped(
                skipped=[_issue_dict(issue) for issue in issues],
                correlation_id=correlation_id,
            )

        if not months and content.strip():
            logger.warning(
                "import_produced_nothing",
                format=fmt.value,
                size=len(content),
                skipped=len(issues),
            )
            if self._audit_logger:
                await self._audit_logger.log_import_empty(
                    fmt=fmt.value,
                    size=len(content),
                    correlation_id=correlation_id,
                )

        plan = await self._state.import_months(months, correlation_id=correlation_id)

        summary = ImportSummary(
            format=fmt,
            months_created=plan.months_created,
            months_merged=plan.months_merged,
            bills_added=plan.bills_added,
            rows_skipped=len(issues),
            issues=issues,
        )

        if self._audit_logger:
            await self._audit_logger.log_import_completed(
                fmt=fmt.value,
                months_created=summary.months_created,
                months_merged=summary.months_merged,
                bills_added=summary.bills_added,
                correlation_id=correlation_id,
            )

        return summary

    async def import_file(
        self,
        source: Union[bytes, str, Path],
        fmt: ImportFormat,
        correlation_id: Optional[UUID] = None,
    ) -> ImportSummary:
        """Read an upload (bytes or path) and import it."""
        return await self.import_content(read_upload(source), fmt, correlation_id)


class ExportFlow:
    """
    Orchestrates exports of the current ledger snapshot.

    JSON is the lossless backup. CSV is the flat table (category and
    comment are not part of it). The report is a Markdown rendering of
    the printable report.
    """

    def __init__(
        self,
        state: LedgerState,
        localizer: Optional[Localizer] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._state = state
        self._localizer = localizer
        self._audit_logger = audit_logger

    @property
    def localizer(self) -> Localizer:
        if self._localizer is None:
            self._localizer = get_localizer()
        return self._localizer

    async def export(
        self,
        fmt: ExportFormat,
        title: Optional[str] = None,
        on: Optional[date] = None,
        correlation_id: Optional[UUID] = None,
    ) -> ExportArtifact:
        """Serialize the ledger; `on` is the date used in the filename."""
        fmt = ExportFormat(fmt)
        stamp = (on or date.today()).isoformat()
        months = list(self._state.months)

        if fmt is ExportFormat.JSON:
            content = encode_json(months)
            filename = f"rachunki-{stamp}.json"
        elif fmt is ExportFormat.CSV:
            content = encode_csv(months, self.localizer)
            filename = f"rachunki-{stamp}.csv"
        else:
            doc = build_report(months, title=title, localizer=self.localizer)
            content = render_report_markdown(doc)
            filename = f"raport-rachunkow-{stamp}.md"

        if self._audit_logger:
            await self._audit_logger.log_export_completed(
                fmt=fmt.value,
                filename=filename,
                month_count=len(months),
                correlation_id=correlation_id,
            )

        return ExportArtifact(
            content=content,
            filename=filename,
            mime_type=EXPORT_MIME_TYPES[fmt],
        )


def create_app_components(
    user_id: str,
    use_storage: bool = True,
) -> tuple[ImportFlow, ExportFlow, LedgerState, Optional[GoogleSheetsClient]]:
    """
    Factory function to create all application components.

    Args:
        user_id: Owner of the ledger
        use_storage: Whether to initialize Google Sheets storage.
                    Set to False to run against in-memory storage.

    Returns:
        (import_flow, export_flow, ledger_state, sheets_client)

    Call `await ledger_state.load()` before the first import or export.
    """
    sheets_client = None
    ledger_storage: LedgerStorageInterface

    if use_storage:
        try:
            sheets_client = GoogleSheetsClient()
            ledger_storage = GoogleSheetsLedgerStorage(sheets_client)
            audit_logger = AuditLogger(GoogleSheetsAuditStorage(sheets_client))
        except Exception as e:
            # Storage not configured - continue without it
            logger.warning("storage_not_configured", error=str(e))
            sheets_client = None
            ledger_storage = InMemoryLedgerStorage()
            audit_logger = AuditLogger()  # Local-only logging
    else:
        ledger_storage = InMemoryLedgerStorage()
        audit_logger = AuditLogger()  # Local-only logging

    state = LedgerState(ledger_storage, user_id, audit_logger)
    import_flow = ImportFlow(state, audit_logger=audit_logger)
    export_flow = ExportFlow(state, audit_logger=audit_logger)

    return import_flow, export_flow, state, sheets_client
