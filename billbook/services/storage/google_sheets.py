"""
Google Sheets Storage Implementation

DESIGN DECISION: Google Sheets is used as the initial storage backend because:
1. The user can look at their ledger directly in Sheets
2. No database setup required
3. Built-in backup (Google's infrastructure)

TRADEOFFS:
- Not suitable for high-volume data (we're fine for one household)
- No transactions (callers write a month before its bills)
- Limited query capabilities (we filter in Python)

Months and bills live on two worksheets, one row per record, with a
user_id column on both so one spreadsheet can hold several ledgers.
"""

import json
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional
from uuid import UUID

import gspread
from google.oauth2.service_account import Credentials
from tenacity import (
    retry,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from billbook.config import get_settings
from billbook.models.audit import AuditEvent, AuditEventType, AuditSeverity
from billbook.models.ledger import Bill, Month, month_key
from billbook.services.storage.interface import (
    AuditStorageInterface,
    ConnectionError,
    DuplicateError,
    LedgerStorageInterface,
    NotFoundError,
    StorageError,
)


# Column mappings for Months sheet
MONTH_COLUMNS = [
    "id",
    "user_id",
    "date",
    "notes",
    "updated_at",
]

# Column mappings for Bills sheet
BILL_COLUMNS = [
    "id",
    "month_id",
    "user_id",
    "name",
    "amount",
    "category_id",
    "comment",
    "updated_at",
]

# Column mappings for Audit sheet
AUDIT_COLUMNS = [
    "event_id",
    "timestamp",
    "event_type",
    "severity",
    "entity_type",
    "entity_id",
    "correlation_id",
    "description",
    "details_json",
    "error_message",
    "is_user_action",
]

# Lookups and permission failures are answers, not transient faults
_write_retry = retry(
    retry=retry_if_not_exception_type((NotFoundError, DuplicateError)),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=2, max=10),
    reraise=True,
)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _safe_get(row: list, index: int, default: str = "") -> str:
    try:
        return row[index] if row[index] else default
    except IndexError:
        return default


def _row_date(row: list) -> Optional[date]:
    """Month date of a sheet row, None when missing or hand-edited."""
    try:
        return date.fromisoformat(_safe_get(row, 2))
    except ValueError:
        return None


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for API calls.
    """

    def __init__(self):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = get_settings().google_sheets

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                    "https://www.googleapis.com/auth/drive",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise ConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise ConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise ConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def _get_or_create(self, title: str, columns: list[str], rows: int) -> gspread.Worksheet:
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(title)
        except gspread.WorksheetNotFound:
            # Create the sheet with headers
            sheet = spreadsheet.add_worksheet(
                title=title,
                rows=rows,
                cols=len(columns),
            )
            sheet.append_row(columns)
        return sheet

    def get_months_sheet(self) -> gspread.Worksheet:
        """Get or create the Months worksheet."""
        return self._get_or_create(self._settings.months_sheet_name, MONTH_COLUMNS, 500)

    def get_bills_sheet(self) -> gspread.Worksheet:
        """Get or create the Bills worksheet."""
        return self._get_or_create(self._settings.bills_sheet_name, BILL_COLUMNS, 5000)

    def get_audit_sheet(self) -> gspread.Worksheet:
        """Get or create the Audit worksheet."""
        return self._get_or_create(self._settings.audit_sheet_name, AUDIT_COLUMNS, 5000)


class GoogleSheetsLedgerStorage(LedgerStorageInterface):
    """
    Google Sheets implementation of ledger storage.

    Upserts look the id up in column A and rewrite that row in place,
    or append a new row when the id is unknown.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _month_to_row(self, user_id: str, month: Month) -> list:
        """Convert a Month (without bills) to a spreadsheet row."""
        return [
            month.id,
            user_id,
            month.date.isoformat(),
            month.notes or "",
            _now(),
        ]

    def _bill_to_row(self, user_id: str, bill: Bill, month_id: str) -> list:
        """Convert a Bill to a spreadsheet row."""
        return [
            bill.id,
            month_id,
            user_id,
            bill.name,
            str(bill.amount) if bill.amount is not None else "",
            bill.category_id or "",
            bill.comment or "",
            _now(),
        ]

    def _row_to_bill(self, row: list) -> Bill:
        """Convert a spreadsheet row to a Bill."""
        amount = _safe_get(row, 4)
        return Bill(
            id=_safe_get(row, 0),
            name=_safe_get(row, 3),
            amount=Decimal(amount) if amount else None,
            category_id=_safe_get(row, 5) or None,
            comment=_safe_get(row, 6) or None,
        )

    @staticmethod
    def _find_row(all_rows: list[list], record_id: str) -> Optional[int]:
        """1-based sheet row index of record_id, header excluded."""
        for idx, row in enumerate(all_rows[1:], start=2):
            if row and row[0] == record_id:
                return idx
        return None

    async def list_months(self, user_id: str) -> list[Month]:
        """Load every month of the user with its bills."""
        try:
            month_rows = self._client.get_months_sheet().get_all_values()[1:]
            bill_rows = self._client.get_bills_sheet().get_all_values()[1:]
        except Exception as e:
            raise StorageError(f"Failed to load ledger: {e}")

        bills_by_month: dict[str, list[Bill]] = {}
        for row in bill_rows:
            if not row or not row[0] or _safe_get(row, 2) != user_id:
                continue
            try:
                bill = self._row_to_bill(row)
            except Exception:
                continue  # Skip malformed rows
            bills_by_month.setdefault(_safe_get(row, 1), []).append(bill)

        months = []
        for row in month_rows:
            if not row or not row[0] or _safe_get(row, 1) != user_id:
                continue
            day = _row_date(row)
            if day is None:
                continue  # Skip malformed rows
            try:
                months.append(Month(
                    id=row[0],
                    date=day,
                    notes=_safe_get(row, 3) or None,
                    bills=tuple(bills_by_month.get(row[0], [])),
                ))
            except Exception:
                continue  # Skip malformed rows

        # Newest first
        months.sort(key=lambda m: m.date, reverse=True)
        return months

    @_write_retry
    async def upsert_month(self, user_id: str, month: Month) -> None:
        """Insert or rewrite the month row."""
        try:
            sheet = self._client.get_months_sheet()
            all_rows = sheet.get_all_values()

            for row in all_rows[1:]:
                if not row or row[0] == month.id or _safe_get(row, 1) != user_id:
                    continue
                day = _row_date(row)
                if day is not None and month_key(day) == month.key:
                    raise DuplicateError(f"Month {month.key:%Y-%m} already exists: {row[0]}")

            new_row = self._month_to_row(user_id, month)
            idx = self._find_row(all_rows, month.id)
            if idx is None:
                sheet.append_row(new_row, value_input_option="RAW")
                return

            if _safe_get(all_rows[idx - 1], 1) != user_id:
                raise NotFoundError(f"Month not found: {month.id}")
            sheet.update(range_name=f"A{idx}", values=[new_row], value_input_option="RAW")
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to save month: {e}")

    async def delete_month(self, user_id: str, month_id: str) -> bool:
        """Delete the month row and its bill rows."""
        try:
            month_sheet = self._client.get_months_sheet()
            month_rows = month_sheet.get_all_values()
            idx = self._find_row(month_rows, month_id)
            if idx is None or _safe_get(month_rows[idx - 1], 1) != user_id:
                return False

            bill_sheet = self._client.get_bills_sheet()
            bill_rows = bill_sheet.get_all_values()
            # Bottom-up so earlier indexes stay valid
            for bill_idx in range(len(bill_rows), 1, -1):
                if _safe_get(bill_rows[bill_idx - 1], 1) == month_id:
                    bill_sheet.delete_rows(bill_idx)

            month_sheet.delete_rows(idx)
            return True
        except Exception as e:
            raise StorageError(f"Failed to delete month: {e}")

    @_write_retry
    async def upsert_bill(self, user_id: str, bill: Bill, month_id: str) -> None:
        """Insert or rewrite the bill row under month_id."""
        try:
            month_rows = self._client.get_months_sheet().get_all_values()
            month_idx = self._find_row(month_rows, month_id)
            if month_idx is None or _safe_get(month_rows[month_idx - 1], 1) != user_id:
                raise NotFoundError(f"Month not found: {month_id}")

            sheet = self._client.get_bills_sheet()
            all_rows = sheet.get_all_values()
            new_row = self._bill_to_row(user_id, bill, month_id)

            idx = self._find_row(all_rows, bill.id)
            if idx is None:
                sheet.append_row(new_row, value_input_option="RAW")
                return

            if _safe_get(all_rows[idx - 1], 2) != user_id:
                raise NotFoundError(f"Bill not found: {bill.id}")
            sheet.update(range_name=f"A{idx}", values=[new_row], value_input_option="RAW")
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to save bill: {e}")

    async def delete_bill(self, user_id: str, bill_id: str) -> bool:
        """Delete a bill by ID."""
        try:
            sheet = self._client.get_bills_sheet()
            all_rows = sheet.get_all_values()

            idx = self._find_row(all_rows, bill_id)
            if idx is None or _safe_get(all_rows[idx - 1], 2) != user_id:
                return False

            sheet.delete_rows(idx)
            return True
        except Exception as e:
            raise StorageError(f"Failed to delete bill: {e}")


class GoogleSheetsAuditStorage(AuditStorageInterface):
    """
    Google Sheets implementation of audit log storage.

    Audit events are append-only.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _row_to_event(self, row: list) -> AuditEvent:
        """Convert a spreadsheet row to an AuditEvent."""
        return AuditEvent(
            event_id=UUID(_safe_get(row, 0)),
            timestamp=datetime.fromisoformat(_safe_get(row, 1)),
            event_type=AuditEventType(_safe_get(row, 2)),
            severity=AuditSeverity(_safe_get(row, 3)),
            entity_type=_safe_get(row, 4) or None,
            entity_id=_safe_get(row, 5) or None,
            correlation_id=UUID(_safe_get(row, 6)) if _safe_get(row, 6) else None,
            description=_safe_get(row, 7),
            details=json.loads(_safe_get(row, 8)) if _safe_get(row, 8) else {},
            error_message=_safe_get(row, 9) or None,
            is_user_action=_safe_get(row, 10).lower() == "true",
        )

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def append_event(self, event: AuditEvent) -> bool:
        """Append an audit event."""
        sheet = self._client.get_audit_sheet()
        sheet.append_row(event.to_sheets_row(), value_input_option="RAW")
        return True

    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """Get events by correlation ID."""
        try:
            sheet = self._client.get_audit_sheet()
            all_rows = sheet.get_all_values()[1:]

            events = []
            for row in all_rows:
                if row and len(row) > 6 and row[6] == str(correlation_id):
                    try:
                        events.append(self._row_to_event(row))
                    except Exception:
                        continue

            # Sort chronologically
            events.sort(key=lambda e: e.timestamp)
            return events
        except Exception as e:
            raise StorageError(f"Failed to get audit events: {e}")
