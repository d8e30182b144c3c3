"""
Tests for storage backends.

Google Sheets storage runs against an in-process fake worksheet; no
network access and no credentials are needed.
"""

import asyncio

import pytest
from datetime import date
from decimal import Decimal
from uuid import uuid4

from billbook.models import AuditEventBuilder, Bill, Month
from billbook.services.storage import (
    DuplicateError,
    GoogleSheetsAuditStorage,
    GoogleSheetsLedgerStorage,
    InMemoryAuditStorage,
    InMemoryLedgerStorage,
    NotFoundError,
)
from billbook.services.storage.google_sheets import (
    AUDIT_COLUMNS,
    BILL_COLUMNS,
    MONTH_COLUMNS,
)


class FakeWorksheet:
    """The subset of gspread.Worksheet the storage uses."""

    def __init__(self, header):
        self.rows = [list(header)]

    def get_all_values(self):
        return [list(row) for row in self.rows]

    def append_row(self, values, value_input_option=None):
        self.rows.append([str(v) for v in values])

    def update(self, range_name=None, values=None, value_input_option=None):
        idx = int(range_name[1:])
        self.rows[idx - 1] = [str(v) for v in values[0]]

    def delete_rows(self, index):
        del self.rows[index - 1]


class FakeSheetsClient:
    def __init__(self):
        self.months = FakeWorksheet(MONTH_COLUMNS)
        self.bills = FakeWorksheet(BILL_COLUMNS)
        self.audit = FakeWorksheet(AUDIT_COLUMNS)

    def get_months_sheet(self):
        return self.months

    def get_bills_sheet(self):
        return self.bills

    def get_audit_sheet(self):
        return self.audit


def _sheets_storage():
    client = FakeSheetsClient()
    return GoogleSheetsLedgerStorage(client), client


def _memory_storage():
    return InMemoryLedgerStorage(), None


@pytest.fixture(params=[_memory_storage, _sheets_storage], ids=["memory", "sheets"])
def storage(request):
    backend, _ = request.param()
    return backend


class TestLedgerStorageContract:
    """Behaviour both backends share."""

    def test_round_trip(self, storage):
        """Test that a month and its bills come back unchanged."""
        month = Month(
            id="m1",
            date=date(2024, 11, 15),
            notes="notatka",
            bills=(
                Bill(id="b1", name="Prąd", amount=Decimal("250.50"), category_id="electricity"),
                Bill(id="b2", name="Woda", comment="z licznika"),
            ),
        )
        asyncio.run(storage.upsert_month("u1", month))
        for bill in month.bills:
            asyncio.run(storage.upsert_bill("u1", bill, "m1"))

        assert asyncio.run(storage.list_months("u1")) == [month]

    def test_newest_first_and_user_scoped(self, storage):
        asyncio.run(storage.upsert_month("u1", Month(id="old", date=date(2024, 1, 1))))
        asyncio.run(storage.upsert_month("u1", Month(id="new", date=date(2024, 3, 1))))
        asyncio.run(storage.upsert_month("u2", Month(id="other", date=date(2024, 2, 1))))

        assert [m.id for m in asyncio.run(storage.list_months("u1"))] == ["new", "old"]

    def test_upsert_month_updates_in_place(self, storage):
        asyncio.run(storage.upsert_month("u1", Month(id="m1", date=date(2024, 1, 1))))
        asyncio.run(storage.upsert_month("u1", Month(id="m1", date=date(2024, 1, 9), notes="x")))

        months = asyncio.run(storage.list_months("u1"))
        assert len(months) == 1
        assert months[0].date == date(2024, 1, 9)
        assert months[0].notes == "x"

    def test_duplicate_month_key_rejected(self, storage):
        """Test the storage backstop for month-key uniqueness."""
        asyncio.run(storage.upsert_month("u1", Month(id="m1", date=date(2024, 1, 1))))
        with pytest.raises(DuplicateError):
            asyncio.run(storage.upsert_month("u1", Month(id="m2", date=date(2024, 1, 31))))

    def test_same_key_for_other_user_allowed(self, storage):
        asyncio.run(storage.upsert_month("u1", Month(id="m1", date=date(2024, 1, 1))))
        asyncio.run(storage.upsert_month("u2", Month(id="m2", date=date(2024, 1, 1))))
        assert len(asyncio.run(storage.list_months("u2"))) == 1

    def test_bill_requires_owned_month(self, storage):
        asyncio.run(storage.upsert_month("u2", Month(id="m2", date=date(2024, 1, 1))))
        with pytest.raises(NotFoundError):
            asyncio.run(storage.upsert_bill("u1", Bill(name="A"), "m2"))
        with pytest.raises(NotFoundError):
            asyncio.run(storage.upsert_bill("u1", Bill(name="A"), "missing"))

    def test_upsert_bill_updates_in_place(self, storage):
        asyncio.run(storage.upsert_month("u1", Month(id="m1", date=date(2024, 1, 1))))
        asyncio.run(storage.upsert_bill("u1", Bill(id="b1", name="A"), "m1"))
        asyncio.run(storage.upsert_bill("u1", Bill(id="b1", name="A", amount=Decimal("3")), "m1"))

        bills = asyncio.run(storage.list_months("u1"))[0].bills
        assert len(bills) == 1
        assert bills[0].amount == Decimal("3")

    def test_delete_month_cascades(self, storage):
        """Test that deleting a month removes its bills."""
        asyncio.run(storage.upsert_month("u1", Month(id="m1", date=date(2024, 1, 1))))
        asyncio.run(storage.upsert_month("u1", Month(id="m2", date=date(2024, 2, 1))))
        asyncio.run(storage.upsert_bill("u1", Bill(id="b1", name="A"), "m1"))
        asyncio.run(storage.upsert_bill("u1", Bill(id="b2", name="B"), "m2"))

        assert asyncio.run(storage.delete_month("u1", "m1")) is True
        assert asyncio.run(storage.delete_month("u1", "m1")) is False

        months = asyncio.run(storage.list_months("u1"))
        assert [m.id for m in months] == ["m2"]
        assert [b.id for b in months[0].bills] == ["b2"]

    def test_delete_bill(self, storage):
        asyncio.run(storage.upsert_month("u1", Month(id="m1", date=date(2024, 1, 1))))
        asyncio.run(storage.upsert_bill("u1", Bill(id="b1", name="A"), "m1"))

        assert asyncio.run(storage.delete_bill("u2", "b1")) is False
        assert asyncio.run(storage.delete_bill("u1", "b1")) is True
        assert asyncio.run(storage.delete_bill("u1", "b1")) is False


class TestGoogleSheetsRows:
    """Row layout of the Google Sheets backend."""

    def test_month_and_bill_rows(self):
        storage, client = _sheets_storage()
        asyncio.run(storage.upsert_month("u1", Month(id="m1", date=date(2024, 11, 15))))
        asyncio.run(storage.upsert_bill("u1", Bill(id="b1", name="Prąd", amount=Decimal("12.50")), "m1"))

        month_row = client.months.rows[1]
        assert month_row[:4] == ["m1", "u1", "2024-11-15", ""]
        bill_row = client.bills.rows[1]
        assert bill_row[:7] == ["b1", "m1", "u1", "Prąd", "12.50", "", ""]

    def test_malformed_rows_are_skipped(self):
        """Test that hand-edited garbage rows do not break loading."""
        storage, client = _sheets_storage()
        asyncio.run(storage.upsert_month("u1", Month(id="m1", date=date(2024, 11, 15))))
        client.months.rows.append(["m2", "u1", "not a date", "", ""])
        client.bills.rows.append(["b9", "m1", "u1", "Gaz", "dużo", "", "", ""])

        months = asyncio.run(storage.list_months("u1"))
        assert [m.id for m in months] == ["m1"]
        assert months[0].bills == ()

    def test_malformed_month_row_does_not_block_writes(self):
        """Test that a hand-edited date never stops later month saves."""
        storage, client = _sheets_storage()
        client.months.rows.append(["m2", "u1", "not a date", "", ""])

        assert asyncio.run(storage.list_months("u1")) == []
        asyncio.run(storage.upsert_month("u1", Month(id="m1", date=date(2024, 11, 15))))

        assert [m.id for m in asyncio.run(storage.list_months("u1"))] == ["m1"]


class TestAuditStorage:
    """Tests for audit storage backends."""

    def test_memory_by_correlation_id(self):
        storage = InMemoryAuditStorage()
        correlation_id = uuid4()
        asyncio.run(storage.append_event(AuditEventBuilder.import_started("csv", 10, correlation_id)))
        asyncio.run(storage.append_event(AuditEventBuilder.import_started("csv", 10, uuid4())))

        events = asyncio.run(storage.get_events_by_correlation_id(correlation_id))
        assert len(events) == 1

    def test_sheets_round_trip(self):
        """Test that events written as rows can be read back."""
        client = FakeSheetsClient()
        storage = GoogleSheetsAuditStorage(client)
        correlation_id = uuid4()
        event = AuditEventBuilder.import_completed("json", 1, 2, 3, correlation_id)

        assert asyncio.run(storage.append_event(event)) is True
        events = asyncio.run(storage.get_events_by_correlation_id(correlation_id))

        assert len(events) == 1
        assert events[0].event_id == event.event_id
        assert events[0].details == event.details
        assert events[0].is_user_action is False


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
