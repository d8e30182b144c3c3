"""Tests for settings, localization and the audit logger."""

import asyncio

import pytest
from datetime import date
from decimal import Decimal
from uuid import uuid4

from pydantic import ValidationError

from billbook.audit import AuditLogger, create_correlation_id
from billbook.config import AppSettings, GoogleSheetsSettings, get_settings, validate_all_settings
from billbook.i18n import Localizer, get_localizer
from billbook.models import AuditEventBuilder, AuditEventType
from billbook.services.storage import AuditStorageInterface, InMemoryAuditStorage


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestSettings:
    """Tests for pydantic-settings configuration."""

    def test_app_defaults(self, monkeypatch):
        monkeypatch.delenv("LOCALE", raising=False)
        settings = AppSettings(_env_file=None)
        assert settings.locale == "pl-PL"
        assert settings.legacy_marker == "Rachunki"
        assert settings.report_months_per_page == 3
        assert settings.max_import_size_bytes == 5 * 1024 * 1024

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("LOCALE", "en-GB")
        monkeypatch.setenv("LEGACY_MARKER", "Bills")
        settings = AppSettings(_env_file=None)
        assert settings.locale == "en-GB"
        assert settings.legacy_marker == "Bills"

    def test_unsupported_locale(self):
        with pytest.raises(ValidationError):
            AppSettings(_env_file=None, locale="de-DE")

    def test_google_sheets_prefix(self, monkeypatch, tmp_path):
        credentials = tmp_path / "sa.json"
        credentials.write_text("{}", encoding="utf-8")
        monkeypatch.setenv("GOOGLE_SHEETS_CREDENTIALS_PATH", str(credentials))
        monkeypatch.setenv("GOOGLE_SHEETS_SPREADSHEET_ID", "sheet-123")
        settings = GoogleSheetsSettings(_env_file=None)
        assert settings.spreadsheet_id == "sheet-123"
        assert settings.months_sheet_name == "Months"
        assert settings.bills_sheet_name == "Bills"

    def test_validate_all_settings_reports_missing_sheets(self, monkeypatch, tmp_path):
        monkeypatch.delenv("GOOGLE_SHEETS_CREDENTIALS_PATH", raising=False)
        monkeypatch.delenv("GOOGLE_SHEETS_SPREADSHEET_ID", raising=False)
        monkeypatch.chdir(tmp_path)
        results = validate_all_settings()
        assert results["google_sheets"] is False
        assert "google_sheets_error" in results


class TestLocalizer:
    """Tests for message lookup and formatting."""

    def test_lookup(self):
        assert Localizer("pl-PL").t("export.headers.billName") == "Nazwa Rachunku"
        assert Localizer("en-GB")("export.headers.billName") == "Bill name"

    def test_unknown_locale_falls_back_to_polish(self):
        assert Localizer("fr-FR").locale == "pl-PL"

    def test_missing_key_falls_back_to_last_segment(self):
        assert Localizer("en-GB").t("report.somethingNew") == "somethingNew"

    def test_placeholders(self):
        assert Localizer("en-GB").t("report.page", current=1, total=4) == "Page 1 of 4"

    def test_formatting(self):
        pl = Localizer("pl-PL")
        assert pl.format_date(date(2024, 3, 7)) == "07.03.2024"
        assert pl.month_name(date(2024, 3, 7)) == "Marzec"
        assert pl.format_money(Decimal("12.5")) == "12.50 zł"
        assert pl.format_money(None) == "-"
        assert Localizer("en-GB").format_date(date(2024, 3, 7)) == "07/03/2024"

    def test_get_localizer_explicit(self):
        assert get_localizer("en-GB").locale == "en-GB"


class _BrokenAuditStorage(AuditStorageInterface):
    async def append_event(self, event):
        raise RuntimeError("sheet unavailable")

    async def get_events_by_correlation_id(self, correlation_id):
        return []


class TestAuditLogger:
    """Tests for the audit logger."""

    def test_persists_events(self):
        storage = InMemoryAuditStorage()
        logger = AuditLogger(storage)
        correlation_id = create_correlation_id()

        asyncio.run(logger.log_import_started("csv", 120, correlation_id))
        asyncio.run(logger.log_import_completed("csv", 1, 0, 3, correlation_id))

        events = asyncio.run(storage.get_events_by_correlation_id(correlation_id))
        assert [e.event_type for e in events] == [
            AuditEventType.IMPORT_STARTED,
            AuditEventType.IMPORT_COMPLETED,
        ]

    def test_local_only(self):
        """Test that logging without storage still succeeds."""
        assert asyncio.run(AuditLogger().log(AuditEventBuilder.month_deleted("m1", None))) is True

    def test_storage_failure_is_not_raised(self):
        """Test that a broken audit sink never breaks the caller."""
        logger = AuditLogger(_BrokenAuditStorage())
        event = AuditEventBuilder.import_failed("json", "bad", uuid4())
        assert asyncio.run(logger.log(event)) is False


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
