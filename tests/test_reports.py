"""Tests for the report projection and its Markdown rendering."""

import pytest
from datetime import date, datetime
from decimal import Decimal

from billbook.i18n import Localizer
from billbook.models import Bill, Month, UserCategory
from billbook.reports import build_report, render_report_markdown

GENERATED = datetime(2025, 1, 2, 9, 30)


@pytest.fixture
def months():
    # deliberately out of order
    return [
        Month(date=date(2024, 12, 10), bills=(
            Bill(name="Prąd", amount=Decimal("200"), category_id="electricity"),
            Bill(name="Kot", amount=Decimal("50"), category_id="pets", comment="karma"),
        )),
        Month(date=date(2024, 10, 10), notes="Po remoncie"),
        Month(date=date(2024, 11, 10), bills=(Bill(name="Woda"),)),
    ]


def _report(months, **kwargs):
    kwargs.setdefault("localizer", Localizer("pl-PL"))
    kwargs.setdefault("generated_at", GENERATED)
    kwargs.setdefault("months_per_page", 3)
    return build_report(months, **kwargs)


class TestBuildReport:
    """Tests for build_report."""

    def test_sections_oldest_first(self, months):
        doc = _report(months)
        assert [s.heading for s in doc.sections] == [
            "Październik 2024",
            "Listopad 2024",
            "Grudzień 2024",
        ]

    def test_title_and_generated_line(self, months):
        doc = _report(months)
        assert doc.title == "Raport Rachunków"
        assert doc.generated_line == "Wygenerowano: 02.01.2025 09:30"
        assert _report(months, title="Dom").title == "Dom"

    def test_bill_rows(self, months):
        """Test amount formatting and category fallbacks."""
        rows = _report(months).sections[2].rows
        assert rows[0].amount == "200.00 zł"
        assert rows[0].category == "Prąd"
        # unknown category ids degrade instead of failing
        assert rows[1].category == "Bez kategorii"
        assert rows[1].comment == "karma"

    def test_missing_amount_and_category(self, months):
        row = _report(months).sections[1].rows[0]
        assert row.amount == "-"
        assert row.category == "-"

    def test_user_categories(self, months):
        pets = UserCategory(id="pets", color="#aa5500", icon="🐈", user_id="u1", name="Zwierzęta")
        rows = _report(months, user_categories=[pets]).sections[2].rows
        assert rows[1].category == "Zwierzęta"

    def test_month_totals(self, months):
        doc = _report(months)
        assert [s.total for s in doc.sections] == [Decimal("0"), Decimal("0"), Decimal("250")]
        assert doc.sections[2].total_text == "250.00 zł"
        assert doc.sections[0].notes == "Po remoncie"

    def test_summary(self, months):
        """Test grand total, average and counts."""
        summary = _report(months).summary
        assert summary is not None
        assert [r.bill_count for r in summary.rows] == [0, 1, 2]
        assert summary.bill_count == 3
        assert summary.total == Decimal("250")
        assert summary.average == Decimal("83.33")
        assert summary.months_count_text == "3 miesięcy"

    def test_no_summary_for_single_month(self, months):
        doc = _report(months[:1])
        assert doc.summary is None
        assert len(doc.pages) == 1

    def test_pagination_and_footers(self, months):
        """Test sections per page, summary page and page X of Y footers."""
        doc = _report(months, months_per_page=2)
        assert [len(p.sections) for p in doc.pages] == [2, 1, 0]
        assert doc.pages[-1].summary is not None
        assert [p.footer for p in doc.pages] == [
            "Strona 1 z 3",
            "Strona 2 z 3",
            "Strona 3 z 3",
        ]

    def test_empty_ledger(self):
        doc = _report([])
        assert len(doc.pages) == 1
        assert doc.sections == []
        assert doc.summary is None

    def test_english(self, months):
        doc = _report(months, localizer=Localizer("en-GB"))
        assert doc.sections[0].heading == "October 2024"
        assert doc.sections[0].payment_date == "10/10/2024"
        assert doc.summary.total_text == "250.00 PLN"
        assert doc.pages[-1].footer == "Page 2 of 2"


class TestRenderMarkdown:
    """Tests for render_report_markdown."""

    def test_structure(self, months):
        text = render_report_markdown(_report(months))
        lines = text.split("\n")
        assert lines[0] == "# Raport Rachunków"
        assert "## Październik 2024" in lines
        assert "## Podsumowanie" in lines
        assert "| _Brak rachunków_ | | | |" in lines
        assert "| Prąd | 200.00 zł | Prąd |  |" in lines
        assert "**Suma miesiąca:** 250.00 zł" in lines
        assert "Po remoncie" in lines
        assert "<sub>Strona 2 z 2</sub>" in lines

    def test_pipes_are_escaped(self):
        month = Month(date=date(2024, 1, 1), bills=(Bill(name="A|B"),))
        text = render_report_markdown(_report([month]))
        assert "| A\\|B |" in text


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
