"""Tests for amount and date parsing."""

import pytest
from datetime import date
from decimal import Decimal

from billbook.parsing import parse_amount, parse_date, parse_legacy_amount


class TestParseAmount:
    """Tests for the strict amount parser."""

    def test_decimal_comma(self):
        """Test that a comma is read as the decimal separator."""
        assert parse_amount("1234,56") == Decimal("1234.56")

    def test_decimal_point(self):
        """Test that a dot is read as the decimal separator."""
        assert parse_amount("1234.56") == Decimal("1234.56")

    def test_surrounding_whitespace(self):
        """Test that input is trimmed."""
        assert parse_amount("  99,9 ") == Decimal("99.9")

    @pytest.mark.parametrize("raw", ["", "   ", "-", " - "])
    def test_no_amount_sentinels(self, raw):
        """Test that empty input and '-' mean no amount."""
        assert parse_amount(raw) is None

    @pytest.mark.parametrize("raw", ["abc", "12zł", "1.234,56", "1 000", "NaN", "Infinity", "-5", "1_000"])
    def test_garbage_is_none(self, raw):
        """Test that unreadable input degrades to None."""
        assert parse_amount(raw) is None

    @pytest.mark.parametrize("raw", [None, 12, 1.5, object()])
    def test_non_strings_never_raise(self, raw):
        """Test totality for non-string input."""
        assert parse_amount(raw) is None

    @pytest.mark.parametrize("raw", ["1e400", "1E15", "1000000000000000"])
    def test_oversized_amounts_are_none(self, raw):
        """Test that amounts too large to export are rejected."""
        assert parse_amount(raw) is None

    def test_long_fraction_is_kept(self):
        """Test that precision is not truncated."""
        assert parse_amount("0.12345678901234567891") == Decimal("0.12345678901234567891")
        assert parse_amount("999999999999999,99") == Decimal("999999999999999.99")

    def test_zero_is_a_value(self):
        """Test that zero is distinct from no amount."""
        assert parse_amount("0") == Decimal("0")


class TestParseLegacyAmount:
    """Tests for the permissive legacy amount parser."""

    def test_decimal_comma(self):
        """Test that '250,00' is two hundred fifty."""
        assert parse_legacy_amount(" 250,00") == Decimal("250.00")

    def test_leading_comma_dropped(self):
        """Test the ',120' shape written by old exports."""
        assert parse_legacy_amount(",120") == Decimal("120")

    def test_thousands_separator(self):
        """Test that a comma before three digits groups thousands."""
        assert parse_legacy_amount("1,234") == Decimal("1234")
        assert parse_legacy_amount("1,234.50") == Decimal("1234.50")

    def test_trailing_text_ignored(self):
        """Test that only the numeric prefix counts, like parseFloat."""
        assert parse_legacy_amount("120 zł") == Decimal("120")

    def test_oversized_is_none(self):
        """Test that exponent notation cannot produce huge amounts."""
        assert parse_legacy_amount("1e400 zł") is None

    @pytest.mark.parametrize("raw", ["", ",", "-", "abc", None])
    def test_unreadable_is_none(self, raw):
        """Test that unreadable input degrades to None."""
        assert parse_legacy_amount(raw) is None


class TestParseDate:
    """Tests for the three supported date layouts."""

    def test_all_layouts_agree(self):
        """Test that ISO, Polish and British layouts give the same day."""
        expected = date(2024, 11, 1)
        assert parse_date("2024-11-01") == expected
        assert parse_date("01.11.2024") == expected
        assert parse_date("01/11/2024") == expected

    def test_whitespace_trimmed(self):
        """Test that surrounding whitespace is ignored."""
        assert parse_date(" 15.11.2024 ") == date(2024, 11, 15)

    @pytest.mark.parametrize("raw", ["2024-13-01", "31.02.2024", "99.99.9999", "00/01/2024"])
    def test_impossible_dates(self, raw):
        """Test that calendar-invalid dates are rejected."""
        assert parse_date(raw) is None

    @pytest.mark.parametrize("raw", ["", "2024/11/01", "1.11.2024", "2024-11-01T00:00:00", "Data", None])
    def test_unsupported_layouts(self, raw):
        """Test that other layouts are rejected."""
        assert parse_date(raw) is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
