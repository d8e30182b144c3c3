"""Tests for the JSON backup codec."""

import json

import pytest
from datetime import date
from decimal import Decimal

from billbook.codecs import FormatError, decode_json, encode_json
from billbook.models import Bill, Month


@pytest.fixture
def ledger():
    """Two months with every optional field exercised."""
    return [
        Month(
            id="m-nov",
            date=date(2024, 11, 15),
            notes="Zapłacone przelewem",
            bills=(
                Bill(id="b1", name="Prąd", amount=Decimal("250.00"), category_id="electricity"),
                Bill(id="b2", name="Woda", amount=Decimal("120.5"), comment="z wyrównaniem"),
                Bill(id="b3", name="Gaz"),
            ),
        ),
        Month(id="m-dec", date=date(2024, 12, 1)),
    ]


class TestEncodeJson:
    """Tests for JSON export."""

    def test_wire_shape(self, ledger):
        """Test field names, date format and optional-field omission."""
        data = json.loads(encode_json(ledger))
        first = data[0]
        assert first["id"] == "m-nov"
        assert first["date"] == "2024-11-15T00:00:00+00:00"
        assert first["notes"] == "Zapłacone przelewem"
        assert first["bills"][0] == {
            "id": "b1",
            "name": "Prąd",
            "amount": 250.0,
            "categoryId": "electricity",
        }
        assert first["bills"][2]["amount"] is None
        assert "notes" not in data[1]
        assert data[1]["bills"] == []

    def test_non_ascii_kept(self, ledger):
        """Test that Polish characters are written as-is."""
        assert "Prąd" in encode_json(ledger)

    def test_empty_ledger(self):
        """Test that an empty ledger is an empty array."""
        assert json.loads(encode_json([])) == []


class TestDecodeJson:
    """Tests for JSON import."""

    def test_round_trip(self, ledger):
        """Test that decode(encode(x)) == x."""
        assert decode_json(encode_json(ledger)) == ledger

    def test_round_trip_preserves_order(self, ledger):
        """Test that month and bill order survive."""
        restored = decode_json(encode_json(ledger))
        assert [m.id for m in restored] == ["m-nov", "m-dec"]
        assert [b.name for b in restored[0].bills] == ["Prąd", "Woda", "Gaz"]

    def test_long_amounts_survive_round_trip(self):
        """Test that amounts a float cannot hold are kept digit for digit."""
        months = [Month(id="m", date=date(2024, 1, 1), bills=(
            Bill(id="b1", name="A", amount=Decimal("0.12345678901234567891")),
            Bill(id="b2", name="B", amount=Decimal("123456789012345.67")),
        ))]

        content = encode_json(months)

        assert json.loads(content)[0]["bills"][0]["amount"] == "0.12345678901234567891"
        assert decode_json(content) == months
        assert decode_json(content)[0].bills[0].amount == Decimal("0.12345678901234567891")

    def test_amounts_are_exact_decimals(self):
        """Test that amounts are decoded without float noise."""
        months = decode_json('[{"id": "m", "date": "2024-01-01", "bills": [{"id": "b", "name": "A", "amount": 0.1}]}]')
        assert months[0].bills[0].amount == Decimal("0.1")

    def test_missing_bills_defaults_to_empty(self):
        """Test lenient decoding of a month without a bills field."""
        months = decode_json('[{"id": "m", "date": "2024-03-01T00:00:00.000Z"}]')
        assert months[0].bills == ()
        assert months[0].date == date(2024, 3, 1)

    def test_local_midnight_timestamp(self):
        """Test that older exports written from UTC+1 keep their month."""
        months = decode_json('[{"id": "m", "date": "2024-10-31T23:00:00.000Z", "bills": []}]')
        assert months[0].key == date(2024, 11, 1)

    @pytest.mark.parametrize("content", ['{"id": "m"}', '"text"', "42", "null"])
    def test_top_level_must_be_list(self, content):
        """Test that a non-array document is rejected."""
        with pytest.raises(FormatError):
            decode_json(content)

    def test_invalid_json(self):
        """Test that malformed JSON is rejected."""
        with pytest.raises(FormatError):
            decode_json("[{")

    def test_invalid_element_rejects_whole_file(self):
        """Test all-or-nothing behaviour on a bad element."""
        content = '[{"id": "ok", "date": "2024-01-01"}, {"id": "bad", "date": "not a date"}]'
        with pytest.raises(FormatError, match="#2"):
            decode_json(content)

    def test_non_object_element(self):
        """Test that array elements must be objects."""
        with pytest.raises(FormatError):
            decode_json('[1, 2]')

    def test_format_error_is_value_error(self):
        """Test that callers catching ValueError still work."""
        with pytest.raises(ValueError):
            decode_json("{}")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
