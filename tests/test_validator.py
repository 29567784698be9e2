"""Tests for scanned payload validation."""

import json
import sys
from datetime import date

import pytest

from freshtrack.errors import ParseError
from freshtrack.scan import Category, ScannedItem, validate
from freshtrack.scan.models import NOT_AN_OBJECT_LABEL, UNKNOWN_ITEM_LABEL


def _item(**overrides):
    item = {
        "item_name": "Milk",
        "expiry_date": "2025-01-13",
        "purchase_date": "2025-01-09",
        "category": "Dairy",
    }
    item.update(overrides)
    return item


class TestParseErrors:
    @pytest.mark.parametrize("raw", ["", "   ", "\n\t"])
    def test_empty_payload(self, raw):
        with pytest.raises(ParseError, match="empty"):
            validate(raw)

    def test_not_a_string(self):
        with pytest.raises(ParseError):
            validate(None)  # type: ignore[arg-type]

    def test_malformed_json(self):
        with pytest.raises(ParseError, match="valid JSON"):
            validate('{"item_name": "Milk",')

    def test_parse_error_is_value_error(self):
        with pytest.raises(ValueError):
            validate("not json")

    @pytest.mark.skipif(
        not hasattr(sys, "get_int_max_str_digits"),
        reason="integer string conversion limit not available",
    )
    def test_oversized_integer(self):
        raw = '{"item_name": "Milk", "qty": ' + "9" * 5000 + "}"
        with pytest.raises(ParseError, match="valid JSON"):
            validate(raw)

    def test_deeply_nested_arrays(self):
        with pytest.raises(ParseError, match="valid JSON"):
            validate("[" * 100000 + "]" * 100000)


class TestValidItems:
    def test_single_object(self):
        result = validate(json.dumps(_item()))
        assert len(result.valid) == 1
        assert result.errors == []
        assert result.valid[0] == ScannedItem(
            item_name="Milk",
            category=Category.DAIRY,
            purchase_date=date(2025, 1, 9),
            expiry_date=date(2025, 1, 13),
        )

    def test_single_object_in_array(self):
        result = validate(json.dumps([_item()]))
        assert len(result.valid) == 1
        assert not result.has_errors

    def test_preserves_order(self):
        names = ["Milk", "Eggs", "Bread"]
        result = validate(json.dumps([_item(item_name=n) for n in names]))
        assert [i.item_name for i in result.valid] == names

    def test_extra_fields_ignored(self):
        result = validate(json.dumps(_item(brand="Acme", quantity=2)))
        assert len(result.valid) == 1
        assert result.errors == []

    def test_category_case_insensitive(self):
        result = validate(json.dumps(_item(category="produce")))
        assert result.valid[0].category is Category.PRODUCE

    def test_unknown_category_becomes_other(self):
        result = validate(json.dumps(_item(category="Snacks")))
        assert result.valid[0].category is Category.OTHER

    def test_timestamp_dates_use_date_part(self):
        result = validate(json.dumps(_item(expiry_date="2025-01-13T23:00:00Z")))
        assert result.valid[0].expiry_date == date(2025, 1, 13)

    def test_space_separated_timestamp_uses_date_part(self):
        result = validate(json.dumps(_item(purchase_date="2025-01-09 08:00:00")))
        assert result.valid[0].purchase_date == date(2025, 1, 9)

    def test_empty_array(self):
        result = validate("[]")
        assert result.valid == []
        assert result.errors == []
        assert not result


class TestInvalidItems:
    def test_non_object_entry(self):
        result = validate(json.dumps([_item(), 42, "text", None]))
        assert len(result.valid) == 1
        assert len(result.errors) == 3
        assert all(e.item_label == NOT_AN_OBJECT_LABEL for e in result.errors)

    def test_scalar_payload_is_one_bad_entry(self):
        result = validate("42")
        assert result.valid == []
        assert [e.item_label for e in result.errors] == [NOT_AN_OBJECT_LABEL]

    @pytest.mark.parametrize(
        "field", ["item_name", "expiry_date", "purchase_date", "category"]
    )
    def test_single_missing_field(self, field):
        item = _item()
        del item[field]
        result = validate(json.dumps(item))
        assert result.valid == []
        assert result.errors[0].missing_fields == [field]
        assert result.errors[0].invalid_fields == []

    def test_missing_fields_in_fixed_order(self):
        result = validate(json.dumps({"category": "Dairy", "item_name": "Bad"}))
        assert result.errors[0].missing_fields == ["expiry_date", "purchase_date"]

    def test_label_falls_back_to_unknown_item(self):
        result = validate(json.dumps({"category": "Dairy"}))
        error = result.errors[0]
        assert error.item_label == UNKNOWN_ITEM_LABEL
        assert error.missing_fields == ["item_name", "expiry_date", "purchase_date"]

    @pytest.mark.parametrize("value", ["", "   ", None, 0, False])
    def test_blank_or_falsy_counts_as_missing(self, value):
        result = validate(json.dumps(_item(category=value)))
        assert result.errors[0].missing_fields == ["category"]

    def test_unparseable_date_is_invalid_not_missing(self):
        result = validate(json.dumps(_item(expiry_date="next tuesday")))
        error = result.errors[0]
        assert error.item_label == "Milk"
        assert error.missing_fields == []
        assert error.invalid_fields == ["expiry_date"]

    def test_non_string_name_is_invalid(self):
        result = validate(json.dumps(_item(item_name=123)))
        error = result.errors[0]
        assert error.item_label == "123"
        assert error.invalid_fields == ["item_name"]

    def test_mixed_batch_keeps_valid_items(self):
        payload = [
            _item(item_name="Milk"),
            {"item_name": "Bad"},
            "oops",
            _item(item_name="Eggs"),
            _item(item_name="Stale", purchase_date="yesterday"),
        ]
        result = validate(json.dumps(payload))
        assert [i.item_name for i in result.valid] == ["Milk", "Eggs"]
        assert [e.item_label for e in result.errors] == [
            "Bad",
            NOT_AN_OBJECT_LABEL,
            "Stale",
        ]

    def test_summary_lines(self):
        result = validate(json.dumps([{"item_name": "Bad"}, 1]))
        assert result.summary() == (
            "- Bad is missing: expiry_date, purchase_date, category\n"
            f"- {NOT_AN_OBJECT_LABEL}"
        )
