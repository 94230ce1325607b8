# tests/test_validation.py
"""Tests for the validate-then-convert flow backed by jsonschema."""

import pytest

from simpleschema import InvalidInputError, Record, from_json, validate
from simpleschema.validation import iter_issues

from providers import Money

SCHEMA = {
    "name": ("string", {"min_length": 1}),
    "email": ("string", {"format": "email", "optional": True}),
    "age": ("integer", {"optional": True, "nullable": True, "minimum": 0}),
    "tags": (["string"], {"min_items": 1}),
    "price": (Money, {"optional": True}),
}


class TestValidate:

    def test_valid_value_passes(self):
        validate(SCHEMA, {"name": "Ada", "tags": ["x"], "age": None})

    def test_missing_required_field(self):
        with pytest.raises(InvalidInputError) as excinfo:
            validate(SCHEMA, {"name": "Ada"})
        assert "tags" in str(excinfo.value)

    def test_issues_carry_paths(self):
        issues = iter_issues(SCHEMA, {"name": "Ada", "tags": [1], "age": -1})
        assert [issue.path for issue in issues] == [("age",), ("tags", 0)]

    def test_additional_properties_rejected(self):
        with pytest.raises(InvalidInputError):
            validate({"a": "string"}, {"a": "x", "z": 1})

    def test_email_format_checked(self):
        with pytest.raises(InvalidInputError):
            validate(SCHEMA, {"name": "Ada", "tags": ["x"], "email": "not-an-address"})

    def test_min_items_enforced(self):
        with pytest.raises(InvalidInputError):
            validate((["integer"], {"min_items": 1}), [])

    def test_provider_schema_enforced(self):
        with pytest.raises(InvalidInputError):
            validate(SCHEMA, {"name": "Ada", "tags": ["x"], "price": {"amount": 1, "currency": "GBP"}})


class TestFromJson:

    def test_validates_and_converts(self):
        result = from_json(SCHEMA, {
            "name": "Ada",
            "tags": ["math"],
            "price": {"amount": 250, "currency": "USD"},
        })
        assert isinstance(result, Record)
        assert result == {"name": "Ada", "tags": ["math"], "price": (250, "USD")}

    def test_invalid_input_never_reaches_conversion(self):
        with pytest.raises(InvalidInputError):
            from_json(SCHEMA, {"name": "", "tags": ["x"]})
