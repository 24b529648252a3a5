"""
Unit tests for Flag and its value models.
"""

import pytest

from zenmanage.flag import Flag
from zenmanage.models import FlagTarget, FlagType, TypedValue, ValueEnvelope, parse_float, stringify


def flag_with(value_entries, flag_type="boolean"):
    return Flag(
        version="v1",
        type=FlagType(flag_type),
        key="test-flag",
        name="Test Flag",
        target=FlagTarget(value=ValueEnvelope(value=TypedValue(tuple(value_entries.items()))))
    )


class TestFlag:
    """Test cases for Flag."""

    @pytest.fixture
    def flag_data(self, rules_factory):
        """Flag in wire format."""
        return rules_factory.flag(
            "new-checkout",
            False,
            rules=[
                {
                    "version": "rule-v1",
                    "description": "Beta testers",
                    "position": 0,
                    "clauses": [{"attribute": "beta", "operator": "equals", "value": "true"}],
                    "value": {"value": {"boolean": True}}
                }
            ]
        )

    def test_from_dict(self, flag_data):
        """Test flag parsing."""
        flag = Flag.from_dict(flag_data)

        assert flag.key == "new-checkout"
        assert flag.name == "New Checkout"
        assert flag.version == "new-checkout-v1"
        assert flag.type == FlagType.BOOLEAN
        assert flag.target.version == "new-checkout-target-v1"
        assert flag.target.published_at == "2024-01-01T00:00:00Z"
        assert flag.target.expired_at is None
        assert len(flag.rules) == 1
        assert flag.is_enabled() is False

    def test_from_dict_without_rules(self, rules_factory):
        """Test a missing rules list parses as empty."""
        flag = Flag.from_dict(rules_factory.flag("banner", "hello"))

        assert flag.rules == []

    def test_from_dict_missing_field(self, flag_data):
        """Test required fields are enforced."""
        del flag_data["key"]

        with pytest.raises(KeyError):
            Flag.from_dict(flag_data)

    def test_to_dict_round_trip(self, flag_data):
        """Test serialization reproduces the wire format."""
        flag = Flag.from_dict(flag_data)

        assert Flag.from_dict(flag.to_dict()) == flag

    def test_with_target_value_keeps_metadata(self, flag_data):
        """Test replacing the value leaves the original flag untouched."""
        flag = Flag.from_dict(flag_data)

        updated = flag.with_target_value(ValueEnvelope.of(True))

        assert updated.is_enabled() is True
        assert updated.target.version == flag.target.version
        assert updated.target.published_at == flag.target.published_at
        assert flag.is_enabled() is False

    def test_from_default_boolean(self):
        """Test synthesized boolean flag."""
        flag = Flag.from_default("dark-mode", True)

        assert flag.type == FlagType.BOOLEAN
        assert flag.key == "dark-mode"
        assert flag.name == "dark-mode"
        assert flag.version == "1"
        assert flag.rules == []
        assert flag.is_enabled() is True
        assert flag.value is True

    def test_from_default_number_and_string(self):
        """Test synthesized number and string flags."""
        number = Flag.from_default("limit", 42)
        text = Flag.from_default("theme", "dark")

        assert number.type == FlagType.NUMBER
        assert number.as_number() == 42
        assert text.type == FlagType.STRING
        assert text.as_string() == "dark"

    def test_is_enabled_only_for_boolean_flags(self):
        """Test non-boolean flags are never enabled."""
        assert flag_with({"string": "true"}, "string").is_enabled() is False
        assert flag_with({"number": 1}, "number").is_enabled() is False

    def test_is_enabled_boolean_flag_without_boolean_value(self):
        """Test a boolean flag falls back through as_bool."""
        assert flag_with({"number": 1}).is_enabled() is True
        assert flag_with({}).is_enabled() is False

    @pytest.mark.parametrize("entries,expected", [
        ({"boolean": True}, True),
        ({"boolean": False}, False),
        ({"number": 0}, False),
        ({"number": 2.5}, True),
        ({"string": ""}, False),
        ({"string": "no"}, True),
        ({}, False),
    ])
    def test_as_bool(self, entries, expected):
        """Test boolean conversion."""
        assert flag_with(entries).as_bool() is expected

    def test_as_bool_nan(self):
        """Test NaN converts to False."""
        assert flag_with({"number": float("nan")}).as_bool() is False

    @pytest.mark.parametrize("entries,expected", [
        ({"string": "hello"}, "hello"),
        ({"boolean": True}, "true"),
        ({"boolean": False}, "false"),
        ({"number": 42}, "42"),
        ({"number": 42.0}, "42"),
        ({"number": 3.14}, "3.14"),
        ({}, ""),
    ])
    def test_as_string(self, entries, expected):
        """Test string conversion."""
        assert flag_with(entries).as_string() == expected

    @pytest.mark.parametrize("entries,expected", [
        ({"number": 42}, 42),
        ({"number": 3.5}, 3.5),
        ({"string": "12.5"}, 12.5),
        ({"string": "7 days"}, 7),
        ({"string": "abc"}, 0),
        ({"boolean": True}, 1),
        ({"boolean": False}, 0),
        ({}, 0),
    ])
    def test_as_number(self, entries, expected):
        """Test number conversion."""
        assert flag_with(entries).as_number() == expected

    def test_accessor_preference_order(self):
        """Test each accessor prefers its own type when several are present."""
        flag = flag_with({"string": "on", "boolean": False, "number": 5})

        assert flag.as_bool() is False
        assert flag.as_string() == "on"
        assert flag.as_number() == 5
        assert flag.value is False

    def test_value_empty(self):
        """Test the raw value of an empty flag is an empty string."""
        assert flag_with({}).value == ""


class TestValueHelpers:
    """Test cases for value conversion helpers."""

    @pytest.mark.parametrize("text,expected", [
        ("42", 42.0),
        ("  -3.5", -3.5),
        ("1e3", 1000.0),
        ("12abc", 12.0),
        (".5", 0.5),
        ("Infinity", float("inf")),
        ("abc", None),
        ("", None),
        (True, None),
        (7, 7.0),
    ])
    def test_parse_float(self, text, expected):
        """Test leading number parsing."""
        assert parse_float(text) == expected

    @pytest.mark.parametrize("value,expected", [
        (None, ""),
        (True, "true"),
        (1.0, "1"),
        (1.25, "1.25"),
        (float("inf"), "Infinity"),
        ("text", "text"),
    ])
    def test_stringify(self, value, expected):
        """Test wire value rendering."""
        assert stringify(value) == expected

    def test_typed_value_kind(self):
        """Test primary kind detection."""
        assert TypedValue.of(True).kind == "boolean"
        assert TypedValue.of(3).kind == "number"
        assert TypedValue.of("x").kind == "string"
        assert TypedValue().kind is None

    def test_typed_value_unknown_kind(self):
        """Test unknown kinds survive and are used as a last resort."""
        value = TypedValue.from_dict({"json": {"a": 1}})

        assert value.kind == "json"
        assert value.to_dict() == {"json": {"a": 1}}
