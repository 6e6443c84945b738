"""Tests for the canonical value model."""

import math
import sys
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from dynamic_json.types import DynamicJSONError, ErrorType, ValueKind
from dynamic_json.values import (
    ABSENT,
    JsonArray,
    JsonObject,
    ObjectBuilder,
    Timestamp,
    equal,
    format_timestamp,
    kind_of,
    normalize,
    to_native,
)


class TestJsonObject:
    """Tests for JsonObject class."""

    def test_lookup_ignores_case(self):
        """Test that keys are found regardless of case."""
        obj = JsonObject({"UserName": "alice"})

        assert obj["username"] == "alice"
        assert obj.get("USERNAME") == "alice"
        assert "userNAME" in obj

    def test_first_spelling_kept_last_value_wins(self):
        """Test that a later key with the same folded name replaces the value only."""
        obj = JsonObject([("Name", "Alice"), ("NAME", "Bob")])

        assert list(obj) == ["Name"]
        assert obj["name"] == "Bob"
        assert len(obj) == 1

    def test_missing_key(self):
        """Test missing key behavior."""
        obj = JsonObject(a=1)

        assert obj.get("b") is None
        assert obj.get("b", ABSENT) is ABSENT
        assert obj.key_for("b") is None
        with pytest.raises(KeyError):
            obj["b"]

    def test_set_returns_new_object(self):
        """Test that set leaves the receiver untouched."""
        original = JsonObject(a=1)
        changed = original.set("b", 2)

        assert "b" not in original
        assert changed["b"] == 2
        assert changed["a"] == 1

    def test_remove(self):
        """Test remove with present and missing keys."""
        obj = JsonObject(a=1, b=2)

        assert list(obj.remove("A")) == ["b"]
        assert obj.remove("zzz") is obj
        assert len(obj) == 2

    def test_nested_values_are_normalized(self):
        """Test that nested dicts and lists become canonical containers."""
        obj = JsonObject({"a": {"b": [1, {"c": 2}]}})

        assert isinstance(obj["a"], JsonObject)
        assert isinstance(obj["a"]["b"], JsonArray)
        assert isinstance(obj["a"]["b"][1], JsonObject)

    def test_equality_with_dict(self):
        """Test comparison against plain mappings."""
        assert JsonObject({"a": 1, "b": [1, 2]}) == {"B": [1, 2], "A": 1}
        assert JsonObject({"a": 1}) != {"a": 2}

    def test_unhashable(self):
        """Test that objects cannot be hashed."""
        with pytest.raises(TypeError):
            hash(JsonObject())

    def test_to_dict(self):
        """Test conversion to plain containers."""
        obj = JsonObject({"a": {"b": [1, 2]}})

        assert obj.to_dict() == {"a": {"b": [1, 2]}}
        assert type(obj.to_dict()["a"]["b"]) is list


class TestJsonArray:
    """Tests for JsonArray class."""

    def test_sequence_behaviour(self):
        """Test indexing, slicing and length."""
        array = JsonArray([1, 2, 3])

        assert len(array) == 3
        assert array[0] == 1
        assert array[-1] == 3
        assert isinstance(array[1:], JsonArray)
        assert array[1:] == [2, 3]

    def test_append_and_add_are_copies(self):
        """Test that append and concatenation do not modify the receiver."""
        array = JsonArray([1])

        assert array.append(2) == [1, 2]
        assert (array + [3, 4]) == [1, 3, 4]
        assert array.extend((5,)) == [1, 5]
        assert array == [1]

    def test_order_matters(self):
        """Test that arrays compare positionally."""
        assert JsonArray([1, 2]) != JsonArray([2, 1])


class TestObjectBuilder:
    """Tests for ObjectBuilder class."""

    def test_build_from_base(self):
        """Test staging changes on top of an existing object."""
        base = JsonObject(a=1, b=2)
        builder = ObjectBuilder(base)
        builder.set("C", 3)
        builder.remove("a")

        result = builder.build()

        assert list(result) == ["b", "C"]
        assert list(base) == ["a", "b"]
        assert "c" in builder
        assert builder.get("missing", ABSENT) is ABSENT


class TestEqual:
    """Tests for structural equality."""

    def test_key_order_is_ignored(self):
        """Test objects built in different orders are equal."""
        assert equal({"a": 1, "b": 2}, {"b": 2, "a": 1})

    def test_reflexive_for_every_kind(self):
        """Test that every value equals itself."""
        values = [None, True, 0, 1.5, Decimal("2.5"), "text",
                  datetime(2024, 1, 1, tzinfo=timezone.utc),
                  {"a": [1, {"b": None}]}, [], {}]
        for value in values:
            assert equal(value, value)

    def test_bool_is_not_a_number(self):
        """Test that booleans never equal numbers."""
        assert not equal(True, 1)
        assert not equal(0, False)
        assert equal(False, False)

    def test_numbers_compare_numerically(self):
        """Test mixed numeric representations."""
        assert equal(1, 1.0)
        assert equal(Decimal("2.50"), 2.5)
        assert not equal(1, 2)

    def test_nan_equals_nan(self):
        """Test that NaN is equal to itself structurally."""
        assert equal(float("nan"), float("nan"))
        assert equal({"x": math.nan}, {"x": Decimal("NaN")})
        assert not equal(math.nan, 1.0)

    def test_null_only_equals_null(self):
        """Test null comparisons."""
        assert equal(None, None)
        assert not equal(None, 0)
        assert not equal({"a": None}, {})

    def test_different_kinds(self):
        """Test that objects, arrays and leaves of different kinds differ."""
        assert not equal({}, [])
        assert not equal("1", 1)
        assert not equal([1, 2], [1, 2, 3])

    def test_opaque_leaves_compare_by_identity(self):
        """Test that unknown objects are equal only to themselves."""
        marker = object()

        assert equal([marker], [marker])
        assert not equal([marker], [object()])

    def test_deep_nesting_does_not_recurse(self):
        """Test equality on nesting far beyond the recursion limit."""
        left = JsonArray()
        right = JsonArray()
        for _ in range(5000):
            left = JsonArray._adopt((left,))
            right = JsonArray._adopt((right,))

        assert equal(left, right)


class TestNormalizeAndKinds:
    """Tests for normalize, kind_of and to_native."""

    def test_normalize_containers(self):
        """Test conversion of native containers."""
        assert isinstance(normalize({"a": 1}), JsonObject)
        assert isinstance(normalize((1, 2)), JsonArray)
        assert normalize("x") == "x"

    def test_normalize_unwraps_json_value_protocol(self):
        """Test objects exposing __json_value__."""
        class Wrapper:
            def __json_value__(self):
                return {"wrapped": True}

        assert normalize(Wrapper()) == {"wrapped": True}

    def test_kind_of(self):
        """Test kind tags for every value kind."""
        assert kind_of(None) is ValueKind.NULL
        assert kind_of(True) is ValueKind.BOOL
        assert kind_of(3) is ValueKind.INTEGER
        assert kind_of(3.5) is ValueKind.FLOAT
        assert kind_of(Decimal("1")) is ValueKind.DECIMAL
        assert kind_of("s") is ValueKind.STRING
        assert kind_of(datetime(2024, 1, 1)) is ValueKind.TIMESTAMP
        assert kind_of(JsonObject()) is ValueKind.OBJECT
        assert kind_of(JsonArray()) is ValueKind.ARRAY
        assert kind_of(object()) is ValueKind.OPAQUE

    def test_to_native_keeps_leaves(self):
        """Test that timestamps and decimals survive conversion."""
        stamp = datetime(2024, 1, 1)
        native = to_native(JsonObject({"when": stamp, "amount": Decimal("1.10")}))

        assert native == {"when": stamp, "amount": Decimal("1.10")}

    def test_absent_sentinel(self):
        """Test the ABSENT marker."""
        assert not ABSENT
        assert repr(ABSENT) == "ABSENT"
        assert ABSENT is not None

    def test_format_timestamp(self):
        """Test formatting of timestamps with and without source text."""
        parsed = Timestamp.from_text("2024-01-01 10:00", datetime(2024, 1, 1, 10))

        assert format_timestamp(parsed) == "2024-01-01 10:00"
        assert format_timestamp(datetime(2024, 1, 1, tzinfo=timezone.utc)) == "2024-01-01T00:00:00Z"
        assert format_timestamp(datetime(2024, 1, 1)) == "2024-01-01T00:00:00"
        assert parsed == datetime(2024, 1, 1, 10)


class TestDeepValues:
    """Tests for values nested beyond the recursion limit."""

    def setup_method(self):
        """Set up test fixtures."""
        self.depth = sys.getrecursionlimit() + 500

    def test_normalize_deep_native_dict(self, make_nested):
        """Test converting a plain nested dict."""
        value = normalize(make_nested(self.depth, leaf="bottom"))

        for _ in range(self.depth):
            assert isinstance(value, JsonObject)
            value = value["N"]
        assert value == "bottom"

    def test_to_native_deep_value(self, make_nested):
        """Test converting a deep canonical value back to dicts."""
        native = to_native(normalize(make_nested(self.depth, leaf=7)))

        for _ in range(self.depth):
            assert type(native) is dict
            native = native["n"]
        assert native == 7

    def test_equal_on_deep_native_dicts(self, make_nested):
        """Test equality of plain nested dicts."""
        assert equal(make_nested(self.depth), make_nested(self.depth))
        assert not equal(make_nested(self.depth), make_nested(self.depth, leaf=1))

    def test_normalize_rejects_self_containing_input(self):
        """Test that a native container holding itself is reported."""
        data = {"items": []}
        data["items"].append(data)

        with pytest.raises(DynamicJSONError) as exc_info:
            normalize(data)

        assert exc_info.value.error_type is ErrorType.CIRCULAR

    def test_shared_native_children_are_not_circular(self):
        """Test that the same list reused twice is converted, not rejected."""
        shared = [1, 2]

        assert normalize({"a": shared, "b": shared}) == {"a": [1, 2], "b": [1, 2]}
