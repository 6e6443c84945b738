"""Tests for path navigation and path validation."""

import pytest

from dynamic_json.navigation import get_at_path, is_valid_for, try_get_at_path
from dynamic_json.path import ROOT, JsonPath
from dynamic_json.types import InvalidPath, PathNotFound
from dynamic_json.values import JsonObject


class TestNavigation:
    """Tests for try_get_at_path and get_at_path."""

    def setup_method(self):
        """Set up test fixtures."""
        self.document = JsonObject({
            "user": {
                "Name": "Alice",
                "orders": [{"id": 1}, {"id": 2, "note": None}]
            },
            "a": [1, 2, 3]
        })

    def test_resolve_nested_path(self):
        """Test resolving properties and indices."""
        found, value = try_get_at_path(self.document, "/user/orders[1]/id")

        assert found
        assert value == 2

    def test_property_lookup_ignores_case(self):
        """Test that property segments match keys regardless of case."""
        assert get_at_path(self.document, "/USER/name") == "Alice"

    def test_root_resolves_to_value(self):
        """Test that the root path returns the value itself."""
        assert get_at_path(self.document, ROOT) is self.document
        assert get_at_path(42, "/") == 42

    def test_out_of_range_index_not_found(self):
        """Test that an index beyond the array is reported as not found."""
        found, value = try_get_at_path({"a": [1, 2, 3]}, "/a[5]")

        assert not found
        assert value is None

    def test_kind_mismatch_not_found(self):
        """Test property segments on arrays and index segments on objects."""
        assert try_get_at_path(self.document, "/a/x") == (False, None)
        assert try_get_at_path(self.document, "/user[0]") == (False, None)
        assert try_get_at_path(self.document, "/user/Name/more") == (False, None)

    def test_null_value_is_found(self):
        """Test that a key holding null resolves."""
        found, value = try_get_at_path(self.document, "/user/orders[1]/note")

        assert found
        assert value is None

    def test_malformed_string_is_not_found(self):
        """Test that the non-throwing form swallows parse errors."""
        assert try_get_at_path(self.document, "user") == (False, None)
        assert try_get_at_path(self.document, 17) == (False, None)

    def test_get_raises_path_not_found(self):
        """Test the throwing form for unresolved paths."""
        path = ROOT.property("user").property("missing")
        with pytest.raises(PathNotFound) as exc_info:
            get_at_path(self.document, path)

        assert exc_info.value.path == path
        assert "/user/missing" in str(exc_info.value)

    def test_get_raises_invalid_path_for_malformed_string(self):
        """Test that malformed strings are rejected before resolution."""
        with pytest.raises(InvalidPath):
            get_at_path(self.document, "/a[")

    def test_path_not_found_is_a_lookup_error(self):
        """Test that callers can catch the standard lookup error."""
        with pytest.raises(LookupError):
            get_at_path(self.document, "/nope")

    def test_native_input_is_normalized(self):
        """Test navigation on plain dicts and lists."""
        assert get_at_path({"x": [{"y": "z"}]}, JsonPath.parse("/x[0]/y")) == "z"


class TestIsValidFor:
    """Tests for is_valid_for."""

    def test_valid_and_invalid_paths(self):
        """Test path validation against a value."""
        document = {"a": {"b": [10]}}

        assert is_valid_for(document, "/a/b[0]")
        assert is_valid_for(document, ROOT)
        assert not is_valid_for(document, "/a/b[1]")
        assert not is_valid_for(document, "/a/c")

    def test_never_raises_on_untrusted_input(self):
        """Test malformed strings and wrong argument types."""
        assert not is_valid_for({"a": 1}, "][")
        assert not is_valid_for({"a": 1}, None)
