"""Tests for key sanitization and de-duplication."""

from dynamic_json.utils.key_sanitization import KeySanitizer


class TestKeySanitizer:
    """Tests for KeySanitizer class."""

    def setup_method(self):
        """Set up test fixtures."""
        self.sanitizer = KeySanitizer()

    def test_sanitize_keeps_letters_and_digits(self):
        """Test the default character filter."""
        assert self.sanitizer.sanitize("first-name") == "firstname"
        assert self.sanitizer.sanitize("order #42") == "order42"
        assert self.sanitizer.sanitize("") == ""

    def test_custom_filter(self):
        """Test a custom character predicate."""
        sanitizer = KeySanitizer(key_filter=lambda char: char.isalnum() or char == "_")

        assert sanitizer.sanitize("first_name!") == "first_name"

    def test_collisions_get_numeric_suffixes(self):
        """Test suffixes 2, 3, ... in encounter order."""
        obj = self.sanitizer.build_object([("a-b", 1), ("a_b", 2), ("a b", 3)])

        assert list(obj) == ["ab", "ab2", "ab3"]
        assert [obj["ab"], obj["ab2"], obj["ab3"]] == [1, 2, 3]

    def test_collisions_ignore_case(self):
        """Test that keys differing only in case collide."""
        obj = self.sanitizer.build_object([("Name", 1), ("name", 2)])

        assert list(obj) == ["Name", "name2"]

    def test_suffix_skips_taken_names(self):
        """Test that a suffix already used by a raw key is skipped."""
        obj = self.sanitizer.build_object([("x2", "first"), ("x", "second"), ("x!", "third")])

        assert list(obj) == ["x2", "x", "x3"]
        assert obj["x3"] == "third"

    def test_empty_sanitized_key(self):
        """Test keys made only of rejected characters."""
        obj = self.sanitizer.build_object([("--", 1), ("!!", 2)])

        assert list(obj) == ["", "2"]
