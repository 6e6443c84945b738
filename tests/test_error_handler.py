"""Tests for error handler."""

from dynamic_json.error_handler import ErrorHandler
from dynamic_json.path import ROOT
from dynamic_json.types import (
    ConversionError,
    DocumentTooDeep,
    DynamicJSONError,
    ErrorType,
    InvalidIndex,
    InvalidPath,
    PathNotFound,
)


class TestErrorHandler:
    """Tests for ErrorHandler class."""

    def setup_method(self):
        """Set up test fixtures."""
        self.error_handler = ErrorHandler()

    def test_validate_input_valid_json(self):
        """Test validation of valid JSON input."""
        json_string = '{"users": {"user1": {"name": "Alice"}}}'
        result = self.error_handler.validate_input(json_string)

        assert result.is_valid
        assert len(result.errors) == 0

    def test_validate_input_invalid_json(self):
        """Test validation of invalid JSON input."""
        json_string = '{"users": {"user1": {"name": "Alice"}'  # Missing closing brace
        result = self.error_handler.validate_input(json_string)

        assert not result.is_valid
        assert len(result.errors) > 0
        assert result.errors[0].type == ErrorType.SYNTAX

    def test_validate_path_string(self):
        """Test path string validation."""
        assert self.error_handler.validate_path_string("/a[0]").is_valid
        assert not self.error_handler.validate_path_string("a[0]").is_valid

    def test_validate_document_logs_warnings(self, make_nested, caplog):
        """Test that nesting warnings are logged."""
        result = self.error_handler.validate_document(make_nested(100))

        assert result.is_valid
        assert "Deep nesting detected" in caplog.text

    def test_validate_document_limit(self, make_nested):
        """Test the depth limit."""
        result = self.error_handler.validate_document(make_nested(5), max_depth=3)

        assert not result.is_valid
        assert result.errors[0].type == ErrorType.DEPTH

    def test_handle_path_error(self):
        """Test handling of malformed paths."""
        response = self.error_handler.handle_error(InvalidPath("Invalid path 'x'", context="x"))

        assert response.can_recover
        assert "path syntax" in response.suggested_action.lower()
        assert response.partial_results == "x"

    def test_handle_index_error(self):
        """Test handling of invalid indices."""
        response = self.error_handler.handle_error(InvalidIndex("Index must be non-negative", context=-1))

        assert response.can_recover
        assert response.partial_results == -1

    def test_handle_not_found_error(self):
        """Test handling of unresolved paths."""
        path = ROOT.property("missing")
        response = self.error_handler.handle_error(PathNotFound(path))

        assert response.can_recover
        assert "try_get_at_path" in response.suggested_action
        assert response.partial_results == path

    def test_handle_conversion_error(self):
        """Test handling of typed mapping failures."""
        response = self.error_handler.handle_error(ConversionError("bad field", context="age"))

        assert response.can_recover
        assert "as_type_lenient" in response.suggested_action
        assert response.partial_results == "age"

    def test_handle_circular_error(self):
        """Test handling of circular reference errors."""
        error = DynamicJSONError("Circular reference detected", ErrorType.CIRCULAR)

        response = self.error_handler.handle_error(error)

        assert not response.can_recover
        assert "circular" in response.suggested_action.lower()

    def test_handle_depth_error(self):
        """Test handling of documents that nest too deeply."""
        response = self.error_handler.handle_error(DocumentTooDeep("too deep", context=128))

        assert response.can_recover
        assert "max_depth" in response.suggested_action
        assert response.partial_results == 128

    def test_handle_unknown_error(self):
        """Test handling of errors without a specific strategy."""
        response = self.error_handler.handle_error(DynamicJSONError("Something odd"))

        assert not response.can_recover
        assert "unknown" in response.suggested_action.lower()

    def test_error_types_follow_exception_class(self):
        """Test default error types of the exception taxonomy."""
        assert InvalidPath("x").error_type == ErrorType.PATH
        assert InvalidIndex("x").error_type == ErrorType.INDEX
        assert PathNotFound("/a").error_type == ErrorType.NOT_FOUND
        assert ConversionError("x").error_type == ErrorType.CONVERSION
        assert DocumentTooDeep("x").error_type == ErrorType.DEPTH
        assert DynamicJSONError("x").error_type == ErrorType.STRUCTURE

    def test_errors_are_standard_exceptions(self):
        """Test that the taxonomy fits the standard exception hierarchy."""
        assert isinstance(InvalidPath("x"), ValueError)
        assert isinstance(InvalidIndex("x"), InvalidPath)
        assert isinstance(PathNotFound("/a"), LookupError)
        assert isinstance(ConversionError("x"), TypeError)
