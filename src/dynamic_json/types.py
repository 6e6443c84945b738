"""Core type definitions for Dynamic JSON."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional


class ValueKind(Enum):
    """Enumeration of canonical value kinds."""
    NULL = "null"
    BOOL = "bool"
    INTEGER = "integer"
    FLOAT = "float"
    DECIMAL = "decimal"
    STRING = "string"
    TIMESTAMP = "timestamp"
    OBJECT = "object"
    ARRAY = "array"
    OPAQUE = "opaque"


class SegmentKind(Enum):
    """Enumeration of path segment kinds."""
    PROPERTY = "property"
    INDEX = "index"


class DiffKind(Enum):
    """Kind of change reported by the path-aware diff."""
    ADDED = "Added"
    REMOVED = "Removed"
    MODIFIED = "Modified"


class ErrorType(Enum):
    """Enumeration of error types."""
    SYNTAX = "syntax"
    PATH = "path"
    INDEX = "index"
    NOT_FOUND = "not_found"
    CONVERSION = "conversion"
    STRUCTURE = "structure"
    CIRCULAR = "circular"
    DEPTH = "depth"


@dataclass
class ValidationError:
    """Validation error details."""
    type: ErrorType
    message: str
    location: Optional[str] = None


@dataclass
class ValidationResult:
    """Result of input validation."""
    is_valid: bool
    errors: List[ValidationError]
    warnings: List[str]


@dataclass
class ErrorResponse:
    """Response for error handling."""
    can_recover: bool
    suggested_action: str
    partial_results: Optional[Any] = None


@dataclass
class DiffResult:
    """Merge-patch diff outcome with an explicit change flag."""
    has_changes: bool
    patch: Any = None


class DynamicJSONError(Exception):
    """Base exception for Dynamic JSON errors."""

    default_error_type = ErrorType.STRUCTURE

    def __init__(self, message: str, error_type: Optional[ErrorType] = None,
                 context: Optional[Any] = None):
        super().__init__(message)
        self.error_type = error_type or self.default_error_type
        self.context = context


class InvalidPath(DynamicJSONError, ValueError):
    """Raised for a malformed path string or an empty property name."""

    default_error_type = ErrorType.PATH


class InvalidIndex(InvalidPath):
    """Raised when an index segment is negative or not an integer."""

    default_error_type = ErrorType.INDEX


class PathNotFound(DynamicJSONError, LookupError):
    """Raised when a well-formed path does not resolve against a value."""

    default_error_type = ErrorType.NOT_FOUND

    def __init__(self, path: Any, context: Optional[Any] = None):
        super().__init__(f"Path not found: {path}", context=context)
        self.path = path


class ConversionError(DynamicJSONError, TypeError):
    """Raised when a value cannot be coerced to a requested type."""

    default_error_type = ErrorType.CONVERSION


class DocumentTooDeep(DynamicJSONError):
    """Raised when a document nests deeper than the configured limit."""

    default_error_type = ErrorType.DEPTH


# Abstract base classes for interfaces

class StructuralOperationsInterface(ABC):
    """Abstract interface for the structural operations facade."""

    @abstractmethod
    def diff(self, original: Any, updated: Any) -> Any:
        """Compute a merge patch turning original into updated."""
        pass

    @abstractmethod
    def apply_patch(self, original: Any, patch: Any) -> Any:
        """Apply a merge patch to a value."""
        pass

    @abstractmethod
    def diff_with_paths(self, original: Any, updated: Any) -> List[Any]:
        """Enumerate every change between two values with its path."""
        pass

    @abstractmethod
    def merge(self, left: Any, right: Any, concat_arrays: Optional[bool] = None) -> Any:
        """Deep-merge right into left."""
        pass

    @abstractmethod
    def get(self, root: Any, path: Any) -> Any:
        """Resolve a path against a value, raising when it does not resolve."""
        pass


class ErrorHandlerInterface(ABC):
    """Abstract interface for error handling."""

    @abstractmethod
    def validate_input(self, input_data: str) -> ValidationResult:
        """Validate input data."""
        pass

    @abstractmethod
    def handle_error(self, error: DynamicJSONError) -> ErrorResponse:
        """Handle library errors."""
        pass
