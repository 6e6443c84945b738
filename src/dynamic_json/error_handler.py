"""Error handling implementation for Dynamic JSON."""

import logging
from typing import Any, Optional

from .types import (
    DynamicJSONError,
    ErrorHandlerInterface,
    ErrorResponse,
    ErrorType,
    ValidationError,
    ValidationResult,
)
from .utils.validation import ValidationUtils


class ErrorHandler(ErrorHandlerInterface):
    """
    Error handler for Dynamic JSON operations.

    Validates untrusted inputs (JSON text, path strings, native documents)
    and turns library errors into responses with a suggested action.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize the error handler.

        Args:
            logger: Optional logger instance for error reporting
        """
        self.logger = logger or logging.getLogger(__name__)

    def validate_input(self, input_data: str) -> ValidationResult:
        """
        Validate input JSON string.

        Args:
            input_data: JSON string to validate

        Returns:
            ValidationResult with validation details
        """
        try:
            return ValidationUtils.validate_json_string(input_data)
        except Exception as e:
            self.logger.error(f"Unexpected error during input validation: {e}")
            return ValidationResult(
                is_valid=False,
                errors=[ValidationError(
                    type=ErrorType.SYNTAX,
                    message=f"Validation failed with unexpected error: {str(e)}",
                    location="input"
                )],
                warnings=[]
            )

    def validate_path_string(self, path: str) -> ValidationResult:
        """
        Validate a path string, typically taken from configuration or logs.

        Args:
            path: Path string to validate

        Returns:
            ValidationResult with validation details
        """
        result = ValidationUtils.validate_path_string(path)
        if not result.is_valid:
            self.logger.debug(f"Rejected path string {path!r}: {result.errors[0].message}")
        return result

    def validate_document(self, data: Any, max_depth: Optional[int] = None) -> ValidationResult:
        """
        Validate a document before a structural operation walks it.

        Args:
            data: Native or canonical value
            max_depth: Maximum accepted nesting depth

        Returns:
            ValidationResult with validation details
        """
        result = ValidationUtils.validate_document(data, max_depth)
        for warning in result.warnings:
            self.logger.warning(warning)
        return result

    def handle_error(self, error: DynamicJSONError) -> ErrorResponse:
        """
        Handle library errors and provide recovery suggestions.

        Args:
            error: DynamicJSONError to handle

        Returns:
            ErrorResponse with recovery information
        """
        self.logger.error(f"Dynamic JSON error: {error.error_type.value} - {error}")

        if error.error_type in (ErrorType.PATH, ErrorType.INDEX):
            return ErrorResponse(
                can_recover=True,
                suggested_action="Check the path syntax: '/' starts a property segment and "
                                 "'[n]' a non-negative index, e.g. /user/orders[0]/id.",
                partial_results=error.context
            )
        elif error.error_type == ErrorType.NOT_FOUND:
            return ErrorResponse(
                can_recover=True,
                suggested_action="The path is well-formed but does not resolve. Use "
                                 "try_get_at_path or is_valid_for for optional locations.",
                partial_results=getattr(error, "path", None)
            )
        elif error.error_type == ErrorType.CONVERSION:
            return ErrorResponse(
                can_recover=True,
                suggested_action="A value could not be converted to the target type. Use "
                                 "as_type_lenient to skip incompatible fields.",
                partial_results=error.context
            )
        elif error.error_type == ErrorType.CIRCULAR:
            return ErrorResponse(
                can_recover=False,
                suggested_action="Remove circular references from input data. "
                                 "Check for objects that reference themselves or create reference loops.",
                partial_results=None
            )
        elif error.error_type == ErrorType.DEPTH:
            return ErrorResponse(
                can_recover=True,
                suggested_action="Raise max_depth or flatten the document before processing.",
                partial_results=error.context
            )
        else:
            return ErrorResponse(
                can_recover=False,
                suggested_action="Unknown error type. Please check logs and retry.",
                partial_results=None
            )
