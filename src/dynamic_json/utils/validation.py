"""Validation utilities for JSON text, path strings and documents."""

import json
from collections.abc import Mapping
from typing import Any, List, Optional

from ..path import JsonPath
from ..types import ErrorType, InvalidPath, ValidationError, ValidationResult
from ..values import JsonArray

# Nesting beyond this depth is accepted but reported as a warning.
DEEP_NESTING_WARNING = 64


class ValidationUtils:
    """Utility class for validating inputs before structural operations."""

    @staticmethod
    def validate_json_string(json_string: str) -> ValidationResult:
        """
        Validate JSON string syntax.

        Args:
            json_string: JSON string to validate

        Returns:
            ValidationResult with validation details
        """
        errors = []
        warnings = []

        if not isinstance(json_string, str) or not json_string.strip():
            errors.append(ValidationError(
                type=ErrorType.SYNTAX,
                message="JSON string is empty",
                location="input"
            ))
            return ValidationResult(is_valid=False, errors=errors, warnings=warnings)

        try:
            json.loads(json_string)
        except json.JSONDecodeError as e:
            errors.append(ValidationError(
                type=ErrorType.SYNTAX,
                message=f"Invalid JSON syntax: {e.msg}",
                location=f"line {e.lineno}, column {e.colno}"
            ))
        except RecursionError:
            errors.append(ValidationError(
                type=ErrorType.DEPTH,
                message="JSON text is nested too deeply to parse",
                location="input"
            ))

        return ValidationResult(
            is_valid=len(errors) == 0,
            errors=errors,
            warnings=warnings
        )

    @staticmethod
    def validate_path_string(path: str) -> ValidationResult:
        """
        Validate a path string against the path grammar.

        Args:
            path: Path string such as ``/user/orders[0]``

        Returns:
            ValidationResult with validation details
        """
        errors = []
        try:
            JsonPath.parse(path)
        except InvalidPath as e:
            errors.append(ValidationError(
                type=e.error_type,
                message=str(e),
                location="path"
            ))
        return ValidationResult(is_valid=not errors, errors=errors, warnings=[])

    @staticmethod
    def validate_document(data: Any, max_depth: Optional[int] = None) -> ValidationResult:
        """
        Validate a document before it enters a recursive operation.

        Checks for circular references (possible in native dict/list input)
        and for nesting deeper than ``max_depth``.

        Args:
            data: Native or canonical value
            max_depth: Maximum accepted nesting depth, None for unlimited

        Returns:
            ValidationResult with validation details
        """
        errors = []
        warnings = []

        if ValidationUtils.has_circular_references(data):
            errors.append(ValidationError(
                type=ErrorType.CIRCULAR,
                message="Circular references detected in document",
                location="document"
            ))
            return ValidationResult(is_valid=False, errors=errors, warnings=warnings)

        depth = ValidationUtils.calculate_max_depth(data)
        if max_depth is not None and depth > max_depth:
            errors.append(ValidationError(
                type=ErrorType.DEPTH,
                message=f"Document nesting depth {depth} exceeds the limit of {max_depth}",
                location="document"
            ))
        elif depth > DEEP_NESTING_WARNING:
            warnings.append(f"Deep nesting detected (depth: {depth}). This may impact performance.")

        return ValidationResult(
            is_valid=len(errors) == 0,
            errors=errors,
            warnings=warnings
        )

    @staticmethod
    def has_circular_references(data: Any) -> bool:
        """Check for containers that (indirectly) contain themselves."""
        active = set()
        finished = set()
        stack = [(data, False)]
        while stack:
            node, leaving = stack.pop()
            if leaving:
                active.discard(id(node))
                finished.add(id(node))
                continue
            if id(node) in finished:
                continue
            children = _children(node)
            if children is None:
                continue
            if id(node) in active:
                return True
            active.add(id(node))
            stack.append((node, True))
            stack.extend((child, False) for child in children)
        return False

    @staticmethod
    def calculate_max_depth(data: Any) -> int:
        """
        Calculate maximum nesting depth.

        Leaves have depth 0 and every container level adds one. Shared
        subtrees are measured once. Must only be called on acyclic input.
        """
        heights = {}
        stack = [(data, False)]
        while stack:
            node, ready = stack.pop()
            if id(node) in heights:
                continue
            children = _children(node)
            if children is None:
                continue
            if ready:
                heights[id(node)] = 1 + max((heights.get(id(child), 0) for child in children), default=0)
                continue
            stack.append((node, True))
            stack.extend((child, False) for child in children if id(child) not in heights)
        return heights.get(id(data), 0)


def _children(node: Any) -> Optional[List[Any]]:
    """Return the child values of a container, or None for a leaf."""
    unwrap = getattr(type(node), "__json_value__", None)
    if unwrap is not None:
        node = unwrap(node)
    if isinstance(node, Mapping):
        return list(node.values())
    if isinstance(node, (JsonArray, list, tuple)):
        return list(node)
    return None
