"""Main Dynamic JSON facade."""

import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar

from .diff import apply_patch, diff
from .dynamic import materialize
from .error_handler import ErrorHandler
from .mapping import as_type, as_type_lenient
from .merge import merge
from .models import DiffEntry
from .navigation import PathLike, get_at_path, try_get_at_path
from .parser import JSONParser
from .path_diff import diff_with_paths
from .profiler import PerformanceProfiler
from .types import (
    DiffResult,
    DocumentTooDeep,
    DynamicJSONError,
    ErrorResponse,
    ErrorType,
    StructuralOperationsInterface,
)
from .utils.size_calculator import SizeCalculator
from .values import ABSENT, normalize

T = TypeVar("T")


class DynamicJSON(StructuralOperationsInterface):
    """
    Main implementation of the structural operations interface.

    Bundles the codec, the structural operations and the dynamic wrappers
    behind one configured object. Every operation checks its inputs for
    cycles and excessive nesting before walking them, logs what it did and,
    when profiling is enabled, records performance metrics.
    """

    def __init__(self, logger: Optional[logging.Logger] = None,
                 concat_arrays: bool = False,
                 parse_timestamps: bool = True,
                 use_decimal: bool = False,
                 sanitize_keys: bool = False,
                 max_depth: int = 128,
                 safe_wrappers: bool = False,
                 enable_profiling: bool = False):
        """
        Initialize Dynamic JSON.

        Args:
            logger: Optional logger instance
            concat_arrays: Default array policy for merge
            parse_timestamps: Convert ISO-8601 date-time strings when loading
            use_decimal: Load non-integral numbers as Decimal
            sanitize_keys: Sanitize and de-duplicate keys when loading
            max_depth: Maximum nesting depth accepted by any operation
            safe_wrappers: Materialize the safe wrapper variants
            enable_profiling: Record performance metrics per operation
        """
        if max_depth < 1:
            raise ValueError(f"max_depth must be at least 1, got {max_depth}")

        self.logger = logger or logging.getLogger(__name__)
        self.concat_arrays = concat_arrays
        self.max_depth = max_depth
        self.safe_wrappers = safe_wrappers

        self.error_handler = ErrorHandler(self.logger)
        self.parser = JSONParser(
            self.error_handler,
            self.logger,
            parse_timestamps=parse_timestamps,
            use_decimal=use_decimal,
            sanitize_keys=sanitize_keys
        )
        self.size_calculator = SizeCalculator(self.logger)
        self.profiler = PerformanceProfiler(self.logger) if enable_profiling else None

    def loads(self, json_string: str) -> Any:
        """
        Parse JSON text into a canonical value.

        Raises:
            ValueError: If the text is empty or invalid
            DocumentTooDeep: If the document nests deeper than ``max_depth``
        """
        input_size = len(json_string.encode('utf-8')) if isinstance(json_string, str) else 0
        with self._operation("loads", input_size=input_size) as record:
            value = self.parser.parse(json_string)
            self._guard(value)
            if record is not None:
                record.nodes_visited = self.size_calculator.count_nodes(value)["total"]
        self.logger.info(f"Loaded document: {input_size/1024:.1f}KB")
        return value

    def dumps(self, value: Any, indent: Optional[int] = None) -> str:
        """Serialize a value to JSON text."""
        self._guard(value)
        with self._operation("dumps", value) as record:
            text = self.parser.serialize(value, indent=indent)
            if record is not None:
                record.output_size = len(text.encode('utf-8'))
        return text

    def diff(self, original: Any, updated: Any) -> Any:
        """
        Compute a merge patch that transforms ``original`` into ``updated``.

        Returns:
            The patch, or ``ABSENT`` when there is nothing to change
        """
        original, updated = self._guard(original, updated)
        with self._operation("diff", original, updated) as record:
            patch = diff(original, updated)
            changes = self.size_calculator.count_changes(patch)
            if record is not None:
                record.nodes_visited = changes
        self.logger.info(f"Computed merge patch: {changes} top-level change(s)")
        return patch

    def diff_result(self, original: Any, updated: Any) -> DiffResult:
        """
        Compute a merge patch with an explicit change flag.

        Distinguishes "no changes" from a patch that replaces the document
        with null.
        """
        patch = self.diff(original, updated)
        if patch is ABSENT:
            return DiffResult(has_changes=False)
        return DiffResult(has_changes=True, patch=patch)

    def apply_patch(self, original: Any, patch: Any) -> Any:
        """Apply a merge patch; an ``ABSENT`` patch returns the original."""
        original, patch = self._guard(original, patch)
        with self._operation("apply_patch", original, patch):
            result = apply_patch(original, patch)
        self.logger.info(f"Applied merge patch: {self.size_calculator.count_changes(patch)} top-level change(s)")
        return result

    def diff_with_paths(self, original: Any, updated: Any) -> List[DiffEntry]:
        """Enumerate every change between two values with its path."""
        original, updated = self._guard(original, updated)
        with self._operation("diff_with_paths", original, updated) as record:
            entries = diff_with_paths(original, updated)
            if record is not None:
                record.nodes_visited = len(entries)
        self.logger.info(f"Found {len(entries)} change(s)")
        for entry in entries:
            self.logger.debug(entry.describe())
        return entries

    def merge(self, left: Any, right: Any, concat_arrays: Optional[bool] = None) -> Any:
        """
        Deep-merge ``right`` over ``left``.

        Args:
            left: Base value
            right: Overlay value
            concat_arrays: Array policy; defaults to the configured one
        """
        if concat_arrays is None:
            concat_arrays = self.concat_arrays
        left, right = self._guard(left, right)
        with self._operation("merge", left, right):
            result = merge(left, right, concat_arrays)
        self.logger.info(f"Merged documents (concat_arrays={concat_arrays})")
        return result

    def get(self, root: Any, path: PathLike) -> Any:
        """
        Resolve a path against a value.

        Raises:
            InvalidPath: If ``path`` is a malformed string
            PathNotFound: If the path does not resolve
        """
        root, = self._guard(root)
        value = get_at_path(root, path)
        self.logger.debug(f"Resolved path {path}")
        return value

    def try_get(self, root: Any, path: PathLike) -> Tuple[bool, Any]:
        """Resolve a path without raising; returns (found, value)."""
        try:
            root, = self._guard(root)
        except DynamicJSONError as e:
            self.logger.warning(f"Path lookup skipped: {e}")
            return False, None
        return try_get_at_path(root, path)

    def is_valid_for(self, value: Any, path: PathLike) -> bool:
        """Check whether a path resolves against a value; never raises."""
        found, _ = self.try_get(value, path)
        return found

    def materialize(self, value: Any) -> Any:
        """Wrap a value for attribute-style access using the configured variant."""
        value, = self._guard(value)
        return materialize(value, self.safe_wrappers)

    def as_type(self, value: Any, cls: Type[T], lenient: bool = False) -> T:
        """
        Map an object value onto a record class.

        Args:
            value: Object value
            cls: Dataclass or annotated class
            lenient: Skip fields that do not convert instead of failing

        Raises:
            ConversionError: If mapping fails
        """
        value, = self._guard(value)
        if lenient:
            return as_type_lenient(value, cls)
        return as_type(value, cls)

    def handle_error(self, error: DynamicJSONError) -> ErrorResponse:
        """Turn a library error into a response with a suggested action."""
        return self.error_handler.handle_error(error)

    def profiling_summary(self) -> Dict[str, Any]:
        """
        Get the performance summary of all profiled operations.

        Returns:
            Summary dictionary; ``total_operations`` is 0 when profiling is off
        """
        if self.profiler is None:
            return {"total_operations": 0}
        return self.profiler.get_performance_summary()

    def _guard(self, *values: Any) -> List[Any]:
        """Reject cyclic or too deeply nested inputs, then normalize them."""
        for value in values:
            result = self.error_handler.validate_document(value, self.max_depth)
            if result.is_valid:
                continue
            error = result.errors[0]
            if error.type == ErrorType.DEPTH:
                raise DocumentTooDeep(error.message, context=self.max_depth)
            raise DynamicJSONError(error.message, error.type)
        return [normalize(value) for value in values]

    @contextmanager
    def _operation(self, name: str, *inputs: Any, input_size: int = 0):
        if self.profiler is None:
            yield None
            return
        if inputs:
            input_size = sum(self.size_calculator.calculate_json_size(value) for value in inputs)
        with self.profiler.profile_operation(name, input_size) as record:
            yield record
