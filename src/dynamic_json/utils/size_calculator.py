"""Size calculation utilities for documents and operation results."""

import json
import logging
from datetime import datetime
from typing import Any, Dict, Optional

from ..types import ValueKind
from ..values import ABSENT, JsonArray, JsonObject, format_timestamp, kind_of, normalize, to_native


class SizeCalculator:
    """
    Utility class for measuring documents.

    Provides serialized sizes in UTF-8 bytes and node counts, used to feed
    throughput figures into the performance profiler.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize the size calculator.

        Args:
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger(__name__)

    def calculate_json_size(self, data: Any) -> int:
        """
        Calculate the size of data when serialized to compact JSON.

        Timestamps, decimals and opaque leaves are measured through their
        string form.

        Args:
            data: Native or canonical value

        Returns:
            Size in bytes
        """
        if data is None or isinstance(data, (str, int, float, bool)):
            return self._calculate_primitive_size(data)
        try:
            json_string = json.dumps(to_native(data), ensure_ascii=False,
                                     separators=(',', ':'), default=_leaf_text)
        except (TypeError, ValueError, RecursionError) as e:
            self.logger.warning(f"Size calculation failed: {e}")
            return 0
        return len(json_string.encode('utf-8'))

    def _calculate_primitive_size(self, data: Any) -> int:
        """Fast size calculation for primitive types."""
        if data is None:
            return 4  # null
        if isinstance(data, bool):
            return 4 if data else 5
        if isinstance(data, str):
            return len(json.dumps(data, ensure_ascii=False).encode('utf-8'))
        return len(str(data))

    def count_nodes(self, data: Any) -> Dict[str, int]:
        """
        Count the nodes of a value by kind.

        Args:
            data: Native or canonical value

        Returns:
            Dictionary mapping kind names to counts, plus ``total``
        """
        counts: Dict[str, int] = {"total": 0}
        stack = [normalize(data)]
        while stack:
            node = stack.pop()
            kind = kind_of(node)
            counts["total"] += 1
            counts[kind.value] = counts.get(kind.value, 0) + 1
            if kind is ValueKind.OBJECT:
                stack.extend(node.values())
            elif kind is ValueKind.ARRAY:
                stack.extend(node)
        return counts

    def count_changes(self, result: Any) -> int:
        """Count top-level changes in an operation result (patch keys or entries)."""
        if isinstance(result, JsonObject):
            return len(result)
        if isinstance(result, (list, JsonArray)):
            return len(result)
        return 0 if result is ABSENT else 1


def _leaf_text(value: Any) -> str:
    if isinstance(value, datetime):
        return format_timestamp(value)
    return str(value)
