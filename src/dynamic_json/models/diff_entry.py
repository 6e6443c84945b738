"""Diff entry model produced by the path-aware diff."""

from dataclasses import dataclass
from typing import Any, Dict

from ..path import JsonPath
from ..types import DiffKind
from ..values import ABSENT, to_native


@dataclass(frozen=True)
class DiffEntry:
    """
    One change at a specific path.

    ``old_value`` / ``new_value`` hold full snapshots of the affected values.
    A side that does not exist, such as the old side of an added key, is the
    ``ABSENT`` sentinel; a JSON null side is ``None``.
    """

    path: JsonPath
    old_value: Any
    new_value: Any
    kind: DiffKind

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the entry to its wire shape.

        Returns:
            Dictionary with ``path``, ``kind`` and whichever of ``oldValue`` /
            ``newValue`` exist
        """
        result: Dict[str, Any] = {"path": str(self.path)}
        if self.old_value is not ABSENT:
            result["oldValue"] = to_native(self.old_value)
        if self.new_value is not ABSENT:
            result["newValue"] = to_native(self.new_value)
        result["kind"] = self.kind.value
        return result

    def describe(self) -> str:
        """Get a one-line human readable description."""
        if self.kind is DiffKind.ADDED:
            return f"+ {self.path}: {_short(self.new_value)}"
        if self.kind is DiffKind.REMOVED:
            return f"- {self.path}: {_short(self.old_value)}"
        return f"~ {self.path}: {_short(self.old_value)} -> {_short(self.new_value)}"


def _short(value: Any, limit: int = 60) -> str:
    text = repr(to_native(value))
    return text if len(text) <= limit else text[:limit - 3] + "..."
