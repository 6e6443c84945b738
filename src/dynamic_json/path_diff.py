"""Path-aware diff: every change reported with its location."""

from typing import Any, List

from .models import DiffEntry
from .path import ROOT
from .types import DiffKind
from .values import ABSENT, JsonObject, equal, normalize


def diff_with_paths(original: Any, updated: Any) -> List[DiffEntry]:
    """
    Enumerate every change between two values as explicit entries.

    Unlike the merge-patch diff, deletions are reported as ``REMOVED``
    entries rather than null markers. Objects are descended key by key;
    arrays are compared atomically and reported as a single ``MODIFIED``
    entry, so index segments never appear in the reported paths.

    Entries below a common path prefix are contiguous in the result. The
    order of sibling keys at one level is not part of the contract.

    Args:
        original: Original value (normalized first)
        updated: Updated value (normalized first)

    Returns:
        List of DiffEntry; empty when both values are equal
    """
    entries: List[DiffEntry] = []
    # Each item: (parent path, key or None for the parent itself, old, new).
    stack = [(ROOT, None, normalize(original), normalize(updated))]

    while stack:
        parent, key, old, new = stack.pop()
        if old is not ABSENT and new is not ABSENT and equal(old, new):
            continue
        path = parent if key is None else parent.property(key)

        if old is ABSENT:
            entries.append(DiffEntry(path, ABSENT, new, DiffKind.ADDED))
        elif new is ABSENT:
            entries.append(DiffEntry(path, old, ABSENT, DiffKind.REMOVED))
        elif old is None:
            entries.append(DiffEntry(path, None, new, DiffKind.ADDED))
        elif new is None:
            entries.append(DiffEntry(path, old, None, DiffKind.REMOVED))
        elif isinstance(old, JsonObject) and isinstance(new, JsonObject):
            children = [(path, name, value, new.get(name, ABSENT)) for name, value in old.items()]
            children.extend((path, name, ABSENT, value)
                            for name, value in new.items() if name not in old)
            # Reversed so that keys pop in object order.
            stack.extend(reversed(children))
        else:
            # Arrays are atomic; primitives and mismatched kinds land here too.
            entries.append(DiffEntry(path, old, new, DiffKind.MODIFIED))

    return entries
