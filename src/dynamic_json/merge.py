"""Deep merge of two values."""

from typing import Any, Iterable

from .values import ABSENT, JsonArray, JsonObject, ObjectBuilder, normalize


def merge(left: Any, right: Any, concat_arrays: bool = False) -> Any:
    """
    Merge ``right`` over ``left`` into a new value.

    * ``right`` of None keeps ``left``; null never overwrites in a merge.
    * Two objects: every key of ``left`` overlaid by every key of ``right``,
      keys present in both merged recursively.
    * Two arrays: ``right`` replaces ``left``, or with ``concat_arrays`` the
      elements of ``left`` are followed by those of ``right`` (duplicates
      kept, so merging a value with itself doubles its arrays).
    * Anything else: ``right`` replaces ``left``.

    Args:
        left: Base value (normalized first)
        right: Overlay value (normalized first)
        concat_arrays: Concatenate arrays present on both sides

    Returns:
        The merged value
    """
    return _merge(normalize(left), normalize(right), concat_arrays)


def _merge(left: Any, right: Any, concat_arrays: bool) -> Any:
    if not (isinstance(left, JsonObject) and isinstance(right, JsonObject)):
        return _merge_leaf(left, right, concat_arrays)

    # Each frame: [result being built, remaining right-hand items, key in parent].
    stack = [[ObjectBuilder(left), iter(right.items()), None]]
    while True:
        frame = stack[-1]
        result, pending = frame[0], frame[1]
        for key, value in pending:
            existing = result.get(key, ABSENT)
            if existing is ABSENT:
                result.set(key, value)
            elif isinstance(existing, JsonObject) and isinstance(value, JsonObject):
                frame[2] = key
                stack.append([ObjectBuilder(existing), iter(value.items()), None])
                break
            else:
                result.set(key, _merge_leaf(existing, value, concat_arrays))
        else:
            stack.pop()
            built = result.build()
            if not stack:
                return built
            parent = stack[-1]
            parent[0].set(parent[2], built)


def _merge_leaf(left: Any, right: Any, concat_arrays: bool) -> Any:
    if right is None:
        return left
    if isinstance(left, JsonArray) and isinstance(right, JsonArray):
        return left + right if concat_arrays else right
    return right


def merge_all(values: Iterable[Any], concat_arrays: bool = False) -> Any:
    """Fold :func:`merge` over ``values`` from left to right; None when empty."""
    result = None
    for value in values:
        result = _merge(result, normalize(value), concat_arrays)
    return result
