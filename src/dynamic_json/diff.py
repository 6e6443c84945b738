"""Merge-patch diff and patch application.

Patches are bare values: an object patch edits keys (a ``None`` entry deletes
the key), any other patch replaces the target wholesale. Arrays are always
atomic and never compared element by element.

Because deletion and "set to null" share the ``None`` entry, a patch alone
cannot tell them apart; this is inherent to merge-patch semantics.
"""

from typing import Any, Iterator, Tuple

from .values import ABSENT, JsonObject, ObjectBuilder, equal, normalize


def diff(original: Any, updated: Any) -> Any:
    """
    Compute a merge patch that transforms ``original`` into ``updated``.

    Args:
        original: Original value (normalized first)
        updated: Updated value (normalized first)

    Returns:
        The patch value, or ``ABSENT`` when both values are equal
    """
    return _diff(normalize(original), normalize(updated))


def _diff(original: Any, updated: Any) -> Any:
    if equal(original, updated):
        return ABSENT
    if not (isinstance(original, JsonObject) and isinstance(updated, JsonObject)):
        return updated

    # Each frame: [patch being built, remaining (key, old, new), key in parent].
    stack = [[ObjectBuilder(), _key_union(original, updated), None]]
    while True:
        frame = stack[-1]
        patch, pending = frame[0], frame[1]
        for key, old_value, new_value in pending:
            if new_value is ABSENT:
                patch.set(key, None)
            elif old_value is ABSENT:
                patch.set(key, new_value)
            elif equal(old_value, new_value):
                continue
            elif isinstance(old_value, JsonObject) and isinstance(new_value, JsonObject):
                frame[2] = key
                stack.append([ObjectBuilder(), _key_union(old_value, new_value), None])
                break
            else:
                patch.set(key, new_value)
        else:
            stack.pop()
            # Nested equal subtrees must not surface as an empty object patch.
            child = patch.build() if len(patch) else ABSENT
            if not stack:
                return child
            if child is not ABSENT:
                parent = stack[-1]
                parent[0].set(parent[2], child)


def _key_union(original: JsonObject, updated: JsonObject) -> Iterator[Tuple[str, Any, Any]]:
    """Yield (key, old, new) over both key sets, ABSENT marking a missing side."""
    for key, old_value in original.items():
        yield key, old_value, updated.get(key, ABSENT)
    for key, new_value in updated.items():
        if key not in original:
            yield key, ABSENT, new_value


def apply_patch(original: Any, patch: Any) -> Any:
    """
    Apply a merge patch to a value.

    A ``None`` patch yields ``None``: it is a literal replacement, not a
    no-op. An ``ABSENT`` patch, the result of diffing equal values, returns
    ``original`` unchanged. The original value is never modified.

    Args:
        original: Value to patch (normalized first)
        patch: Patch produced by :func:`diff` or written by hand

    Returns:
        The patched value
    """
    return _apply(normalize(original), normalize(patch))


def _apply(original: Any, patch: Any) -> Any:
    if patch is ABSENT:
        return original
    if not isinstance(patch, JsonObject):
        return patch

    # Each frame: [result being built, remaining patch items, key in parent].
    stack = [[_builder_for(original), iter(patch.items()), None]]
    while True:
        frame = stack[-1]
        result, pending = frame[0], frame[1]
        for key, value in pending:
            if value is None:
                result.remove(key)
            elif isinstance(value, JsonObject):
                frame[2] = key
                stack.append([_builder_for(result.get(key, ABSENT)), iter(value.items()), None])
                break
            else:
                result.set(key, value)
        else:
            stack.pop()
            built = result.build()
            if not stack:
                return built
            parent = stack[-1]
            parent[0].set(parent[2], built)


def _builder_for(target: Any) -> ObjectBuilder:
    return ObjectBuilder(target if isinstance(target, JsonObject) else None)
