"""Read-only path resolution and path validation against values."""

from typing import Any, Tuple, Union

from .path import JsonPath
from .types import PathNotFound, SegmentKind
from .values import JsonArray, JsonObject, normalize

PathLike = Union[JsonPath, str]


def try_get_at_path(root: Any, path: PathLike) -> Tuple[bool, Any]:
    """
    Resolve a path against a value without raising.

    Property segments require an object holding the key (compared without
    regard to case); index segments require an array with the index in range.
    A malformed path string resolves to nothing.

    Args:
        root: Value to navigate (normalized first)
        path: JsonPath or path string

    Returns:
        Tuple of (found, value); value is None when not found
    """
    if isinstance(path, str):
        path = JsonPath.try_parse(path)
    if not isinstance(path, JsonPath):
        return False, None

    current = normalize(root)
    for segment in path:
        if segment.kind is SegmentKind.PROPERTY:
            if not isinstance(current, JsonObject) or segment.property_name not in current:
                return False, None
            current = current[segment.property_name]
        else:
            index = segment.array_index
            if not isinstance(current, JsonArray) or not 0 <= index < len(current):
                return False, None
            current = current[index]
    return True, current


def get_at_path(root: Any, path: PathLike) -> Any:
    """
    Resolve a path against a value.

    Path strings are parsed before any resolution is attempted.

    Raises:
        InvalidPath: If ``path`` is a malformed string
        PathNotFound: If the path does not resolve
    """
    if isinstance(path, str):
        path = JsonPath.parse(path)
    found, value = try_get_at_path(root, path)
    if not found:
        raise PathNotFound(path)
    return value


def is_valid_for(value: Any, path: PathLike) -> bool:
    """
    Check whether a path (or path string) resolves against a value.

    Never raises: parse failures and resolution failures both yield False,
    which makes this suitable for untrusted path strings.
    """
    found, _ = try_get_at_path(value, path)
    return found
