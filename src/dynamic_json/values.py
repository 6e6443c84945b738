"""Canonical value model for JSON-shaped data.

Leaves are plain Python values (``None``, ``bool``, ``int``, ``float``,
``Decimal``, ``str``, ``datetime``). Containers are the immutable
:class:`JsonObject` and :class:`JsonArray`. Anything else reaching the model
is kept as an opaque leaf that is equal only to itself.
"""

import math
from collections.abc import Mapping, Sequence
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any, Dict, Iterable, Iterator, Optional, Tuple

from .types import DynamicJSONError, ErrorType, ValueKind


class _AbsentType:
    """Marker for a value that does not exist, as opposed to JSON null."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self):
        return (_AbsentType, ())


ABSENT = _AbsentType()

_LEAF_TYPES = (bool, int, float, Decimal, str, datetime)
_NUMBER_TYPES = (int, float, Decimal)


class Timestamp(datetime):
    """
    A ``datetime`` read from JSON text that keeps the text it was read from.

    Compares, hashes and computes exactly like the equivalent ``datetime``.
    Serialization writes ``text`` back unchanged; values derived through
    arithmetic or ``replace`` carry no text.
    """

    text: Optional[str] = None

    @classmethod
    def from_text(cls, text: str, value: datetime) -> "Timestamp":
        stamp = cls(value.year, value.month, value.day, value.hour, value.minute,
                    value.second, value.microsecond, value.tzinfo, fold=value.fold)
        stamp.text = text
        return stamp


def format_timestamp(value: datetime) -> str:
    """Return the source text of a parsed timestamp, else ISO-8601 with ``Z`` for UTC."""
    text = getattr(value, "text", None)
    if text is not None:
        return text
    formatted = value.isoformat()
    if value.utcoffset() == timedelta(0) and formatted.endswith("+00:00"):
        return formatted[:-6] + "Z"
    return formatted


def _fold(key: str) -> str:
    return key.casefold()


class JsonObject(Mapping):
    """
    Immutable ordered mapping with case-insensitive keys.

    Lookups ignore case; the spelling of the first insertion of a key is kept
    while later insertions under the same folded key replace its value.
    Modifying methods return a new object and leave the receiver untouched.
    """

    __slots__ = ("_entries",)

    def __init__(self, items: Any = None, **kwargs: Any):
        entries: Dict[str, Tuple[str, Any]] = {}
        if items is not None:
            pairs = items.items() if isinstance(items, Mapping) else items
            for key, value in pairs:
                _put(entries, key, normalize(value))
        for key, value in kwargs.items():
            _put(entries, key, normalize(value))
        self._entries = entries

    @classmethod
    def _adopt(cls, entries: Dict[str, Tuple[str, Any]]) -> "JsonObject":
        obj = cls.__new__(cls)
        obj._entries = entries
        return obj

    def __getitem__(self, key: str) -> Any:
        if not isinstance(key, str):
            raise KeyError(key)
        try:
            return self._entries[_fold(key)][1]
        except KeyError:
            raise KeyError(key) from None

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and _fold(key) in self._entries

    def __iter__(self) -> Iterator[str]:
        for key, _ in self._entries.values():
            yield key

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, name: str, default: Any = None) -> Any:
        """Return the value stored under ``name`` (any case) or ``default``."""
        if not isinstance(name, str):
            return default
        entry = self._entries.get(_fold(name))
        return default if entry is None else entry[1]

    def key_for(self, name: str) -> Optional[str]:
        """Return the stored spelling of ``name``, or None when missing."""
        entry = self._entries.get(_fold(name)) if isinstance(name, str) else None
        return None if entry is None else entry[0]

    def set(self, name: str, value: Any) -> "JsonObject":
        """Return a copy with ``name`` bound to ``value``."""
        entries = dict(self._entries)
        _put(entries, name, normalize(value))
        return JsonObject._adopt(entries)

    def remove(self, name: str) -> "JsonObject":
        """Return a copy without ``name``; the receiver itself if it is missing."""
        if name not in self:
            return self
        entries = dict(self._entries)
        del entries[_fold(name)]
        return JsonObject._adopt(entries)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain nested ``dict``/``list`` tree."""
        return to_native(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Mapping):
            return NotImplemented
        return equal(self, other)

    __hash__ = None

    def __repr__(self) -> str:
        body = ", ".join(f"{key!r}: {value!r}" for key, value in self._entries.values())
        return f"JsonObject({{{body}}})"


class JsonArray(Sequence):
    """Immutable ordered sequence of values."""

    __slots__ = ("_items",)

    def __init__(self, items: Iterable[Any] = ()):
        self._items = tuple(normalize(item) for item in items)

    @classmethod
    def _adopt(cls, items: Tuple[Any, ...]) -> "JsonArray":
        array = cls.__new__(cls)
        array._items = items
        return array

    def __getitem__(self, index):
        if isinstance(index, slice):
            return JsonArray._adopt(self._items[index])
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._items)

    def append(self, value: Any) -> "JsonArray":
        """Return a copy with ``value`` appended."""
        return JsonArray._adopt(self._items + (normalize(value),))

    def extend(self, values: Iterable[Any]) -> "JsonArray":
        """Return a copy with ``values`` appended."""
        return self + JsonArray(values)

    def __add__(self, other: Any) -> "JsonArray":
        if isinstance(other, JsonArray):
            return JsonArray._adopt(self._items + other._items)
        if isinstance(other, (list, tuple)):
            return JsonArray._adopt(self._items + JsonArray(other)._items)
        return NotImplemented

    def to_list(self) -> list:
        """Convert to a plain nested ``list``/``dict`` tree."""
        return to_native(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, (JsonArray, list, tuple)):
            return NotImplemented
        return equal(self, other)

    __hash__ = None

    def __repr__(self) -> str:
        return f"JsonArray({list(self._items)!r})"


class ObjectBuilder:
    """
    Mutable staging area for assembling a :class:`JsonObject`.

    Used by operations that apply many key changes at once so that the result
    is copied a single time instead of once per key.
    """

    def __init__(self, base: Optional[JsonObject] = None):
        self._entries: Dict[str, Tuple[str, Any]] = dict(base._entries) if base is not None else {}

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and _fold(key) in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str, default: Any = None) -> Any:
        entry = self._entries.get(_fold(key))
        return default if entry is None else entry[1]

    def set(self, key: str, value: Any) -> None:
        _put(self._entries, key, normalize(value))

    def remove(self, key: str) -> None:
        self._entries.pop(_fold(key), None)

    def build(self) -> JsonObject:
        return JsonObject._adopt(dict(self._entries))


def _put(entries: Dict[str, Tuple[str, Any]], key: Any, value: Any) -> None:
    if not isinstance(key, str):
        key = str(key)
    folded = _fold(key)
    existing = entries.get(folded)
    entries[folded] = (existing[0] if existing is not None else key, value)


def normalize(value: Any) -> Any:
    """
    Convert an external representation into the canonical value model.

    Canonical containers and known leaves pass through unchanged. Objects
    exposing ``__json_value__`` (the dynamic wrappers) are unwrapped, mappings
    become :class:`JsonObject`, lists and tuples become :class:`JsonArray`.
    Anything else is returned as an opaque leaf. Nesting depth is not limited
    by the interpreter's recursion limit.

    Args:
        value: Any Python value

    Returns:
        The canonical value

    Raises:
        DynamicJSONError: If a native container contains itself
    """
    return _rebuild(value, _unwrap, _native_children, _build_canonical)


def _unwrap(value: Any) -> Any:
    unwrap = getattr(type(value), "__json_value__", None)
    while unwrap is not None:
        value = unwrap(value)
        unwrap = getattr(type(value), "__json_value__", None)
    return value


def _native_children(value: Any) -> Optional[Tuple[Optional[list], list]]:
    if value is None or isinstance(value, (JsonObject, JsonArray) + _LEAF_TYPES):
        return None
    if isinstance(value, Mapping):
        items = list(value.items())
        return [key for key, _ in items], [item for _, item in items]
    if isinstance(value, (list, tuple)):
        return None, list(value)
    return None


def _build_canonical(keys: Optional[list], items: list) -> Any:
    if keys is None:
        return JsonArray._adopt(tuple(items))
    entries: Dict[str, Tuple[str, Any]] = {}
    for key, item in zip(keys, items):
        _put(entries, key, item)
    return JsonObject._adopt(entries)


def _rebuild(value: Any, prepare, expand, build) -> Any:
    """
    Rebuild a tree bottom-up with an explicit stack.

    ``prepare`` maps every node before inspection, ``expand`` returns
    ``(keys, children)`` for a container to descend into (``keys`` is None
    for sequences) or None for a node kept as is, and ``build`` assembles a
    container from its keys and rebuilt children.
    """
    value = prepare(value)
    expanded = expand(value)
    if expanded is None:
        return value

    active = {id(value)}
    stack = [(value, expanded[0], expanded[1], [])]
    while True:
        node, keys, children, results = stack[-1]
        if len(results) < len(children):
            child = prepare(children[len(results)])
            grandchildren = expand(child)
            if grandchildren is None:
                results.append(child)
            elif id(child) in active:
                raise DynamicJSONError("Circular reference in value", ErrorType.CIRCULAR)
            else:
                active.add(id(child))
                stack.append((child, grandchildren[0], grandchildren[1], []))
            continue

        stack.pop()
        active.discard(id(node))
        built = build(keys, results)
        if not stack:
            return built
        stack[-1][3].append(built)


def kind_of(value: Any) -> ValueKind:
    """Return the kind tag of a canonical value."""
    if value is None:
        return ValueKind.NULL
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, int):
        return ValueKind.INTEGER
    if isinstance(value, float):
        return ValueKind.FLOAT
    if isinstance(value, Decimal):
        return ValueKind.DECIMAL
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, datetime):
        return ValueKind.TIMESTAMP
    if isinstance(value, JsonObject):
        return ValueKind.OBJECT
    if isinstance(value, JsonArray):
        return ValueKind.ARRAY
    return ValueKind.OPAQUE


def equal(a: Any, b: Any) -> bool:
    """
    Structural equality over canonical values.

    Objects compare by case-insensitive key set and recursively equal values
    regardless of order; arrays compare positionally. The walk uses an
    explicit stack, so nesting depth is not limited by the interpreter's
    recursion limit.

    Args:
        a: First value
        b: Second value

    Returns:
        True if both values are structurally equal
    """
    stack = [(normalize(a), normalize(b))]
    while stack:
        left, right = stack.pop()
        if left is right:
            continue
        if isinstance(left, JsonObject) and isinstance(right, JsonObject):
            if len(left._entries) != len(right._entries):
                return False
            for folded, (_, value) in left._entries.items():
                other = right._entries.get(folded)
                if other is None:
                    return False
                stack.append((value, other[1]))
            continue
        if isinstance(left, JsonArray) and isinstance(right, JsonArray):
            if len(left._items) != len(right._items):
                return False
            stack.extend(zip(left._items, right._items))
            continue
        if not _leaf_equal(left, right):
            return False
    return True


def _leaf_equal(left: Any, right: Any) -> bool:
    if left is None or right is None:
        return False
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if isinstance(left, _NUMBER_TYPES) and isinstance(right, _NUMBER_TYPES):
        return _numbers_equal(left, right)
    if isinstance(left, str) and isinstance(right, str):
        return left == right
    if isinstance(left, datetime) and isinstance(right, datetime):
        return left == right
    # Containers of different kinds, mixed leaf kinds and distinct opaque leaves.
    return False


def _numbers_equal(left: Any, right: Any) -> bool:
    left_nan = _is_nan(left)
    right_nan = _is_nan(right)
    if left_nan or right_nan:
        return left_nan and right_nan
    return left == right


def _is_nan(number: Any) -> bool:
    if isinstance(number, float):
        return math.isnan(number)
    if isinstance(number, Decimal):
        return number.is_nan()
    return False


def to_native(value: Any) -> Any:
    """
    Convert a canonical value into plain ``dict``/``list`` containers.

    Leaves, including timestamps and decimals, are returned unchanged.
    """
    return _rebuild(normalize(value), _same, _canonical_children, _build_native)


def _same(value: Any) -> Any:
    return value


def _canonical_children(value: Any) -> Optional[Tuple[Optional[list], list]]:
    if isinstance(value, JsonObject):
        return list(value.keys()), list(value.values())
    if isinstance(value, JsonArray):
        return None, list(value)
    return None


def _build_native(keys: Optional[list], items: list) -> Any:
    if keys is None:
        return items
    return dict(zip(keys, items))
