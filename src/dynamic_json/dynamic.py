"""Attribute-style wrappers over canonical values.

``DynamicObject`` and ``DynamicList`` let callers navigate loosely-typed data
with ``data.user.orders[0].id`` instead of nested lookups. The strict
wrappers raise on bad list indices; the safe variants never raise for
missing data. Wrappers hold an immutable value: assignment replaces the
wrapper's own backing object and never changes the value it was built from.
"""

from collections.abc import Mapping, Sequence
from typing import Any, Iterator, List, Optional, Type, TypeVar

from .mapping import as_type, as_type_lenient, try_as_type
from .parser import JSONParser
from .values import ABSENT, JsonArray, JsonObject, equal, normalize, to_native

T = TypeVar("T")

_SERIALIZER = JSONParser()


def materialize(value: Any, safe: bool = False) -> Any:
    """
    Wrap a value for attribute-style access.

    Args:
        value: Canonical or native value
        safe: Build the safe wrapper variants

    Returns:
        A DynamicObject or DynamicList (safe variants when ``safe``) for
        containers; leaves unchanged
    """
    value = normalize(value)
    if isinstance(value, JsonObject):
        return SafeDynamicObject(value) if safe else DynamicObject(value)
    if isinstance(value, JsonArray):
        return SafeDynamicList(value) if safe else DynamicList(value)
    return value


class DynamicObject:
    """
    Object wrapper with case-insensitive attribute and item access.

    A missing member reads as ``None``. Members named like the wrapper's own
    methods, or starting with an underscore, are reachable through item
    access only.

    Example:
        >>> order = DynamicObject({"Id": 7, "Lines": [{"Sku": "A1"}]})
        >>> order.id, order.lines[0].sku
        (7, 'A1')
    """

    __slots__ = ("_value",)

    _missing: Any = None
    _safe = False

    def __init__(self, value: Any = None):
        value = JsonObject() if value is None else normalize(value)
        if not isinstance(value, JsonObject):
            raise TypeError(f"{type(self).__name__} requires an object value, "
                            f"got {type(value).__name__}")
        object.__setattr__(self, "_value", value)

    @property
    def value(self) -> JsonObject:
        """The backing object."""
        return self._value

    def __json_value__(self) -> JsonObject:
        return self._value

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return self[name]

    def __getitem__(self, name: str) -> Any:
        item = self._value.get(name, ABSENT)
        if item is ABSENT:
            return self._missing
        return materialize(item, self._safe)

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_"):
            raise AttributeError(f"Cannot assign private attribute '{name}'")
        self[name] = value

    def __setitem__(self, name: str, value: Any) -> None:
        object.__setattr__(self, "_value", self._value.set(name, value))

    def __delattr__(self, name: str) -> None:
        del self[name]

    def __delitem__(self, name: str) -> None:
        object.__setattr__(self, "_value", self._value.remove(name))

    def __contains__(self, name: object) -> bool:
        return name in self._value

    def __iter__(self) -> Iterator[str]:
        return iter(self._value)

    def __len__(self) -> int:
        return len(self._value)

    def keys(self) -> List[str]:
        return list(self._value)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, DynamicObject):
            return equal(self._value, other._value)
        if isinstance(other, Mapping):
            return equal(self._value, other)
        return NotImplemented

    __hash__ = None

    def __dir__(self) -> List[str]:
        members = [key for key in self._value if key.isidentifier()]
        return sorted(set(super().__dir__()) | set(members))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({to_native(self._value)!r})"

    def to_json(self, indent: Optional[int] = None) -> str:
        """Serialize the backing object to JSON text."""
        return _SERIALIZER.serialize(self._value, indent=indent)

    def to_dict(self) -> dict:
        return to_native(self._value)

    def as_type(self, cls: Type[T]) -> T:
        """Map onto ``cls``; raises ConversionError on the first bad field."""
        return as_type(self._value, cls)

    def as_type_lenient(self, cls: Type[T]) -> T:
        """Map onto ``cls``, skipping fields that do not convert."""
        return as_type_lenient(self._value, cls)

    def try_as_type(self, cls: Type[T]) -> Optional[T]:
        """Map onto ``cls``; None when mapping fails."""
        return try_as_type(self._value, cls)


class SafeDynamicObject(DynamicObject):
    """Object wrapper whose missing members read as an empty string."""

    __slots__ = ()

    _missing = ""
    _safe = True


class DynamicList(Sequence):
    """
    Array wrapper with bounds-checked integer indexing.

    Negative indices are rejected. Elements that are containers are wrapped
    on access.
    """

    __slots__ = ("_value",)

    _safe = False

    def __init__(self, value: Any = ()):
        value = normalize(value)
        if not isinstance(value, JsonArray):
            raise TypeError(f"{type(self).__name__} requires an array value, "
                            f"got {type(value).__name__}")
        self._value = value

    @property
    def value(self) -> JsonArray:
        """The backing array."""
        return self._value

    def __json_value__(self) -> JsonArray:
        return self._value

    def __getitem__(self, index: int) -> Any:
        if isinstance(index, bool) or not isinstance(index, int):
            raise TypeError(f"{type(self).__name__} indices must be integers, "
                            f"not {type(index).__name__}")
        size = len(self._value)
        if not 0 <= index < size:
            if not size:
                raise IndexError(f"Index {index} is out of range for this {type(self).__name__}. "
                                 f"The list is empty.")
            raise IndexError(f"Index {index} is out of range for this {type(self).__name__}. "
                             f"Valid indices are 0 to {size - 1}.")
        return materialize(self._value[index], self._safe)

    def __len__(self) -> int:
        return len(self._value)

    def __iter__(self) -> Iterator[Any]:
        for item in self._value:
            yield materialize(item, self._safe)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, DynamicList):
            return equal(self._value, other._value)
        if isinstance(other, (list, tuple, JsonArray)):
            return equal(self._value, other)
        return NotImplemented

    __hash__ = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({to_native(self._value)!r})"

    def first(self) -> Any:
        """Return the first object or array element, wrapped; None if there is none."""
        for item in self._value:
            if isinstance(item, (JsonObject, JsonArray)):
                return materialize(item, self._safe)
        return None

    def to_list(self, cls: Type[T]) -> List[T]:
        """
        Map every object element onto ``cls``.

        Elements that are not objects are skipped.

        Raises:
            ConversionError: If an object element cannot be mapped
        """
        return [as_type(item, cls) for item in self._value if isinstance(item, JsonObject)]

    def to_scalar_list(self, item_type: Type[T]) -> List[T]:
        """
        Return the elements that are instances of ``item_type``.

        Booleans only match ``bool``, even though ``bool`` subclasses ``int``.
        """
        return [item for item in self._value
                if isinstance(item, item_type)
                and (item_type is bool or not isinstance(item, bool))]

    def to_json(self, indent: Optional[int] = None) -> str:
        """Serialize the backing array to JSON text."""
        return _SERIALIZER.serialize(self._value, indent=indent)


class SafeDynamicList(DynamicList):
    """Array wrapper whose bad or out-of-range indices read as None."""

    __slots__ = ()

    _safe = True

    def __getitem__(self, index: int) -> Any:
        try:
            return super().__getitem__(index)
        except (IndexError, TypeError):
            return None

    def first_as(self, cls: Type[T]) -> T:
        """
        Map the first object element onto ``cls``.

        Raises:
            LookupError: If the list holds no object
        """
        result = self.first_or_default(cls)
        if result is None:
            raise LookupError(f"{type(self).__name__} contains no object to map to {cls.__name__}")
        return result

    def first_or_default(self, cls: Type[T]) -> Optional[T]:
        """Map the first object element onto ``cls``; None if the list holds no object."""
        for item in self._value:
            if isinstance(item, JsonObject):
                return as_type(item, cls)
        return None
