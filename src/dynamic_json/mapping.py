"""Typed record mapping: copy object values into dataclasses and annotated classes."""

import collections.abc
import dataclasses
import logging
import math
import types
from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from functools import lru_cache
from typing import Any, Dict, Optional, Tuple, Type, TypeVar, Union, get_args, get_origin, get_type_hints

from .parser import parse_timestamp
from .types import ConversionError
from .utils.key_sanitization import KeySanitizer
from .values import JsonArray, JsonObject, format_timestamp, kind_of, normalize

T = TypeVar("T")

logger = logging.getLogger(__name__)

_SANITIZER = KeySanitizer()

_SEQUENCE_ORIGINS = (list, tuple, set, frozenset, collections.abc.Sequence,
                     collections.abc.Iterable, collections.abc.Collection,
                     collections.abc.Set, collections.abc.MutableSequence)
_MAPPING_ORIGINS = (dict, collections.abc.Mapping, collections.abc.MutableMapping)
_UNION_ORIGINS = (Union, getattr(types, "UnionType", Union))


def _match_key(name: str) -> str:
    return _SANITIZER.sanitize(name).casefold()


@lru_cache(maxsize=None)
def _field_table(cls: type) -> Dict[str, Tuple[str, Any]]:
    """
    Build the field table of a record class.

    Maps the sanitized, case-folded field name to (attribute name, type).
    The returned dict is shared between callers and must not be modified.
    """
    try:
        hints = get_type_hints(cls)
    except (NameError, TypeError):
        hints = dict(getattr(cls, "__annotations__", {}))

    if dataclasses.is_dataclass(cls):
        names = [field.name for field in dataclasses.fields(cls) if field.init]
    else:
        names = [name for name in hints if not name.startswith("_")]

    table: Dict[str, Tuple[str, Any]] = {}
    for name in names:
        table.setdefault(_match_key(name), (name, hints.get(name, Any)))
    return table


def _is_record(cls: Any) -> bool:
    if not isinstance(cls, type) or cls.__module__ == "builtins":
        return False
    return dataclasses.is_dataclass(cls) or bool(_field_table(cls))


def _type_name(target: Any) -> str:
    return getattr(target, "__name__", None) or str(target)


def coerce(value: Any, target_type: Any) -> Any:
    """
    Convert a value to ``target_type``.

    Handles ``Any``, ``Optional``/``Union``, ``bool``, ``int``, ``float``,
    ``Decimal``, ``str``, ``datetime``, enums, list/tuple/set and dict
    generics, and nested record classes. ``None`` converts to ``None`` for
    every target.

    Args:
        value: Canonical, native or wrapped value
        target_type: Type or typing construct to convert to

    Returns:
        The converted value

    Raises:
        ConversionError: If the value cannot be represented as the target
    """
    return _coerce(normalize(value), target_type, False)


def _coerce(value: Any, target: Any, lenient: bool) -> Any:
    if target is Any or target is object or isinstance(target, (str, TypeVar)):
        return value

    origin = get_origin(target)
    args = get_args(target)

    if origin in _UNION_ORIGINS:
        if value is None:
            return None
        errors = []
        for option in args:
            if option is type(None):
                continue
            try:
                return _coerce(value, option, lenient)
            except ConversionError as e:
                errors.append(str(e))
        raise ConversionError(f"Cannot convert {kind_of(value).value} value to {target}",
                              context=errors)

    if value is None:
        return None

    if origin in _SEQUENCE_ORIGINS or target in (list, tuple, set, frozenset):
        return _coerce_sequence(value, origin or target, args, lenient)
    if origin in _MAPPING_ORIGINS or target is dict:
        return _coerce_mapping(value, args, lenient)
    if origin is not None:
        raise ConversionError(f"Unsupported target type {target}")

    if target is bool:
        return _to_bool(value)
    if target is int:
        return _to_int(value)
    if target is float:
        return _to_float(value)
    if target is Decimal:
        return _to_decimal(value)
    if target is str:
        return _to_str(value)
    if target is datetime:
        return _to_datetime(value)
    if isinstance(target, type) and issubclass(target, Enum):
        try:
            return target(value)
        except ValueError:
            raise ConversionError(f"{value!r} is not a valid {target.__name__}") from None

    if isinstance(value, JsonObject) and _is_record(target):
        return _map_object(value, target, lenient)
    if isinstance(target, type) and isinstance(value, target):
        return value

    raise ConversionError(f"Cannot convert {kind_of(value).value} value to {_type_name(target)}")


def _coerce_sequence(value: Any, container: Any, args: Tuple[Any, ...], lenient: bool) -> Any:
    if not isinstance(value, JsonArray):
        raise ConversionError(f"Expected an array, got {kind_of(value).value}")

    if container is tuple and args and not (len(args) == 2 and args[1] is Ellipsis):
        if len(args) != len(value):
            raise ConversionError(f"Expected {len(args)} elements, got {len(value)}")
        return tuple(_coerce(item, arg, lenient) for item, arg in zip(value, args))

    item_type = args[0] if args else Any
    items = [_coerce(item, item_type, lenient) for item in value]
    if container is tuple:
        return tuple(items)
    if container in (set, collections.abc.Set):
        return set(items)
    if container is frozenset:
        return frozenset(items)
    return items


def _coerce_mapping(value: Any, args: Tuple[Any, ...], lenient: bool) -> Dict[str, Any]:
    if not isinstance(value, JsonObject):
        raise ConversionError(f"Expected an object, got {kind_of(value).value}")
    item_type = args[1] if len(args) == 2 else Any
    return {key: _coerce(item, item_type, lenient) for key, item in value.items()}


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ("true", "false"):
        return value.lower() == "true"
    raise ConversionError(f"Cannot convert {kind_of(value).value} value to bool")


def _to_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ConversionError("Cannot convert bool value to int")
    if isinstance(value, int):
        return value
    if isinstance(value, (float, Decimal)):
        if math.isfinite(value) and value == int(value):
            return int(value)
        raise ConversionError(f"Number {value} is not integral")
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            raise ConversionError(f"String {value!r} is not an integer") from None
    raise ConversionError(f"Cannot convert {kind_of(value).value} value to int")


def _to_float(value: Any) -> float:
    if isinstance(value, bool):
        raise ConversionError("Cannot convert bool value to float")
    if isinstance(value, (int, float, Decimal)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            raise ConversionError(f"String {value!r} is not a number") from None
    raise ConversionError(f"Cannot convert {kind_of(value).value} value to float")


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, bool):
        raise ConversionError("Cannot convert bool value to Decimal")
    if isinstance(value, (int, Decimal)):
        return Decimal(value)
    if isinstance(value, (float, str)):
        try:
            return Decimal(str(value))
        except InvalidOperation:
            raise ConversionError(f"Value {value!r} is not a decimal number") from None
    raise ConversionError(f"Cannot convert {kind_of(value).value} value to Decimal")


def _to_str(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float, Decimal)):
        return str(value)
    if isinstance(value, datetime):
        return format_timestamp(value)
    raise ConversionError(f"Cannot convert {kind_of(value).value} value to str")


def _to_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        parsed = parse_timestamp(value)
        if parsed is not None:
            return parsed
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            raise ConversionError(f"String {value!r} is not an ISO-8601 timestamp") from None
    raise ConversionError(f"Cannot convert {kind_of(value).value} value to datetime")


def _map_object(obj: JsonObject, cls: type, lenient: bool) -> Any:
    table = _field_table(cls)
    values: Dict[str, Any] = {}

    for key, item in obj.items():
        field = table.get(_match_key(key))
        if field is None or field[0] in values:
            continue
        name, hint = field
        try:
            values[name] = _coerce(item, hint, lenient)
        except ConversionError as e:
            if not lenient:
                raise ConversionError(f"Cannot map field '{name}' of {cls.__name__}: {e}",
                                      context=name) from e
            logger.debug(f"Skipped field '{name}' of {cls.__name__}: {e}")

    return _construct(cls, values)


def _construct(cls: type, values: Dict[str, Any]) -> Any:
    if dataclasses.is_dataclass(cls):
        try:
            return cls(**values)
        except TypeError as e:
            raise ConversionError(f"Cannot construct {cls.__name__}: {e}") from e

    try:
        instance = cls()
    except TypeError as e:
        raise ConversionError(f"Cannot construct {cls.__name__}: {e}") from e
    for name, item in values.items():
        setattr(instance, name, item)
    return instance


def _map_root(value: Any, cls: type, lenient: bool) -> Any:
    value = normalize(value)
    if value is None:
        raise ConversionError(f"Cannot map null value to {_type_name(cls)}")
    return _coerce(value, cls, lenient)


def as_type(value: Any, cls: Type[T]) -> T:
    """
    Map a value onto ``cls``, failing on the first field that does not convert.

    Object keys match field names case-insensitively after sanitization, so
    ``first_name`` accepts ``FirstName``. When several keys match one field
    the first wins; keys without a field are ignored. An instance of ``cls``
    passes through unchanged.

    Args:
        value: Object value (canonical, native or dynamic wrapper)
        cls: Dataclass or annotated class

    Returns:
        The mapped instance

    Raises:
        ConversionError: If a field or the value itself cannot be converted
    """
    return _map_root(value, cls, False)


def as_type_lenient(value: Any, cls: Type[T]) -> T:
    """
    Map a value onto ``cls``, skipping fields that do not convert.

    Skipped fields keep their defaults. Failing to construct the instance
    itself still raises.

    Raises:
        ConversionError: If the value is not an object or ``cls`` cannot be built
    """
    return _map_root(value, cls, True)


def try_as_type(value: Any, cls: Type[T]) -> Optional[T]:
    """Strict mapping that reports failure as None instead of raising."""
    try:
        return as_type(value, cls)
    except ConversionError:
        return None
