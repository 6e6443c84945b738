"""JSON text parsing into canonical values, and serialization back to text."""

import json
import logging
import re
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, List, Optional, Tuple

from .error_handler import ErrorHandler
from .utils.key_sanitization import KeySanitizer
from .values import JsonArray, JsonObject, ObjectBuilder, Timestamp, format_timestamp, to_native

_TIMESTAMP_PATTERN = re.compile(
    r"^\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}(:\d{2}(\.\d{1,6})?)?(Z|[+-]\d{2}:?\d{2})?$"
)


class _Pairs(list):
    """Raw object members in document order, duplicates included."""


class JSONParser:
    """
    JSON parser producing canonical values.

    Objects become :class:`JsonObject` (optionally with sanitized,
    de-duplicated keys), arrays become :class:`JsonArray`, integers stay
    ``int`` and other numbers become ``float`` or ``Decimal``. Strings holding
    an ISO-8601 date-time are turned into ``datetime`` values.
    """

    def __init__(self, error_handler: Optional[ErrorHandler] = None,
                 logger: Optional[logging.Logger] = None,
                 parse_timestamps: bool = True,
                 use_decimal: bool = False,
                 sanitize_keys: bool = False,
                 key_filter: Optional[Callable[[str], bool]] = None):
        """
        Initialize the JSON parser.

        Args:
            error_handler: Optional ErrorHandler instance
            logger: Optional logger instance
            parse_timestamps: Convert ISO-8601 date-time strings to datetime
            use_decimal: Parse non-integral numbers as Decimal instead of float
            sanitize_keys: Sanitize and de-duplicate object keys
            key_filter: Character predicate used when sanitizing keys
        """
        self.logger = logger or logging.getLogger(__name__)
        self.error_handler = error_handler or ErrorHandler(self.logger)
        self.parse_timestamps = parse_timestamps
        self.use_decimal = use_decimal
        self.key_sanitizer = KeySanitizer(key_filter, self.logger) if sanitize_keys else None

    def parse(self, json_string: str) -> Any:
        """
        Parse JSON text into a canonical value.

        Args:
            json_string: JSON text; any root type is accepted

        Returns:
            The canonical value

        Raises:
            ValueError: If the text is empty or not valid JSON
        """
        validation_result = self.error_handler.validate_input(json_string)
        if not validation_result.is_valid:
            error_messages = [error.message for error in validation_result.errors]
            raise ValueError(f"Invalid JSON input: {'; '.join(error_messages)}")

        try:
            raw = json.loads(
                json_string,
                object_pairs_hook=_Pairs,
                parse_float=Decimal if self.use_decimal else float,
            )
        except json.JSONDecodeError as e:
            raise ValueError(f"JSON parsing failed: {e.msg} at line {e.lineno}, column {e.colno}")

        try:
            value = self._convert(raw)
        except RecursionError:
            raise ValueError("JSON parsing failed: document is nested too deeply")
        self.logger.debug(f"Parsed JSON document of {len(json_string)} characters")
        return value

    def parse_document(self, json_string: str) -> Any:
        """
        Parse JSON text whose root must be an object or an array.

        Raises:
            ValueError: If the text is invalid or the root is a primitive
        """
        value = self.parse(json_string)
        if not isinstance(value, (JsonObject, JsonArray)):
            raise ValueError(f"Unsupported root data type: {type(value).__name__}")
        return value

    def serialize(self, value: Any, indent: Optional[int] = None) -> str:
        """
        Serialize a value (canonical, native or dynamic wrapper) to JSON text.

        Timestamps read from text are written back exactly as they were
        read; other datetimes are written as ISO-8601 with ``Z`` for UTC.
        Integral decimals are written exactly; other decimals go through
        ``float``.

        Args:
            value: Value to serialize
            indent: Optional indentation width

        Returns:
            JSON text
        """
        return json.dumps(to_native(value), indent=indent,
                          ensure_ascii=False, default=_encode_leaf)

    def _convert(self, raw: Any) -> Any:
        if isinstance(raw, _Pairs):
            pairs = [(key, self._convert(item)) for key, item in raw]
            return self._build_object(pairs)
        if isinstance(raw, list):
            return JsonArray(self._convert(item) for item in raw)
        if isinstance(raw, str) and self.parse_timestamps:
            return parse_timestamp(raw) or raw
        return raw

    def _build_object(self, pairs: List[Tuple[str, Any]]) -> JsonObject:
        if self.key_sanitizer is not None:
            return self.key_sanitizer.build_object(pairs)
        builder = ObjectBuilder()
        for key, item in pairs:
            builder.set(key, item)
        return builder.build()


def parse_timestamp(text: str) -> Optional[Timestamp]:
    """
    Parse an ISO-8601 date-time string.

    Date-only strings are not treated as timestamps.

    Returns:
        A Timestamp remembering ``text``, or None when ``text`` is not a
        date-time
    """
    if not _TIMESTAMP_PATTERN.match(text):
        return None
    candidate = text[:-1] + "+00:00" if text.endswith("Z") else text
    try:
        parsed = datetime.fromisoformat(candidate)
    except ValueError:
        return None
    return Timestamp.from_text(text, parsed)


def _decimal_number(value: Decimal) -> Any:
    if value.is_finite() and value == value.to_integral_value():
        return int(value)
    return float(value)


def _encode_leaf(value: Any) -> Any:
    if isinstance(value, datetime):
        return format_timestamp(value)
    if isinstance(value, Decimal):
        return _decimal_number(value)
    return str(value)
