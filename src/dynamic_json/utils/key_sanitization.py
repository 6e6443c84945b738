"""Key sanitization and de-duplication for objects built from raw JSON text."""

import logging
from typing import Any, Callable, Iterable, Optional, Tuple

from ..values import JsonObject, ObjectBuilder


class KeySanitizer:
    """
    Normalizes raw object keys into an attribute-friendly canonical form.

    Sanitizing keeps only the characters accepted by ``key_filter``
    (letters and digits by default). When two raw keys sanitize to the same
    name, ignoring case, the first occurrence keeps it and each later one gets
    the next unused numeric suffix (``2``, ``3``, ...) in encounter order.
    """

    def __init__(self, key_filter: Optional[Callable[[str], bool]] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the key sanitizer.

        Args:
            key_filter: Predicate deciding which characters are kept
            logger: Optional logger instance
        """
        self.key_filter = key_filter or str.isalnum
        self.logger = logger or logging.getLogger(__name__)

    def sanitize(self, key: str) -> str:
        """Return ``key`` with every character rejected by the filter removed."""
        if not key:
            return ""
        return "".join(char for char in key if self.key_filter(char))

    def build_object(self, pairs: Iterable[Tuple[str, Any]]) -> JsonObject:
        """
        Build an object from raw (key, value) pairs in encounter order.

        Args:
            pairs: Raw key/value pairs, duplicates allowed

        Returns:
            JsonObject with sanitized, de-duplicated keys
        """
        builder = ObjectBuilder()
        for raw_key, value in pairs:
            base = self.sanitize(raw_key)
            name = base
            suffix = 2
            while name in builder:
                name = f"{base}{suffix}"
                suffix += 1
            if name != raw_key:
                self.logger.debug(f"Key {raw_key!r} stored as {name!r}")
            builder.set(name, value)
        return builder.build()
