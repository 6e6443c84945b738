"""Immutable, structurally comparable addresses into a value graph."""

import re
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Tuple

from .types import InvalidIndex, InvalidPath, SegmentKind

_SEGMENT_PATTERN = re.compile(r"/([^/\[]+)|\[([0-9]+)\]")


@dataclass(frozen=True)
class Segment:
    """
    One step of a :class:`JsonPath`.

    A property segment carries a non-empty ``property_name``; an index segment
    carries a non-negative ``array_index``.
    """

    kind: SegmentKind
    property_name: Optional[str] = None
    array_index: Optional[int] = None

    def __post_init__(self):
        """Validate segment after initialization."""
        self._validate()

    def _validate(self) -> None:
        if self.kind is SegmentKind.PROPERTY:
            if not isinstance(self.property_name, str) or not self.property_name:
                raise InvalidPath("Property name cannot be empty", context=self.property_name)
            if self.array_index is not None:
                raise InvalidPath("Property segment cannot carry an index")
        elif self.kind is SegmentKind.INDEX:
            index = self.array_index
            if isinstance(index, bool) or not isinstance(index, int):
                raise InvalidIndex(f"Index must be an integer, got {type(index).__name__}",
                                   context=index)
            if index < 0:
                raise InvalidIndex(f"Index must be non-negative, got {index}", context=index)
            if self.property_name is not None:
                raise InvalidPath("Index segment cannot carry a property name")
        else:
            raise InvalidPath(f"Invalid segment kind: {self.kind!r}")

    @classmethod
    def for_property(cls, name: str) -> "Segment":
        return cls(SegmentKind.PROPERTY, property_name=name)

    @classmethod
    def for_index(cls, index: int) -> "Segment":
        return cls(SegmentKind.INDEX, array_index=index)

    @property
    def is_property(self) -> bool:
        return self.kind is SegmentKind.PROPERTY

    def __str__(self) -> str:
        if self.kind is SegmentKind.PROPERTY:
            return f"/{self.property_name}"
        return f"[{self.array_index}]"


class JsonPath:
    """
    Ordered, immutable sequence of segments addressing a location in a value.

    The canonical string form renders the root as ``/``, each property as
    ``/name`` and each index as ``[i]``, e.g. ``/user/orders[0]/id``.
    Two paths are equal, and hash alike, whenever their segments are equal.
    Paths hold no reference to any value.

    Example:
        >>> str(JsonPath.root().property("user").index(0))
        '/user[0]'
    """

    __slots__ = ("_segments",)

    def __init__(self, segments: Iterable[Segment] = ()):
        segments = tuple(segments)
        for segment in segments:
            if not isinstance(segment, Segment):
                raise InvalidPath(f"Expected Segment, got {type(segment).__name__}")
        self._segments: Tuple[Segment, ...] = segments

    @classmethod
    def root(cls) -> "JsonPath":
        """Return the path with zero segments."""
        return ROOT

    # Read-only accessors come before the `property` builder below, which
    # would otherwise shadow the decorator inside the class body.

    @property
    def segments(self) -> Tuple[Segment, ...]:
        return self._segments

    @property
    def is_root(self) -> bool:
        return not self._segments

    @property
    def parent(self) -> Optional["JsonPath"]:
        """Path without its last segment; None for the root."""
        if not self._segments:
            return None
        return JsonPath(self._segments[:-1])

    @property
    def last(self) -> Optional[Segment]:
        return self._segments[-1] if self._segments else None

    def property(self, name: str) -> "JsonPath":
        """
        Return a new path extended by a property segment.

        Raises:
            InvalidPath: If ``name`` is empty or not a string
        """
        return JsonPath(self._segments + (Segment.for_property(name),))

    def index(self, index: int) -> "JsonPath":
        """
        Return a new path extended by an index segment.

        Raises:
            InvalidIndex: If ``index`` is negative or not an integer
        """
        return JsonPath(self._segments + (Segment.for_index(index),))

    def starts_with(self, other: "JsonPath") -> bool:
        """Check whether ``other`` is a prefix of this path."""
        prefix = other._segments
        return self._segments[:len(prefix)] == prefix

    @classmethod
    def parse(cls, text: str) -> "JsonPath":
        """
        Parse the canonical string form of a path.

        Args:
            text: Path string such as ``/user/orders[0]/id``

        Returns:
            The parsed JsonPath

        Raises:
            InvalidPath: If the text does not follow the path grammar
        """
        if not isinstance(text, str):
            raise InvalidPath(f"Path must be a string, got {type(text).__name__}", context=text)
        if text in ("", "/"):
            return ROOT

        segments = []
        position = 0
        while position < len(text):
            match = _SEGMENT_PATTERN.match(text, position)
            if match is None:
                raise InvalidPath(f"Invalid path '{text}' at position {position}", context=text)
            name, digits = match.groups()
            if name is not None:
                segments.append(Segment.for_property(name))
            else:
                segments.append(Segment.for_index(int(digits)))
            position = match.end()
        return cls(segments)

    @classmethod
    def try_parse(cls, text: str) -> Optional["JsonPath"]:
        """Parse a path string, returning None instead of raising."""
        try:
            return cls.parse(text)
        except InvalidPath:
            return None

    def __len__(self) -> int:
        return len(self._segments)

    def __iter__(self) -> Iterator[Segment]:
        return iter(self._segments)

    def __getitem__(self, item):
        if isinstance(item, slice):
            return JsonPath(self._segments[item])
        return self._segments[item]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, JsonPath):
            return NotImplemented
        return self._segments == other._segments

    def __hash__(self) -> int:
        return hash(self._segments)

    def __str__(self) -> str:
        if not self._segments:
            return "/"
        return "".join(str(segment) for segment in self._segments)

    def __repr__(self) -> str:
        return f"JsonPath({str(self)!r})"


ROOT = JsonPath()
