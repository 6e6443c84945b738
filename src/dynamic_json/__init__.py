"""
Dynamic JSON - structural operations over loosely-typed JSON data.

Provides a canonical value model with case-insensitive objects, merge-patch
diff and application, path-aware change lists, deep merge, path navigation
and attribute-style wrappers.
"""

__version__ = "1.0.0"

from .diff import apply_patch, diff
from .dynamic import DynamicList, DynamicObject, SafeDynamicList, SafeDynamicObject, materialize
from .dynamic_json import DynamicJSON
from .mapping import as_type, as_type_lenient, coerce, try_as_type
from .merge import merge, merge_all
from .models import DiffEntry
from .navigation import get_at_path, is_valid_for, try_get_at_path
from .parser import JSONParser
from .path import ROOT, JsonPath, Segment
from .path_diff import diff_with_paths
from .types import (
    ConversionError,
    DiffKind,
    DiffResult,
    DocumentTooDeep,
    DynamicJSONError,
    ErrorType,
    InvalidIndex,
    InvalidPath,
    PathNotFound,
    SegmentKind,
    ValueKind,
)
from .values import (
    ABSENT,
    JsonArray,
    JsonObject,
    ObjectBuilder,
    Timestamp,
    equal,
    kind_of,
    normalize,
    to_native,
)

__all__ = [
    "DynamicJSON",
    "JSONParser",
    "JsonObject",
    "JsonArray",
    "ObjectBuilder",
    "Timestamp",
    "ABSENT",
    "normalize",
    "equal",
    "kind_of",
    "to_native",
    "JsonPath",
    "Segment",
    "ROOT",
    "try_get_at_path",
    "get_at_path",
    "is_valid_for",
    "diff",
    "apply_patch",
    "diff_with_paths",
    "DiffEntry",
    "merge",
    "merge_all",
    "materialize",
    "DynamicObject",
    "SafeDynamicObject",
    "DynamicList",
    "SafeDynamicList",
    "as_type",
    "as_type_lenient",
    "try_as_type",
    "coerce",
    "ValueKind",
    "SegmentKind",
    "DiffKind",
    "ErrorType",
    "DiffResult",
    "DynamicJSONError",
    "InvalidPath",
    "InvalidIndex",
    "PathNotFound",
    "ConversionError",
    "DocumentTooDeep",
]
