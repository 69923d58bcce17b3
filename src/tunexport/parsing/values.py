"""Kinds of scalar and container values found in a decoded property list.

``plistlib`` hands us plain Python objects. ``kind_of`` maps each of them to
one :class:`ValueKind` so the field tables can state what they expect and
report what they got.
"""

from datetime import datetime
from enum import Enum
from typing import Any


class ValueKind(Enum):
    """Node kinds of a property list document."""
    STRING = "string"
    INTEGER = "integer"
    REAL = "real"
    BOOLEAN = "boolean"
    DATE = "date"
    DATA = "data"
    DICTIONARY = "dictionary"
    ARRAY = "array"
    UNKNOWN = "unknown"


def kind_of(value: Any) -> ValueKind:
    """Classify a decoded property list value."""
    # bool is a subclass of int, check it first
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, int):
        return ValueKind.INTEGER
    if isinstance(value, float):
        return ValueKind.REAL
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, datetime):
        return ValueKind.DATE
    if isinstance(value, (bytes, bytearray)):
        return ValueKind.DATA
    if isinstance(value, dict):
        return ValueKind.DICTIONARY
    if isinstance(value, (list, tuple)):
        return ValueKind.ARRAY
    return ValueKind.UNKNOWN


def short_repr(value: Any, limit: int = 60) -> str:
    """A log-friendly representation of a value, truncated for big blobs."""
    text = repr(value)
    if len(text) > limit:
        return text[:limit - 3] + "..."
    return text
