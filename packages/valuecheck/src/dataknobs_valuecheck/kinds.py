"""Value kinds and the scalar helpers shared by the checks.

Every runtime value maps onto exactly one member of the closed
:class:`ValueKind` enumeration. Type constraints are expressed in terms of
these kinds (plus the ``scalar`` pseudo-kind) rather than raw Python types,
so a rule such as ``types: [integer, double]`` reads the same whether it
comes from code, YAML or JSON.
"""

from __future__ import annotations

import io
import mmap
import numbers
import re
import socket
from collections.abc import Mapping, Sequence, Set
from decimal import Decimal
from enum import Enum
from typing import Any

from .exceptions import InvalidConfigurationError


class ValueKind(str, Enum):
    """Closed set of value kinds a type constraint can name."""

    BOOLEAN = "boolean"
    INTEGER = "integer"
    DOUBLE = "double"
    STRING = "string"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    RESOURCE = "resource"
    OBJECT = "object"
    NULL = "null"


SCALAR_TAG = "scalar"

SCALAR_KINDS = frozenset({
    ValueKind.BOOLEAN,
    ValueKind.INTEGER,
    ValueKind.DOUBLE,
    ValueKind.STRING,
})

TYPE_ALIASES: dict[str, str] = {
    "int": ValueKind.INTEGER.value,
    "float": ValueKind.DOUBLE.value,
    "bool": ValueKind.BOOLEAN.value,
    "str": ValueKind.STRING.value,
    "list": ValueKind.SEQUENCE.value,
    "tuple": ValueKind.SEQUENCE.value,
    "array": ValueKind.SEQUENCE.value,
    "dict": ValueKind.MAPPING.value,
    "none": ValueKind.NULL.value,
    "NULL": ValueKind.NULL.value,
}

_KNOWN_TAGS = frozenset(kind.value for kind in ValueKind) | {SCALAR_TAG}

_RESOURCE_TYPES: tuple[tuple[type, str], ...] = (
    (io.IOBase, "stream"),
    (socket.socket, "socket"),
    (mmap.mmap, "mmap"),
)

_NUMERIC_STRING = re.compile(
    r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?\s*$"
)
_INTEGER_STRING = re.compile(r"^\s*[+-]?\d+\s*$")


def normalize_type_tag(tag: str, key: str = "types") -> str:
    """Resolve aliases such as ``int`` and ``float`` to their canonical tag.

    Raises:
        InvalidConfigurationError: If the tag names no known kind
    """
    tag = TYPE_ALIASES.get(tag, tag)
    if tag not in _KNOWN_TAGS:
        raise InvalidConfigurationError(
            key,
            f"known type names ({', '.join(sorted(_KNOWN_TAGS))})",
            f'Unknown type "{tag}"',
        )
    return tag


def resource_type_of(value: Any) -> str | None:
    """Return the handle subtype of a resource value, or None."""
    for handle_type, name in _RESOURCE_TYPES:
        if isinstance(value, handle_type):
            return name
    return None


def kind_of(value: Any) -> ValueKind:
    """Classify a value into its :class:`ValueKind`."""
    if value is None:
        return ValueKind.NULL
    # bool is an Integral, so it has to be tested first
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, numbers.Integral):
        return ValueKind.INTEGER
    if isinstance(value, (numbers.Real, Decimal)):
        return ValueKind.DOUBLE
    if isinstance(value, (str, bytes, bytearray)):
        return ValueKind.STRING
    if resource_type_of(value) is not None:
        return ValueKind.RESOURCE
    if isinstance(value, Mapping):
        return ValueKind.MAPPING
    if isinstance(value, (Sequence, Set)):
        return ValueKind.SEQUENCE
    return ValueKind.OBJECT


def is_scalar(value: Any) -> bool:
    return kind_of(value) in SCALAR_KINDS


def is_sequence(value: Any) -> bool:
    return kind_of(value) is ValueKind.SEQUENCE


def scalar_text(value: Any) -> str | bytes:
    """Textual form of a scalar used for length, regex and nocase checks.

    Booleans render as ``"1"`` and ``"0"``.
    """
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    return str(value)


def byte_length(value: Any) -> int:
    text = scalar_text(value)
    if isinstance(text, bytes):
        return len(text)
    return len(text.encode("utf-8", errors="surrogatepass"))


def char_length(value: Any) -> int:
    text = scalar_text(value)
    if isinstance(text, bytes):
        text = text.decode("utf-8", errors="replace")
    return len(text)


def as_number(value: Any) -> int | float | Decimal | numbers.Real | None:
    """Return the numeric value of numbers and numeric strings.

    Booleans are not numeric, and neither are Decimal NaNs since they cannot
    be ordered. Integer strings too long for ``int`` are read as Decimal.
    Returns None for anything that is not numeric.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return None if value.is_nan() else value
    if isinstance(value, numbers.Real):
        return value
    if isinstance(value, (bytes, bytearray)):
        try:
            value = bytes(value).decode("ascii")
        except UnicodeDecodeError:
            return None
    if isinstance(value, str) and _NUMERIC_STRING.match(value):
        if _INTEGER_STRING.match(value):
            try:
                return int(value)
            except ValueError:
                # Over the interpreter's int string conversion limit
                return Decimal(value.strip())
        return float(value)
    return None
