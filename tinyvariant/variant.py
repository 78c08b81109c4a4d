"""Storage for a single JSON value: null, boolean, number, string or collection."""

from __future__ import annotations

import math
import re
import struct
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Optional, Union

VERSION = "7.4.1"
VERSION_MAJOR = 7
VERSION_MINOR = 4
VERSION_REVISION = 1

TINY_STRING_MAX_LENGTH = 3

_INT32_RANGE = (-(2**31), 2**31 - 1)
_UINT32_RANGE = (0, 2**32 - 1)
_INT64_RANGE = (-(2**63), 2**63 - 1)
_UINT64_RANGE = (0, 2**64 - 1)

_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_INTEGER_RE = re.compile(r"[+-]?\d+")


class VariantType(Enum):
    """The kind of value a VariantData holds."""

    NULL = auto()
    BOOLEAN = auto()
    INT32 = auto()
    UINT32 = auto()
    INT64 = auto()
    UINT64 = auto()
    FLOAT = auto()
    DOUBLE = auto()
    TINY_STRING = auto()
    LINKED_STRING = auto()
    OWNED_STRING = auto()
    RAW_STRING = auto()
    ARRAY = auto()
    OBJECT = auto()


_INTEGER_TYPES = frozenset(
    {VariantType.INT32, VariantType.UINT32, VariantType.INT64, VariantType.UINT64}
)
_FLOAT_TYPES = frozenset({VariantType.FLOAT, VariantType.DOUBLE})
_NUMBER_TYPES = _INTEGER_TYPES | _FLOAT_TYPES
_STRING_TYPES = frozenset(
    {VariantType.TINY_STRING, VariantType.LINKED_STRING, VariantType.OWNED_STRING}
)
_COLLECTION_TYPES = frozenset({VariantType.ARRAY, VariantType.OBJECT})


@dataclass(frozen=True)
class RawString:
    """A piece of already serialized JSON, stored and emitted verbatim."""

    data: str

    def __len__(self) -> int:
        return len(self.data)

    def __str__(self) -> str:
        return self.data


class VariantDataVisitor:
    """Base visitor: every visit returns the default result."""

    def __init__(self, default: Any = None) -> None:
        self.default = default

    def visit(self, value: Any) -> Any:
        return self.default


def is_tiny_string(s: Union[str, bytes, None]) -> bool:
    """Return True if ``s`` fits inline: short enough and free of NUL bytes."""
    if s is None:
        return False
    raw = s.encode("utf-8") if isinstance(s, str) else bytes(s)
    if len(raw) > TINY_STRING_MAX_LENGTH:
        return False
    return b"\x00" not in raw


def _to_float32(value: float) -> float:
    try:
        return struct.unpack("<f", struct.pack("<f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def _int_range(bits: int, signed: bool) -> tuple[int, int]:
    if bits <= 0:
        raise ValueError("bits must be positive")
    if signed:
        return -(2 ** (bits - 1)), 2 ** (bits - 1) - 1
    return 0, 2**bits - 1


def _convert_to_int(value: Union[int, float], bits: int, signed: bool) -> int:
    low, high = _int_range(bits, signed)
    if isinstance(value, float):
        if not math.isfinite(value) or not low <= value <= high:
            return 0
        return int(value)
    return value if low <= value <= high else 0


def _parse_number(text: str) -> Optional[Union[int, float]]:
    stripped = text.strip()
    lowered = stripped.lower()
    if lowered in ("nan", "+nan", "-nan"):
        return math.nan
    if lowered in ("inf", "+inf", "infinity", "+infinity"):
        return math.inf
    if lowered in ("-inf", "-infinity"):
        return -math.inf
    if _INTEGER_RE.fullmatch(stripped):
        return int(stripped)
    if _NUMBER_RE.fullmatch(stripped):
        return float(stripped)
    return None


class VariantData:
    """A mutable slot holding one JSON value."""

    __slots__ = ("_type", "_content")

    def __init__(self) -> None:
        self._type = VariantType.NULL
        self._content: Any = None

    def __repr__(self) -> str:
        return f"VariantData({self._type.name}, {self._content!r})"

    @property
    def type(self) -> VariantType:
        return self._type

    # -- visiting -------------------------------------------------------

    def accept(self, visitor: VariantDataVisitor) -> Any:
        """Hand the stored value to ``visitor.visit`` and return its result."""
        if self._type in _COLLECTION_TYPES or self._type in _NUMBER_TYPES:
            return visitor.visit(self._content)
        if self._type in _STRING_TYPES:
            return visitor.visit(self._content)
        if self._type is VariantType.RAW_STRING:
            return visitor.visit(self._content)
        if self._type is VariantType.BOOLEAN:
            return visitor.visit(bool(self._content))
        return visitor.visit(None)

    # -- arrays ---------------------------------------------------------

    def _array_for_writing(self) -> Optional[list]:
        if self.is_null():
            self.to_array()
        return self.as_array()

    def add_element(self) -> Optional["VariantData"]:
        """Append a null element, turning a null value into an array first."""
        array = self._array_for_writing()
        if array is None:
            return None
        element = VariantData()
        array.append(element)
        return element

    def add_value(self, value: Any) -> bool:
        """Append ``value`` to the array, turning a null value into an array first."""
        array = self._array_for_writing()
        if array is None:
            return False
        element = VariantData()
        array.append(element)
        if not element._assign(value):
            array.pop()
            return False
        return True

    def get_element(self, index: int) -> Optional["VariantData"]:
        array = self.as_array()
        if array is None or index < 0 or index >= len(array):
            return None
        return array[index]

    def get_or_add_element(self, index: int) -> Optional["VariantData"]:
        """Return the element at ``index``, padding the array with nulls as needed."""
        if index < 0:
            return None
        array = self._array_for_writing()
        if array is None:
            return None
        while len(array) <= index:
            array.append(VariantData())
        return array[index]

    def remove_element(self, index: int) -> None:
        array = self.as_array()
        if array is not None and 0 <= index < len(array):
            del array[index]

    # -- objects --------------------------------------------------------

    def get_member(self, key: Optional[str]) -> Optional["VariantData"]:
        obj = self.as_object()
        if obj is None or key is None:
            return None
        return obj.get(key)

    def get_or_add_member(self, key: Optional[str]) -> Optional["VariantData"]:
        """Return the member ``key``, creating it (and the object) when missing."""
        if key is None:
            return None
        if self.is_null():
            self.to_object()
        obj = self.as_object()
        if obj is None:
            return None
        member = obj.get(key)
        if member is None:
            member = obj[key] = VariantData()
        return member

    def remove_member(self, key: Optional[str]) -> None:
        obj = self.as_object()
        if obj is not None and key is not None:
            obj.pop(key, None)

    # -- conversions ----------------------------------------------------

    def as_boolean(self) -> bool:
        if self._type is VariantType.BOOLEAN:
            return bool(self._content)
        if self._type in _NUMBER_TYPES:
            return self._content != 0
        if self._type is VariantType.NULL:
            return False
        return True

    def as_array(self) -> Optional[list]:
        return self._content if self._type is VariantType.ARRAY else None

    def as_object(self) -> Optional[dict]:
        return self._content if self._type is VariantType.OBJECT else None

    def as_float(self) -> float:
        if self._type is VariantType.BOOLEAN:
            return float(bool(self._content))
        if self._type in _NUMBER_TYPES:
            return float(self._content)
        if self._type in _STRING_TYPES:
            parsed = _parse_number(self._content)
            return 0.0 if parsed is None else float(parsed)
        return 0.0

    def as_integral(self, bits: int = 32, signed: bool = True) -> int:
        """Return the value as an integer of the given width, or 0 if it does not fit."""
        if self._type is VariantType.BOOLEAN:
            return int(bool(self._content))
        if self._type in _NUMBER_TYPES:
            return _convert_to_int(self._content, bits, signed)
        if self._type in _STRING_TYPES:
            parsed = _parse_number(self._content)
            return 0 if parsed is None else _convert_to_int(parsed, bits, signed)
        _int_range(bits, signed)
        return 0

    def as_raw_string(self) -> Optional[RawString]:
        return self._content if self._type is VariantType.RAW_STRING else None

    def as_string(self) -> Optional[str]:
        return self._content if self._type in _STRING_TYPES else None

    # -- type queries ---------------------------------------------------

    def is_array(self) -> bool:
        return self._type is VariantType.ARRAY

    def is_boolean(self) -> bool:
        return self._type is VariantType.BOOLEAN

    def is_collection(self) -> bool:
        return self._type in _COLLECTION_TYPES

    def is_float(self) -> bool:
        """True for any number, integral or not."""
        return self._type in _NUMBER_TYPES

    def is_integer(self, bits: int = 32, signed: bool = True) -> bool:
        if self._type not in _INTEGER_TYPES:
            return False
        low, high = _int_range(bits, signed)
        return low <= self._content <= high

    def is_null(self) -> bool:
        return self._type is VariantType.NULL

    def is_object(self) -> bool:
        return self._type is VariantType.OBJECT

    def is_string(self) -> bool:
        return self._type in _STRING_TYPES

    def nesting(self) -> int:
        """Depth of nested collections; 0 for a scalar."""
        if self._type is VariantType.ARRAY:
            children = self._content
        elif self._type is VariantType.OBJECT:
            children = self._content.values()
        else:
            return 0
        return 1 + max((child.nesting() for child in children), default=0)

    def size(self) -> int:
        if self._type in _COLLECTION_TYPES:
            return len(self._content)
        return 0

    # -- setters --------------------------------------------------------

    def set_boolean(self, value: bool) -> None:
        self.clear()
        self._type = VariantType.BOOLEAN
        self._content = bool(value)

    def set_float(self, value: float) -> bool:
        """Store a float, in single precision when that loses nothing."""
        self.clear()
        value = float(value)
        as_single = _to_float32(value)
        if value == as_single:
            self._type = VariantType.FLOAT
            self._content = as_single
        else:
            self._type = VariantType.DOUBLE
            self._content = value
        return True

    def set_integer(self, value: int) -> bool:
        """Store an integer in the narrowest slot; raise OverflowError beyond 64 bits."""
        value = int(value)
        if value < 0:
            if _INT32_RANGE[0] <= value:
                kind = VariantType.INT32
            elif _INT64_RANGE[0] <= value:
                kind = VariantType.INT64
            else:
                raise OverflowError(f"{value} does not fit in 64 bits")
        elif value <= _UINT32_RANGE[1]:
            kind = VariantType.UINT32
        elif value <= _UINT64_RANGE[1]:
            kind = VariantType.UINT64
        else:
            raise OverflowError(f"{value} does not fit in 64 bits")
        self.clear()
        self._type = kind
        self._content = value
        return True

    def set_raw_string(self, value: Union[RawString, str]) -> None:
        self.clear()
        if not isinstance(value, RawString):
            value = RawString(str(value))
        self._type = VariantType.RAW_STRING
        self._content = value

    def set_string(self, value: Optional[str]) -> bool:
        """Store a string; a None value leaves the variant null and returns False."""
        self.clear()
        if value is None:
            return False
        if not isinstance(value, str):
            raise TypeError(f"expected str, got {type(value).__name__}")
        self._type = (
            VariantType.TINY_STRING if is_tiny_string(value) else VariantType.OWNED_STRING
        )
        self._content = value
        return True

    def _set_linked_string(self, value: str) -> None:
        self.clear()
        self._type = VariantType.LINKED_STRING
        self._content = value

    def to_array(self) -> list:
        self.clear()
        self._type = VariantType.ARRAY
        self._content = []
        return self._content

    def to_object(self) -> dict:
        self.clear()
        self._type = VariantType.OBJECT
        self._content = {}
        return self._content

    def clear(self) -> None:
        """Release the stored value and become null."""
        if self._type is VariantType.ARRAY:
            for child in self._content:
                child.clear()
        elif self._type is VariantType.OBJECT:
            for child in self._content.values():
                child.clear()
        self._type = VariantType.NULL
        self._content = None

    def _assign(self, value: Any) -> bool:
        if value is None:
            self.clear()
            return True
        if isinstance(value, VariantData):
            return self._copy_from(value)
        if isinstance(value, bool):
            self.set_boolean(value)
            return True
        if isinstance(value, int):
            return self.set_integer(value)
        if isinstance(value, float):
            return self.set_float(value)
        if isinstance(value, str):
            return self.set_string(value)
        if isinstance(value, RawString):
            self.set_raw_string(value)
            return True
        if isinstance(value, (list, tuple)):
            self.to_array()
            return all(self.add_value(item) for item in value)
        if isinstance(value, dict):
            self.to_object()
            return all(
                self.get_or_add_member(str(key))._assign(item)
                for key, item in value.items()
            )
        raise TypeError(f"cannot store a value of type {type(value).__name__}")

    def _copy_from(self, other: "VariantData") -> bool:
        if other is self:
            return True
        if other._type is VariantType.ARRAY:
            self.to_array()
            return all(self.add_value(item) for item in other._content)
        if other._type is VariantType.OBJECT:
            self.to_object()
            return all(
                self.get_or_add_member(key)._copy_from(item)
                for key, item in other._content.items()
            )
        self.clear()
        self._type = other._type
        self._content = other._content
        return True