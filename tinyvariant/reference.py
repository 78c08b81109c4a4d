"""References to JSON values, with on-demand creation of members and elements."""

from __future__ import annotations

from enum import IntFlag
from typing import Any, Optional, Union

from .variant import RawString, VariantData, VariantDataVisitor

_Key = Union[int, str, None]


class CompareResult(IntFlag):
    """Outcome of comparing a variant with a value."""

    DIFFER = 0
    LESS = 1
    EQUAL = 2
    GREATER = 4
    LESS_OR_EQUAL = LESS | EQUAL
    GREATER_OR_EQUAL = GREATER | EQUAL


class _ContentVisitor(VariantDataVisitor):
    """Returns whatever the variant hands over, unchanged."""

    def visit(self, value: Any) -> Any:
        return value


_CONTENT = _ContentVisitor()


def _content(data: Optional[VariantData]) -> Any:
    return None if data is None else data.accept(_CONTENT)


def _to_python(data: Optional[VariantData]) -> Any:
    value = _content(data)
    if isinstance(value, list):
        return [_to_python(item) for item in value]
    if isinstance(value, dict):
        return {key: _to_python(item) for key, item in value.items()}
    return value


def _arithmetic_compare(lhs: Any, rhs: Any) -> CompareResult:
    if lhs < rhs:
        return CompareResult.LESS
    if lhs > rhs:
        return CompareResult.GREATER
    if lhs == rhs:
        return CompareResult.EQUAL
    return CompareResult.DIFFER


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _compare(lhs: Optional[VariantData], rhs: Any) -> CompareResult:
    if isinstance(rhs, JsonVariant):
        rhs = rhs._get_data()
    if isinstance(rhs, VariantData):
        rhs = _content(rhs)
    left = _content(lhs)

    if rhs is None:
        return CompareResult.EQUAL if left is None else CompareResult.DIFFER
    if isinstance(rhs, bool):
        if isinstance(left, bool):
            return _arithmetic_compare(int(left), int(rhs))
        return CompareResult.DIFFER
    if _is_number(rhs):
        if _is_number(left):
            return _arithmetic_compare(left, rhs)
        return CompareResult.DIFFER
    if isinstance(rhs, str):
        if isinstance(left, str):
            return _arithmetic_compare(left, rhs)
        return CompareResult.DIFFER
    if isinstance(rhs, RawString):
        if isinstance(left, RawString):
            return _arithmetic_compare(left.data, rhs.data)
        return CompareResult.DIFFER
    if isinstance(rhs, (list, tuple)):
        if (
            isinstance(left, list)
            and len(left) == len(rhs)
            and all(_compare(a, b) == CompareResult.EQUAL for a, b in zip(left, rhs))
        ):
            return CompareResult.EQUAL
        return CompareResult.DIFFER
    if isinstance(rhs, dict):
        if (
            isinstance(left, dict)
            and left.keys() == rhs.keys()
            and all(_compare(item, rhs[key]) == CompareResult.EQUAL for key, item in left.items())
        ):
            return CompareResult.EQUAL
        return CompareResult.DIFFER
    return CompareResult.DIFFER


def _prepare(value: Any) -> Any:
    """Replace references inside ``value`` by the data they point to."""
    if isinstance(value, JsonVariant):
        return value._get_data()
    if isinstance(value, (list, tuple)):
        return [_prepare(item) for item in value]
    if isinstance(value, dict):
        return {key: _prepare(item) for key, item in value.items()}
    return value


def _is_index(data: Optional[VariantData]) -> bool:
    return data is not None and data.is_integer(64, False)


class JsonVariant:
    """A reference to a JSON value.

    A reference obtained by subscripting resolves its target lazily: reading
    never creates anything, writing creates the missing members and elements.
    A reference with no target is unbound.
    """

    __slots__ = ("_data", "_parent", "_key")

    def __init__(self, data: Optional[VariantData] = None) -> None:
        self._data = data
        self._parent: Optional[JsonVariant] = None
        self._key: _Key = None

    @classmethod
    def _proxy(cls, parent: "JsonVariant", key: _Key) -> "JsonVariant":
        ref = cls()
        ref._parent = parent
        ref._key = key
        return ref

    def _get_data(self) -> Optional[VariantData]:
        if self._parent is None:
            return self._data
        parent = self._parent._get_data()
        if parent is None:
            return None
        if isinstance(self._key, int):
            return parent.get_element(self._key)
        return parent.get_member(self._key)

    def _get_or_create_data(self) -> Optional[VariantData]:
        if self._parent is None:
            return self._data
        parent = self._parent._get_or_create_data()
        if parent is None:
            return None
        if isinstance(self._key, int):
            return parent.get_or_add_element(self._key)
        return parent.get_or_add_member(self._key)

    def __repr__(self) -> str:
        data = self._get_data()
        if data is None:
            return "JsonVariant(<unbound>)"
        return f"JsonVariant({_to_python(data)!r})"

    def __bool__(self) -> bool:
        return not self.is_null()

    # -- state ------------------------------------------------------------

    def clear(self) -> None:
        """Set the value to null."""
        data = self._get_or_create_data()
        if data is not None:
            data.clear()

    def is_null(self) -> bool:
        data = self._get_data()
        return data is None or data.is_null()

    def is_unbound(self) -> bool:
        return self._get_data() is None

    def size(self) -> int:
        data = self._get_data()
        return 0 if data is None else data.size()

    def nesting(self) -> int:
        data = self._get_data()
        return 0 if data is None else data.nesting()

    def memory_usage(self) -> int:
        """Always zero; kept for compatibility."""
        return 0

    # -- conversions ------------------------------------------------------

    def as_(self, kind: Any) -> Any:
        """Return the value converted to ``kind``."""
        data = self._get_data()
        if kind is JsonVariant:
            return JsonVariant(data)
        source = data if data is not None else VariantData()
        if kind is bool:
            return source.as_boolean()
        if kind is int:
            return source.as_integral(64, not source.is_integer(64, False))
        if kind is float:
            return source.as_float()
        if kind is str:
            return source.as_string()
        if kind is RawString:
            return source.as_raw_string()
        if kind is list:
            return _to_python(source) if source.is_array() else None
        if kind is dict:
            return _to_python(source) if source.is_object() else None
        raise TypeError(f"cannot convert a variant to {kind!r}")

    def is_(self, kind: Any) -> bool:
        """Return True if the value is of type ``kind``."""
        data = self._get_data()
        if kind is JsonVariant:
            return data is not None
        if data is None:
            return False
        if kind is None or kind is type(None):
            return data.is_null()
        if kind is bool:
            return data.is_boolean()
        if kind is int:
            return data.is_integer(64, True) or data.is_integer(64, False)
        if kind is float:
            return data.is_float()
        if kind is str:
            return data.is_string()
        if kind is RawString:
            return data.as_raw_string() is not None
        if kind is list:
            return data.is_array()
        if kind is dict:
            return data.is_object()
        raise TypeError(f"cannot check a variant against {kind!r}")

    # -- writing ----------------------------------------------------------

    def set(self, value: Any) -> bool:
        """Copy ``value`` into the target; False if the reference is unbound."""
        data = self._get_or_create_data()
        if data is None:
            return False
        return data._assign(_prepare(value))

    def shallow_copy(self, src: Any) -> None:
        """Copy ``src`` (deeply, despite the name)."""
        self.set(src)

    def add(self, value: Any) -> bool:
        """Append ``value`` to the array."""
        data = self._get_or_create_data()
        if data is None:
            return False
        return data.add_value(_prepare(value))

    def add_element(self) -> "JsonVariant":
        """Append a null element and return a reference to it."""
        data = self._get_or_create_data()
        if data is None:
            return JsonVariant()
        return JsonVariant(data.add_element())

    def remove(self, key: Any) -> None:
        """Remove an element by index or a member by name."""
        if isinstance(key, JsonVariant):
            key = key.as_(int) if _is_index(key._get_data()) else key.as_(str)
        if isinstance(key, bool):
            raise TypeError("a boolean is not a valid key")
        data = self._get_data()
        if isinstance(key, int):
            if data is not None:
                data.remove_element(key)
        elif key is None or isinstance(key, str):
            if data is not None:
                data.remove_member(key)
        else:
            raise TypeError(f"invalid key type {type(key).__name__}")

    def to_array(self) -> "JsonVariant":
        """Replace the value with an empty array."""
        data = self._get_or_create_data()
        if data is None:
            return JsonVariant()
        data.to_array()
        return JsonVariant(data)

    def to_object(self) -> "JsonVariant":
        """Replace the value with an empty object."""
        data = self._get_or_create_data()
        if data is None:
            return JsonVariant()
        data.to_object()
        return JsonVariant(data)

    def to_variant(self) -> "JsonVariant":
        """Set the value to null and return a reference to it."""
        data = self._get_or_create_data()
        if data is not None:
            data.clear()
        return JsonVariant(data)

    def contains_key(self, key: Any) -> bool:
        if isinstance(key, JsonVariant):
            key = key.as_(str)
        data = self._get_data()
        return data is not None and data.get_member(key) is not None

    def create_nested_array(self, key: Any = None) -> "JsonVariant":
        if key is None:
            return self.add_element().to_array()
        return self[key].to_array()

    def create_nested_object(self, key: Any = None) -> "JsonVariant":
        if key is None:
            return self.add_element().to_object()
        return self[key].to_object()

    # -- subscripting -----------------------------------------------------

    def __getitem__(self, key: Any) -> "JsonVariant":
        if isinstance(key, JsonVariant):
            key = key.as_(int) if _is_index(key._get_data()) else key.as_(str)
            return JsonVariant._proxy(self, key)
        if isinstance(key, bool) or not isinstance(key, (int, str)):
            raise TypeError(f"invalid key type {type(key).__name__}")
        return JsonVariant._proxy(self, key)

    def __setitem__(self, key: Any, value: Any) -> None:
        self[key].set(value)

    # -- operators --------------------------------------------------------

    def __or__(self, default: Any) -> Any:
        """Return the value if it has the type of ``default``, else ``default``."""
        if isinstance(default, JsonVariant):
            return self if self else default
        kind = type(default)
        if self.is_(kind):
            return self.as_(kind)
        return default

    def __eq__(self, other: object) -> bool:
        return _compare(self._get_data(), other) == CompareResult.EQUAL

    def __ne__(self, other: object) -> bool:
        return not self.__eq__(other)

    __hash__ = None  # type: ignore[assignment]

    def __lt__(self, other: Any) -> bool:
        return _compare(self._get_data(), other) == CompareResult.LESS

    def __le__(self, other: Any) -> bool:
        return bool(_compare(self._get_data(), other) & CompareResult.LESS_OR_EQUAL)

    def __gt__(self, other: Any) -> bool:
        return _compare(self._get_data(), other) == CompareResult.GREATER

    def __ge__(self, other: Any) -> bool:
        return bool(_compare(self._get_data(), other) & CompareResult.GREATER_OR_EQUAL)