"""
Nullable Scalar

A single optional value: either valid with a payload, or null. Used as the
argument of fill() and as the unit read out of a nullable array.
"""

from __future__ import annotations

from typing import Any

from ._dtypes import NullableType
from .error import NullException

__all__ = ['Nullable', 'isnull_scalar']


_MISSING = object()


class Nullable:
    """
    Optional scalar value.

    Attributes:
        isnull (bool): True if no value is present

    Example:
        >>> x = Nullable(3)
        >>> x.value
        3
        >>> Nullable().isnull
        True
        >>> Nullable().get(0)
        0
    """

    __slots__ = ('_value', '_isnull')

    def __init__(self, value: Any = _MISSING):
        if isinstance(value, Nullable):
            self._value = value._value
            self._isnull = value._isnull
        elif value is _MISSING:
            self._value = None
            self._isnull = True
        else:
            self._value = value
            self._isnull = False

    def __class_getitem__(cls, eltype: Any) -> NullableType:
        return NullableType(eltype)

    @classmethod
    def null(cls) -> 'Nullable':
        """Create a null scalar."""
        return cls()

    @property
    def isnull(self) -> bool:
        return self._isnull

    @property
    def value(self) -> Any:
        """Payload. Raises NullException if null."""
        if self._isnull:
            raise NullException("Cannot read the value of a null Nullable")
        return self._value

    def get(self, default: Any = _MISSING) -> Any:
        """Payload, or default when null (raises if no default given)."""
        if self._isnull:
            if default is _MISSING:
                raise NullException("Cannot read the value of a null Nullable")
            return default
        return self._value

    def __eq__(self, other) -> bool:
        if not isinstance(other, Nullable):
            return NotImplemented
        if self._isnull or other._isnull:
            return self._isnull and other._isnull
        return bool(self._value == other._value)

    def __hash__(self) -> int:
        return hash((Nullable, None)) if self._isnull else hash((Nullable, self._value))

    def __bool__(self) -> bool:
        raise TypeError("Truth value of a Nullable is ambiguous; use .isnull or .get()")

    def __repr__(self) -> str:
        if self._isnull:
            return "Nullable()"
        return f"Nullable({self._value!r})"


def isnull_scalar(x: Any) -> bool:
    """True iff x is a null Nullable. Other objects are never null."""
    return isinstance(x, Nullable) and x.isnull
