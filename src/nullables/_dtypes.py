"""
Element Type Utilities

Element types are numpy dtypes. This module normalizes element type
requests (including "nullable T" requests, which collapse to T) and
answers the capability questions the array operations branch on.
"""

from __future__ import annotations

from typing import Any

import numpy as np

__all__ = [
    'NullableType',
    'normalize_dtype',
    'is_bits_dtype',
    'is_bool_dtype',
    'is_numeric_dtype',
    'float_dtype',
]


class NullableType:
    """
    Marker for the element type "nullable T".

    Produced by ``Nullable[T]``. Nullable arrays store the nullness
    separately, so a request for a nullable element type is normalized to
    its payload type T.

    Example:
        >>> normalize_dtype(Nullable[np.int32])
        dtype('int32')
    """

    __slots__ = ('eltype',)

    def __init__(self, eltype: Any):
        self.eltype = eltype

    def __eq__(self, other) -> bool:
        return isinstance(other, NullableType) and normalize_dtype(self) == normalize_dtype(other)

    def __hash__(self) -> int:
        return hash(('NullableType', normalize_dtype(self)))

    def __repr__(self) -> str:
        return f"Nullable[{self.eltype!r}]"


def normalize_dtype(dtype: Any) -> np.dtype:
    """
    Normalize an element type request to a numpy dtype.

    Args:
        dtype: Anything numpy.dtype accepts, or a NullableType

    Returns:
        numpy.dtype of the payload

    Raises:
        TypeError: If numpy does not understand the request
    """
    while isinstance(dtype, NullableType):
        dtype = dtype.eltype
    return np.dtype(dtype)


def is_bits_dtype(dtype: Any) -> bool:
    """Check if elements are plain bits (no object references inside)."""
    return not normalize_dtype(dtype).hasobject


def is_bool_dtype(dtype: Any) -> bool:
    """Check if dtype is boolean."""
    return normalize_dtype(dtype) == np.bool_


def is_numeric_dtype(dtype: Any) -> bool:
    """Check if dtype is boolean or numeric (int, float, complex)."""
    dt = normalize_dtype(dtype)
    return dt == np.bool_ or np.issubdtype(dt, np.number)


def float_dtype(dtype: Any) -> np.dtype:
    """
    Float counterpart of a dtype.

    Floating and complex dtypes are kept; bool and integers become float64.
    """
    dt = normalize_dtype(dtype)
    if np.issubdtype(dt, np.inexact):
        return dt
    if dt == np.bool_ or np.issubdtype(dt, np.integer):
        return np.dtype(np.float64)
    raise TypeError(f"No float counterpart for dtype {dt}")
