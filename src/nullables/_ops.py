"""Functional Operations on Nullable Arrays.

Module-level counterparts of the NullableArray methods, for table and
column code that prefers a functional style, plus the operations that
accept more than nullable arrays:

- Shape queries: size, length, ndims, endof
- Allocation & copy: similar, copy, copyto, fill, deepcopy, resize
- Search & reduction: find, anynull, allnull, dropnull
- Elementwise transforms: isnan, isfinite
- Conversion: to_array, to_vector, to_matrix, to_nullable, nullable_float

Example:
    >>> import nullables as nl
    >>> X = nl.NullableArray.from_list([1, None, 3])
    >>> nl.anynull(X)
    True
    >>> nl.anynull((1, nl.Nullable(), 3))
    True
    >>> nl.to_array(X, replacement=0)
    array([1, 0, 3])
"""

import logging
from typing import Any, Iterable, Sequence, Tuple, Union

import numpy as np

from ._array import NullableArray, _MISSING, _convert_values
from ._dtypes import normalize_dtype
from ._scalar import isnull_scalar
from .error import DimensionMismatchError

__all__ = [
    # Shape
    'size',
    'length',
    'ndims',
    'endof',
    # Allocation & copy
    'similar',
    'copy',
    'copyto',
    'fill',
    'deepcopy',
    'resize',
    # Search & reduction
    'find',
    'anynull',
    'allnull',
    'dropnull',
    # Transforms
    'isnan',
    'isfinite',
    # Conversion
    'to_array',
    'to_vector',
    'to_matrix',
    'to_nullable',
    'nullable_float',
]

logger = logging.getLogger("nullables.convert")


# =============================================================================
# Shape Queries
# =============================================================================

def size(X: NullableArray) -> Tuple[int, ...]:
    """Shape of X."""
    return X.shape


def length(X: NullableArray) -> int:
    """Total number of positions in X."""
    return X.length


def ndims(X: NullableArray) -> int:
    """Number of dimensions of X."""
    return X.ndim


def endof(X: NullableArray) -> int:
    """Last linear index of X."""
    return X.endof()


# =============================================================================
# Allocation & Copy
# =============================================================================

def similar(X: NullableArray, dtype: Any = None,
            shape: Union[int, Sequence[int], None] = None) -> NullableArray:
    """Uninitialized array of the same kind (see NullableArray.similar)."""
    return X.similar(dtype, shape)


def copy(X: NullableArray) -> NullableArray:
    return X.copy()


def copyto(dest: NullableArray, src: NullableArray) -> NullableArray:
    """Copy src into dest in place and return dest."""
    return dest.copyto(src)


def fill(X: NullableArray, x: Any) -> NullableArray:
    return X.fill(x)


def deepcopy(X: NullableArray) -> NullableArray:
    return X.deepcopy()


def resize(X: NullableArray, n: int) -> NullableArray:
    return X.resize(n)


# =============================================================================
# Search & Reduction
# =============================================================================

def find(X: NullableArray) -> np.ndarray:
    return X.find()


def anynull(X: Union[NullableArray, Iterable[Any]]) -> bool:
    """
    True iff X contains a null.

    Accepts:
        NullableArray / NullableView: checks the mask (views check their
            own positions only)
        tuple: materialized, then treated as a collection
        any other iterable: true iff an element is a null Nullable;
            elements that are not Nullable never count as null

    Stops at the first null found.
    """
    if isinstance(X, NullableArray):
        return X.anynull()
    if isinstance(X, tuple):
        return anynull(list(X))
    if isinstance(X, np.ndarray):
        X = X.flat
    for x in X:
        if isnull_scalar(x):
            return True
    return False


def allnull(X: NullableArray) -> bool:
    return X.allnull()


def dropnull(X: NullableArray) -> np.ndarray:
    return X.dropnull()


# =============================================================================
# Elementwise Transforms
# =============================================================================

def isnan(X: NullableArray) -> NullableArray:
    return X.isnan()


def isfinite(X: NullableArray) -> NullableArray:
    return X.isfinite()


# =============================================================================
# Conversion
# =============================================================================

def to_array(X: NullableArray, dtype: Any = None, replacement: Any = _MISSING) -> np.ndarray:
    """
    Convert to a plain numpy array.

    Strict without a replacement (raises NullException on nulls);
    never fails due to nulls with one.
    """
    return X.to_array(dtype, replacement)


def _to_ndim(X: NullableArray, ndim: int, name: str, dtype: Any, replacement: Any) -> np.ndarray:
    if X.ndim != ndim:
        raise DimensionMismatchError(
            f"Cannot convert {X.ndim}-D NullableArray to a {name}"
        )
    return X.to_array(dtype, replacement)


def to_vector(X: NullableArray, dtype: Any = None, replacement: Any = _MISSING) -> np.ndarray:
    """to_array() restricted to 1-D arrays."""
    return _to_ndim(X, 1, "vector", dtype, replacement)


def to_matrix(X: NullableArray, dtype: Any = None, replacement: Any = _MISSING) -> np.ndarray:
    """to_array() restricted to 2-D arrays."""
    return _to_ndim(X, 2, "matrix", dtype, replacement)


def to_nullable(A: Any, dtype: Any = None) -> NullableArray:
    """
    Construction conversion into a NullableArray.

    From a NullableArray the mask is copied and only valid payloads are
    converted. From a numpy masked array the mask is taken over. From any
    other array-like every position is valid.

    Args:
        A: Source array
        dtype: Target element type (default: keep)
    """
    if isinstance(A, NullableArray):
        return A.astype(A.dtype if dtype is None else dtype)
    if isinstance(A, np.ma.MaskedArray):
        X = NullableArray.from_masked(A)
        return X if dtype is None else X.astype(dtype)

    values = np.asarray(A)
    target = values.dtype if dtype is None else normalize_dtype(dtype)
    logger.debug(f"to_nullable: {values.dtype} -> {target}")
    # Always a copy: the result owns its buffers
    return NullableArray(_convert_values(values, target))


def nullable_float(X: NullableArray) -> NullableArray:
    """Float conversion of the payload (see NullableArray.float)."""
    return X.float()
