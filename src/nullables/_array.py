"""
Nullable Array Container

N-dimensional array in which every position carries a value slot and an
independent validity flag. Two numpy buffers of identical shape back it:

    values  - payload buffer of element dtype T
    isnull  - bool buffer, True where the position is null

The payload under a null position is unspecified and is never read as
meaningful. Every operation either keeps both buffers the same shape or
fails before writing anything.

Example:
    >>> X = NullableArray([1, 2, 3], isnull=[False, True, False])
    >>> X.anynull()
    True
    >>> X.to_array(replacement=0)
    array([1, 0, 3])
    >>> X.resize(5).isnull
    array([False,  True, False,  True,  True])
"""

from __future__ import annotations

import logging
from copy import deepcopy as _deepcopy
from typing import Any, Iterator, Sequence, Tuple, Union

import numpy as np

from ._config import CopyStrategy, config
from ._dtypes import (
    float_dtype,
    is_bits_dtype,
    is_bool_dtype,
    is_numeric_dtype,
    normalize_dtype,
)
from ._ownership import Ownership, RefChain
from ._scalar import Nullable, isnull_scalar
from .error import (
    BoundsError,
    DimensionMismatchError,
    ElementTypeError,
    NullException,
)

__all__ = ['NullableArray']

logger = logging.getLogger("nullables.array")

_MISSING = object()

Shape = Tuple[int, ...]


def _as_shape(shape: Union[int, Sequence[int]]) -> Shape:
    if isinstance(shape, (int, np.integer)):
        return (int(shape),)
    return tuple(int(d) for d in shape)


def _convert_values(values: np.ndarray, dtype: np.dtype) -> np.ndarray:
    """Convert a payload buffer with the configured casting rule."""
    return values.astype(dtype, casting=config.casting, copy=True)


def _convert_scalar(value: Any, dtype: np.dtype) -> Any:
    """Convert a single value to dtype once, for reuse in many slots."""
    if dtype.hasobject:
        return value
    return np.asarray(value).astype(dtype, casting=config.casting)[()]


def _bulk_compatible(src: np.dtype, dest: np.dtype) -> bool:
    """Whether garbage under nulls can be cast from src to dest without failing."""
    if not (is_bits_dtype(src) and is_bits_dtype(dest)):
        return False
    if src == dest:
        return True
    if src.kind in "SU" or dest.kind in "SU":
        return False
    return bool(np.can_cast(src, dest, casting='same_kind'))


class NullableArray:
    """
    Fixed-shape array with SQL-style nulls.

    Attributes:
        values (numpy.ndarray): Payload buffer
        isnull (numpy.ndarray): Validity mask, True marks a null position
        dtype (numpy.dtype): Element type
        shape (tuple): Shape of both buffers
        length (int): Total number of positions

    Example:
        >>> X = NullableArray(np.arange(4.0))
        >>> X.anynull()
        False
        >>> X.fill(Nullable())
        >>> X.allnull()
        True
    """

    __slots__ = ("_values", "_isnull", "_ownership", "_ref_chain")

    def __init__(
        self,
        values: Any,
        isnull: Any = None,
        *,
        dtype: Any = None,
    ):
        """
        Wrap a value buffer and an optional mask.

        Args:
            values: Array-like payload
            isnull: Array-like bool mask of the same shape. When omitted
                    every position is valid.
            dtype: Element type for values (Nullable[T] allowed)

        Raises:
            DimensionMismatchError: If values and isnull differ in shape
        """
        if dtype is not None:
            values = np.asarray(values, dtype=normalize_dtype(dtype))
        else:
            values = np.asarray(values)

        if isnull is None:
            isnull = np.zeros(values.shape, dtype=np.bool_)
        else:
            isnull = np.asarray(isnull, dtype=np.bool_)
            if isnull.shape != values.shape:
                raise DimensionMismatchError(
                    f"values shape {values.shape} != isnull shape {isnull.shape}"
                )

        self._values = values
        self._isnull = isnull
        self._ownership = Ownership.OWNED
        self._ref_chain = RefChain()

    # -------------------------------------------------------------------------
    # Factories
    # -------------------------------------------------------------------------

    @classmethod
    def empty(cls, shape: Union[int, Sequence[int]], dtype: Any = np.float64) -> "NullableArray":
        """Allocate an uninitialized array. Every position starts null."""
        shape = _as_shape(shape)
        return cls(
            np.empty(shape, dtype=normalize_dtype(dtype)),
            np.ones(shape, dtype=np.bool_),
        )

    @classmethod
    def from_list(cls, data: Sequence, dtype: Any = None) -> "NullableArray":
        """
        Create from a (nested) Python sequence.

        None and null Nullable scalars become null positions; valid
        Nullable scalars are unwrapped.

        Example:
            >>> NullableArray.from_list([1, None, Nullable(3)]).isnull
            array([False,  True, False])
        """
        cells = np.array(data, dtype=object)
        flat = cells.ravel()
        mask = np.fromiter(
            (x is None or isnull_scalar(x) for x in flat),
            dtype=np.bool_,
            count=flat.size,
        )
        payload = [
            x.value if isinstance(x, Nullable) else x
            for x, null in zip(flat, mask) if not null
        ]

        if dtype is None:
            dt = np.asarray(payload).dtype if payload else np.dtype(np.float64)
        else:
            dt = normalize_dtype(dtype)

        values = np.zeros(flat.size, dtype=dt)
        if payload:
            values[~mask] = np.asarray(payload, dtype=dt)
        return cls(values.reshape(cells.shape), mask.reshape(cells.shape))

    @classmethod
    def from_masked(cls, masked: np.ma.MaskedArray) -> "NullableArray":
        """Create from a numpy masked array (masked positions become null)."""
        return cls(
            np.ma.getdata(masked).copy(),
            np.ma.getmaskarray(masked).copy(),
        )

    # -------------------------------------------------------------------------
    # Buffers & Shape Queries
    # -------------------------------------------------------------------------

    @property
    def values(self) -> np.ndarray:
        return self._values

    @property
    def isnull(self) -> np.ndarray:
        return self._isnull

    @property
    def dtype(self) -> np.dtype:
        return self.values.dtype

    @property
    def shape(self) -> Shape:
        """Shape of the array, taken from the value buffer."""
        return self.values.shape

    @property
    def ndim(self) -> int:
        return self.values.ndim

    @property
    def length(self) -> int:
        """Total number of positions."""
        return self.values.size

    @property
    def ownership(self) -> Ownership:
        return self._ownership

    @property
    def is_view(self) -> bool:
        return self._ownership is Ownership.VIEW

    def size(self) -> Shape:
        """Shape tuple (the mask is congruent by construction)."""
        return self.shape

    def endof(self) -> int:
        """Last linear index (-1 for an empty array)."""
        return self.length - 1

    def __len__(self) -> int:
        return self.length

    # -------------------------------------------------------------------------
    # Element Access
    # -------------------------------------------------------------------------

    def _is_position(self, key: Any) -> bool:
        if isinstance(key, (bool, np.bool_)):
            return False
        if isinstance(key, (int, np.integer)):
            return True
        return (
            isinstance(key, tuple)
            and len(key) == self.ndim
            and all(isinstance(k, (int, np.integer)) for k in key)
        )

    def get(self, index: Union[int, Tuple[int, ...]]) -> Nullable:
        """
        Read one position as a Nullable scalar.

        Args:
            index: Linear index, or one integer per dimension

        Raises:
            BoundsError: If the index is outside the array
        """
        if isinstance(index, (int, np.integer)) and self.ndim != 1:
            n = self.length
            linear = int(index) + n if index < 0 else int(index)
            if linear < 0 or linear >= n:
                raise BoundsError(f"Index {index} out of bounds [0, {n})")
            index = np.unravel_index(linear, self.shape)
        try:
            null = bool(self.isnull[index])
            value = self.values[index]
        except IndexError as e:
            raise BoundsError(str(e)) from e
        return Nullable() if null else Nullable(value)

    def __getitem__(self, key: Any) -> Union[Nullable, "NullableArray"]:
        """Single position -> Nullable scalar; anything else -> view."""
        if self._is_position(key):
            return self.get(key)
        return self.view(key)

    def __iter__(self) -> Iterator[Nullable]:
        """Iterate positions in C order as Nullable scalars."""
        for value, null in zip(self.values.flat, self.isnull.flat):
            yield Nullable() if null else Nullable(value)

    def view(self, *index: Any) -> "NullableArray":
        """
        Create a non-owning view through basic (int/slice) indexing.

        Writes through the view land in this array's buffers.

        Example:
            >>> X = NullableArray(np.arange(6).reshape(2, 3))
            >>> v = X.view(slice(None), slice(0, 3, 2))
            >>> v.shape
            (2, 2)
        """
        from ._view import NullableView

        if len(index) == 1 and isinstance(index[0], tuple):
            index = index[0]
        return NullableView(self, index)

    # -------------------------------------------------------------------------
    # Allocation & Copy
    # -------------------------------------------------------------------------

    def similar(self, dtype: Any = None, shape: Union[int, Sequence[int], None] = None) -> "NullableArray":
        """
        Allocate a new uninitialized array of the same kind.

        Nothing is copied from this array. Nullable[T] element types are
        normalized to T.
        """
        dtype = self.dtype if dtype is None else normalize_dtype(dtype)
        shape = self.shape if shape is None else _as_shape(shape)
        return NullableArray.empty(shape, dtype)

    def copy(self) -> "NullableArray":
        """Copy into a freshly allocated similar() array."""
        return self.similar().copyto(self)

    def __copy__(self) -> "NullableArray":
        return self.copy()

    def copyto(self, src: "NullableArray") -> "NullableArray":
        """
        Copy src into this array in place (linear positions).

        Valid source values overwrite the corresponding positions; null
        source positions leave the payload here untouched. The mask is
        copied in full.

        Args:
            src: Source array, at most as long as this one

        Returns:
            self

        Raises:
            BoundsError: If this array is shorter than src (nothing written)
        """
        n = src.length
        if self.length < n:
            raise BoundsError(
                f"Destination length {self.length} < source length {n}"
            )

        dest_values = self.values
        src_values = src.values.ravel()
        src_mask = src.isnull.ravel()

        bulk = (
            config.copy_strategy is CopyStrategy.AUTO
            and _bulk_compatible(src.dtype, self.dtype)
        )
        if bulk:
            logger.debug(f"copyto: bulk copy of {n} {src.dtype} values")
            # Null slots carry garbage; casting it must not warn
            with np.errstate(all='ignore'):
                dest_values.flat[:n] = src_values
        else:
            logger.debug(f"copyto: masked copy of {n} {src.dtype} values")
            valid = np.flatnonzero(~src_mask)
            dest_values.flat[valid] = src_values[valid]

        self.isnull.flat[:n] = src_mask
        return self

    def fill(self, x: Any) -> "NullableArray":
        """
        Set every position to x.

        A null Nullable makes every position null and leaves the payload
        alone. A valid Nullable or a plain value is written everywhere and
        every position becomes valid.

        Returns:
            self
        """
        if isinstance(x, Nullable):
            if x.isnull:
                self.isnull.fill(True)
                return self
            x = x.value
        self.values.fill(x)
        self.isnull.fill(False)
        return self

    def deepcopy(self) -> "NullableArray":
        """Fully independent copy, including object payloads."""
        return NullableArray(_deepcopy(self.values), _deepcopy(self.isnull))

    def __deepcopy__(self, memo: dict) -> "NullableArray":
        return NullableArray(_deepcopy(self.values, memo), _deepcopy(self.isnull, memo))

    # -------------------------------------------------------------------------
    # Resize
    # -------------------------------------------------------------------------

    def resize(self, n: int) -> "NullableArray":
        """
        Grow or shrink a one-dimensional array to length n.

        New positions are null. Shrinking discards the trailing positions.

        Returns:
            self

        Raises:
            DimensionMismatchError: If the array is not 1-D or is a view
            BoundsError: If n is negative or not an integer
        """
        if self.is_view:
            raise DimensionMismatchError("Cannot resize a view")
        if self.ndim != 1:
            raise DimensionMismatchError(
                f"resize requires a 1-D array, got ndim={self.ndim}"
            )
        if isinstance(n, (bool, np.bool_)) or not isinstance(n, (int, np.integer)):
            raise BoundsError(f"Array length must be an integer, got {n!r}")
        n = int(n)
        if n < 0:
            raise BoundsError(f"Array length must be non-negative, got {n}")

        old = self.length
        if n <= old:
            values = self._values[:n].copy()
            isnull = self._isnull[:n].copy()
        else:
            values = np.empty(n, dtype=self.dtype)
            values[:old] = self._values
            isnull = np.ones(n, dtype=np.bool_)
            isnull[:old] = self._isnull
        logger.debug(f"resize: {old} -> {n}")

        self._values = values
        self._isnull = isnull
        return self

    # -------------------------------------------------------------------------
    # Search & Reduction
    # -------------------------------------------------------------------------

    def find(self) -> np.ndarray:
        """
        Linear indices of the valid True positions, ascending.

        Null positions count as False.

        Raises:
            ElementTypeError: If the element type is not bool
        """
        if not is_bool_dtype(self.dtype):
            raise ElementTypeError(f"find requires a bool array, got {self.dtype}")

        hits = np.logical_and(~self.isnull, self.values).ravel()
        return np.flatnonzero(hits).astype(np.int64, copy=False)

    def anynull(self) -> bool:
        """True iff any position is null."""
        return bool(self.isnull.any())

    def allnull(self) -> bool:
        """True iff every position is null (True for an empty array)."""
        return bool(self.isnull.all())

    def dropnull(self) -> np.ndarray:
        """Valid payloads in C order as an independent 1-D array."""
        return self.values[~self.isnull].copy()

    # -------------------------------------------------------------------------
    # Elementwise Transforms
    # -------------------------------------------------------------------------

    def _require_numeric(self, op: str) -> None:
        if not is_numeric_dtype(self.dtype):
            raise ElementTypeError(f"{op} requires a numeric array, got {self.dtype}")

    def isnan(self) -> "NullableArray":
        """Elementwise isnan; null positions stay null (but are probed)."""
        self._require_numeric("isnan")
        with np.errstate(all='ignore'):
            result = np.isnan(self.values)
        return NullableArray(result, self.isnull.copy())

    def isfinite(self) -> "NullableArray":
        """Elementwise isfinite, evaluated only at valid positions."""
        self._require_numeric("isfinite")
        valid = ~self.isnull
        result = np.zeros(self.shape, dtype=np.bool_)
        result[valid] = np.isfinite(self.values[valid])
        return NullableArray(result, self.isnull.copy())

    # -------------------------------------------------------------------------
    # Conversion
    # -------------------------------------------------------------------------

    def to_array(self, dtype: Any = None, replacement: Any = _MISSING) -> np.ndarray:
        """
        Convert to a plain numpy array.

        Without a replacement the conversion is strict and fails if any
        position is null. With one, every null position is materialized
        as the replacement (converted to dtype once).

        Args:
            dtype: Target element type (default: this array's dtype)
            replacement: Value substituted for nulls

        Raises:
            NullException: Strict conversion of an array with nulls
        """
        target = self.dtype if dtype is None else normalize_dtype(dtype)

        if replacement is _MISSING:
            if self.anynull():
                logger.debug(
                    f"to_array: {int(self.isnull.sum())} null values in {self.shape}"
                )
                raise NullException("Cannot convert NullableArray with null values")
            return _convert_values(self.values, target)

        valid = ~self.isnull
        converted = _convert_values(self.values[valid], target)
        if target.kind in "SU":
            # Fixed-width strings must hold both the payloads and the replacement
            widened = np.asarray(replacement).astype(target.char)
            target = np.promote_types(converted.dtype, widened.dtype)
        fill_value = _convert_scalar(replacement, target)
        result = np.empty(self.shape, dtype=target)
        result[valid] = converted
        result[self.isnull] = fill_value
        return result

    def astype(self, dtype: Any) -> "NullableArray":
        """
        Convert the payload to another element type.

        Only valid positions are converted; the mask is copied unchanged.
        """
        target = normalize_dtype(dtype)
        valid = ~self.isnull
        values = np.empty(self.shape, dtype=target)
        values[valid] = _convert_values(self.values[valid], target)
        return NullableArray(values, self.isnull.copy())

    def float(self) -> "NullableArray":
        """
        Float conversion of the payload; the mask is copied unchanged.

        Raises:
            ElementTypeError: If the element type is not plain bits or
                              has no float counterpart
        """
        if not is_bits_dtype(self.dtype):
            raise ElementTypeError(f"float requires a bits element type, got {self.dtype}")
        try:
            target = float_dtype(self.dtype)
        except TypeError as e:
            raise ElementTypeError(str(e)) from e
        with np.errstate(all='ignore'):
            values = self.values.astype(target)
        return NullableArray(values, self.isnull.copy())

    def to_masked(self) -> np.ma.MaskedArray:
        """Convert to a numpy masked array (copies both buffers)."""
        return np.ma.MaskedArray(self.values.copy(), mask=self.isnull.copy())

    # -------------------------------------------------------------------------
    # Representation
    # -------------------------------------------------------------------------

    def __repr__(self) -> str:
        name = type(self).__name__
        items = ["NULL" if x.isnull else str(x.value) for x in self]
        if len(items) > 6:
            items = items[:3] + ['...'] + items[-3:]
        return f"{name}([{', '.join(items)}], shape={self.shape}, dtype={self.dtype})"
