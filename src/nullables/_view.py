"""
Nullable Array Views

A NullableView reindexes a parent array's values and mask through a basic
index (integers, slices, Ellipsis) without owning or duplicating either
buffer. The parent is kept alive through the view's reference chain.

Example:
    >>> X = NullableArray.from_list([[1, None, 3], [4, 5, 6]])
    >>> v = X[:, ::2]           # NullableView, shape (2, 2)
    >>> v.anynull()             # walks v's mapping, not X's whole mask
    False
    >>> v.fill(Nullable())      # writes land in X
    >>> X.isnull
    array([[ True,  True,  True],
           [ True, False,  True]])
"""

from __future__ import annotations

import itertools
from typing import Any, List, Sequence, Tuple

import numpy as np

from ._array import NullableArray
from ._ownership import Ownership, RefChain
from .error import BoundsError

__all__ = ['NullableView']


def _normalize_index(index: Any) -> Tuple[Any, ...]:
    if not isinstance(index, tuple):
        index = (index,)
    for k in index:
        # numpy treats a scalar bool as a mask, which copies
        if isinstance(k, (bool, np.bool_)):
            raise BoundsError("View index must not be a bool (boolean indexing would copy the buffers)")
        if k is Ellipsis or isinstance(k, (slice, int, np.integer)):
            continue
        raise BoundsError(
            f"View index must be int, slice or Ellipsis, got {type(k).__name__} "
            f"(advanced indexing would copy the buffers)"
        )
    if sum(1 for k in index if k is Ellipsis) > 1:
        raise BoundsError("View index may contain at most one Ellipsis")
    return index


class NullableView(NullableArray):
    """
    Non-owning view into a parent NullableArray.

    Attributes:
        parent (NullableArray): The array whose buffers are reindexed
        index (tuple): Basic index applied to the parent buffers
    """

    __slots__ = ("_parent", "_index")

    def __init__(self, parent: NullableArray, index: Any):
        index = _normalize_index(index)
        try:
            probe = parent.values[index]
        except IndexError as e:
            raise BoundsError(str(e)) from e
        if not isinstance(probe, np.ndarray):
            raise BoundsError("Index selects a single position; use get() instead")

        self._parent = parent
        self._index = index
        self._values = None
        self._isnull = None
        self._ownership = Ownership.VIEW
        self._ref_chain = RefChain()
        self._ref_chain.add(parent)

    @property
    def parent(self) -> NullableArray:
        return self._parent

    @property
    def index(self) -> Tuple[Any, ...]:
        return self._index

    @property
    def values(self) -> np.ndarray:
        return self._parent.values[self._index]

    @property
    def isnull(self) -> np.ndarray:
        return self._parent.isnull[self._index]

    def _index_map(self) -> List[Sequence[int]]:
        """Parent positions selected along each parent dimension."""
        shape = self._parent.shape
        index = list(self._index)
        for pos, k in enumerate(index):
            if k is Ellipsis:
                index[pos:pos + 1] = [slice(None)] * (len(shape) - len(index) + 1)
                break
        index += [slice(None)] * (len(shape) - len(index))

        ranges = []
        for k, dim in zip(index, shape):
            if isinstance(k, slice):
                ranges.append(range(*k.indices(dim)))
            else:
                k = int(k)
                ranges.append((k + dim if k < 0 else k,))
        return ranges

    def anynull(self) -> bool:
        """True iff a position of the view is null (stops at the first one)."""
        mask = self._parent.isnull
        for pos in itertools.product(*self._index_map()):
            if mask[pos]:
                return True
        return False

    def __repr__(self) -> str:
        return f"{super().__repr__()[:-1]}, view)"
