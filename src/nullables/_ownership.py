"""Ownership and Reference Management.

Tracks whether a nullable array owns its two buffers or aliases the
buffers of a parent array, and keeps parents alive for as long as a view
derived from them exists.

Safety Model:
    1. OWNED arrays: exclusive owners of values and mask
    2. VIEW arrays: hold strong references to every ancestor
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List

__all__ = [
    'Ownership',
    'RefChain',
]


class Ownership(Enum):
    """Buffer ownership model.

    Attributes:
        OWNED: The array owns its values and mask buffers.
               Created by: constructors, copy(), deepcopy(), conversions
        VIEW: The array reindexes a parent's buffers without owning them.
              Created by: view(), slicing
    """
    OWNED = 'owned'
    VIEW = 'view'


@dataclass
class RefChain:
    """Maintains the reference chain for view arrays.

    A view stores strong references to all of its ancestors so that none
    of them is garbage collected while the view is alive. Chains are
    flattened: a view of a view references the root directly.

    Example:
        >>> X = NullableArray(np.arange(10))
        >>> v1 = X.view(slice(0, 8))    # refs: [X]
        >>> v2 = v1.view(slice(0, 4))   # refs: [v1, X]
    """
    _refs: List[Any] = field(default_factory=list)

    def add(self, source: Any) -> None:
        """Add source and its own ancestors to the chain (by identity)."""
        if source is None:
            return
        if any(ref is source for ref in self._refs):
            return

        self._refs.append(source)

        chain = getattr(source, '_ref_chain', None)
        if chain:
            for ancestor in chain._refs:
                if not any(ref is ancestor for ref in self._refs):
                    self._refs.append(ancestor)

    @property
    def count(self) -> int:
        """Number of held references."""
        return len(self._refs)

    @property
    def is_empty(self) -> bool:
        return len(self._refs) == 0

    def __bool__(self) -> bool:
        return not self.is_empty

    def __repr__(self) -> str:
        return f"RefChain(count={self.count})"
