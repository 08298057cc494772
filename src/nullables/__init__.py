"""
nullables - Nullable Arrays

Column storage with SQL-style null semantics:
- NullableArray: values buffer + independent validity mask, same shape
- Nullable: optional scalar used for fill() and element reads
- NullableView: non-owning reindexing of a parent's buffers
- Strict and replacement conversion to plain numpy arrays

Architecture:
    ┌──────────────────────────────────────────────┐
    │                NullableArray                 │
    ├──────────────────────────────────────────────┤
    │  values: ndarray[T]    isnull: ndarray[bool] │
    │  Ownership: OWNED | VIEW                     │
    └──────────────────────────────────────────────┘

Example:
    >>> import nullables as nl
    >>> X = nl.NullableArray.from_list([1.0, None, 3.0])
    >>> X.anynull()
    True
    >>> nl.to_array(X, replacement=0.0)
    array([1., 0., 3.])
    >>> nl.to_array(X)
    Traceback (most recent call last):
        ...
    nullables.error.NullException: Cannot convert NullableArray with null values
"""

__version__ = '0.1.0'

from ._array import NullableArray
from ._view import NullableView
from ._scalar import Nullable, isnull_scalar
from ._dtypes import (
    NullableType,
    normalize_dtype,
    is_bits_dtype,
    is_bool_dtype,
    is_numeric_dtype,
    float_dtype,
)
from ._ownership import Ownership, RefChain
from ._config import (
    CopyStrategy,
    CopyConfig,
    ConvertConfig,
    NullablesConfig,
    config,
    get_config,
    set_copy_strategy,
    set_casting,
)
from ._ops import (
    size,
    length,
    ndims,
    endof,
    similar,
    copy,
    copyto,
    fill,
    deepcopy,
    resize,
    find,
    anynull,
    allnull,
    dropnull,
    isnan,
    isfinite,
    to_array,
    to_vector,
    to_matrix,
    to_nullable,
    nullable_float,
)
from .error import (
    NullableArrayError,
    BoundsError,
    DimensionMismatchError,
    ElementTypeError,
    NullException,
)

__all__ = [
    # Version
    '__version__',

    # Core classes
    'NullableArray',
    'NullableView',
    'Nullable',
    'NullableType',
    'isnull_scalar',

    # Ownership
    'Ownership',
    'RefChain',

    # Element types
    'normalize_dtype',
    'is_bits_dtype',
    'is_bool_dtype',
    'is_numeric_dtype',
    'float_dtype',

    # Configuration
    'CopyStrategy',
    'CopyConfig',
    'ConvertConfig',
    'NullablesConfig',
    'config',
    'get_config',
    'set_copy_strategy',
    'set_casting',

    # Operations
    'size',
    'length',
    'ndims',
    'endof',
    'similar',
    'copy',
    'copyto',
    'fill',
    'deepcopy',
    'resize',
    'find',
    'anynull',
    'allnull',
    'dropnull',
    'isnan',
    'isfinite',
    'to_array',
    'to_vector',
    'to_matrix',
    'to_nullable',
    'nullable_float',

    # Errors
    'NullableArrayError',
    'BoundsError',
    'DimensionMismatchError',
    'ElementTypeError',
    'NullException',
]
