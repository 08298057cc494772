"""
Pytest configuration and shared fixtures for nullables tests.
"""

import pytest
import numpy as np
from pathlib import Path
import sys

# Add src to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root / "src"))

# Try to import nullables - if it fails, skip tests that require it
try:
    import nullables
    from nullables import NullableArray, Nullable, config
    HAS_NULLABLES = True
except ImportError as e:
    HAS_NULLABLES = False
    NULLABLES_IMPORT_ERROR = str(e)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture(scope="session")
def requires_nullables():
    """Skip test if nullables is not available."""
    if not HAS_NULLABLES:
        pytest.skip(f"nullables not available: {NULLABLES_IMPORT_ERROR}")


@pytest.fixture(autouse=True)
def reset_config():
    """Every test starts and ends with the default configuration."""
    if HAS_NULLABLES:
        config.reset()
    yield
    if HAS_NULLABLES:
        config.reset()


@pytest.fixture
def int_with_null(requires_nullables):
    """values=[1, _, 3], isnull=[False, True, False] (slot 1 holds garbage 2)."""
    return NullableArray(
        np.array([1, 2, 3], dtype=np.int64),
        isnull=[False, True, False],
    )


@pytest.fixture
def float_matrix(requires_nullables):
    """3x4 float64 array 0..11 with a single null at (0, 0)."""
    X = NullableArray(np.arange(12, dtype=np.float64).reshape(3, 4))
    X.isnull[0, 0] = True
    return X


@pytest.fixture
def bool_with_null(requires_nullables):
    """[True, null, False, True]; the null slot holds True."""
    return NullableArray(
        np.array([True, True, False, True]),
        isnull=[False, True, False, False],
    )


@pytest.fixture
def object_payloads(requires_nullables):
    """Object array holding mutable lists, all valid."""
    values = np.empty(3, dtype=object)
    values[0] = [1]
    values[1] = [2]
    values[2] = [3]
    return NullableArray(values)


# =============================================================================
# Helper Functions
# =============================================================================

def assert_congruent(X):
    """Assert the values/isnull shape invariant."""
    assert X.values.shape == X.isnull.shape
    assert X.isnull.dtype == np.bool_


def assert_valid_equal(X, expected):
    """Assert valid positions of X equal expected (nulls given as None)."""
    assert_congruent(X)
    got = [None if x.isnull else x.value for x in X]
    assert got == list(expected)
