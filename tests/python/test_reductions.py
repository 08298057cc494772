"""
Tests for find/anynull/allnull/dropnull.
"""

import pytest
import numpy as np

from nullables import (
    NullableArray, Nullable, ElementTypeError,
    find, anynull, allnull, dropnull,
)


class TestFind:
    """Test find() on bool arrays."""

    def test_nulls_are_false(self, bool_with_null):
        """[True, null, False, True] -> positions 0 and 3."""
        result = find(bool_with_null)
        np.testing.assert_array_equal(result, [0, 3])
        assert result.dtype == np.int64

    def test_linear_indices_on_matrix(self, requires_nullables):
        X = NullableArray(
            np.array([[True, False], [True, True]]),
            isnull=[[False, False], [True, False]],
        )
        np.testing.assert_array_equal(X.find(), [0, 3])
        assert X.find().dtype == np.int64

    def test_all_null(self, requires_nullables):
        X = NullableArray(np.array([True, True]), isnull=[True, True])
        assert X.find().size == 0

    def test_non_bool_rejected(self, int_with_null):
        with pytest.raises(ElementTypeError):
            find(int_with_null)


class TestAnyNull:
    """Test anynull() overloads."""

    def test_all_valid(self, requires_nullables):
        X = NullableArray(np.arange(5))
        assert not anynull(X)

    def test_any_single_null(self, requires_nullables):
        """Flipping any single mask bit makes anynull true."""
        for i in range(5):
            X = NullableArray(np.arange(5))
            X.isnull[i] = True
            assert anynull(X)

    def test_empty(self, requires_nullables):
        assert not NullableArray.empty(0).anynull()

    def test_collection_of_scalars(self, requires_nullables):
        assert anynull([Nullable(1), Nullable(), Nullable(3)])
        assert not anynull([Nullable(1), Nullable(2)])

    def test_collection_non_nullable_never_null(self, requires_nullables):
        """Plain elements (None included) do not count as null."""
        assert not anynull([1, None, "x"])
        assert anynull([1, None, Nullable()])

    def test_multidimensional_collection(self, requires_nullables):
        """Every element of an object ndarray is checked, not its rows."""
        A = np.empty((2, 2), dtype=object)
        for k, pos in enumerate(np.ndindex(A.shape)):
            A[pos] = Nullable(k)
        assert not anynull(A)
        A[1, 1] = Nullable()
        assert anynull(A)

    def test_tuple(self, requires_nullables):
        assert anynull((1, Nullable(), 2))
        assert not anynull((1, 2))
        assert not anynull(())

    def test_short_circuits(self, requires_nullables):
        def elements():
            yield Nullable(1)
            yield Nullable()
            raise AssertionError("anynull kept iterating after a null")

        assert anynull(elements())


class TestAllNull:
    """Test allnull()."""

    def test_empty_is_true(self, requires_nullables):
        assert allnull(NullableArray.empty(0))
        assert allnull(NullableArray(np.array([], dtype=np.float64)))

    def test_single_null(self, requires_nullables):
        assert allnull(NullableArray(np.array([1.0]), isnull=[True]))

    def test_single_valid(self, requires_nullables):
        assert not allnull(NullableArray(np.array([1.0])))

    def test_mixed(self, int_with_null):
        assert not int_with_null.allnull()


class TestDropNull:
    """Test dropnull()."""

    def test_valid_values_in_order(self, int_with_null):
        np.testing.assert_array_equal(dropnull(int_with_null), [1, 3])

    def test_result_is_independent(self, int_with_null):
        result = int_with_null.dropnull()
        result[0] = 100
        assert int_with_null.values[0] == 1

    def test_matrix_flattens(self, float_matrix):
        assert float_matrix.dropnull().shape == (11,)
