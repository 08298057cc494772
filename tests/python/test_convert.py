"""
Tests for the conversion subsystem.

Covers:
- Strict conversion (fails on nulls)
- Replacement conversion (never fails on nulls)
- Construction conversion into NullableArray
- float()
"""

import pytest
import numpy as np

from nullables import (
    NullableArray, Nullable, ConvertConfig, config,
    NullException, DimensionMismatchError, ElementTypeError, NullableArrayError,
    to_array, to_vector, to_matrix, to_nullable, nullable_float,
)


class TestStrictConversion:
    """Test to_array() without a replacement."""

    def test_nulls_raise_null_exception(self, int_with_null):
        with pytest.raises(NullException) as exc_info:
            to_array(int_with_null)
        err = exc_info.value
        # Distinct from shape and type errors
        assert isinstance(err, NullableArrayError)
        assert not isinstance(err, (IndexError, ValueError, TypeError))

    def test_round_trip(self, requires_nullables):
        X = NullableArray(np.array([1.5, 2.5, 3.5]))
        plain = to_array(X)
        back = to_nullable(plain)
        assert not back.anynull()
        np.testing.assert_array_equal(back.values, X.values)

    def test_target_dtype(self, requires_nullables):
        X = NullableArray(np.array([1.9, 2.1]))
        plain = X.to_array('int32')
        assert plain.dtype == np.int32
        np.testing.assert_array_equal(plain, [1, 2])

    def test_result_is_a_copy(self, requires_nullables):
        X = NullableArray(np.array([1.0, 2.0]))
        plain = X.to_array()
        plain[0] = 100.0
        assert X.values[0] == 1.0

    def test_configured_casting(self, requires_nullables):
        X = NullableArray(np.array([1.0, 2.0]))
        with config.local(convert=ConvertConfig(casting='safe')):
            with pytest.raises(TypeError):
                X.to_array('int32')
        # Default rule is back outside the context
        assert X.to_array('int32').dtype == np.int32


class TestReplacementConversion:
    """Test to_array(replacement=...)."""

    def test_replacement_zero(self, int_with_null):
        np.testing.assert_array_equal(to_array(int_with_null, replacement=0), [1, 0, 3])

    def test_replacement_with_dtype(self, int_with_null):
        result = int_with_null.to_array('float64', replacement=0.5)
        assert result.dtype == np.float64
        np.testing.assert_array_equal(result, [1.0, 0.5, 3.0])

    def test_replacement_converted_to_target(self, int_with_null):
        result = int_with_null.to_array(np.int64, replacement=2.7)
        np.testing.assert_array_equal(result, [1, 2, 3])

    def test_no_nulls(self, requires_nullables):
        X = NullableArray(np.array([4, 5]))
        np.testing.assert_array_equal(X.to_array(replacement=-1), [4, 5])

    def test_all_null(self, requires_nullables):
        X = NullableArray.empty((2, 2), dtype=np.int64)
        np.testing.assert_array_equal(X.to_array(replacement=7), [[7, 7], [7, 7]])

    def test_none_replacement_for_objects(self, requires_nullables):
        X = NullableArray.from_list(['a', None], dtype=object)
        assert list(X.to_array(replacement=None)) == ['a', None]

    def test_string_replacement_widens(self, requires_nullables):
        """A replacement longer than the payload width is kept whole."""
        X = NullableArray.from_list(['a', None, 'c'])
        result = X.to_array(replacement='NA')
        assert list(result) == ['a', 'NA', 'c']
        assert result.dtype == np.dtype('<U2')

    def test_unsized_string_target(self, int_with_null):
        result = int_with_null.to_array('U', replacement='missing')
        assert list(result) == ['1', 'missing', '3']


class TestShapedConversion:
    """Test to_vector()/to_matrix()."""

    def test_vector(self, int_with_null):
        np.testing.assert_array_equal(to_vector(int_with_null, replacement=0), [1, 0, 3])
        with pytest.raises(NullException):
            to_vector(int_with_null)

    def test_vector_rejects_matrix(self, float_matrix):
        with pytest.raises(DimensionMismatchError):
            to_vector(float_matrix, replacement=0.0)

    def test_matrix(self, float_matrix):
        result = to_matrix(float_matrix, replacement=-1.0)
        assert result.shape == (3, 4)
        assert result[0, 0] == -1.0
        assert result[2, 3] == 11.0

    def test_matrix_rejects_vector(self, int_with_null):
        with pytest.raises(DimensionMismatchError):
            to_matrix(int_with_null, replacement=0)


class TestConstructionConversion:
    """Test to_nullable() and astype()."""

    def test_from_plain_array(self, requires_nullables):
        X = to_nullable([1, 2, 3], dtype='float32')
        assert X.dtype == np.float32
        assert not X.anynull()

    def test_from_plain_array_owns_buffer(self, requires_nullables):
        source = np.arange(3)
        X = to_nullable(source)
        X.values[0] = 9
        assert source[0] == 0

    def test_from_nullable_keeps_mask(self, int_with_null):
        Y = to_nullable(int_with_null, dtype=np.float64)
        assert Y.dtype == np.float64
        np.testing.assert_array_equal(Y.isnull, int_with_null.isnull)
        assert not np.shares_memory(Y.isnull, int_with_null.isnull)
        assert Y.values[0] == 1.0 and Y.values[2] == 3.0

    def test_null_garbage_not_converted(self, requires_nullables):
        """Only valid payloads go through element conversion."""
        values = np.empty(3, dtype=object)
        values[:] = [1.5, None, 3.5]
        X = NullableArray(values, isnull=[False, True, False])
        Y = X.astype(np.float64)
        np.testing.assert_array_equal(Y.values[[0, 2]], [1.5, 3.5])
        np.testing.assert_array_equal(Y.isnull, [False, True, False])

    def test_nullable_eltype(self, int_with_null):
        assert int_with_null.astype(Nullable[np.int32]).dtype == np.int32

    def test_from_masked_array(self, requires_nullables):
        masked = np.ma.array([1.0, 2.0], mask=[True, False])
        X = to_nullable(masked, dtype='float32')
        assert X.dtype == np.float32
        np.testing.assert_array_equal(X.isnull, [True, False])


class TestFloat:
    """Test float()."""

    def test_int_to_float64(self, int_with_null):
        Y = nullable_float(int_with_null)
        assert Y.dtype == np.float64
        np.testing.assert_array_equal(Y.isnull, int_with_null.isnull)
        assert Y.values[2] == 3.0

    def test_float32_kept(self, requires_nullables):
        X = NullableArray(np.array([1.0], dtype=np.float32))
        assert X.float().dtype == np.float32

    def test_object_rejected(self, requires_nullables):
        X = NullableArray(np.array([1, 2], dtype=object))
        with pytest.raises(ElementTypeError):
            X.float()

    def test_no_float_counterpart(self, requires_nullables):
        X = NullableArray(np.array(['2020-01-01'], dtype='datetime64[D]'))
        with pytest.raises(ElementTypeError):
            X.float()
