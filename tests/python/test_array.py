"""
Tests for Array class.
"""

import pytest
import numpy as np
from csmat.sparse._array import Array, empty, from_list, from_numpy


class TestArrayCreation:
    """Test Array creation methods."""

    def test_array_creation_empty(self):
        """Test creating empty array."""
        arr = Array('float32', capacity=10)
        assert arr.size == 0
        assert arr.capacity == 10
        assert arr.dtype == 'float32'

    def test_array_creation_empty_function(self):
        """Test empty() function."""
        arr = empty('int64', 5)
        assert len(arr) == 0
        assert arr.capacity == 5

    def test_array_negative_capacity(self):
        with pytest.raises(ValueError):
            Array('float64', capacity=-1)

    def test_array_from_list(self):
        """Test from_list() function."""
        data = [1.0, 2.0, 3.0, 4.0, 5.0]
        arr = from_list(data, dtype='float32')
        assert arr.size == 5
        assert arr.dtype == 'float32'
        for i, val in enumerate(data):
            assert arr[i] == pytest.approx(val)

    def test_array_from_numpy_copies(self):
        values = np.arange(4)
        arr = from_numpy(values)
        values[0] = 99
        assert arr[0] == 0

    def test_wrap_adopts(self):
        values = np.arange(4, dtype=np.int64)
        arr = Array.wrap(values)
        assert np.shares_memory(arr.to_numpy(), values)
        assert arr.capacity == 4

    def test_wrap_read_only_copies(self):
        values = np.arange(4)
        values.flags.writeable = False
        arr = Array.wrap(values)
        assert not np.shares_memory(arr.to_numpy(), values)
        arr.append(4)
        assert arr.tolist() == [0, 1, 2, 3, 4]

    def test_wrap_rejects_2d(self):
        with pytest.raises(ValueError):
            Array.wrap(np.zeros((2, 2)))


class TestArrayGrowth:
    """Test capacity management."""

    def test_append(self):
        arr = Array('int64')
        for i in range(10):
            arr.append(i)
        assert arr.tolist() == list(range(10))
        assert arr.capacity >= 10

    def test_extend(self):
        arr = Array('float64')
        arr.extend([1.0, 2.0])
        arr.extend(np.array([3.0]))
        arr.extend([])
        assert arr.tolist() == [1.0, 2.0, 3.0]

    def test_reserve_amortized(self):
        arr = Array('int64', capacity=8)
        arr.extend(np.arange(8))
        arr.reserve(1)
        assert arr.capacity == 16

    def test_reserve_exact(self):
        arr = Array('int64', capacity=8)
        arr.extend(np.arange(8))
        arr.reserve_exact(1)
        assert arr.capacity == 9

    def test_reserve_noop(self):
        arr = Array('int64', capacity=8)
        arr.reserve_exact(4)
        assert arr.capacity == 8

    def test_growth_keeps_old_views(self):
        arr = Array('int64', capacity=2)
        arr.extend([1, 2])
        before = arr.to_numpy()
        arr.append(3)
        assert before.tolist() == [1, 2]
        assert arr.tolist() == [1, 2, 3]


class TestArrayAccess:
    """Test numpy access."""

    def test_to_numpy_prefix(self):
        arr = Array('int64', capacity=10)
        arr.extend([1, 2, 3])
        np.testing.assert_array_equal(arr.to_numpy(), [1, 2, 3])

    def test_to_numpy_read_only(self):
        arr = from_list([1, 2, 3], dtype='int64')
        view = arr.to_numpy(writeable=False)
        with pytest.raises(ValueError):
            view[0] = 5
        arr.append(4)
        assert arr.tolist() == [1, 2, 3, 4]

    def test_copy_trims(self):
        arr = Array('int64', capacity=10)
        arr.extend([1, 2])
        copy = arr.copy()
        assert copy.capacity == 2
        assert copy.tolist() == [1, 2]

    def test_repr(self):
        arr = from_list(list(range(10)), dtype='int64')
        assert '...' in repr(arr)
        assert 'capacity=10' in repr(arr)
