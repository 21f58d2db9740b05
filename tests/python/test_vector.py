"""
Tests for CsVec.
"""

import pytest
import numpy as np

from csmat.sparse import CsVec, ErrorKind, SparseError


class TestCsVec:
    """Test sparse vectors."""

    def test_new(self):
        vec = CsVec.new(5, [0, 3], [1.0, 2.0])
        assert vec.dim == 5
        assert vec.nnz == 2
        assert len(vec) == 2
        assert vec.dtype == np.float64
        assert list(vec) == [(0, 1.0), (3, 2.0)]

    def test_from_pairs(self):
        vec = CsVec.from_pairs(4, [(1, 2.0), (2, 3.0)])
        np.testing.assert_array_equal(vec.indices, [1, 2])
        assert CsVec.from_pairs(4, []).dtype == np.float64

    def test_get(self):
        vec = CsVec.new(5, [0, 3], [1.0, 2.0])
        assert vec.get(3) == 2.0
        assert vec.get(1) is None
        assert vec.get(4) is None

    @pytest.mark.parametrize("indices,data,kind", [
        ([0, 1], [1.0], ErrorKind.DATA_INDICES_MISMATCH),
        ([2, 1], [1.0, 2.0], ErrorKind.UNSORTED_INDICES),
        ([1, 1], [1.0, 2.0], ErrorKind.UNSORTED_INDICES),
        ([0, 5], [1.0, 2.0], ErrorKind.OUT_OF_BOUNDS_INDEX),
        ([-1], [1.0], ErrorKind.OUT_OF_BOUNDS_INDEX),
    ])
    def test_invalid(self, indices, data, kind):
        with pytest.raises(SparseError) as exc_info:
            CsVec.new(5, indices, data)
        assert exc_info.value.kind is kind

    def test_borrowed(self):
        vec = CsVec.new(5, [0, 3], [1.0, 2.0])
        borrowed = vec.borrowed()
        assert borrowed == vec
        assert np.shares_memory(borrowed.data, vec.data)
        with pytest.raises(ValueError):
            borrowed.data[0] = 0.0

    def test_equality(self):
        a = CsVec.new(5, [0], [1.0])
        assert a == CsVec.new(5, [0], [1.0])
        assert a != CsVec.new(6, [0], [1.0])
        assert a != CsVec.new(5, [1], [1.0])
        with pytest.raises(TypeError):
            hash(a)
