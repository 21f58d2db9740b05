"""
Tests for storage tags, ranges and errors.
"""

import pickle

import pytest

from csmat.sparse import (
    Orientation, Ownership, CSR, CSC, Range, ErrorKind, SparseError,
)
from csmat.sparse._backend import outer_inner_to_shape, shape_to_outer_inner


class TestOrientation:
    """Test Orientation enum."""

    def test_values(self):
        assert Orientation.ROW_MAJOR.value == 'csr'
        assert Orientation.COLUMN_MAJOR.value == 'csc'
        assert CSR is Orientation.ROW_MAJOR
        assert CSC is Orientation.COLUMN_MAJOR

    def test_other(self):
        assert CSR.other() is CSC
        assert CSC.other() is CSR

    def test_coerce(self):
        assert Orientation.coerce('csr') is CSR
        assert Orientation.coerce('CSC') is CSC
        assert Orientation.coerce(CSC) is CSC
        with pytest.raises(ValueError):
            Orientation.coerce('coo')
        with pytest.raises(ValueError):
            Orientation.coerce(1)

    def test_shape_mapping(self):
        assert outer_inner_to_shape(CSR, 2, 3) == (2, 3)
        assert outer_inner_to_shape(CSC, 2, 3) == (3, 2)
        assert shape_to_outer_inner(CSC, (3, 2)) == (2, 3)

    def test_ownership(self):
        assert Ownership.OWNED != Ownership.VIEW


class TestRange:
    """Test Range."""

    def test_constructors(self):
        assert Range.bounded(1, 3) == Range(1, 3)
        assert Range.starting_at(2) == Range(2, None)
        assert Range.up_to(4) == Range(None, 4)
        assert Range.full() == Range()
        assert Range.bounded(1, 3).is_bounded
        assert not Range.up_to(4).is_bounded

    def test_resolve(self):
        assert Range.bounded(1, 3).resolve(10) == (1, 3)
        assert Range.starting_at(4).resolve(10) == (4, 10)
        assert Range.up_to(2).resolve(10) == (0, 2)
        assert Range.full().resolve(0) == (0, 0)

    @pytest.mark.parametrize("rng", [
        Range.bounded(-1, 2),
        Range.up_to(11),
        Range.bounded(5, 4),
        Range.starting_at(11),
    ])
    def test_resolve_invalid(self, rng):
        with pytest.raises(SparseError) as exc_info:
            rng.resolve(10)
        assert exc_info.value.kind is ErrorKind.OUT_OF_BOUNDS_INDEX

    def test_coerce(self):
        assert Range.coerce(None) == Range.full()
        assert Range.coerce(slice(1, 4)) == Range(1, 4)
        assert Range.coerce(slice(None, 4, 1)) == Range(None, 4)
        assert Range.coerce(range(2, 5)) == Range(2, 5)
        assert Range.coerce((0, 3)) == Range(0, 3)
        r = Range(1, 2)
        assert Range.coerce(r) is r

    def test_coerce_invalid(self):
        with pytest.raises(ValueError):
            Range.coerce(slice(0, 4, 2))
        with pytest.raises(ValueError):
            Range.coerce(range(0, 4, 2))
        with pytest.raises(TypeError):
            Range.coerce("0:3")

    def test_frozen(self):
        r = Range(1, 2)
        with pytest.raises(AttributeError):
            r.start = 0


class TestSparseError:
    """Test SparseError."""

    def test_is_value_error(self):
        assert issubclass(SparseError, ValueError)

    def test_default_message(self):
        err = SparseError(ErrorKind.EMPTY_STACKING_LIST)
        assert err.kind is ErrorKind.EMPTY_STACKING_LIST
        assert "EMPTY_STACKING_LIST" in str(err)
        assert err.message

    def test_custom_message(self):
        err = SparseError(ErrorKind.READ_ONLY, "sealed")
        assert err.message == "sealed"
        assert str(err) == "READ_ONLY: sealed"

    def test_from_kind(self):
        err = SparseError.from_kind(ErrorKind.EMPTY_BMAT_ROW, "block row 2")
        assert err.kind is ErrorKind.EMPTY_BMAT_ROW
        assert err.message.startswith("block row 2: ")

    def test_int_kind(self):
        err = SparseError(int(ErrorKind.READ_ONLY))
        assert err.kind is ErrorKind.READ_ONLY

    def test_equality(self):
        a = SparseError(ErrorKind.INCOMPATIBLE_STORAGES, "a")
        b = SparseError(ErrorKind.INCOMPATIBLE_STORAGES, "b")
        assert a == b
        assert a == ErrorKind.INCOMPATIBLE_STORAGES
        assert a != ErrorKind.INCOMPATIBLE_DIMENSIONS
        assert hash(a) == hash(b)

    def test_pickle(self):
        err = SparseError(ErrorKind.DESERIALIZATION, "bad payload")
        restored = pickle.loads(pickle.dumps(err))
        assert restored.kind is ErrorKind.DESERIALIZATION
        assert restored.message == "bad payload"

    def test_every_kind_has_message(self):
        for kind in ErrorKind:
            assert SparseError(kind).message
