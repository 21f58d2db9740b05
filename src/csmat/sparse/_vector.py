"""
Sparse Vectors

CsVec is one outer line of a compressed matrix: a dimension plus
parallel (indices, data) arrays with strictly increasing indices.
Vectors yielded by matrix iteration borrow read-only slices of the
matrix arrays; vectors built by the caller own their arrays.
"""

from typing import Any, Iterable, Iterator, Optional, Tuple

import numpy as np

from .._config import config
from ._errors import SparseError, ErrorKind
from ._ops import check_line

__all__ = ['CsVec']


class CsVec:
    """
    Sparse vector of (index, value) pairs sorted by index.

    Attributes:
        dim: Logical length of the vector.
        indices: Positions of the stored entries.
        data: Stored values, same length and order as indices.

    Example:
        >>> vec = CsVec.new(5, [0, 3], [1.0, 2.0])
        >>> list(vec)
        [(0, 1.0), (3, 2.0)]
        >>> vec.get(3)
        2.0
    """

    __slots__ = ('_dim', '_indices', '_data')

    def __init__(self, dim: int, indices: np.ndarray, data: np.ndarray):
        # Unchecked, use CsVec.new for caller supplied arrays
        self._dim = dim
        self._indices = indices
        self._data = data

    @classmethod
    def new(cls, dim: int, indices: Any, data: Any, dtype: Optional[Any] = None) -> 'CsVec':
        """Create a vector, validating the indices.

        Raises:
            SparseError: DATA_INDICES_MISMATCH, UNSORTED_INDICES or
                OUT_OF_BOUNDS_INDEX.
        """
        indices = np.array(indices, dtype=config.index_dtype, ndmin=1)
        data = np.array(data, dtype=dtype, ndmin=1)
        if len(indices) != len(data):
            raise SparseError(ErrorKind.DATA_INDICES_MISMATCH,
                              f"{len(indices)} indices for {len(data)} values")
        check_line(indices, dim)
        return cls(dim, indices, data)

    @classmethod
    def from_pairs(cls, dim: int, pairs: Iterable[Tuple[int, Any]], dtype: Optional[Any] = None) -> 'CsVec':
        """Create a vector from an iterable of (index, value) pairs."""
        pairs = list(pairs)
        indices = [i for i, _ in pairs]
        values = [v for _, v in pairs]
        if dtype is None and not values:
            dtype = config.value_dtype
        return cls.new(dim, indices, values, dtype=dtype)

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def dim(self) -> int:
        return self._dim

    @property
    def indices(self) -> np.ndarray:
        return self._indices

    @property
    def data(self) -> np.ndarray:
        return self._data

    @property
    def nnz(self) -> int:
        return len(self._indices)

    @property
    def dtype(self) -> np.dtype:
        return self._data.dtype

    # =========================================================================
    # Access
    # =========================================================================

    def get(self, index: int) -> Optional[Any]:
        """Return the value stored at index, or None."""
        pos = int(np.searchsorted(self._indices, index))
        if pos < len(self._indices) and self._indices[pos] == index:
            return self._data[pos]
        return None

    def borrowed(self) -> 'CsVec':
        """Read-only vector sharing this vector's arrays."""
        indices = self._indices.view()
        data = self._data.view()
        indices.flags.writeable = False
        data.flags.writeable = False
        return CsVec(self._dim, indices, data)

    def __iter__(self) -> Iterator[Tuple[int, Any]]:
        for idx, val in zip(self._indices.tolist(), self._data.tolist()):
            yield idx, val

    def __len__(self) -> int:
        return self.nnz

    def __eq__(self, other) -> bool:
        if not isinstance(other, CsVec):
            return NotImplemented
        return (self._dim == other._dim
                and np.array_equal(self._indices, other._indices)
                and np.array_equal(self._data, other._data))

    __hash__ = None

    def __repr__(self) -> str:
        return f"CsVec(dim={self._dim}, nnz={self.nnz}, dtype={self.dtype})"
