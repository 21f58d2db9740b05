"""
Compressed Matrix Base Class

This module defines the read interface shared by owning matrices and
views. Everything here only reads the three compressed arrays, so it
works the same whether the arrays are owned or borrowed.

Type Hierarchy:

    CompressedBase (ABC)
    ├── CsMat     - Owning matrix, supports appending outer lines
    └── CsMatView - Read-only view borrowing another matrix's arrays

Example:

    mat = CsMat.eye(3)
    view = mat.view()

    for m in [mat, view]:
        for i, line in m.outer_iterator():   # Same interface!
            print(i, list(line))
"""

from abc import ABC, abstractmethod
from typing import Tuple, Optional, Any, Iterator, TYPE_CHECKING
import logging

import numpy as np

from .._config import config
from ._backend import Orientation, Ownership, StorageInfo, outer_inner_to_shape
from ._ops import transpose_storage, arrays_to_scipy
from ._range import Range
from ._vector import CsVec

if TYPE_CHECKING:
    from scipy.sparse import spmatrix
    from ._matrix import CsMat
    from ._view import CsMatView

__all__ = ['CompressedBase']

logger = logging.getLogger("csmat.matrix")


class CompressedBase(ABC):
    """
    Abstract base class for compressed sparse matrices.

    Required (subclasses must implement):
        storage(): Orientation tag
        outer_dims(): Number of outer lines
        inner_dims(): Size of the inner dimension
        indptr, indices, data: The compressed arrays (used prefix only)
        ownership: Ownership tag
    """

    # =========================================================================
    # Abstract Interface
    # =========================================================================

    @abstractmethod
    def storage(self) -> Orientation:
        """Storage orientation."""
        ...

    @abstractmethod
    def outer_dims(self) -> int:
        """Number of outer lines (rows for CSR, columns for CSC)."""
        ...

    @abstractmethod
    def inner_dims(self) -> int:
        """Size of each outer line (columns for CSR, rows for CSC)."""
        ...

    @property
    @abstractmethod
    def indptr(self) -> np.ndarray:
        """Offsets array, length outer_dims() + 1."""
        ...

    @property
    @abstractmethod
    def indices(self) -> np.ndarray:
        """Inner positions of the non-zeros."""
        ...

    @property
    @abstractmethod
    def data(self) -> np.ndarray:
        """Stored values."""
        ...

    @property
    @abstractmethod
    def ownership(self) -> Ownership:
        ...

    # =========================================================================
    # Derived Properties
    # =========================================================================

    @property
    def shape(self) -> Tuple[int, int]:
        """Matrix dimensions (rows, cols)."""
        return outer_inner_to_shape(self.storage(), self.outer_dims(), self.inner_dims())

    @property
    def rows(self) -> int:
        return self.shape[0]

    @property
    def cols(self) -> int:
        return self.shape[1]

    @property
    def nnz(self) -> int:
        """Number of stored entries."""
        return int(self.indptr[-1])

    def nb_nonzero(self) -> int:
        return self.nnz

    @property
    def dtype(self) -> np.dtype:
        return self.data.dtype

    @property
    def density(self) -> float:
        total = self.rows * self.cols
        return self.nnz / total if total > 0 else 0.0

    @property
    def is_sealed(self) -> bool:
        """Whether appending outer lines is forbidden."""
        return True

    def is_csr(self) -> bool:
        return self.storage() is Orientation.ROW_MAJOR

    def is_csc(self) -> bool:
        return self.storage() is Orientation.COLUMN_MAJOR

    is_row_major = is_csr
    is_column_major = is_csc

    def storage_info(self) -> StorageInfo:
        return StorageInfo(
            orientation=self.storage(),
            ownership=self.ownership,
            dtype=str(self.dtype),
            shape=self.shape,
            nnz=self.nnz,
            sealed=self.is_sealed,
        )

    # =========================================================================
    # Outer Line Access
    # =========================================================================

    def _readonly(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        arrays = []
        for arr in (self.indptr, self.indices, self.data):
            arr = arr.view()
            arr.flags.writeable = False
            arrays.append(arr)
        return tuple(arrays)

    def outer_iterator(self) -> Iterator[Tuple[int, CsVec]]:
        """Iterate over outer lines in increasing order.

        Yields:
            (outer_index, CsVec) where the vector borrows read-only
            slices of this matrix's arrays.
        """
        indptr, indices, data = self._readonly()
        inner = self.inner_dims()
        for i in range(self.outer_dims()):
            start, end = indptr[i], indptr[i + 1]
            yield i, CsVec(inner, indices[start:end], data[start:end])

    def outer_view(self, i: int) -> Optional[CsVec]:
        """Borrowed view of outer line i, or None if out of bounds."""
        if i < 0 or i >= self.outer_dims():
            return None
        indptr, indices, data = self._readonly()
        start, end = indptr[i], indptr[i + 1]
        return CsVec(self.inner_dims(), indices[start:end], data[start:end])

    def get(self, row: int, col: int) -> Optional[Any]:
        """Return the value stored at (row, col), or None."""
        if self.is_csr():
            outer, inner = row, col
        else:
            outer, inner = col, row
        if inner < 0 or inner >= self.inner_dims():
            return None
        line = self.outer_view(outer)
        if line is None:
            return None
        return line.get(inner)

    def __getitem__(self, key):
        if not (isinstance(key, tuple) and len(key) == 2):
            raise TypeError("Matrix indexing expects a (row, col) pair")
        return self.get(*key)

    # =========================================================================
    # Views
    # =========================================================================

    def view(self) -> 'CsMatView':
        """Read-only view over the whole matrix."""
        from ._view import CsMatView
        return CsMatView._from_source(self, self.storage(), 0, self.outer_dims(),
                                      self.inner_dims())

    def slice_outer(self, outer_range: Any) -> 'CsMatView':
        """Read-only view over a contiguous range of outer lines.

        Args:
            outer_range: Range, slice with unit step, range, (start, end)
                tuple, or None for all lines.

        Raises:
            SparseError: OUT_OF_BOUNDS_INDEX if the range does not fit.
        """
        from ._view import CsMatView
        start, end = Range.coerce(outer_range).resolve(self.outer_dims())
        return CsMatView._from_source(self, self.storage(), start, end, self.inner_dims())

    def transpose_view(self) -> 'CsMatView':
        """Zero-copy transpose: same arrays, other orientation."""
        from ._view import CsMatView
        return CsMatView._from_source(self, self.storage().other(), 0, self.outer_dims(),
                                      self.inner_dims())

    # =========================================================================
    # Conversion
    # =========================================================================

    def to_owned(self) -> 'CsMat':
        """Deep copy into a new, unsealed owning matrix."""
        from ._matrix import CsMat
        return CsMat._from_trusted(
            self.storage(), self.outer_dims(), self.inner_dims(),
            self.indptr.copy(), self.indices.copy(), self.data.copy(),
        )

    def to_other_storage(self) -> 'CsMat':
        """Same matrix, re-compressed in the other orientation."""
        from ._matrix import CsMat
        logger.debug("Converting %s matrix %s to %s",
                     self.storage().value, self.shape, self.storage().other().value)
        indptr, indices, data = transpose_storage(
            self.outer_dims(), self.inner_dims(),
            self.indptr, self.indices, self.data,
            index_dtype=config.index_dtype,
        )
        return CsMat._from_trusted(self.storage().other(), self.inner_dims(),
                                   self.outer_dims(), indptr, indices, data)

    def to_csr(self) -> 'CsMat':
        """Owning row-major copy."""
        if self.is_csr():
            return self.to_owned()
        return self.to_other_storage()

    def to_csc(self) -> 'CsMat':
        """Owning column-major copy."""
        if self.is_csc():
            return self.to_owned()
        return self.to_other_storage()

    to_row_major = to_csr
    to_column_major = to_csc

    def to_scipy(self) -> 'spmatrix':
        """Convert to scipy csr_matrix / csc_matrix (copies arrays)."""
        return arrays_to_scipy(self.storage().value, self.shape,
                               self.indptr, self.indices, self.data, copy=True)

    # =========================================================================
    # Magic Methods
    # =========================================================================

    def structurally_equal(self, other: 'CompressedBase') -> bool:
        """Same orientation, shape and identical arrays."""
        return (self.storage() is other.storage()
                and self.shape == other.shape
                and np.array_equal(self.indptr, other.indptr)
                and np.array_equal(self.indices, other.indices)
                and np.array_equal(self.data, other.data))

    def __eq__(self, other) -> bool:
        if not isinstance(other, CompressedBase):
            return NotImplemented
        return self.structurally_equal(other)

    __hash__ = None

    def __repr__(self) -> str:
        return (f"{self.__class__.__name__}("
                f"shape={self.shape}, nnz={self.nnz}, "
                f"dtype={self.dtype}, storage={self.storage().value})")


def ensure_compressed(obj: Any, what: str = "matrix") -> CompressedBase:
    """Raise TypeError unless obj is a compressed matrix."""
    if not isinstance(obj, CompressedBase):
        raise TypeError(f"Expected CsMat or CsMatView as {what}, got {type(obj).__name__}")
    return obj

