"""
Owning Compressed Sparse Matrix

CsMat exclusively owns its three arrays (indptr, indices, data) and is
built incrementally by appending outer lines. Matrices returned by the
construction functions are sealed: they are read-only from then on and
copy() must be used to get a mutable matrix again.

Memory Layout:
    - indptr[outer + 1]: Cumulative offsets, indptr[0] == 0
    - indices[nnz]: Inner positions (columns for CSR, rows for CSC)
    - data[nnz]: Stored values

Example:
    >>> from csmat.sparse import CsMat, CSR
    >>>
    >>> mat = CsMat.empty(CSR, 3)
    >>> mat.reserve_outer_dim_exact(2)
    >>> mat.reserve_nnz_exact(2)
    >>> mat.append_outer([(0, 3.0)])
    >>> mat.append_outer([(2, 4.0)])
    >>> mat.shape
    (2, 3)
"""

from typing import Tuple, Optional, Union, Any, Iterable
import logging

import numpy as np

from .._config import config
from ._array import Array
from ._backend import Orientation, Ownership, shape_to_outer_inner
from ._base import CompressedBase
from ._errors import SparseError, ErrorKind
from ._ops import check_compressed_structure, check_line, compress_triplets, scipy_to_arrays
from ._vector import CsVec

__all__ = ['CsMat']

logger = logging.getLogger("csmat.matrix")


def _as_1d(values: Any, dtype: Any, copy: bool) -> np.ndarray:
    if copy:
        return np.array(values, dtype=dtype, ndmin=1)
    return np.atleast_1d(np.asarray(values, dtype=dtype))


_NUMERIC_KINDS = 'buifc'


def _fits(src: np.dtype, dst: np.dtype) -> bool:
    """True if src values can be stored as dst without losing their kind.

    Casts within a kind (float64 -> float32) and widening between numeric
    kinds (bool -> int -> float -> complex) are allowed.
    """
    if np.can_cast(src, dst, casting='same_kind'):
        return True
    return (src.kind in _NUMERIC_KINDS and dst.kind in _NUMERIC_KINDS
            and _NUMERIC_KINDS.index(src.kind) <= _NUMERIC_KINDS.index(dst.kind))


class CsMat(CompressedBase):
    """
    Owning compressed sparse matrix (CSR or CSC).

    Attributes:
        indptr: Offsets array (read-only view)
        indices: Inner index array (read-only view)
        data: Values array (read-only view)
        shape: Matrix dimensions (rows, cols)

    Memory Model:
        Arrays are exclusively owned. Views created from this matrix
        borrow them and keep this matrix alive through their reference
        chain. Appending never moves data a view already points to,
        so existing views keep seeing the lines they were created with.
    """

    __slots__ = ('_storage', '_inner', '_indptr', '_indices', '_data', '_sealed', '_ref_chain')

    def __init__(
        self,
        storage: Union[Orientation, str],
        inner_dim: int,
        dtype: Optional[Any] = None,
    ):
        """Create an empty matrix with zero outer lines.

        Args:
            storage: Orientation (or 'csr' / 'csc')
            inner_dim: Size of every outer line
            dtype: Value dtype (configured default if not provided)
        """
        if inner_dim < 0:
            raise ValueError(f"inner dimension must be non-negative, got {inner_dim}")
        self._storage = Orientation.coerce(storage)
        self._inner = int(inner_dim)
        self._indptr = Array(config.index_dtype, 1)
        self._indptr.append(0)
        self._indices = Array(config.index_dtype)
        self._data = Array(dtype if dtype is not None else config.value_dtype)
        self._sealed = False
        self._ref_chain = None

    # =========================================================================
    # Factory Methods
    # =========================================================================

    @classmethod
    def empty(cls, storage: Union[Orientation, str], inner_dim: int,
              dtype: Optional[Any] = None) -> 'CsMat':
        """Empty matrix (zero outer lines), ready for append_outer."""
        return cls(storage, inner_dim, dtype)

    @classmethod
    def _from_trusted(
        cls,
        storage: Orientation,
        outer_dim: int,
        inner_dim: int,
        indptr: np.ndarray,
        indices: np.ndarray,
        data: np.ndarray,
    ) -> 'CsMat':
        # Arrays must be fresh and already valid
        mat = cls.__new__(cls)
        mat._storage = storage
        mat._inner = int(inner_dim)
        mat._indptr = Array.wrap(np.asarray(indptr, dtype=config.index_dtype))
        mat._indices = Array.wrap(np.asarray(indices, dtype=config.index_dtype))
        mat._data = Array.wrap(np.asarray(data))
        mat._sealed = False
        mat._ref_chain = None
        return mat

    @classmethod
    def from_arrays(
        cls,
        storage: Union[Orientation, str],
        shape: Tuple[int, int],
        indptr: Any,
        indices: Any,
        data: Any,
        copy: bool = True,
    ) -> 'CsMat':
        """Create from raw compressed arrays.

        Args:
            storage: Orientation of the arrays
            shape: Matrix shape (rows, cols)
            indptr: Offsets (outer + 1,)
            indices: Inner indices (nnz,)
            data: Values (nnz,)
            copy: Copy the arrays (otherwise adopt them when possible)

        Raises:
            SparseError: If the arrays violate the compressed invariants
                (skipped when config.check.check_structure is False).
        """
        storage = Orientation.coerce(storage)
        outer, inner = shape_to_outer_inner(storage, shape)
        indptr = _as_1d(indptr, config.index_dtype, copy)
        indices = _as_1d(indices, config.index_dtype, copy)
        data = _as_1d(data, None, copy)
        if config.check.check_structure:
            check_compressed_structure(outer, inner, indptr, indices, data)
        return cls._from_trusted(storage, outer, inner, indptr, indices, data)

    new = from_arrays

    @classmethod
    def zero(cls, shape: Tuple[int, int], storage: Union[Orientation, str] = Orientation.ROW_MAJOR,
             dtype: Optional[Any] = None) -> 'CsMat':
        """All-zero matrix of the given shape (no stored entries)."""
        storage = Orientation.coerce(storage)
        outer, inner = shape_to_outer_inner(storage, shape)
        return cls._from_trusted(
            storage, outer, inner,
            np.zeros(outer + 1, dtype=config.index_dtype),
            np.empty(0, dtype=config.index_dtype),
            np.empty(0, dtype=dtype if dtype is not None else config.value_dtype),
        )

    @classmethod
    def eye(cls, n: int, storage: Union[Orientation, str] = Orientation.ROW_MAJOR,
            dtype: Optional[Any] = None) -> 'CsMat':
        """Identity matrix of size n."""
        dtype = dtype if dtype is not None else config.value_dtype
        return cls._from_trusted(
            Orientation.coerce(storage), n, n,
            np.arange(n + 1, dtype=config.index_dtype),
            np.arange(n, dtype=config.index_dtype),
            np.ones(n, dtype=dtype),
        )

    @classmethod
    def from_triplets(
        cls,
        shape: Tuple[int, int],
        rows: Any,
        cols: Any,
        values: Any,
        storage: Union[Orientation, str] = Orientation.ROW_MAJOR,
    ) -> 'CsMat':
        """Create from (row, col, value) triplets; duplicates are summed."""
        storage = Orientation.coerce(storage)
        outer, inner = shape_to_outer_inner(storage, shape)
        if storage is Orientation.ROW_MAJOR:
            outer_idx, inner_idx = rows, cols
        else:
            outer_idx, inner_idx = cols, rows
        indptr, indices, data = compress_triplets(outer, inner, outer_idx, inner_idx, values,
                                                  index_dtype=config.index_dtype)
        return cls._from_trusted(storage, outer, inner, indptr, indices, data)

    @classmethod
    def from_scipy(cls, mat: Any) -> 'CsMat':
        """Create from a scipy sparse matrix (always copies).

        CSR and CSC keep their orientation, other formats become CSR.
        """
        fmt, shape, indptr, indices, data = scipy_to_arrays(mat)
        logger.debug("Importing scipy %s matrix %s (nnz=%d)", fmt, shape, len(data))
        return cls.from_arrays(fmt, shape, indptr, indices, data, copy=True)

    # =========================================================================
    # CompressedBase Interface
    # =========================================================================

    def storage(self) -> Orientation:
        return self._storage

    def outer_dims(self) -> int:
        return len(self._indptr) - 1

    def inner_dims(self) -> int:
        return self._inner

    @property
    def indptr(self) -> np.ndarray:
        return self._indptr.to_numpy(writeable=False)

    @property
    def indices(self) -> np.ndarray:
        return self._indices.to_numpy(writeable=False)

    @property
    def data(self) -> np.ndarray:
        return self._data.to_numpy(writeable=False)

    @property
    def ownership(self) -> Ownership:
        return Ownership.OWNED

    @property
    def is_sealed(self) -> bool:
        return self._sealed

    # =========================================================================
    # Capacity
    # =========================================================================

    @property
    def capacity(self) -> Tuple[int, int]:
        """Allocated (outer lines, non-zeros)."""
        return (self._indptr.capacity - 1, self._data.capacity)

    def reserve_outer_dim(self, additional: int) -> None:
        """Hint that `additional` more outer lines will be appended."""
        self._indptr.reserve(additional)

    def reserve_outer_dim_exact(self, additional: int) -> None:
        self._indptr.reserve_exact(additional)

    def reserve_nnz(self, additional: int) -> None:
        """Hint that `additional` more non-zeros will be appended."""
        self._indices.reserve(additional)
        self._data.reserve(additional)

    def reserve_nnz_exact(self, additional: int) -> None:
        self._indices.reserve_exact(additional)
        self._data.reserve_exact(additional)

    # =========================================================================
    # Mutation
    # =========================================================================

    def _line_data(self, data: Any, nnz: int) -> np.ndarray:
        # One value per index, castable to our dtype without changing kind
        data = np.asarray(data)
        if data.ndim != 1 or len(data) != nnz:
            raise SparseError(ErrorKind.DATA_INDICES_MISMATCH,
                              f"line has {nnz} indices but values of shape {data.shape}")
        dtype = self._data.dtype
        if nnz and not _fits(data.dtype, dtype):
            raise TypeError(f"cannot store {data.dtype} values in a {dtype} matrix")
        return data.astype(dtype, copy=False)

    def _push_line(self, indices: np.ndarray, data: np.ndarray) -> None:
        # Line-append primitive, inputs must already be valid for this matrix
        self._indices.extend(indices)
        self._data.extend(data)
        self._indptr.append(len(self._indices))

    def _check_writable(self) -> None:
        if self._sealed:
            raise SparseError(ErrorKind.READ_ONLY,
                              "CsMat is sealed; use copy() to get a mutable matrix")

    def append_outer_csvec(self, vec: CsVec) -> 'CsMat':
        """Append a line whose indices are known to be valid.

        Only the dimension and the value dtype are checked.

        Returns:
            self, to allow chaining
        """
        self._check_writable()
        if vec.dim != self._inner:
            raise SparseError(ErrorKind.INCOMPATIBLE_DIMENSIONS,
                              f"vector of dim {vec.dim} appended to inner dim {self._inner}")
        self._push_line(vec.indices, self._line_data(vec.data, len(vec.indices)))
        return self

    def append_outer(self, line: Union[CsVec, Iterable[Tuple[int, Any]]]) -> 'CsMat':
        """Append one outer line.

        Args:
            line: CsVec, or iterable of (index, value) pairs sorted by index

        Returns:
            self, to allow chaining

        Raises:
            SparseError: READ_ONLY if sealed, INCOMPATIBLE_DIMENSIONS if a
                CsVec has another dimension, UNSORTED_INDICES or
                OUT_OF_BOUNDS_INDEX for invalid indices,
                DATA_INDICES_MISMATCH unless there is one scalar value
                per index.
            TypeError: If the values would change kind when stored
                (e.g. floats into an integer matrix).

            Nothing is appended on failure.
        """
        self._check_writable()
        if isinstance(line, CsVec):
            if line.dim != self._inner:
                raise SparseError(ErrorKind.INCOMPATIBLE_DIMENSIONS,
                                  f"vector of dim {line.dim} appended to inner dim {self._inner}")
            indices, data = line.indices, line.data
        else:
            pairs = list(line)
            indices = np.array([i for i, _ in pairs], dtype=config.index_dtype)
            try:
                data = np.array([v for _, v in pairs])
            except ValueError as e:
                raise SparseError(ErrorKind.DATA_INDICES_MISMATCH, str(e)) from e
        if config.check.check_lines:
            check_line(indices, self._inner)
        self._push_line(indices, self._line_data(data, len(indices)))
        return self

    def seal(self) -> 'CsMat':
        """Make the matrix read-only. Returns self."""
        self._sealed = True
        return self

    # =========================================================================
    # Copies
    # =========================================================================

    def copy(self) -> 'CsMat':
        """Deep copy (unsealed, capacity trimmed)."""
        return self.to_owned()

    def transpose_into(self) -> 'CsMat':
        """Owning transpose: same arrays copied, other orientation.

        No reindexing happens: the CSR arrays of A are the CSC arrays
        of A^T.
        """
        return CsMat._from_trusted(
            self._storage.other(), self.outer_dims(), self._inner,
            self._indptr.to_numpy().copy(), self._indices.to_numpy().copy(),
            self._data.to_numpy().copy(),
        )

    def __repr__(self) -> str:
        sealed = ", sealed" if self._sealed else ""
        return (f"CsMat(shape={self.shape}, nnz={self.nnz}, "
                f"dtype={self.dtype}, storage={self._storage.value}{sealed})")
