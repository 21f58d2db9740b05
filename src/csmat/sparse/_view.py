"""
Compressed Matrix Views

CsMatView is a zero-copy, read-only projection of another matrix's
arrays. It cannot be externally constructed: views are produced by
view(), slice_outer() and transpose_view() on any compressed matrix.

Memory Layout:
    - indices / data: read-only numpy slices of the source arrays
    - indptr: source offsets rebased to start at zero
    - _ref_chain: strong references to the source matrices

Example:
    >>> mat = CsMat.eye(4)
    >>> top = mat.slice_outer(Range.up_to(2))   # rows 0..2, zero-copy
    >>> top.shape
    (2, 4)
    >>> t = mat.transpose_view()                # CSC view of mat^T
"""

from typing import Any

import numpy as np

from ._backend import Orientation, Ownership
from ._base import CompressedBase
from ._ownership import RefChain

__all__ = ['CsMatView']


class _ViewInternal:
    """Internal marker to prevent external construction."""
    pass


_INTERNAL_KEY = _ViewInternal()


class CsMatView(CompressedBase):
    """
    Read-only view of a compressed matrix.

    INTERNAL CONSTRUCTION ONLY: use view(), slice_outer() or
    transpose_view() on a CsMat (or another view).
    """

    __slots__ = ('_storage', '_inner', '_indptr', '_indices', '_data', '_ref_chain')

    def __init__(
        self,
        storage: Orientation,
        inner_dim: int,
        indptr: np.ndarray,
        indices: np.ndarray,
        data: np.ndarray,
        sources: Any,
        _internal_key: Any = None,
    ):
        if _internal_key is not _INTERNAL_KEY:
            raise TypeError(
                "CsMatView cannot be constructed directly. "
                "Use mat.view(), mat.slice_outer() or mat.transpose_view() instead"
            )
        self._storage = storage
        self._inner = inner_dim
        self._indptr = indptr
        self._indices = indices
        self._data = data
        self._ref_chain = RefChain()
        self._ref_chain.add(sources)

    @classmethod
    def _from_source(
        cls,
        source: CompressedBase,
        storage: Orientation,
        start: int,
        end: int,
        inner_dim: int,
    ) -> 'CsMatView':
        """View outer lines [start, end) of source, tagged with storage."""
        src_indptr = source.indptr
        lo, hi = int(src_indptr[start]), int(src_indptr[end])

        indptr = src_indptr[start:end + 1]
        if lo != 0:
            indptr = indptr - lo
        indptr = _readonly(indptr)
        indices = _readonly(source.indices[lo:hi])
        data = _readonly(source.data[lo:hi])
        return cls(storage, inner_dim, indptr, indices, data, source,
                   _internal_key=_INTERNAL_KEY)

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
        return self._indptr

    @property
    def indices(self) -> np.ndarray:
        return self._indices

    @property
    def data(self) -> np.ndarray:
        return self._data

    @property
    def ownership(self) -> Ownership:
        return Ownership.VIEW

    @property
    def source(self) -> CompressedBase:
        """The matrix this view was taken from."""
        return self._ref_chain._refs[0]


def _readonly(arr: np.ndarray) -> np.ndarray:
    arr = arr.view()
    arr.flags.writeable = False
    return arr
