"""
csmat Sparse Matrix Module

Compressed sparse storage (CSR / CSC) and construction operators that
combine existing matrices into larger ones without densifying them.

Design Philosophy:
- Owning matrices and views share one read interface (CompressedBase)
- Zero-copy where possible: views borrow read-only numpy slices
- Validate before allocating: a failed construction leaves nothing behind
- scipy.sparse compatibility for interop and testing

Classes:
- CsMat: Owning matrix, built by appending outer lines
- CsMatView: Read-only view (whole matrix, outer slice or transpose)
- CsVec: Sparse vector, one outer line
- Range: Outer slice bounds
- Array: Growable numpy-backed buffer behind CsMat

Usage:
    from csmat.sparse import CsMat, vstack, hstack, bmat

    a = CsMat.from_scipy(scipy_mat)
    stacked = vstack([a.view(), b.view()])
    diag = bmat([[a, None], [None, b]])
"""

from ._errors import ErrorKind, SparseError
from ._backend import Orientation, Ownership, StorageInfo, CSR, CSC
from ._range import Range
from ._array import Array
from ._vector import CsVec
from ._base import CompressedBase
from ._matrix import CsMat
from ._view import CsMatView
from ._construct import (
    fast_stack,
    same_storage_fast_stack,
    vstack,
    hstack,
    concatenate,
    bmat,
)
from ._serde import to_dict, from_dict, save_npz, load_npz

__all__ = [
    # Errors
    'ErrorKind',
    'SparseError',
    # Storage tags
    'Orientation',
    'Ownership',
    'StorageInfo',
    'CSR',
    'CSC',
    # Containers
    'Range',
    'Array',
    'CsVec',
    'CompressedBase',
    'CsMat',
    'CsMatView',
    # Construction
    'fast_stack',
    'same_storage_fast_stack',
    'vstack',
    'hstack',
    'concatenate',
    'bmat',
    # Serialization
    'to_dict',
    'from_dict',
    'save_npz',
    'load_npz',
]
