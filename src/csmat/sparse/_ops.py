"""Structural Kernels for Compressed Storage.

Low-level functions over raw (indptr, indices, data) arrays:

- Structure validation (offsets monotone, indices sorted and in bounds)
- Orientation conversion by counting sort over inner indices
- Triplet compression
- scipy.sparse interop

These operate on numpy arrays only and know nothing about the matrix
classes, which build on top of them.
"""

from typing import Tuple, Any
import logging

import numpy as np

from ._errors import SparseError, ErrorKind

__all__ = [
    'check_compressed_structure',
    'check_line',
    'transpose_storage',
    'compress_triplets',
    'scipy_to_arrays',
    'arrays_to_scipy',
]

logger = logging.getLogger("csmat.ops")


# =============================================================================
# Validation
# =============================================================================

def check_compressed_structure(
    outer_dim: int,
    inner_dim: int,
    indptr: np.ndarray,
    indices: np.ndarray,
    data: np.ndarray,
) -> None:
    """Validate the compressed storage invariants.

    Args:
        outer_dim: Number of outer lines.
        inner_dim: Size of the inner dimension.
        indptr: Offsets, length outer_dim + 1.
        indices: Inner positions of the non-zeros.
        data: Stored values.

    Raises:
        SparseError: With the kind of the first violated invariant.
    """
    if outer_dim < 0 or inner_dim < 0:
        raise SparseError(ErrorKind.INCOMPATIBLE_DIMENSIONS,
                          f"Negative dimensions ({outer_dim}, {inner_dim})")
    if indptr.ndim != 1 or len(indptr) != outer_dim + 1:
        raise SparseError(ErrorKind.BAD_INDPTR_LENGTH,
                          f"indptr length {len(indptr)} != outer dim + 1 = {outer_dim + 1}")
    if len(indices) != len(data):
        raise SparseError(ErrorKind.DATA_INDICES_MISMATCH,
                          f"indices length {len(indices)} != data length {len(data)}")
    if indptr[0] != 0:
        raise SparseError(ErrorKind.OUT_OF_BOUNDS_INDPTR,
                          f"indptr[0] is {indptr[0]}, expected 0")
    if np.any(np.diff(indptr) < 0):
        raise SparseError(ErrorKind.UNSORTED_INDPTR)
    nnz = len(indices)
    if indptr[-1] != nnz:
        raise SparseError(ErrorKind.BAD_NNZ_COUNT,
                          f"indptr[-1] is {indptr[-1]}, but there are {nnz} indices")
    if nnz == 0:
        return
    if indices.min() < 0 or indices.max() >= inner_dim:
        raise SparseError(ErrorKind.OUT_OF_BOUNDS_INDEX,
                          f"indices must lie in [0, {inner_dim})")

    # consecutive pairs inside one line must increase strictly
    within_line = np.ones(nnz - 1, dtype=bool)
    starts = indptr[1:-1]
    starts = starts[(starts > 0) & (starts < nnz)]
    within_line[starts - 1] = False
    if np.any((np.diff(indices) <= 0) & within_line):
        raise SparseError(ErrorKind.UNSORTED_INDICES)


def check_line(indices: np.ndarray, inner_dim: int) -> None:
    """Validate the indices of one outer line.

    Raises:
        SparseError: UNSORTED_INDICES or OUT_OF_BOUNDS_INDEX.
    """
    if len(indices) == 0:
        return
    if np.any(np.diff(indices) <= 0):
        raise SparseError(ErrorKind.UNSORTED_INDICES)
    if indices[0] < 0 or indices[-1] >= inner_dim:
        raise SparseError(ErrorKind.OUT_OF_BOUNDS_INDEX,
                          f"line indices must lie in [0, {inner_dim})")


# =============================================================================
# Orientation Conversion
# =============================================================================

def transpose_storage(
    outer_dim: int,
    inner_dim: int,
    indptr: np.ndarray,
    indices: np.ndarray,
    data: np.ndarray,
    index_dtype: Any = np.int64,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Re-compress storage along the other dimension.

    Counting sort over inner indices, O(nnz + outer_dim + inner_dim).
    The returned arrays describe the same matrix with inner_dim outer
    lines of size outer_dim. Indices of every new line come out sorted
    since source lines are visited in increasing outer order.

    Returns:
        (indptr, indices, data) of the re-compressed storage.
    """
    nnz = len(indices)
    counts = np.bincount(indices, minlength=inner_dim) if nnz else np.zeros(inner_dim, dtype=np.int64)

    new_indptr = np.zeros(inner_dim + 1, dtype=index_dtype)
    np.cumsum(counts, out=new_indptr[1:])

    new_indices = np.empty(nnz, dtype=index_dtype)
    new_data = np.empty(nnz, dtype=data.dtype)

    cursor = new_indptr[:-1].copy()
    for outer in range(outer_dim):
        start, end = indptr[outer], indptr[outer + 1]
        if start == end:
            continue
        line = indices[start:end]
        # indices within a line are distinct, so fancy increment is safe
        pos = cursor[line]
        new_indices[pos] = outer
        new_data[pos] = data[start:end]
        cursor[line] += 1

    return new_indptr, new_indices, new_data


# =============================================================================
# Triplets
# =============================================================================

def compress_triplets(
    outer_dim: int,
    inner_dim: int,
    outer_idx: np.ndarray,
    inner_idx: np.ndarray,
    values: np.ndarray,
    index_dtype: Any = np.int64,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Compress (outer, inner, value) triplets, summing duplicates.

    Raises:
        SparseError: DATA_INDICES_MISMATCH or OUT_OF_BOUNDS_INDEX.
    """
    outer_idx = np.asarray(outer_idx, dtype=np.int64)
    inner_idx = np.asarray(inner_idx, dtype=np.int64)
    values = np.asarray(values)
    if not (len(outer_idx) == len(inner_idx) == len(values)):
        raise SparseError(ErrorKind.DATA_INDICES_MISMATCH,
                          "triplet arrays must have the same length")

    nnz = len(values)
    if nnz and (outer_idx.min() < 0 or outer_idx.max() >= outer_dim
                or inner_idx.min() < 0 or inner_idx.max() >= inner_dim):
        raise SparseError(ErrorKind.OUT_OF_BOUNDS_INDEX, "triplet index out of bounds")

    order = np.lexsort((inner_idx, outer_idx))
    outer_idx = outer_idx[order]
    inner_idx = inner_idx[order]
    values = values[order]

    if nnz:
        first = np.ones(nnz, dtype=bool)
        first[1:] = (outer_idx[1:] != outer_idx[:-1]) | (inner_idx[1:] != inner_idx[:-1])
        group_starts = np.flatnonzero(first)
        values = np.add.reduceat(values, group_starts)
        outer_idx = outer_idx[group_starts]
        inner_idx = inner_idx[group_starts]

    counts = np.bincount(outer_idx, minlength=outer_dim) if len(outer_idx) else np.zeros(outer_dim, dtype=np.int64)
    indptr = np.zeros(outer_dim + 1, dtype=index_dtype)
    np.cumsum(counts, out=indptr[1:])
    return indptr, inner_idx.astype(index_dtype), values


# =============================================================================
# scipy Interop
# =============================================================================

def scipy_to_arrays(mat: Any) -> Tuple[str, Tuple[int, int], np.ndarray, np.ndarray, np.ndarray]:
    """Extract (format, shape, indptr, indices, data) from a scipy matrix.

    Non-compressed scipy formats are converted to CSR. Indices are sorted
    and duplicates summed on a copy, never on the caller's matrix.
    """
    import scipy.sparse as sp

    if not sp.issparse(mat):
        raise TypeError(f"Expected a scipy sparse matrix, got {type(mat).__name__}")
    if mat.format not in ('csr', 'csc'):
        logger.debug("Converting scipy %s matrix to csr", mat.format)
        mat = mat.tocsr()
    if not mat.has_canonical_format:
        mat = mat.copy()
        mat.sum_duplicates()
    return (mat.format, tuple(mat.shape), np.asarray(mat.indptr),
            np.asarray(mat.indices), np.asarray(mat.data))


def arrays_to_scipy(
    fmt: str,
    shape: Tuple[int, int],
    indptr: np.ndarray,
    indices: np.ndarray,
    data: np.ndarray,
    copy: bool = True,
) -> Any:
    """Build a scipy csr_matrix / csc_matrix from raw arrays."""
    import scipy.sparse as sp

    cls = sp.csr_matrix if fmt == 'csr' else sp.csc_matrix
    return cls((data, indices, indptr), shape=shape, copy=copy)
