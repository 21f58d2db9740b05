"""High-Level Construction of Sparse Matrices.

This module builds new matrices out of existing ones without densifying:

- fast_stack: concatenate the outer lines of same-orientation matrices
- vstack / hstack: stack rows / columns whatever the input orientations
- bmat: assemble a matrix from a grid of optional blocks

Every function validates all of its inputs before allocating the
result, so a failure never leaves a partially built matrix behind.
Results are sealed (read-only) owning matrices.

Example:
    >>> from csmat.sparse import CsMat, vstack, bmat
    >>>
    >>> # Stack matrices
    >>> stacked = vstack([mat1.view(), mat2.view()])
    >>>
    >>> # Block diagonal
    >>> diag = bmat([[a, None], [None, b]])
"""

from typing import List, Optional, Sequence, Tuple, Union
import logging

import numpy as np

from .._config import config
from ._backend import Orientation, CSR, CSC
from ._base import CompressedBase, ensure_compressed
from ._errors import SparseError, ErrorKind
from ._matrix import CsMat
from ._vector import CsVec

__all__ = [
    # Stacking
    'fast_stack',
    'same_storage_fast_stack',
    'vstack',
    'hstack',
    'concatenate',

    # Blocks
    'bmat',
]

logger = logging.getLogger("csmat.construct")

Matrix = CompressedBase


# =============================================================================
# Stacking Operations
# =============================================================================

def _check_stackable(mats: List[Matrix]) -> Tuple[Orientation, int]:
    """Validate a stacking list, returning its common (storage, inner dim)."""
    if len(mats) == 0:
        raise SparseError(ErrorKind.EMPTY_STACKING_LIST)
    for i, mat in enumerate(mats):
        ensure_compressed(mat, f"stacking input {i}")

    inner_dim = mats[0].inner_dims()
    for i, mat in enumerate(mats):
        if mat.inner_dims() != inner_dim:
            raise SparseError(
                ErrorKind.INCOMPATIBLE_DIMENSIONS,
                f"input {i} has inner dimension {mat.inner_dims()}, expected {inner_dim}",
            )

    storage = mats[0].storage()
    for i, mat in enumerate(mats):
        if mat.storage() is not storage:
            raise SparseError(
                ErrorKind.INCOMPATIBLE_STORAGES,
                f"input {i} is {mat.storage().value}, expected {storage.value}",
            )
    return storage, inner_dim


def _result_dtype(mats: Sequence[Matrix]) -> np.dtype:
    if not mats:
        return np.dtype(config.value_dtype)
    return np.result_type(*[mat.dtype for mat in mats])


def fast_stack(mats: Sequence[Matrix]) -> CsMat:
    """Stack matrices along their outer dimension.

    Vertical stack for CSR inputs, horizontal stack for CSC inputs.
    Each outer line is copied unchanged, in input order.

    Args:
        mats: Non-empty sequence of matrices (views or owning) sharing
            orientation and inner dimension.

    Returns:
        Sealed CsMat in the common orientation.

    Raises:
        SparseError: EMPTY_STACKING_LIST, INCOMPATIBLE_DIMENSIONS (inner
            dimensions differ from the first input's) or
            INCOMPATIBLE_STORAGES (orientations differ).

    Example:
        >>> a = CsMat.from_arrays('csr', (1, 3), [0, 1], [0], [3.0])
        >>> b = CsMat.from_arrays('csr', (1, 3), [0, 1], [2], [4.0])
        >>> fast_stack([a.view(), b.view()]).indptr
        array([0, 1, 2])
    """
    mats = list(mats)
    storage, inner_dim = _check_stackable(mats)

    outer_dim = sum(mat.outer_dims() for mat in mats)
    nnz = sum(mat.nnz for mat in mats)
    logger.debug("Stacking %d %s matrices: %d outer lines, %d non-zeros",
                 len(mats), storage.value, outer_dim, nnz)

    res = CsMat.empty(storage, inner_dim, dtype=_result_dtype(mats))
    res.reserve_outer_dim_exact(outer_dim)
    res.reserve_nnz_exact(nnz)
    for mat in mats:
        for _, vec in mat.outer_iterator():
            res.append_outer_csvec(vec)

    return res.seal()


same_storage_fast_stack = fast_stack


def _stack_as(mats: Sequence[Matrix], storage: Orientation) -> CsMat:
    mats = list(mats)
    for i, mat in enumerate(mats):
        ensure_compressed(mat, f"stacking input {i}")

    if all(mat.storage() is storage for mat in mats):
        return fast_stack(mats)

    logger.debug("Converting %d stacking inputs to %s", len(mats), storage.value)
    if storage is CSR:
        converted = [mat.to_csr() for mat in mats]
    else:
        converted = [mat.to_csc() for mat in mats]
    return fast_stack([mat.view() for mat in converted])


def vstack(mats: Sequence[Matrix]) -> CsMat:
    """Vertically stack matrices (row concatenation).

    CSR inputs are stacked directly; if any input is CSC, every input
    is first converted to CSR.

    Args:
        mats: Matrices with the same number of columns.

    Returns:
        Sealed CSR matrix.

    Raises:
        SparseError: Same kinds as fast_stack.
    """
    return _stack_as(mats, CSR)


def hstack(mats: Sequence[Matrix]) -> CsMat:
    """Horizontally stack matrices (column concatenation).

    CSC inputs are stacked directly; if any input is CSR, every input
    is first converted to CSC.

    Args:
        mats: Matrices with the same number of rows.

    Returns:
        Sealed CSC matrix.

    Raises:
        SparseError: Same kinds as fast_stack.
    """
    return _stack_as(mats, CSC)


def concatenate(mats: Sequence[Matrix], axis: int = 0) -> CsMat:
    """Concatenate matrices along axis (0: vstack, 1: hstack)."""
    if axis == 0:
        return vstack(mats)
    if axis == 1:
        return hstack(mats)
    raise ValueError(f"axis must be 0 or 1, got {axis}")


# =============================================================================
# Block Assembly
# =============================================================================

Grid = Sequence[Sequence[Optional[Matrix]]]


def _infer_block_sizes(grid: List[List[Optional[Matrix]]]) -> Tuple[List[int], List[int]]:
    """Validate a block grid and infer its row heights and column widths.

    The first present block of a grid row (resp. column) defines its
    height (resp. width); every other present block must agree.

    Raises:
        SparseError: EMPTY_BMAT_ROW / EMPTY_BMAT_COL if a grid row or
            column has no block, INCOMPATIBLE_DIMENSIONS for ragged grids
            or disagreeing block sizes.
    """
    if len(grid) == 0:
        raise SparseError(ErrorKind.EMPTY_BMAT_ROW, "block grid has no rows")
    n_cols = len(grid[0])
    if n_cols == 0:
        raise SparseError(ErrorKind.EMPTY_BMAT_COL, "block grid has no columns")
    for r, row in enumerate(grid):
        if len(row) != n_cols:
            raise SparseError(ErrorKind.INCOMPATIBLE_DIMENSIONS,
                              f"block row {r} has {len(row)} cells, expected {n_cols}")
        for c, block in enumerate(row):
            if block is not None:
                ensure_compressed(block, f"block ({r}, {c})")

    for r, row in enumerate(grid):
        if all(block is None for block in row):
            raise SparseError.from_kind(ErrorKind.EMPTY_BMAT_ROW, f"block row {r}")
    for c in range(n_cols):
        if all(row[c] is None for row in grid):
            raise SparseError.from_kind(ErrorKind.EMPTY_BMAT_COL, f"block column {c}")

    heights = []
    for r, row in enumerate(grid):
        present = [block for block in row if block is not None]
        height = present[0].rows
        if any(block.rows != height for block in present):
            raise SparseError(ErrorKind.INCOMPATIBLE_DIMENSIONS,
                              f"blocks of block row {r} have different row counts")
        heights.append(height)

    widths = []
    for c in range(n_cols):
        present = [row[c] for row in grid if row[c] is not None]
        width = present[0].cols
        if any(block.cols != width for block in present):
            raise SparseError(ErrorKind.INCOMPATIBLE_DIMENSIONS,
                              f"blocks of block column {c} have different column counts")
        widths.append(width)

    return heights, widths


def _assemble(
    blocks: List[List[Optional[Matrix]]],
    outer_sizes: List[int],
    inner_sizes: List[int],
    storage: Orientation,
) -> CsMat:
    """Assemble a validated grid whose block rows run along the outer dimension.

    Every present block is read through CSR storage (its outer lines are
    the assembly's outer lines). Absent cells contribute an empty slice
    of their inferred width.
    """
    inner_offsets = np.zeros(len(inner_sizes) + 1, dtype=np.int64)
    np.cumsum(inner_sizes, out=inner_offsets[1:])
    inner_dim = int(inner_offsets[-1])

    present = [block for row in blocks for block in row if block is not None]
    outer_dim = sum(outer_sizes)
    nnz = sum(block.nnz for block in present)

    res = CsMat.empty(storage, inner_dim, dtype=_result_dtype(present))
    res.reserve_outer_dim_exact(outer_dim)
    res.reserve_nnz_exact(nnz)

    empty_indices = np.empty(0, dtype=config.index_dtype)
    empty_data = np.empty(0, dtype=res.dtype)

    for row, height in zip(blocks, outer_sizes):
        cells = []
        for c, block in enumerate(row):
            if block is None:
                continue
            if not block.is_csr():
                block = block.to_csr()
            cells.append((int(inner_offsets[c]), block.indptr, block.indices, block.data))

        for local in range(height):
            parts_indices = [empty_indices]
            parts_data = [empty_data]
            for offset, indptr, indices, data in cells:
                start, end = indptr[local], indptr[local + 1]
                if start == end:
                    continue
                parts_indices.append(indices[start:end] + offset)
                parts_data.append(data[start:end])
            line = CsVec(inner_dim,
                         np.concatenate(parts_indices).astype(config.index_dtype, copy=False),
                         np.concatenate(parts_data))
            res.append_outer_csvec(line)

    return res


def bmat(grid: Grid, storage: Union[Orientation, str] = CSR) -> CsMat:
    """Build a matrix from a 2D grid of optional blocks.

    None cells are all-zero blocks whose size is inferred from the other
    blocks of their grid row and grid column.

    Args:
        grid: Sequence of grid rows, each a sequence of matrices or None.
        storage: Orientation of the result. Column-major assembly works
            on the transposed grid of transposed views, so CSC blocks are
            read without conversion.

    Returns:
        Sealed CsMat of shape (sum of row heights, sum of column widths).

    Raises:
        SparseError: EMPTY_BMAT_ROW, EMPTY_BMAT_COL or
            INCOMPATIBLE_DIMENSIONS, before anything is allocated.

    Example:
        >>> c = bmat([[a, None], [None, b]])   # block diagonal
    """
    storage = Orientation.coerce(storage)
    grid = [list(row) for row in grid]
    heights, widths = _infer_block_sizes(grid)
    logger.debug("Assembling %dx%d block grid into %s matrix of shape (%d, %d)",
                 len(heights), len(widths), storage.value, sum(heights), sum(widths))

    if storage is CSR:
        return _assemble(grid, heights, widths, storage).seal()

    transposed = [
        [None if row[c] is None else row[c].transpose_view() for row in grid]
        for c in range(len(widths))
    ]
    return _assemble(transposed, widths, heights, storage).seal()
