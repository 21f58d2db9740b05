"""Storage Orientation and Ownership Tags.

This module defines the descriptive tags shared by every compressed
matrix:

- Orientation: row-major (CSR) or column-major (CSC) compressed layout
- Ownership: whether a matrix owns its arrays or borrows them
- StorageInfo: introspection record combining both

Example:
    >>> mat = CsMat.eye(3)
    >>> mat.storage()            # Orientation.ROW_MAJOR
    >>> mat.view().ownership     # Ownership.VIEW
"""

from enum import Enum
from typing import Tuple, Union
from dataclasses import dataclass

__all__ = [
    'Orientation',
    'Ownership',
    'StorageInfo',
    'CSR',
    'CSC',
]


# =============================================================================
# Enumerations
# =============================================================================

class Orientation(Enum):
    """Compressed storage orientation.

    Attributes:
        ROW_MAJOR: Outer lines are rows; indices are column positions.
        COLUMN_MAJOR: Outer lines are columns; indices are row positions.
    """
    ROW_MAJOR = 'csr'
    COLUMN_MAJOR = 'csc'

    def other(self) -> 'Orientation':
        """Return the opposite orientation."""
        if self is Orientation.ROW_MAJOR:
            return Orientation.COLUMN_MAJOR
        return Orientation.ROW_MAJOR

    @classmethod
    def coerce(cls, value: Union['Orientation', str]) -> 'Orientation':
        """Accept an Orientation or one of 'csr' / 'csc'."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.lower())
            except ValueError:
                pass
        raise ValueError(f"Unknown storage orientation: {value!r}. Use 'csr' or 'csc'")

    def __repr__(self) -> str:
        return f"Orientation.{self.name}"


CSR = Orientation.ROW_MAJOR
CSC = Orientation.COLUMN_MAJOR


class Ownership(Enum):
    """Data ownership model.

    Attributes:
        OWNED: Matrix exclusively owns its arrays and may append to them.
        VIEW: Matrix borrows the arrays of a source matrix, read-only.
              The source is kept alive through a reference chain.
    """
    OWNED = 'owned'
    VIEW = 'view'


# =============================================================================
# Storage Information
# =============================================================================

@dataclass(frozen=True)
class StorageInfo:
    """Storage metadata for a compressed matrix.

    Primarily for introspection and debugging.
    """
    orientation: Orientation
    ownership: Ownership
    dtype: str
    shape: Tuple[int, int]
    nnz: int
    sealed: bool = False

    def __repr__(self) -> str:
        return (
            f"StorageInfo(orientation={self.orientation.value}, "
            f"ownership={self.ownership.value}, "
            f"dtype={self.dtype}, shape={self.shape}, nnz={self.nnz}, "
            f"sealed={self.sealed})"
        )


def outer_inner_to_shape(orientation: Orientation, outer: int, inner: int) -> Tuple[int, int]:
    """Map (outer, inner) dimensions to (rows, cols)."""
    if orientation is Orientation.ROW_MAJOR:
        return (outer, inner)
    return (inner, outer)


def shape_to_outer_inner(orientation: Orientation, shape: Tuple[int, int]) -> Tuple[int, int]:
    """Map (rows, cols) to (outer, inner) dimensions."""
    rows, cols = shape
    if orientation is Orientation.ROW_MAJOR:
        return (rows, cols)
    return (cols, rows)
