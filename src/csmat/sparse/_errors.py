"""
Error handling for csmat.

All structural failures are reported through a single exception type,
SparseError, tagged with one ErrorKind from a closed set.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Optional

__all__ = ['ErrorKind', 'SparseError']


# =============================================================================
# Error Kinds
# =============================================================================

class ErrorKind(IntEnum):
    """Closed set of structural failure tags."""

    # Construction (stacking / block assembly)
    EMPTY_STACKING_LIST = 1
    INCOMPATIBLE_DIMENSIONS = 2
    INCOMPATIBLE_STORAGES = 3
    EMPTY_BMAT_ROW = 4
    EMPTY_BMAT_COL = 5

    # Structure (offsets / indices / values)
    UNSORTED_INDICES = 10
    UNSORTED_INDPTR = 11
    OUT_OF_BOUNDS_INDEX = 12
    BAD_INDPTR_LENGTH = 13
    DATA_INDICES_MISMATCH = 14
    BAD_NNZ_COUNT = 15
    OUT_OF_BOUNDS_INDPTR = 16

    # Lifecycle / encoding
    READ_ONLY = 20
    DESERIALIZATION = 30


_ERROR_MESSAGES = {
    ErrorKind.EMPTY_STACKING_LIST: "Cannot stack an empty list of matrices",
    ErrorKind.INCOMPATIBLE_DIMENSIONS: "Incompatible dimensions",
    ErrorKind.INCOMPATIBLE_STORAGES: "Incompatible storage orientations",
    ErrorKind.EMPTY_BMAT_ROW: "Block row without any block, cannot infer its height",
    ErrorKind.EMPTY_BMAT_COL: "Block column without any block, cannot infer its width",
    ErrorKind.UNSORTED_INDICES: "Indices are not strictly increasing",
    ErrorKind.UNSORTED_INDPTR: "Offsets are not non-decreasing",
    ErrorKind.OUT_OF_BOUNDS_INDEX: "Index out of bounds",
    ErrorKind.BAD_INDPTR_LENGTH: "Offsets length does not match outer dimension",
    ErrorKind.DATA_INDICES_MISMATCH: "Data and indices have different lengths",
    ErrorKind.BAD_NNZ_COUNT: "Last offset does not match the number of non-zeros",
    ErrorKind.OUT_OF_BOUNDS_INDPTR: "Offsets do not start at zero",
    ErrorKind.READ_ONLY: "Matrix is read-only",
    ErrorKind.DESERIALIZATION: "Invalid serialized matrix",
}


# =============================================================================
# Exception Class
# =============================================================================

class SparseError(ValueError):
    """
    Structural error raised by csmat.

    Attributes:
        kind: The ErrorKind tag.
        message: Human readable description.

    Example:
        >>> try:
        ...     fast_stack([])
        ... except SparseError as e:
        ...     assert e.kind is ErrorKind.EMPTY_STACKING_LIST
    """

    def __init__(self, kind: ErrorKind, message: Optional[str] = None):
        self.kind = ErrorKind(kind)
        if message is None:
            message = _ERROR_MESSAGES[self.kind]
        self.message = message
        super().__init__(f"{self.kind.name}: {message}")

    @classmethod
    def from_kind(cls, kind: ErrorKind, context: str = "") -> "SparseError":
        """Create exception from a kind with optional context."""
        base_msg = _ERROR_MESSAGES[ErrorKind(kind)]
        msg = f"{context}: {base_msg}" if context else base_msg
        return cls(kind, msg)

    def __eq__(self, other) -> bool:
        if isinstance(other, SparseError):
            return self.kind == other.kind
        if isinstance(other, ErrorKind):
            return self.kind == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.kind)

    def __reduce__(self):
        return (self.__class__, (self.kind, self.message))
