"""
Growable Array Container

numpy-backed contiguous buffer with explicit capacity management.
Owning matrices store their offsets, indices and values in these so
that outer lines can be appended without reallocating on every push.
"""

from typing import Union, List, Any

import numpy as np

__all__ = ['Array', 'empty', 'from_list', 'from_numpy']


class Array:
    """
    Contiguous array with separate length and capacity.

    Features:
    - Amortized growth on append/extend
    - Exact capacity reservation
    - Zero-copy numpy view of the used prefix

    Attributes:
        dtype (numpy.dtype): Element type
        size (int): Number of used elements
        capacity (int): Number of allocated elements

    Example:
        >>> arr = Array(dtype='int64')
        >>> arr.reserve_exact(3)
        >>> arr.extend([1, 2, 3])
        >>> arr.to_numpy()
        array([1, 2, 3])
    """

    __slots__ = ('_buf', '_size')

    def __init__(self, dtype: Union[str, np.dtype] = 'float64', capacity: int = 0):
        """
        Allocate an empty array.

        Args:
            dtype: Element type
            capacity: Number of elements to pre-allocate
        """
        if capacity < 0:
            raise ValueError(f"Array capacity must be non-negative, got {capacity}")
        self._buf = np.empty(capacity, dtype=dtype)
        self._size = 0

    @classmethod
    def wrap(cls, values: np.ndarray) -> 'Array':
        """Adopt a 1D numpy array as a full buffer without copying.

        The caller must not keep using `values` afterwards.
        """
        if values.ndim != 1:
            raise ValueError(f"Expected 1D array, got {values.ndim}D")
        arr = cls.__new__(cls)
        if values.flags.c_contiguous and values.flags.writeable:
            arr._buf = values
        else:
            arr._buf = values.copy()
        arr._size = len(values)
        return arr

    @property
    def size(self) -> int:
        return self._size

    @property
    def capacity(self) -> int:
        return len(self._buf)

    @property
    def dtype(self) -> np.dtype:
        return self._buf.dtype

    # -------------------------------------------------------------------------
    # Capacity
    # -------------------------------------------------------------------------

    def reserve(self, additional: int) -> None:
        """Make room for at least `additional` more elements (amortized)."""
        needed = self._size + additional
        if needed > self.capacity:
            self._grow(max(needed, 2 * self.capacity))

    def reserve_exact(self, additional: int) -> None:
        """Make room for exactly `additional` more elements."""
        needed = self._size + additional
        if needed > self.capacity:
            self._grow(needed)

    def _grow(self, new_capacity: int) -> None:
        new_buf = np.empty(new_capacity, dtype=self._buf.dtype)
        new_buf[:self._size] = self._buf[:self._size]
        self._buf = new_buf

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def append(self, value: Any) -> None:
        self.reserve(1)
        self._buf[self._size] = value
        self._size += 1

    def extend(self, values: Any) -> None:
        values = np.asarray(values)
        n = len(values)
        if n == 0:
            return
        self.reserve(n)
        self._buf[self._size:self._size + n] = values
        self._size += n

    # -------------------------------------------------------------------------
    # Access
    # -------------------------------------------------------------------------

    def to_numpy(self, writeable: bool = True) -> np.ndarray:
        """Zero-copy numpy view of the used prefix."""
        view = self._buf[:self._size]
        if not writeable:
            view = view.view()
            view.flags.writeable = False
        return view

    def __getitem__(self, idx):
        return self.to_numpy()[idx]

    def __len__(self) -> int:
        return self._size

    def tolist(self) -> List:
        return self.to_numpy().tolist()

    def copy(self) -> 'Array':
        """Deep copy trimmed to the used length."""
        new = Array(self.dtype, self._size)
        new.extend(self.to_numpy())
        return new

    def __repr__(self) -> str:
        if self._size <= 6:
            data_str = str(self.tolist())
        else:
            items = self.tolist()
            data_str = str(items[:3] + ['...'] + items[-3:])
        return f"Array({data_str}, dtype={self.dtype}, capacity={self.capacity})"


# =============================================================================
# Factory Functions
# =============================================================================

def empty(dtype: Union[str, np.dtype] = 'float64', capacity: int = 0) -> Array:
    """Create an empty array with reserved capacity."""
    return Array(dtype, capacity)


def from_numpy(values: Any, dtype: Union[str, np.dtype, None] = None) -> Array:
    """Create an array holding a copy of `values`."""
    values = np.asarray(values, dtype=dtype)
    if values.ndim != 1:
        raise ValueError(f"Expected 1D array, got {values.ndim}D")
    arr = Array(values.dtype, len(values))
    arr.extend(values)
    return arr


def from_list(data: List, dtype: Union[str, np.dtype] = 'float64') -> Array:
    """Create array from Python list."""
    return from_numpy(np.asarray(data, dtype=dtype))
