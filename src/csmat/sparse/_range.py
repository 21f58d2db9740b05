"""Outer Range Abstraction.

Slicing entry points accept any of four interval forms: bounded
(start and end), start-only, end-only and fully open. All of them are
represented by one closed type carrying an optional start and an
optional end.
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Any

from ._errors import SparseError, ErrorKind

__all__ = ['Range']


@dataclass(frozen=True)
class Range:
    """Half-open interval with optional bounds.

    Example:
        >>> Range.bounded(1, 3).resolve(10)
        (1, 3)
        >>> Range.starting_at(4).resolve(10)
        (4, 10)
        >>> Range.full().resolve(10)
        (0, 10)
    """
    start: Optional[int] = None
    end: Optional[int] = None

    @classmethod
    def bounded(cls, start: int, end: int) -> 'Range':
        return cls(start, end)

    @classmethod
    def starting_at(cls, start: int) -> 'Range':
        return cls(start, None)

    @classmethod
    def up_to(cls, end: int) -> 'Range':
        return cls(None, end)

    @classmethod
    def full(cls) -> 'Range':
        return cls(None, None)

    @classmethod
    def coerce(cls, obj: Any) -> 'Range':
        """Build a Range from a Range, slice, range, (start, end) tuple or None.

        Raises:
            TypeError: If obj has no interval interpretation.
            ValueError: If a slice or range has a step other than 1.
        """
        if obj is None:
            return cls.full()
        if isinstance(obj, cls):
            return obj
        if isinstance(obj, slice):
            if obj.step not in (None, 1):
                raise ValueError(f"Outer ranges must be contiguous, got step {obj.step}")
            return cls(obj.start, obj.stop)
        if isinstance(obj, range):
            if obj.step != 1:
                raise ValueError(f"Outer ranges must be contiguous, got step {obj.step}")
            return cls(obj.start, obj.stop)
        if isinstance(obj, tuple) and len(obj) == 2:
            return cls(obj[0], obj[1])
        raise TypeError(f"Cannot interpret {type(obj).__name__} as a range")

    @property
    def is_bounded(self) -> bool:
        return self.start is not None and self.end is not None

    def resolve(self, length: int) -> Tuple[int, int]:
        """Return concrete (start, end) bounds for a sequence of length items.

        Raises:
            SparseError: OUT_OF_BOUNDS_INDEX if the bounds fall outside
                [0, length] or start > end.
        """
        start = 0 if self.start is None else self.start
        end = length if self.end is None else self.end
        if start < 0 or end > length or start > end:
            raise SparseError(
                ErrorKind.OUT_OF_BOUNDS_INDEX,
                f"Range [{start}, {end}) invalid for outer dimension {length}",
            )
        return start, end
