"""Reference Management for Views.

A view borrows the arrays of another matrix. To make sure the borrowed
arrays cannot be released while the view is alive, each view keeps a
reference chain with strong references to every matrix it was derived
from.

Key Concepts:
    - Reference Chain: When view B is derived from A, B holds a
      reference to A.
    - Automatic Flattening: A view of a view references the original
      owner directly instead of building deep hierarchies.
"""

from typing import Any, List, Optional
from dataclasses import dataclass, field

__all__ = [
    'RefChain',
    'owner_of',
]


@dataclass
class RefChain:
    """Maintains the reference chain of a view.

    Attributes:
        _refs: Strong references to ancestors, owner first.

    Example:
        >>> mat = CsMat.eye(4)
        >>> v1 = mat.slice_outer(Range.bounded(0, 3))   # refs: [mat]
        >>> v2 = v1.slice_outer(Range.bounded(1, 2))    # refs: [v1, mat]
        >>> del mat, v1                                 # v2 still valid
    """
    _refs: List[Any] = field(default_factory=list)

    def add(self, source: Any) -> None:
        """Add source and, flattened, all of its own ancestors."""
        if source is None or self._contains(source):
            return
        self._refs.append(source)

        chain = getattr(source, '_ref_chain', None)
        if chain is not None:
            for ancestor in chain._refs:
                if not self._contains(ancestor):
                    self._refs.append(ancestor)

    def _contains(self, obj: Any) -> bool:
        # identity, matrices define value equality
        return any(ref is obj for ref in self._refs)

    @property
    def count(self) -> int:
        return len(self._refs)

    @property
    def is_empty(self) -> bool:
        return len(self._refs) == 0

    def __repr__(self) -> str:
        return f"RefChain(count={self.count})"


def owner_of(obj: Any) -> Optional[Any]:
    """Return the owning matrix at the root of obj's reference chain.

    Returns obj itself when it owns its data, None if no owner is known.
    """
    chain = getattr(obj, '_ref_chain', None)
    if chain is None:
        return obj
    for ref in chain._refs:
        if getattr(ref, '_ref_chain', None) is None:
            return ref
    return None
