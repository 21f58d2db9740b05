"""
csmat - Compressed Sparse Matrices

Compressed sparse storage with zero-copy views and sparse construction
operators (stacking and block assembly).

Sparse Matrices:
    CsMat: Owning CSR / CSC matrix
    CsMatView: Read-only view over another matrix's arrays

Construction:
    fast_stack: Stack same-orientation matrices along the outer dimension
    vstack / hstack: Stack rows / columns, converting orientation as needed
    bmat: Assemble a matrix from a grid of optional blocks

Configuration:
    config: Global defaults (index / value dtype, validation switches)

Usage:
    >>> import csmat
    >>> from scipy.sparse import random as sp_random

    >>> a = csmat.CsMat.from_scipy(sp_random(100, 50, density=0.1, format='csr'))
    >>> b = csmat.CsMat.eye(50)
    >>> stacked = csmat.vstack([a.view(), b.view()])
    >>> stacked.shape
    (150, 50)

    # Temporarily disable structure checks
    >>> with csmat.config.local(check=csmat.CheckConfig(check_structure=False)):
    ...     pass
"""

__version__ = "0.1.0"

from ._config import (
    config,
    get_config,
    CsmatConfig,
    StorageConfig,
    CheckConfig,
)
from .sparse import (
    # Errors
    ErrorKind,
    SparseError,
    # Storage tags
    Orientation,
    Ownership,
    CSR,
    CSC,
    # Containers
    Range,
    CsVec,
    CsMat,
    CsMatView,
    # Construction
    fast_stack,
    same_storage_fast_stack,
    vstack,
    hstack,
    concatenate,
    bmat,
    # Serialization
    to_dict,
    from_dict,
    save_npz,
    load_npz,
)

__all__ = [
    "__version__",
    # Configuration
    "config",
    "get_config",
    "CsmatConfig",
    "StorageConfig",
    "CheckConfig",
    # Errors
    "ErrorKind",
    "SparseError",
    # Storage tags
    "Orientation",
    "Ownership",
    "CSR",
    "CSC",
    # Containers
    "Range",
    "CsVec",
    "CsMat",
    "CsMatView",
    # Construction
    "fast_stack",
    "same_storage_fast_stack",
    "vstack",
    "hstack",
    "concatenate",
    "bmat",
    # Serialization
    "to_dict",
    "from_dict",
    "save_npz",
    "load_npz",
]
