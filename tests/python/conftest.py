"""
Pytest configuration and shared fixtures for csmat tests.

The mat1..mat4 fixtures are the reference stacking matrices: mat1 and
mat2 are 5x5 CSR matrices whose vertical stack is mat1_vstack_mat2,
mat3 has a different inner dimension and mat4 a different orientation.
"""

import pytest
import numpy as np
from pathlib import Path
import sys

# Add src to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root / "src"))

import scipy.sparse as sp

import csmat
from csmat.sparse import CsMat, CSR, CSC


# =============================================================================
# Reference Matrices
# =============================================================================

@pytest.fixture
def mat1():
    """5x5 CSR matrix.

    Matrix:
    [[0, 0, 3, 4, 0],
     [0, 0, 0, 2, 5],
     [0, 0, 5, 0, 0],
     [0, 8, 0, 0, 0],
     [0, 0, 0, 7, 0]]
    """
    indptr = [0, 2, 4, 5, 6, 7]
    indices = [2, 3, 3, 4, 2, 1, 3]
    data = [3., 4., 2., 5., 5., 8., 7.]
    return CsMat.from_arrays(CSR, (5, 5), indptr, indices, data)


@pytest.fixture
def mat2():
    """5x5 CSR matrix with an empty row.

    Matrix:
    [[6, 7, 3, 0, 3],
     [8, 0, 0, 9, 0],
     [0, 0, 0, 0, 0],
     [0, 0, 2, 4, 0],
     [0, 4, 4, 0, 0]]
    """
    indptr = [0, 4, 6, 6, 8, 10]
    indices = [0, 1, 2, 4, 0, 3, 2, 3, 1, 2]
    data = [6., 7., 3., 3., 8., 9., 2., 4., 4., 4.]
    return CsMat.from_arrays(CSR, (5, 5), indptr, indices, data)


@pytest.fixture
def mat3():
    """5x4 CSR matrix (inner dimension differs from mat1)."""
    indptr = [0, 2, 4, 5, 6, 7]
    indices = [2, 3, 2, 3, 2, 1, 3]
    data = [3., 4., 2., 5., 5., 8., 7.]
    return CsMat.from_arrays(CSR, (5, 4), indptr, indices, data)


@pytest.fixture
def mat4():
    """5x5 CSC matrix (orientation differs from mat1)."""
    indptr = [0, 2, 4, 5, 6, 7]
    indices = [2, 3, 3, 4, 2, 1, 3]
    data = [3., 4., 2., 5., 5., 8., 7.]
    return CsMat.from_arrays(CSC, (5, 5), indptr, indices, data)


@pytest.fixture
def mat1_vstack_mat2():
    """Expected vertical stack of mat1 over mat2 (10x5 CSR)."""
    indptr = [0, 2, 4, 5, 6, 7, 11, 13, 13, 15, 17]
    indices = [2, 3, 3, 4, 2, 1, 3, 0, 1, 2, 4, 0, 3, 2, 3, 1, 2]
    data = [3., 4., 2., 5., 5., 8., 7., 6., 7., 3., 3.,
            8., 9., 2., 4., 4., 4.]
    return CsMat.from_arrays(CSR, (10, 5), indptr, indices, data)


# =============================================================================
# Small Matrices
# =============================================================================

@pytest.fixture
def small_csr_matrix():
    """Create a small test CSR matrix (3x4).

    Matrix:
    [[1, 0, 2, 0],
     [0, 3, 0, 4],
     [5, 0, 0, 6]]
    """
    data = [1.0, 2.0, 3.0, 4.0, 5.0, 6.0]
    indices = [0, 2, 1, 3, 0, 3]
    indptr = [0, 2, 4, 6]
    return CsMat.from_arrays(CSR, (3, 4), indptr, indices, data)


@pytest.fixture
def small_csc_matrix():
    """Same matrix as small_csr_matrix in CSC format."""
    data = [1.0, 5.0, 3.0, 2.0, 4.0, 6.0]
    indices = [0, 2, 1, 0, 1, 2]
    indptr = [0, 2, 3, 4, 6]
    return CsMat.from_arrays(CSC, (3, 4), indptr, indices, data)


@pytest.fixture
def dense_matrix_small():
    """Dense numpy version of small_csr_matrix for comparison."""
    return np.array([
        [1, 0, 2, 0],
        [0, 3, 0, 4],
        [5, 0, 0, 6]
    ], dtype=np.float64)


@pytest.fixture
def random_scipy_csr():
    """Random 40x30 scipy CSR matrix (fixed seed)."""
    return sp.random(40, 30, density=0.15, format='csr', random_state=42)


@pytest.fixture
def clean_config():
    """Restore the global configuration after the test."""
    yield csmat.config
    csmat.config.reset()


# =============================================================================
# Helper Functions
# =============================================================================

def assert_matrices_equal(mat, expected):
    """Assert a csmat matrix has the values of expected (csmat, scipy or dense)."""
    if isinstance(expected, csmat.sparse.CompressedBase):
        expected = expected.to_scipy()
    if sp.issparse(expected):
        expected = expected.toarray()
    assert mat.shape == np.shape(expected)
    np.testing.assert_allclose(mat.to_scipy().toarray(), expected)


def assert_valid_structure(mat):
    """Assert the compressed invariants hold for mat."""
    from csmat.sparse._ops import check_compressed_structure
    check_compressed_structure(mat.outer_dims(), mat.inner_dims(),
                               mat.indptr, mat.indices, mat.data)
