"""
Serialization of Compressed Matrices

Two encodings of the same fields (storage tag, nrows, ncols, indptr,
indices, data):

- to_dict / from_dict: plain mapping, numpy arrays kept as arrays
- save_npz / load_npz: numpy .npz container on disk

Decoding never trusts its input: missing or malformed fields raise
SparseError(DESERIALIZATION), and the arrays go through the same
structure validation as CsMat.from_arrays.

Example:
    >>> save_npz("mat.npz", mat)
    >>> load_npz("mat.npz") == mat
    True
"""

from typing import Any, Dict, Mapping, Union
import logging
import os
import zipfile

import numpy as np

from .._config import config
from ._backend import Orientation
from ._base import CompressedBase, ensure_compressed
from ._errors import SparseError, ErrorKind
from ._matrix import CsMat
from ._ops import check_compressed_structure

__all__ = ['to_dict', 'from_dict', 'save_npz', 'load_npz', 'FIELDS']

logger = logging.getLogger("csmat.serde")

FIELDS = ('storage', 'nrows', 'ncols', 'indptr', 'indices', 'data')

PathLike = Union[str, os.PathLike]


def to_dict(mat: CompressedBase) -> Dict[str, Any]:
    """Encode a matrix (owning or view) as a dict of its fields.

    Arrays are copied, so the payload stays valid whatever happens to
    the matrix afterwards.
    """
    ensure_compressed(mat)
    rows, cols = mat.shape
    return {
        'storage': mat.storage().value,
        'nrows': rows,
        'ncols': cols,
        'indptr': np.array(mat.indptr),
        'indices': np.array(mat.indices),
        'data': np.array(mat.data),
    }


def _decode_dim(payload: Mapping[str, Any], key: str) -> int:
    value = np.asarray(payload[key])
    if value.ndim != 0 or not np.issubdtype(value.dtype, np.integer):
        raise SparseError(ErrorKind.DESERIALIZATION, f"'{key}' must be an integer, got {value!r}")
    value = int(value)
    if value < 0:
        raise SparseError(ErrorKind.DESERIALIZATION, f"'{key}' must be non-negative, got {value}")
    return value


def _decode_array(payload: Mapping[str, Any], key: str, integral: bool) -> np.ndarray:
    arr = np.asarray(payload[key])
    if arr.ndim != 1:
        raise SparseError(ErrorKind.DESERIALIZATION,
                          f"'{key}' must be one-dimensional, got {arr.ndim}D")
    if integral:
        if len(arr) and not np.issubdtype(arr.dtype, np.integer):
            raise SparseError(ErrorKind.DESERIALIZATION,
                              f"'{key}' must hold integers, got {arr.dtype}")
        arr = arr.astype(config.index_dtype)
    else:
        arr = arr.copy()
    return arr


def from_dict(payload: Mapping[str, Any]) -> CsMat:
    """Decode a matrix produced by to_dict.

    Returns:
        Unsealed owning CsMat.

    Raises:
        SparseError: DESERIALIZATION for missing or malformed fields,
            or the structural kind of the first violated invariant.
    """
    missing = [key for key in FIELDS if key not in payload]
    if missing:
        raise SparseError(ErrorKind.DESERIALIZATION, f"missing fields: {', '.join(missing)}")

    storage = np.asarray(payload['storage'])
    try:
        if storage.ndim != 0:
            raise ValueError(storage)
        storage = Orientation.coerce(str(storage.item()))
    except ValueError:
        raise SparseError(ErrorKind.DESERIALIZATION,
                          f"unknown storage tag {payload['storage']!r}") from None

    shape = (_decode_dim(payload, 'nrows'), _decode_dim(payload, 'ncols'))
    indptr = _decode_array(payload, 'indptr', integral=True)
    indices = _decode_array(payload, 'indices', integral=True)
    data = _decode_array(payload, 'data', integral=False)

    outer, inner = (shape if storage is Orientation.ROW_MAJOR else shape[::-1])
    # always re-validated, whatever config.check says
    check_compressed_structure(outer, inner, indptr, indices, data)
    return CsMat._from_trusted(storage, outer, inner, indptr, indices, data)


def save_npz(path: PathLike, mat: CompressedBase, compressed: bool = True) -> None:
    """Write a matrix to a .npz file.

    Value arrays of object dtype cannot be stored (loading never unpickles).
    """
    payload = to_dict(mat)
    if payload['data'].dtype == object:
        raise TypeError("save_npz cannot store object-dtype values")
    arrays = {
        'storage': np.array(payload['storage']),
        'nrows': np.array(payload['nrows'], dtype=np.int64),
        'ncols': np.array(payload['ncols'], dtype=np.int64),
        'indptr': payload['indptr'],
        'indices': payload['indices'],
        'data': payload['data'],
    }
    if compressed:
        np.savez_compressed(path, **arrays)
    else:
        np.savez(path, **arrays)
    logger.debug("Saved %s matrix %s (nnz=%d) to %s",
                 payload['storage'], mat.shape, mat.nnz, path)


def load_npz(path: PathLike) -> CsMat:
    """Read a matrix written by save_npz.

    Raises:
        SparseError: DESERIALIZATION if the file is not a matrix archive,
            or a structural kind if the stored arrays are invalid.
    """
    try:
        archive = np.load(path, allow_pickle=False)
    except (ValueError, EOFError, zipfile.BadZipFile) as e:
        raise SparseError(ErrorKind.DESERIALIZATION, f"{path}: {e}") from e
    if not hasattr(archive, 'files'):
        raise SparseError(ErrorKind.DESERIALIZATION, f"{path} is not an .npz archive")
    with archive:
        try:
            payload = {key: archive[key] for key in archive.files}
        except (ValueError, zipfile.BadZipFile) as e:
            raise SparseError(ErrorKind.DESERIALIZATION, str(e)) from e
    logger.debug("Loaded fields %s from %s", sorted(payload), path)
    return from_dict(payload)
