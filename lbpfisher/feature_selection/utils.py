"""
Utility functions for feature selection.
Sorting and matrix checks used when ordering eigenpairs.
"""
from typing import List, Sequence
import numpy as np

from lbpfisher.errors import ArgumentError


def remove_dups(values: Sequence) -> List:
    """Return the distinct values in ascending order."""
    return sorted(set(values))


def argsort(src: np.ndarray, ascending: bool = True) -> np.ndarray:
    """
    Sort indices of a 1-D matrix (a row or column vector is accepted).

    The sort is stable in both directions: equal values keep their original
    relative order.

    Args:
        src: Vector to sort
        ascending: Sort order

    Returns:
        Indices (int64) that sort src
    """
    src = np.asarray(src)
    if src.ndim > 1 and sum(dim != 1 for dim in src.shape) > 1:
        raise ArgumentError("argsort only sorts 1-D matrices.")
    values = src.reshape(-1).astype(np.float64)
    if ascending:
        return np.argsort(values, kind='stable')
    return np.argsort(-values, kind='stable')


def sort_matrix_by_column(src: np.ndarray, indices: Sequence[int]) -> np.ndarray:
    """Reorder the columns of src by the given indices."""
    return np.asarray(src)[:, np.asarray(indices, dtype=np.intp)]


def sort_matrix_by_row(src: np.ndarray, indices: Sequence[int]) -> np.ndarray:
    """Reorder the rows of src by the given indices."""
    return np.asarray(src)[np.asarray(indices, dtype=np.intp), :]


def is_symmetric(src: np.ndarray, eps: float = 1e-16) -> bool:
    """
    Check if a matrix is symmetric.

    Integer matrices must match exactly, floating point matrices within eps.

    Args:
        src: Matrix to check
        eps: Tolerance for floating point matrices

    Returns:
        True if src is square and symmetric
    """
    src = np.asarray(src)
    if src.ndim != 2 or src.shape[0] != src.shape[1]:
        return False
    if np.issubdtype(src.dtype, np.floating):
        return bool(np.all(np.abs(src - src.T) <= eps))
    return bool(np.array_equal(src, src.T))
