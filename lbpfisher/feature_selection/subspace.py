"""
Linear projection into and reconstruction from a learned subspace.
Used by every subspace method (PCA, LDA, Fisherfaces); knows nothing about
how the basis was learned.
"""
from typing import Optional
import numpy as np


def _as_rows(src: np.ndarray, dtype) -> np.ndarray:
    data = np.array(src, dtype=dtype)
    if data.ndim == 1:
        data = data.reshape(1, -1)
    return data


def project(W: np.ndarray, mean: Optional[np.ndarray], src: np.ndarray) -> np.ndarray:
    """
    Project samples into the subspace spanned by the columns of W.

    Computes Y = (X - mean) W. The mean is only subtracted when it has as
    many elements as a sample; otherwise the data is projected uncentered.

    Args:
        W: Basis (D, K), eigenvectors by column
        mean: Mean vector with D elements, or None
        src: Samples as rows (N, D) or a single sample (D,)

    Returns:
        Coordinates (N, K) in the basis dtype
    """
    W = np.asarray(W)
    X = _as_rows(src, W.dtype)
    if mean is not None and np.size(mean) == X.shape[1]:
        X = X - np.asarray(mean, dtype=W.dtype).reshape(1, -1)
    return X @ W


def reconstruct(W: np.ndarray, mean: Optional[np.ndarray], src: np.ndarray) -> np.ndarray:
    """
    Reconstruct samples from their subspace coordinates.

    Computes X = Y W^T + mean. The mean is only added when it has as many
    elements as a reconstructed sample.

    Args:
        W: Basis (D, K)
        mean: Mean vector with D elements, or None
        src: Coordinates as rows (N, K) or a single row (K,)

    Returns:
        Reconstructed samples (N, D) in the basis dtype
    """
    W = np.asarray(W)
    Y = _as_rows(src, W.dtype)
    X = Y @ W.T
    if mean is not None and np.size(mean) == X.shape[1]:
        X = X + np.asarray(mean, dtype=W.dtype).reshape(1, -1)
    return X
