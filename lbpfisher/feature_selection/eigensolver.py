"""
Eigen-decomposition strategy for subspace methods.
"""
from typing import Tuple
import numpy as np


class EigenSolver:
    """
    Real dense eigensolver interface.

    decompose() takes a square real matrix and returns its eigenvalues and
    the corresponding eigenvectors (by column). The order of the pairs is
    unspecified; callers sort them.
    """

    def decompose(self, M: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        raise NotImplementedError


class NumpyEigenSolver(EigenSolver):
    """Eigensolver for general (non-symmetric) real matrices, via numpy.linalg.eig."""

    def decompose(self, M: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        M = np.asarray(M, dtype=np.float64)
        eigenvalues, eigenvectors = np.linalg.eig(M)
        # inv(Sw) Sb has a real spectrum up to rounding; drop the imaginary residue
        return np.real(eigenvalues), np.real(eigenvectors)
