"""
Linear Discriminant Analysis with Fisher's optimization criterion.

Finds the projection that maximizes the between-class scatter relative to
the within-class scatter:

    J(W) = |W^T Sb W| / |W^T Sw W|

The solution are the leading eigenvectors of inv(Sw) Sb. At most C-1 of
them are meaningful for C classes.
"""
from typing import Dict, Optional, Sequence, Tuple, Union
import numpy as np

from lbpfisher.errors import ArgumentError, NotComputedError, SingularMatrixError
from lbpfisher.preprocess.utils import as_column_matrix, as_row_matrix
from lbpfisher.feature_selection import subspace
from lbpfisher.feature_selection.eigensolver import EigenSolver, NumpyEigenSolver
from lbpfisher.feature_selection.utils import argsort, remove_dups, sort_matrix_by_column


class FisherLDA:
    """
    Fisher Linear Discriminant Analysis.

    The basis (eigenvectors by column) and spectrum (eigenvalues) are set by
    a successful compute() and sorted by descending eigenvalue. Instances are
    not safe for concurrent compute() calls; reading a computed instance
    from several threads is fine.
    """

    def __init__(self,
                 num_components: int = 0,
                 data_as_row: bool = True,
                 src: Optional[Union[np.ndarray, Sequence[np.ndarray]]] = None,
                 labels: Optional[Sequence[int]] = None,
                 eigensolver: Optional[EigenSolver] = None):
        """
        Initialize LDA.

        Args:
            num_components: Number of discriminants to keep (<= 0 = C-1)
            data_as_row: Samples are rows of src (False = columns)
            src: Optional training data; computes immediately together with labels
            labels: Class label for each sample
            eigensolver: Eigen-decomposition strategy (default: numpy.linalg.eig)
        """
        self.requested_components = num_components
        self.data_as_row = data_as_row
        self.eigensolver = eigensolver if eigensolver is not None else NumpyEigenSolver()
        self._eigenvectors = None
        self._eigenvalues = None

        if src is not None and labels is not None:
            self.compute(src, labels)

    def _data_matrix(self, src) -> np.ndarray:
        if isinstance(src, (list, tuple)):
            data = as_row_matrix(src) if self.data_as_row else as_column_matrix(src)
        else:
            data = np.asarray(src)
            if data.ndim != 2:
                raise ArgumentError("Only single channel matrices allowed.")
        data = data if self.data_as_row else data.T
        # private double precision copy, centered in place below
        return np.array(data, dtype=np.float64, order="C")

    def compute(self, src: Union[np.ndarray, Sequence[np.ndarray]], labels: Sequence[int]) -> 'FisherLDA':
        """
        Compute the discriminants for the data in src and the given labels.

        Args:
            src: Data matrix, or a list of samples (images or vectors)
            labels: Integer class label per sample, need not be contiguous

        Returns:
            self
        """
        data = self._data_matrix(src)
        labels = np.asarray(labels).reshape(-1).tolist()

        N, D = data.shape
        if len(labels) != N:
            raise ArgumentError(
                f"The number of samples must equal the number of labels "
                f"(got {N} samples and {len(labels)} labels)."
            )
        if N == 0:
            raise ArgumentError("At least one sample is required.")

        # map labels to 0..C-1 by their sorted order
        num2label = remove_dups(labels)
        label2num = {label: idx for idx, label in enumerate(num2label)}
        mapped_labels = np.array([label2num[label] for label in labels], dtype=np.intp)
        C = len(num2label)

        if N < D:
            print("Warning: Less observations than feature dimension given! "
                  "Computation will probably fail.")

        num_components = self.requested_components
        if num_components <= 0 or num_components > C - 1:
            num_components = C - 1

        mean_total = data.mean(axis=0)
        class_stats = self._class_statistics(data, mapped_labels, C)

        # subtract class means
        for class_idx, (class_mean, _) in class_stats.items():
            data[mapped_labels == class_idx] -= class_mean

        Sw = data.T @ data
        Sb = np.zeros((D, D), dtype=np.float64)
        for class_mean, _ in class_stats.values():
            diff = (class_mean - mean_total).reshape(-1, 1)
            Sb += diff @ diff.T

        try:
            Swi = np.linalg.inv(Sw)
        except np.linalg.LinAlgError as e:
            raise SingularMatrixError(f"Within-class scatter matrix is singular: {e}") from e
        if not np.all(np.isfinite(Swi)):
            raise SingularMatrixError("Within-class scatter matrix is singular.")

        M = Swi @ Sb
        eigenvalues, eigenvectors = self.eigensolver.decompose(M)
        eigenvalues = np.asarray(eigenvalues, dtype=np.float64).reshape(-1)
        eigenvectors = np.asarray(eigenvectors, dtype=np.float64)

        sorted_indices = argsort(eigenvalues, ascending=False)
        eigenvalues = eigenvalues[sorted_indices]
        eigenvectors = sort_matrix_by_column(eigenvectors, sorted_indices)

        self._eigenvalues = eigenvalues[:num_components].copy()
        self._eigenvectors = eigenvectors[:, :num_components].copy()
        return self

    @staticmethod
    def _class_statistics(data: np.ndarray, mapped_labels: np.ndarray, C: int) -> Dict[int, Tuple[np.ndarray, int]]:
        """Mean vector and sample count per class index."""
        stats = {}
        for class_idx in range(C):
            members = data[mapped_labels == class_idx]
            stats[class_idx] = (members.mean(axis=0), len(members))
        return stats

    def _check_computed(self) -> None:
        if self._eigenvectors is None:
            raise NotComputedError("LDA not computed. Call compute() first.")

    def project(self, src: np.ndarray) -> np.ndarray:
        """Project samples into the LDA subspace (no re-centering)."""
        self._check_computed()
        src = np.asarray(src)
        return subspace.project(self._eigenvectors, None, src if self.data_as_row else src.T)

    def reconstruct(self, src: np.ndarray) -> np.ndarray:
        """Reconstruct projections from the LDA subspace."""
        self._check_computed()
        src = np.asarray(src)
        return subspace.reconstruct(self._eigenvectors, None, src if self.data_as_row else src.T)

    @property
    def is_computed(self) -> bool:
        return self._eigenvectors is not None

    @property
    def num_components(self) -> int:
        """Number of discriminants kept by the last compute()."""
        self._check_computed()
        return self._eigenvectors.shape[1]

    @property
    def eigenvectors(self) -> np.ndarray:
        """Basis (D, num_components), read-only."""
        self._check_computed()
        view = self._eigenvectors.view()
        view.flags.writeable = False
        return view

    @property
    def eigenvalues(self) -> np.ndarray:
        """Spectrum (num_components,), read-only."""
        self._check_computed()
        view = self._eigenvalues.view()
        view.flags.writeable = False
        return view
