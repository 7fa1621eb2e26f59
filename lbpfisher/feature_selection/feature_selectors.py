"""
Subspace feature selection methods: PCA, LDA, Fisherfaces.
"""
import numpy as np
from sklearn.decomposition import PCA
from typing import Dict, Optional, Sequence

from lbpfisher.errors import ArgumentError, NotComputedError
from lbpfisher.feature_selection import subspace
from lbpfisher.feature_selection.lda import FisherLDA


class SubspaceSelector:
    """
    Common transform logic for methods that learn a basis and a mean.

    Subclasses set self.eigenvectors (D, K) and self.mean (D,) or None in fit().
    """

    eigenvectors: Optional[np.ndarray] = None
    mean: Optional[np.ndarray] = None

    def _check_fitted(self) -> None:
        if self.eigenvectors is None:
            raise NotComputedError(f"{type(self).__name__} not fitted. Call fit() first.")

    def transform(self, X: np.ndarray) -> np.ndarray:
        """Project features into the learned subspace."""
        self._check_fitted()
        return subspace.project(self.eigenvectors, self.mean, X)

    def inverse_transform(self, Y: np.ndarray) -> np.ndarray:
        """Reconstruct features from subspace coordinates."""
        self._check_fitted()
        return subspace.reconstruct(self.eigenvectors, self.mean, Y)

    def fit_transform(self, X: np.ndarray, y: Optional[np.ndarray] = None) -> np.ndarray:
        """Fit and transform in one step."""
        return self.fit(X, y).transform(X)


class PCASelector(SubspaceSelector):
    """PCA-based feature selection."""

    def __init__(self, n_components: Optional[int] = None, variance_threshold: float = 0.90):
        """
        Initialize PCA selector.

        Args:
            n_components: Number of components (None = auto based on variance_threshold)
            variance_threshold: Cumulative variance threshold (0.90 = 90%)
        """
        self.n_components = n_components
        self.variance_threshold = variance_threshold
        self.pca = None
        self.optimal_n_components = None
        self.eigenvectors = None
        self.eigenvalues = None
        self.mean = None

    def fit(self, X: np.ndarray, y: Optional[np.ndarray] = None) -> 'PCASelector':
        """
        Fit PCA to data.

        Args:
            X: Feature matrix (N, D)
            y: Labels (optional, not used for PCA)
        """
        X = np.asarray(X, dtype=np.float64)

        # If n_components not specified, find optimal based on variance_threshold
        if self.n_components is None:
            # Fit with all components first
            temp_pca = PCA()
            temp_pca.fit(X)

            # Find optimal number of components
            cumulative_variance = np.cumsum(temp_pca.explained_variance_ratio_)
            self.optimal_n_components = int(np.argmax(cumulative_variance >= self.variance_threshold) + 1)

            print(f"  → Optimal components for {self.variance_threshold*100:.0f}% variance: {self.optimal_n_components}")
        else:
            self.optimal_n_components = self.n_components

        # Fit PCA with optimal number of components
        self.pca = PCA(n_components=self.optimal_n_components)
        self.pca.fit(X)

        # Verify variance
        explained_variance = np.sum(self.pca.explained_variance_ratio_)
        print(f"  → Actual explained variance: {explained_variance:.4f} ({explained_variance*100:.2f}%)")

        # eigenvectors by column, like the other subspace methods
        self.eigenvectors = self.pca.components_.T.astype(np.float64)
        self.eigenvalues = self.pca.explained_variance_.astype(np.float64)
        self.mean = self.pca.mean_.astype(np.float64)
        return self

    def get_explained_variance_ratio(self) -> np.ndarray:
        """Get explained variance ratio for each component."""
        if self.pca is None:
            raise NotComputedError("PCA not fitted.")
        return self.pca.explained_variance_ratio_

    def get_cumulative_variance(self) -> np.ndarray:
        """Get cumulative explained variance."""
        return np.cumsum(self.get_explained_variance_ratio())


class LDASelector(SubspaceSelector):
    """Fisher LDA-based feature selection."""

    def __init__(self, n_components: int = 0):
        """
        Initialize LDA selector.

        Args:
            n_components: Number of discriminants (<= 0 = number of classes - 1)
        """
        self.n_components = n_components
        self.lda = None
        self.eigenvectors = None
        self.eigenvalues = None
        self.mean = None

    def fit(self, X: np.ndarray, y: Sequence[int]) -> 'LDASelector':
        """Fit LDA to labeled data."""
        if y is None:
            raise ArgumentError("LDA needs labels.")
        self.lda = FisherLDA(num_components=self.n_components).compute(X, y)
        self.eigenvectors = np.array(self.lda.eigenvectors)
        self.eigenvalues = np.array(self.lda.eigenvalues)
        return self


class FisherfacesSelector(SubspaceSelector):
    """
    Fisherfaces: PCA followed by LDA.

    PCA first reduces the data to N-C dimensions so the within-class scatter
    of the LDA step is not singular, which is the usual situation with
    images or long LBP histograms (far more dimensions than samples).
    """

    def __init__(self, n_components: int = 0):
        """
        Initialize Fisherfaces selector.

        Args:
            n_components: Number of discriminants (<= 0 = number of classes - 1)
        """
        self.n_components = n_components
        self.pca = None
        self.lda = None
        self.eigenvectors = None
        self.eigenvalues = None
        self.mean = None

    def fit(self, X: np.ndarray, y: Sequence[int]) -> 'FisherfacesSelector':
        """Fit PCA and LDA to labeled data."""
        if y is None:
            raise ArgumentError("Fisherfaces needs labels.")
        X = np.asarray(X, dtype=np.float64)
        if X.ndim != 2:
            raise ArgumentError("Only single channel matrices allowed.")
        labels = np.asarray(y).reshape(-1)
        N, D = X.shape
        if len(labels) != N:
            raise ArgumentError(
                f"The number of samples must equal the number of labels "
                f"(got {N} samples and {len(labels)} labels)."
            )
        C = len(np.unique(labels))
        pca_components = min(N - C, D)
        if pca_components < 1:
            raise ArgumentError(f"Fisherfaces needs more samples than classes (got {N} samples, {C} classes).")

        self.pca = PCA(n_components=pca_components)
        self.pca.fit(X)
        pca_basis = self.pca.components_.T.astype(np.float64)
        mean = self.pca.mean_.astype(np.float64)

        self.lda = FisherLDA(num_components=self.n_components)
        self.lda.compute(subspace.project(pca_basis, mean, X), labels)

        self.eigenvectors = pca_basis @ self.lda.eigenvectors
        self.eigenvalues = np.array(self.lda.eigenvalues)
        self.mean = mean
        return self


def create_selector(method: str, **kwargs) -> SubspaceSelector:
    """
    Factory function to create feature selector.

    Args:
        method: Selection method ('pca', 'lda', 'fisherfaces')
        **kwargs: Method-specific parameters

    Returns:
        Feature selector instance
    """
    if method == 'pca':
        return PCASelector(**kwargs)
    elif method == 'lda':
        return LDASelector(**kwargs)
    elif method == 'fisherfaces':
        return FisherfacesSelector(**kwargs)
    else:
        raise ValueError(f"Unknown method: {method}")


def create_selector_from_config(config: Dict) -> SubspaceSelector:
    """
    Build a selector from the 'feature_selection' section of a config.

    Args:
        config: Configuration dictionary (see config/config.yaml)

    Returns:
        Feature selector instance
    """
    selection_config = (config or {}).get('feature_selection', {})
    method = selection_config.get('method', 'lda')
    if method == 'pca':
        # <= 0 means "pick by variance" for PCA, same as leaving it out
        n_components = selection_config.get('n_components')
        if n_components is not None and n_components <= 0:
            n_components = None
        return create_selector(
            'pca',
            n_components=n_components,
            variance_threshold=selection_config.get('variance_threshold', 0.90)
        )
    return create_selector(method, n_components=selection_config.get('n_components', 0))
