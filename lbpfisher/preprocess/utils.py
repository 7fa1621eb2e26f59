"""
Utility functions for preprocessing module.
Configuration loading and sample/matrix conversions shared by the descriptor
and subspace modules.
"""
from pathlib import Path
from typing import List, Sequence, Union
import numpy as np
import cv2

from lbpfisher.errors import ArgumentError


def load_config(config_path: Union[str, Path]) -> dict:
    """Load configuration from YAML file."""
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")
    try:
        import yaml
        with open(config_path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f) or {}
    except ImportError:
        raise ImportError("pyyaml is required. Install with: pip install pyyaml")


def check_single_channel(src: np.ndarray, what: str = "Matrix") -> np.ndarray:
    """
    Make sure a matrix is 2-D and single channel.

    Args:
        src: Input array
        what: Name used in the error message

    Returns:
        The input as a numpy array
    """
    src = np.asarray(src)
    if src.ndim != 2:
        raise ArgumentError(
            f"{what} must be a 2-D single channel matrix, got shape {src.shape}"
        )
    return src


def to_grayscale(src: np.ndarray) -> np.ndarray:
    """
    Min-max normalize a single channel matrix into an 8-bit image.

    Useful to look at eigenvectors or variance maps, which live on
    arbitrary scales.

    Args:
        src: 2-D matrix of any supported numeric type

    Returns:
        uint8 image spanning 0-255
    """
    src = check_single_channel(src, "Grayscale source")
    if src.size == 0:
        return np.zeros(src.shape, dtype=np.uint8)
    if src.dtype not in (np.uint8, np.int8, np.uint16, np.int16,
                         np.int32, np.float32, np.float64):
        src = src.astype(np.float64)
    return cv2.normalize(src, None, 0, 255, cv2.NORM_MINMAX, cv2.CV_8U)


def _flatten_samples(src: Sequence[np.ndarray]) -> List[np.ndarray]:
    samples = [np.asarray(s).reshape(-1) for s in src]
    dims = {s.size for s in samples}
    if len(dims) > 1:
        raise ArgumentError(
            f"All samples must have the same number of elements, got sizes {sorted(dims)}"
        )
    return samples


def as_row_matrix(src: Sequence[np.ndarray],
                  dtype=np.float64,
                  alpha: float = 1.0,
                  beta: float = 0.0) -> np.ndarray:
    """
    Stack samples (images or vectors) as rows of a data matrix.

    Args:
        src: Sequence of arrays with the same number of elements
        dtype: Element type of the result
        alpha: Scale applied to each element
        beta: Offset added after scaling

    Returns:
        Matrix of shape (num_samples, num_elements); empty (0, 0) for no samples
    """
    if len(src) == 0:
        return np.empty((0, 0), dtype=dtype)
    samples = _flatten_samples(src)
    data = np.empty((len(samples), samples[0].size), dtype=dtype)
    for i, sample in enumerate(samples):
        data[i, :] = sample * alpha + beta
    return data


def as_column_matrix(src: Sequence[np.ndarray],
                     dtype=np.float64,
                     alpha: float = 1.0,
                     beta: float = 0.0) -> np.ndarray:
    """
    Stack samples (images or vectors) as columns of a data matrix.

    Returns:
        Matrix of shape (num_elements, num_samples); empty (0, 0) for no samples
    """
    if len(src) == 0:
        return np.empty((0, 0), dtype=dtype)
    samples = _flatten_samples(src)
    data = np.empty((samples[0].size, len(samples)), dtype=dtype)
    for i, sample in enumerate(samples):
        data[:, i] = sample * alpha + beta
    return data
