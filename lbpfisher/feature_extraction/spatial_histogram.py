"""
Spatial histogram of LBP descriptor maps.
Partitions a map into a grid and concatenates the per-cell histograms, so
the feature vector keeps the coarse spatial layout of the texture.
"""
import numpy as np

from lbpfisher.errors import ArgumentError
from lbpfisher.preprocess.utils import check_single_channel


def histc(src: np.ndarray, min_val: int = 0, max_val: int = 255, normed: bool = False) -> np.ndarray:
    """
    Histogram with one bin per integer value in [min_val, max_val].

    Values outside the range are not counted. Fractional values fall into
    the bin of their integer part.

    Args:
        src: Array of codes (any shape)
        min_val: Smallest value counted (inclusive)
        max_val: Largest value counted (inclusive)
        normed: Divide the counts by the number of elements in src

    Returns:
        Histogram (float32) of length max_val - min_val + 1
    """
    if max_val < min_val:
        raise ArgumentError(f"Empty histogram range [{min_val}, {max_val}]")
    values = np.asarray(src).ravel()
    # np.histogram closes the last bin on the right, keep max_val + 1 out of it
    in_range = values[(values >= min_val) & (values < max_val + 1)]
    hist, _ = np.histogram(
        in_range,
        bins=max_val - min_val + 1,
        range=(min_val, max_val + 1)
    )
    hist = hist.astype(np.float32)
    if normed and values.size > 0:
        hist = hist / np.float32(values.size)
    return hist


def spatial_histogram(src: np.ndarray,
                      num_patterns: int,
                      grid_x: int = 8,
                      grid_y: int = 8,
                      normed: bool = True) -> np.ndarray:
    """
    Calculate the spatial histogram of a descriptor map.

    Cells have size floor(cols / grid_x) x floor(rows / grid_y) and start at
    the top-left corner; remainder rows and columns are not counted. Cell
    histograms are concatenated in row-major grid order.

    Args:
        src: 2-D descriptor map (LBP codes)
        num_patterns: Number of distinct codes, histograms cover [0, num_patterns-1]
        grid_x: Number of cells along the columns
        grid_y: Number of cells along the rows
        normed: L1 normalize each cell histogram by the cell's pixel count

    Returns:
        Feature vector (float32) of length grid_x * grid_y * num_patterns
    """
    if num_patterns < 1:
        raise ArgumentError(f"num_patterns must be >= 1, got {num_patterns}")
    if grid_x < 1 or grid_y < 1:
        raise ArgumentError(f"Grid must be at least 1x1, got {grid_x}x{grid_y}")

    result = np.zeros((grid_x * grid_y, num_patterns), dtype=np.float32)

    # No data: zero vector of the expected length
    src = np.asarray(src)
    if src.size == 0:
        return result.reshape(-1)

    src = check_single_channel(src, "Descriptor map")
    width = src.shape[1] // grid_x
    height = src.shape[0] // grid_y

    row_idx = 0
    for i in range(grid_y):
        for j in range(grid_x):
            cell = src[i * height:(i + 1) * height, j * width:(j + 1) * width]
            result[row_idx] = histc(cell, 0, num_patterns - 1, normed=normed)
            row_idx += 1

    return result.reshape(-1)
