"""Shared test configuration and fixtures."""

from __future__ import annotations

import numpy as np
import pytest
from pathlib import Path


# ============================================================================
# Image Fixtures
# ============================================================================


@pytest.fixture
def hand_image() -> np.ndarray:
    """4x4 8-bit image with hand-picked intensities."""
    return np.array(
        [
            [10, 20, 30, 40],
            [50, 60, 70, 80],
            [90, 15, 25, 35],
            [45, 55, 65, 75],
        ],
        dtype=np.uint8,
    )


@pytest.fixture
def column_ramp() -> np.ndarray:
    """8x8 float image whose intensity grows by 10 per column."""
    return np.tile(np.arange(8, dtype=np.float64) * 10.0, (8, 1))


@pytest.fixture
def random_image() -> np.ndarray:
    """Reproducible 32x32 uint8 image."""
    rng = np.random.default_rng(7)
    return rng.integers(0, 101, size=(32, 32)).astype(np.uint8)


# ============================================================================
# Labeled Sample Fixtures
# ============================================================================


@pytest.fixture
def two_clusters():
    """Two classes near (1, 0) and (-1, 0) with axis-aligned spread."""
    X = np.array(
        [
            [1.2, 0.0],
            [0.8, 0.0],
            [1.0, 0.1],
            [1.0, -0.1],
            [-1.2, 0.0],
            [-0.8, 0.0],
            [-1.0, 0.1],
            [-1.0, -0.1],
        ]
    )
    y = np.array([0, 0, 0, 0, 1, 1, 1, 1])
    return X, y


@pytest.fixture
def three_classes():
    """Three gaussian classes in 3-D with non-contiguous labels."""
    rng = np.random.default_rng(42)
    centers = np.array([[0.0, 0.0, 0.0], [4.0, 0.0, 1.0], [0.0, 5.0, -2.0]])
    X = np.vstack([rng.normal(c, 0.5, size=(10, 3)) for c in centers])
    y = np.repeat([3, 7, 11], 10)
    return X, y


# ============================================================================
# Config Fixtures
# ============================================================================


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Write a small config.yaml into a temporary directory."""
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "features:\n"
        "  lbp:\n"
        "    method: original\n"
        "    grid_x: 2\n"
        "    grid_y: 3\n"
        "feature_selection:\n"
        "  method: pca\n"
        "  n_components: 2\n",
        encoding="utf-8",
    )
    return config_path
