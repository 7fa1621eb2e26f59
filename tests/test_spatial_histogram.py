import numpy as np
import pytest

from lbpfisher.errors import ArgumentError
from lbpfisher.feature_extraction.spatial_histogram import histc, spatial_histogram


def test_histc_counts_each_integer():
    hist = histc(np.array([0, 1, 1, 3, 3, 3]), 0, 3)
    np.testing.assert_array_equal(hist, [1, 2, 0, 3])


def test_histc_counts_top_value():
    hist = histc(np.array([[255, 255], [0, 128]], dtype=np.uint8), 0, 255)

    assert hist.shape == (256,)
    assert hist[255] == 2
    assert hist.sum() == 4


def test_histc_ignores_out_of_range_values():
    hist = histc(np.array([-1, 0, 2, 5]), 0, 2)
    np.testing.assert_array_equal(hist, [1, 0, 1])


def test_histc_normed():
    hist = histc(np.array([1, 1, 2, 2]), 0, 3, normed=True)
    np.testing.assert_allclose(hist, [0.0, 0.5, 0.5, 0.0])


def test_empty_map_gives_zero_vector():
    features = spatial_histogram(np.zeros((0, 0), dtype=np.int32), 59, grid_x=4, grid_y=3)

    assert features.shape == (4 * 3 * 59,)
    assert not features.any()


def test_cells_in_row_major_order():
    src = np.array(
        [
            [0, 0, 1, 1],
            [0, 0, 1, 1],
            [2, 2, 3, 3],
            [2, 2, 3, 3],
        ],
        dtype=np.int32,
    )
    features = spatial_histogram(src, 4, grid_x=2, grid_y=2, normed=False)

    expected = np.zeros((4, 4))
    for cell in range(4):
        expected[cell, cell] = 4
    np.testing.assert_array_equal(features, expected.reshape(-1))


def test_remainder_rows_and_columns_are_dropped():
    src = np.zeros((5, 5), dtype=np.int32)
    src[4, :] = 3
    src[:, 4] = 3
    features = spatial_histogram(src, 4, grid_x=2, grid_y=2, normed=False).reshape(4, 4)

    # 2x2 cells of zeros, the last row and column are not counted
    np.testing.assert_array_equal(features[:, 0], [4, 4, 4, 4])
    assert not features[:, 3].any()


def test_normalized_cells_sum_to_one():
    rng = np.random.default_rng(3)
    src = rng.integers(0, 16, size=(17, 23))
    features = spatial_histogram(src, 16, grid_x=4, grid_y=3, normed=True)

    np.testing.assert_allclose(features.reshape(12, 16).sum(axis=1), 1.0, rtol=1e-6)


def test_unnormalized_cells_sum_to_pixel_count():
    rng = np.random.default_rng(3)
    src = rng.integers(0, 16, size=(17, 23))
    features = spatial_histogram(src, 16, grid_x=4, grid_y=3, normed=False)

    # cells are floor(23/4) x floor(17/3) = 5 x 5
    np.testing.assert_array_equal(features.reshape(12, 16).sum(axis=1), np.full(12, 25))


def test_grid_finer_than_map_gives_zero_cells():
    features = spatial_histogram(np.ones((2, 2), dtype=np.int32), 2, grid_x=4, grid_y=4)

    assert features.shape == (32,)
    assert not features.any()


@pytest.mark.parametrize("num_patterns,grid_x,grid_y", [(0, 8, 8), (256, 0, 8), (256, 8, -1)])
def test_malformed_grid_parameters(num_patterns, grid_x, grid_y):
    with pytest.raises(ArgumentError):
        spatial_histogram(np.zeros((8, 8), dtype=np.uint8), num_patterns, grid_x=grid_x, grid_y=grid_y)


def test_histc_excludes_value_just_above_range():
    hist = histc(np.array([2, 3]), 0, 2)
    np.testing.assert_array_equal(hist, [0, 0, 1])
