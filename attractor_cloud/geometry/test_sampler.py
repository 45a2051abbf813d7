"""
Tests for arc-length sampling of path geometry.

Covers point-count conservation, proportional allocation across paths,
stride placement, transforms and degenerate input.
"""

import itertools

import numpy as np
import pytest

from attractor_cloud.geometry import (
    EmptyShapeError,
    PolylinePath,
    path_sample_counts,
    sample_paths,
)


def _line(length, y=0.0):
    return PolylinePath([(0.0, y), (float(length), y)])


def test_single_path_stride():
    """One path of length 10 sampled into 4 points starts at 0 with stride 2.5"""
    points = sample_paths([_line(10.0)], 4)
    
    assert points.shape == (4, 3)
    assert points.dtype == np.float32
    assert np.allclose(points[:, 0], [0.0, 2.5, 5.0, 7.5])
    assert np.allclose(points[:, 1:], 0.0)


@pytest.mark.parametrize("total", [0, 1, 2, 7, 100, 1001, 8192])
def test_mass_conservation(total):
    """Exactly total points for any total and non-degenerate geometry"""
    paths = [_line(1.0), _line(2.5, y=1.0), _line(0.3, y=2.0), _line(7.0, y=3.0)]
    points = sample_paths(paths, total)
    assert points.shape == (total, 3)
    assert sum(path_sample_counts([p.length() for p in paths], total)) == total


def test_proportional_counts_with_rounding():
    """Counts sum to N exactly and stay within one point of the exact share"""
    totals = [7, 10, 33, 100, 257, 1000, 4096]
    ratios = [1.0, 2.0, 3.0, 1.5, 0.1, 7.3]
    
    combos = list(itertools.product(totals, ratios))
    assert len(combos) >= 20
    
    for total, ratio in combos:
        lengths = [1.0, ratio]
        counts = path_sample_counts(lengths, total)
        
        assert counts.sum() == total, (total, ratio, counts)
        exact = total * np.array(lengths) / sum(lengths)
        assert np.all(np.abs(counts - exact) < 1.0), (total, ratio, counts, exact)


def test_equal_paths_odd_total():
    """L1 = L2 = 1 with N = 7 gives 4 + 3"""
    counts = path_sample_counts([1.0, 1.0], 7)
    assert list(counts) == [4, 3]


def test_one_to_two_ratio():
    counts = path_sample_counts([1.0, 2.0], 300)
    assert list(counts) == [100, 200]


def test_many_tiny_paths_are_not_starved():
    """Accumulated fractional shares still emit every point"""
    lengths = [1.0] * 9
    counts = path_sample_counts(lengths, 4)
    assert counts.sum() == 4
    assert counts.max() == 1


def test_zero_count_path_is_skipped():
    """A path whose share rounds to zero contributes no points and no stride"""
    paths = [_line(1000.0), _line(1e-9, y=5.0)]
    points = sample_paths(paths, 10)
    
    assert points.shape == (10, 3)
    assert np.all(np.isfinite(points))
    assert np.allclose(points[:, 1], 0.0)


def test_points_written_in_path_order():
    paths = [_line(1.0, y=0.0), _line(1.0, y=1.0)]
    points = sample_paths(paths, 6)
    assert np.allclose(points[:3, 1], 0.0)
    assert np.allclose(points[3:, 1], 1.0)


def test_transform_applied():
    """A 2x3 affine transform maps sampled points before they are written"""
    scale_translate = [[2.0, 0.0, 1.0],
                       [0.0, 2.0, -1.0]]
    path = PolylinePath([(0.0, 0.0), (4.0, 0.0)], transform=scale_translate)
    points = sample_paths([path], 4)
    
    assert np.allclose(points[:, 0], [1.0, 3.0, 5.0, 7.0])
    assert np.allclose(points[:, 1], -1.0)
    assert np.allclose(points[:, 2], 0.0)


def test_closed_polyline_arc_length_uniform():
    """Samples on a square outline are evenly spaced along the perimeter"""
    square = PolylinePath([(0, 0), (1, 0), (1, 1), (0, 1)], closed=True)
    assert square.length() == pytest.approx(4.0)
    
    points = sample_paths([square], 8)
    expected = [(0, 0), (0.5, 0), (1, 0), (1, 0.5), (1, 1), (0.5, 1), (0, 1), (0, 0.5)]
    assert np.allclose(points[:, :2], expected, atol=1e-6)


def test_zero_total_is_empty():
    points = sample_paths([_line(1.0)], 0)
    assert points.shape == (0, 3)


def test_no_paths_raises():
    with pytest.raises(EmptyShapeError):
        sample_paths([], 10)


def test_zero_length_geometry_raises():
    with pytest.raises(EmptyShapeError):
        sample_paths([PolylinePath([(1.0, 1.0)]), _line(0.0)], 10)


def test_negative_total_raises():
    with pytest.raises(ValueError):
        sample_paths([_line(1.0)], -1)
