"""
Tests for path geometry adapters, including SVG documents.
"""

import numpy as np
import pytest

from attractor_cloud.geometry import PolylinePath, load_svg_paths, parse_svg_paths, sample_paths


SVG = """<?xml version="1.0" encoding="UTF-8"?>
<svg xmlns="http://www.w3.org/2000/svg" width="100" height="100">
  <g>
    <path d="M 0 0 L 10 0" transform="translate(5, 0)"/>
    <path d="M 0 20 L 0 40"/>
    <path d=""/>
    <circle cx="50" cy="50" r="10"/>
  </g>
</svg>
"""


def test_polyline_point_at_length():
    path = PolylinePath([(0, 0), (3, 0), (3, 4)])
    assert path.length() == pytest.approx(7.0)
    assert np.allclose(path.point_at_length(0.0), [0, 0])
    assert np.allclose(path.point_at_length(3.0), [3, 0])
    assert np.allclose(path.point_at_length(5.0), [3, 2])
    assert np.allclose(path.point_at_length(100.0), [3, 4])


def test_single_vertex_polyline_has_zero_length():
    path = PolylinePath([(1, 2)])
    assert path.length() == 0.0
    assert np.allclose(path.points_at_lengths(np.array([0.0, 1.0])), [[1, 2], [1, 2]])


def test_parse_svg_collects_path_elements_only():
    paths = parse_svg_paths(SVG)
    
    assert len(paths) == 2
    assert paths[0].length() == pytest.approx(10.0)
    assert paths[1].length() == pytest.approx(20.0)
    assert paths[0].transform is not None
    assert paths[1].transform is None


def test_svg_transform_and_arc_length_sampling():
    paths = parse_svg_paths(SVG)
    points = sample_paths(paths[:1], 4)
    
    assert np.allclose(points[:, 0], [5.0, 7.5, 10.0, 12.5], atol=1e-5)
    assert np.allclose(points[:, 1], 0.0, atol=1e-5)


def test_svg_proportional_split():
    points = sample_paths(parse_svg_paths(SVG), 30)
    assert points.shape == (30, 3)
    # 10 points on the short path (y = 0), 20 on the long one (x = 0)
    assert np.count_nonzero(np.isclose(points[:, 1], 0.0)) == 10


def test_load_svg_file(tmp_path):
    svg_file = tmp_path / "shape.svg"
    svg_file.write_text(SVG)
    assert len(load_svg_paths(str(svg_file))) == 2


def test_load_missing_svg_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_svg_paths(str(tmp_path / "missing.svg"))
