# SPDX-FileCopyrightText: Copyright (c) 2025 NBEL
# SPDX-License-Identifier: Apache-2.0

from .paths import PathElement, PolylinePath, SvgPathElement, load_svg_paths, parse_svg_paths
from .sampler import EmptyShapeError, path_sample_counts, sample_paths
from .normalize import normalize_points

__all__ = [
    "PathElement",
    "PolylinePath",
    "SvgPathElement",
    "load_svg_paths",
    "parse_svg_paths",
    "EmptyShapeError",
    "path_sample_counts",
    "sample_paths",
    "normalize_points",
]
