# SPDX-FileCopyrightText: Copyright (c) 2025 NBEL
# SPDX-License-Identifier: Apache-2.0
#
# Arc-length-uniform sampling of vector outlines into a fixed-size point cloud

import math
from typing import Sequence

import numpy as np

from .paths import PathElement


# Float noise in the running share error must never create an extra point
_ERROR_EPS = 1e-9


class EmptyShapeError(ValueError):
    """Raised when a geometry has no paths or zero total arc length."""


def path_sample_counts(lengths: Sequence[float], total: int) -> np.ndarray:
    """
    Split total samples across paths in proportion to their arc lengths.
    
    Each path gets floor(total * share). The fractional remainder of every
    path is accumulated in order; whenever the running error turns positive
    the current path takes ceil(error) extra samples and that amount is
    subtracted back out. The counts always sum to exactly total.
    
    Args:
        lengths: Arc length per path, in visitation order
        total: Number of samples to distribute
    
    Returns:
        np.ndarray: Integer sample count per path
    """
    total = int(total)
    if total < 0:
        raise ValueError(f"Sample total must be >= 0, got {total}")
    
    lengths = np.asarray(lengths, dtype=np.float64)
    if len(lengths) == 0:
        raise EmptyShapeError("Shape has no paths")
    length_total = float(lengths.sum())
    if not length_total > 0.0:
        raise EmptyShapeError("Shape has zero total arc length")
    
    counts = np.zeros(len(lengths), dtype=np.int64)
    error = 0.0
    for i, length in enumerate(lengths):
        exact = total * (length / length_total)
        count = math.floor(exact)
        error += exact - count
        
        if error > _ERROR_EPS:
            bump = math.ceil(error - _ERROR_EPS)
            count += bump
            error -= bump
        
        counts[i] = count
    
    # Rounding of the shares can leave the sum off by one; settle it on the
    # longest path so no point is lost or duplicated
    drift = total - int(counts.sum())
    if drift != 0:
        longest = int(np.argmax(lengths))
        counts[longest] = max(0, counts[longest] + drift)
    
    return counts


def sample_paths(paths: Sequence[PathElement], total: int) -> np.ndarray:
    """
    Convert path geometry into exactly `total` 3D points (z = 0).
    
    Within a path, count_i points are placed at arc-length offsets
    j * (L_i / count_i) for j = 0 .. count_i - 1, so the path end itself is
    not sampled. Paths whose count is zero are skipped before any stride
    is computed. Points are written contiguously in path order.
    
    Args:
        paths: Ordered path elements
        total: Number of points to emit
    
    Returns:
        np.ndarray: float32 array of shape [total, 3]
    
    Raises:
        EmptyShapeError: If there are no paths or the total arc length is 0
    
    Example:
        >>> line = PolylinePath([(0, 0), (10, 0)])
        >>> sample_paths([line], 4)[:, 0]
        array([0. , 2.5, 5. , 7.5], dtype=float32)
    """
    total = int(total)
    if total < 0:
        raise ValueError(f"Sample total must be >= 0, got {total}")
    
    points = np.zeros((total, 3), dtype=np.float32)
    if total == 0:
        return points
    
    lengths = [p.length() for p in paths]
    counts = path_sample_counts(lengths, total)
    
    offset = 0
    for path, length, count in zip(paths, lengths, counts):
        count = int(count)
        if count == 0:
            continue
        
        delta = length / count
        xy = path.points_at_lengths(np.arange(count, dtype=np.float64) * delta)
        xy = path.apply_transform(xy)
        
        points[offset:offset + count, 0:2] = xy
        offset += count
    
    return points
