# SPDX-FileCopyrightText: Copyright (c) 2025 NBEL
# SPDX-License-Identifier: Apache-2.0
#
# Fit a point cloud into the canonical viewing volume

import numpy as np


def normalize_points(points: np.ndarray) -> np.ndarray:
    """
    Recenter a point cloud on its centroid and scale it to unit extent.
    
    x and y are divided by max(bbox width, bbox height); z keeps its
    scale. Degenerate input (all points coincident in XY) is only
    translated.
    
    Args:
        points: Array of shape [N, 3], modified in place
    
    Returns:
        np.ndarray: The same array, for chaining
    """
    if len(points) == 0:
        return points
    
    center = points.mean(axis=0)
    size = points.max(axis=0) - points.min(axis=0)
    axis = max(float(size[0]), float(size[1]))
    
    points -= center.astype(points.dtype)
    if axis > 0.0:
        points[:, 0:2] *= points.dtype.type(1.0 / axis)
    
    return points
